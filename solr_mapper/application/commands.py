"""XML bodies for the ``/update`` handler."""
from __future__ import annotations

import xml.etree.ElementTree as ET
from typing import Any, Iterable, Union

from ..domain.query import QueryExpression, format_value
from ..mapping.schema import SchemaRegistry
from .dto import UpdateOptions


def _serialize(root: ET.Element) -> str:
    return ET.tostring(root, encoding="unicode")


def add_command(documents: Iterable[Any], registry: SchemaRegistry) -> str:
    """``<add><doc><field name="X">value</field>...</doc></add>``.

    Members set to ``None`` are left out; collection members emit one
    ``field`` element per item.
    """
    root = ET.Element("add")
    for document in documents:
        doc_el = ET.SubElement(root, "doc")
        for fd in registry.resolve(type(document)):
            value = fd.read(document)
            if value is None:
                continue
            values = value if fd.is_collection else (value,)
            for item in values:
                field_el = ET.SubElement(doc_el, "field", name=fd.wire_name)
                field_el.text = format_value(item)
    return _serialize(root)


def delete_by_id_command(*ids: Any) -> str:
    root = ET.Element("delete")
    for doc_id in ids:
        ET.SubElement(root, "id").text = format_value(doc_id)
    return _serialize(root)


def delete_by_query_command(query: Union[str, QueryExpression]) -> str:
    root = ET.Element("delete")
    ET.SubElement(root, "query").text = str(query)
    return _serialize(root)


def commit_command(options: UpdateOptions = UpdateOptions()) -> str:
    return _serialize(ET.Element("commit", options.to_attributes()))


def optimize_command(options: UpdateOptions = UpdateOptions()) -> str:
    return _serialize(ET.Element("optimize", options.to_attributes()))

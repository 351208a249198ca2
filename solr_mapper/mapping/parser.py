from __future__ import annotations

import xml.etree.ElementTree as ET
from typing import Generic, List, TypeVar, Union

from ..domain.errors import ResponseFormatError, SolrError
from ..domain.models import RawField, RawRecord, ResultSet
from ..infrastructure.logging import get_logger
from .mapper import DocumentMapper

logger = get_logger("solr_mapper.parser")

T = TypeVar("T")


def parse_record(doc_node: ET.Element) -> RawRecord:
    """Flatten a ``doc`` element into an ordered ``RawRecord``."""
    fields: List[RawField] = []
    for node in doc_node:
        name = node.get("name")
        if name is None:
            raise ResponseFormatError(f"<{node.tag}> field node without a 'name' attribute")
        children = tuple((child.tag, child.text or "") for child in node)
        fields.append(RawField(wire_name=name, tag=node.tag, text=node.text or "", children=children))
    return RawRecord(tuple(fields))


class ResultSetParser(Generic[T]):
    """Parse an XML ``response`` envelope into a ``ResultSet``.

    Records are mapped in document order. By default the first record that
    fails to map aborts the parse; with ``skip_invalid_records`` the record is
    logged and left out while ``total_found`` keeps the server's count.
    """

    def __init__(self, mapper: DocumentMapper[T], skip_invalid_records: bool = False) -> None:
        self._mapper = mapper
        self._skip_invalid = skip_invalid_records

    def parse(self, raw_response: Union[str, bytes]) -> ResultSet[T]:
        try:
            root = ET.fromstring(raw_response)
        except ET.ParseError as exc:
            raise ResponseFormatError(f"Response is not well-formed XML: {exc}") from exc
        if root.tag != "response":
            raise ResponseFormatError(f"Expected <response> root, got <{root.tag}>")
        result = root.find("result")
        if result is None:
            raise ResponseFormatError("Response has no <result> node")
        num_found = result.get("numFound")
        if num_found is None:
            raise ResponseFormatError("<result> node has no 'numFound' attribute")
        try:
            total_found = int(num_found)
        except ValueError as exc:
            raise ResponseFormatError(f"Invalid numFound value: {num_found!r}") from exc

        documents: List[T] = []
        for index, doc_node in enumerate(result.findall("doc")):
            record = parse_record(doc_node)
            try:
                documents.append(self._mapper.map(record))
            except SolrError as exc:
                if not self._skip_invalid:
                    raise
                logger.warning("Skipping record %d: %s: %s", index, type(exc).__name__, exc)
        return ResultSet(total_found=total_found, documents=tuple(documents))

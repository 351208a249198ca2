"""
Field schema: the wire-name <-> member mapping of a document type.

Schemas are built once per type by ``SchemaRegistry`` and are read-only
afterwards, so one registry can be shared across threads.
"""
from __future__ import annotations

import collections.abc
import dataclasses
import inspect
from dataclasses import dataclass, field
from decimal import Decimal
from types import MappingProxyType
from typing import Any, ClassVar, Dict, Iterator, Mapping, Optional, Tuple, get_origin, get_type_hints

from ..domain.errors import CollectionTypeNotSupportedError, DocumentTypeError
from ..domain.models import SOLR_FIELD_KEY
from .assembly import CollectionSpec, collection_spec_for
from .coercion import ScalarKind, scalar_kind_for, unwrap_optional
from ..infrastructure.logging import get_logger

logger = get_logger("solr_mapper.schema")

_ZERO_VALUES: Dict[Any, Any] = {
    int: 0,
    float: 0.0,
    Decimal: Decimal(0),
    bool: False,
    str: "",
}


@dataclass(frozen=True)
class FieldDescriptor:
    """How one document member is read from and written to the wire.

    Fields:
        wire_name: Field name on the wire (explicit metadata, else member name).
        member_name: Attribute name on the document.
        declared_type: Annotated type of the member.
        kind: Scalar converter kind; ``None`` for collection members.
        collection: Container shape for collection members, else ``None``.
        explicit: True when the wire name comes from ``solr_field`` metadata.
    """
    wire_name: str
    member_name: str
    declared_type: Any
    kind: Optional[ScalarKind] = None
    collection: Optional[CollectionSpec] = None
    explicit: bool = False

    @property
    def is_collection(self) -> bool:
        return self.collection is not None

    def read(self, document: Any) -> Any:
        return getattr(document, self.member_name, None)

    def write(self, document: Any, value: Any) -> None:
        setattr(document, self.member_name, value)

    def is_default(self, value: Any) -> bool:
        """True for ``None`` and for the zero value of the declared type."""
        if value is None:
            return True
        if self.is_collection:
            return len(value) == 0
        inner, _ = unwrap_optional(self.declared_type)
        if inner in _ZERO_VALUES:
            return value == _ZERO_VALUES[inner]
        return False


@dataclass(frozen=True)
class DocumentSchema:
    document_type: type
    fields: Tuple[FieldDescriptor, ...]
    _by_wire_name: Mapping[str, FieldDescriptor] = field(init=False, repr=False, compare=False)
    _by_member_name: Mapping[str, FieldDescriptor] = field(init=False, repr=False, compare=False)

    def __post_init__(self) -> None:
        by_wire: Dict[str, FieldDescriptor] = {}
        for fd in self.fields:
            if fd.explicit:
                # first declared member wins
                by_wire.setdefault(fd.wire_name, fd)
        by_member = {fd.member_name: fd for fd in self.fields}
        object.__setattr__(self, "_by_wire_name", MappingProxyType(by_wire))
        object.__setattr__(self, "_by_member_name", MappingProxyType(by_member))

    def lookup(self, wire_name: str) -> Optional[FieldDescriptor]:
        """Explicit wire-name metadata first, then exact member name; ``None`` if unmapped."""
        fd = self._by_wire_name.get(wire_name)
        if fd is None:
            fd = self._by_member_name.get(wire_name)
        return fd

    def new_document(self) -> Any:
        return self.document_type()

    def __iter__(self) -> Iterator[FieldDescriptor]:
        return iter(self.fields)


def _is_mapping_or_set(tp: Any) -> bool:
    inner, _ = unwrap_optional(tp)
    base = get_origin(inner) or inner
    return isinstance(base, type) and issubclass(base, (collections.abc.Mapping, collections.abc.Set))


def _describe(name: str, declared_type: Any, wire_name: str, explicit: bool) -> FieldDescriptor:
    if _is_mapping_or_set(declared_type):
        raise CollectionTypeNotSupportedError(declared_type)
    spec = collection_spec_for(declared_type)
    if spec is not None:
        return FieldDescriptor(wire_name, name, declared_type, collection=spec, explicit=explicit)
    if get_origin(unwrap_optional(declared_type)[0]) is not None:
        # parameterized type that is neither a supported container nor a scalar
        raise CollectionTypeNotSupportedError(declared_type)
    kind = scalar_kind_for(declared_type)
    if kind is None:
        raise CollectionTypeNotSupportedError(declared_type)
    return FieldDescriptor(wire_name, name, declared_type, kind=kind, explicit=explicit)


def _check_constructible(doc_type: type) -> None:
    try:
        sig = inspect.signature(doc_type)
    except (TypeError, ValueError):
        return
    required = [
        p.name
        for p in sig.parameters.values()
        if p.default is p.empty and p.kind not in (p.VAR_POSITIONAL, p.VAR_KEYWORD)
    ]
    if required:
        raise DocumentTypeError(
            f"{doc_type.__name__} needs a parameterless constructor; required: {', '.join(required)}"
        )


def build_schema(doc_type: type) -> DocumentSchema:
    """Resolve the field descriptors of ``doc_type`` in declaration order.

    Raises:
        DocumentTypeError: Not a class, a frozen dataclass, unresolvable annotations,
            or no parameterless constructor.
        CollectionTypeNotSupportedError: A member type no converter can produce.
    """
    if not isinstance(doc_type, type):
        raise DocumentTypeError(f"Document type must be a class, got {doc_type!r}")
    if dataclasses.is_dataclass(doc_type) and doc_type.__dataclass_params__.frozen:
        raise DocumentTypeError(f"{doc_type.__name__} is a frozen dataclass; members must be assignable")
    _check_constructible(doc_type)
    try:
        hints = get_type_hints(doc_type)
    except (NameError, TypeError) as exc:
        raise DocumentTypeError(f"Cannot resolve annotations of {doc_type.__name__}: {exc}") from exc

    descriptors = []
    if dataclasses.is_dataclass(doc_type):
        for f in dataclasses.fields(doc_type):
            explicit = SOLR_FIELD_KEY in f.metadata
            wire_name = f.metadata.get(SOLR_FIELD_KEY) or f.name
            descriptors.append(_describe(f.name, hints.get(f.name, Any), wire_name, explicit))
    else:
        for name, tp in hints.items():
            if name.startswith("_") or get_origin(tp) is ClassVar or tp is ClassVar:
                continue
            descriptors.append(_describe(name, tp, name, False))

    logger.debug("Resolved %d fields for %s", len(descriptors), doc_type.__name__)
    return DocumentSchema(doc_type, tuple(descriptors))


class SchemaRegistry:
    """Type-indexed cache of document schemas.

    Registration computes the schema once; lookups afterwards only read.
    """

    def __init__(self) -> None:
        self._schemas: Dict[type, DocumentSchema] = {}

    def register(self, doc_type: type) -> DocumentSchema:
        schema = self._schemas.get(doc_type)
        if schema is None:
            schema = self._schemas.setdefault(doc_type, build_schema(doc_type))
        return schema

    def resolve(self, doc_type: type) -> DocumentSchema:
        """Return the schema of ``doc_type``, registering it on first use."""
        return self.register(doc_type)

    def __contains__(self, doc_type: object) -> bool:
        return doc_type in self._schemas

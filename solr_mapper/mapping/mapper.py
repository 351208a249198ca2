from __future__ import annotations

from typing import Any, Generic, Type, TypeVar

from ..domain.errors import TypeCoercionError, UnmappedFieldError
from ..domain.models import RawRecord
from ..infrastructure.logging import get_logger
from .assembly import assemble
from .coercion import coerce_kind
from .schema import DocumentSchema, FieldDescriptor, SchemaRegistry

logger = get_logger("solr_mapper.mapper")

ARRAY_TAG = "arr"

T = TypeVar("T")


class DocumentMapper(Generic[T]):
    """Populate one document instance from one response record.

    Unmapped wire fields are dropped unless ``strict`` is set, in which case
    they raise ``UnmappedFieldError``. A conversion failure aborts the record;
    fields already written to the new instance are not rolled back.
    """

    def __init__(self, document_type: Type[T], registry: SchemaRegistry, strict: bool = False) -> None:
        self._schema: DocumentSchema = registry.resolve(document_type)
        self._strict = strict

    @property
    def document_type(self) -> Type[T]:
        return self._schema.document_type

    def map(self, record: RawRecord) -> T:
        doc = self._schema.new_document()
        for raw in record:
            fd = self._schema.lookup(raw.wire_name)
            if fd is None:
                if self._strict:
                    raise UnmappedFieldError(raw.wire_name, self.document_type)
                logger.debug("Dropping unmapped field '%s' for %s", raw.wire_name, self.document_type.__name__)
                continue
            fd.write(doc, self._convert(fd, raw.tag, raw.text, raw.children))
        return doc

    @staticmethod
    def _convert(fd: FieldDescriptor, tag: str, text: str, children: Any) -> Any:
        if tag == ARRAY_TAG:
            return assemble(children, fd.declared_type)
        if fd.kind is None:
            raise TypeCoercionError(text, fd.declared_type)
        return coerce_kind(text, fd.kind, fd.declared_type)

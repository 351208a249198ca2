from __future__ import annotations

from typing import Any, Optional, get_origin


class SolrError(RuntimeError):
    """Base class for every error raised by solr_mapper."""


class TypeCoercionError(SolrError):
    """Raised when a wire value cannot be converted to the declared scalar type."""

    def __init__(self, text: str, target: Any, cause: Optional[BaseException] = None) -> None:
        self.text = text
        self.target = target
        self.cause = cause
        super().__init__(f"Cannot convert {text!r} to {_type_name(target)}")


class CollectionTypeNotSupportedError(SolrError):
    """Raised when a declared container type is not a supported collection shape.

    Also wraps element coercion failures that happen while a collection is
    being assembled; ``cause`` then holds the original error.
    """

    def __init__(self, declared_type: Any, cause: Optional[BaseException] = None) -> None:
        self.declared_type = declared_type
        self.cause = cause
        msg = f"Collection type not supported: {_type_name(declared_type)}"
        if cause is not None:
            msg = f"{msg} ({type(cause).__name__}: {cause})"
        super().__init__(msg)


class ResponseFormatError(SolrError):
    """Raised when a response envelope lacks the expected nodes or attributes."""


class UnmappedFieldError(SolrError):
    """Raised in strict mapping mode when a wire field has no document member."""

    def __init__(self, wire_name: str, document_type: type) -> None:
        self.wire_name = wire_name
        self.document_type = document_type
        super().__init__(f"Field '{wire_name}' not found on {document_type.__name__}")


class DocumentTypeError(SolrError):
    """Raised when a class cannot be used as a document type."""


class SolrConnectionError(SolrError):
    """Raised when the transport fails to deliver a request or gets an HTTP error."""

    def __init__(self, message: str, status_code: Optional[int] = None) -> None:
        self.status_code = status_code
        super().__init__(message)


class QueryBuilderError(ValueError):
    """Raised when a query builder call violates its contract (e.g. no range to toggle)."""


def _type_name(tp: Any) -> str:
    if get_origin(tp) is None and isinstance(tp, type):
        return tp.__name__
    return str(tp)

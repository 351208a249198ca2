from __future__ import annotations

import dataclasses
from dataclasses import dataclass
from typing import Any, Generic, Iterator, Optional, Tuple, TypeVar

T = TypeVar("T")

# dataclasses.field metadata key holding a member's explicit wire name
SOLR_FIELD_KEY = "solr_field"


def solr_field(name: Optional[str] = None, **kwargs: Any) -> Any:
    """Declare a dataclass member as a wire field.

    Args:
        name: Wire field name; defaults to the member name when omitted.
        **kwargs: Forwarded to ``dataclasses.field`` (``default``, ``default_factory``...).

    Example:
        @dataclass
        class Book:
            id: str = solr_field("id", default="")
            title: str = solr_field("title_t", default="")
    """
    metadata = dict(kwargs.pop("metadata", None) or {})
    metadata[SOLR_FIELD_KEY] = name or ""
    return dataclasses.field(metadata=metadata, **kwargs)


@dataclass(frozen=True)
class RawField:
    """One typed field node of a response record, before mapping.

    Fields:
        wire_name: Value of the node's ``name`` attribute.
        tag: Wire type tag (``int``, ``str``, ``bool``, ``date``, ``arr``...).
        text: Node text; empty string for empty nodes.
        children: ``(tag, text)`` pairs of the nested values of an ``arr`` node.
    """
    wire_name: str
    tag: str
    text: str = ""
    children: Tuple[Tuple[str, str], ...] = ()


@dataclass(frozen=True)
class RawRecord:
    """Ordered fields of one ``doc`` element."""
    fields: Tuple[RawField, ...] = ()

    def __iter__(self) -> Iterator[RawField]:
        return iter(self.fields)

    def __len__(self) -> int:
        return len(self.fields)


@dataclass(frozen=True)
class ResultSet(Generic[T]):
    """Documents returned by one query.

    Fields:
        total_found: Server-side match count (``numFound``).
        documents: Mapped documents of the returned page; may be shorter than total_found.
    """
    total_found: int
    documents: Tuple[T, ...] = ()

    def __iter__(self) -> Iterator[T]:
        return iter(self.documents)

    def __len__(self) -> int:
        return len(self.documents)

    def __getitem__(self, index: int) -> T:
        return self.documents[index]

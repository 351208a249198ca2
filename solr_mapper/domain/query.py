from __future__ import annotations

import re
from dataclasses import dataclass
from datetime import datetime, timezone
from decimal import Decimal
from enum import Enum
from typing import Any, Iterable, Tuple, Union

SOLR_DATE_FORMAT = "%Y-%m-%dT%H:%M:%SZ"

_RESERVED = re.compile(r'([+\-&|!(){}\[\]^"~*?:\\/\s])')


def format_value(value: Any) -> str:
    """Render a Python value the way Solr expects it in queries and update bodies."""
    if isinstance(value, bool):
        return "true" if value else "false"
    if isinstance(value, datetime):
        if value.tzinfo is not None:
            value = value.astimezone(timezone.utc)
        return value.strftime(SOLR_DATE_FORMAT)
    if isinstance(value, Decimal):
        return format(value, "f")
    if isinstance(value, Enum):
        return str(value.value)
    return str(value)


def escape_query_value(text: str) -> str:
    """Backslash-escape characters reserved by the standard query parser."""
    return _RESERVED.sub(r"\\\1", text)


@dataclass(frozen=True)
class EqualityClause:
    field: str
    value: Any

    def to_query(self) -> str:
        return f"{self.field}:{format_value(self.value)}"


@dataclass(frozen=True)
class RangeClause:
    """``field:[lower TO upper]``; one inclusivity flag covers both bounds."""
    field: str
    lower: Any
    upper: Any
    inclusive: bool = True

    def to_query(self) -> str:
        lower, upper = format_value(self.lower), format_value(self.upper)
        if self.inclusive:
            return f"{self.field}:[{lower} TO {upper}]"
        return f"{self.field}:{{{lower} TO {upper}}}"

    def with_inclusive(self, inclusive: bool) -> "RangeClause":
        return RangeClause(self.field, self.lower, self.upper, inclusive)


@dataclass(frozen=True)
class RawClause:
    """Caller-supplied query text, emitted as is."""
    text: str

    def to_query(self) -> str:
        return self.text


Clause = Union[EqualityClause, RangeClause, RawClause]


@dataclass(frozen=True)
class QueryExpression:
    """Immutable conjunction of clauses, serialized space-joined in insertion order."""
    clauses: Tuple[Clause, ...] = ()

    @classmethod
    def raw(cls, text: str) -> "QueryExpression":
        return cls((RawClause(text),))

    def append(self, clause: Clause) -> "QueryExpression":
        return QueryExpression(self.clauses + (clause,))

    def replace_last(self, clause: Clause) -> "QueryExpression":
        if not self.clauses:
            raise IndexError("expression has no clauses")
        return QueryExpression(self.clauses[:-1] + (clause,))

    def to_query(self) -> str:
        return " ".join(c.to_query() for c in self.clauses)

    def __str__(self) -> str:
        return self.to_query()

    def __bool__(self) -> bool:
        return bool(self.clauses)


class Order(str, Enum):
    ASC = "asc"
    DESC = "desc"


@dataclass(frozen=True)
class SortOrder:
    field: str
    order: Order = Order.ASC

    def to_param(self) -> str:
        return f"{self.field} {self.order.value}"

    @classmethod
    def parse(cls, text: str) -> "SortOrder":
        """Parse ``"field"`` or ``"field asc|desc"``."""
        parts = text.split()
        if len(parts) == 1:
            return cls(parts[0])
        if len(parts) == 2:
            try:
                return cls(parts[0], Order(parts[1].lower()))
            except ValueError:
                pass
        raise ValueError(f"Invalid sort order: {text!r}")


@dataclass(frozen=True)
class SortSpec:
    """Ordered sort keys, serialized as ``"f1 asc,f2 desc"``."""
    orders: Tuple[SortOrder, ...] = ()

    @classmethod
    def of(cls, orders: Iterable[SortOrder]) -> "SortSpec":
        return cls(tuple(orders))

    @classmethod
    def parse(cls, text: str) -> "SortSpec":
        return cls(tuple(SortOrder.parse(part) for part in text.split(",") if part.strip()))

    def then(self, field: str, order: Order = Order.ASC) -> "SortSpec":
        return SortSpec(self.orders + (SortOrder(field, order),))

    def to_param(self) -> str:
        return ",".join(o.to_param() for o in self.orders)

    def __str__(self) -> str:
        return self.to_param()

    def __bool__(self) -> bool:
        return bool(self.orders)

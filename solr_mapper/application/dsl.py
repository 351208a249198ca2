"""
Fluent query builder.

Every call returns a new builder; a builder can be reused or shared without
affecting the queries derived from it::

    client.query(Book).by("author").is_("tolkien").by_range("year", 1937, 1955).order_by("year").run()
"""
from __future__ import annotations

import dataclasses
from typing import Any, Callable, Generic, Optional, Type, TypeVar

from ..domain.errors import QueryBuilderError
from ..domain.models import ResultSet
from ..domain.query import (
    EqualityClause,
    Order,
    QueryExpression,
    RangeClause,
    RawClause,
    escape_query_value,
    format_value,
)
from ..mapping.schema import SchemaRegistry
from .dto import QueryRequest

T = TypeVar("T")

Executor = Callable[[QueryRequest], ResultSet]


class QueryBuilder(Generic[T]):
    def __init__(
        self,
        document_type: Type[T],
        registry: SchemaRegistry,
        executor: Executor,
        request: Optional[QueryRequest] = None,
    ) -> None:
        self._document_type = document_type
        self._registry = registry
        self._executor = executor
        self._request = request or QueryRequest(QueryExpression())

    def _derive(self, cls: type, **changes: Any) -> Any:
        request = dataclasses.replace(self._request, **changes)
        return cls(self._document_type, self._registry, self._executor, request)

    def _with_clause(self, clause: Any, cls: Optional[type] = None) -> Any:
        return self._derive(cls or QueryBuilder, query=self._request.query.append(clause))

    def by(self, field: str) -> "FieldQuery[T]":
        return FieldQuery(self, field)

    def by_range(self, field: str, lower: Any, upper: Any) -> "RangeQueryBuilder[T]":
        """Inclusive range clause; toggle with ``exclusive()``/``inclusive()``."""
        return self._with_clause(RangeClause(field, lower, upper), RangeQueryBuilder)

    def by_example(self, document: Any) -> "QueryBuilder[T]":
        """One equality clause per member holding a non-default value, in declaration order.

        Collection members are not emitted.
        """
        query = self._request.query
        for fd in self._registry.resolve(type(document)):
            if fd.is_collection:
                continue
            value = fd.read(document)
            if fd.is_default(value):
                continue
            query = query.append(EqualityClause(fd.wire_name, value))
        return self._derive(QueryBuilder, query=query)

    def where(self, query: str) -> "QueryBuilder[T]":
        """Append caller-written query text verbatim."""
        return self._with_clause(RawClause(query))

    def order_by(self, field: str, order: Order = Order.ASC) -> "QueryBuilder[T]":
        return self._derive(QueryBuilder, sort=self._request.sort.then(field, order))

    def paginate(self, start: Optional[int] = None, rows: Optional[int] = None) -> "QueryBuilder[T]":
        return self._derive(QueryBuilder, start=start, rows=rows)

    def build(self) -> QueryRequest:
        return self._request

    def to_query(self) -> str:
        return self._request.query.to_query()

    def run(self) -> ResultSet[T]:
        return self._executor(self._request)


class RangeQueryBuilder(QueryBuilder[T]):
    """Builder whose last clause is a range; adds the inclusivity toggles."""

    def _toggle(self, inclusive: bool) -> "RangeQueryBuilder[T]":
        clauses = self._request.query.clauses
        if not clauses or not isinstance(clauses[-1], RangeClause):
            raise QueryBuilderError("No range clause to toggle")
        query = self._request.query.replace_last(clauses[-1].with_inclusive(inclusive))
        return self._derive(RangeQueryBuilder, query=query)

    def inclusive(self) -> "RangeQueryBuilder[T]":
        return self._toggle(True)

    def exclusive(self) -> "RangeQueryBuilder[T]":
        return self._toggle(False)


class FieldQuery(Generic[T]):
    """``by(field)`` state: waits for ``is_`` or ``between``."""

    def __init__(self, builder: QueryBuilder[T], field: str) -> None:
        self._builder = builder
        self._field = field

    def is_(self, value: Any, escape: bool = False) -> QueryBuilder[T]:
        if escape:
            value = escape_query_value(format_value(value))
        return self._builder._with_clause(EqualityClause(self._field, value))

    def between(self, lower: Any) -> "RangeBound[T]":
        return RangeBound(self._builder, self._field, lower)


class RangeBound(Generic[T]):
    """``between(lower)`` state: waits for the upper bound."""

    def __init__(self, builder: QueryBuilder[T], field: str, lower: Any) -> None:
        self._builder = builder
        self._field = field
        self._lower = lower

    def and_(self, upper: Any) -> RangeQueryBuilder[T]:
        return self._builder._with_clause(RangeClause(self._field, self._lower, upper), RangeQueryBuilder)

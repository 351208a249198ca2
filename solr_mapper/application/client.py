from __future__ import annotations

from typing import Any, Optional, Sequence, Type, TypeVar, Union

from ..domain.interfaces import SolrConnection
from ..domain.models import ResultSet
from ..domain.query import QueryExpression, SortOrder, SortSpec
from ..mapping.mapper import DocumentMapper
from ..mapping.parser import ResultSetParser
from ..mapping.schema import DocumentSchema, SchemaRegistry
from .dsl import QueryBuilder
from .dto import QueryRequest, UpdateOptions
from .use_cases.query_documents import QueryDocumentsUseCase
from .use_cases.update_index import UpdateIndexUseCase

T = TypeVar("T")


class SolrClient:
    """Entry point: owns the transport and the schema registry.

    Args:
        connection: Transport used for every request.
        registry: Schema cache; a private one is created when omitted.
        strict: Raise on response fields that have no document member.
        skip_invalid_records: Leave out records that fail to map instead of failing the parse.
    """

    def __init__(
        self,
        connection: SolrConnection,
        registry: Optional[SchemaRegistry] = None,
        strict: bool = False,
        skip_invalid_records: bool = False,
    ) -> None:
        self._conn = connection
        self._registry = registry or SchemaRegistry()
        self._strict = strict
        self._skip_invalid = skip_invalid_records
        self._updates = UpdateIndexUseCase(connection, self._registry)

    @property
    def registry(self) -> SchemaRegistry:
        return self._registry

    def register(self, document_type: type) -> DocumentSchema:
        """Resolve and cache the schema of ``document_type`` ahead of use."""
        return self._registry.register(document_type)

    def _use_case(self, document_type: Type[T]) -> QueryDocumentsUseCase[T]:
        mapper = DocumentMapper(document_type, self._registry, strict=self._strict)
        parser = ResultSetParser(mapper, skip_invalid_records=self._skip_invalid)
        return QueryDocumentsUseCase(self._conn, parser)

    def query(self, document_type: Type[T]) -> QueryBuilder[T]:
        return QueryBuilder(document_type, self._registry, self._use_case(document_type).execute)

    def search(
        self,
        document_type: Type[T],
        query: Union[str, QueryExpression],
        sort: Union[None, SortOrder, Sequence[SortOrder], SortSpec] = None,
        start: Optional[int] = None,
        rows: Optional[int] = None,
    ) -> ResultSet[T]:
        """Run a pre-built query string or expression."""
        if isinstance(query, str):
            query = QueryExpression.raw(query)
        req = QueryRequest(query=query, sort=_as_sort_spec(sort), start=start, rows=rows)
        return self._use_case(document_type).execute(req)

    def add(self, *documents: Any) -> str:
        return self._updates.add(documents)

    def delete_by_id(self, *ids: Any) -> str:
        return self._updates.delete_by_id(*ids)

    def delete_by_query(self, query: Union[str, QueryExpression]) -> str:
        return self._updates.delete_by_query(query)

    def commit(self, wait_flush: Optional[bool] = None, wait_searcher: Optional[bool] = None) -> str:
        return self._updates.commit(UpdateOptions(wait_flush, wait_searcher))

    def optimize(self, wait_flush: Optional[bool] = None, wait_searcher: Optional[bool] = None) -> str:
        return self._updates.optimize(UpdateOptions(wait_flush, wait_searcher))


def _as_sort_spec(sort: Union[None, SortOrder, Sequence[SortOrder], SortSpec]) -> SortSpec:
    if sort is None:
        return SortSpec()
    if isinstance(sort, SortSpec):
        return sort
    if isinstance(sort, SortOrder):
        return SortSpec((sort,))
    return SortSpec.of(sort)

from __future__ import annotations

from typing import Generic, TypeVar

from ..dto import QueryRequest
from ...domain.interfaces import SolrConnection
from ...domain.models import ResultSet
from ...infrastructure.logging import get_logger
from ...mapping.parser import ResultSetParser

logger = get_logger("solr_mapper.query")

SELECT_PATH = "/select"

T = TypeVar("T")


class QueryDocumentsUseCase(Generic[T]):
    """Use-case: send a frozen query request to /select and parse the typed results."""

    def __init__(self, connection: SolrConnection, parser: ResultSetParser[T]) -> None:
        self._conn = connection
        self._parser = parser

    def execute(self, req: QueryRequest) -> ResultSet[T]:
        params = req.to_params()
        logger.debug("GET %s %s", SELECT_PATH, params)
        raw = self._conn.get(SELECT_PATH, params)
        return self._parser.parse(raw)

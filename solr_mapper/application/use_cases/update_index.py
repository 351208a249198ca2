from __future__ import annotations

from typing import Any, Iterable, Union

from ..commands import (
    add_command,
    commit_command,
    delete_by_id_command,
    delete_by_query_command,
    optimize_command,
)
from ..dto import UpdateOptions
from ...domain.interfaces import SolrConnection
from ...domain.query import QueryExpression
from ...infrastructure.logging import get_logger
from ...mapping.schema import SchemaRegistry

logger = get_logger("solr_mapper.update")

UPDATE_PATH = "/update"


class UpdateIndexUseCase:
    """Use-case: serialize update commands and POST them to /update."""

    def __init__(self, connection: SolrConnection, registry: SchemaRegistry) -> None:
        self._conn = connection
        self._registry = registry

    def _post(self, body: str) -> str:
        logger.debug("POST %s %s", UPDATE_PATH, body)
        return self._conn.post(UPDATE_PATH, body)

    def add(self, documents: Iterable[Any]) -> str:
        return self._post(add_command(documents, self._registry))

    def delete_by_id(self, *ids: Any) -> str:
        return self._post(delete_by_id_command(*ids))

    def delete_by_query(self, query: Union[str, QueryExpression]) -> str:
        return self._post(delete_by_query_command(query))

    def commit(self, options: UpdateOptions = UpdateOptions()) -> str:
        return self._post(commit_command(options))

    def optimize(self, options: UpdateOptions = UpdateOptions()) -> str:
        return self._post(optimize_command(options))

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import Mapping


class SolrConnection(ABC):
    """Port for the transport to a Solr core (e.g., HTTP)."""

    @abstractmethod
    def post(self, path: str, body: str) -> str:
        """POST an XML command body to ``path`` and return the raw response text.

        Raises:
            SolrConnectionError: Transport/HTTP failures should surface; the caller decides.
        """
        raise NotImplementedError

    @abstractmethod
    def get(self, path: str, params: Mapping[str, str]) -> str:
        """GET ``path`` with ordered query parameters and return the raw response text."""
        raise NotImplementedError

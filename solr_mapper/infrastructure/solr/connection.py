from __future__ import annotations

from typing import Mapping, Optional

import requests

from ...domain.errors import SolrConnectionError
from ...domain.interfaces import SolrConnection
from ..config import http_timeout_seconds, solr_url
from ..logging import get_logger

logger = get_logger("solr_mapper.connection")

XML_CONTENT_TYPE = "text/xml; charset=utf-8"


class HttpSolrConnection(SolrConnection):
    """Connection adapter for a Solr core over HTTP."""

    def __init__(
        self,
        base_url: Optional[str] = None,
        timeout: Optional[float] = None,
        session: Optional[requests.Session] = None,
    ) -> None:
        self._base = (base_url or solr_url()).rstrip("/")
        self._timeout = timeout if timeout is not None else http_timeout_seconds()
        self._session = session or requests.Session()

    @property
    def base_url(self) -> str:
        return self._base

    def _url(self, path: str) -> str:
        return f"{self._base}/{path.lstrip('/')}"

    def post(self, path: str, body: str) -> str:
        url = self._url(path)
        logger.debug("POST %s (%d bytes)", url, len(body))
        try:
            r = self._session.post(
                url,
                data=body.encode("utf-8"),
                headers={"Content-Type": XML_CONTENT_TYPE},
                timeout=self._timeout,
            )
            r.raise_for_status()
        except requests.HTTPError as exc:
            raise SolrConnectionError(f"POST {url} failed: {exc}", _status(exc)) from exc
        except requests.RequestException as exc:
            raise SolrConnectionError(f"POST {url} failed: {exc}") from exc
        return r.text

    def get(self, path: str, params: Mapping[str, str]) -> str:
        url = self._url(path)
        logger.debug("GET %s %s", url, dict(params))
        try:
            r = self._session.get(url, params=list(params.items()), timeout=self._timeout)
            r.raise_for_status()
        except requests.HTTPError as exc:
            raise SolrConnectionError(f"GET {url} failed: {exc}", _status(exc)) from exc
        except requests.RequestException as exc:
            raise SolrConnectionError(f"GET {url} failed: {exc}") from exc
        return r.text

    def close(self) -> None:
        self._session.close()


def _status(exc: requests.HTTPError) -> Optional[int]:
    return exc.response.status_code if exc.response is not None else None

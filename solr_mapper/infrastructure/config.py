from __future__ import annotations

import os

DEFAULT_SOLR_URL = "http://localhost:8983/solr"


def env_str(name: str, default: str) -> str:
    return os.getenv(name, default).strip() or default


def solr_url() -> str:
    return env_str("SOLR_URL", DEFAULT_SOLR_URL).rstrip("/")


def http_timeout_seconds() -> float:
    """
    Per-request timeout for the HTTP transport.
    Defaults to 15 seconds when SOLR_HTTP_TIMEOUT is not set or invalid.
    """
    try:
        value = float(env_str("SOLR_HTTP_TIMEOUT", "15"))
    except ValueError:
        return 15.0
    return value if value > 0 else 15.0

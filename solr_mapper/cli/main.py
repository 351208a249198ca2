from __future__ import annotations

import contextlib
import dataclasses
import importlib
import json
import os
import sys
from pathlib import Path
from typing import Any, Dict, Optional, Sequence

from ..application.client import SolrClient
from ..domain.query import SortSpec
from ..infrastructure.config import DEFAULT_SOLR_URL
from ..infrastructure.logging import get_logger
from ..infrastructure.solr.connection import HttpSolrConnection
from .parsers import build_parser

logger = get_logger("solr_mapper.cli")


def _parse_dotenv(dotenv_path: Path) -> Dict[str, str]:
    """Parse a simple .env file (KEY=VALUE per line, '#' comments, quotes stripped)."""
    env: Dict[str, str] = {}
    if dotenv_path.exists():
        with contextlib.suppress(OSError):
            for raw in dotenv_path.read_text(encoding="utf-8", errors="ignore").splitlines():
                s = raw.strip()
                if not s or s.startswith("#") or "=" not in s:
                    continue
                k, v = s.split("=", 1)
                k = k.strip()
                v = v.strip().strip('"').strip("'")
                if k:
                    env[k] = v
    return env


def _env_get(key: str) -> Optional[str]:
    """Get environment value from process env, falling back to .env in CWD."""
    v = os.getenv(key)
    if v is not None and v.strip():
        return v.strip()
    local = _parse_dotenv(Path(".env"))
    v2 = local.get(key)
    return v2.strip() if v2 is not None and v2.strip() else None


def _resolve_url(explicit: Optional[str]) -> str:
    """Resolve the Solr URL from --url, then SOLR_URL in env/.env, then the default."""
    if explicit and explicit.strip():
        return explicit.strip().rstrip("/")
    return (_env_get("SOLR_URL") or DEFAULT_SOLR_URL).rstrip("/")


def _positive_or_none(value: Optional[float], source: str) -> Optional[float]:
    if value is not None and value <= 0:
        logger.warning("Ignoring non-positive timeout %s from %s", value, source)
        return None
    return value


def _resolve_timeout(explicit: Optional[float]) -> Optional[float]:
    """Resolve the HTTP timeout from --timeout, then SOLR_HTTP_TIMEOUT in env/.env.

    Missing, unparsable or non-positive values give ``None`` so the
    connection uses its configured default.
    """
    if explicit is not None:
        return _positive_or_none(explicit, "--timeout")
    raw = _env_get("SOLR_HTTP_TIMEOUT")
    try:
        return _positive_or_none(float(raw), "SOLR_HTTP_TIMEOUT") if raw else None
    except ValueError:
        return None


def _load_document_type(spec: str) -> type:
    """Import a class given as 'package.module:ClassName'."""
    module_name, sep, attr = spec.partition(":")
    if not sep or not module_name or not attr:
        raise ValueError(f"Document type must look like 'package.module:ClassName', got {spec!r}")
    module = importlib.import_module(module_name)
    obj: Any = module
    for part in attr.split("."):
        obj = getattr(obj, part)
    if not isinstance(obj, type):
        raise ValueError(f"{spec} is not a class")
    return obj


def _serialize_document(document: Any) -> Dict[str, Any]:
    """Convert a mapped document into a JSON-serializable mapping."""
    if dataclasses.is_dataclass(document):
        return dataclasses.asdict(document)
    return {k: v for k, v in vars(document).items() if not k.startswith("_")}


def run(argv: Optional[Sequence[str]] = None) -> int:
    ap = build_parser()
    ns = ap.parse_args(list(argv or []))

    try:
        conn = HttpSolrConnection(_resolve_url(ns.url), _resolve_timeout(ns.timeout))
        return dispatch_commands(ns, conn)
    except Exception as ex:  # keep CLI concise and user-friendly
        print(json.dumps({"status": "error", "error": f"{type(ex).__name__}: {ex}"}))
        return 3


def dispatch_commands(ns, conn):
    """
    Dispatches CLI commands to the client.

    Commands:
    - query: run a query string and print mapped documents
    - delete: delete by id(s) or by query
    - commit / optimize: send the command with optional wait flags
    """
    if ns.cmd == "query":
        return query_documents(ns, conn)
    if ns.cmd == "delete":
        return delete_documents(ns, conn)
    if ns.cmd in ("commit", "optimize"):
        return send_update(ns, conn)

    print(json.dumps({"status": "error", "error": f"Unknown command: {ns.cmd}"}))
    return 2


def query_documents(ns, conn) -> int:
    doc_type = _load_document_type(ns.doc_type)
    client = SolrClient(conn, strict=bool(getattr(ns, "strict", False)))
    sort = SortSpec.parse(ns.sort) if ns.sort else None
    results = client.search(doc_type, ns.q, sort=sort, start=ns.start, rows=ns.rows)
    out = {
        "status": "ok",
        "total_found": results.total_found,
        "documents": [_serialize_document(d) for d in results],
    }
    print(json.dumps(out, indent=2, default=str))
    return 0


def delete_documents(ns, conn) -> int:
    client = SolrClient(conn)
    if ns.ids:
        raw = client.delete_by_id(*ns.ids)
    else:
        raw = client.delete_by_query(ns.query)
    print(json.dumps({"status": "ok", "response": raw}))
    return 0


def send_update(ns, conn) -> int:
    client = SolrClient(conn)
    command = client.commit if ns.cmd == "commit" else client.optimize
    raw = command(wait_flush=ns.wait_flush, wait_searcher=ns.wait_searcher)
    print(json.dumps({"status": "ok", "response": raw}))
    return 0


def main() -> int:
    return run(sys.argv[1:])


if __name__ == "__main__":
    raise SystemExit(main())

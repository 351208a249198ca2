from __future__ import annotations

import argparse


def build_parser() -> argparse.ArgumentParser:
    ap = argparse.ArgumentParser(description="Solr document mapper (typed queries and updates)")
    ap.add_argument("--url", default=None, help="Solr core URL; defaults to $SOLR_URL")
    ap.add_argument("--timeout", type=float, default=None, help="HTTP timeout in seconds; defaults to $SOLR_HTTP_TIMEOUT")
    sub = ap.add_subparsers(dest="cmd", required=False)

    # Query and map results into a document class
    q = sub.add_parser("query")
    q.add_argument("--type", dest="doc_type", required=True, help="Document class as 'package.module:ClassName'")
    q.add_argument("--q", required=True, help="Query string, sent verbatim")
    q.add_argument("--sort", default=None, help="Sort spec, e.g. 'id asc,name desc'")
    q.add_argument("--start", type=int, default=None)
    q.add_argument("--rows", type=int, default=None)
    q.add_argument("--strict", action="store_true", help="Fail on response fields missing from the class")

    d = sub.add_parser("delete")
    target = d.add_mutually_exclusive_group(required=True)
    target.add_argument("--id", action="append", dest="ids", help="Document id; can repeat")
    target.add_argument("--query", help="Delete every document matching this query")

    add_update_subparser(sub, "commit")
    add_update_subparser(sub, "optimize")

    return ap


def add_update_subparser(sub, name):
    """
    Adds a commit or optimize subparser; both take the same optional flags.

    Args:
        sub: The subparsers object from argparse.
        name: The subcommand name.

    Returns:
        argparse.ArgumentParser: The configured subparser.
    """
    result = sub.add_parser(name)
    result.add_argument("--wait-flush", action="store_true", default=None)
    result.add_argument("--wait-searcher", action="store_true", default=None)
    return result

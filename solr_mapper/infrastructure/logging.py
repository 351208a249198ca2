from __future__ import annotations

import logging
import os

ROOT_LOGGER = "solr_mapper"

_configured = False


def get_logger(name: str) -> logging.Logger:
    """Return a logger under the ``solr_mapper`` namespace.

    The first call applies SOLR_LOG_LEVEL to the package logger and, when the
    host application has not set up logging yet, installs a basic stderr handler.
    """
    global _configured
    if name != ROOT_LOGGER and not name.startswith(ROOT_LOGGER + "."):
        name = f"{ROOT_LOGGER}.{name}"
    if not _configured:
        level = getattr(logging, os.getenv("SOLR_LOG_LEVEL", "INFO").upper(), logging.INFO)
        logging.getLogger(ROOT_LOGGER).setLevel(level)
        if not logging.getLogger().handlers:
            logging.basicConfig(format="%(levelname)s | %(name)s | %(message)s")
        _configured = True
    return logging.getLogger(name)

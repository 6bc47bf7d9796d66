"""Logging bootstrap for the reportlink CLI."""
from __future__ import annotations

import logging
import os
from logging.handlers import RotatingFileHandler

_CONFIGURED = False


def _parse_level(raw: str | None) -> int:
    normalized = str(raw or "WARNING").strip().upper()
    level = getattr(logging, normalized, None)
    return level if isinstance(level, int) else logging.WARNING


def configure(level: str | None = None) -> int:
    """Attach stderr (and optional file) handlers to the reportlink logger.

    Idempotent: repeated calls only adjust the level.
    """
    global _CONFIGURED
    resolved = _parse_level(level or os.environ.get("REPORTLINK_LOG_LEVEL"))
    logger = logging.getLogger("reportlink")
    logger.setLevel(resolved)
    if _CONFIGURED:
        return resolved

    logger.propagate = False
    handler = logging.StreamHandler()
    handler.setFormatter(logging.Formatter("[%(name)s] %(levelname)s %(message)s"))
    logger.addHandler(handler)

    file_path = os.environ.get("REPORTLINK_LOG_FILE")
    if file_path:
        file_handler = RotatingFileHandler(
            file_path, maxBytes=5 * 1024 * 1024, backupCount=3, encoding="utf-8",
        )
        file_handler.setFormatter(logging.Formatter(
            "%(asctime)s %(levelname)s %(name)s %(message)s",
            datefmt="%Y-%m-%dT%H:%M:%S",
        ))
        logger.addHandler(file_handler)

    logging.captureWarnings(True)
    _CONFIGURED = True
    return resolved

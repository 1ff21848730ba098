"""Logging setup for BeadForge.

Everything logs under the ``beadforge`` namespace.  Editor and converter
records may carry structured context (the edit label, the number of cells
touched, the failing conversion stage) via ``extra=``; the JSON formatter
emits those fields, the text formats ignore them.
"""

from __future__ import annotations

import json
import logging
import sys
import threading
from datetime import datetime, timezone
from pathlib import Path
from typing import Any

LOGGER_NAME = "beadforge"
DEFAULT_FORMAT = "%(levelname)-5s | %(name)-18s | %(message)s"
VERBOSE_FORMAT = "%(asctime)s | %(levelname)-5s | %(name)-18s | %(message)s"

# Record attributes copied into JSON output when a caller sets them.
CONTEXT_FIELDS = ("edit", "cells", "stage", "tool", "palette")

_SETUP_LOCK = threading.Lock()


class JsonFormatter(logging.Formatter):
    """One JSON object per line, including any bead-editing context."""

    def format(self, record: logging.LogRecord) -> str:
        payload: dict[str, Any] = {
            "timestamp": datetime.fromtimestamp(record.created, tz=timezone.utc).isoformat(),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
        }
        for field in CONTEXT_FIELDS:
            value = getattr(record, field, None)
            if value is not None:
                payload[field] = value
        if record.exc_info:
            payload["exception"] = self.formatException(record.exc_info)
        return json.dumps(payload, ensure_ascii=False)


def _make_formatter(json_logs: bool, fmt: str) -> logging.Formatter:
    return JsonFormatter() if json_logs else logging.Formatter(fmt)


def _stderr_handler(logger: logging.Logger) -> logging.Handler:
    # Reuse one handler bound to the current stderr; drop duplicates.
    current = [
        h
        for h in logger.handlers
        if type(h) is logging.StreamHandler and h.stream is sys.stderr
    ]
    for duplicate in current[1:]:
        logger.removeHandler(duplicate)
    if current:
        return current[0]
    handler = logging.StreamHandler(sys.stderr)
    logger.addHandler(handler)
    return handler


def _file_handler(logger: logging.Logger, log_file: str | Path) -> logging.Handler:
    target = Path(log_file).resolve()
    for handler in logger.handlers:
        if isinstance(handler, logging.FileHandler) and Path(handler.baseFilename) == target:
            return handler
    target.parent.mkdir(parents=True, exist_ok=True)
    handler = logging.FileHandler(target, encoding="utf-8")
    logger.addHandler(handler)
    return handler


def setup_logging(
    level: int = logging.INFO,
    verbose: bool = False,
    log_file: str | Path | None = None,
    json_logs: bool = False,
) -> logging.Logger:
    """Configure the ``beadforge`` logger and return it.

    Safe to call repeatedly: handlers are reused, never stacked.

    Args:
        level: Logging level (default: INFO).
        verbose: Include timestamps in stderr output.
        log_file: Also append records to this file (parent directories are
            created).  File output always carries timestamps.
        json_logs: Emit JSON lines instead of text on every handler.
    """
    with _SETUP_LOCK:
        logger = logging.getLogger(LOGGER_NAME)
        logger.setLevel(level)

        stream_format = VERBOSE_FORMAT if verbose else DEFAULT_FORMAT
        _stderr_handler(logger).setFormatter(_make_formatter(json_logs, stream_format))

        if log_file:
            _file_handler(logger, log_file).setFormatter(
                _make_formatter(json_logs, VERBOSE_FORMAT)
            )
        return logger


def get_logger(name: str) -> logging.Logger:
    """Logger for a BeadForge module, e.g. ``get_logger("editor")``."""
    return logging.getLogger(f"{LOGGER_NAME}.{name}")

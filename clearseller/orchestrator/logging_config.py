"""
ClearSeller Structured Logging Configuration
============================================

Configures logging for the CLI and batch scans with support for:
- JSON lines carrying scoring context (score, potential, source, ...)
- Human-readable lines with the same context appended as key=value pairs
- File rotation
- A separate level for the per-product engine logger, which is chatty on
  large scans

Usage:
    from clearseller.orchestrator.logging_config import setup_logging

    setup_logging(json_output=True, log_file="logs/scan.log")
"""

import json
import logging
import logging.handlers
import os
import sys
from datetime import datetime, timezone
from typing import Any, Dict, Optional

# `extra=` attributes: analyze() sets score, potential, title and source;
# scan() sets count; the normalizer sets source for unknown marketplaces
CONTEXT_FIELDS = ("source", "score", "potential", "title", "count")

ENGINE_LOGGER = "clearseller.scoring.product_scorer"

TEXT_FORMAT = "%(asctime)s [%(levelname)-8s] %(name)-34s | %(message)s"
TEXT_DATEFMT = "%Y-%m-%d %H:%M:%S"


def record_context(record: logging.LogRecord) -> Dict[str, Any]:
    """Scoring context attached to a record, in CONTEXT_FIELDS order."""
    context = {}
    for key in CONTEXT_FIELDS:
        value = getattr(record, key, None)
        if value is not None:
            context[key] = value
    return context


class JSONFormatter(logging.Formatter):
    """
    Formats log records as JSON lines.

    Output format:
        {"ts": "2026-...", "level": "INFO", "logger": "clearseller.scoring...", "msg": "...", "score": 87}

    `ts` is the record creation time, not the formatting time.
    """

    def format(self, record: logging.LogRecord) -> str:
        entry = {
            "ts": datetime.fromtimestamp(record.created, tz=timezone.utc).isoformat(),
            "level": record.levelname,
            "logger": record.name,
            "msg": record.getMessage(),
        }
        entry.update(record_context(record))

        if record.exc_info and record.exc_info[0] is not None:
            entry["exception"] = self.formatException(record.exc_info)

        return json.dumps(entry, default=str, ensure_ascii=False)


class ContextTextFormatter(logging.Formatter):
    """Human-readable format, scoring context appended as `key=value`."""

    def __init__(self):
        super().__init__(TEXT_FORMAT, datefmt=TEXT_DATEFMT)

    def format(self, record: logging.LogRecord) -> str:
        line = super().format(record)
        context = record_context(record)
        if not context:
            return line
        pairs = " ".join(f"{key}={value}" for key, value in context.items())
        head, sep, tail = line.partition("\n")
        return f"{head} [{pairs}]{sep}{tail}"


def _file_handler(log_file: str, max_bytes: int, backup_count: int) -> logging.Handler:
    os.makedirs(os.path.dirname(log_file) or ".", exist_ok=True)
    return logging.handlers.RotatingFileHandler(
        log_file,
        maxBytes=max_bytes,
        backupCount=backup_count,
        encoding="utf-8",
    )


def setup_logging(
    level: str = "INFO",
    json_output: bool = False,
    log_file: Optional[str] = None,
    max_bytes: int = 10 * 1024 * 1024,  # 10 MB
    backup_count: int = 5,
    stream=None,
    engine_level: Optional[str] = None,
):
    """
    Configure application logging.

    Args:
        level: Root log level (DEBUG, INFO, WARNING, ERROR)
        json_output: Use JSON structured format
        log_file: Optional file path for log output (with rotation)
        max_bytes: Max file size before rotation
        backup_count: Number of rotated files to keep
        stream: Console stream (default: stderr, stdout is kept for command output)
        engine_level: Level of the per-product engine logger (default: same as root)
    """
    root = logging.getLogger()
    root.setLevel(getattr(logging, level.upper(), logging.INFO))
    root.handlers.clear()

    formatter = JSONFormatter() if json_output else ContextTextFormatter()
    handlers = [logging.StreamHandler(stream or sys.stderr)]
    if log_file:
        handlers.append(_file_handler(log_file, max_bytes, backup_count))

    for handler in handlers:
        handler.setFormatter(formatter)
        root.addHandler(handler)

    engine_logger = logging.getLogger(ENGINE_LOGGER)
    if engine_level:
        engine_logger.setLevel(getattr(logging, engine_level.upper(), logging.NOTSET))
    else:
        engine_logger.setLevel(logging.NOTSET)

    root.debug(
        "Logging configured: level=%s json=%s file=%s",
        level, json_output, log_file or "none",
    )

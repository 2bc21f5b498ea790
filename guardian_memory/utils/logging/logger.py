"""Structured JSON logging for the memory engine.

Every record is written as one JSON object per line:

    {"timestamp": "2026-03-01T09:30:00Z", "level": "INFO",
     "message": "memory_loaded", "component": "memory", "node_count": 120}

The message is a snake_case event name; everything else is key/value context.
Correlation IDs are kept per thread and stamped on every record while set.
"""

import json
import logging
import logging.handlers
import os
import uuid
from pathlib import Path
from threading import local
from typing import Any, Dict, Optional

from ..datetime_utils import utc_now, datetime_to_iso_utc

LOGGER_NAME = "guardian_memory"

MAX_LOG_BYTES = 50 * 1024 * 1024

_correlation = local()


def get_correlation_id() -> Optional[str]:
    """Correlation ID of the current thread, if any."""
    return getattr(_correlation, 'value', None)


def set_correlation_id(correlation_id: Optional[str] = None) -> str:
    """Set (or generate) the correlation ID of the current thread."""
    _correlation.value = correlation_id or str(uuid.uuid4())[:8]
    return _correlation.value


def clear_correlation_id():
    _correlation.value = None


def resolve_log_level(level: Optional[str] = None) -> int:
    """Translate a level name (or LOG_LEVEL) into a logging constant."""
    name = (level or os.getenv("LOG_LEVEL") or "INFO").upper()
    resolved = logging.getLevelName(name)
    return resolved if isinstance(resolved, int) else logging.INFO


class JsonLineFormatter(logging.Formatter):
    """Render a record and its `context` attribute as one JSON line."""

    def format(self, record: logging.LogRecord) -> str:
        entry: Dict[str, Any] = {
            "timestamp": datetime_to_iso_utc(utc_now()),
            "level": record.levelname,
            "message": record.getMessage(),
        }
        entry.update(getattr(record, 'context', {}))

        correlation_id = get_correlation_id()
        if correlation_id:
            entry.setdefault("correlation_id", correlation_id)

        return json.dumps(entry, default=str)


def rotating_handler(path: Path, level: int, backup_count: int = 5) -> logging.Handler:
    """JSON-line file handler rotating at 50MB."""
    handler = logging.handlers.RotatingFileHandler(
        path,
        maxBytes=MAX_LOG_BYTES,
        backupCount=backup_count,
        encoding='utf-8'
    )
    handler.setFormatter(JsonLineFormatter())
    handler.setLevel(level)
    return handler


class StructuredLogger:
    """Logger writing JSON lines to a single file."""

    def __init__(self, log_file: str = "logs/system.log", level: int = logging.INFO):
        self.level = level
        self.logger = logging.getLogger(LOGGER_NAME)
        self.logger.setLevel(level)
        self.logger.handlers.clear()
        # Records must not reach the root logger's console handlers
        self.logger.propagate = False

        log_path = Path(log_file)
        log_path.parent.mkdir(parents=True, exist_ok=True)
        self.logger.addHandler(rotating_handler(log_path, level))

    def make_record(self, level: int, message: str, context: Dict[str, Any]) -> logging.LogRecord:
        record = self.logger.makeRecord(self.logger.name, level, "", 0, message, (), None)
        record.context = context
        return record

    def _log(self, level: int, message: str, **context):
        if self.isEnabledFor(level):
            self.logger.handle(self.make_record(level, message, context))

    def isEnabledFor(self, level: int) -> bool:
        return level >= self.level

    def debug(self, message: str, **context):
        self._log(logging.DEBUG, message, **context)

    def info(self, message: str, **context):
        self._log(logging.INFO, message, **context)

    def warning(self, message: str, **context):
        self._log(logging.WARNING, message, **context)

    def error(self, message: str, **context):
        self._log(logging.ERROR, message, **context)

    def critical(self, message: str, **context):
        self._log(logging.CRITICAL, message, **context)

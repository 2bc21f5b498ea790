"""Per-component log files.

Records are routed by their `component` field:
- memory.log: index build, insert and query events
- storage.log: corpus file reads and appends
- system.log: configuration, CLI and anything unrouted
- errors.log: every ERROR and CRITICAL record, whatever its component
"""

import logging
import os
from pathlib import Path
from threading import Lock
from typing import Dict, Optional

from .logger import StructuredLogger, LOGGER_NAME, resolve_log_level, rotating_handler


class MultiFileLogger(StructuredLogger):
    """Structured logger that writes each component to its own file."""

    COMPONENT_FILES = {
        'memory': 'memory.log',
        'storage': 'storage.log',
        'system': 'system.log',
        'config': 'system.log',
        'cli': 'system.log',
    }
    ERROR_FILE = 'errors.log'

    def __init__(self, log_dir: str = "logs", level: int = logging.INFO):
        # No single-file handler; files are opened per component below
        self.level = level
        self.log_dir = Path(log_dir)
        self.log_dir.mkdir(parents=True, exist_ok=True)
        self.lock = Lock()

        self.logger = logging.getLogger(LOGGER_NAME)
        self.logger.setLevel(level)
        self.logger.handlers.clear()
        self.logger.propagate = False

        by_file: Dict[str, logging.Handler] = {}
        self.handlers: Dict[str, logging.Handler] = {}
        for component, filename in self.COMPONENT_FILES.items():
            if filename not in by_file:
                by_file[filename] = rotating_handler(self.log_dir / filename, level)
            self.handlers[component] = by_file[filename]

        self.error_handler = rotating_handler(self.log_dir / self.ERROR_FILE, logging.ERROR,
                                              backup_count=10)

    def handler_for(self, component: Optional[str]) -> logging.Handler:
        """Handler for a component; "memory.nodes" routes like "memory"."""
        if component:
            root = component.split('.', 1)[0]
            for key in (component, root):
                if key in self.handlers:
                    return self.handlers[key]
        return self.handlers['system']

    def _log(self, level: int, message: str, **context):
        if not self.isEnabledFor(level):
            return

        record = self.make_record(level, message, context)
        with self.lock:
            handler = self.handler_for(context.get('component'))
            if level >= handler.level:
                handler.handle(record)
            if level >= self.error_handler.level:
                self.error_handler.handle(record)

    def close(self):
        with self.lock:
            for handler in set(self.handlers.values()) | {self.error_handler}:
                handler.close()


_multi_logger: Optional[MultiFileLogger] = None
_multi_logger_lock = Lock()


def get_multi_file_logger() -> MultiFileLogger:
    """Shared logger, created on first use from LOG_DIR and LOG_LEVEL."""
    global _multi_logger
    if _multi_logger is None:
        with _multi_logger_lock:
            if _multi_logger is None:
                _multi_logger = MultiFileLogger(
                    log_dir=os.getenv("LOG_DIR", "logs"),
                    level=resolve_log_level()
                )
    return _multi_logger


def reset_multi_file_logger():
    """Close the shared logger so the next use re-reads LOG_DIR and LOG_LEVEL."""
    global _multi_logger
    with _multi_logger_lock:
        if _multi_logger is not None:
            _multi_logger.close()
        _multi_logger = None

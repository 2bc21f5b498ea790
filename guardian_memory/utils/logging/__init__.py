"""Structured logging framework for the memory engine."""

from .logger import StructuredLogger
from .multi_file_logger import MultiFileLogger, get_multi_file_logger, reset_multi_file_logger
from .framework import (
    SmartLogger,
    log_execution,  # Decorator for function logging
    log_operation,  # Context manager for scoped operations
    get_smart_logger,  # Factory for smart loggers
)

__all__ = [
    "StructuredLogger",
    "MultiFileLogger",
    "SmartLogger",
    "get_multi_file_logger",
    "reset_multi_file_logger",
    "log_execution",
    "log_operation",
    "get_smart_logger",
]

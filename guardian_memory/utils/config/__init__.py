"""Unified configuration for the memory engine."""

from .unified_config import UnifiedConfig, ConfigError

__all__ = [
    'UnifiedConfig',
    'ConfigError',
]

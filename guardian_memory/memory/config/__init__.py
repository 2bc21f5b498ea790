"""Memory system configuration."""

from .memory_config import MemoryConfig, MEMORY_CONFIG

__all__ = [
    'MemoryConfig',
    'MEMORY_CONFIG'
]

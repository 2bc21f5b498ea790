"""Corpus storage."""

from .memory_file import MemoryFileStore

__all__ = ['MemoryFileStore']

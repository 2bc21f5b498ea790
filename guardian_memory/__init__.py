"""Guardian Memory.

Associative memory for the Guardian chatbot: a line-oriented knowledge base
held in an inverted index, matched by substring and token overlap, with a
co-occurrence association graph between neighbouring lines.

Packages:
- memory: engine, components, graph algorithms, corpus storage
- utils: configuration and structured logging
"""

from .memory import LexicalMemory, MemoryManager, QueryResult, MemoryConfig

__version__ = "0.1.0"

__all__ = [
    'LexicalMemory',
    'MemoryManager',
    'QueryResult',
    'MemoryConfig',
]

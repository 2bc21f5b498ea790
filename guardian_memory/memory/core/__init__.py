"""Core memory engine classes."""

from .memory_node import MemoryNode, create_memory_node, generate_node_id
from .query_result import QueryResult
from .lexical_memory import LexicalMemory
from .memory_manager import MemoryManager, LearnedLine

__all__ = [
    'MemoryNode',
    'create_memory_node',
    'generate_node_id',
    'QueryResult',
    'LexicalMemory',
    'MemoryManager',
    'LearnedLine'
]

"""Lexical memory: line index, token-overlap matching and associations."""

# Core classes
from .core import (
    MemoryNode, create_memory_node, generate_node_id,
    QueryResult, LexicalMemory, MemoryManager, LearnedLine
)

# Components
from .components import (
    NodeManager, TextProcessor, ScoringEngine,
    QueryContext, ScoredMatch, InvertedIndex
)

# Algorithms
from .algorithms import GraphAlgorithms

# Storage
from .storage import MemoryFileStore

# Configuration
from .config import MemoryConfig, MEMORY_CONFIG

# Errors
from .exceptions import GuardianMemoryError, StorageError, InvalidInputError

__all__ = [
    # Core API
    'MemoryNode',
    'create_memory_node',
    'generate_node_id',
    'QueryResult',
    'LexicalMemory',
    'MemoryManager',
    'LearnedLine',
    # Components
    'NodeManager',
    'TextProcessor',
    'ScoringEngine',
    'QueryContext',
    'ScoredMatch',
    'InvertedIndex',
    # Algorithms
    'GraphAlgorithms',
    # Storage
    'MemoryFileStore',
    # Configuration
    'MemoryConfig',
    'MEMORY_CONFIG',
    # Errors
    'GuardianMemoryError',
    'StorageError',
    'InvalidInputError'
]

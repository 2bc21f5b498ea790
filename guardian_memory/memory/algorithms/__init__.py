"""Memory system algorithms."""

from .graph_algorithms import GraphAlgorithms

__all__ = [
    'GraphAlgorithms',
]

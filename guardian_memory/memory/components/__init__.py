"""Memory engine components."""

from .node_manager import NodeManager, association_strength
from .text_processor import TextProcessor
from .scoring_engine import ScoringEngine, QueryContext, ScoredMatch
from .inverted_index import InvertedIndex

__all__ = [
    'NodeManager',
    'association_strength',
    'TextProcessor',
    'ScoringEngine',
    'QueryContext',
    'ScoredMatch',
    'InvertedIndex'
]

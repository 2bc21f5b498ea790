"""Configuration for the lexical memory engine."""

from typing import FrozenSet
from dataclasses import dataclass, field


@dataclass
class MemoryConfig:
    """Central configuration for indexing, association and matching behavior."""

    # Text processing
    MIN_TOKEN_LENGTH: int = 3  # tokens of length <= 2 are dropped
    # Historical list; changing it changes match results
    STOP_WORDS: FrozenSet[str] = field(default_factory=lambda: frozenset({
        'the', 'and', 'for', 'are', 'but', 'not', 'you', 'all', 'can', 'had',
        'her', 'was', 'one', 'our', 'out', 'has', 'have', 'been', 'will', 'more',
        'when', 'who', 'may', 'about', 'into', 'than', 'them', 'some', 'what',
        'there', 'would', 'this', 'that', 'with', 'from'
    }))

    # Corpus parsing
    DEFAULT_CATEGORY: str = 'general'
    HEADER_MIN_LENGTH: int = 4  # uppercase lines longer than 3 chars are headers
    SEPARATOR_CHARS: str = '=-*_#~'
    SEPARATOR_MIN_LENGTH: int = 3
    SEPARATOR_RULE: str = '=' * 16

    # Associations
    ASSOCIATION_WINDOW: int = 50  # neighbours compared per node, in load order
    ASSOCIATION_MIN_STRENGTH: float = 0.1

    # Matching
    MATCH_THRESHOLD: float = 0.3
    QUERY_TOKEN_MIN_LENGTH: int = 4  # gate for the token-overlap branch
    EXACT_MATCH_SCORE: float = 1.0
    DEDUP_PREFIX_LENGTH: int = 50
    DEFAULT_QUERY_LIMIT: int = 5

    # Fallback
    FALLBACK_POOL_SIZE: int = 100
    NO_MEMORY_SENTINEL: str = "Memory not loaded. Check the knowledge base file."

    # Interaction logging
    MAX_INPUT_LENGTH: int = 500
    CORRECTIONS_CATEGORY: str = 'corrections'
    INTERACTIONS_CATEGORY: str = 'interactions'

    # Graph analysis
    DEFAULT_RELATED_LIMIT: int = 10


# Global default instance
MEMORY_CONFIG = MemoryConfig()

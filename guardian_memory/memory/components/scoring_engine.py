"""Scoring engine for best-match retrieval."""

from typing import List, Optional, Sequence
from dataclasses import dataclass, field

from ..core.memory_node import MemoryNode
from .text_processor import TextProcessor
from ..config.memory_config import MEMORY_CONFIG


@dataclass
class QueryContext:
    """Normalized query, computed once per query."""
    query_text: str
    query_lower: str
    query_tokens: List[str] = field(default_factory=list)
    gate_tokens: List[str] = field(default_factory=list)


@dataclass
class ScoredMatch:
    """A candidate node with its score and load-order position."""
    node: MemoryNode
    score: float
    index: int
    exact: bool = False


class ScoringEngine:
    """Handles all scoring and ranking for memory retrieval."""

    def __init__(self, config=None, text_processor=None):
        self.config = config or MEMORY_CONFIG
        self.text_processor = text_processor or TextProcessor(self.config)

    def build_context(self, query_text: Optional[str]) -> QueryContext:
        """Normalize a query for scoring."""
        query_text = query_text if isinstance(query_text, str) else ''
        tokens = self.text_processor.tokenize(query_text)
        return QueryContext(
            query_text=query_text,
            query_lower=query_text.lower().strip(),
            query_tokens=tokens,
            gate_tokens=[t for t in tokens if len(t) >= self.config.QUERY_TOKEN_MIN_LENGTH],
        )

    def token_overlap(self, query_tokens: Sequence[str], line_tokens: Sequence[str]) -> float:
        """Share of query tokens contained in, or containing, some line token."""
        if not line_tokens:
            return 0.0
        matches = 0
        for query_token in query_tokens:
            for line_token in line_tokens:
                if query_token in line_token or line_token in query_token:
                    matches += 1
                    break
        return matches / max(len(query_tokens), 1)

    def score_node(self, node: MemoryNode, context: QueryContext, index: int) -> Optional[ScoredMatch]:
        """Score one candidate, or None when it does not qualify.

        A verbatim (case-insensitive) occurrence of the whole query scores the
        maximum outright. Otherwise the line must contain one of the longer
        query tokens, and the token overlap must clear the match threshold.
        """
        content_lower = node.content.lower()

        if context.query_lower and context.query_lower in content_lower:
            return ScoredMatch(node, self.config.EXACT_MATCH_SCORE, index, exact=True)

        if not any(token in content_lower for token in context.gate_tokens):
            return None

        score = self.token_overlap(context.query_tokens, node.tokens)
        if score > self.config.MATCH_THRESHOLD:
            return ScoredMatch(node, score, index)
        return None

    def find_matches(self, nodes: Sequence[MemoryNode], context: QueryContext,
                     limit: int) -> List[ScoredMatch]:
        """Scan nodes in load order and return the ranked, deduplicated top matches."""
        scored = []
        for index, node in enumerate(nodes):
            match = self.score_node(node, context, index)
            if match is not None:
                scored.append(match)

        return self.rank(scored, limit)

    def rank(self, scored: List[ScoredMatch], limit: int) -> List[ScoredMatch]:
        """Sort by score (stable), drop shared prefixes, truncate to limit.

        Verbatim matches outrank token-overlap matches of equal score.
        """
        ordered = sorted(scored, key=lambda m: (m.score, m.exact), reverse=True)

        prefix_length = self.config.DEDUP_PREFIX_LENGTH
        seen = set()
        unique: List[ScoredMatch] = []
        for match in ordered:
            key = match.node.content[:prefix_length]
            if key in seen:
                continue
            seen.add(key)
            unique.append(match)
            if len(unique) >= limit:
                break

        return unique

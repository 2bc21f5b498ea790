"""
Unit tests for query scoring and ranking.

Tests cover:
- Exact substring short-circuit
- Token gate and bidirectional token overlap
- Threshold boundary
- Stable ranking, prefix deduplication and limits
"""

import pytest

from guardian_memory.memory.components.scoring_engine import ScoringEngine, ScoredMatch
from guardian_memory.memory.components.text_processor import TextProcessor
from guardian_memory.memory.core.memory_node import create_memory_node


@pytest.fixture
def processor(memory_config):
    return TextProcessor(memory_config)


@pytest.fixture
def engine(memory_config, processor):
    return ScoringEngine(memory_config, processor)


@pytest.fixture
def node_for(processor):
    def _make(content):
        return create_memory_node(content, processor.tokenize(content))
    return _make


class TestBuildContext:
    """Test query normalization."""

    def test_context(self, engine):
        """Test tokens and gate tokens are derived once."""
        context = engine.build_context("  Fox Jumps over logs ")

        assert context.query_lower == "fox jumps over logs"
        assert context.query_tokens == ["fox", "jumps", "over", "logs"]
        assert context.gate_tokens == ["jumps", "over", "logs"]

    def test_non_string_query(self, engine):
        """Test non-string queries behave as empty."""
        context = engine.build_context(None)

        assert context.query_lower == ""
        assert context.query_tokens == []


class TestScoreNode:
    """Test scoring of a single line."""

    def test_exact_substring_scores_maximum(self, engine, node_for):
        """Test a verbatim occurrence of the query wins outright."""
        node = node_for("The quick brown fox jumps over the lazy dog.")
        match = engine.score_node(node, engine.build_context("QUICK BROWN FOX"), 0)

        assert match.score == 1.0
        assert match.exact

    def test_exact_substring_without_tokens(self, engine, node_for):
        """Test the substring branch needs no tokens at all."""
        node = node_for("a an it")
        match = engine.score_node(node, engine.build_context("an it"), 0)

        assert match.score == 1.0

    def test_empty_query_is_not_a_substring_match(self, engine, node_for):
        """Test an empty query never matches every line."""
        node = node_for("The quick brown fox")

        assert engine.score_node(node, engine.build_context("   "), 0) is None

    def test_token_overlap_match(self, engine, node_for):
        """Test a line containing query tokens out of order matches."""
        node = node_for("Guardian Sentinel makes precision parts for aerospace customers.")
        match = engine.score_node(node, engine.build_context("guardian precision"), 3)

        assert match.score == 1.0
        assert not match.exact
        assert match.index == 3

    def test_gate_requires_long_token_in_line(self, engine, node_for):
        """Test queries made only of short tokens need an exact match."""
        node = node_for("The quick brown fox jumps over the lazy dog.")

        assert engine.score_node(node, engine.build_context("fox dog"), 0) is None

    def test_score_at_threshold_does_not_match(self, engine, node_for):
        """Test the overlap must be strictly above the threshold."""
        node = node_for("alpha bravo charlie")
        query = "alpha bravo charlie delta echo foxtrot golf hotel india juliet"

        assert engine.score_node(node, engine.build_context(query), 0) is None

    def test_score_above_threshold_matches(self, engine, node_for):
        """Test one more shared token clears the threshold."""
        node = node_for("alpha bravo charlie delta")
        query = "alpha bravo charlie delta echo foxtrot golf hotel india juliet"

        match = engine.score_node(node, engine.build_context(query), 0)
        assert match.score == pytest.approx(0.4)


class TestTokenOverlap:
    """Test the bidirectional containment overlap."""

    def test_query_token_inside_line_token(self, engine):
        """Test a query token contained in a line token counts."""
        assert engine.token_overlap(["ship"], ["shipping"]) == 1.0

    def test_line_token_inside_query_token(self, engine):
        """Test a line token contained in a query token counts."""
        assert engine.token_overlap(["today", "lunch"], ["day"]) == 0.5

    def test_each_query_token_counts_once(self, engine):
        """Test a query token matching several line tokens counts once."""
        assert engine.token_overlap(["ship"], ["ship", "shipping", "ships"]) == 1.0

    def test_empty_sides(self, engine):
        """Test empty token lists score zero."""
        assert engine.token_overlap(["ship"], []) == 0.0
        assert engine.token_overlap([], ["ship"]) == 0.0


class TestRanking:
    """Test sorting, deduplication and limits."""

    def test_equal_scores_keep_load_order(self, engine, node_for):
        """Test ties keep their original order."""
        nodes = [node_for("alpha report one"), node_for("alpha report two"),
                 node_for("alpha report three")]
        matches = engine.find_matches(nodes, engine.build_context("alpha report"), 5)

        assert [m.node.content for m in matches] == [
            "alpha report one", "alpha report two", "alpha report three"
        ]

    def test_higher_scores_first(self, engine, node_for):
        """Test stronger matches outrank earlier weaker ones."""
        weak = node_for("shipping rates vary")
        strong = node_for("expedited shipping costs extra")
        matches = engine.find_matches([weak, strong], engine.build_context("expedited shipping"), 5)

        assert [m.node for m in matches] == [strong, weak]
        assert matches[1].score == 0.5

    def test_shared_prefix_keeps_first(self, engine, node_for):
        """Test lines sharing the first 50 characters collapse to the best one."""
        first = node_for("Warranty coverage for every Guardian Sentinel machine lasts two years.")
        second = node_for("Warranty coverage for every Guardian Sentinel machine lasts three years abroad.")
        matches = engine.find_matches([first, second], engine.build_context("warranty coverage"), 5)

        assert [m.node for m in matches] == [first]

    def test_limit_applies_after_deduplication(self, engine, node_for):
        """Test the limit counts distinct results."""
        scored = [
            ScoredMatch(node_for("same prefix " + "x" * 50 + " one"), 1.0, 0),
            ScoredMatch(node_for("same prefix " + "x" * 50 + " two"), 0.9, 1),
            ScoredMatch(node_for("other line"), 0.8, 2),
            ScoredMatch(node_for("last line"), 0.7, 3),
        ]

        ranked = engine.rank(scored, 2)
        assert [m.index for m in ranked] == [0, 2]

    def test_verbatim_match_beats_earlier_full_overlap(self, engine, node_for):
        """Test a line containing the query outranks an earlier line scoring 1.0 on tokens."""
        reordered = node_for("precision guardian parts")
        verbatim = node_for("guardian precision machining")
        matches = engine.find_matches([reordered, verbatim], engine.build_context("guardian precision"), 5)

        assert [m.node for m in matches] == [verbatim, reordered]
        assert matches[0].exact
        assert matches[1].score == 1.0

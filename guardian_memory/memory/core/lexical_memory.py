"""Lexical memory engine: load, insert and best-match query over a line corpus."""

import random
import threading
from typing import Any, Dict, List, Optional, Set, Tuple

import networkx as nx

from .memory_node import MemoryNode, create_memory_node, generate_node_id
from .query_result import QueryResult
from ..components.node_manager import NodeManager
from ..components.text_processor import TextProcessor
from ..components.scoring_engine import ScoringEngine
from ..algorithms.graph_algorithms import GraphAlgorithms
from ..config.memory_config import MEMORY_CONFIG
from ..exceptions import InvalidInputError
from ...utils.datetime_utils import utc_now
from ...utils.logging.framework import SmartLogger, log_operation

logger = SmartLogger("memory")


class LexicalMemory:
    """In-memory line index with token-overlap matching and associations.

    Each instance is independent; hosting services own and pass it around.

    Concurrency: `load` builds a complete replacement and publishes it with a
    single reference swap, so queries never see a half-built index. `load`
    and `insert` serialize on one writer lock; `query` takes no lock. Index,
    graph and statistics views copy what they need under the writer lock.
    """

    def __init__(self, config=None, rng: Optional[random.Random] = None):
        self.config = config or MEMORY_CONFIG
        self.text_processor = TextProcessor(self.config)
        self.scoring_engine = ScoringEngine(self.config, self.text_processor)

        self._node_manager = NodeManager(self.config)
        self._write_lock = threading.RLock()
        self._rng = rng or random.Random()

        self.created_at = utc_now()
        self.last_activity = utc_now()
        self.load_count = 0
        self.insert_count = 0

    @property
    def node_manager(self) -> NodeManager:
        """The currently published node manager."""
        return self._node_manager

    def __len__(self) -> int:
        return self._node_manager.get_node_count()

    def _build(self, raw_text: Optional[str]) -> NodeManager:
        manager = NodeManager(self.config)
        for line, category in self.text_processor.iter_corpus(raw_text):
            tokens = self.text_processor.tokenize(line)
            manager.add_node(create_memory_node(line, tokens, category))
        manager.build_associations()
        return manager

    def load(self, raw_text: Optional[str]) -> None:
        """Replace the whole index with one built from raw corpus text.

        Never raises on malformed input: anything that is not usable text
        produces an empty index.
        """
        chars = len(raw_text) if isinstance(raw_text, str) else 0
        with self._write_lock:
            with log_operation("memory", "corpus_load", chars=chars):
                manager = self._build(raw_text)
                self._node_manager = manager
                self.load_count += 1
                self.last_activity = utc_now()

                logger.info("memory_loaded",
                            node_count=manager.get_node_count(),
                            categories=len(manager.nodes_by_category),
                            association_edges=manager.count_edges())

    def insert(self, line: str, category: Optional[str] = None) -> str:
        """Append one line to the live index without a full rebuild.

        Associations are computed against the most recently added nodes only.

        Returns:
            The node id

        Raises:
            InvalidInputError: If the line is blank
        """
        if not isinstance(line, str):
            raise InvalidInputError("Memory line must be a string")

        # A stored line is always a single corpus line
        content = " ".join(part.strip() for part in line.splitlines() if part.strip())
        if not content:
            raise InvalidInputError("Cannot insert a blank memory line")

        tokens = self.text_processor.tokenize(content)
        node = create_memory_node(content, tokens, category or self.config.DEFAULT_CATEGORY)

        with self._write_lock:
            manager = self._node_manager
            manager.add_node(node)
            edges = manager.associate_node(node)
            self.insert_count += 1
            self.last_activity = utc_now()

        logger.info("memory_line_inserted",
                    node_id=node.node_id,
                    category=node.category,
                    token_count=len(tokens),
                    edges=edges)
        return node.node_id

    def query(self, text: Optional[str], limit: Optional[int] = None) -> QueryResult:
        """Find the best matching line for a query.

        Never raises for any string input; falls back to a random early line
        when nothing clears the threshold, or to a sentinel when empty.
        """
        limit = max(1, limit if limit is not None else self.config.DEFAULT_QUERY_LIMIT)
        manager = self._node_manager
        nodes = manager.ordered_nodes()

        if not nodes:
            logger.warning("query_without_memory",
                           query_length=len(text) if isinstance(text, str) else 0)
            return QueryResult(best_match=self.config.NO_MEMORY_SENTINEL, found=False, confidence=0.0)

        context = self.scoring_engine.build_context(text)
        matches = self.scoring_engine.find_matches(nodes, context, limit)

        if matches and matches[0].score > self.config.MATCH_THRESHOLD:
            best = matches[0]
            manager.track_access(best.node.node_id)
            logger.info("query_matched",
                        node_id=best.node.node_id,
                        score=best.score,
                        exact=best.exact,
                        alternatives=len(matches) - 1)
            return QueryResult(
                best_match=best.node.content,
                found=True,
                confidence=best.score,
                alternatives=[m.node.content for m in matches[1:]],
                node_id=best.node.node_id,
            )

        pool = nodes[:min(self.config.FALLBACK_POOL_SIZE, len(nodes))]
        fallback = self._rng.choice(pool)
        logger.info("query_fallback",
                    node_id=fallback.node_id,
                    query_tokens=len(context.query_tokens))
        return QueryResult(best_match=fallback.content, found=False, confidence=0.0)

    def get_node(self, node_id: str) -> Optional[MemoryNode]:
        """Get a node by ID."""
        return self._node_manager.get_node(node_id)

    def find_node(self, line: str) -> Optional[MemoryNode]:
        """Get the node stored for an exact line, if any."""
        return self._node_manager.get_node(generate_node_id(line.strip()))

    def token_index(self) -> Dict[str, Set[str]]:
        """Copy of the token -> node ids index."""
        with self._write_lock:
            return self._node_manager.inverted_index.as_dict()

    def category_index(self) -> Dict[str, Set[str]]:
        """Copy of the category -> node ids index."""
        with self._write_lock:
            return {category: set(ids) for category, ids in self._node_manager.nodes_by_category.items()}

    def associations(self) -> Dict[str, Dict[str, float]]:
        """Copy of every node's connections."""
        with self._write_lock:
            return {node.node_id: dict(node.connections) for node in self._node_manager.ordered_nodes()}

    def _graph_snapshot(self) -> Tuple[NodeManager, nx.Graph]:
        # Inserts mutate connections in place
        with self._write_lock:
            manager = self._node_manager
            return manager, GraphAlgorithms.build_association_graph(manager.ordered_nodes())

    def related(self, node_id: str, max_depth: int = 1,
                limit: Optional[int] = None) -> List[Tuple[MemoryNode, int, float]]:
        """Lines associated with a line, nearest and strongest first."""
        manager, graph = self._graph_snapshot()
        found = GraphAlgorithms.related_nodes(
            graph, node_id, max_depth,
            limit if limit is not None else self.config.DEFAULT_RELATED_LIMIT
        )
        return [(manager.nodes[other_id], hops, strength)
                for other_id, hops, strength in found if other_id in manager.nodes]

    def strongest_connections(self, node_id: str,
                              limit: Optional[int] = None) -> List[Tuple[MemoryNode, float]]:
        manager, graph = self._graph_snapshot()
        found = GraphAlgorithms.strongest_connections(
            graph, node_id,
            limit if limit is not None else self.config.DEFAULT_RELATED_LIMIT
        )
        return [(manager.nodes[other_id], strength)
                for other_id, strength in found if other_id in manager.nodes]

    def clusters(self) -> List[Set[str]]:
        """Groups of associated node ids, largest first."""
        _, graph = self._graph_snapshot()
        return GraphAlgorithms.association_clusters(graph)

    def central_nodes(self, limit: int = 10) -> List[Tuple[MemoryNode, float]]:
        """Nodes with the highest total association strength."""
        manager, graph = self._graph_snapshot()
        return [(manager.nodes[node_id], degree)
                for node_id, degree in GraphAlgorithms.central_nodes(graph, limit)
                if node_id in manager.nodes]

    def get_statistics(self) -> Dict[str, Any]:
        """Get engine statistics."""
        with self._write_lock:
            stats = self._node_manager.get_statistics()
            load_count, insert_count = self.load_count, self.insert_count
        return {
            'line_count': stats['total_nodes'],
            'loaded': stats['total_nodes'] > 0,
            'category_count': len(stats['categories']),
            'categories': stats['categories'],
            'index': stats['index'],
            'association_edges': stats['association_edges'],
            'load_count': load_count,
            'insert_count': insert_count,
        }

"""Node manager for the memory engine - handles storage, indexing and associations."""

import time
from typing import Dict, List, Optional, Set
from collections import defaultdict, deque

from ..core.memory_node import MemoryNode
from .inverted_index import InvertedIndex
from ..config.memory_config import MEMORY_CONFIG
from ...utils.logging.framework import SmartLogger

logger = SmartLogger("memory.nodes")


def association_strength(earlier: MemoryNode, later: MemoryNode) -> float:
    """Share of tokens two nodes have in common.

    Counts the earlier node's tokens (repeats included) that appear in the
    later node, divided by the longer token list.
    """
    if not earlier.tokens or not later.tokens:
        return 0.0
    later_tokens = set(later.tokens)
    shared = sum(1 for token in earlier.tokens if token in later_tokens)
    if not shared:
        return 0.0
    return shared / max(len(earlier.tokens), len(later.tokens))


class NodeManager:
    """Manages node storage, the token and category indexes, and associations.

    Nodes keep load order; re-adding an existing id replaces the node in place.
    """

    def __init__(self, config=None):
        self.config = config or MEMORY_CONFIG

        # Core storage, in load order
        self.nodes: Dict[str, MemoryNode] = {}

        # Indexes
        self.inverted_index = InvertedIndex()
        self.nodes_by_category: Dict[str, Set[str]] = defaultdict(set)

        # Most recently added ids: the newest node plus the window before it
        self.recent_node_ids: deque = deque(maxlen=self.config.ASSOCIATION_WINDOW + 1)

        # Statistics
        self.total_nodes_added = 0
        self.total_edges_created = 0

    def add_node(self, node: MemoryNode) -> str:
        """Add a node to storage and update all indexes."""
        node_id = node.node_id

        previous = self.nodes.get(node_id)
        if previous is not None:
            previous.disconnect_all(self.nodes)
            self.nodes_by_category[previous.category].discard(node_id)
            if not self.nodes_by_category[previous.category]:
                del self.nodes_by_category[previous.category]
            logger.debug("node_replaced", node_id=node_id)

        self.nodes[node_id] = node
        self.total_nodes_added += 1

        self.nodes_by_category[node.category].add(node_id)

        # Zero-token nodes are recorded but land in no bucket
        self.inverted_index.add_document(node_id, node.tokens)

        if node_id in self.recent_node_ids:
            self.recent_node_ids.remove(node_id)
        self.recent_node_ids.append(node_id)

        return node_id

    def get_node(self, node_id: str) -> Optional[MemoryNode]:
        """Get a node by ID."""
        return self.nodes.get(node_id)

    def ordered_nodes(self) -> List[MemoryNode]:
        """Snapshot of all nodes in load order."""
        return list(self.nodes.values())

    def build_associations(self, window: Optional[int] = None) -> int:
        """Link every node with up to `window` following nodes in load order.

        Returns:
            Number of edges recorded
        """
        if window is None:
            window = self.config.ASSOCIATION_WINDOW
        min_strength = self.config.ASSOCIATION_MIN_STRENGTH
        entries = self.ordered_nodes()
        start_time = time.time()
        edges = 0

        for i, node in enumerate(entries):
            for j in range(i + 1, min(i + 1 + window, len(entries))):
                other = entries[j]
                strength = association_strength(node, other)
                if strength > min_strength:
                    node.connect(other, strength)
                    edges += 1

        self.total_edges_created += edges
        logger.info("associations_built",
                    node_count=len(entries),
                    edges=edges,
                    window=window,
                    duration_seconds=round(time.time() - start_time, 3))
        return edges

    def associate_node(self, node: MemoryNode) -> int:
        """Link a freshly added node with the most recently added nodes only."""
        min_strength = self.config.ASSOCIATION_MIN_STRENGTH
        edges = 0

        for neighbour_id in list(self.recent_node_ids):
            if neighbour_id == node.node_id:
                continue
            neighbour = self.nodes.get(neighbour_id)
            if neighbour is None:
                continue
            strength = association_strength(neighbour, node)
            if strength > min_strength:
                neighbour.connect(node, strength)
                edges += 1

        self.total_edges_created += edges
        return edges

    def track_access(self, node_id: str):
        """Update retrieval bookkeeping for a node."""
        node = self.nodes.get(node_id)
        if node is not None:
            node.access()

    def get_category_nodes(self, category: str) -> List[MemoryNode]:
        """Nodes of one category, in load order."""
        ids = self.nodes_by_category.get(category, set())
        return [node for node_id, node in self.nodes.items() if node_id in ids]

    def count_edges(self) -> int:
        """Number of undirected association edges."""
        return sum(len(node.connections) for node in self.nodes.values()) // 2

    def get_node_count(self) -> int:
        """Get the total number of nodes."""
        return len(self.nodes)

    def get_statistics(self) -> Dict[str, object]:
        """Get storage statistics."""
        return {
            'total_nodes': len(self.nodes),
            'categories': {category: len(ids) for category, ids in self.nodes_by_category.items()},
            'association_edges': self.count_edges(),
            'nodes_added': self.total_nodes_added,
            'index': self.inverted_index.get_statistics()
        }

"""Graph algorithms over the association graph.

The association edges live on the nodes themselves; these helpers project
them into a networkx graph for traversal and analysis:
- Spreading recall of lines associated with a given line
- Clusters of mutually associated lines
- Weighted degree centrality for hub lines
"""

from typing import Dict, Iterable, List, Optional, Set, Tuple

import networkx as nx

from ..core.memory_node import MemoryNode
from ...utils.logging.framework import SmartLogger

logger = SmartLogger("memory.graph")


class GraphAlgorithms:
    """Graph algorithms for associative recall."""

    @staticmethod
    def build_association_graph(nodes: Iterable[MemoryNode]) -> nx.Graph:
        """Project node connections into an undirected weighted graph.

        Every node becomes a graph node, connected or not.
        """
        graph = nx.Graph()
        for node in nodes:
            graph.add_node(node.node_id, category=node.category)
            for neighbour_id, strength in node.connections.items():
                graph.add_edge(node.node_id, neighbour_id, weight=strength)
        return graph

    @staticmethod
    def related_nodes(graph: nx.Graph, node_id: str, max_depth: int = 1,
                      limit: Optional[int] = None) -> List[Tuple[str, int, float]]:
        """Find lines reachable from a line through association edges.

        Strength decays multiplicatively along a path; each reached node keeps
        the strongest path from the closer layer.

        Args:
            graph: Association graph
            node_id: Starting node
            max_depth: Maximum number of hops
            limit: Maximum number of results

        Returns:
            (node_id, hops, strength) tuples ordered by hops, then strength
        """
        if node_id not in graph or max_depth < 1:
            return []

        distances = nx.single_source_shortest_path_length(graph, node_id, cutoff=max_depth)

        layers: Dict[int, List[str]] = {}
        for other_id, distance in distances.items():
            layers.setdefault(distance, []).append(other_id)

        strength: Dict[str, float] = {node_id: 1.0}
        for distance in range(1, max_depth + 1):
            for other_id in layers.get(distance, []):
                strength[other_id] = max(
                    strength[prev] * graph[prev][other_id]['weight']
                    for prev in graph.neighbors(other_id)
                    if distances.get(prev) == distance - 1
                )

        related = [(other_id, distance, strength[other_id])
                   for other_id, distance in distances.items() if other_id != node_id]
        related.sort(key=lambda item: (item[1], -item[2], item[0]))

        logger.debug("related_nodes_found",
                     node_id=node_id,
                     max_depth=max_depth,
                     found=len(related))

        return related[:limit] if limit is not None else related

    @staticmethod
    def strongest_connections(graph: nx.Graph, node_id: str,
                              limit: int = 10) -> List[Tuple[str, float]]:
        """Direct neighbours of a line, strongest association first."""
        if node_id not in graph:
            return []
        neighbours = [(other_id, data['weight']) for other_id, data in graph[node_id].items()]
        neighbours.sort(key=lambda item: (-item[1], item[0]))
        return neighbours[:limit]

    @staticmethod
    def association_clusters(graph: nx.Graph) -> List[Set[str]]:
        """Groups of lines linked by associations, largest first.

        Isolated lines are not clusters.
        """
        if len(graph) == 0:
            return []
        clusters = [set(component) for component in nx.connected_components(graph)
                    if len(component) > 1]
        clusters.sort(key=lambda c: (-len(c), min(c)))
        return clusters

    @staticmethod
    def central_nodes(graph: nx.Graph, limit: int = 10) -> List[Tuple[str, float]]:
        """Lines with the highest total association strength."""
        if len(graph) == 0:
            return []
        degrees = [(node_id, float(degree)) for node_id, degree in graph.degree(weight='weight')
                   if degree > 0]
        degrees.sort(key=lambda item: (-item[1], item[0]))
        return degrees[:limit]

"""
Topology Engine
===============

Structural view of the parent/child subgraph.

ALLOWED:
- Forest construction from PARENT edges
- Roots, children, depth
- Ancestor walks (cycle prevention)
- Acyclicity checks

The layout reads the forest; the validator reads the ancestor walk.
"""

from __future__ import annotations
from typing import Dict, List, Optional, Set, Tuple, Iterable
from dataclasses import dataclass
import networkx as nx

from ..contracts.graph import GraphSnapshot, RelationKind


@dataclass(frozen=True)
class ForestMetrics:
    """Immutable structural metrics for the hierarchy forest."""
    node_count: int
    edge_count: int
    root_count: int
    depth: int
    is_acyclic: bool


class ParentForest:
    """
    Directed parent -> child forest over a subset of nodes.

    Wraps a NetworkX DiGraph. Insertion order of nodes and edges is
    kept, so roots() and children() follow snapshot order.
    """

    def __init__(self, graph: nx.DiGraph):
        self._graph = graph

    @classmethod
    def build(
        cls,
        snapshot: GraphSnapshot,
        members: Optional[Iterable[str]] = None
    ) -> ParentForest:
        """
        Build the forest from PARENT edges whose endpoints are both members.

        members defaults to every node in the snapshot.
        """
        allowed = list(members) if members is not None else list(snapshot.node_ids)
        allowed_set = set(allowed)

        graph = nx.DiGraph()
        graph.add_nodes_from(allowed)
        for edge in snapshot.edges:
            if edge.kind is not RelationKind.PARENT:
                continue
            if edge.from_node_id in allowed_set and edge.to_node_id in allowed_set:
                graph.add_edge(edge.from_node_id, edge.to_node_id)
        return cls(graph)

    @property
    def graph(self) -> nx.DiGraph:
        return self._graph

    def roots(self) -> List[str]:
        return [n for n in self._graph.nodes if self._graph.in_degree(n) == 0]

    def children(self, node_id: str) -> List[str]:
        if node_id not in self._graph:
            return []
        return list(self._graph.successors(node_id))

    def is_acyclic(self) -> bool:
        return nx.is_directed_acyclic_graph(self._graph)

    def compute_metrics(self) -> ForestMetrics:
        acyclic = self.is_acyclic()
        depth = 0
        if acyclic and self._graph.number_of_edges() > 0:
            depth = nx.dag_longest_path_length(self._graph)
        return ForestMetrics(
            node_count=self._graph.number_of_nodes(),
            edge_count=self._graph.number_of_edges(),
            root_count=len(self.roots()),
            depth=depth,
            is_acyclic=acyclic,
        )


# =============================================================================
# ANCESTOR WALK
# =============================================================================

def parent_links(snapshot: GraphSnapshot) -> Dict[str, Tuple[str, ...]]:
    """
    child id -> ids of its parents, from incoming PARENT edges.

    More than one parent only occurs in snapshots that already break the
    single-parent rule; the walk still has to terminate on them.
    """
    links: Dict[str, List[str]] = {}
    for edge in snapshot.edges:
        if edge.kind is not RelationKind.PARENT:
            continue
        if snapshot.has_node(edge.from_node_id) and snapshot.has_node(edge.to_node_id):
            links.setdefault(edge.to_node_id, []).append(edge.from_node_id)
    return {k: tuple(v) for k, v in links.items()}


def reaches_ancestor(
    links: Dict[str, Tuple[str, ...]],
    start: str,
    target: str
) -> bool:
    """
    Walk upward from start; True if target is start or one of its ancestors.

    Stack-based depth-first search with a visited set, so an existing
    cycle cannot trap the walk.
    """
    stack = [start]
    visited: Set[str] = set()
    while stack:
        current = stack.pop()
        if current == target:
            return True
        if current in visited:
            continue
        visited.add(current)
        stack.extend(links.get(current, ()))
    return False

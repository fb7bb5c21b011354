"""
Graph Visualization Contracts

Responsibility:
Renderable output of the layout. Everything a renderer needs is
pre-calculated here; no layout logic belongs in the rendering client.
"""

from dataclasses import dataclass
from typing import Dict, Optional, Tuple

from ..contracts.graph import RelationKind


@dataclass(frozen=True)
class GraphNode:
    """Renderable graph node."""
    node_id: str
    x: float
    y: float
    size: float
    color: str
    label: str
    is_satellite: bool
    is_fallback: bool
    z_index: int

    @property
    def force_label(self) -> bool:
        return not self.is_satellite


@dataclass(frozen=True)
class GraphEdge:
    """Renderable graph edge."""
    edge_id: str
    source_id: str
    target_id: str
    kind: RelationKind
    size: float
    color: str
    z_index: int


@dataclass(frozen=True)
class NetworkGraphView:
    """
    Pre-layouted network graph.
    Same snapshot + same selection = same view (fallback nodes aside).
    """
    view_id: str
    nodes: Tuple[GraphNode, ...]
    edges: Tuple[GraphEdge, ...]

    @property
    def is_empty(self) -> bool:
        return not self.nodes

    def node(self, node_id: str) -> Optional[GraphNode]:
        for n in self.nodes:
            if n.node_id == node_id:
                return n
        return None

    def positions(self) -> Dict[str, Tuple[float, float]]:
        return {n.node_id: (n.x, n.y) for n in self.nodes}

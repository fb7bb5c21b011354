"""
Graph Contracts

Nodes, edges and the immutable snapshot every computation reads from.

DIRECTION CONVENTION:
=====================
A PARENT edge is stored as parent -> child:
- from_node_id is the parent
- to_node_id is the child
So edges_to(n) of kind PARENT is n's link to its own parent, and a node
may have at most one of them.

Annotation edges (REFERENCE, EXAMPLE, CONTRADICTION) are stored as
anchor -> satellite.
"""

from __future__ import annotations
from dataclasses import dataclass, field
from typing import Dict, FrozenSet, Iterable, List, Optional, Tuple
from enum import Enum

from .base import Timestamp


class RelationKind(Enum):
    """Stored edge types."""
    PARENT = "parent"
    REFERENCE = "reference"
    EXAMPLE = "example"
    CONTRADICTION = "contradiction"

    @property
    def is_annotation(self) -> bool:
        return self in ANNOTATION_KINDS

    @staticmethod
    def parse(value: str) -> RelationKind:
        try:
            return RelationKind(value)
        except ValueError:
            raise ValueError(f"Unknown relation kind: {value!r}") from None


ANNOTATION_KINDS: FrozenSet[RelationKind] = frozenset({
    RelationKind.REFERENCE,
    RelationKind.EXAMPLE,
    RelationKind.CONTRADICTION,
})


class LinkIntent(Enum):
    """
    What the user asked for when linking source -> target.

    CHILD and PARENT are the same stored relationship seen from
    opposite ends.
    """
    CHILD = "child"            # Target becomes child of source
    PARENT = "parent"          # Target becomes parent of source
    REFERENCE = "reference"
    EXAMPLE = "example"
    CONTRADICTION = "contradiction"

    @property
    def is_hierarchical(self) -> bool:
        return self in (LinkIntent.CHILD, LinkIntent.PARENT)

    @property
    def relation_kind(self) -> RelationKind:
        if self.is_hierarchical:
            return RelationKind.PARENT
        return RelationKind(self.value)

    @staticmethod
    def parse(value: str) -> LinkIntent:
        try:
            return LinkIntent(value)
        except ValueError:
            raise ValueError(f"Unknown link intent: {value!r}") from None


@dataclass(frozen=True)
class NodeRecord:
    """A note owned by exactly one account."""
    node_id: str
    title: str
    content: str = ""
    created_at: Optional[Timestamp] = None
    owner_id: str = ""

    def __post_init__(self):
        if not self.node_id or not isinstance(self.node_id, str):
            raise ValueError("node_id must be a non-empty string")
        if not self.title or not self.title.strip():
            raise ValueError("title must be non-empty")


@dataclass(frozen=True)
class EdgeRecord:
    """A directed, typed edge between two nodes."""
    edge_id: str
    from_node_id: str
    to_node_id: str
    kind: RelationKind
    weight: float = 1.0

    def __post_init__(self):
        if not self.edge_id:
            raise ValueError("edge_id must be a non-empty string")
        if not self.from_node_id or not self.to_node_id:
            raise ValueError("edge endpoints must be non-empty strings")
        if isinstance(self.kind, str):
            object.__setattr__(self, 'kind', RelationKind.parse(self.kind))
        if self.weight <= 0:
            raise ValueError("weight must be positive")

    @property
    def pair_key(self) -> Tuple[str, str]:
        return (self.from_node_id, self.to_node_id)


@dataclass(frozen=True)
class GraphSnapshot:
    """
    Immutable view of one account's nodes and edges.

    Node and edge order is preserved; layout and role resolution follow
    it, which is what makes their output deterministic.

    Edges with an endpoint missing from the snapshot stay in `edges` but
    are left out of the per-node indexes, so degrees, roles and
    predicates never count them. dangling_edges() lists them.
    """
    nodes: Tuple[NodeRecord, ...] = ()
    edges: Tuple[EdgeRecord, ...] = ()
    _edges_from: Dict[str, Tuple[EdgeRecord, ...]] = field(
        default_factory=dict, init=False, repr=False, compare=False
    )
    _edges_to: Dict[str, Tuple[EdgeRecord, ...]] = field(
        default_factory=dict, init=False, repr=False, compare=False
    )
    _by_id: Dict[str, NodeRecord] = field(
        default_factory=dict, init=False, repr=False, compare=False
    )

    def __post_init__(self):
        object.__setattr__(self, 'nodes', tuple(self.nodes))
        object.__setattr__(self, 'edges', tuple(self.edges))

        by_id: Dict[str, NodeRecord] = {}
        for node in self.nodes:
            if node.node_id in by_id:
                raise ValueError(f"Duplicate node id: {node.node_id}")
            by_id[node.node_id] = node

        edges_from: Dict[str, List[EdgeRecord]] = {nid: [] for nid in by_id}
        edges_to: Dict[str, List[EdgeRecord]] = {nid: [] for nid in by_id}
        for edge in self.edges:
            if edge.from_node_id not in by_id or edge.to_node_id not in by_id:
                continue
            edges_from[edge.from_node_id].append(edge)
            edges_to[edge.to_node_id].append(edge)

        object.__setattr__(self, '_by_id', by_id)
        object.__setattr__(self, '_edges_from', {k: tuple(v) for k, v in edges_from.items()})
        object.__setattr__(self, '_edges_to', {k: tuple(v) for k, v in edges_to.items()})

    @staticmethod
    def of(nodes: Iterable[NodeRecord], edges: Iterable[EdgeRecord] = ()) -> GraphSnapshot:
        return GraphSnapshot(nodes=tuple(nodes), edges=tuple(edges))

    @property
    def is_empty(self) -> bool:
        return not self.nodes

    @property
    def node_ids(self) -> Tuple[str, ...]:
        return tuple(n.node_id for n in self.nodes)

    def has_node(self, node_id: str) -> bool:
        return node_id in self._by_id

    def get_node(self, node_id: str) -> Optional[NodeRecord]:
        return self._by_id.get(node_id)

    def edges_from(self, node_id: str) -> Tuple[EdgeRecord, ...]:
        return self._edges_from.get(node_id, ())

    def edges_to(self, node_id: str) -> Tuple[EdgeRecord, ...]:
        return self._edges_to.get(node_id, ())

    def incident_edges(self, node_id: str) -> Tuple[EdgeRecord, ...]:
        return self.edges_from(node_id) + self.edges_to(node_id)

    def dangling_edges(self) -> Tuple[EdgeRecord, ...]:
        """Edges with at least one endpoint missing from the snapshot."""
        return tuple(
            e for e in self.edges
            if e.from_node_id not in self._by_id or e.to_node_id not in self._by_id
        )

    def with_edge(self, edge: EdgeRecord) -> GraphSnapshot:
        return GraphSnapshot(nodes=self.nodes, edges=self.edges + (edge,))

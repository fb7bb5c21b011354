"""
Role Resolution
===============

Derives each node's role from the snapshot. Roles are never stored on
the node; they are recomputed for every validation and layout.

- HierarchyRole: takes part in the parent/child tree
- SatelliteRole: target of an annotation edge, bound to one anchor
"""

from __future__ import annotations
from dataclasses import dataclass
from typing import Dict, List, Tuple, Union
from enum import Enum

from ..contracts.graph import GraphSnapshot, RelationKind


@dataclass(frozen=True)
class HierarchyRole:
    @property
    def is_satellite(self) -> bool:
        return False


@dataclass(frozen=True)
class SatelliteRole:
    anchor_id: str
    kind: RelationKind

    @property
    def is_satellite(self) -> bool:
        return True


NodeRole = Union[HierarchyRole, SatelliteRole]

HIERARCHY = HierarchyRole()


class TerminalScope(Enum):
    """Which annotation edges make a node terminal."""
    INCIDENT = "incident"        # Annotation edge in either direction
    TARGET_ONLY = "target_only"  # Only annotation targets (satellites)


@dataclass(frozen=True)
class RoleMap:
    """Node id -> role, plus the per-anchor satellite lists in snapshot order."""
    roles: Dict[str, NodeRole]
    satellites_by_anchor: Dict[str, Tuple[str, ...]]

    def role_of(self, node_id: str) -> NodeRole:
        return self.roles.get(node_id, HIERARCHY)

    def is_hierarchy(self, node_id: str) -> bool:
        return node_id in self.roles and not self.roles[node_id].is_satellite

    def is_satellite(self, node_id: str) -> bool:
        return node_id in self.roles and self.roles[node_id].is_satellite

    def satellite_count(self, anchor_id: str) -> int:
        return len(self.satellites_by_anchor.get(anchor_id, ()))

    @property
    def hierarchy_ids(self) -> Tuple[str, ...]:
        return tuple(nid for nid, role in self.roles.items() if not role.is_satellite)

    @property
    def satellite_ids(self) -> Tuple[str, ...]:
        return tuple(nid for nid, role in self.roles.items() if role.is_satellite)


def partition_roles(snapshot: GraphSnapshot) -> RoleMap:
    """
    Mark every node Hierarchy or Satellite.

    A node targeted by several annotation edges binds to the anchor of
    the last one in edge order.
    """
    roles: Dict[str, NodeRole] = {}
    for node in snapshot.nodes:
        role: NodeRole = HIERARCHY
        for edge in snapshot.edges_to(node.node_id):
            if edge.kind.is_annotation:
                role = SatelliteRole(anchor_id=edge.from_node_id, kind=edge.kind)
        roles[node.node_id] = role

    satellites: Dict[str, List[str]] = {}
    for node_id, role in roles.items():
        if isinstance(role, SatelliteRole):
            satellites.setdefault(role.anchor_id, []).append(node_id)

    return RoleMap(
        roles=roles,
        satellites_by_anchor={k: tuple(v) for k, v in satellites.items()},
    )


def parent_degree(snapshot: GraphSnapshot, node_id: str) -> int:
    """Number of PARENT edges touching the node, in either direction."""
    return sum(1 for e in snapshot.incident_edges(node_id) if e.kind is RelationKind.PARENT)


def structural_degree(snapshot: GraphSnapshot, node_id: str) -> int:
    """Number of non-annotation edges touching the node."""
    return sum(1 for e in snapshot.incident_edges(node_id) if not e.kind.is_annotation)


def is_isolated(snapshot: GraphSnapshot, node_id: str) -> bool:
    return parent_degree(snapshot, node_id) == 0


def has_parent(snapshot: GraphSnapshot, node_id: str) -> bool:
    return any(e.kind is RelationKind.PARENT for e in snapshot.edges_to(node_id))


def is_terminal(
    snapshot: GraphSnapshot,
    node_id: str,
    scope: TerminalScope = TerminalScope.INCIDENT
) -> bool:
    """True if the node carries an annotation edge and may not gain more edges."""
    if scope is TerminalScope.TARGET_ONLY:
        edges = snapshot.edges_to(node_id)
    else:
        edges = snapshot.incident_edges(node_id)
    return any(e.kind.is_annotation for e in edges)

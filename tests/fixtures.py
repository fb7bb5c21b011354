"""
Test Fixtures

Explicit snapshot builders for deterministic testing.
No random generation here; property tests draw their own.
"""

from datetime import datetime, timezone
from typing import Iterable, List, Tuple

from knowtree.contracts.base import Timestamp
from knowtree.contracts.graph import EdgeRecord, GraphSnapshot, NodeRecord, RelationKind


EPOCH = Timestamp(datetime(2026, 1, 1, 0, 0, 0, tzinfo=timezone.utc))


def node(node_id: str, title: str = "") -> NodeRecord:
    return NodeRecord(node_id=node_id, title=title or f"Note {node_id}", created_at=EPOCH)


def parent(parent_id: str, child_id: str, edge_id: str = "") -> EdgeRecord:
    return EdgeRecord(
        edge_id=edge_id or f"p_{parent_id}_{child_id}",
        from_node_id=parent_id,
        to_node_id=child_id,
        kind=RelationKind.PARENT,
    )


def annotation(
    anchor_id: str,
    satellite_id: str,
    kind: RelationKind = RelationKind.REFERENCE,
    edge_id: str = ""
) -> EdgeRecord:
    return EdgeRecord(
        edge_id=edge_id or f"{kind.value}_{anchor_id}_{satellite_id}",
        from_node_id=anchor_id,
        to_node_id=satellite_id,
        kind=kind,
    )


def snapshot(node_ids: Iterable[str], edges: Iterable[EdgeRecord] = ()) -> GraphSnapshot:
    return GraphSnapshot.of([node(n) for n in node_ids], edges)


def scenario_root_with_two_children() -> GraphSnapshot:
    """A is the root; B and C are its children."""
    return snapshot("ABC", [parent("A", "B"), parent("A", "C")])


def scenario_isolated_beside_hierarchy() -> GraphSnapshot:
    """A has child B; D is isolated."""
    return snapshot("ABD", [parent("A", "B")])


def synthetic_tree(depth: int = 3, branching: int = 3) -> Tuple[List[str], List[EdgeRecord]]:
    """Complete tree; ids encode the path from the root, e.g. r, r0, r01."""
    ids = ["r"]
    edges: List[EdgeRecord] = []
    level = ["r"]
    for _ in range(depth):
        next_level = []
        for parent_id in level:
            for i in range(branching):
                child_id = f"{parent_id}{i}"
                ids.append(child_id)
                edges.append(parent(parent_id, child_id))
                next_level.append(child_id)
        level = next_level
    return ids, edges


def synthetic_tree_with_satellites() -> GraphSnapshot:
    """
    Depth-3, branching-3 tree; a middle node and a leaf carry 4 satellites each.
    """
    ids, edges = synthetic_tree(3, 3)
    kinds = [RelationKind.REFERENCE, RelationKind.EXAMPLE,
             RelationKind.CONTRADICTION, RelationKind.REFERENCE]
    for anchor_id in ("r1", "r221"):
        for i, kind in enumerate(kinds):
            satellite_id = f"s_{anchor_id}_{i}"
            ids.append(satellite_id)
            edges.append(annotation(anchor_id, satellite_id, kind))
    return snapshot(ids, edges)

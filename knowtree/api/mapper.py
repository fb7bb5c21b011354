"""
Payload Mapper
==============

Converts wire payloads into contracts, and layout results back into
plain JSON-ready dicts.

MAPPING RULES:
==============
1. Edges appear on both endpoints' lists; each is kept once, by id
2. Edge order: every node's edgesFrom in node order, then any edge
   seen only in an edgesTo list
3. Node order is preserved
"""

from typing import Any, Dict, Iterable, List, Optional

from ..contracts.base import Timestamp
from ..contracts.graph import EdgeRecord, GraphSnapshot, NodeRecord, RelationKind
from ..contracts.decisions import EdgeDecision
from ..visualization.camera import Camera
from ..visualization.pipeline import LayoutResult
from .schemas import CameraPayload, NodePayload, SnapshotPayload


def snapshot_from_payload(nodes: Iterable[NodePayload]) -> GraphSnapshot:
    nodes = list(nodes)
    records: List[NodeRecord] = []
    edges: Dict[str, EdgeRecord] = {}

    for node in nodes:
        records.append(NodeRecord(
            node_id=node.id,
            title=node.title,
            content=node.content,
            created_at=Timestamp(node.created_at) if node.created_at else None,
        ))

    # Outgoing lists first, so a parent's children keep its edgesFrom order
    # even when a child is listed before its parent
    payloads = [e for node in nodes for e in node.edges_from]
    payloads += [e for node in nodes for e in node.edges_to]
    for edge in payloads:
        if edge.id in edges:
            continue
        edges[edge.id] = EdgeRecord(
            edge_id=edge.id,
            from_node_id=edge.from_node_id,
            to_node_id=edge.to_node_id,
            kind=RelationKind.parse(edge.type),
            weight=edge.weight,
        )

    return GraphSnapshot.of(records, edges.values())


def parse_snapshot(data: Any) -> GraphSnapshot:
    """Accept either a bare list of nodes or {"nodes": [...]}."""
    if isinstance(data, list):
        data = {"nodes": data}
    payload = SnapshotPayload.model_validate(data)
    return snapshot_from_payload(payload.nodes)


def parse_camera(data: Optional[Dict[str, Any]]) -> Optional[Camera]:
    if not data:
        return None
    payload = CameraPayload.model_validate(data)
    return Camera(x=payload.x, y=payload.y, ratio=payload.ratio)


def decision_to_dict(decision: EdgeDecision) -> Dict[str, Any]:
    if decision.accepted:
        return {
            "accepted": True,
            "fromNodeId": decision.from_node_id,
            "toNodeId": decision.to_node_id,
            "type": decision.kind.value,
        }
    return {
        "accepted": False,
        "reason": decision.reason.value,
        "message": decision.message,
    }


def layout_to_dict(result: LayoutResult) -> Dict[str, Any]:
    camera = result.camera
    return {
        "viewId": result.view.view_id,
        "nodes": [
            {
                "id": n.node_id,
                "x": n.x,
                "y": n.y,
                "size": n.size,
                "color": n.color,
                "label": n.label,
                "forceLabel": n.force_label,
                "isSatellite": n.is_satellite,
                "fallback": n.is_fallback,
                "zIndex": n.z_index,
            }
            for n in result.view.nodes
        ],
        "edges": [
            {
                "id": e.edge_id,
                "source": e.source_id,
                "target": e.target_id,
                "type": e.kind.value,
                "size": e.size,
                "color": e.color,
                "zIndex": e.z_index,
            }
            for e in result.view.edges
        ],
        "camera": (
            {"x": camera.x, "y": camera.y, "ratio": camera.ratio}
            if camera else None
        ),
        "diagnostics": [
            {
                "event": d.event_type.value,
                "subject": d.subject_id,
                "message": d.message,
            }
            for d in result.diagnostics
        ],
    }

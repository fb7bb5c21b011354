"""
Snapshot to View Pipeline

SINGLE POINT OF CONVERSION:
===========================
compute_layout() is the only path from a GraphSnapshot to a renderable
NetworkGraphView. It runs role resolution, placement, encoding and
camera framing in that order, and returns the camera for the caller to
thread into the next call.
"""

from __future__ import annotations
from dataclasses import dataclass
from typing import Optional, Set, Tuple
import random

from ..contracts.base import generate_id
from ..contracts.graph import GraphSnapshot
from ..core.roles import SatelliteRole, partition_roles, parent_degree, structural_degree
from ..interaction import LinkSelection, NO_SELECTION
from ..observability import DiagnosticsCollector, DiagnosticEntry, DiagnosticEventType
from .graph import GraphNode, GraphEdge, NetworkGraphView
from .layout import TreeLayoutEngine, LayoutConfig, Placement
from .encoding import node_style, edge_style
from .camera import Camera, CameraConfig, Viewport, resolve_camera


@dataclass(frozen=True)
class LayoutResult:
    """One rendered frame."""
    view: NetworkGraphView
    camera: Optional[Camera]
    diagnostics: Tuple[DiagnosticEntry, ...] = ()
    placements: Tuple[Tuple[str, Placement], ...] = ()

    @property
    def is_empty(self) -> bool:
        return self.view.is_empty

    def placement(self, node_id: str) -> Optional[Placement]:
        for nid, placement in self.placements:
            if nid == node_id:
                return placement
        return None


EMPTY_VIEW = NetworkGraphView(view_id="view_empty", nodes=(), edges=())


def compute_layout(
    snapshot: GraphSnapshot,
    previous_camera: Optional[Camera] = None,
    selection: LinkSelection = NO_SELECTION,
    viewport: Optional[Viewport] = None,
    rng: Optional[random.Random] = None,
    layout_config: Optional[LayoutConfig] = None,
    camera_config: Optional[CameraConfig] = None
) -> LayoutResult:
    """
    Lay out the full snapshot.

    An empty snapshot yields an empty view and no camera, so the next
    non-empty frame is framed afresh.
    """
    if snapshot.is_empty:
        return LayoutResult(view=EMPTY_VIEW, camera=None)

    camera_config = camera_config or CameraConfig()
    viewport = viewport or camera_config.viewport
    diagnostics = DiagnosticsCollector()

    roles = partition_roles(snapshot)
    placements = TreeLayoutEngine(layout_config).place(snapshot, roles, rng, diagnostics)

    nodes = []
    for record in snapshot.nodes:
        role = roles.role_of(record.node_id)
        placement = placements[record.node_id]
        style = node_style(
            record.node_id,
            role.kind if isinstance(role, SatelliteRole) else None,
            structural_degree(snapshot, record.node_id),
            parent_degree(snapshot, record.node_id),
            selection,
        )
        nodes.append(GraphNode(
            node_id=record.node_id,
            x=placement.x,
            y=placement.y,
            size=style.size,
            color=style.color,
            label="" if role.is_satellite else record.title,
            is_satellite=role.is_satellite,
            is_fallback=placement.is_fallback,
            z_index=style.z_index,
        ))

    edges = _drawable_edges(snapshot, diagnostics)

    camera, preserved = resolve_camera(
        ((n.x, n.y) for n in nodes), previous_camera, viewport, camera_config
    )
    diagnostics.record(
        DiagnosticEventType.CAMERA_PRESERVED if preserved else DiagnosticEventType.CAMERA_FRAMED,
        "camera",
        "Kept previous camera" if preserved else "Framed camera to fit all nodes",
        ratio=round(camera.ratio, 6) if camera else "",
    )

    view = NetworkGraphView(
        view_id=generate_id("view", *snapshot.node_ids),
        nodes=tuple(nodes),
        edges=edges,
    )
    return LayoutResult(
        view=view,
        camera=camera,
        diagnostics=diagnostics.snapshot(),
        placements=tuple(placements.items()),
    )


def _drawable_edges(
    snapshot: GraphSnapshot,
    diagnostics: DiagnosticsCollector
) -> Tuple[GraphEdge, ...]:
    """One edge per (from, to) pair; edges to missing nodes are skipped."""
    for edge in snapshot.dangling_edges():
        diagnostics.record(
            DiagnosticEventType.DANGLING_EDGE,
            edge.edge_id,
            "Edge references a node missing from the snapshot",
            from_node_id=edge.from_node_id,
            to_node_id=edge.to_node_id,
        )

    seen: Set[Tuple[str, str]] = set()
    edges = []
    for record in snapshot.nodes:
        for edge in snapshot.edges_from(record.node_id):
            if edge.pair_key in seen or not snapshot.has_node(edge.to_node_id):
                continue
            style = edge_style(edge.kind)
            edges.append(GraphEdge(
                edge_id=edge.edge_id,
                source_id=edge.from_node_id,
                target_id=edge.to_node_id,
                kind=edge.kind,
                size=style.size,
                color=style.color,
                z_index=style.z_index,
            ))
            seen.add(edge.pair_key)
    return tuple(edges)

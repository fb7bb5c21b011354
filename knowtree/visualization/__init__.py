"""
Visualization Layer

RESPONSIBILITY: Positions, visual encoding and camera framing
ALLOWED INPUTS: GraphSnapshot, LinkSelection, previous Camera
OUTPUTS: LayoutResult (NetworkGraphView + Camera + diagnostics)

WHAT THIS LAYER MUST NOT DO:
============================
- Decide whether edges are legal
- Mutate the snapshot
- Keep state between calls (the camera is threaded by the caller)
"""

from .graph import GraphNode, GraphEdge, NetworkGraphView
from .layout import TreeLayoutEngine, LayoutConfig, Placement
from .camera import Camera, CameraConfig, Viewport, frame_camera, resolve_camera
from .encoding import node_style, edge_style, highlight_color
from .pipeline import LayoutResult, compute_layout

__all__ = [
    'GraphNode', 'GraphEdge', 'NetworkGraphView',
    'TreeLayoutEngine', 'LayoutConfig', 'Placement',
    'Camera', 'CameraConfig', 'Viewport', 'frame_camera', 'resolve_camera',
    'node_style', 'edge_style', 'highlight_color',
    'LayoutResult', 'compute_layout',
]

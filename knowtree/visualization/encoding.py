"""
Visual Encoding
===============

Colour, size and stacking order as pure functions of role, degree and
selection. Nothing here is persisted.

NODE ENCODING:
- Satellites: fixed colour per annotation kind, small fixed size
- Hierarchy: 3-tier colour ramp by structural degree, size by parent degree
- Selection overrides both
"""

from __future__ import annotations
from dataclasses import dataclass
from typing import Dict, Optional

from ..contracts.graph import RelationKind
from ..interaction import LinkSelection, NO_SELECTION


# =============================================================================
# PALETTE
# =============================================================================

HIERARCHY_BASE = "#5D0E41"
HIERARCHY_MEDIUM = "#A0153E"
HIERARCHY_HIGH = "#FF204E"

SELECTED_SOURCE = "#FFFFFF"
SELECTED_TARGET = "#FFD700"

KIND_COLORS: Dict[RelationKind, str] = {
    RelationKind.PARENT: "#FF6B9D",
    RelationKind.EXAMPLE: "#00D9FF",
    RelationKind.CONTRADICTION: "#FFB800",
    RelationKind.REFERENCE: "#64F991",
}

LIGHTER: Dict[str, str] = {
    HIERARCHY_BASE: "#8B1A5F",
    HIERARCHY_MEDIUM: "#C91F51",
    HIERARCHY_HIGH: "#FF4D73",
}

SATELLITE_SIZE = 6.0
MIN_NODE_SIZE = 8.0
MAX_NODE_SIZE = 15.0
SELECTION_SCALE = 1.8

SATELLITE_Z = 5
HIERARCHY_Z = 10


@dataclass(frozen=True)
class NodeStyle:
    color: str
    size: float
    z_index: int


@dataclass(frozen=True)
class EdgeStyle:
    color: str
    size: float
    z_index: int


def hierarchy_color(structural_degree: int) -> str:
    if structural_degree > 5:
        return HIERARCHY_HIGH
    if structural_degree > 2:
        return HIERARCHY_MEDIUM
    return HIERARCHY_BASE


def hierarchy_size(parent_degree: int) -> float:
    return float(min(MAX_NODE_SIZE, max(MIN_NODE_SIZE, parent_degree * 2 + 8)))


def node_style(
    node_id: str,
    satellite_kind: Optional[RelationKind],
    structural_degree: int,
    parent_degree: int,
    selection: LinkSelection = NO_SELECTION
) -> NodeStyle:
    """
    Style for one node.

    satellite_kind is None for hierarchy nodes.
    """
    if satellite_kind is not None:
        color = KIND_COLORS[satellite_kind]
        size = SATELLITE_SIZE
        z_index = SATELLITE_Z
    else:
        color = hierarchy_color(structural_degree)
        size = hierarchy_size(parent_degree)
        z_index = HIERARCHY_Z

    if selection.is_source(node_id):
        color = SELECTED_SOURCE
    elif selection.is_target(node_id):
        color = SELECTED_TARGET

    if selection.is_highlighted(node_id):
        size = size * SELECTION_SCALE

    return NodeStyle(color=color, size=size, z_index=z_index)


def edge_style(kind: RelationKind) -> EdgeStyle:
    if kind.is_annotation:
        return EdgeStyle(color=KIND_COLORS[kind], size=2.5, z_index=3)
    return EdgeStyle(color=KIND_COLORS[kind], size=1.5, z_index=1)


def highlight_color(
    node_id: str,
    base_color: str,
    selection: LinkSelection = NO_SELECTION
) -> str:
    """Colour shown while the pointer is over a node."""
    if selection.link_mode:
        if selection.is_source(node_id):
            return base_color
        return SELECTED_TARGET
    return LIGHTER.get(base_color, base_color)

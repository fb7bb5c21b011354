"""
Tree Layout Engine
==================

Deterministic placement of every node in the snapshot.

PIPELINE:
=========
1. Subtree widths: proportional horizontal reservation per node
2. Recursive partition: each root gets a band, children split it
3. Satellites: evenly on a circle around their anchor
4. Overlap relaxation: bounded pushes away from crowded neighbours
5. Fallback: random point for anything still unplaced

Only step 5 is random, and it draws from the injected generator.
"""

from __future__ import annotations
from dataclasses import dataclass
from typing import Dict, List, Optional, Tuple
import math
import random

import networkx as nx

from ..contracts.graph import GraphSnapshot
from ..core.roles import RoleMap, SatelliteRole
from ..core.topology import ParentForest
from ..observability import DiagnosticsCollector, DiagnosticEventType


@dataclass
class LayoutConfig:
    """Layout constants. Distances are in graph units."""
    row_height: float = 250.0
    top_margin: float = 100.0
    root_spacing: float = 800.0
    root_unit_width: float = 250.0
    min_node_spacing: float = 300.0
    leaf_width: float = 1.0
    satellite_width: float = 1.5
    satellite_radius: float = 120.0
    min_distance: float = 100.0
    push_distance: float = 50.0
    max_overlap_attempts: int = 10
    fallback_extent: float = 800.0
    fallback_seed: Optional[int] = None


@dataclass(frozen=True)
class Placement:
    """Where a node ended up, and how it got there."""
    x: float
    y: float
    is_fallback: bool = False
    overlap_attempts: int = 0
    residual_overlap: bool = False


class TreeLayoutEngine:
    """
    Computes positions for a snapshot.

    Stateless between calls; every call recomputes from scratch.
    """

    def __init__(self, config: Optional[LayoutConfig] = None):
        self._config = config or LayoutConfig()

    @property
    def config(self) -> LayoutConfig:
        return self._config

    def place(
        self,
        snapshot: GraphSnapshot,
        roles: RoleMap,
        rng: Optional[random.Random] = None,
        diagnostics: Optional[DiagnosticsCollector] = None
    ) -> Dict[str, Placement]:
        """Return a Placement for every node of the snapshot, in snapshot order."""
        diagnostics = diagnostics or DiagnosticsCollector()
        rng = rng or random.Random(self._config.fallback_seed)

        forest = ParentForest.build(snapshot, members=roles.hierarchy_ids)
        positions = self._place_hierarchy(forest, roles)
        placements: Dict[str, Placement] = {
            nid: Placement(x, y) for nid, (x, y) in positions.items()
        }

        for node_id, point in self._place_satellites(roles, positions).items():
            placements[node_id] = self._relax(node_id, point, positions, diagnostics)
            positions[node_id] = (placements[node_id].x, placements[node_id].y)

        result: Dict[str, Placement] = {}
        for node_id in snapshot.node_ids:
            placement = placements.get(node_id)
            if placement is None:
                placement = Placement(
                    x=rng.random() * self._config.fallback_extent,
                    y=rng.random() * self._config.fallback_extent,
                    is_fallback=True,
                )
                diagnostics.record(
                    DiagnosticEventType.FALLBACK_PLACEMENT,
                    node_id,
                    "Node could not be placed; using fallback position",
                    x=round(placement.x, 3),
                    y=round(placement.y, 3),
                )
            result[node_id] = placement
        return result

    # =========================================================================
    # HIERARCHY
    # =========================================================================

    def subtree_widths(self, forest: ParentForest, roles: RoleMap) -> Dict[str, float]:
        """
        Width units for every node reachable from a root.

        Post-order over the forest, so children are sized before their
        parent. A child not yet sized when its parent is reached sits on
        the current DFS path (an existing cycle) and is left out.
        """
        widths: Dict[str, float] = {}
        for root in forest.roots():
            for node_id in nx.dfs_postorder_nodes(forest.graph, source=root):
                if node_id in widths:
                    continue
                own = self._config.satellite_width if roles.satellite_count(node_id) else self._config.leaf_width
                children = [c for c in forest.children(node_id) if c in widths]
                total = sum(widths[c] for c in children)
                widths[node_id] = max(total, own) if children else own
        return widths

    def _place_hierarchy(
        self,
        forest: ParentForest,
        roles: RoleMap
    ) -> Dict[str, Tuple[float, float]]:
        """
        Assign each reachable node the centre of its band.

        Work-list of (node, depth, left, right); children are pushed in
        reverse so bands are claimed in depth-first, left-to-right order.
        """
        widths = self.subtree_widths(forest, roles)
        positions: Dict[str, Tuple[float, float]] = {}

        stack: List[Tuple[str, int, float, float]] = []
        for index, root in reversed(list(enumerate(forest.roots()))):
            tree_width = widths[root] * self._config.root_unit_width
            center = index * self._config.root_spacing
            stack.append((root, 0, center - tree_width / 2, center + tree_width / 2))

        while stack:
            node_id, depth, left, right = stack.pop()
            if node_id in positions:
                continue

            y = depth * self._config.row_height + self._config.top_margin
            positions[node_id] = ((left + right) / 2, y)

            children = [c for c in forest.children(node_id) if c in widths]
            if not children:
                continue

            total = sum(widths[c] for c in children)
            # Narrow bands still get the minimum spacing and spill to the right
            spacing = max((right - left) / total, self._config.min_node_spacing)

            bands = []
            cursor = left
            for child_id in children:
                child_right = cursor + widths[child_id] * spacing
                bands.append((child_id, depth + 1, cursor, child_right))
                cursor = child_right
            stack.extend(reversed(bands))
        return positions

    # =========================================================================
    # SATELLITES
    # =========================================================================

    def satellite_angle(self, index: int, count: int) -> float:
        """Angle in radians of the index-th of count satellites, clockwise from the top."""
        return -math.pi / 2 + index * (2 * math.pi / count)

    def _place_satellites(
        self,
        roles: RoleMap,
        positions: Dict[str, Tuple[float, float]]
    ) -> Dict[str, Tuple[float, float]]:
        placed: Dict[str, Tuple[float, float]] = {}
        radius = self._config.satellite_radius

        for node_id in roles.satellite_ids:
            role = roles.role_of(node_id)
            if not isinstance(role, SatelliteRole):
                continue
            anchor = positions.get(role.anchor_id)
            if anchor is None:
                continue

            siblings = roles.satellites_by_anchor[role.anchor_id]
            angle = self.satellite_angle(siblings.index(node_id), len(siblings))
            placed[node_id] = (
                anchor[0] + math.cos(angle) * radius,
                anchor[1] + math.sin(angle) * radius,
            )
        return placed

    def _relax(
        self,
        node_id: str,
        point: Tuple[float, float],
        positions: Dict[str, Tuple[float, float]],
        diagnostics: DiagnosticsCollector
    ) -> Placement:
        """
        Push a satellite away from every placed node closer than min_distance.

        Best effort: gives up after max_overlap_attempts passes.
        """
        x, y = point
        attempts = 0
        overlapping = True

        while overlapping and attempts < self._config.max_overlap_attempts:
            overlapping = False
            for other_id, (ox, oy) in positions.items():
                if other_id == node_id:
                    continue
                dx = x - ox
                dy = y - oy
                if math.hypot(dx, dy) < self._config.min_distance:
                    overlapping = True
                    push = math.atan2(dy, dx)
                    x += math.cos(push) * self._config.push_distance
                    y += math.sin(push) * self._config.push_distance
            attempts += 1

        residual = self._crowded(node_id, x, y, positions)
        if residual:
            diagnostics.record(
                DiagnosticEventType.RESIDUAL_OVERLAP,
                node_id,
                "Overlap remains after relaxation budget",
                attempts=attempts,
            )
        return Placement(x=x, y=y, overlap_attempts=attempts, residual_overlap=residual)

    def _crowded(
        self,
        node_id: str,
        x: float,
        y: float,
        positions: Dict[str, Tuple[float, float]]
    ) -> bool:
        return any(
            math.hypot(x - ox, y - oy) < self._config.min_distance
            for other_id, (ox, oy) in positions.items()
            if other_id != node_id
        )

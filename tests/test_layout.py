"""
Tree Layout Engine Tests
========================

Checks subtree widths, recursive band partition, satellite placement,
bounded overlap relaxation and the fallback branch.
"""

import math
import random

import pytest

from knowtree.contracts.graph import RelationKind
from knowtree.core.roles import partition_roles
from knowtree.core.topology import ParentForest
from knowtree.observability import DiagnosticsCollector, DiagnosticEventType
from knowtree.visualization.layout import TreeLayoutEngine, LayoutConfig

from tests.fixtures import (
    snapshot, parent, annotation,
    scenario_root_with_two_children, synthetic_tree_with_satellites,
)


def place(snap, config=None, rng=None, diagnostics=None):
    engine = TreeLayoutEngine(config)
    return engine.place(snap, partition_roles(snap), rng=rng, diagnostics=diagnostics)


class TestSubtreeWidths:

    def test_leaf_and_parent_widths(self):
        snap = scenario_root_with_two_children()
        roles = partition_roles(snap)
        widths = TreeLayoutEngine().subtree_widths(ParentForest.build(snap), roles)
        assert widths == {"A": 2.0, "B": 1.0, "C": 1.0}

    def test_satellites_widen_their_anchor(self):
        snap = snapshot("ABS", [parent("A", "B"), annotation("B", "S")])
        roles = partition_roles(snap)
        widths = TreeLayoutEngine().subtree_widths(
            ParentForest.build(snap, members=roles.hierarchy_ids), roles
        )
        assert widths["B"] == 1.5
        # max(children, own): the single wide child dominates
        assert widths["A"] == 1.5


class TestHierarchyPlacement:

    def test_deep_chain_widths_and_rows(self):
        ids = [f"n{i}" for i in range(2000)]
        snap = snapshot(ids, [parent(ids[i], ids[i + 1]) for i in range(len(ids) - 1)])
        widths = TreeLayoutEngine().subtree_widths(ParentForest.build(snap), partition_roles(snap))
        assert set(widths.values()) == {1.0}

        placements = place(snap)
        assert placements["n1999"].y == 1999 * 250.0 + 100.0
        assert not any(p.is_fallback for p in placements.values())

    def test_cycle_below_a_root_terminates(self):
        snap = snapshot("RAB", [parent("R", "A"), parent("A", "B"), parent("B", "A")])
        placements = place(snap)
        assert [placements[n].y for n in "RAB"] == [100.0, 350.0, 600.0]
        assert not any(p.is_fallback for p in placements.values())

    def test_root_and_children(self):
        placements = place(scenario_root_with_two_children())

        assert (placements["A"].x, placements["A"].y) == pytest.approx((0.0, 100.0))
        # Band [-250, 250] is narrower than 2 * 300, so children spill right
        assert (placements["B"].x, placements["B"].y) == pytest.approx((-100.0, 350.0))
        assert (placements["C"].x, placements["C"].y) == pytest.approx((200.0, 350.0))

    def test_rows_follow_depth(self):
        snap = snapshot("ABCD", [parent("A", "B"), parent("B", "C"), parent("C", "D")])
        placements = place(snap)
        assert [placements[n].y for n in "ABCD"] == [100.0, 350.0, 600.0, 850.0]

    def test_forest_roots_spaced_apart(self):
        snap = snapshot("ABCX", [parent("A", "B"), parent("A", "C")])
        placements = place(snap)
        assert (placements["X"].x, placements["X"].y) == pytest.approx((800.0, 100.0))
        assert not any(p.is_fallback for p in placements.values())

    def test_every_node_placed_in_snapshot_order(self):
        snap = synthetic_tree_with_satellites()
        placements = place(snap)
        assert list(placements) == list(snap.node_ids)


class TestSatellites:

    def test_three_satellites_at_fixed_angles(self):
        """Satellites start at the top and go clockwise in equal steps."""
        snap = snapshot(["A", "s1", "s2", "s3"], [
            annotation("A", "s1"),
            annotation("A", "s2", RelationKind.EXAMPLE),
            annotation("A", "s3", RelationKind.CONTRADICTION),
        ])
        placements = place(snap)
        anchor = placements["A"]

        angles = []
        for sid in ("s1", "s2", "s3"):
            p = placements[sid]
            assert math.hypot(p.x - anchor.x, p.y - anchor.y) == pytest.approx(120.0)
            angles.append(math.degrees(math.atan2(p.y - anchor.y, p.x - anchor.x)))

        assert angles == pytest.approx([-90.0, 30.0, 150.0])

    def test_satellite_angle(self):
        engine = TreeLayoutEngine()
        assert engine.satellite_angle(0, 4) == pytest.approx(-math.pi / 2)
        assert engine.satellite_angle(1, 4) == pytest.approx(0.0)

    def test_crowded_satellite_is_pushed_out(self):
        config = LayoutConfig(satellite_radius=60.0)
        placements = place(snapshot(["A", "s"], [annotation("A", "s")]), config)

        s = placements["s"]
        # (0, 40) is 60 from the anchor; one push of 50 straight up
        assert (s.x, s.y) == pytest.approx((0.0, -10.0))
        assert s.overlap_attempts == 2
        assert s.residual_overlap is False

    def test_residual_overlap_is_reported(self):
        config = LayoutConfig(satellite_radius=10.0, max_overlap_attempts=1)
        diagnostics = DiagnosticsCollector()
        placements = place(snapshot(["A", "s"], [annotation("A", "s")]), config, diagnostics=diagnostics)

        s = placements["s"]
        assert s.overlap_attempts == 1
        assert s.residual_overlap is True
        entries = diagnostics.get_entries(DiagnosticEventType.RESIDUAL_OVERLAP)
        assert [e.subject_id for e in entries] == ["s"]

    def test_relaxation_is_bounded(self):
        placements = place(synthetic_tree_with_satellites())
        assert all(p.overlap_attempts <= 10 for p in placements.values())

    def test_no_overlaps_in_synthetic_tree(self):
        """
        No two nodes closer than 100 units, unless a satellite in the pair
        reports a residual overlap.
        """
        placements = place(synthetic_tree_with_satellites())
        items = list(placements.items())
        violations = []
        for i, (a_id, a) in enumerate(items):
            for b_id, b in items[i + 1:]:
                if math.hypot(a.x - b.x, a.y - b.y) < 100.0:
                    if not (a.residual_overlap or b.residual_overlap):
                        violations.append((a_id, b_id))
        assert violations == []


class TestFallback:

    def test_satellite_of_satellite_falls_back(self):
        snap = snapshot(["A", "s1", "s2"], [annotation("A", "s1"), annotation("s1", "s2")])
        diagnostics = DiagnosticsCollector()
        placements = place(snap, rng=random.Random(42), diagnostics=diagnostics)

        s2 = placements["s2"]
        assert s2.is_fallback is True
        assert 0.0 <= s2.x < 800.0 and 0.0 <= s2.y < 800.0
        assert placements["s1"].is_fallback is False
        assert [e.subject_id for e in diagnostics.get_entries(DiagnosticEventType.FALLBACK_PLACEMENT)] == ["s2"]

    def test_seeded_fallback_is_repeatable(self):
        snap = snapshot("AB", [parent("A", "B"), parent("B", "A")])
        first = place(snap, rng=random.Random(7))
        second = place(snap, rng=random.Random(7))

        # A pure cycle has no root, so nothing is placed by the tree pass
        assert all(p.is_fallback for p in first.values())
        assert first == second

    def test_config_seed_used_without_rng(self):
        snap = snapshot(["A", "s1", "s2"], [annotation("A", "s1"), annotation("s1", "s2")])
        config = LayoutConfig(fallback_seed=3)
        assert place(snap, config)["s2"] == place(snap, config)["s2"]

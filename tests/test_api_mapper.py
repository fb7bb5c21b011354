"""
Payload Mapper Tests
"""

import pytest
from pydantic import ValidationError

from knowtree.api.mapper import parse_snapshot, parse_camera, decision_to_dict, layout_to_dict
from knowtree.contracts.graph import RelationKind
from knowtree.core.validator import validate_proposed_edge
from knowtree.visualization.camera import Camera
from knowtree.visualization.pipeline import compute_layout


EDGE = {"id": "e1", "type": "parent", "fromNodeId": "A", "toNodeId": "B"}

PAYLOAD = [
    {"id": "A", "title": "Alpha", "createdAt": "2026-01-01T00:00:00Z", "edgesFrom": [EDGE]},
    {"id": "B", "title": "Beta", "edgesTo": [EDGE]},
    {"id": "C", "title": "Gamma"},
]


class TestParsing:

    def test_edges_kept_once(self):
        snapshot = parse_snapshot(PAYLOAD)
        assert snapshot.node_ids == ("A", "B", "C")
        assert len(snapshot.edges) == 1
        assert snapshot.edges[0].kind == RelationKind.PARENT

    def test_wrapped_form(self):
        assert parse_snapshot({"nodes": PAYLOAD}).node_ids == ("A", "B", "C")

    def test_missing_type_defaults_to_reference(self):
        edge = {"id": "e2", "fromNodeId": "A", "toNodeId": "C"}
        snapshot = parse_snapshot([{"id": "A", "title": "Alpha", "edgesFrom": [edge]},
                                   {"id": "C", "title": "Gamma"}])
        assert snapshot.edges[0].kind == RelationKind.REFERENCE

    def test_created_at_parsed(self):
        node = parse_snapshot(PAYLOAD).get_node("A")
        assert node.created_at.value.year == 2026

    def test_empty_title_rejected(self):
        with pytest.raises(ValidationError):
            parse_snapshot([{"id": "A", "title": ""}])

    def test_unknown_edge_type_rejected(self):
        bad = dict(EDGE, type="sibling")
        with pytest.raises(ValueError):
            parse_snapshot([{"id": "A", "title": "Alpha", "edgesFrom": [bad]}])

    def test_camera(self):
        assert parse_camera(None) is None
        assert parse_camera({"x": 1, "y": 2, "ratio": 1.5}) == Camera(1.0, 2.0, 1.5)
        with pytest.raises(ValidationError):
            parse_camera({"x": 1, "y": 2, "ratio": 0})


class TestSerialization:

    def test_decisions(self):
        snapshot = parse_snapshot(PAYLOAD)

        accepted = decision_to_dict(validate_proposed_edge(snapshot, "C", "A", "reference"))
        assert accepted == {"accepted": True, "fromNodeId": "A", "toNodeId": "C", "type": "reference"}

        rejected = decision_to_dict(validate_proposed_edge(snapshot, "B", "A", "child"))
        assert rejected["accepted"] is False
        assert rejected["reason"] == "cycle"

    def test_layout(self):
        data = layout_to_dict(compute_layout(parse_snapshot(PAYLOAD)))

        assert [n["id"] for n in data["nodes"]] == ["A", "B", "C"]
        assert all(n["forceLabel"] for n in data["nodes"])
        assert data["edges"][0]["source"] == "A"
        assert data["edges"][0]["type"] == "parent"
        assert data["camera"]["ratio"] >= 1.2
        assert data["diagnostics"][-1]["event"] == "camera_framed"

    def test_satellites_not_force_labelled(self):
        edge = {"id": "e1", "type": "reference", "fromNodeId": "A", "toNodeId": "S"}
        data = layout_to_dict(compute_layout(parse_snapshot([
            {"id": "A", "title": "Alpha", "edgesFrom": [edge]},
            {"id": "S", "title": "Source", "edgesTo": [edge]},
        ])))
        flags = {n["id"]: n["forceLabel"] for n in data["nodes"]}
        assert flags == {"A": True, "S": False}


class TestEdgeOrder:

    def test_children_follow_parent_edges_from_order(self):
        """A child listed before its parent does not change sibling order."""
        to_first = {"id": "e1", "type": "parent", "fromNodeId": "P", "toNodeId": "C1"}
        to_second = {"id": "e2", "type": "parent", "fromNodeId": "P", "toNodeId": "C2"}
        snapshot = parse_snapshot([
            {"id": "C1", "title": "One", "edgesTo": [to_first]},
            {"id": "C2", "title": "Two", "edgesTo": [to_second]},
            {"id": "P", "title": "Parent", "edgesFrom": [to_second, to_first]},
        ])

        assert [e.to_node_id for e in snapshot.edges_from("P")] == ["C2", "C1"]
        positions = compute_layout(snapshot).view.positions()
        assert positions["C2"][0] < positions["C1"][0]

    def test_edges_only_listed_as_incoming_are_kept(self):
        edge = {"id": "e1", "type": "example", "fromNodeId": "A", "toNodeId": "B"}
        snapshot = parse_snapshot([
            {"id": "A", "title": "Alpha"},
            {"id": "B", "title": "Beta", "edgesTo": [edge]},
        ])
        assert [e.edge_id for e in snapshot.edges] == ["e1"]

"""
Topology Engine Tests
=====================

Forest construction over PARENT edges and the ancestor walk used for
cycle prevention.
"""

import networkx as nx

from knowtree.core.topology import ParentForest, parent_links, reaches_ancestor

from tests.fixtures import snapshot, parent, annotation, synthetic_tree


class TestParentForest:

    def test_roots_and_children_follow_snapshot_order(self):
        snap = snapshot("XACB", [parent("A", "C"), parent("A", "B")])
        forest = ParentForest.build(snap)

        assert forest.roots() == ["X", "A"]
        assert forest.children("A") == ["C", "B"]
        assert forest.children("missing") == []

    def test_annotation_edges_are_ignored(self):
        snap = snapshot("AS", [annotation("A", "S")])
        forest = ParentForest.build(snap)
        assert forest.graph.number_of_edges() == 0
        assert forest.roots() == ["A", "S"]

    def test_members_restrict_the_forest(self):
        snap = snapshot("ABC", [parent("A", "B"), parent("B", "C")])
        forest = ParentForest.build(snap, members=["A", "C"])
        # B is excluded, so C loses its parent link and becomes a root
        assert forest.roots() == ["A", "C"]

    def test_metrics(self):
        ids, edges = synthetic_tree(3, 3)
        metrics = ParentForest.build(snapshot(ids, edges)).compute_metrics()

        assert metrics.node_count == 40
        assert metrics.edge_count == 39
        assert metrics.root_count == 1
        assert metrics.depth == 3
        assert metrics.is_acyclic is True

    def test_cycle_detected(self):
        forest = ParentForest.build(snapshot("AB", [parent("A", "B"), parent("B", "A")]))
        assert forest.is_acyclic() is False
        assert forest.compute_metrics().depth == 0
        assert isinstance(forest.graph, nx.DiGraph)


class TestAncestorWalk:

    def test_parent_links_map_child_to_parents(self):
        snap = snapshot("ABC", [parent("A", "B"), parent("B", "C"), annotation("A", "C")])
        assert parent_links(snap) == {"B": ("A",), "C": ("B",)}

    def test_reaches_ancestor(self):
        links = {"B": ("A",), "C": ("B",)}
        assert reaches_ancestor(links, "C", "A")
        assert reaches_ancestor(links, "C", "C")
        assert not reaches_ancestor(links, "A", "C")

    def test_walk_survives_cycles(self):
        links = {"A": ("B",), "B": ("A",)}
        assert not reaches_ancestor(links, "A", "Z")

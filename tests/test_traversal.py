from __future__ import annotations

from trail_graph.graph.implied import apply_implied_rules
from trail_graph.graph.traversal import build_incoming_map, compute_ancestors
from trail_graph.relations.models import AncestorNode

from tests.helpers import edge, relation


def test_linear_ancestors_in_bfs_order():
    edges = [edge("A.md", "B.md", "up"), edge("B.md", "C.md", "up")]
    # ancestors walk incoming edges: who points at the start
    result = compute_ancestors("C.md", edges)
    assert [(n.path, n.depth) for n in result] == [("B.md", 1), ("A.md", 2)]
    assert result[0] == AncestorNode(path="B.md", depth=1, via_relation_uid="up", implied=False)


def test_start_is_not_emitted():
    edges = [edge("A.md", "B.md", "up")]
    assert [n.path for n in compute_ancestors("B.md", edges)] == ["A.md"]
    assert compute_ancestors("A.md", edges) == []


def test_unknown_path_yields_empty():
    assert compute_ancestors("nope.md", [edge("A.md", "B.md", "up")]) == []


def test_two_cycle_terminates_without_repeats():
    edges = [edge("A.md", "B.md", "up"), edge("B.md", "A.md", "up")]
    result = compute_ancestors("A.md", edges)
    assert [n.path for n in result] == ["B.md"]


def test_longer_cycle():
    edges = [edge("A.md", "B.md", "r"), edge("B.md", "C.md", "r"), edge("C.md", "A.md", "r")]
    paths = [n.path for n in compute_ancestors("A.md", edges)]
    assert paths == ["C.md", "B.md"]
    assert len(paths) == len(set(paths))


def test_path_reached_by_two_relations_emitted_once():
    edges = [edge("A.md", "C.md", "up"), edge("A.md", "C.md", "parent"), edge("B.md", "C.md", "up")]
    result = compute_ancestors("C.md", edges)
    assert [(n.path, n.via_relation_uid) for n in result] == [("A.md", "up"), ("B.md", "up")]


def test_relation_filter():
    edges = [edge("A.md", "C.md", "up"), edge("B.md", "C.md", "related"), edge("X.md", "A.md", "up")]
    result = compute_ancestors("C.md", edges, {"up"})
    assert [n.path for n in result] == ["A.md", "X.md"]


def test_empty_filter_accepts_all():
    edges = [edge("A.md", "C.md", "up"), edge("B.md", "C.md", "related")]
    assert len(compute_ancestors("C.md", edges, set())) == 2


def test_shallowest_depth_wins():
    edges = [
        edge("B.md", "D.md", "up"),
        edge("A.md", "B.md", "up"),
        edge("A.md", "D.md", "up"),
    ]
    result = {n.path: n.depth for n in compute_ancestors("D.md", edges)}
    assert result == {"B.md": 1, "A.md": 1}


def test_implied_edges_carry_provenance():
    edges = apply_implied_rules([edge("P.md", "C.md", "down")], [relation("down", ("up", "reverse"))])
    result = compute_ancestors("P.md", edges, {"up"})
    assert result == [AncestorNode(path="C.md", depth=1, via_relation_uid="up", implied=True, implied_from_uid="down")]


def test_accepts_prebuilt_incoming_map():
    edges = [edge("A.md", "B.md", "up"), edge("B.md", "C.md", "up")]
    incoming = build_incoming_map(edges)
    assert compute_ancestors("C.md", incoming) == compute_ancestors("C.md", edges)
    assert [e.from_path for e in incoming["B.md"]] == ["A.md"]

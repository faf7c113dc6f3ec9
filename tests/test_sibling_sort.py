from __future__ import annotations

from trail_graph.graph.sibling_sort import (
    PropertySortKey,
    SiblingNode,
    SortConfig,
    compare_values,
    raw_property_value,
    sort_siblings,
    sort_siblings_recursively,
)

from tests.helpers import edge


def node(path, relation="up", **props):
    return SiblingNode(path=path, relation_uid=relation, properties=props)


def paths(nodes):
    return [n.path for n in nodes]


CHAIN_EDGES = {
    "Ch1.md": [edge("Ch1.md", "Ch2.md", "next")],
    "Ch2.md": [edge("Ch2.md", "Ch3.md", "next")],
}


def test_single_node_untouched():
    nodes = [node("A.md")]
    assert sort_siblings(nodes, {}, SortConfig()) == nodes


def test_alphabetical_fallback_by_basename():
    nodes = [node("z/b.md"), node("a/C.md"), node("y/a.md")]
    assert paths(sort_siblings(nodes, {}, SortConfig(chain_sort="disabled"))) == ["y/a.md", "z/b.md", "a/C.md"]


def test_property_sort_then_missing_last():
    nodes = [node("A.md", order=2), node("B.md"), node("C.md", order=1)]
    cfg = SortConfig(sort_by=[PropertySortKey("order")], chain_sort="disabled")
    assert paths(sort_siblings(nodes, {}, cfg)) == ["C.md", "A.md", "B.md"]


def test_desc_keeps_missing_last():
    nodes = [node("A.md", order=2), node("B.md"), node("C.md", order=1)]
    cfg = SortConfig(sort_by=[PropertySortKey("order", "desc")], chain_sort="disabled")
    assert paths(sort_siblings(nodes, {}, cfg)) == ["A.md", "C.md", "B.md"]


def test_relation_order_groups_relations():
    nodes = [node("A.md", "zz"), node("B.md", "second"), node("C.md", "first"), node("D.md", "aa")]
    cfg = SortConfig(chain_sort="disabled", relation_order=["first", "second"])
    assert paths(sort_siblings(nodes, {}, cfg)) == ["C.md", "B.md", "D.md", "A.md"]


def test_primary_keeps_chain_together():
    nodes = [node("Ch3.md"), node("Appendix.md"), node("Ch1.md"), node("Ch2.md"), node("Zeta.md")]
    cfg = SortConfig(sequential_relations={"next"})
    assert paths(sort_siblings(nodes, CHAIN_EDGES, cfg)) == [
        "Appendix.md",
        "Ch1.md",
        "Ch2.md",
        "Ch3.md",
        "Zeta.md",
    ]


def test_primary_chain_positioned_by_head_properties():
    nodes = [
        node("Ch1.md", rank=5),
        node("Ch2.md", rank=1),
        node("Ch3.md", rank=0),
        node("Other.md", rank=3),
    ]
    cfg = SortConfig(sort_by=[PropertySortKey("rank")], sequential_relations={"next"})
    assert paths(sort_siblings(nodes, CHAIN_EDGES, cfg)) == ["Other.md", "Ch1.md", "Ch2.md", "Ch3.md"]


def test_disabled_ignores_chains():
    nodes = [node("Ch3.md"), node("Ch1.md"), node("Ch2.md")]
    edges = {"Ch3.md": [edge("Ch3.md", "Ch1.md", "next")]}
    cfg = SortConfig(chain_sort="disabled", sequential_relations={"next"})
    assert paths(sort_siblings(nodes, edges, cfg)) == ["Ch1.md", "Ch2.md", "Ch3.md"]


def test_secondary_chains_within_property_groups():
    nodes = [
        node("Ch2.md", status="draft"),
        node("Ch1.md", status="draft"),
        node("Ch3.md", status="done"),
        node("Notes.md", status="draft"),
    ]
    cfg = SortConfig(
        sort_by=[PropertySortKey("status")],
        chain_sort="secondary",
        sequential_relations={"next"},
    )
    # "done" < "draft"; within draft, Ch1 -> Ch2 stays a chain; Ch3 is alone in its group
    assert paths(sort_siblings(nodes, CHAIN_EDGES, cfg)) == ["Ch3.md", "Ch1.md", "Ch2.md", "Notes.md"]


def test_secondary_without_sort_keys_behaves_like_primary():
    nodes = [node("Ch3.md"), node("Ch2.md"), node("Ch1.md"), node("Alpha.md")]
    cfg = SortConfig(chain_sort="secondary", sequential_relations={"next"})
    assert paths(sort_siblings(nodes, CHAIN_EDGES, cfg)) == ["Alpha.md", "Ch1.md", "Ch2.md", "Ch3.md"]


def test_recursive_sorts_children():
    child_b, child_a = node("B.md"), node("A.md")
    parent = SiblingNode(path="P.md", relation_uid="up", children=[child_b, child_a])
    out = sort_siblings_recursively([parent, node("O.md")], {}, SortConfig(chain_sort="disabled"))
    assert paths(out) == ["O.md", "P.md"]
    assert paths(out[1].children) == ["A.md", "B.md"]


def test_raw_property_values():
    n = node("A.md", s="", n=3, lst=["x", "y"], empty=[], flag=True)
    assert raw_property_value(n, "s") is None
    assert raw_property_value(n, "n") == 3.0
    assert raw_property_value(n, "lst") == "x"
    assert raw_property_value(n, "empty") is None
    assert raw_property_value(n, "flag") == "true"
    assert raw_property_value(n, "missing") is None


def test_compare_values():
    assert compare_values(2.0, 10.0) < 0
    assert compare_values("2", "10") < 0
    assert compare_values("apple", "Banana") < 0
    assert compare_values(5.0, "a") < 0
    assert compare_values("a", 5.0) > 0
    assert compare_values("x", "x") == 0

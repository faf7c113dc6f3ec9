"""Ordering policy for sibling nodes.

Siblings are ordered by property sort keys, then by the configured relation
order, then by basename. When chain sorting is enabled, sequential chains
found by :func:`build_chain_structure` are kept together:

- ``primary``: chains stay intact; the chain head takes part in the sort
  on behalf of its whole chain.
- ``secondary``: properties first; chains are only honoured among siblings
  that share the value of the first sort key.
"""

from __future__ import annotations

import functools
import math
from collections.abc import Mapping, Sequence
from dataclasses import dataclass, field
from typing import Any, Literal

from ..relations.models import RelationEdge
from .chains import ChainStructure, build_chain_structure, get_basename

ChainSortMode = Literal["disabled", "primary", "secondary"]
SortValue = str | float


@dataclass(frozen=True, slots=True)
class PropertySortKey:
    property: str
    direction: Literal["asc", "desc"] = "asc"


@dataclass(slots=True)
class SortConfig:
    sort_by: list[PropertySortKey] = field(default_factory=list)
    chain_sort: ChainSortMode = "primary"
    sequential_relations: set[str] = field(default_factory=set)
    relation_order: list[str] = field(default_factory=list)


@dataclass(slots=True)
class SiblingNode:
    path: str
    relation_uid: str = ""
    properties: dict[str, Any] = field(default_factory=dict)
    children: list[SiblingNode] = field(default_factory=list)


def sort_siblings(
    nodes: Sequence[SiblingNode],
    edges_by_source: Mapping[str, Sequence[RelationEdge]],
    config: SortConfig,
) -> list[SiblingNode]:
    if len(nodes) <= 1:
        return list(nodes)

    if config.chain_sort == "disabled" or not config.sequential_relations:
        return _sort_plain(nodes, config.sort_by, config.relation_order)

    structure = build_chain_structure(
        (n.path for n in nodes), edges_by_source, config.sequential_relations
    )
    if not structure.chains:
        return _sort_plain(nodes, config.sort_by, config.relation_order)

    if config.chain_sort == "primary":
        return _sort_chains_primary(nodes, structure, config.sort_by, config.relation_order)

    return _sort_chains_secondary(nodes, edges_by_source, config)


def sort_siblings_recursively(
    nodes: Sequence[SiblingNode],
    edges_by_source: Mapping[str, Sequence[RelationEdge]],
    config: SortConfig,
) -> list[SiblingNode]:
    ordered = sort_siblings(nodes, edges_by_source, config)
    for node in ordered:
        if node.children:
            node.children = sort_siblings_recursively(node.children, edges_by_source, config)
    return ordered


def _sort_chains_primary(
    nodes: Sequence[SiblingNode],
    structure: ChainStructure,
    sort_by: Sequence[PropertySortKey],
    relation_order: Sequence[str],
) -> list[SiblingNode]:
    by_path = {n.path: n for n in nodes}

    anchors: list[tuple[SiblingNode, bool]] = []
    for head in structure.chains:
        if head in by_path:
            anchors.append((by_path[head], True))
    for path in structure.disconnected:
        if path in by_path:
            anchors.append((by_path[path], False))

    cmp = functools.partial(compare_nodes, sort_by=sort_by, relation_order=relation_order)
    anchors.sort(key=functools.cmp_to_key(lambda a, b: cmp(a[0], b[0])))

    out: list[SiblingNode] = []
    for node, is_head in anchors:
        if not is_head:
            out.append(node)
            continue
        out.extend(by_path[p] for p in structure.chains[node.path] if p in by_path)
    return out


def _sort_chains_secondary(
    nodes: Sequence[SiblingNode],
    edges_by_source: Mapping[str, Sequence[RelationEdge]],
    config: SortConfig,
) -> list[SiblingNode]:
    if not config.sort_by:
        structure = build_chain_structure(
            (n.path for n in nodes), edges_by_source, config.sequential_relations
        )
        return _sort_chains_primary(nodes, structure, config.sort_by, config.relation_order)

    ordered = _sort_plain(nodes, config.sort_by, config.relation_order)
    primary_key, rest = config.sort_by[0], config.sort_by[1:]

    out: list[SiblingNode] = []
    for group in _group_by_value(ordered, primary_key.property):
        if len(group) <= 1:
            out.extend(group)
            continue
        structure = build_chain_structure(
            (n.path for n in group), edges_by_source, config.sequential_relations
        )
        if not structure.chains:
            out.extend(group)
        else:
            out.extend(_sort_chains_primary(group, structure, rest, config.relation_order))
    return out


def _group_by_value(nodes: Sequence[SiblingNode], prop: str) -> list[list[SiblingNode]]:
    groups: dict[str, list[SiblingNode]] = {}
    for node in nodes:
        value = raw_property_value(node, prop)
        groups.setdefault("" if value is None else _as_text(value), []).append(node)
    return list(groups.values())


def _sort_plain(
    nodes: Sequence[SiblingNode],
    sort_by: Sequence[PropertySortKey],
    relation_order: Sequence[str],
) -> list[SiblingNode]:
    cmp = functools.partial(compare_nodes, sort_by=sort_by, relation_order=relation_order)
    return sorted(nodes, key=functools.cmp_to_key(cmp))


def compare_nodes(
    a: SiblingNode,
    b: SiblingNode,
    *,
    sort_by: Sequence[PropertySortKey],
    relation_order: Sequence[str],
) -> int:
    """Properties, then relation order, then basename."""
    c = _compare_by_properties(a, b, sort_by)
    if c:
        return c

    # Relations missing from the configured order go last, alphabetically.
    a_idx = _index_or_end(relation_order, a.relation_uid)
    b_idx = _index_or_end(relation_order, b.relation_uid)
    if a_idx != b_idx:
        return -1 if a_idx < b_idx else 1
    if a_idx == len(relation_order) and a.relation_uid != b.relation_uid:
        return _text_cmp(a.relation_uid, b.relation_uid)

    return _text_cmp(get_basename(a.path), get_basename(b.path))


def _index_or_end(order: Sequence[str], value: str) -> int:
    try:
        return order.index(value)
    except ValueError:
        return len(order)


def _compare_by_properties(a: SiblingNode, b: SiblingNode, keys: Sequence[PropertySortKey]) -> int:
    for key in keys:
        av = raw_property_value(a, key.property)
        bv = raw_property_value(b, key.property)
        # Missing values sort to the end regardless of direction.
        if av is None and bv is None:
            continue
        if av is None:
            return 1
        if bv is None:
            return -1
        c = compare_values(av, bv)
        if c:
            return -c if key.direction == "desc" else c
    return 0


def raw_property_value(node: SiblingNode, prop: str) -> SortValue | None:
    """Sortable value of a property, or None when missing or empty."""
    value = node.properties.get(prop)
    if value is None:
        return None
    if isinstance(value, bool):
        return str(value).lower()
    if isinstance(value, (int, float)):
        return float(value)
    if isinstance(value, str):
        return value or None
    if isinstance(value, (list, tuple)):
        if not value:
            return None
        first = value[0]
        if first is None or first == "":
            return None
        return first if isinstance(first, str) else str(first)
    return str(value)


def compare_values(a: SortValue, b: SortValue) -> int:
    """Numbers before strings; numeric strings compare as numbers."""
    a_num = isinstance(a, float)
    b_num = isinstance(b, float)
    if a_num and b_num:
        return _sign(a - b)
    if not a_num and not b_num:
        fa, fb = _parse_float(a), _parse_float(b)
        if fa is not None and fb is not None:
            return _sign(fa - fb)
        return _text_cmp(a, b)
    return -1 if a_num else 1


def _parse_float(value: str) -> float | None:
    try:
        f = float(value)
    except ValueError:
        return None
    return None if math.isnan(f) else f


def _as_text(value: SortValue) -> str:
    if isinstance(value, float) and value.is_integer():
        return str(int(value))
    return str(value)


def _text_cmp(a: str, b: str) -> int:
    ka, kb = (a.casefold(), a), (b.casefold(), b)
    return (ka > kb) - (ka < kb)


def _sign(x: float) -> int:
    return (x > 0) - (x < 0)

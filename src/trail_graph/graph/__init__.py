"""Relation graph engine: rule expansion, traversal, chains and the edge store."""

from .chains import (
    ChainStructure,
    build_chain_structure,
    build_edge_map,
    get_basename,
    get_chain_head,
    get_chain_position,
)
from .implied import apply_implied_rules, build_implied_rules
from .sibling_sort import PropertySortKey, SiblingNode, SortConfig, sort_siblings, sort_siblings_recursively
from .store import EdgeSource, EdgeStore
from .traversal import build_incoming_map, compute_ancestors

__all__ = [
    "ChainStructure",
    "EdgeSource",
    "EdgeStore",
    "PropertySortKey",
    "SiblingNode",
    "SortConfig",
    "apply_implied_rules",
    "build_chain_structure",
    "build_edge_map",
    "build_implied_rules",
    "build_incoming_map",
    "compute_ancestors",
    "get_basename",
    "get_chain_head",
    "get_chain_position",
    "sort_siblings",
    "sort_siblings_recursively",
]

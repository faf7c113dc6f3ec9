"""Chain detection among siblings.

A chain is a run of sibling documents linked one after the other by a
sequential relation (``next``, ``prev`` ...). Each sibling has at most one
successor: the first outgoing sequential edge that lands on another sibling.
"""

from __future__ import annotations

import posixpath
from collections.abc import Callable, Collection, Iterable, Mapping, Sequence
from dataclasses import dataclass, field

from ..relations.models import RelationEdge


@dataclass(slots=True)
class ChainStructure:
    # head path -> ordered member paths, head first
    chains: dict[str, list[str]] = field(default_factory=dict)
    # sibling paths that belong to no chain, in input order
    disconnected: list[str] = field(default_factory=list)


def get_basename(path: str) -> str:
    """File name without directory or extension: ``notes/Intro.md`` -> ``Intro``."""
    name = posixpath.basename(path) or path
    stem, _ext = posixpath.splitext(name)
    return stem or name


def build_chain_structure(
    sibling_paths: Iterable[str],
    outgoing_by_path: Mapping[str, Sequence[RelationEdge]],
    sequential_relations: Collection[str],
) -> ChainStructure:
    siblings = list(dict.fromkeys(sibling_paths))
    members_set = set(siblings)

    next_map: dict[str, str] = {}
    for path in siblings:
        for edge in outgoing_by_path.get(path, ()):
            if edge.relation_uid in sequential_relations and edge.to_path in members_set:
                next_map[path] = edge.to_path
                break

    if not next_map:
        return ChainStructure(chains={}, disconnected=siblings)

    has_incoming = set(next_map.values())
    members: dict[str, None] = {}
    for src, dst in next_map.items():
        members[src] = None
        members[dst] = None

    chains: dict[str, list[str]] = {}
    visited: set[str] = set()

    def follow(head: str) -> None:
        chain: list[str] = []
        current: str | None = head
        while current is not None and current not in visited:
            chain.append(current)
            visited.add(current)
            current = next_map.get(current)
        chains[head] = chain

    for head in (p for p in members if p not in has_incoming):
        if head not in visited:
            follow(head)

    # Whatever is left sits on a cycle with no entry point. Start each such
    # component at the member whose basename sorts first.
    while True:
        remaining = [p for p in members if p not in visited]
        if not remaining:
            break
        follow(min(remaining, key=lambda p: (get_basename(p), p)))

    disconnected = [p for p in siblings if p not in visited]
    return ChainStructure(chains=chains, disconnected=disconnected)


def get_chain_position(path: str, structure: ChainStructure) -> int | None:
    for chain in structure.chains.values():
        if path in chain:
            return chain.index(path)
    return None


def get_chain_head(path: str, structure: ChainStructure) -> str | None:
    for head, chain in structure.chains.items():
        if path in chain:
            return head
    return None


def build_edge_map(
    get_outgoing: Callable[[str], Sequence[RelationEdge]], paths: Iterable[str]
) -> dict[str, list[RelationEdge]]:
    return {path: list(get_outgoing(path)) for path in paths}

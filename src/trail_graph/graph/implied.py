"""Rule engine: derives implied edges from explicit ones.

Rules hang off relation types and come in four directions:

- ``forward``: A -R-> B implies A -T-> B
- ``reverse``: A -R-> B implies B -T-> A
- ``both``: forward and reverse
- ``sibling``: every pair of edges sharing a target (or sharing a source)
  under R implies T between the two other endpoints, in both directions

A candidate is dropped when its edge key is already present, or when its
route is already taken by an input edge, whatever that edge's label. The
engine is a pure function and runs a single pass: implied edges are never
fed back into the rules within one call.
"""

from __future__ import annotations

import logging
from collections.abc import Iterable, Sequence

from ..relations.models import EdgeKey, ImpliedRule, RelationEdge, RelationType, RouteKey

logger = logging.getLogger(__name__)


def build_implied_rules(relations: Iterable[RelationType]) -> dict[str, list[ImpliedRule]]:
    """Index rules by owning relation uid, skipping malformed ones."""
    rules: dict[str, list[ImpliedRule]] = {}
    for relation in relations:
        base = relation.uid.strip()
        if not base:
            logger.debug(f"Skipping implied rules of relation without uid (name={relation.name!r})")
            continue
        for rule in relation.implied_rules:
            target = rule.target_relation_uid.strip()
            if not target:
                logger.debug(f"Skipping implied rule with empty target on {base}")
                continue
            rules.setdefault(base, []).append(ImpliedRule(target_relation_uid=target, direction=rule.direction))
    return rules


class _Accumulator:
    """Collects accepted candidates while enforcing edge-key and route protection."""

    __slots__ = ("seen", "routes", "edges")

    def __init__(self, edges: Sequence[RelationEdge]):
        self.seen: set[EdgeKey] = {e.edge_key for e in edges}
        self.routes: frozenset[RouteKey] = frozenset(e.route_key for e in edges)
        self.edges: list[RelationEdge] = []

    def add(self, from_path: str, to_path: str, relation_uid: str, implied_from_uid: str) -> None:
        edge = RelationEdge(
            from_path=from_path,
            to_path=to_path,
            relation_uid=relation_uid,
            implied=True,
            implied_from_uid=implied_from_uid,
        )
        key = edge.edge_key
        if key in self.seen or edge.route_key in self.routes:
            return
        self.seen.add(key)
        self.edges.append(edge)


def apply_implied_rules(
    edges: Sequence[RelationEdge], relations: Sequence[RelationType]
) -> list[RelationEdge]:
    """Return `edges` followed by every edge implied by `relations`.

    The input is not modified. Output order is stable for a fixed input
    order and rule order.
    """
    if not relations:
        return list(edges)

    rules = build_implied_rules(relations)
    if not rules:
        return list(edges)

    acc = _Accumulator(edges)

    for edge in edges:
        for rule in rules.get(edge.relation_uid, ()):
            if rule.direction in ("forward", "both"):
                acc.add(edge.from_path, edge.to_path, rule.target_relation_uid, edge.relation_uid)
            if rule.direction in ("reverse", "both"):
                acc.add(edge.to_path, edge.from_path, rule.target_relation_uid, edge.relation_uid)

    _apply_sibling_rules(edges, rules, acc)

    return [*edges, *acc.edges]


def _apply_sibling_rules(
    edges: Sequence[RelationEdge],
    rules: dict[str, list[ImpliedRule]],
    acc: _Accumulator,
) -> None:
    sibling_targets: dict[str, list[str]] = {}
    for uid, rule_list in rules.items():
        targets = [r.target_relation_uid for r in rule_list if r.direction == "sibling"]
        if targets:
            sibling_targets[uid] = targets
    if not sibling_targets:
        return

    # Dicts keep insertion order, so group iteration follows edge order.
    by_target: dict[tuple[str, str], list[str]] = {}
    by_source: dict[tuple[str, str], list[str]] = {}
    for edge in edges:
        if edge.relation_uid not in sibling_targets:
            continue
        by_target.setdefault((edge.to_path, edge.relation_uid), []).append(edge.from_path)
        by_source.setdefault((edge.from_path, edge.relation_uid), []).append(edge.to_path)

    for groups in (by_target, by_source):
        for (_, relation_uid), peers in groups.items():
            if len(peers) < 2:
                continue
            for target_uid in sibling_targets[relation_uid]:
                _link_pairs(peers, target_uid, relation_uid, acc)


def _link_pairs(peers: list[str], target_uid: str, relation_uid: str, acc: _Accumulator) -> None:
    for i, a in enumerate(peers):
        for b in peers[i + 1 :]:
            # Same document reached twice (e.g. under two labels) is not a sibling of itself.
            if a == b:
                continue
            acc.add(a, b, target_uid, relation_uid)
            acc.add(b, a, target_uid, relation_uid)

from __future__ import annotations

from trail_graph.relations.models import ImpliedRule, RelationEdge, RelationType


def edge(from_path, to_path, relation, *, label=None, implied=False, implied_from=None):
    return RelationEdge(
        from_path=from_path,
        to_path=to_path,
        relation_uid=relation,
        label=label,
        implied=implied,
        implied_from_uid=implied_from,
    )


def relation(uid, *rules, name=None):
    """rules are (target_uid, direction) pairs"""
    return RelationType(
        uid=uid,
        name=name if name is not None else uid,
        implied_rules=[ImpliedRule(target_relation_uid=t, direction=d) for t, d in rules],
    )


def has_edge(edges, from_path, to_path, relation_uid):
    return any(
        e.from_path == from_path and e.to_path == to_path and e.relation_uid == relation_uid
        for e in edges
    )

from __future__ import annotations

import re
import uuid
from collections.abc import Iterable
from dataclasses import dataclass, replace

from .models import RelationType

# Must start with an alphanumeric so that "-" alone is never a relation name.
RELATION_NAME_RE = re.compile(r"^[a-z0-9][a-z0-9_-]*$", re.IGNORECASE)


def normalize_relation_name(name: str) -> str:
    return name.strip().lower()


def is_valid_relation_name(value: str) -> bool:
    return bool(value) and RELATION_NAME_RE.match(value) is not None


def normalize_label(label: str) -> str:
    return label.strip().lower()


def is_valid_label(value: str) -> bool:
    """Labels are dot-separated paths; each segment follows relation name rules."""
    if not value:
        return False
    return all(RELATION_NAME_RE.match(seg) for seg in value.split("."))


def create_relation_uid() -> str:
    return str(uuid.uuid4())


@dataclass(slots=True)
class RelationIndexes:
    by_uid: dict[str, RelationType]
    uid_by_normalized_name: dict[str, str]


def build_relation_indexes(relations: Iterable[RelationType]) -> RelationIndexes:
    by_uid: dict[str, RelationType] = {}
    uid_by_name: dict[str, str] = {}
    for relation in relations:
        by_uid[relation.uid] = relation
        normalized = normalize_relation_name(relation.name)
        if normalized:
            uid_by_name[normalized] = relation.uid
    return RelationIndexes(by_uid=by_uid, uid_by_normalized_name=uid_by_name)


def resolve_relation_uid_by_name(relations: Iterable[RelationType], name: str) -> str | None:
    normalized = normalize_relation_name(name)
    if not normalized:
        return None
    for relation in relations:
        if normalize_relation_name(relation.name) == normalized:
            return relation.uid
    return None


def find_relation_by_uid(relations: Iterable[RelationType], uid: str) -> RelationType | None:
    for relation in relations:
        if relation.uid == uid:
            return relation
    return None


def find_relation_by_name(relations: Iterable[RelationType], name: str) -> RelationType | None:
    relations = list(relations)
    uid = resolve_relation_uid_by_name(relations, name)
    if uid is None:
        return None
    return find_relation_by_uid(relations, uid)


def resolve_relation_ref(relations: Iterable[RelationType], ref: str) -> str | None:
    """Resolve a uid, display name or alias to a uid.

    Uids win over names, and names win over aliases.
    """
    relations = list(relations)
    ref = ref.strip()
    if not ref:
        return None
    if find_relation_by_uid(relations, ref) is not None:
        return ref
    uid = resolve_relation_uid_by_name(relations, ref)
    if uid is not None:
        return uid
    key = normalize_relation_name(ref)
    for relation in relations:
        if relation.uid and any(normalize_relation_name(a) == key for a in relation.aliases):
            return relation.uid
    return None


def propagate_relation_delete(relations: Iterable[RelationType], uid: str) -> list[RelationType]:
    """Drop the relation `uid` and every implied rule that targets it."""
    out: list[RelationType] = []
    for relation in relations:
        if relation.uid == uid:
            continue
        rules = [r for r in relation.implied_rules if r.target_relation_uid != uid]
        out.append(replace(relation, implied_rules=rules))
    return out

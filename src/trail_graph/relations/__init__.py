"""Relation types, edges and the lookups between names and uids."""

from .index import (
    RelationIndexes,
    build_relation_indexes,
    create_relation_uid,
    find_relation_by_name,
    find_relation_by_uid,
    is_valid_label,
    is_valid_relation_name,
    normalize_label,
    normalize_relation_name,
    propagate_relation_delete,
    resolve_relation_ref,
    resolve_relation_uid_by_name,
)
from .models import AncestorNode, ImpliedDirection, ImpliedRule, RelationEdge, RelationType

__all__ = [
    "AncestorNode",
    "ImpliedDirection",
    "ImpliedRule",
    "RelationEdge",
    "RelationType",
    "RelationIndexes",
    "build_relation_indexes",
    "create_relation_uid",
    "find_relation_by_name",
    "find_relation_by_uid",
    "is_valid_label",
    "is_valid_relation_name",
    "normalize_label",
    "normalize_relation_name",
    "propagate_relation_delete",
    "resolve_relation_ref",
    "resolve_relation_uid_by_name",
]

"""JSON corpus snapshots.

A snapshot bundles relation definitions with each document's outgoing
links, which is enough to drive an :class:`EdgeStore` without a real
document parser::

    {
      "relations": [
        {"uid": "r-up", "name": "up",
         "implied": [{"target": "r-down", "direction": "reverse"}]}
      ],
      "documents": {
        "notes/A.md": [{"relation": "up", "to": "notes/B.md"}],
        "notes/B.md": []
      }
    }

Relation references may be a uid or a display name. Links to unknown
documents or unknown relations are dropped on load.
"""

from __future__ import annotations

import json
import logging
from collections.abc import Iterable
from pathlib import Path
from typing import Any

from pydantic import BaseModel, Field, ValidationError

from .graph.store import EdgeStore
from .relations.index import normalize_label, resolve_relation_ref
from .relations.models import EdgeKey, ImpliedDirection, ImpliedRule, RelationEdge, RelationType

logger = logging.getLogger(__name__)


class SnapshotError(ValueError):
    """Raised when a snapshot cannot be read or does not match the schema."""


class ImpliedRuleModel(BaseModel):
    target: str
    direction: ImpliedDirection = "forward"


class RelationModel(BaseModel):
    uid: str
    name: str = ""
    aliases: list[str] = Field(default_factory=list)
    implied: list[ImpliedRuleModel] = Field(default_factory=list)


class LinkModel(BaseModel):
    relation: str
    to: str
    label: str | None = None


class SnapshotModel(BaseModel):
    relations: list[RelationModel] = Field(default_factory=list)
    documents: dict[str, list[LinkModel]] = Field(default_factory=dict)


class Snapshot:
    """Resolved snapshot. Acts as the edge source of an :class:`EdgeStore`."""

    def __init__(self, relations: list[RelationType], edges: dict[str, list[RelationEdge]]):
        self.relations = relations
        self._edges = edges

    def list_paths(self) -> Iterable[str]:
        return list(self._edges)

    def edges_for(self, path: str) -> list[RelationEdge]:
        return list(self._edges.get(path, ()))

    def resolve_relation(self, ref: str) -> str | None:
        return resolve_relation_ref(self.relations, ref)

    def to_store(self) -> EdgeStore:
        store = EdgeStore(relations=self.relations, source=self)
        store.build()
        return store


def _resolve_rule_target(model: SnapshotModel, target: str) -> str:
    # Rules may name their target before it is defined; resolve against the
    # full list and keep the raw reference when nothing matches.
    for rel in model.relations:
        if rel.uid == target:
            return target
    lowered = target.strip().lower()
    for rel in model.relations:
        if rel.name.strip().lower() == lowered and lowered:
            return rel.uid
    return target


def parse_snapshot(data: dict[str, Any]) -> Snapshot:
    try:
        model = SnapshotModel.model_validate(data)
    except ValidationError as e:
        raise SnapshotError(f"Invalid snapshot: {e}") from e

    relations = [
        RelationType(
            uid=r.uid,
            name=r.name,
            aliases=list(r.aliases),
            implied_rules=[
                ImpliedRule(target_relation_uid=_resolve_rule_target(model, i.target), direction=i.direction)
                for i in r.implied
            ],
        )
        for r in model.relations
    ]

    known = set(model.documents)
    edges: dict[str, list[RelationEdge]] = {}
    dropped = 0
    for path, links in model.documents.items():
        out: list[RelationEdge] = []
        seen: set[EdgeKey] = set()
        for link in links:
            uid = resolve_relation_ref(relations, link.relation)
            if uid is None or link.to not in known:
                dropped += 1
                logger.debug(f"Dropping unresolved link {path} -[{link.relation}]-> {link.to}")
                continue
            label = normalize_label(link.label) if link.label else None
            edge = RelationEdge(from_path=path, to_path=link.to, relation_uid=uid, label=label or None)
            # A uid and a name for the same relation yield the same edge.
            if edge.edge_key in seen:
                continue
            seen.add(edge.edge_key)
            out.append(edge)
        edges[path] = out

    if dropped:
        logger.info(f"Dropped {dropped} unresolved links")
    return Snapshot(relations, edges)


def load_snapshot(path: str | Path) -> Snapshot:
    p = Path(path).expanduser()
    try:
        data = json.loads(p.read_text(encoding="utf-8"))
    except OSError as e:
        raise SnapshotError(f"Cannot read snapshot {p}: {e}") from e
    except json.JSONDecodeError as e:
        raise SnapshotError(f"Snapshot {p} is not valid JSON: {e}") from e
    if not isinstance(data, dict):
        raise SnapshotError(f"Snapshot {p} must be a JSON object")
    return parse_snapshot(data)

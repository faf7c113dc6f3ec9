"""In-memory edge store with a lazily materialized, rule-expanded view.

Explicit edges are kept per source document exactly as the document
declared them, and replaced wholesale on every reparse. Implied edges live only in the materialization cache, which
is dropped on any write to explicit edges or to the rule set and rebuilt on
the next read.
"""

from __future__ import annotations

import logging
import threading
from collections.abc import Collection, Iterable, Sequence
from dataclasses import replace
from typing import Protocol

from ..relations.models import AncestorNode, EdgeKey, RelationEdge, RelationType
from .implied import apply_implied_rules
from .traversal import build_incoming_map, compute_ancestors

logger = logging.getLogger(__name__)


class EdgeSource(Protocol):
    """Produces the explicit edges of documents.

    Implementations resolve links to concrete document paths and drop
    dangling ones before handing edges over.
    """

    def list_paths(self) -> Iterable[str]: ...

    def edges_for(self, path: str) -> Sequence[RelationEdge]: ...


class EdgeStore:
    def __init__(
        self,
        relations: Iterable[RelationType] = (),
        source: EdgeSource | None = None,
    ):
        self.source = source
        self._relations: list[RelationType] = list(relations)
        self._edges_by_source: dict[str, list[RelationEdge]] = {}
        self._edges_by_target: dict[str, list[RelationEdge]] = {}
        self._materialized: list[RelationEdge] | None = None
        self._version = 0
        self._all_stale = False
        self._stale_files: set[str] = set()
        # Guards the maps, the cache and staleness.
        self._lock = threading.RLock()

    @property
    def version(self) -> int:
        """Bumped on every invalidation of the materialized view."""
        with self._lock:
            return self._version

    @property
    def relations(self) -> list[RelationType]:
        with self._lock:
            return list(self._relations)

    # --------------------------
    # Writes
    # --------------------------

    def set_relations(self, relations: Iterable[RelationType]) -> None:
        """Swap the rule set. Explicit edges are untouched."""
        with self._lock:
            self._relations = list(relations)
            self._invalidate("relations changed")

    def update_file(self, path: str, edges: Iterable[RelationEdge]) -> None:
        explicit = _explicit(edges)
        with self._lock:
            self._edges_by_source[path] = explicit
            self._stale_files.discard(path)
            self._invalidate(f"update {path}")

    def delete(self, path: str) -> None:
        with self._lock:
            changed = self._edges_by_source.pop(path, None) is not None
            for src, edges in self._edges_by_source.items():
                kept = [e for e in edges if not e.touches(path)]
                if len(kept) != len(edges):
                    self._edges_by_source[src] = kept
                    changed = True
            self._stale_files.discard(path)
            if changed:
                self._invalidate(f"delete {path}")

    def rename(self, old_path: str, new_path: str) -> None:
        if old_path == new_path:
            return
        with self._lock:
            changed = False
            rewritten: dict[str, list[RelationEdge]] = {}
            for src, edges in self._edges_by_source.items():
                key = new_path if src == old_path else src
                if any(e.touches(old_path) for e in edges) or key != src:
                    changed = True
                new_edges = [e.renamed(old_path, new_path) for e in edges]
                rewritten.setdefault(key, []).extend(new_edges)
            # Renaming onto a known path merges both lists.
            rewritten = {src: _dedupe(edges) for src, edges in rewritten.items()}
            if old_path in self._stale_files:
                self._stale_files.discard(old_path)
                self._stale_files.add(new_path)
            if not changed:
                return
            # Swap in one step; readers never see a half-renamed map.
            self._edges_by_source = rewritten
            self._invalidate(f"rename {old_path} -> {new_path}")

    def mark_stale(self, path: str) -> None:
        with self._lock:
            self._stale_files.add(path)

    def mark_all_stale(self) -> None:
        with self._lock:
            self._all_stale = True

    @property
    def is_stale(self) -> bool:
        with self._lock:
            return self._all_stale or bool(self._stale_files)

    def ensure_fresh(self) -> None:
        """Reparse whatever was marked stale, then clear staleness."""
        with self._lock:
            if self._all_stale:
                self._all_stale = False
                self._stale_files.clear()
                if self.source is not None:
                    self._rebuild()
                return
            if not self._stale_files:
                return
            stale = sorted(self._stale_files)
            self._stale_files.clear()
            if self.source is None:
                return
            for path in stale:
                self.update_file(path, self.source.edges_for(path))

    def build(self) -> None:
        """Drop everything and reparse every document the source knows about."""
        with self._lock:
            self._all_stale = False
            self._stale_files.clear()
            self._rebuild()

    def _rebuild(self) -> None:
        self._edges_by_source = {}
        if self.source is not None:
            for path in self.source.list_paths():
                self._edges_by_source[path] = _explicit(self.source.edges_for(path))
        self._invalidate("rebuild")

    def _invalidate(self, reason: str) -> None:
        self._materialized = None
        self._edges_by_target = {}
        self._version += 1
        logger.debug(f"Edge cache invalidated ({reason}), version={self._version}")

    # --------------------------
    # Reads
    # --------------------------

    def materialize(self) -> list[RelationEdge]:
        """All explicit edges followed by every implied edge."""
        with self._lock:
            edges, _ = self._materialize_locked()
            return list(edges)

    def _materialize_locked(self) -> tuple[list[RelationEdge], dict[str, list[RelationEdge]]]:
        # Caller holds the lock; the list and the index come from one build.
        self.ensure_fresh()
        if self._materialized is None:
            # Two documents may declare the same edge.
            explicit = _dedupe(e for edges in self._edges_by_source.values() for e in edges)
            self._materialized = apply_implied_rules(explicit, self._relations)
            self._edges_by_target = build_incoming_map(self._materialized)
            logger.debug(f"Materialized {len(self._materialized)} edges ({len(explicit)} explicit)")
        return self._materialized, self._edges_by_target

    def get_outgoing(self, path: str, relation_filter: Collection[str] | None = None) -> list[RelationEdge]:
        return [
            e
            for e in self.materialize()
            if e.from_path == path and _accepts(relation_filter, e.relation_uid)
        ]

    def get_incoming(self, path: str, relation_filter: Collection[str] | None = None) -> list[RelationEdge]:
        with self._lock:
            _, by_target = self._materialize_locked()
            incoming = list(by_target.get(path, ()))
        return [e for e in incoming if _accepts(relation_filter, e.relation_uid)]

    def get_ancestors(self, path: str, relation_filter: Collection[str] | None = None) -> list[AncestorNode]:
        with self._lock:
            _, by_target = self._materialize_locked()
        # Invalidation swaps in a new index instead of clearing this one.
        return compute_ancestors(path, by_target, relation_filter)

    def edges_by_source(self) -> dict[str, list[RelationEdge]]:
        """Materialized edges grouped by source path, in materialization order."""
        grouped: dict[str, list[RelationEdge]] = {}
        for e in self.materialize():
            grouped.setdefault(e.from_path, []).append(e)
        return grouped

    def get_relation_types(self) -> list[str]:
        """Uids of every defined relation plus any relation seen on an edge."""
        with self._lock:
            uids = {r.uid for r in self._relations if r.uid}
        uids.update(e.relation_uid for e in self.materialize())
        return sorted(uids)

    def explicit_edges(self, path: str) -> list[RelationEdge]:
        self.ensure_fresh()
        with self._lock:
            return list(self._edges_by_source.get(path, ()))

    def paths(self) -> list[str]:
        self.ensure_fresh()
        with self._lock:
            return list(self._edges_by_source)


def _explicit(edges: Iterable[RelationEdge]) -> list[RelationEdge]:
    """Explicit copies of `edges`, endpoints untouched, first edge key wins."""
    return _dedupe(
        e if not e.implied and e.implied_from_uid is None else replace(e, implied=False, implied_from_uid=None)
        for e in edges
    )


def _dedupe(edges: Iterable[RelationEdge]) -> list[RelationEdge]:
    seen: set[EdgeKey] = set()
    out: list[RelationEdge] = []
    for e in edges:
        if e.edge_key in seen:
            continue
        seen.add(e.edge_key)
        out.append(e)
    return out


def _accepts(relation_filter: Collection[str] | None, relation_uid: str) -> bool:
    return not relation_filter or relation_uid in relation_filter

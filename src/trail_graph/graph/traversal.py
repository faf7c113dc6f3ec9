from __future__ import annotations

from collections import deque
from collections.abc import Collection, Iterable, Mapping, Sequence

from ..relations.models import AncestorNode, RelationEdge


def build_incoming_map(edges: Iterable[RelationEdge]) -> dict[str, list[RelationEdge]]:
    incoming: dict[str, list[RelationEdge]] = {}
    for edge in edges:
        incoming.setdefault(edge.to_path, []).append(edge)
    return incoming


def compute_ancestors(
    start_path: str,
    edges: Iterable[RelationEdge] | Mapping[str, Sequence[RelationEdge]],
    relation_filter: Collection[str] | None = None,
) -> list[AncestorNode]:
    """Breadth-first walk over incoming edges starting at `start_path`.

    `edges` is either a flat edge list or an already built by-target map.
    Each path is emitted at most once, at the depth it is first reached;
    the start path itself is never emitted. An empty or missing filter
    accepts every relation.
    """
    incoming = edges if isinstance(edges, Mapping) else build_incoming_map(edges)

    visited = {start_path}
    queue: deque[tuple[str, int]] = deque([(start_path, 0)])
    results: list[AncestorNode] = []

    while queue:
        path, depth = queue.popleft()
        for edge in incoming.get(path, ()):
            if relation_filter and edge.relation_uid not in relation_filter:
                continue
            if edge.from_path in visited:
                continue
            visited.add(edge.from_path)
            results.append(
                AncestorNode(
                    path=edge.from_path,
                    depth=depth + 1,
                    via_relation_uid=edge.relation_uid,
                    implied=edge.implied,
                    implied_from_uid=edge.implied_from_uid,
                )
            )
            queue.append((edge.from_path, depth + 1))

    return results

from __future__ import annotations

from dataclasses import dataclass, field, replace
from typing import Literal

ImpliedDirection = Literal["forward", "reverse", "both", "sibling"]

EdgeKey = tuple[str, str, str, str | None]
RouteKey = tuple[str, str, str]


@dataclass(frozen=True, slots=True)
class RelationEdge:
    """A directed, typed edge between two documents.

    `relation_uid` is the stable identity of the relation type; display names
    never take part in graph operations. `label` subdivides a relation and is
    part of the edge key.
    """

    from_path: str
    to_path: str
    relation_uid: str
    label: str | None = None
    implied: bool = False
    implied_from_uid: str | None = None

    @property
    def edge_key(self) -> EdgeKey:
        return (self.from_path, self.to_path, self.relation_uid, self.label)

    @property
    def route_key(self) -> RouteKey:
        return (self.from_path, self.to_path, self.relation_uid)

    def touches(self, path: str) -> bool:
        return self.from_path == path or self.to_path == path

    def renamed(self, old_path: str, new_path: str) -> RelationEdge:
        """Copy with every endpoint equal to `old_path` replaced by `new_path`."""
        if not self.touches(old_path):
            return self
        return replace(
            self,
            from_path=new_path if self.from_path == old_path else self.from_path,
            to_path=new_path if self.to_path == old_path else self.to_path,
        )


@dataclass(frozen=True, slots=True)
class ImpliedRule:
    target_relation_uid: str
    direction: ImpliedDirection = "forward"


@dataclass(slots=True)
class RelationType:
    """A user-defined relation type and the rules it implies.

    `name` is for display and may change at any time; `uid` does not.
    """

    uid: str
    name: str = ""
    implied_rules: list[ImpliedRule] = field(default_factory=list)
    aliases: list[str] = field(default_factory=list)


@dataclass(frozen=True, slots=True)
class AncestorNode:
    path: str
    depth: int
    via_relation_uid: str
    implied: bool
    implied_from_uid: str | None = None

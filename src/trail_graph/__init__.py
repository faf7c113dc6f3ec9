"""Trail Graph

A typed relation graph over a corpus of documents. Documents declare edges;
a small rule set derives implied edges from them (forward, reverse, both,
sibling). On top of the materialized graph sit a breadth-first ancestor
walk and a chain builder that orders siblings linked by sequential
relations.
"""

from .graph import (
    ChainStructure,
    EdgeSource,
    EdgeStore,
    apply_implied_rules,
    build_chain_structure,
    compute_ancestors,
)
from .relations import AncestorNode, ImpliedRule, RelationEdge, RelationType

__version__ = "0.1.0"

__all__ = [
    "AncestorNode",
    "ChainStructure",
    "EdgeSource",
    "EdgeStore",
    "ImpliedRule",
    "RelationEdge",
    "RelationType",
    "apply_implied_rules",
    "build_chain_structure",
    "compute_ancestors",
    "__version__",
]

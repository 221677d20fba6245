"""
edge.py — Graph Edge
====================
Connects two nodes by identity.

Design decisions:
  - `source` and `target` are node uids, NOT Node references and NOT
    visible ids, so an id reused after a counter reset never aliases.
  - An undirected graph stores ONE edge per unordered pair; adjacency
    expansion mirrors it in both directions.
  - `weight` is whatever the user entered.  Unweighted graphs treat every
    edge as weight 1 at read time (see Graph.effective_weight).
"""

from typing import FrozenSet, Optional


class Edge:
    """
    Attributes:
        id     : Unique integer identity (monotonic per graph).
        source : uid of the tail node.
        target : uid of the head node.
        weight : Numeric cost.  Can be negative for Bellman-Ford demos.
    """

    __slots__ = ("id", "source", "target", "weight")

    def __init__(self, edge_id: int, source: str, target: str, weight: float = 1.0):
        self.id:     int   = edge_id
        self.source: str   = source
        self.target: str   = target
        self.weight: float = weight

    # ------------------------------------------------------------------
    # Helpers
    # ------------------------------------------------------------------
    def pair(self) -> FrozenSet[str]:
        """Unordered endpoint key used for undirected de-duplication."""
        return frozenset((self.source, self.target))

    def touches(self, uid: str) -> bool:
        return uid == self.source or uid == self.target

    def other_end(self, uid: str) -> Optional[str]:
        """Given one endpoint, return the other. None if uid isn't an endpoint."""
        if uid == self.source:
            return self.target
        if uid == self.target:
            return self.source
        return None

    def to_dict(self) -> dict:
        return {
            "id":     self.id,
            "source": self.source,
            "target": self.target,
            "weight": self.weight,
        }

    def __repr__(self) -> str:
        return f"Edge({self.id}: {self.source[:8]} -> {self.target[:8]}, w={self.weight})"

    def __eq__(self, other) -> bool:
        return isinstance(other, Edge) and self.id == other.id

    def __hash__(self) -> int:
        return hash(self.id)

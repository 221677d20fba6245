"""
disjoint_set.py — Union-Find
=============================
Tracks a partition of node uids into connected components.

  • find   – path compression (every node on the walk is re-pointed at the root)
  • union  – union by rank; returns True if a merge happened
  • sets are created lazily the first time an element is referenced

Kruskal keeps one DisjointSet per state snapshot, so copy() is part of
the contract: a step copies, then mutates the copy.
"""

from typing import Dict, Hashable, Iterable, Optional


class DisjointSet:
    """
    Attributes:
        parent : {element: parent element}  (roots point at themselves)
        rank   : {element: upper bound on tree height}
    """

    def __init__(self, elements: Optional[Iterable[Hashable]] = None):
        self.parent: Dict[Hashable, Hashable] = {}
        self.rank:   Dict[Hashable, int]      = {}
        for x in elements or ():
            self.make_set(x)

    def make_set(self, x: Hashable) -> None:
        if x not in self.parent:
            self.parent[x] = x
            self.rank[x] = 0

    def find(self, x: Hashable) -> Hashable:
        self.make_set(x)
        root = x
        while self.parent[root] != root:
            root = self.parent[root]
        while self.parent[x] != root:
            self.parent[x], x = root, self.parent[x]
        return root

    def union(self, x: Hashable, y: Hashable) -> bool:
        root_x, root_y = self.find(x), self.find(y)
        if root_x == root_y:
            return False
        if self.rank[root_x] < self.rank[root_y]:
            root_x, root_y = root_y, root_x
        self.parent[root_y] = root_x
        if self.rank[root_x] == self.rank[root_y]:
            self.rank[root_x] += 1
        return True

    def connected(self, x: Hashable, y: Hashable) -> bool:
        return self.find(x) == self.find(y)

    # ------------------------------------------------------------------
    # Derived views
    # ------------------------------------------------------------------
    def component_of(self, x: Hashable) -> Hashable:
        return self.find(x)

    def components(self) -> Dict[Hashable, Hashable]:
        """{element: root} for every element seen so far.  Read-only: no compression."""
        return {x: self._walk(x) for x in self.parent}

    def _walk(self, x: Hashable) -> Hashable:
        while self.parent[x] != x:
            x = self.parent[x]
        return x

    @property
    def component_count(self) -> int:
        return sum(1 for x, p in self.parent.items() if x == p)

    def copy(self) -> "DisjointSet":
        other = DisjointSet()
        other.parent = dict(self.parent)
        other.rank = dict(self.rank)
        return other

    def __len__(self) -> int:
        return len(self.parent)

    def __eq__(self, other) -> bool:
        return (
            isinstance(other, DisjointSet)
            and self.components() == other.components()
            and self.rank == other.rank
        )

    def __repr__(self) -> str:
        return f"DisjointSet(elements={len(self)}, components={self.component_count})"

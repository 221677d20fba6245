"""
view.py — Read-only Graph Snapshot
===================================
Algorithms never touch the mutable Graph.  At run start the controller
takes a GraphView: a frozen copy of node identities, edges and effective
weights, plus a pre-sorted adjacency.

Ordering rules (the determinism contract):
  - nodes()       ascending visible id; creation order breaks ties that
                  can appear after a counter reset.
  - neighbours()  same order as nodes(), then edge id.
  - edges()       ascending (source id, target id, edge id).
"""

from typing import Dict, List, NamedTuple, Optional, Tuple


class EdgeRef(NamedTuple):
    id:     int
    source: str
    target: str
    weight: float


class Arc(NamedTuple):
    """One traversable direction of an edge, seen from its tail."""
    node:   str     # uid of the neighbour
    edge:   int     # edge id
    weight: float


class GraphView:
    """
    Attributes:
        directed : Graph-level directedness at snapshot time.
        weighted : Whether weights were meaningful at snapshot time.
    """

    def __init__(self, graph):
        self.directed: bool = graph.directed
        self.weighted: bool = graph.weighted

        # (visible id, creation index) is the total order on nodes
        self._rank: Dict[str, Tuple[int, int]] = {
            uid: (node.id, idx) for idx, (uid, node) in enumerate(graph.nodes.items())
        }
        self._ids: Dict[str, int] = {uid: node.id for uid, node in graph.nodes.items()}
        self._order: List[str] = sorted(self._rank, key=self._rank.__getitem__)

        self._edges: Dict[int, EdgeRef] = {}
        self._out: Dict[str, List[Arc]] = {uid: [] for uid in self._order}
        for edge in graph.edges.values():
            ref = EdgeRef(edge.id, edge.source, edge.target, graph.effective_weight(edge))
            self._edges[edge.id] = ref
            if ref.source in self._out and ref.target in self._rank:
                self._out[ref.source].append(Arc(ref.target, ref.id, ref.weight))
            if not self.directed and ref.target in self._out and ref.source in self._rank:
                self._out[ref.target].append(Arc(ref.source, ref.id, ref.weight))
        for arcs in self._out.values():
            arcs.sort(key=lambda a: (self._rank[a.node], a.edge))

        self._edge_order: List[EdgeRef] = sorted(
            (e for e in self._edges.values() if e.source in self._rank and e.target in self._rank),
            key=lambda e: (self._rank[e.source], self._rank[e.target], e.id),
        )

    # ------------------------------------------------------------------
    # Nodes
    # ------------------------------------------------------------------
    def nodes(self) -> List[str]:
        return list(self._order)

    def node_count(self) -> int:
        return len(self._order)

    def has_node(self, uid: Optional[str]) -> bool:
        return uid in self._rank

    def visible_id(self, uid: Optional[str]) -> Optional[int]:
        return self._ids.get(uid)

    def rank(self, uid: str) -> Tuple[int, int]:
        """Sort key for deterministic tie-breaking."""
        return self._rank[uid]

    # ------------------------------------------------------------------
    # Edges
    # ------------------------------------------------------------------
    def neighbours(self, uid: str) -> List[Arc]:
        """Outgoing arcs of `uid`; unknown nodes simply have none."""
        return list(self._out.get(uid, ()))

    def edges(self) -> List[EdgeRef]:
        return list(self._edge_order)

    def edge(self, edge_id: int) -> Optional[EdgeRef]:
        return self._edges.get(edge_id)

    def edge_count(self) -> int:
        return len(self._edge_order)

    def has_negative_weight(self) -> bool:
        return any(e.weight < 0 for e in self._edge_order)

    def __repr__(self) -> str:
        return (
            f"GraphView(nodes={self.node_count()}, edges={self.edge_count()}, "
            f"directed={self.directed}, weighted={self.weighted})"
        )

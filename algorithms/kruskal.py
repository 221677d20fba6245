"""
kruskal.py — Kruskal's Minimum Spanning Tree / Forest
=======================================================
At start every edge is sorted ascending by (weight, lower endpoint id,
higher endpoint id) into a fixed sequence, and a DisjointSet is built
over all nodes.  One step = one edge of that sequence:

  • find(u) == find(v)  →  would close a cycle: REJECTED (visited, not taken)
  • otherwise           →  union(u, v), edge joins mst_edges

The run always consumes the whole sequence.  A disconnected graph yields
a forest of MSTs; that is a reportable outcome, not a failure.
"""

from dataclasses import dataclass, field, replace
from typing import Any, Dict, List, Optional, Tuple

from graph import GraphView
from algorithms.disjoint_set import DisjointSet
from algorithms.state import (
    FailureReason, Outcome, ResultStatus, RunState,
    by_rank, label, success,
)


PSEUDOCODE: List[str] = [
    "def Kruskal(graph):",                            # 0
    "    for v in V: make_set(v)",                    # 1
    "    E ← sort edges by (w, endpoints)",           # 2
    "    for (u, v, w) in E:",                        # 3
    "        if find(u) == find(v): reject",          # 4
    "        else:",                                  # 5
    "            union(u, v)",                        # 6
    "            mst.add((u, v)); total ← total + w", # 7
    "    return mst  (forest if components > 1)",     # 8
]


@dataclass(frozen=True)
class KruskalState(RunState):
    sequence:       Tuple[int, ...]  = ()
    position:       int              = 0
    sets:           DisjointSet      = field(default_factory=DisjointSet)
    mst_edges:      Tuple[int, ...]  = ()
    rejected_edges: Tuple[int, ...]  = ()
    total_weight:   float            = 0.0
    num_components: int              = 0

    def frontier(self, view: GraphView) -> Any:
        return list(self.sequence[self.position:])

    def extras(self, view: GraphView) -> Dict[str, Any]:
        vid = view.visible_id
        return {
            "position":       self.position,
            "sequence":       list(self.sequence),
            "mst_edges":      list(self.mst_edges),
            "rejected_edges": list(self.rejected_edges),
            "total_weight":   self.total_weight,
            "num_components": self.num_components,
            "components":     {str(vid(u)): vid(r) for u, r in by_rank(view, self.sets.components())},
        }


def edge_sequence(view: GraphView) -> Tuple[int, ...]:
    def key(e):
        lo, hi = sorted((view.rank(e.source), view.rank(e.target)))
        return (e.weight, lo, hi, e.id)
    return tuple(e.id for e in sorted(view.edges(), key=key))


def check(view: GraphView, source: Optional[str]) -> Optional[FailureReason]:
    if view.node_count() == 0:
        return FailureReason.EMPTY_GRAPH
    if not view.weighted:
        return FailureReason.REQUIRES_WEIGHTED
    if view.directed:
        return FailureReason.REQUIRES_UNDIRECTED
    return None


def init(view: GraphView, source: Optional[str] = None) -> KruskalState:
    sets = DisjointSet(view.nodes())
    sequence = edge_sequence(view)
    return KruskalState(
        predecessor={},
        sequence=sequence,
        sets=sets,
        num_components=sets.component_count,
        done=not sequence,
        explanation=f"Initialise: {len(sequence)} edge(s) sorted by weight; every node is its own component.",
    )


def step(view: GraphView, state: KruskalState) -> KruskalState:
    if state.position >= len(state.sequence):
        return replace(state, done=True)

    edge_id = state.sequence[state.position]
    e = view.edge(edge_id)
    sets = state.sets.copy()
    span = f"{label(view, e.source)}–{label(view, e.target)} (w={e.weight:g})"

    changes: Dict[str, Any] = {}
    if sets.connected(e.source, e.target):
        changes["rejected_edges"] = state.rejected_edges + (edge_id,)
        text = f"Reject {span}: both ends already in the same component."
    else:
        sets.union(e.source, e.target)
        changes["mst_edges"] = state.mst_edges + (edge_id,)
        changes["total_weight"] = state.total_weight + e.weight
        changes["visited_nodes"] = state.visited_nodes | {e.source, e.target}
        text = f"Accept {span}: joins two components."

    position = state.position + 1
    return replace(
        state,
        current=None,
        current_edge=edge_id,
        visited_edges=state.visited_edges | {edge_id},
        position=position,
        sets=sets,
        num_components=sets.component_count,
        done=position >= len(state.sequence),
        explanation=text,
        **changes,
    )


def outcome(view: GraphView, state: KruskalState) -> Outcome:
    if state.num_components == 1:
        return success(
            f"MST with {len(state.mst_edges)} edge(s), total weight {state.total_weight:g}.",
            total_weight=state.total_weight,
        )
    return Outcome(
        ResultStatus.FOREST, valid=False,
        message=f"Disconnected — forest of {state.num_components} MSTs generated.",
        total_weight=state.total_weight,
    )

"""
bellman_ford.py — Bellman–Ford Algorithm
=========================================
The single-source shortest-path algorithm that handles NEGATIVE edge
weights, and reports (but cannot resolve) negative cycles.

Structure:
  • At start the whole edge-processing sequence is fixed: every edge,
    sorted by (source id, target id), repeated |V| - 1 times.
  • One step = one position in that sequence (relax or not).
  • At a pass boundary with no relaxation → converged, stop early.
  • After the final pass one more relaxation check decides
    has_negative_cycle.  When True, distances are advisory only.

Overlay:
  • "pass"              – current pass number (1-indexed)
  • "position"          – cursor into the edge sequence
  • "has_negative_cycle"
"""

from dataclasses import dataclass, replace
from typing import Any, Dict, List, Optional, Tuple

from graph import GraphView
from algorithms.state import (
    INF, FailureReason, Outcome, ResultStatus, RunState,
    initial_maps, label, success,
)


PSEUDOCODE: List[str] = [
    "def BellmanFord(graph, source):",             # 0
    "    dist ← {v: ∞ for v in V}",                # 1
    "    dist[source] ← 0",                        # 2
    "    for i in 1 … |V|-1:",                     # 3
    "        for each edge (u, v, w):",            # 4
    "            if dist[u] + w < dist[v]:",       # 5
    "                dist[v] ← dist[u] + w",       # 6
    "                parent[v] ← u",               # 7
    "        if nothing changed: stop early",      # 8
    "    for each edge (u, v, w):",                # 9
    "        if dist[u] + w < dist[v]:",           # 10
    "            report NEGATIVE CYCLE",           # 11
]


@dataclass(frozen=True)
class BellmanFordState(RunState):
    edge_order:         Tuple[int, ...] = ()    # one pass, sorted
    passes:             int             = 0     # |V| - 1
    position:           int             = 0     # cursor into the full sequence
    changed:            bool            = False # relaxation seen in the current pass
    has_negative_cycle: bool            = False

    @property
    def sequence_length(self) -> int:
        return len(self.edge_order) * self.passes

    @property
    def current_pass(self) -> int:
        if not self.edge_order:
            return 0
        return min(self.position // len(self.edge_order) + 1, self.passes)

    def frontier(self, view: GraphView) -> Any:
        remaining = self.sequence_length - self.position
        return {"position": self.position, "remaining": max(remaining, 0)}

    def extras(self, view: GraphView) -> Dict[str, Any]:
        return {
            "pass":               self.current_pass,
            "passes":             self.passes,
            "position":           self.position,
            "edge_order":         list(self.edge_order),
            "has_negative_cycle": self.has_negative_cycle,
        }


def check(view: GraphView, source: Optional[str]) -> Optional[FailureReason]:
    if view.node_count() == 0:
        return FailureReason.EMPTY_GRAPH
    if not view.directed:
        return FailureReason.REQUIRES_DIRECTED
    if source is not None and not view.has_node(source):
        return FailureReason.UNKNOWN_SOURCE
    return None


def init(view: GraphView, source: Optional[str]) -> BellmanFordState:
    root = source if source is not None else view.nodes()[0]
    distance, predecessor = initial_maps(view, root)
    order = tuple(e.id for e in view.edges())
    passes = view.node_count() - 1
    return BellmanFordState(
        source=root,
        current=root,
        visited_nodes=frozenset([root]),
        distance=distance,
        predecessor=predecessor,
        edge_order=order,
        passes=passes,
        done=not order or passes == 0,
        explanation=(
            f"Initialise: dist[{label(view, root)}] = 0, all others = ∞. "
            f"{passes} pass(es) over {len(order)} edge(s)."
        ),
    )


def _relaxable(view: GraphView, distance: Dict[str, float], edge_id: int) -> Optional[float]:
    """New distance for the edge head if relaxing `edge_id` improves it, else None."""
    e = view.edge(edge_id)
    if e is None or distance.get(e.source, INF) == INF:
        return None
    candidate = distance[e.source] + e.weight
    return candidate if candidate < distance.get(e.target, INF) else None


def step(view: GraphView, state: BellmanFordState) -> BellmanFordState:
    if state.done or state.position >= state.sequence_length:
        return replace(state, done=True)

    edge_id = state.edge_order[state.position % len(state.edge_order)]
    e = view.edge(edge_id)
    distance = dict(state.distance)
    predecessor = dict(state.predecessor)
    visited = set(state.visited_nodes)
    changed = state.changed

    improved = _relaxable(view, distance, edge_id)
    if improved is not None:
        old = distance[e.target]
        distance[e.target] = improved
        predecessor[e.target] = e.source
        visited.add(e.target)
        changed = True
        text = (
            f"Relax {label(view, e.source)}→{label(view, e.target)} (w={e.weight:g}): "
            f"{'∞' if old == INF else format(old, 'g')} → {improved:g}."
        )
    else:
        text = f"Edge {label(view, e.source)}→{label(view, e.target)} (w={e.weight:g}): no change."

    position = state.position + 1
    done = False
    negative = False
    if position % len(state.edge_order) == 0:
        if not changed:
            done = True
            text += " Pass finished with no relaxation — converged early."
        elif position >= state.sequence_length:
            done = True
            negative = any(_relaxable(view, distance, eid) is not None for eid in state.edge_order)
            text += " Final pass done; " + (
                "a further relaxation is possible — NEGATIVE CYCLE." if negative
                else "no negative cycle."
            )
        changed = False

    return replace(
        state,
        current=e.source,
        current_edge=edge_id,
        visited_edges=state.visited_edges | {edge_id},
        visited_nodes=frozenset(visited),
        distance=distance,
        predecessor=predecessor,
        position=position,
        changed=changed,
        has_negative_cycle=negative,
        done=done,
        explanation=text,
    )


def outcome(view: GraphView, state: BellmanFordState) -> Outcome:
    if state.has_negative_cycle:
        return Outcome(
            ResultStatus.NEGATIVE_CYCLE, valid=False,
            message="Negative cycle reachable from the source — distances are advisory only.",
        )
    return success("No negative cycle; distances are final.")

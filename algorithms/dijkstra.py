"""
dijkstra.py — Dijkstra's Shortest-Path Algorithm
==================================================
Stepwise Dijkstra over a sorted frontier list with lazy deletion.

The frontier holds (tentative distance, node) entries.  Improving a
node's distance pushes a NEW entry; the stale one stays in the list and is
discarded when it reaches the front (lazy deletion instead of a
decrease-key heap).  The renderer shows the duplicates.

One step:
  1. Pop the minimum entry (ties → ascending visible id); discard any
     entry whose node is already finalised
  2. Finalise the node  →  CURRENT
  3. Relax every outgoing arc (ascending neighbour id), pushing new
     entries for improvements
  4. Done when no unfinalised entry remains

Correctness note: Dijkstra requires non-negative weights; check() refuses
to start otherwise.
"""

from dataclasses import dataclass, replace
from typing import Any, Dict, List, Optional, Tuple

from graph import GraphView
from algorithms.state import (
    FailureReason, Outcome, RunState,
    check_source, finite, initial_maps, label, success,
)


PSEUDOCODE: List[str] = [
    "def Dijkstra(graph, source):",                # 0
    "    dist ← {v: ∞ for v in V}",                # 1
    "    dist[source] ← 0",                        # 2
    "    pq ← [(0, source)]",                      # 3
    "    while pq is not empty:",                  # 4
    "        (d, node) ← pq.pop_min()",            # 5
    "        if node finalised: continue",         # 6
    "        finalise(node)",                      # 7
    "        for (neighbour, w) in adj(node):",    # 8
    "            if dist[node] + w < dist[nbr]:",  # 9
    "                dist[nbr] ← dist[node] + w",  # 10
    "                parent[nbr] ← node",          # 11
    "                pq.push((dist[nbr], nbr))",   # 12
]

Entry = Tuple[float, str]   # (tentative distance, uid)


@dataclass(frozen=True)
class DijkstraState(RunState):
    queue:           Tuple[Entry, ...] = ()
    processed_nodes: Tuple[str, ...]   = ()   # finalisation order

    def frontier(self, view: GraphView) -> Any:
        return [[view.visible_id(u), finite(d)] for d, u in self.queue]

    def extras(self, view: GraphView) -> Dict[str, Any]:
        return {"processed_nodes": [view.visible_id(u) for u in self.processed_nodes]}


def _sorted(view: GraphView, entries) -> Tuple[Entry, ...]:
    return tuple(sorted(entries, key=lambda e: (e[0], view.rank(e[1]))))


def check(view: GraphView, source: Optional[str]) -> Optional[FailureReason]:
    if view.node_count() and not view.directed:
        return FailureReason.REQUIRES_DIRECTED
    if view.has_negative_weight():
        return FailureReason.NEGATIVE_WEIGHT
    return check_source(view, source)


def init(view: GraphView, source: str) -> DijkstraState:
    distance, predecessor = initial_maps(view, source)
    return DijkstraState(
        source=source,
        current=source,
        distance=distance,
        predecessor=predecessor,
        queue=((0.0, source),),
        explanation=(
            f"Initialise: all distances = ∞ except source {label(view, source)} = 0. "
            f"Push the source into the priority list."
        ),
    )


def step(view: GraphView, state: DijkstraState) -> DijkstraState:
    processed = set(state.processed_nodes)
    queue = list(state.queue)
    discarded = 0
    while queue and queue[0][1] in processed:
        queue.pop(0)
        discarded += 1
    if not queue:
        return replace(state, queue=(), done=True, current=None, current_edge=None)

    d, node = queue.pop(0)
    processed.add(node)
    distance = dict(state.distance)
    predecessor = dict(state.predecessor)
    visited_edges = set(state.visited_edges)

    relaxed: List[str] = []
    for arc in view.neighbours(node):
        if arc.node in processed:
            continue
        candidate = distance[node] + arc.weight
        if candidate < distance[arc.node]:
            distance[arc.node] = candidate
            predecessor[arc.node] = node
            visited_edges.add(arc.edge)
            queue.append((candidate, arc.node))
            relaxed.append(f"{label(view, arc.node)}={candidate:g}")

    queue_t = _sorted(view, queue)
    done = not any(u not in processed for _, u in queue_t)
    text = f"Pop {label(view, node)} (d={d:g}) and finalise it."
    if discarded:
        text += f" Skipped {discarded} stale entr{'y' if discarded == 1 else 'ies'}."
    text += f" Relaxed: {', '.join(relaxed)}." if relaxed else " No improvements."

    return replace(
        state,
        current=node,
        current_edge=None,
        queue=() if done else queue_t,
        processed_nodes=state.processed_nodes + (node,),
        visited_nodes=frozenset(processed),
        visited_edges=frozenset(visited_edges),
        distance=distance,
        predecessor=predecessor,
        done=done,
        explanation=text,
    )


def outcome(view: GraphView, state: DijkstraState) -> Outcome:
    return success(f"Finalised {len(state.processed_nodes)} of {view.node_count()} node(s).")

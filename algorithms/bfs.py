"""
bfs.py — Breadth-First Search
==============================
Stepwise BFS.  One step = dequeue the head of the queue and discover all
of its unvisited neighbours at once:

  1. Pop the head  →  it becomes CURRENT
  2. Unvisited neighbours, ascending visible id, are marked visited,
     get distance = distance[current] + 1 and predecessor = current
  3. They are appended to the queue tail in that same order
  4. The run is done when the queue is empty

Pseudocode lines are 0-indexed and match the PSEUDOCODE constant
exported alongside the state machine so the UI can highlight them live.
"""

from dataclasses import dataclass, replace
from typing import Any, Dict, List, Optional, Tuple

from graph import GraphView
from algorithms.state import (
    FailureReason, Outcome, RunState,
    check_source, initial_maps, label, sorted_ids, success,
)


# ---------------------------------------------------------------------------
# Pseudocode — each string is one displayed line
# ---------------------------------------------------------------------------
PSEUDOCODE: List[str] = [
    "def BFS(graph, source):",                    # 0
    "    queue ← [source]",                       # 1
    "    visited ← {source}",                     # 2
    "    dist[source] ← 0",                       # 3
    "    while queue is not empty:",              # 4
    "        node ← queue.dequeue()",             # 5
    "        for neighbour in adj(node):",        # 6
    "            if neighbour not visited:",      # 7
    "                visited.add(neighbour)",     # 8
    "                dist[neighbour] ← dist[node] + 1",  # 9
    "                parent[neighbour] ← node",   # 10
    "                queue.enqueue(neighbour)",   # 11
]


@dataclass(frozen=True)
class BFSState(RunState):
    queue: Tuple[str, ...] = ()

    def frontier(self, view: GraphView) -> Any:
        return [view.visible_id(u) for u in self.queue]


def check(view: GraphView, source: Optional[str]) -> Optional[FailureReason]:
    return check_source(view, source)


def init(view: GraphView, source: str) -> BFSState:
    distance, predecessor = initial_maps(view, source)
    return BFSState(
        source=source,
        current=source,
        visited_nodes=frozenset([source]),
        distance=distance,
        predecessor=predecessor,
        queue=(source,),
        explanation=f"Initialise: source {label(view, source)} is queued and marked visited.",
    )


def step(view: GraphView, state: BFSState) -> BFSState:
    if not state.queue:
        return replace(state, done=True, current=None, current_edge=None)

    node, rest = state.queue[0], state.queue[1:]
    visited = set(state.visited_nodes)
    visited_edges = set(state.visited_edges)
    distance: Dict[str, float] = dict(state.distance)
    predecessor = dict(state.predecessor)

    discovered: List[str] = []
    for arc in view.neighbours(node):
        if arc.node in visited:
            continue
        visited.add(arc.node)
        visited_edges.add(arc.edge)
        distance[arc.node] = distance[node] + 1
        predecessor[arc.node] = node
        discovered.append(arc.node)

    queue = rest + tuple(discovered)
    if discovered:
        found = ", ".join(label(view, u) for u in discovered)
        text = f"Dequeue {label(view, node)}; discover {found} and enqueue them."
    else:
        text = f"Dequeue {label(view, node)}; no unvisited neighbours."

    return replace(
        state,
        current=node,
        current_edge=None,
        queue=queue,
        visited_nodes=frozenset(visited),
        visited_edges=frozenset(visited_edges),
        distance=distance,
        predecessor=predecessor,
        done=not queue,
        explanation=text,
    )


def outcome(view: GraphView, state: BFSState) -> Outcome:
    reached = sorted_ids(view, state.visited_nodes)
    return success(f"BFS reached {len(reached)} of {view.node_count()} node(s).")

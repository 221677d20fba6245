"""
dfs.py — Depth-First Search
=============================
Stepwise DFS with an explicit stack (no Python recursion limit issues).

Each step looks at the stack top:
  - if it has an unvisited neighbour, push the lowest-id one, mark it
    visited with distance / predecessor as in BFS   (descend)
  - otherwise pop it                                 (backtrack)

The run is done when the stack is empty.  The overlay exposes the whole
stack so the UI can render the "recursion stack" panel.
"""

from dataclasses import dataclass, replace
from typing import Any, List, Optional, Tuple

from graph import GraphView
from algorithms.state import (
    FailureReason, Outcome, RunState,
    check_source, initial_maps, label, success,
)


PSEUDOCODE: List[str] = [
    "def DFS(graph, source):",                    # 0
    "    stack ← [source]",                       # 1
    "    visited ← {source}",                     # 2
    "    while stack is not empty:",              # 3
    "        node ← stack.top()",                 # 4
    "        if node has unvisited neighbour n:", # 5
    "            visited.add(n)",                 # 6
    "            parent[n] ← node",               # 7
    "            stack.push(n)",                  # 8
    "        else:",                              # 9
    "            stack.pop()",                    # 10
]


@dataclass(frozen=True)
class DFSState(RunState):
    stack: Tuple[str, ...] = ()

    def frontier(self, view: GraphView) -> Any:
        return [view.visible_id(u) for u in self.stack]


def check(view: GraphView, source: Optional[str]) -> Optional[FailureReason]:
    return check_source(view, source)


def init(view: GraphView, source: str) -> DFSState:
    distance, predecessor = initial_maps(view, source)
    return DFSState(
        source=source,
        current=source,
        visited_nodes=frozenset([source]),
        distance=distance,
        predecessor=predecessor,
        stack=(source,),
        explanation=f"Initialise: push source {label(view, source)} onto the stack.",
    )


def step(view: GraphView, state: DFSState) -> DFSState:
    if not state.stack:
        return replace(state, done=True, current=None, current_edge=None)

    top = state.stack[-1]
    for arc in view.neighbours(top):
        if arc.node in state.visited_nodes:
            continue
        distance = dict(state.distance)
        predecessor = dict(state.predecessor)
        distance[arc.node] = distance[top] + 1
        predecessor[arc.node] = top
        return replace(
            state,
            current=arc.node,
            current_edge=arc.edge,
            stack=state.stack + (arc.node,),
            visited_nodes=state.visited_nodes | {arc.node},
            visited_edges=state.visited_edges | {arc.edge},
            distance=distance,
            predecessor=predecessor,
            explanation=f"Descend {label(view, top)} → {label(view, arc.node)}; push it.",
        )

    stack = state.stack[:-1]
    return replace(
        state,
        current=stack[-1] if stack else None,
        current_edge=None,
        stack=stack,
        done=not stack,
        explanation=f"{label(view, top)} has no unvisited neighbours — backtrack.",
    )


def outcome(view: GraphView, state: DFSState) -> Outcome:
    return success(f"DFS reached {len(state.visited_nodes)} of {view.node_count()} node(s).")

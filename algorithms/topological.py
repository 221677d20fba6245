"""
topological.py — DFS-based Topological Sort with Cycle Detection
==================================================================
DFS run to exhaustion across ALL nodes, with a global discrete clock.

  • discover a node  →  clock += 1, start_time[node] = clock
  • backtrack (pop)  →  clock += 1, finish_time[node] = clock
  • stack empty but unvisited nodes remain  →  restart from the
    lowest-id unvisited node (this also advances the clock)

A back edge (current → node still on the stack) sets has_back_edge;
that is the cycle signal.  Back edges are only meaningful on directed
graphs; on undirected graphs every tree edge would look like one.

Result: nodes sorted by DESCENDING finish time, unless the graph is
undirected ("not applicable") or a back edge was seen ("cycle detected").
"""

from dataclasses import dataclass, field, replace
from typing import Any, Dict, List, Optional, Tuple

from graph import GraphView
from algorithms.state import (
    FailureReason, Outcome, ResultStatus, RunState,
    by_rank, initial_maps, label,
)


PSEUDOCODE: List[str] = [
    "def TopoSort(graph):",                        # 0
    "    time ← 0",                                # 1
    "    for u in V (ascending id):",              # 2
    "        if u not visited: visit(u)",          # 3
    "def visit(u):",                               # 4
    "    time ← time + 1; start[u] ← time",        # 5
    "    for v in adj(u):",                        # 6
    "        if v on stack: back edge → cycle",    # 7
    "        if v not visited: visit(v)",          # 8
    "    time ← time + 1; finish[u] ← time",       # 9
    "return V sorted by finish time, descending",  # 10
]


@dataclass(frozen=True)
class TopoState(RunState):
    stack:         Tuple[str, ...]  = ()
    start_time:    Dict[str, int]   = field(default_factory=dict)
    finish_time:   Dict[str, int]   = field(default_factory=dict)
    clock:         int              = 0
    has_back_edge: bool             = False
    back_edges:    Tuple[int, ...]  = ()

    def frontier(self, view: GraphView) -> Any:
        return [view.visible_id(u) for u in self.stack]

    def extras(self, view: GraphView) -> Dict[str, Any]:
        vid = view.visible_id
        return {
            "start_time":    {str(vid(u)): t for u, t in by_rank(view, self.start_time)},
            "finish_time":   {str(vid(u)): t for u, t in by_rank(view, self.finish_time)},
            "clock":         self.clock,
            "has_back_edge": self.has_back_edge,
            "back_edges":    list(self.back_edges),
        }


def check(view: GraphView, source: Optional[str]) -> Optional[FailureReason]:
    if view.node_count() == 0:
        return FailureReason.EMPTY_GRAPH
    if source is not None and not view.has_node(source):
        return FailureReason.UNKNOWN_SOURCE
    return None


def init(view: GraphView, source: Optional[str]) -> TopoState:
    root = source if source is not None else view.nodes()[0]
    distance, predecessor = initial_maps(view, root)
    return TopoState(
        source=root,
        current=root,
        visited_nodes=frozenset([root]),
        distance=distance,
        predecessor=predecessor,
        stack=(root,),
        start_time={root: 1},
        finish_time={},
        clock=1,
        explanation=f"Initialise: discover {label(view, root)} at time 1.",
    )


def _unvisited(view: GraphView, state: TopoState) -> Optional[str]:
    for uid in view.nodes():
        if uid not in state.visited_nodes:
            return uid
    return None


def step(view: GraphView, state: TopoState) -> TopoState:
    if not state.stack:
        restart = _unvisited(view, state)
        if restart is None:
            return replace(state, done=True, current=None, current_edge=None)
        clock = state.clock + 1
        distance = dict(state.distance)
        distance[restart] = 0.0
        return replace(
            state,
            current=restart,
            current_edge=None,
            stack=(restart,),
            visited_nodes=state.visited_nodes | {restart},
            distance=distance,
            start_time={**state.start_time, restart: clock},
            clock=clock,
            explanation=f"Stack empty — start a new DFS tree at {label(view, restart)} (time {clock}).",
        )

    top = state.stack[-1]
    arcs = view.neighbours(top)

    has_back_edge = state.has_back_edge
    back_edges = list(state.back_edges)
    if view.directed:
        on_stack = set(state.stack)
        for arc in arcs:
            if arc.node in on_stack and arc.node not in state.finish_time:
                has_back_edge = True
                if arc.edge not in back_edges:
                    back_edges.append(arc.edge)

    for arc in arcs:
        if arc.node in state.visited_nodes:
            continue
        clock = state.clock + 1
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
            start_time={**state.start_time, arc.node: clock},
            clock=clock,
            has_back_edge=has_back_edge,
            back_edges=tuple(back_edges),
            explanation=f"Discover {label(view, arc.node)} from {label(view, top)} at time {clock}.",
        )

    clock = state.clock + 1
    stack = state.stack[:-1]
    finished = replace(
        state,
        current=stack[-1] if stack else None,
        current_edge=None,
        stack=stack,
        finish_time={**state.finish_time, top: clock},
        clock=clock,
        has_back_edge=has_back_edge,
        back_edges=tuple(back_edges),
        explanation=f"Finish {label(view, top)} at time {clock}.",
    )
    if not stack and _unvisited(view, finished) is None:
        finished = replace(finished, done=True)
    return finished


def topological_order(state: TopoState) -> Tuple[str, ...]:
    finish = state.finish_time
    return tuple(sorted(finish, key=lambda u: finish[u], reverse=True))


def outcome(view: GraphView, state: TopoState) -> Outcome:
    if not view.directed:
        return Outcome(
            ResultStatus.NOT_APPLICABLE, valid=False,
            message="Topological sort is not applicable to undirected graphs.",
        )
    if state.has_back_edge:
        return Outcome(
            ResultStatus.CYCLE_DETECTED, valid=False,
            message="Invalid — cycle detected; no topological order exists.",
        )
    order = topological_order(state)
    return Outcome(
        ResultStatus.SUCCESS,
        message="Topological order: " + ", ".join(label(view, u) for u in order),
        order=order,
    )

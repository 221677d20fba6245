"""
prim.py — Prim's Minimum Spanning Tree
========================================
Grows one tree from the source.  The frontier is a list of candidate
edges leaving the tree, ordered by (weight, source id, target id).

One step:
  1. If the frontier is empty but the tree doesn't span every node →
     FAIL with "graph disconnected" (a hard stop, unlike Kruskal)
  2. Pop the cheapest candidate.  If both endpoints are already in the
     tree, discard it and keep popping within the same step
  3. Accept it: add to mst_edges, add its weight, add the new endpoint
  4. Push the new endpoint's arcs to nodes outside the tree, skipping
     edges already in the frontier
  5. Done when the tree spans all |V| nodes

Candidates are stale-tolerant the same way Dijkstra's entries are: an
edge whose far end joined the tree later is only dropped when popped.
"""

from dataclasses import dataclass, replace
from typing import Any, Dict, List, NamedTuple, Optional, Tuple

from graph import GraphView
from algorithms.state import (
    FailureReason, FAILURE_MESSAGES, Outcome, ResultStatus, RunState,
    check_source, label, success,
)


PSEUDOCODE: List[str] = [
    "def Prim(graph, source):",                          # 0
    "    tree ← {source}",                               # 1
    "    pq ← edges(source)",                            # 2
    "    while |tree| < |V|:",                           # 3
    "        if pq is empty: FAIL (disconnected)",       # 4
    "        (u, v, w) ← pq.pop_min()",                  # 5
    "        if u, v both in tree: continue",            # 6
    "        mst.add((u, v)); total ← total + w",        # 7
    "        tree.add(v)",                               # 8
    "        pq.push(edges(v) leaving the tree)",        # 9
]


class Candidate(NamedTuple):
    weight: float
    edge:   int
    tail:   str      # endpoint inside the tree when pushed
    head:   str      # endpoint outside the tree when pushed


@dataclass(frozen=True)
class PrimState(RunState):
    queue:           Tuple[Candidate, ...] = ()
    processed_nodes: Tuple[str, ...]       = ()
    mst_edges:       Tuple[int, ...]       = ()
    total_weight:    float                 = 0.0

    def frontier(self, view: GraphView) -> Any:
        return [
            {"edge": c.edge, "weight": c.weight,
             "source": view.visible_id(c.tail), "target": view.visible_id(c.head)}
            for c in self.queue
        ]

    def extras(self, view: GraphView) -> Dict[str, Any]:
        return {
            "processed_nodes": [view.visible_id(u) for u in self.processed_nodes],
            "mst_edges":       list(self.mst_edges),
            "total_weight":    self.total_weight,
        }


def _key(view: GraphView, c: Candidate):
    e = view.edge(c.edge)
    return (c.weight, view.rank(e.source), view.rank(e.target), c.edge)


def _push(view: GraphView, queue: List[Candidate], node: str, tree) -> None:
    present = {c.edge for c in queue}
    for arc in view.neighbours(node):
        if arc.node in tree or arc.edge in present:
            continue
        queue.append(Candidate(arc.weight, arc.edge, node, arc.node))
        present.add(arc.edge)
    queue.sort(key=lambda c: _key(view, c))


def check(view: GraphView, source: Optional[str]) -> Optional[FailureReason]:
    if view.node_count() and not view.weighted:
        return FailureReason.REQUIRES_WEIGHTED
    return check_source(view, source)


def init(view: GraphView, source: str) -> PrimState:
    queue: List[Candidate] = []
    _push(view, queue, source, {source})
    return PrimState(
        source=source,
        current=source,
        visited_nodes=frozenset([source]),
        predecessor={uid: None for uid in view.nodes()},
        processed_nodes=(source,),
        queue=tuple(queue),
        done=view.node_count() == 1,
        explanation=f"Initialise: tree = {{{label(view, source)}}}; queue its {len(queue)} edge(s).",
    )


def step(view: GraphView, state: PrimState) -> PrimState:
    tree = set(state.processed_nodes)
    if len(tree) == view.node_count():
        return replace(state, done=True)

    queue = list(state.queue)
    visited_edges = set(state.visited_edges)
    discarded = 0
    while queue:
        cand = queue.pop(0)
        visited_edges.add(cand.edge)
        if cand.tail in tree and cand.head in tree:
            discarded += 1
            continue
        break
    else:
        return replace(
            state,
            queue=(),
            visited_edges=frozenset(visited_edges),
            current=None,
            current_edge=None,
            failure=FailureReason.DISCONNECTED,
            explanation=FAILURE_MESSAGES[FailureReason.DISCONNECTED],
        )

    new, old = cand.head, cand.tail
    tree.add(new)
    _push(view, queue, new, tree)
    predecessor = dict(state.predecessor)
    predecessor[new] = old
    total = state.total_weight + cand.weight

    text = f"Take edge {label(view, old)}–{label(view, new)} (w={cand.weight:g}); total = {total:g}."
    if discarded:
        text = f"Discard {discarded} edge(s) inside the tree. " + text

    return replace(
        state,
        current=new,
        current_edge=cand.edge,
        queue=tuple(queue),
        processed_nodes=state.processed_nodes + (new,),
        visited_nodes=frozenset(tree),
        visited_edges=frozenset(visited_edges),
        mst_edges=state.mst_edges + (cand.edge,),
        predecessor=predecessor,
        total_weight=total,
        done=len(tree) == view.node_count(),
        explanation=text,
    )


def outcome(view: GraphView, state: PrimState) -> Outcome:
    if state.failure is not None:
        return Outcome(
            ResultStatus.FAILED, valid=False,
            message=FAILURE_MESSAGES[state.failure],
            total_weight=state.total_weight,
        )
    return success(
        f"MST with {len(state.mst_edges)} edge(s), total weight {state.total_weight:g}.",
        total_weight=state.total_weight,
    )

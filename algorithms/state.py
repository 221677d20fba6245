"""
state.py — Algorithm Run State
===============================
Every algorithm is a state machine over an immutable state value:

    state0 = init(view, source)
    state1 = step(view, state0)
    …

A state is a frozen-in-time picture of everything the renderer needs:

    • current node / edge being processed
    • visited nodes and visited edges
    • predecessor and tentative-distance maps
    • the algorithm-specific frontier (queue, stack, priority list, cursor)
    • a plain-English explanation of the last transition

Design decisions:
  - States are frozen dataclasses.  step() builds a new state with
    dataclasses.replace and fresh containers; it never mutates the old one,
    so every snapshot the controller hands out stays valid forever.
  - Everything is keyed by node uid.  to_dict(view) translates to visible
    ids for the renderer and sorts every collection so two identical runs
    serialise byte-for-byte identically.
  - Infinity serialises as None (JSON has no ∞).
"""

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Dict, FrozenSet, Iterable, List, Optional, Tuple

from graph import GraphView

INF = float("inf")


# ---------------------------------------------------------------------------
# Why a run could not start (or had to stop)
# ---------------------------------------------------------------------------
class FailureReason(Enum):
    REQUIRES_DIRECTED   = "requires_directed_graph"
    REQUIRES_UNDIRECTED = "requires_undirected_graph"
    REQUIRES_WEIGHTED   = "requires_weighted_graph"
    NEGATIVE_WEIGHT     = "negative_edge_weight"
    SOURCE_REQUIRED     = "source_required"
    UNKNOWN_SOURCE      = "unknown_source"
    EMPTY_GRAPH         = "empty_graph"
    DISCONNECTED        = "graph_disconnected"


FAILURE_MESSAGES: Dict[FailureReason, str] = {
    FailureReason.REQUIRES_DIRECTED:   "This algorithm requires a directed graph.",
    FailureReason.REQUIRES_UNDIRECTED: "This algorithm requires an undirected graph.",
    FailureReason.REQUIRES_WEIGHTED:   "This algorithm requires a weighted graph.",
    FailureReason.NEGATIVE_WEIGHT:     "Negative edge weights are not allowed.",
    FailureReason.SOURCE_REQUIRED:     "Select a source node first.",
    FailureReason.UNKNOWN_SOURCE:      "The selected source node does not exist.",
    FailureReason.EMPTY_GRAPH:         "The graph has no nodes.",
    FailureReason.DISCONNECTED:        "Graph disconnected — cannot construct complete MST.",
}


# ---------------------------------------------------------------------------
# How trustworthy a completed run's result is
# ---------------------------------------------------------------------------
class ResultStatus(Enum):
    SUCCESS        = "success"
    NEGATIVE_CYCLE = "negative_cycle"
    CYCLE_DETECTED = "cycle_detected"
    NOT_APPLICABLE = "not_applicable"
    FOREST         = "forest"
    FAILED         = "failed"


@dataclass(frozen=True)
class Outcome:
    """
    Attributes:
        status       : ResultStatus.
        valid        : False when distances / order must not be trusted.
        message      : Human-readable summary.
        order        : Topological order (uids), empty for other algorithms.
        total_weight : MST weight for Prim / Kruskal.
    """

    status:       ResultStatus
    valid:        bool              = True
    message:      str               = ""
    order:        Tuple[str, ...]   = ()
    total_weight: Optional[float]   = None

    def to_dict(self, view: GraphView) -> Dict[str, Any]:
        return {
            "status":       self.status.value,
            "valid":        self.valid,
            "message":      self.message,
            "order":        [view.visible_id(u) for u in self.order],
            "total_weight": self.total_weight,
        }


def success(message: str = "", **kwargs) -> Outcome:
    return Outcome(ResultStatus.SUCCESS, True, message, **kwargs)


# ---------------------------------------------------------------------------
# Base state — the fields every algorithm shares
# ---------------------------------------------------------------------------
@dataclass(frozen=True)
class RunState:
    """
    Attributes:
        source        : uid the run started from (None for Kruskal).
        current       : uid being expanded right now.
        current_edge  : edge id being examined right now.
        visited_nodes : uids discovered / finalised so far.
        visited_edges : edge ids touched so far.
        predecessor   : {uid: uid | None}
        distance      : {uid: float}, INF when unreached.
        done          : True once the algorithm has nothing left to do.
        failure       : Set when the run hit a runtime infeasibility.
        explanation   : "Why" text for the last transition.
    """

    source:        Optional[str]             = None
    current:       Optional[str]             = None
    current_edge:  Optional[int]             = None
    visited_nodes: FrozenSet[str]            = frozenset()
    visited_edges: FrozenSet[int]            = frozenset()
    predecessor:   Dict[str, Optional[str]]  = field(default_factory=dict)
    distance:      Dict[str, float]          = field(default_factory=dict)
    done:          bool                      = False
    failure:       Optional[FailureReason]   = None
    explanation:   str                       = ""

    def frontier(self, view: GraphView) -> Any:
        """Renderer-facing frontier; overridden per algorithm."""
        return []

    def extras(self, view: GraphView) -> Dict[str, Any]:
        return {}

    def to_dict(self, view: GraphView) -> Dict[str, Any]:
        vid = view.visible_id
        return {
            "source":        vid(self.source),
            "current":       vid(self.current),
            "current_edge":  self.current_edge,
            "visited_nodes": sorted_ids(view, self.visited_nodes),
            "visited_edges": sorted(self.visited_edges),
            "predecessor":   {str(vid(u)): vid(p) for u, p in by_rank(view, self.predecessor)},
            "distance":      {str(vid(u)): finite(d) for u, d in by_rank(view, self.distance)},
            "frontier":      self.frontier(view),
            "done":          self.done,
            "failure":       self.failure.value if self.failure else None,
            "explanation":   self.explanation,
            **self.extras(view),
        }


# ---------------------------------------------------------------------------
# Helpers shared by the algorithm modules
# ---------------------------------------------------------------------------
def initial_maps(view: GraphView, source: Optional[str]) -> Tuple[Dict[str, float], Dict[str, Optional[str]]]:
    """distance = ∞ everywhere except the source (0); predecessor = None everywhere."""
    distance = {uid: INF for uid in view.nodes()}
    predecessor: Dict[str, Optional[str]] = {uid: None for uid in view.nodes()}
    if source is not None:
        distance[source] = 0.0
    return distance, predecessor


def label(view: GraphView, uid: Optional[str]) -> str:
    return "None" if uid is None else f"v{view.visible_id(uid)}"


def finite(value: float) -> Optional[float]:
    return None if value == INF else value


def sorted_ids(view: GraphView, uids: Iterable[str]) -> List[Optional[int]]:
    return [view.visible_id(u) for u in sorted((u for u in uids if view.has_node(u)), key=view.rank)]


def by_rank(view: GraphView, mapping: Dict[str, Any]) -> List[Tuple[str, Any]]:
    return sorted(((u, v) for u, v in mapping.items() if view.has_node(u)), key=lambda kv: view.rank(kv[0]))


def check_source(view: GraphView, source: Optional[str]) -> Optional[FailureReason]:
    """Common precondition: a non-empty graph and a live source node."""
    if view.node_count() == 0:
        return FailureReason.EMPTY_GRAPH
    if source is None:
        return FailureReason.SOURCE_REQUIRED
    if not view.has_node(source):
        return FailureReason.UNKNOWN_SOURCE
    return None

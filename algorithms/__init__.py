"""
algorithms/__init__.py — Algorithm Registry
=============================================
Single source of truth for every algorithm the engine knows about.

    from algorithms import REGISTRY, get_algorithm

REGISTRY is a dict:
    {
        "bfs": AlgoInfo(key, label, check, init, step, outcome, pseudocode, …),
        …
    }

Every algorithm module exposes the same four functions:

    check(view, source)   → FailureReason | None     (preconditions)
    init(view, source)    → state                    (no step taken yet)
    step(view, state)     → state'                   (one visible transition)
    outcome(view, state)  → Outcome                  (result validity)

The controller only ever talks to AlgoInfo, so adding an algorithm is:
write the module, add one entry here.
"""

from dataclasses import dataclass, field
from typing import Callable, Dict, List, Optional

# ---------------------------------------------------------------------------
# Import all algorithm modules
# ---------------------------------------------------------------------------
from algorithms import bfs as _bfs
from algorithms import dfs as _dfs
from algorithms import topological as _topo
from algorithms import bellman_ford as _bf
from algorithms import dijkstra as _dijkstra
from algorithms import prim as _prim
from algorithms import kruskal as _kruskal
from algorithms.disjoint_set import DisjointSet
from algorithms.state import (
    INF, FAILURE_MESSAGES, FailureReason, Outcome, ResultStatus, RunState,
)


# ---------------------------------------------------------------------------
# AlgoInfo — metadata card for each algorithm
# ---------------------------------------------------------------------------
@dataclass
class AlgoInfo:
    key:              str                    # registry key, e.g. "bfs"
    label:            str                    # human label, e.g. "Breadth-First Search"
    check:            Callable               # (view, source) → FailureReason | None
    init:             Callable               # (view, source) → state
    step:             Callable               # (view, state)  → state
    outcome:          Callable               # (view, state)  → Outcome
    pseudocode:       List[str]              # lines for the side-panel
    tags:             List[str] = field(default_factory=list)   # e.g. ["unweighted", "traversal"]
    requires_source:  bool     = True        # must the user pick a start node?
    complexity_time:  str      = ""          # e.g. "O(V + E)"
    complexity_space: str      = ""          # e.g. "O(V)"
    description:      str      = ""          # one-liner for the UI card

    def to_dict(self) -> dict:
        return {
            "key":              self.key,
            "label":            self.label,
            "pseudocode":       list(self.pseudocode),
            "tags":             list(self.tags),
            "requires_source":  self.requires_source,
            "complexity_time":  self.complexity_time,
            "complexity_space": self.complexity_space,
            "description":      self.description,
        }


def _card(key: str, label: str, module, **kwargs) -> AlgoInfo:
    return AlgoInfo(
        key=key, label=label,
        check=module.check, init=module.init, step=module.step, outcome=module.outcome,
        pseudocode=module.PSEUDOCODE,
        **kwargs,
    )


# ---------------------------------------------------------------------------
# THE REGISTRY
# ---------------------------------------------------------------------------
REGISTRY: Dict[str, AlgoInfo] = {

    "bfs": _card(
        "bfs", "Breadth-First Search", _bfs,
        tags=["unweighted", "shortest-path", "traversal"],
        complexity_time="O(V + E)", complexity_space="O(V)",
        description="Explores layer-by-layer. Finds shortest path by hop count.",
    ),

    "dfs": _card(
        "dfs", "Depth-First Search", _dfs,
        tags=["unweighted", "traversal"],
        complexity_time="O(V + E)", complexity_space="O(V)",
        description="Dives deep before backtracking. Does NOT guarantee shortest path.",
    ),

    "topological": _card(
        "topological", "Topological Sort (DFS)", _topo,
        tags=["directed", "ordering", "cycle-detection"],
        requires_source=False,
        complexity_time="O(V + E)", complexity_space="O(V)",
        description="DFS over every component; orders nodes by descending finish time.",
    ),

    "bellman_ford": _card(
        "bellman_ford", "Bellman–Ford", _bf,
        tags=["weighted", "shortest-path", "negative-edges", "directed"],
        requires_source=False,
        complexity_time="O(V · E)", complexity_space="O(V)",
        description="Handles negative edges. Detects negative cycles. Slower than Dijkstra.",
    ),

    "dijkstra": _card(
        "dijkstra", "Dijkstra's Algorithm", _dijkstra,
        tags=["weighted", "shortest-path", "directed"],
        complexity_time="O((V + E) log V)", complexity_space="O(V)",
        description="Greedily finalises the closest node. Optimal for non-negative weights.",
    ),

    "prim": _card(
        "prim", "Prim's MST", _prim,
        tags=["weighted", "mst"],
        complexity_time="O(E log V)", complexity_space="O(V + E)",
        description="Grows one tree from the source. Fails on a disconnected graph.",
    ),

    "kruskal": _card(
        "kruskal", "Kruskal's MST", _kruskal,
        tags=["weighted", "mst", "undirected", "union-find"],
        requires_source=False,
        complexity_time="O(E log E)", complexity_space="O(V)",
        description="Takes edges cheapest-first, skipping cycles. Yields a forest when disconnected.",
    ),
}


# ---------------------------------------------------------------------------
# Lookup helpers
# ---------------------------------------------------------------------------
def get_algorithm(key: str) -> Optional[AlgoInfo]:
    """Return AlgoInfo by key, or None."""
    return REGISTRY.get(key)


def list_algorithms() -> List[AlgoInfo]:
    """Return all registered algorithms in insertion order."""
    return list(REGISTRY.values())


def algorithms_by_tag(tag: str) -> List[AlgoInfo]:
    """Filter registry by tag."""
    return [a for a in REGISTRY.values() if tag in a.tags]


__all__ = [
    "AlgoInfo",
    "REGISTRY",
    "get_algorithm",
    "list_algorithms",
    "algorithms_by_tag",
    "DisjointSet",
    "FailureReason",
    "FAILURE_MESSAGES",
    "Outcome",
    "ResultStatus",
    "RunState",
    "INF",
]

"""
recorder.py — Run Recorder & Comparison
=========================================
Records a complete algorithm run (every snapshot), then computes the
metrics the Analytics panel and Comparison Mode need.

Usage:
    rec = Recorder(graph)
    rec.start(algo_key="dijkstra", source=uid)
    rec.run_to_completion()          # steps until Completed / Failed
    metrics = rec.get_metrics()      # the analytics card
    rec.export()                     # serialisable snapshot list

Comparison Mode:
    Two Recorders run on the SAME graph, then compare(rec1, rec2) →
    ComparisonResult.  Typical pairs: Bellman–Ford vs Dijkstra (distances
    must agree) and Kruskal vs Prim (MST weights must agree).

Each Recorder drives its own StepController, so a recording never touches
the workspace's interactive run.
"""

import logging
import time
from dataclasses import asdict, dataclass, field
from typing import Any, Dict, List, Optional

from graph import Graph
from algorithms import get_algorithm
from algorithms.state import finite
from engine.controller import AlgorithmRun, Phase, StepController

logger = logging.getLogger(__name__)


# ---------------------------------------------------------------------------
# Metrics dataclass — what the Analytics panel renders
# ---------------------------------------------------------------------------
@dataclass
class RunMetrics:
    algo_key:       str                        = ""
    algo_label:     str                        = ""
    source:         Optional[int]              = None     # visible id
    phase:          str                        = ""
    status:         str                        = ""       # ResultStatus value
    valid:          bool                       = False
    nodes_visited:  int                        = 0
    edges_visited:  int                        = 0
    total_steps:    int                        = 0
    wall_time_ms:   float                      = 0.0
    distances:      Dict[str, Optional[float]] = field(default_factory=dict)
    total_weight:   Optional[float]            = None     # Prim / Kruskal
    negative_cycle: bool                       = False
    failure:        Optional[str]              = None


# ---------------------------------------------------------------------------
# ComparisonResult — side-by-side analytics
# ---------------------------------------------------------------------------
@dataclass
class ComparisonResult:
    left:  RunMetrics = field(default_factory=RunMetrics)
    right: RunMetrics = field(default_factory=RunMetrics)
    # derived
    winner_steps:     str             = ""     # which algo needed fewer steps
    winner_nodes:     str             = ""     # which algo visited fewer nodes
    distances_agree:  bool            = False
    weight_diff:      Optional[float] = None   # left.total_weight - right.total_weight

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)


# ---------------------------------------------------------------------------
# Recorder
# ---------------------------------------------------------------------------
class Recorder:
    """
    Attributes:
        runs       : Every AlgorithmRun snapshot of the recording.
        metrics    : Computed RunMetrics (available after run_to_completion).
        controller : The private StepController driving the recording.
    """

    def __init__(self, graph: Graph):
        self.graph:      Graph                = graph
        self.runs:       List[AlgorithmRun]   = []
        self.metrics:    Optional[RunMetrics] = None
        self.controller: StepController       = StepController(graph)

        self._algo_key: str           = ""
        self._source:   Optional[str] = None

    # ------------------------------------------------------------------
    # Setup & run
    # ------------------------------------------------------------------
    def start(self, algo_key: str, source: Optional[str] = None) -> AlgorithmRun:
        """Start the run; unknown keys raise ValueError."""
        self.controller.reset_all()
        self._algo_key = algo_key
        self._source   = source
        self.metrics   = None
        run = self.controller.start(algo_key, source)
        self.runs = list(self.controller.history)
        return run

    def run_to_completion(self) -> RunMetrics:
        """Step until the run finishes, record every snapshot, compute metrics."""
        if not self._algo_key:
            raise RuntimeError("Call start() first.")

        started = time.monotonic()
        self.controller.run_to_completion()
        wall_ms = (time.monotonic() - started) * 1000

        self.runs = list(self.controller.history)
        self.metrics = self._compute_metrics(wall_ms)
        logger.debug("Recorded %s: %d snapshot(s)", self._algo_key, len(self.runs))
        return self.metrics

    def get_metrics(self) -> Optional[RunMetrics]:
        return self.metrics

    @property
    def final(self) -> Optional[AlgorithmRun]:
        return self.runs[-1] if self.runs else None

    # ------------------------------------------------------------------
    # Export (serialisable snapshot)
    # ------------------------------------------------------------------
    def export(self) -> Dict[str, Any]:
        view = self.controller.view(self._algo_key) if self._algo_key else None
        return {
            "algo_key": self._algo_key,
            "source":   view.visible_id(self._source) if view else None,
            "graph":    self.graph.to_dict(),
            "metrics":  asdict(self.metrics) if self.metrics else {},
            "steps":    [run.to_dict(view) for run in self.runs],
        }

    # ------------------------------------------------------------------
    # Internal
    # ------------------------------------------------------------------
    def _compute_metrics(self, wall_ms: float) -> RunMetrics:
        last = self.final
        info = get_algorithm(self._algo_key)
        view = self.controller.view(self._algo_key)
        state = last.state if last else None
        outcome = last.outcome if last else None

        distances: Dict[str, Optional[float]] = {}
        if state is not None and view is not None:
            distances = {str(view.visible_id(u)): finite(d) for u, d in state.distance.items()
                         if view.has_node(u)}

        return RunMetrics(
            algo_key=info.key,
            algo_label=info.label,
            source=view.visible_id(last.source) if last and view else None,
            phase=last.phase.value if last else Phase.IDLE.value,
            status=outcome.status.value if outcome else "",
            valid=outcome.valid if outcome else False,
            nodes_visited=len(state.visited_nodes) if state else 0,
            edges_visited=len(state.visited_edges) if state else 0,
            total_steps=last.step_number if last else 0,
            wall_time_ms=round(wall_ms, 2),
            distances=distances,
            total_weight=outcome.total_weight if outcome else None,
            negative_cycle=bool(getattr(state, "has_negative_cycle", False)),
            failure=last.failure.value if last and last.failure else None,
        )


# ---------------------------------------------------------------------------
# Comparison helper
# ---------------------------------------------------------------------------
def compare(left: Recorder, right: Recorder) -> ComparisonResult:
    """Given two completed Recorders, produce a ComparisonResult."""
    l = left.metrics  or RunMetrics()
    r = right.metrics or RunMetrics()

    def winner(l_val, r_val, l_key, r_key):
        if l_val == r_val:
            return "tie"
        return l_key if l_val < r_val else r_key

    weight_diff = None
    if l.total_weight is not None and r.total_weight is not None:
        weight_diff = l.total_weight - r.total_weight

    return ComparisonResult(
        left=l,
        right=r,
        winner_steps=winner(l.total_steps, r.total_steps, l.algo_label, r.algo_label),
        winner_nodes=winner(l.nodes_visited, r.nodes_visited, l.algo_label, r.algo_label),
        distances_agree=bool(l.distances) and l.distances == r.distances,
        weight_diff=weight_diff,
    )

"""
controller.py — Step Controller
================================
The StepController is the ONLY object the renderer talks to during a run.
It owns the algorithm state, gates every step on the current phase, and
locks the graph so nothing structural changes underneath a run.

State machine (per algorithm kind):

    IDLE ──select()──▶ AWAITING_SOURCE            (source-requiring algorithms)
    IDLE / AWAITING_SOURCE ──start()──▶ RUNNING   (one step taken immediately)
                                    └──▶ FAILED   (precondition violated, no steps)
    RUNNING ──pause()──▶ PAUSED ──resume()──▶ RUNNING   (resume steps at once)
    RUNNING ──step()…──▶ COMPLETED | FAILED
    any     ──reset()──▶ IDLE

Only one run may be RUNNING or PAUSED at a time; start() on a second
algorithm raises ControllerBusyError instead of interleaving.

Timing:
  The controller never sleeps and never schedules itself.  The driving
  loop (owned by the client) calls step() every `delay_ms`; a call that
  arrives while the phase is not RUNNING is ignored, so a stale tick after
  pause() or reset() cannot advance anything.

Thread safety:
  This class is NOT thread-safe.  The web layer serialises calls through a
  single Workspace lock.
"""

import logging
from dataclasses import dataclass, replace
from enum import Enum
from typing import Any, Callable, Dict, List, Optional

from algorithms import AlgoInfo, get_algorithm
from algorithms.state import FAILURE_MESSAGES, FailureReason, Outcome, RunState
from graph import Graph, GraphView

logger = logging.getLogger(__name__)


class ControllerBusyError(RuntimeError):
    """Raised when a second run is started while one is Running / Paused."""


# ---------------------------------------------------------------------------
# Phases
# ---------------------------------------------------------------------------
class Phase(Enum):
    IDLE            = "idle"
    AWAITING_SOURCE = "awaiting_source"
    RUNNING         = "running"
    PAUSED          = "paused"
    COMPLETED       = "completed"
    FAILED          = "failed"

    @property
    def active(self) -> bool:
        return self in (Phase.RUNNING, Phase.PAUSED)

    @property
    def finished(self) -> bool:
        return self in (Phase.COMPLETED, Phase.FAILED)


# ---------------------------------------------------------------------------
# AlgorithmRun — one immutable snapshot of a run
# ---------------------------------------------------------------------------
@dataclass(frozen=True)
class AlgorithmRun:
    """
    Attributes:
        kind        : Registry key of the algorithm.
        phase       : Current Phase.
        step_number : Steps taken so far (0 before the first one).
        source      : uid the run started from, if any.
        state       : Algorithm state after the last step.
        failure     : Why the run is FAILED (precondition or runtime).
        outcome     : Result validity, set once COMPLETED / FAILED.
    """

    kind:        str
    phase:       Phase                    = Phase.IDLE
    step_number: int                      = 0
    source:      Optional[str]            = None
    state:       Optional[RunState]       = None
    failure:     Optional[FailureReason]  = None
    outcome:     Optional[Outcome]        = None

    def to_dict(self, view: Optional[GraphView] = None) -> Dict[str, Any]:
        info = get_algorithm(self.kind)
        return {
            "kind":            self.kind,
            "label":           info.label if info else self.kind,
            "phase":           self.phase.value,
            "step":            self.step_number,
            "source":          view.visible_id(self.source) if view else None,
            "failure":         self.failure.value if self.failure else None,
            "failure_message": FAILURE_MESSAGES[self.failure] if self.failure else None,
            "outcome":         self.outcome.to_dict(view) if self.outcome and view else None,
            "state":           self.state.to_dict(view) if self.state and view else None,
        }


# ---------------------------------------------------------------------------
# StepController
# ---------------------------------------------------------------------------
class StepController:
    """
    Attributes:
        graph    : The Graph Store the runs read from (locked while active).
        selected : Algorithm kind picked last via select() / start().
        history  : Every snapshot emitted by the current run, in order.
        on_step  : Optional callback(AlgorithmRun) fired after each step.
                   The renderer hooks its re-draw here.
    """

    def __init__(self, graph: Graph, on_step: Optional[Callable[[AlgorithmRun], None]] = None):
        self.graph:    Graph                 = graph
        self.selected: Optional[str]         = None
        self.history:  List[AlgorithmRun]    = []
        self.on_step:  Optional[Callable[[AlgorithmRun], None]] = on_step

        self._runs:  Dict[str, AlgorithmRun] = {}
        self._views: Dict[str, GraphView]    = {}

    # ------------------------------------------------------------------
    # Read-only accessors
    # ------------------------------------------------------------------
    @property
    def active(self) -> Optional[AlgorithmRun]:
        """The RUNNING / PAUSED run, if there is one."""
        for run in self._runs.values():
            if run.phase.active:
                return run
        return None

    def run(self, kind: Optional[str] = None) -> AlgorithmRun:
        """Latest snapshot for `kind` (default: the selected algorithm)."""
        kind = self._kind(kind)
        return self._runs.get(kind, AlgorithmRun(kind))

    def view(self, kind: Optional[str] = None) -> Optional[GraphView]:
        return self._views.get(self._kind(kind))

    def snapshot(self, kind: Optional[str] = None) -> Dict[str, Any]:
        kind = self._kind(kind)
        return self.run(kind).to_dict(self._views.get(kind))

    # ------------------------------------------------------------------
    # Lifecycle
    # ------------------------------------------------------------------
    def select(self, kind: str) -> AlgorithmRun:
        """Pick the algorithm the next start() will use."""
        info = self._info(kind)
        busy = self.active
        if busy is not None and busy.kind != kind:
            raise ControllerBusyError(f"{busy.kind} is {busy.phase.value}; reset it first")
        self.selected = kind
        run = self.run(kind)
        if run.phase == Phase.IDLE and info.requires_source:
            run = self._store(replace(run, phase=Phase.AWAITING_SOURCE))
        return run

    def start(self, kind: Optional[str] = None, source: Optional[str] = None) -> AlgorithmRun:
        """Validate preconditions, initialise, and take the first step."""
        kind = self._kind(kind)
        info = self._info(kind)
        busy = self.active
        if busy is not None:
            raise ControllerBusyError(f"{busy.kind} is {busy.phase.value}; reset it first")

        self.selected = kind
        self.history = []

        view = self.graph.snapshot()
        self._views[kind] = view

        failure = info.check(view, source)
        if failure is not None:
            logger.info("%s failed to start: %s", kind, failure.value)
            run = AlgorithmRun(kind, Phase.FAILED, source=source, failure=failure)
            self._store(run)
            self._emit(run)
            return run

        state = info.init(view, source)
        self.graph.lock(self)
        logger.info("%s started from %s", kind, view.visible_id(state.source))
        self._store(AlgorithmRun(kind, Phase.RUNNING, source=state.source, state=state))
        return self._advance(kind)

    def step(self) -> Optional[AlgorithmRun]:
        """
        Advance the active run by one step.  Ignored (returns the current
        snapshot unchanged) unless a run is RUNNING.
        """
        run = self.active
        if run is None or run.phase != Phase.RUNNING:
            logger.debug("Ignored step: no running algorithm")
            return run if run is not None else self._runs.get(self.selected)
        return self._advance(run.kind)

    def pause(self) -> Optional[AlgorithmRun]:
        run = self.active
        if run is None or run.phase == Phase.PAUSED:
            return run
        logger.info("%s paused at step %d", run.kind, run.step_number)
        return self._store(replace(run, phase=Phase.PAUSED))

    def resume(self) -> Optional[AlgorithmRun]:
        """Back to RUNNING and take the next step at once."""
        run = self.active
        if run is None or run.phase != Phase.PAUSED:
            return run
        logger.info("%s resumed at step %d", run.kind, run.step_number)
        self._store(replace(run, phase=Phase.RUNNING))
        return self._advance(run.kind)

    def reset(self, kind: Optional[str] = None) -> Optional[AlgorithmRun]:
        """Discard all run state for `kind` and return it to IDLE."""
        if kind is None and self.active is not None:
            kind = self.active.kind
        if kind is None and self.selected is None:
            self.reset_all()
            return None
        kind = self._kind(kind)
        self._info(kind)
        previous = self._runs.pop(kind, None)
        self._views.pop(kind, None)
        if previous is not None and previous.phase.active:
            self.history = []
        if self.active is None:
            self.graph.unlock(self)
        logger.info("%s reset", kind)
        return AlgorithmRun(kind)

    def cancel(self) -> Optional[AlgorithmRun]:
        """Abandon the active run, if any.  Same effect as reset() on it."""
        run = self.active
        if run is None:
            return None
        return self.reset(run.kind)

    def reset_all(self) -> None:
        self._runs.clear()
        self._views.clear()
        self.history = []
        self.selected = None
        self.graph.unlock(self)
        logger.info("All algorithm runs reset")

    def run_to_completion(self) -> Optional[AlgorithmRun]:
        """Step the active run until it is COMPLETED or FAILED."""
        run = self.active
        if run is not None and run.phase == Phase.PAUSED:
            run = self.resume()
        while run is not None and run.phase == Phase.RUNNING:
            run = self._advance(run.kind)
        return run

    # ------------------------------------------------------------------
    # Internal
    # ------------------------------------------------------------------
    def _kind(self, kind: Optional[str]) -> str:
        kind = kind or self.selected
        if kind is None:
            raise ValueError("No algorithm selected")
        return kind

    @staticmethod
    def _info(kind: str) -> AlgoInfo:
        info = get_algorithm(kind)
        if info is None:
            raise ValueError(f"Unknown algorithm: {kind}")
        return info

    def _store(self, run: AlgorithmRun) -> AlgorithmRun:
        self._runs[run.kind] = run
        return run

    def _advance(self, kind: str) -> AlgorithmRun:
        info = self._info(kind)
        view = self._views[kind]
        run = self._runs[kind]
        state = info.step(view, run.state)
        run = replace(run, state=state, step_number=run.step_number + 1)

        if state.failure is not None:
            run = replace(run, phase=Phase.FAILED, failure=state.failure, outcome=info.outcome(view, state))
            logger.info("%s failed at step %d: %s", kind, run.step_number, state.failure.value)
        elif state.done:
            run = replace(run, phase=Phase.COMPLETED, outcome=info.outcome(view, state))
            logger.info("%s completed in %d step(s): %s", kind, run.step_number, run.outcome.status.value)

        if run.phase.finished:
            self.graph.unlock(self)
        self._store(run)
        self._emit(run)
        return run

    def _emit(self, run: AlgorithmRun) -> None:
        self.history.append(run)
        if self.on_step:
            self.on_step(run)

"""Tests for the step controller lifecycle."""

import pytest

from algorithms import FailureReason, ResultStatus
from engine import ControllerBusyError, Phase, StepController
from graph import GraphLockedError
from helpers import build, make_graph


def _path(graph, n=3):
    return build(graph, n, [(i, i + 1, 1) for i in range(n - 1)])


# =============================================================================
# start
# =============================================================================


def test_start_takes_one_step_immediately(graph, controller):
    uids = _path(graph)

    run = controller.start("bfs", uids[0])

    assert run.phase == Phase.RUNNING
    assert run.step_number == 1
    assert run.state.current == uids[0]
    assert controller.active is run


def test_start_locks_graph_until_completion(graph, controller):
    uids = _path(graph)
    controller.start("bfs", uids[0])

    with pytest.raises(GraphLockedError):
        graph.add_node()

    run = controller.run_to_completion()

    assert run.phase == Phase.COMPLETED
    assert run.outcome.status == ResultStatus.SUCCESS
    assert graph.locked is False
    graph.add_node()


def test_precondition_failure_takes_no_steps(graph, controller):
    uids = _path(graph)

    run = controller.start("dijkstra", uids[0])

    assert run.phase == Phase.FAILED
    assert run.failure == FailureReason.REQUIRES_DIRECTED
    assert run.step_number == 0
    assert run.state is None
    assert graph.locked is False
    assert controller.snapshot()["failure_message"] == "This algorithm requires a directed graph."


def test_missing_source_fails(graph, controller):
    _path(graph)

    run = controller.start("bfs")

    assert run.phase == Phase.FAILED
    assert run.failure == FailureReason.SOURCE_REQUIRED


def test_runtime_failure_unlocks_graph(graph, controller):
    uids = build(graph, 4, [(0, 1, 1), (2, 3, 1)])
    controller.start("prim", uids[0])

    run = controller.step()

    assert run.phase == Phase.FAILED
    assert run.failure == FailureReason.DISCONNECTED
    assert run.outcome.valid is False
    assert graph.locked is False


def test_unknown_algorithm_raises(controller):
    with pytest.raises(ValueError):
        controller.start("astar")
    with pytest.raises(ValueError):
        controller.select("astar")


def test_second_start_while_active_is_rejected(graph, controller):
    uids = _path(graph)
    controller.start("bfs", uids[0])

    with pytest.raises(ControllerBusyError):
        controller.start("dfs", uids[0])
    with pytest.raises(ControllerBusyError):
        controller.select("dfs")

    controller.pause()
    with pytest.raises(ControllerBusyError):
        controller.start("bfs", uids[0])


def test_start_after_completion_is_allowed(graph, controller):
    uids = _path(graph)
    controller.start("bfs", uids[0])
    controller.run_to_completion()

    run = controller.start("dfs", uids[0])

    assert run.kind == "dfs"
    assert controller.run("bfs").phase == Phase.COMPLETED


# =============================================================================
# select
# =============================================================================


def test_select_waits_for_source_only_when_needed(controller):
    assert controller.select("bfs").phase == Phase.AWAITING_SOURCE
    assert controller.select("kruskal").phase == Phase.IDLE
    assert controller.selected == "kruskal"


def test_start_uses_selected_algorithm(directed_graph):
    controller = StepController(directed_graph)
    uids = build(directed_graph, 2, [(0, 1, 1)])
    controller.select("topological")

    run = controller.start()

    assert run.kind == "topological"
    assert run.source == uids[0]


# =============================================================================
# step / pause / resume
# =============================================================================


def test_step_ignored_unless_running(graph, controller):
    uids = _path(graph, 4)
    controller.start("bfs", uids[0])
    paused = controller.pause()

    assert controller.step() is paused
    assert controller.step().step_number == 1


def test_pause_is_idempotent(graph, controller):
    uids = _path(graph, 4)
    controller.start("bfs", uids[0])

    first = controller.pause()
    second = controller.pause()

    assert first.phase == second.phase == Phase.PAUSED
    assert first.step_number == second.step_number == 1


def test_resume_steps_immediately(graph, controller):
    uids = _path(graph, 4)
    controller.start("bfs", uids[0])
    controller.pause()

    run = controller.resume()

    assert run.phase == Phase.RUNNING
    assert run.step_number == 2


def test_resume_without_pause_does_nothing(graph, controller):
    uids = _path(graph, 4)
    started = controller.start("bfs", uids[0])

    assert controller.resume() is started


def test_step_with_nothing_started(controller):
    assert controller.step() is None
    assert controller.pause() is None
    assert controller.resume() is None


# =============================================================================
# reset / cancel
# =============================================================================


def test_reset_returns_to_idle_and_unlocks(graph, controller):
    uids = _path(graph, 4)
    controller.start("bfs", uids[0])

    run = controller.reset()

    assert run.phase == Phase.IDLE
    assert run.state is None
    assert graph.locked is False
    assert controller.active is None
    assert controller.step() is None


def test_cancel_abandons_active_run(graph, controller):
    uids = _path(graph, 4)
    controller.start("dfs", uids[0])
    controller.pause()

    run = controller.cancel()

    assert run.kind == "dfs"
    assert run.phase == Phase.IDLE
    assert controller.cancel() is None
    assert graph.locked is False


def test_reset_all_forgets_every_run(graph, controller):
    uids = _path(graph)
    controller.start("bfs", uids[0])
    controller.run_to_completion()
    controller.start("dfs", uids[0])

    controller.reset_all()

    assert controller.selected is None
    assert controller.active is None
    assert graph.locked is False
    assert controller.run("bfs").phase == Phase.IDLE


# =============================================================================
# history / determinism
# =============================================================================


def test_on_step_sees_every_snapshot(graph):
    seen = []
    controller = StepController(graph, on_step=seen.append)
    uids = _path(graph)

    controller.start("bfs", uids[0])
    controller.run_to_completion()

    assert seen == controller.history
    assert [r.step_number for r in seen] == [1, 2, 3]


ALL_KINDS = ["bfs", "dfs", "topological", "bellman_ford", "dijkstra", "prim", "kruskal"]


def _recorded(kind, pause_every=None):
    # spanning-tree algorithms need an undirected graph
    directed = kind not in ("prim", "kruskal")
    graph, uids = make_graph(5, [(0, 1, 3), (0, 2, 1), (2, 1, 1), (1, 3, 2), (3, 4, 1), (2, 4, 7)], directed=directed)
    controller = StepController(graph)
    source = uids[0] if kind != "kruskal" else None
    controller.start(kind, source)
    count = 0
    while controller.active is not None:
        count += 1
        if pause_every and count % pause_every == 0:
            controller.pause()
            controller.pause()
            controller.step()
            controller.resume()
        else:
            controller.step()
    view = controller.view()
    return [run.to_dict(view) for run in controller.history]


@pytest.mark.parametrize("kind", ALL_KINDS)
def test_identical_runs_emit_identical_snapshots(kind):
    assert _recorded(kind) == _recorded(kind)


@pytest.mark.parametrize("kind", ALL_KINDS)
def test_pausing_does_not_change_the_snapshot_sequence(kind):
    assert _recorded(kind, pause_every=2) == _recorded(kind)


@pytest.mark.parametrize("kind", ALL_KINDS)
def test_recorded_runs_complete_successfully(kind):
    snapshots = _recorded(kind)

    assert snapshots[-1]["phase"] == "completed"
    assert snapshots[-1]["outcome"]["status"] == ResultStatus.SUCCESS.value

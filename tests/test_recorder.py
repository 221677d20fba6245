"""Tests for run recording and comparison mode."""

import pytest

from engine import Recorder, compare
from helpers import make_graph

EDGES = [(0, 1, 4), (0, 2, 1), (2, 1, 2), (1, 3, 1), (3, 4, 3), (2, 4, 9)]


def _record(graph, kind, source=None):
    rec = Recorder(graph)
    rec.start(kind, source)
    rec.run_to_completion()
    return rec


def test_bellman_ford_and_dijkstra_agree():
    graph, uids = make_graph(5, EDGES, directed=True)

    result = compare(_record(graph, "bellman_ford", uids[0]), _record(graph, "dijkstra", uids[0]))

    assert result.distances_agree is True
    assert result.left.distances == {"0": 0, "1": 3, "2": 1, "3": 4, "4": 7}
    assert result.winner_steps == "Dijkstra's Algorithm"


def test_kruskal_and_prim_weights_match():
    graph, uids = make_graph(5, EDGES)

    result = compare(_record(graph, "kruskal"), _record(graph, "prim", uids[0]))

    assert result.weight_diff == 0
    assert result.left.valid and result.right.valid
    assert result.left.total_weight == 7


def test_metrics_describe_the_run():
    graph, uids = make_graph(3, [(0, 1, 1), (1, 2, -1), (2, 1, -1)], directed=True)

    metrics = _record(graph, "bellman_ford", uids[0]).metrics

    assert metrics.phase == "completed"
    assert metrics.status == "negative_cycle"
    assert metrics.valid is False
    assert metrics.negative_cycle is True
    assert metrics.total_steps == 6
    assert metrics.source == 0


def test_failed_precondition_is_recorded():
    graph, uids = make_graph(2, [(0, 1, 1)])

    metrics = _record(graph, "dijkstra", uids[0]).metrics

    assert metrics.phase == "failed"
    assert metrics.failure == "requires_directed_graph"
    assert metrics.total_steps == 0


def test_export_lists_every_snapshot():
    graph, uids = make_graph(3, [(0, 1, 1), (1, 2, 1)])
    rec = _record(graph, "bfs", uids[0])

    exported = rec.export()

    assert exported["algo_key"] == "bfs"
    assert exported["source"] == 0
    assert len(exported["steps"]) == rec.metrics.total_steps == 3
    assert exported["steps"][-1]["phase"] == "completed"
    assert graph.locked is False


def test_recorder_misuse():
    graph, _ = make_graph(1, [])

    with pytest.raises(RuntimeError):
        Recorder(graph).run_to_completion()
    with pytest.raises(ValueError):
        Recorder(graph).start("floyd_warshall")

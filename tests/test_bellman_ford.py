"""Tests for the edge-sequence Bellman-Ford state machine."""

import math

from algorithms import FailureReason, ResultStatus, bellman_ford
from helpers import brute_force_distances, distances_by_id, drive, finish, make_graph

SAMPLE = [(0, 1, 4), (0, 2, 1), (2, 1, 2), (1, 3, 1)]


def test_distances_match_brute_force():
    graph, uids = make_graph(4, SAMPLE, directed=True)
    view = graph.snapshot()

    final = finish(view, "bellman_ford", uids[0])

    assert [final.distance[u] for u in uids] == brute_force_distances(4, SAMPLE, 0, directed=True)
    assert final.predecessor[uids[1]] == uids[2]
    assert bellman_ford.outcome(view, final).status == ResultStatus.SUCCESS


def test_one_step_per_edge_in_endpoint_order():
    graph, uids = make_graph(4, SAMPLE, directed=True)
    view = graph.snapshot()

    states = drive(view, "bellman_ford", uids[0])

    # edge ids sorted by (source id, target id): 0→1, 0→2, 1→3, 2→1
    assert [s.current_edge for s in states[1:5]] == [0, 1, 3, 2]
    assert states[0].edge_order == (0, 1, 3, 2)


def test_stops_early_after_a_quiet_pass():
    graph, uids = make_graph(4, [(0, 1, 1), (1, 2, 1), (2, 3, 1)], directed=True)
    view = graph.snapshot()

    final = finish(view, "bellman_ford", uids[0])

    assert final.position == 6
    assert final.passes == 3
    assert final.has_negative_cycle is False


def test_negative_edges_without_cycle():
    edges = [(0, 1, 5), (0, 2, 2), (2, 1, -4), (1, 3, 1)]
    graph, uids = make_graph(4, edges, directed=True)
    view = graph.snapshot()

    final = finish(view, "bellman_ford", uids[0])

    assert distances_by_id(view, final) == {0: 0, 1: -2, 2: 2, 3: -1}
    assert bellman_ford.outcome(view, final).valid


def test_negative_cycle_is_flagged():
    graph, uids = make_graph(3, [(0, 1, 1), (1, 2, -1), (2, 1, -1)], directed=True)
    view = graph.snapshot()

    final = finish(view, "bellman_ford", uids[0])
    result = bellman_ford.outcome(view, final)

    assert final.has_negative_cycle is True
    assert result.status == ResultStatus.NEGATIVE_CYCLE
    assert result.valid is False


def test_two_node_negative_cycle_is_flagged():
    graph, uids = make_graph(2, [(0, 1, -1), (1, 0, -1)], directed=True)
    view = graph.snapshot()

    final = finish(view, "bellman_ford", uids[0])

    assert final.has_negative_cycle is True
    assert bellman_ford.outcome(view, final).status == ResultStatus.NEGATIVE_CYCLE


def test_relaxation_text_formats_numbers():
    graph, uids = make_graph(4, SAMPLE, directed=True)
    view = graph.snapshot()

    states = drive(view, "bellman_ford", uids[0])

    assert states[1].explanation.endswith("∞ → 4.")
    assert states[4].explanation == "Relax v2→v1 (w=2): 4 → 3."


def test_unreachable_nodes_keep_infinity():
    graph, uids = make_graph(3, [(0, 1, 2)], directed=True)
    view = graph.snapshot()

    final = finish(view, "bellman_ford", uids[0])

    assert math.isinf(final.distance[uids[2]])
    assert final.predecessor[uids[2]] is None


def test_default_source_is_lowest_id():
    graph, uids = make_graph(2, [(1, 0, 3)], directed=True)
    view = graph.snapshot()

    state = bellman_ford.init(view, None)

    assert state.source == uids[0]


def test_single_node_is_done_immediately(directed_graph):
    directed_graph.add_node()
    view = directed_graph.snapshot()

    state = bellman_ford.init(view, None)

    assert state.done
    assert bellman_ford.step(view, state).done


def test_requires_directed_graph():
    graph, uids = make_graph(2, [(0, 1, 1)])

    assert bellman_ford.check(graph.snapshot(), uids[0]) == FailureReason.REQUIRES_DIRECTED

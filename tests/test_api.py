"""Tests for the Flask JSON API."""

import pytest


def _node(client, x=0, y=0):
    return client.post("/api/nodes", json={"x": x, "y": y}).get_json()


def _edge(client, a, b, weight=1):
    return client.post("/api/edges", json={"source": a["uid"], "target": b["uid"], "weight": weight})


@pytest.fixture
def triangle(client):
    nodes = [_node(client, x=i * 50) for i in range(3)]
    _edge(client, nodes[0], nodes[1], 2)
    _edge(client, nodes[1], nodes[2], 3)
    _edge(client, nodes[0], nodes[2], 9)
    return nodes


# =============================================================================
# Graph editing
# =============================================================================


def test_add_and_list_nodes(client):
    response = client.post("/api/nodes", json={"x": 10, "y": 20})

    assert response.status_code == 201
    assert response.get_json()["id"] == 0
    graph = client.get("/api/graph").get_json()
    assert [n["id"] for n in graph["nodes"]] == [0]
    assert graph["locked"] is False


def test_move_and_delete_node(client, triangle):
    uid = triangle[1]["uid"]

    moved = client.patch(f"/api/nodes/{uid}", json={"x": 5}).get_json()
    assert (moved["x"], moved["y"]) == (5.0, 0.0)

    assert client.delete(f"/api/nodes/{uid}").status_code == 200
    assert len(client.get("/api/graph").get_json()["edges"]) == 1
    assert client.delete(f"/api/nodes/{uid}").status_code == 404


def test_duplicate_edge_rejected(client, triangle):
    response = _edge(client, triangle[1], triangle[0], 4)

    assert response.status_code == 400
    assert "error" in response.get_json()


def test_edge_to_unknown_node_is_404(client, triangle):
    response = client.post("/api/edges", json={"source": triangle[0]["uid"], "target": "ghost"})

    assert response.status_code == 404


def test_set_weight_and_validation(client, triangle):
    assert client.patch("/api/edges/0", json={"weight": 7}).get_json()["weight"] == 7.0
    assert client.patch("/api/edges/0", json={"weight": "heavy"}).status_code == 400
    assert client.patch("/api/edges/42", json={"weight": 1}).status_code == 404
    assert client.delete("/api/edges/0").status_code == 200


def test_mode_change_needs_empty_graph(client, triangle):
    assert client.post("/api/graph/mode", json={"directed": True}).status_code == 409

    client.post("/api/graph/clear")
    response = client.post("/api/graph/mode", json={"directed": True, "weighted": False})

    assert response.get_json() == {"directed": True, "weighted": False}


def test_reset_counter_reuses_ids(client, triangle):
    client.post("/api/graph/reset_counter")

    assert _node(client)["id"] == 0


def test_adjacency_views(client, triangle):
    body = client.get("/api/graph/adjacency").get_json()

    assert body["list"]["0"] == [[1, 2.0], [2, 9.0]]
    assert body["matrix"]["ids"] == [0, 1, 2]
    assert body["matrix"]["rows"][0] == [0, 1, 1]
    assert body["text"].startswith("Node 0: [")


# =============================================================================
# Run control
# =============================================================================


def test_algorithm_cards(client):
    keys = [card["key"] for card in client.get("/api/algorithms").get_json()]

    assert keys == ["bfs", "dfs", "topological", "bellman_ford", "dijkstra", "prim", "kruskal"]


def test_run_lifecycle(client, triangle):
    assert client.post("/api/run/select", json={"algo": "prim"}).get_json()["run"]["phase"] == "awaiting_source"

    started = client.post("/api/run/start", json={"source": 0}).get_json()
    assert started["run"]["phase"] == "running"
    assert started["run"]["step"] == 1
    assert started["delay_ms"] == 1650

    assert client.post("/api/nodes", json={}).status_code == 409

    paused = client.post("/api/run/pause").get_json()["run"]
    assert paused["phase"] == "paused"
    assert client.post("/api/run/step").get_json()["run"]["step"] == 1

    finished = client.post("/api/run/resume").get_json()["run"]
    assert finished["phase"] == "completed"
    assert finished["outcome"]["total_weight"] == 5

    state = client.get("/api/state").get_json()
    assert state["selected"] == "prim"
    assert state["graph"]["locked"] is False


def test_precondition_failure_is_reported_not_raised(client, triangle):
    body = client.post("/api/run/start", json={"algo": "dijkstra", "source": 0}).get_json()

    assert body["run"]["phase"] == "failed"
    assert body["run"]["failure"] == "requires_directed_graph"


def test_busy_controller_is_409(client, triangle):
    client.post("/api/run/start", json={"algo": "bfs", "source": 0})

    response = client.post("/api/run/start", json={"algo": "dfs", "source": 0})

    assert response.status_code == 409


def test_reset_and_cancel(client, triangle):
    client.post("/api/run/start", json={"algo": "dfs", "source": 0})

    cancelled = client.post("/api/run/cancel").get_json()
    assert cancelled["run"]["phase"] == "idle"
    assert cancelled["locked"] is False

    reset = client.post("/api/run/reset", json={"algo": "dfs"}).get_json()
    assert reset["run"]["kind"] == "dfs"


def test_unknown_source_and_algorithm(client, triangle):
    assert client.post("/api/run/start", json={"algo": "bfs", "source": 17}).status_code == 404
    assert client.post("/api/run/start", json={"algo": "nope", "source": 0}).status_code == 400


def test_malformed_ids_are_400(client, triangle):
    uid = triangle[0]["uid"]

    assert client.post("/api/edges", json={"source": [uid], "target": uid}).status_code == 400
    assert client.post("/api/edges", json={"source": uid, "target": None}).status_code == 400
    assert client.post("/api/run/start", json={"algo": "bfs", "source": 1.5}).status_code == 400
    assert client.post("/api/run/start", json={"algo": "bfs", "source": [0]}).status_code == 400
    assert client.get("/api/graph").get_json()["locked"] is False


# =============================================================================
# Config & comparison
# =============================================================================


def test_speed_endpoint(client):
    body = client.post("/api/config/speed", json={"speed": 100}).get_json()

    assert body == {"speed": 100, "delay_ms": 900}
    assert client.post("/api/config/speed", json={"speed": "ludicrous"}).status_code == 400


def test_compare_endpoint(client, triangle):
    body = client.post("/api/compare", json={"left": "kruskal", "right": "prim", "source": 0}).get_json()

    assert body["weight_diff"] == 0
    assert body["left"]["total_weight"] == 5
    assert client.post("/api/compare", json={"left": "bfs"}).status_code == 400


def test_compare_rejected_while_a_run_is_active(client, triangle):
    client.post("/api/run/start", json={"algo": "bfs", "source": 0})
    request = {"left": "kruskal", "right": "prim", "source": 0}

    assert client.post("/api/compare", json=request).status_code == 409
    client.post("/api/run/pause")
    assert client.post("/api/compare", json=request).status_code == 409

    run = client.get("/api/state").get_json()["run"]
    assert (run["kind"], run["phase"], run["step"]) == ("bfs", "paused", 1)

    client.post("/api/run/cancel")
    assert client.post("/api/compare", json=request).status_code == 200

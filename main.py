"""
main.py — Graph Algorithm Engine Flask App
============================================
JSON API in front of the graph store and the step controller.  The
renderer (canvas, drag, colours, prompts) lives in the client; so does
the driving loop, which calls POST /api/run/step every `delay_ms`.

Routes:
  GET    /api/graph                 – nodes, edges, mode flags
  POST   /api/graph/mode            – set directed / weighted (empty graph only)
  POST   /api/graph/clear           – delete everything, counters back to 0
  POST   /api/graph/reset_counter   – next node id back to 0
  GET    /api/graph/adjacency       – adjacency list, matrix and text view
  POST   /api/nodes                 – add a node at (x, y)
  PATCH  /api/nodes/<uid>           – move a node
  DELETE /api/nodes/<uid>           – delete a node (and its edges)
  POST   /api/edges                 – connect two nodes (by uid)
  PATCH  /api/edges/<eid>           – change an edge weight
  DELETE /api/edges/<eid>           – delete an edge
  GET    /api/algorithms            – registry cards
  POST   /api/run/select            – pick an algorithm
  POST   /api/run/start             – start it (source by visible id)
  POST   /api/run/step              – one step (ignored unless running)
  POST   /api/run/pause             – pause
  POST   /api/run/resume            – resume (steps immediately)
  POST   /api/run/reset             – back to idle
  POST   /api/run/cancel            – abandon the active run
  GET    /api/state                 – graph + run snapshot + config
  POST   /api/config/speed          – set animation speed (1–100 or preset)
  POST   /api/compare               – record two algorithms and compare them

State management:
  One in-memory Workspace per app (graph + controller + config).  Nothing
  is persisted.  Requests are serialised through the workspace lock.

Errors:
  400 – malformed input            404 – unknown node / edge
  409 – graph locked by a run, mode change on a non-empty graph,
        or another algorithm already running
"""

import logging
import threading
from functools import wraps
from typing import Any, Dict, Optional

from flask import Flask, jsonify, request

from graph import Graph, GraphError, GraphLockedError, ModeLockedError
from algorithms import list_algorithms
from engine import ControllerBusyError, EngineConfig, Recorder, StepController, compare

logger = logging.getLogger(__name__)


# ---------------------------------------------------------------------------
# Workspace — the single in-memory session
# ---------------------------------------------------------------------------
class Workspace:
    """
    Attributes:
        graph      : The Graph Store being edited.
        controller : StepController for the interactive run.
        config     : EngineConfig (speed, server settings).
        lock       : Serialises request handling.
    """

    def __init__(self, config: EngineConfig):
        self.graph      = Graph()
        self.controller = StepController(self.graph)
        self.config     = config
        self.lock       = threading.Lock()

    def state(self) -> Dict[str, Any]:
        return {
            "graph":    self.graph.to_dict(),
            "selected": self.controller.selected,
            "run":      self.controller.snapshot() if self.controller.selected else None,
            "config":   self.config.to_dict(),
        }


# ---------------------------------------------------------------------------
# Request helpers
# ---------------------------------------------------------------------------
def _body() -> Dict[str, Any]:
    return request.get_json(silent=True) or {}


def _number(body: Dict[str, Any], key: str, default: Optional[float] = None) -> Optional[float]:
    value = body.get(key, default)
    if value is None:
        return None
    if isinstance(value, bool):
        raise ValueError(f"'{key}' must be a number")
    try:
        return float(value)
    except (TypeError, ValueError):
        raise ValueError(f"'{key}' must be a number") from None


def _error(message: str, status: int):
    return jsonify({"error": message}), status


# ---------------------------------------------------------------------------
# App factory
# ---------------------------------------------------------------------------
def create_app(config: Optional[EngineConfig] = None) -> Flask:
    config = config or EngineConfig.from_env()
    app = Flask(__name__)
    app.config.update(
        GRAPHVIZ_SPEED=config.speed,
        GRAPHVIZ_HOST=config.host,
        GRAPHVIZ_PORT=config.port,
        DEBUG=config.debug,
    )
    ws = Workspace(config)
    app.extensions["workspace"] = ws

    def serialised(fn):
        @wraps(fn)
        def wrapper(*args, **kwargs):
            with ws.lock:
                return fn(*args, **kwargs)
        return wrapper

    def run_payload(run) -> Dict[str, Any]:
        if run is None:
            return {"run": None, "delay_ms": config.delay_ms}
        return {"run": ws.controller.snapshot(run.kind), "delay_ms": config.delay_ms}

    def resolve_source(body: Dict[str, Any]) -> Optional[str]:
        """Visible id → uid.  Raises LookupError for ids with no live node."""
        if body.get("source") is None:
            return None
        node_id = _number(body, "source")
        if not node_id.is_integer():
            raise ValueError("'source' must be a whole node id")
        node = ws.graph.find_node(int(node_id))
        if node is None:
            raise LookupError(f"No node with id {int(node_id)}")
        return node.uid

    # -----------------------------------------------------------------------
    # Error mapping
    # -----------------------------------------------------------------------
    @app.errorhandler(GraphLockedError)
    @app.errorhandler(ModeLockedError)
    @app.errorhandler(ControllerBusyError)
    def handle_conflict(exc):
        return _error(str(exc), 409)

    @app.errorhandler(LookupError)
    def handle_missing(exc):
        return _error(str(exc).strip("'\""), 404)

    @app.errorhandler(GraphError)
    @app.errorhandler(ValueError)
    def handle_bad_input(exc):
        return _error(str(exc), 400)

    # -----------------------------------------------------------------------
    # API: Graph
    # -----------------------------------------------------------------------
    @app.route("/api/graph", methods=["GET"])
    @serialised
    def api_graph():
        return jsonify(ws.graph.to_dict())

    @app.route("/api/graph/mode", methods=["POST"])
    @serialised
    def api_graph_mode():
        body = _body()
        if "directed" in body:
            ws.graph.set_directed(bool(body["directed"]))
        if "weighted" in body:
            ws.graph.set_weighted(bool(body["weighted"]))
        return jsonify({"directed": ws.graph.directed, "weighted": ws.graph.weighted})

    @app.route("/api/graph/clear", methods=["POST"])
    @serialised
    def api_graph_clear():
        ws.graph.clear()
        ws.controller.reset_all()
        return jsonify(ws.graph.to_dict())

    @app.route("/api/graph/reset_counter", methods=["POST"])
    @serialised
    def api_graph_reset_counter():
        ws.graph.reset_counter()
        return jsonify({"next_id": 0})

    @app.route("/api/graph/adjacency", methods=["GET"])
    @serialised
    def api_graph_adjacency():
        ids, matrix = ws.graph.adjacency_matrix()
        return jsonify({
            "list":   {str(k): [[n, w] for n, w in v] for k, v in ws.graph.adjacency().items()},
            "matrix": {"ids": ids, "rows": matrix},
            "text":   ws.graph.format_adjacency_list(),
        })

    # -----------------------------------------------------------------------
    # API: Nodes
    # -----------------------------------------------------------------------
    @app.route("/api/nodes", methods=["POST"])
    @serialised
    def api_add_node():
        body = _body()
        uid = ws.graph.add_node(_number(body, "x", 0.0), _number(body, "y", 0.0))
        return jsonify(ws.graph.get_node(uid).to_dict()), 201

    @app.route("/api/nodes/<uid>", methods=["PATCH"])
    @serialised
    def api_move_node(uid):
        node = ws.graph.get_node(uid)
        if node is None:
            return _error(f"No such node: {uid}", 404)
        body = _body()
        ws.graph.move_node(uid, _number(body, "x", node.x), _number(body, "y", node.y))
        return jsonify(node.to_dict())

    @app.route("/api/nodes/<uid>", methods=["DELETE"])
    @serialised
    def api_delete_node(uid):
        if ws.graph.get_node(uid) is None:
            return _error(f"No such node: {uid}", 404)
        ws.graph.delete_node(uid)
        return jsonify({"deleted": uid})

    # -----------------------------------------------------------------------
    # API: Edges
    # -----------------------------------------------------------------------
    @app.route("/api/edges", methods=["POST"])
    @serialised
    def api_add_edge():
        body = _body()
        source, target = body.get("source"), body.get("target")
        for uid in (source, target):
            if not isinstance(uid, str):
                return _error("'source' and 'target' must be node uids", 400)
            if ws.graph.get_node(uid) is None:
                return _error(f"No such node: {uid}", 404)
        eid = ws.graph.add_edge(source, target, _number(body, "weight"))
        if eid is None:
            return _error("Edge rejected: self loop or duplicate", 400)
        return jsonify(ws.graph.get_edge(eid).to_dict()), 201

    @app.route("/api/edges/<int:eid>", methods=["PATCH"])
    @serialised
    def api_set_weight(eid):
        if ws.graph.get_edge(eid) is None:
            return _error(f"No such edge: {eid}", 404)
        weight = _number(_body(), "weight")
        if weight is None:
            return _error("'weight' is required", 400)
        ws.graph.set_weight(eid, weight)
        return jsonify(ws.graph.get_edge(eid).to_dict())

    @app.route("/api/edges/<int:eid>", methods=["DELETE"])
    @serialised
    def api_delete_edge(eid):
        if ws.graph.get_edge(eid) is None:
            return _error(f"No such edge: {eid}", 404)
        ws.graph.delete_edge(eid)
        return jsonify({"deleted": eid})

    # -----------------------------------------------------------------------
    # API: Algorithms & run control
    # -----------------------------------------------------------------------
    @app.route("/api/algorithms", methods=["GET"])
    def api_algorithms():
        return jsonify([info.to_dict() for info in list_algorithms()])

    @app.route("/api/run/select", methods=["POST"])
    @serialised
    def api_run_select():
        return jsonify(run_payload(ws.controller.select(_body().get("algo", ""))))

    @app.route("/api/run/start", methods=["POST"])
    @serialised
    def api_run_start():
        body = _body()
        run = ws.controller.start(body.get("algo") or None, resolve_source(body))
        return jsonify(run_payload(run))

    @app.route("/api/run/step", methods=["POST"])
    @serialised
    def api_run_step():
        return jsonify(run_payload(ws.controller.step()))

    @app.route("/api/run/pause", methods=["POST"])
    @serialised
    def api_run_pause():
        return jsonify(run_payload(ws.controller.pause()))

    @app.route("/api/run/resume", methods=["POST"])
    @serialised
    def api_run_resume():
        return jsonify(run_payload(ws.controller.resume()))

    @app.route("/api/run/reset", methods=["POST"])
    @serialised
    def api_run_reset():
        run = ws.controller.reset(_body().get("algo") or None)
        return jsonify({"run": run.to_dict() if run else None, "locked": ws.graph.locked})

    @app.route("/api/run/cancel", methods=["POST"])
    @serialised
    def api_run_cancel():
        run = ws.controller.cancel()
        return jsonify({"run": run.to_dict() if run else None, "locked": ws.graph.locked})

    @app.route("/api/state", methods=["GET"])
    @serialised
    def api_state():
        return jsonify(ws.state())

    # -----------------------------------------------------------------------
    # API: Config
    # -----------------------------------------------------------------------
    @app.route("/api/config/speed", methods=["POST"])
    @serialised
    def api_config_speed():
        speed = config.set_speed(_body().get("speed", "medium"))
        app.config["GRAPHVIZ_SPEED"] = speed
        return jsonify({"speed": speed, "delay_ms": config.delay_ms})

    # -----------------------------------------------------------------------
    # API: Comparison mode
    # -----------------------------------------------------------------------
    @app.route("/api/compare", methods=["POST"])
    @serialised
    def api_compare():
        busy = ws.controller.active
        if busy is not None:
            raise ControllerBusyError(f"{busy.kind} is {busy.phase.value}; reset it before comparing")
        body = _body()
        left_key, right_key = body.get("left"), body.get("right")
        if not left_key or not right_key:
            return _error("Pick two algorithms to compare", 400)
        source = resolve_source(body)

        recorders = []
        for key in (left_key, right_key):
            rec = Recorder(ws.graph)
            rec.start(key, source)
            rec.run_to_completion()
            recorders.append(rec)
        return jsonify(compare(*recorders).to_dict())

    return app


# ---------------------------------------------------------------------------
# Run
# ---------------------------------------------------------------------------
if __name__ == "__main__":
    engine_config = EngineConfig.from_env()
    logging.basicConfig(
        level=engine_config.log_level,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )
    logger.info("Graph algorithm engine on http://%s:%d", engine_config.host, engine_config.port)
    create_app(engine_config).run(
        debug=engine_config.debug, host=engine_config.host, port=engine_config.port,
    )

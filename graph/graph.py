"""
graph.py — Graph Store
=======================
Single source of truth for the graph the user is editing.  Algorithms
never read it directly; they read a GraphView snapshot taken at run start.

Responsibilities:
  1. CRUD on nodes & edges                  (add / delete / move / re-weight)
  2. Mode flags                             (directed / weighted, empty graph only)
  3. Original-direction memory              (directed ↔ undirected round-trip)
  4. Derived adjacency views                (list, matrix, formatted text)
  5. Run locking                            (reject structural edits mid-run)

Design decisions:
  - Nodes live in a dict keyed by uid, edges in a dict keyed by edge id.
    Both preserve insertion order, which is the tie-break of last resort.
  - Adjacency is derived, not stored: rebuilt on demand from the edge list.
  - Structural edits while any run holds the lock raise GraphLockedError.
    Dragging (move_node) is not structural and stays allowed.
"""

import logging
from typing import Dict, List, Optional, Set, Tuple

from graph.node import Node
from graph.edge import Edge
from graph.errors import GraphError, GraphLockedError, ModeLockedError
from graph.view import GraphView

logger = logging.getLogger(__name__)


class Graph:
    """
    Attributes:
        nodes    : {uid: Node}
        edges    : {edge_id: Edge}
        directed : bool – graph-level directedness
        weighted : bool – whether weights are meaningful
    """

    def __init__(self, directed: bool = False, weighted: bool = True):
        self.nodes:    Dict[str, Node] = {}
        self.edges:    Dict[int, Edge] = {}
        self.directed: bool            = directed
        self.weighted: bool            = weighted

        self._next_node_id: int = 0
        self._next_edge_id: int = 0
        self._direction_memory: Dict[int, Tuple[str, str]] = {}   # edge_id → (source, target) as entered
        self._lock_owners: Set[int] = set()

    # ==================================================================
    # LOCKING
    # ==================================================================
    @property
    def locked(self) -> bool:
        return bool(self._lock_owners)

    def lock(self, owner: object) -> None:
        self._lock_owners.add(id(owner))

    def unlock(self, owner: object) -> None:
        self._lock_owners.discard(id(owner))

    def _check_unlocked(self, action: str) -> None:
        if self._lock_owners:
            logger.info("Rejected %s: an algorithm run is active", action)
            raise GraphLockedError(f"Cannot {action} while an algorithm is running; reset it first")

    # ==================================================================
    # MODE FLAGS
    # ==================================================================
    def set_directed(self, directed: bool) -> None:
        self._check_unlocked("change direction mode")
        if self.nodes:
            raise ModeLockedError("Direction mode can only change while the graph is empty")
        if directed == self.directed:
            return
        self.directed = directed
        if directed:
            self._restore_directions()
        else:
            self._dedupe_pairs()

    def set_weighted(self, weighted: bool) -> None:
        self._check_unlocked("change weight mode")
        if self.nodes:
            raise ModeLockedError("Weight mode can only change while the graph is empty")
        self.weighted = weighted

    # Mode flags only change on an empty graph, so in practice these two run
    # over no edges. They keep the edge table consistent with the new mode
    # if edges are ever present.
    def _restore_directions(self) -> None:
        for eid, edge in self.edges.items():
            src, tgt = self._direction_memory.get(eid, (edge.source, edge.target))
            edge.source, edge.target = src, tgt

    def _dedupe_pairs(self) -> None:
        seen: Set[frozenset] = set()
        for eid in list(self.edges):
            key = self.edges[eid].pair()
            if key in seen:
                del self.edges[eid]
                self._direction_memory.pop(eid, None)
                continue
            seen.add(key)

    # ==================================================================
    # NODE CRUD
    # ==================================================================
    def add_node(self, x: float = 0.0, y: float = 0.0) -> str:
        """Create a node at (x, y) and return its uid."""
        self._check_unlocked("add a node")
        node = Node(self._next_node_id, x=x, y=y)
        self._next_node_id += 1
        self.nodes[node.uid] = node
        logger.debug("Added node %d (%s)", node.id, node.uid)
        return node.uid

    def delete_node(self, uid: str) -> bool:
        """Remove a node and every incident edge.  False if it didn't exist."""
        self._check_unlocked("delete a node")
        if uid not in self.nodes:
            return False
        for eid in [eid for eid, e in self.edges.items() if e.touches(uid)]:
            del self.edges[eid]
            self._direction_memory.pop(eid, None)
        node = self.nodes.pop(uid)
        logger.debug("Deleted node %d (%s)", node.id, uid)
        return True

    def move_node(self, uid: str, x: float, y: float) -> None:
        node = self.nodes.get(uid)
        if node is None:
            raise GraphError(f"No such node: {uid}")
        node.move_to(x, y)

    def get_node(self, uid: str) -> Optional[Node]:
        return self.nodes.get(uid)

    def find_node(self, node_id: int) -> Optional[Node]:
        """First live node carrying visible id `node_id`."""
        for node in self.nodes.values():
            if node.id == node_id:
                return node
        return None

    def reset_counter(self) -> None:
        """Restart visible ids at 0.  uids stay unique, so nothing collides."""
        self._next_node_id = 0

    # ==================================================================
    # EDGE CRUD
    # ==================================================================
    def add_edge(self, source: str, target: str, weight: Optional[float] = None) -> Optional[int]:
        """
        Connect source → target.  Returns the new edge id, or None when the
        edge is rejected (self loop, or a duplicate for the current mode).
        """
        self._check_unlocked("add an edge")
        if source not in self.nodes or target not in self.nodes:
            raise GraphError(f"Edge endpoints must exist: {source} -> {target}")
        if source == target:
            logger.debug("Rejected self loop on %s", source)
            return None
        if self.get_edge_between(source, target) is not None:
            logger.debug("Rejected duplicate edge %s -> %s", source, target)
            return None

        w = float(weight) if (self.weighted and weight is not None) else 1.0
        edge = Edge(self._next_edge_id, source, target, w)
        self._next_edge_id += 1
        self.edges[edge.id] = edge
        self._direction_memory[edge.id] = (source, target)
        logger.debug("Added edge %d", edge.id)
        return edge.id

    def delete_edge(self, edge_id: int) -> bool:
        self._check_unlocked("delete an edge")
        if edge_id not in self.edges:
            return False
        del self.edges[edge_id]
        self._direction_memory.pop(edge_id, None)
        return True

    def set_weight(self, edge_id: int, weight: float) -> None:
        self._check_unlocked("change an edge weight")
        edge = self.edges.get(edge_id)
        if edge is None:
            raise GraphError(f"No such edge: {edge_id}")
        edge.weight = float(weight)

    def get_edge(self, edge_id: int) -> Optional[Edge]:
        return self.edges.get(edge_id)

    def get_edge_between(self, a: str, b: str) -> Optional[Edge]:
        """First edge connecting a and b (direction-aware)."""
        for e in self.edges.values():
            if e.source == a and e.target == b:
                return e
            if not self.directed and e.source == b and e.target == a:
                return e
        return None

    def original_direction(self, edge_id: int) -> Optional[Tuple[str, str]]:
        return self._direction_memory.get(edge_id)

    def effective_weight(self, edge: Edge) -> float:
        return edge.weight if self.weighted else 1.0

    # ==================================================================
    # DELETE ALL
    # ==================================================================
    def clear(self) -> None:
        self._check_unlocked("delete the graph")
        self.nodes.clear()
        self.edges.clear()
        self._direction_memory.clear()
        self._next_node_id = 0
        self._next_edge_id = 0
        logger.info("Graph cleared")

    # ==================================================================
    # DERIVED VIEWS
    # ==================================================================
    def snapshot(self) -> GraphView:
        return GraphView(self)

    def adjacency(self) -> Dict[int, List[Tuple[int, float]]]:
        """{visible id: [(neighbour id, weight), …]} in edge insertion order."""
        adj: Dict[int, List[Tuple[int, float]]] = {n.id: [] for n in self.nodes.values()}
        for e in self.edges.values():
            src, tgt = self.nodes.get(e.source), self.nodes.get(e.target)
            if src is None or tgt is None:
                continue
            w = self.effective_weight(e)
            adj[src.id].append((tgt.id, w))
            if not self.directed:
                adj[tgt.id].append((src.id, w))
        return adj

    def adjacency_matrix(self) -> Tuple[List[int], List[List[int]]]:
        """(ordered visible ids, 0/1 matrix).  Symmetric for undirected graphs."""
        view = self.snapshot()
        order = view.nodes()
        index = {uid: i for i, uid in enumerate(order)}
        matrix = [[0] * len(order) for _ in order]
        for uid in order:
            for arc in view.neighbours(uid):
                matrix[index[uid]][index[arc.node]] = 1
        return [view.visible_id(uid) for uid in order], matrix

    def format_adjacency_list(self) -> str:
        adj = self.adjacency()
        if not adj:
            return "Empty graph"
        lines: List[str] = []
        for node_id in sorted(adj):
            lines.append(f"Node {node_id}: [")
            if not adj[node_id]:
                lines.append("  No connections")
            for nbr, w in adj[node_id]:
                suffix = f" (weight: {w:g})" if self.weighted else ""
                lines.append(f"  → Node {nbr}{suffix}")
            lines.append("]")
        return "\n".join(lines)

    # ==================================================================
    # UTILITY
    # ==================================================================
    def node_count(self) -> int:
        return len(self.nodes)

    def edge_count(self) -> int:
        return len(self.edges)

    def to_dict(self) -> dict:
        return {
            "directed": self.directed,
            "weighted": self.weighted,
            "locked":   self.locked,
            "nodes":    [n.to_dict() for n in self.nodes.values()],
            "edges":    [e.to_dict() for e in self.edges.values()],
        }

    def __repr__(self) -> str:
        return f"Graph(nodes={self.node_count()}, edges={self.edge_count()}, directed={self.directed})"

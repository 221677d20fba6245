"""Shared builders and reference implementations for the test suite."""

import itertools
from typing import Dict, List, Optional, Sequence, Tuple

from algorithms import get_algorithm
from graph import Graph, GraphView

INF = float("inf")

EdgeSpec = Tuple  # (source index, target index) or (source index, target index, weight)


def build(graph: Graph, n: int, edges: Sequence[EdgeSpec]) -> List[str]:
    """Add n nodes (visible ids 0…n-1) and the given edges; return uids by index."""
    uids = [graph.add_node(i * 40.0, 0.0) for i in range(n)]
    for spec in edges:
        weight = spec[2] if len(spec) > 2 else None
        graph.add_edge(uids[spec[0]], uids[spec[1]], weight)
    return uids


def make_graph(n: int, edges: Sequence[EdgeSpec], directed: bool = False, weighted: bool = True):
    graph = Graph(directed=directed, weighted=weighted)
    return graph, build(graph, n, edges)


def drive(view: GraphView, kind: str, source: Optional[str] = None):
    """Run an algorithm state machine directly; return every state from init on."""
    info = get_algorithm(kind)
    assert info.check(view, source) is None
    states = [info.init(view, source)]
    while True:
        states.append(info.step(view, states[-1]))
        if states[-1].done or states[-1].failure is not None:
            return states


def finish(view: GraphView, kind: str, source: Optional[str] = None):
    return drive(view, kind, source)[-1]


def distances_by_id(view: GraphView, state) -> Dict[int, float]:
    return {view.visible_id(u): d for u, d in state.distance.items()}


def brute_force_distances(n: int, edges: Sequence[EdgeSpec], source: int, directed: bool) -> List[float]:
    """Cheapest simple path from `source` to every node, by trying every path."""
    adj: Dict[int, List[Tuple[int, float]]] = {i: [] for i in range(n)}
    for spec in edges:
        u, v = spec[0], spec[1]
        w = spec[2] if len(spec) > 2 else 1.0
        adj[u].append((v, w))
        if not directed:
            adj[v].append((u, w))

    best = [INF] * n
    best[source] = 0.0

    def walk(node: int, cost: float, seen: frozenset) -> None:
        for nbr, w in adj[node]:
            if nbr in seen:
                continue
            total = cost + w
            if total < best[nbr]:
                best[nbr] = total
            walk(nbr, total, seen | {nbr})

    walk(source, 0.0, frozenset([source]))
    return best


def brute_force_mst_weight(n: int, edges: Sequence[EdgeSpec]) -> float:
    """Cheapest spanning tree by checking every (n-1)-edge subset."""
    best = INF
    for subset in itertools.combinations(edges, n - 1):
        parent = list(range(n))

        def root(x):
            while parent[x] != x:
                x = parent[x]
            return x

        merged = 0
        for u, v, _ in subset:
            ru, rv = root(u), root(v)
            if ru != rv:
                parent[ru] = rv
                merged += 1
        if merged == n - 1:
            best = min(best, sum(w for _, _, w in subset))
    return best

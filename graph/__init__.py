"""
graph/
-----
Core data layer.  Public API:

    from graph import Graph, GraphView, Node, Edge
    from graph import GraphError, GraphLockedError, ModeLockedError
"""

from graph.node   import Node
from graph.edge   import Edge
from graph.errors import GraphError, GraphLockedError, ModeLockedError
from graph.view   import GraphView, EdgeRef, Arc
from graph.graph  import Graph

__all__ = [
    "Node",       "Edge",
    "Graph",      "GraphView",
    "EdgeRef",    "Arc",
    "GraphError", "GraphLockedError", "ModeLockedError",
]

"""Exceptions raised by the Graph Store."""


class GraphError(ValueError):
    """Invalid graph operation (unknown endpoint, unknown edge, ...)."""


class GraphLockedError(GraphError):
    """Structural edit attempted while an algorithm run holds the graph."""


class ModeLockedError(GraphError):
    """Weighted / directed mode changed while the graph still has nodes."""

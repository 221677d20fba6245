"""
node.py — Graph Node
====================
A node has two identifiers:

  - `id`  : the small integer shown on the canvas.  Assigned from a
            monotonically increasing counter that the user may reset, so
            two live nodes can briefly share the same `id`.
  - `uid` : an opaque handle that is unique for the lifetime of the
            process.  Every algorithm keys its state on `uid`, never `id`.

Position is the only mutable attribute (dragging).
"""

from typing import Optional
import uuid


class Node:
    """
    Attributes:
        id   : Visible integer id (may be reused after a counter reset).
        uid  : Opaque identity string.
        x, y : Canvas coordinates.
    """

    __slots__ = ("id", "uid", "x", "y")

    def __init__(
        self,
        node_id: int,
        x: float = 0.0,
        y: float = 0.0,
        uid: Optional[str] = None,
    ):
        self.id:  int   = node_id
        self.uid: str   = uid or uuid.uuid4().hex
        self.x:   float = x
        self.y:   float = y

    def move_to(self, x: float, y: float) -> None:
        self.x = x
        self.y = y

    def to_dict(self) -> dict:
        return {
            "id":  self.id,
            "uid": self.uid,
            "x":   self.x,
            "y":   self.y,
        }

    def __repr__(self) -> str:
        return f"Node(id={self.id}, uid={self.uid[:8]}, pos=({self.x:.1f},{self.y:.1f}))"

    def __eq__(self, other) -> bool:
        return isinstance(other, Node) and self.uid == other.uid

    def __hash__(self) -> int:
        return hash(self.uid)

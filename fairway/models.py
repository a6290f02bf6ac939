"""
In-memory models for lanes, chains and their vertices.

Vertices are shared by reference: when two chains cross, the same
Intersection object is spliced into both vertex lists, which is how a later
stage recovers which lanes meet at a point.
"""

from typing import Any, List, Optional, Sequence, Set, Tuple


class Vertex:
    """A 2D point on a chain."""

    __slots__ = ("x", "y", "is_intersection")

    def __init__(self, x: float, y: float, is_intersection: bool = False):
        self.x = x
        self.y = y
        self.is_intersection = is_intersection

    def as_tuple(self) -> Tuple[float, float]:
        return (self.x, self.y)

    def __repr__(self) -> str:
        return f"Vertex({self.x!r}, {self.y!r}, is_intersection={self.is_intersection})"


class Intersection(Vertex):
    """Vertex synthesized by the sweep where two chain segments cross."""

    __slots__ = ("id", "lanes")

    def __init__(self, x: float, y: float, id: Optional[int] = None):
        super().__init__(x, y, is_intersection=True)
        self.id = id
        self.lanes: Set[Any] = set()

    def to_dict(self) -> dict:
        return {
            "id": self.id,
            "x": self.x,
            "y": self.y,
            "lanes": sorted(self.lanes, key=str),
        }

    def __repr__(self) -> str:
        return f"Intersection({self.x!r}, {self.y!r}, id={self.id!r})"


class Chain:
    """
    An x-monotone run of vertices with a sweep cursor.

    Vertices are stored in x-ascending order; ``reversed`` is True when the
    run was descending in the source polyline. New vertices are only ever
    inserted at the cursor, so the list grows but never shrinks.
    """

    __slots__ = ("vertices", "index", "lane_id", "reversed")

    def __init__(self, vertices: List[Vertex], lane_id: Any = None, reversed: bool = False):
        self.vertices = vertices
        self.index = 0
        self.lane_id = lane_id
        self.reversed = reversed

    def __len__(self) -> int:
        return len(self.vertices)

    @property
    def current(self) -> Vertex:
        return self.vertices[self.index]

    @property
    def current_x(self) -> float:
        return self.vertices[self.index].x

    @property
    def exhausted(self) -> bool:
        return self.index >= len(self.vertices)

    def segment(self) -> Tuple[Vertex, Vertex]:
        """The segment ending at the cursor."""
        return self.vertices[self.index - 1], self.vertices[self.index]

    def splice(self, vertex: Vertex) -> None:
        """Insert vertex at the cursor, shifting later vertices right."""
        self.vertices.insert(self.index, vertex)

    def source_order(self) -> List[Vertex]:
        """Vertices in the direction of the source polyline."""
        if self.reversed:
            return self.vertices[::-1]
        return list(self.vertices)

    def __repr__(self) -> str:
        return f"Chain(lane_id={self.lane_id!r}, vertices={len(self.vertices)}, index={self.index})"


class Lane:
    """A source fairway polyline."""

    def __init__(self, id: Any, lane_id: Any, depth: float,
                 coordinates: Sequence[Sequence[float]], name: str = ""):
        self.id = id
        self.lane_id = lane_id
        self.depth = depth
        self.coordinates = coordinates
        self.name = name

    def to_dict(self) -> dict:
        return {
            "id": self.id,
            "lane_id": self.lane_id,
            "depth": self.depth,
            "name": self.name,
            "coordinates": [list(c) for c in self.coordinates],
        }

    def __repr__(self) -> str:
        return f"Lane(id={self.id!r}, lane_id={self.lane_id!r}, points={len(self.coordinates)})"

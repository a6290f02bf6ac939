"""
Monotone chain decomposition of lane polylines.

A polyline is split into the longest possible x-monotone runs, left to
right along the source order. Consecutive chains share their pivot point:
the last vertex of one chain is the same Vertex object as the first vertex
of the next. Descending runs are stored reversed so every chain is
x-ascending.

The continuation test is deliberately asymmetric: an ascending run keeps
points with equal x, a descending run stops at the first equal x.
"""

import math
from typing import Any, List, Sequence

from ...exceptions import MalformedLaneError
from ...models import Chain, Vertex


def _to_vertex(point: Any, lane_id: Any, index: int) -> Vertex:
    if isinstance(point, Vertex):
        x, y = point.x, point.y
    else:
        try:
            x, y = float(point[0]), float(point[1])
        except (TypeError, ValueError, IndexError) as e:
            raise MalformedLaneError(
                f"Lane {lane_id!r}: point {index} is not a coordinate pair ({point!r})",
                lane=lane_id,
                point_index=index,
            ) from e
    if not (math.isfinite(x) and math.isfinite(y)):
        raise MalformedLaneError(
            f"Lane {lane_id!r}: point {index} has a non-finite coordinate ({x}, {y})",
            lane=lane_id,
            point_index=index,
        )
    return Vertex(x, y)


def _run_end(vertices: List[Vertex], start: int) -> int:
    """Exclusive end index of the monotone run beginning at start."""
    descending = vertices[start].x > vertices[start + 1].x
    end = start + 2
    while end < len(vertices):
        prev_x = vertices[end - 1].x
        next_x = vertices[end].x
        if descending:
            if not prev_x > next_x:
                break
        elif not prev_x <= next_x:
            break
        end += 1
    return end


def decompose(points: Sequence[Any], lane_id: Any = None) -> List[Chain]:
    """
    Split a polyline into x-monotone chains.

    Args:
        points: Two or more (x, y) pairs or Vertex objects, in source order.
        lane_id: Identity of the owning lane, copied to every chain and used
            in error messages.

    Returns:
        Freshly allocated chains in source order, each with its cursor at 0.

    Raises:
        MalformedLaneError: Fewer than two points, or a non-finite coordinate.
    """
    if len(points) < 2:
        raise MalformedLaneError(
            f"Lane {lane_id!r} has {len(points)} point(s); at least 2 are required",
            lane=lane_id,
        )

    vertices = [_to_vertex(p, lane_id, i) for i, p in enumerate(points)]

    chains: List[Chain] = []
    start = 0
    while True:
        end = _run_end(vertices, start)
        run = vertices[start:end]
        descending = run[0].x > run[1].x
        if descending:
            run.reverse()
        chains.append(Chain(run, lane_id=lane_id, reversed=descending))
        if end == len(vertices):
            break
        start = end - 1
    return chains


def stitch(chains: Sequence[Chain]) -> List[Vertex]:
    """
    Rebuild a lane's vertex sequence from its chains.

    Inverse of decompose: chains are put back in source direction and the
    shared pivot between neighbours is kept once. Vertices spliced in by the
    sweep are included in their position.
    """
    out: List[Vertex] = []
    for chain in chains:
        seq = chain.source_order()
        if out and seq and seq[0] is out[-1]:
            seq = seq[1:]
        out.extend(seq)
    return out

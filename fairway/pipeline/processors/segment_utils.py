"""
Segment-segment intersection used by the sweep.
"""

from typing import Optional

from ...models import Intersection, Vertex


def segment_intersection(p1: Vertex, p2: Vertex, p3: Vertex, p4: Vertex) -> Optional[Intersection]:
    """
    Intersection of directed segments p1->p2 and p3->p4.

    g is the position along p1->p2 and h the position along p3->p4; the
    segments cross when both lie in [0, 1]. Parallel and collinear segments
    have a zero denominator and never intersect.

    A crossing at the very start of a segment (g == 0 or h == 0) is ignored
    when that start vertex is already an intersection, since the crossing
    was reported when the previous segment was tested. The end points
    (g == 1, h == 1) are not checked this way.

    Returns a new Intersection (without id or lanes) interpolated along
    p1->p2, or None.
    """
    denom = (p4.x - p3.x) * (p1.y - p2.y) - (p1.x - p2.x) * (p4.y - p3.y)
    if denom == 0:
        return None
    g = ((p3.y - p4.y) * (p1.x - p3.x) + (p4.x - p3.x) * (p1.y - p3.y)) / denom
    h = ((p1.y - p2.y) * (p1.x - p3.x) + (p2.x - p1.x) * (p1.y - p3.y)) / denom
    if not (0 <= g <= 1 and 0 <= h <= 1):
        return None
    if (g == 0 and p1.is_intersection) or (h == 0 and p3.is_intersection):
        return None
    return Intersection(
        p1.x + g * (p2.x - p1.x),
        p1.y + g * (p2.y - p1.y),
    )

"""
Unit tests for the segment intersection primitive, including the
start-only suppression of crossings at known intersection vertices.
"""

import unittest

from fairway.models import Intersection, Vertex
from fairway.pipeline.processors.segment_utils import segment_intersection


def V(x, y):
    return Vertex(x, y)


class TestSegmentIntersection(unittest.TestCase):
    def test_crossing_segments(self):
        result = segment_intersection(V(0, 0), V(10, 10), V(0, 10), V(10, 0))
        self.assertIsInstance(result, Intersection)
        self.assertTrue(result.is_intersection)
        self.assertAlmostEqual(result.x, 5.0)
        self.assertAlmostEqual(result.y, 5.0)
        self.assertIsNone(result.id)
        self.assertEqual(result.lanes, set())

    def test_argument_order_is_symmetric(self):
        cases = [
            (V(0, 0), V(10, 10), V(0, 10), V(10, 0)),
            (V(1, 2), V(7, 3), V(2, -4), V(5, 9)),
            (V(0, 0), V(10, 0), V(5, 0), V(5, 5)),
        ]
        for p1, p2, p3, p4 in cases:
            a = segment_intersection(p1, p2, p3, p4)
            b = segment_intersection(p3, p4, p1, p2)
            self.assertIsNotNone(a)
            self.assertIsNotNone(b)
            self.assertAlmostEqual(a.x, b.x, places=9)
            self.assertAlmostEqual(a.y, b.y, places=9)

    def test_parallel_segments(self):
        self.assertIsNone(segment_intersection(V(0, 0), V(10, 0), V(0, 1), V(10, 1)))

    def test_collinear_overlapping_segments(self):
        self.assertIsNone(segment_intersection(V(0, 0), V(10, 0), V(5, 0), V(15, 0)))

    def test_zero_length_segment(self):
        self.assertIsNone(segment_intersection(V(5, 5), V(5, 5), V(0, 10), V(10, 0)))

    def test_lines_cross_outside_segments(self):
        self.assertIsNone(segment_intersection(V(0, 0), V(1, 1), V(0, 10), V(10, 0)))

    def test_touching_at_plain_start_vertex(self):
        result = segment_intersection(V(0, 0), V(10, 0), V(5, 0), V(5, 5))
        self.assertIsNotNone(result)
        self.assertEqual((result.x, result.y), (5.0, 0.0))

    def test_known_intersection_at_start_is_suppressed(self):
        start = Intersection(5, 0)
        self.assertIsNone(segment_intersection(V(0, 0), V(10, 0), start, V(5, 5)))
        self.assertIsNone(segment_intersection(start, V(5, 5), V(0, 0), V(10, 0)))

    def test_known_intersection_at_end_is_not_suppressed(self):
        # Only segment starts are checked: the same coincidence at the end
        # of a segment is reported again.
        end = Intersection(5, 0)
        result = segment_intersection(V(0, 0), V(10, 0), V(5, -5), end)
        self.assertIsNotNone(result)
        self.assertAlmostEqual(result.x, 5.0)
        self.assertAlmostEqual(result.y, 0.0)
        self.assertIsNot(result, end)
        result = segment_intersection(V(5, -5), end, V(0, 0), V(10, 0))
        self.assertIsNotNone(result)

    def test_interior_crossing_ignores_flags(self):
        a = Intersection(0, 0)
        c = Intersection(0, 10)
        result = segment_intersection(a, V(10, 10), c, V(10, 0))
        self.assertIsNotNone(result)


if __name__ == '__main__':
    unittest.main()

"""
Unit tests for GRAPH processor: grouping coincident crossings and lane end
points into graph vertices and cutting lanes into edges.
"""

import math
import unittest
from unittest.mock import Mock

from fairway.config import Settings
from fairway.models import Lane
from fairway.pipeline.processors.chain_utils import decompose
from fairway.pipeline.processors.graph_assembly_processor import (
    GraphAssemblyProcessor,
    _assemble_graph,
    to_feature_collections,
)
from fairway.pipeline.processors.sweep_engine import find_all_intersections

TOL = 1e-6


def swept(*polylines):
    """Lanes and their swept chains, keyed by lane id."""
    lanes = []
    chains_by_lane = {}
    all_chains = []
    for lane_id, points in enumerate(polylines, 1):
        lane = Lane(id=lane_id, lane_id=100 + lane_id, depth=5.0, coordinates=points)
        lanes.append(lane)
        chains_by_lane[lane_id] = decompose(points, lane_id=lane_id)
        all_chains.extend(chains_by_lane[lane_id])
    intersections = find_all_intersections(all_chains)
    return lanes, chains_by_lane, intersections


def vertex_at(vertices, x, y):
    for v in vertices:
        if math.isclose(v['x'], x, abs_tol=1e-9) and math.isclose(v['y'], y, abs_tol=1e-9):
            return v
    return None


class TestAssembleGraph(unittest.TestCase):
    def test_two_crossing_lanes(self):
        lanes, chains_by_lane, _ = swept([(0, 0), (10, 10)], [(0, 10), (10, 0)])
        vertices, edges = _assemble_graph(lanes, chains_by_lane, TOL)
        self.assertEqual(len(vertices), 5)
        self.assertEqual(len(edges), 4)
        crossing = vertex_at(vertices, 5, 5)
        self.assertIsNotNone(crossing)
        self.assertEqual(crossing['lanes'], [101, 102])
        self.assertEqual(crossing['parts'], [1, 2])
        self.assertEqual(crossing['intersections'], [1])
        for edge in edges:
            self.assertIn(crossing['id'], (edge['source'], edge['target']))
            self.assertAlmostEqual(edge['length'], math.hypot(5, 5))
            self.assertEqual(edge['depth'], 5.0)

    def test_edges_follow_source_direction(self):
        lanes, chains_by_lane, _ = swept([(10, 0), (0, 10)], [(0, 0), (10, 10)])
        vertices, edges = _assemble_graph(lanes, chains_by_lane, TOL)
        lane_edges = [e for e in edges if e['lane'] == 1]
        self.assertEqual(lane_edges[0]['coordinates'][0], (10.0, 0.0))
        self.assertEqual(lane_edges[-1]['coordinates'][-1], (0.0, 10.0))
        self.assertEqual(lane_edges[0]['lane_id'], 101)

    def test_three_lanes_share_one_crossing_vertex(self):
        lanes, chains_by_lane, intersections = swept(
            [(0, 0), (10, 10)], [(0, 10), (10, 0)], [(5, 0), (5, 10)]
        )
        vertices, edges = _assemble_graph(lanes, chains_by_lane, TOL)
        crossings = [v for v in vertices if v['intersections']]
        self.assertEqual(len(crossings), 1)
        self.assertEqual(crossings[0]['lanes'], [101, 102, 103])
        self.assertEqual(crossings[0]['parts'], [1, 2, 3])
        self.assertEqual(crossings[0]['intersections'], sorted(i.id for i in intersections))
        self.assertEqual(len(vertices), 7)
        self.assertEqual(len(edges), 6)
        for edge in edges:
            self.assertGreater(edge['length'], 0)

    def test_lanes_touching_at_end_points_share_vertex(self):
        lanes, chains_by_lane, intersections = swept([(0, 0), (5, 5)], [(5, 5), (10, 0)])
        self.assertEqual(intersections, [])
        vertices, edges = _assemble_graph(lanes, chains_by_lane, TOL)
        self.assertEqual(len(vertices), 3)
        self.assertEqual(len(edges), 2)
        joint = vertex_at(vertices, 5, 5)
        self.assertEqual(joint['lanes'], [101, 102])
        self.assertEqual(joint['intersections'], [])

    def test_edge_lengths_add_up_to_lane_length(self):
        lanes, chains_by_lane, _ = swept(
            [(0, 0), (4, 8), (8, 0), (12, 8)],
            [(0, 4), (12, 4)],
        )
        _, edges = _assemble_graph(lanes, chains_by_lane, TOL)
        for lane in lanes:
            expected = sum(
                math.dist(a, b) for a, b in zip(lane.coordinates, lane.coordinates[1:])
            )
            total = sum(e['length'] for e in edges if e['lane'] == lane.id)
            self.assertAlmostEqual(total, expected, places=6)

    def test_parts_of_one_fairway_report_its_number_once(self):
        first = [(0, 0), (10, 10)]
        second = [(0, 10), (10, 0)]
        lanes = [
            Lane(id=1, lane_id=7, depth=5.0, coordinates=first),
            Lane(id=2, lane_id=7, depth=5.0, coordinates=second),
        ]
        chains_by_lane = {1: decompose(first, lane_id=1), 2: decompose(second, lane_id=2)}
        find_all_intersections(chains_by_lane[1] + chains_by_lane[2])
        vertices, _ = _assemble_graph(lanes, chains_by_lane, TOL)
        crossing = vertex_at(vertices, 5, 5)
        self.assertEqual(crossing['lanes'], [7])
        self.assertEqual(crossing['parts'], [1, 2])

    def test_lane_without_chains_is_ignored(self):
        lanes, chains_by_lane, _ = swept([(0, 0), (1, 1)])
        lanes.append(Lane(id=9, lane_id=9, depth=0, coordinates=[(0, 0)]))
        vertices, edges = _assemble_graph(lanes, chains_by_lane, TOL)
        self.assertEqual(len(vertices), 2)
        self.assertEqual(len(edges), 1)

    def test_feature_collections(self):
        lanes, chains_by_lane, _ = swept([(0, 0), (10, 10)], [(0, 10), (10, 0)])
        vertices, edges = _assemble_graph(lanes, chains_by_lane, TOL)
        vertex_fc, edge_fc = to_feature_collections(vertices, edges)
        self.assertEqual(vertex_fc['type'], 'FeatureCollection')
        self.assertEqual(len(vertex_fc['features']), 5)
        self.assertEqual(vertex_fc['features'][0]['geometry']['type'], 'Point')
        self.assertEqual(len(edge_fc['features']), 4)
        self.assertEqual(edge_fc['features'][0]['geometry']['type'], 'LineString')
        self.assertIn('source', edge_fc['features'][0]['properties'])


class TestGraphAssemblyProcessor(unittest.TestCase):
    def setUp(self):
        self.processor = GraphAssemblyProcessor(job_id=Mock(), settings=Settings(vertex_merge_tolerance=TOL))
        self.processor.log_info = Mock()
        self.processor.log_error = Mock()

    def test_process_reads_previous_results(self):
        lanes, chains_by_lane, _ = swept([(0, 0), (10, 10)], [(0, 10), (10, 0)])
        result = self.processor.process({
            'lanes_results': {'lanes': lanes},
            'decompose_results': {'chains_by_lane': chains_by_lane},
        })
        self.assertEqual(result['totals'], {'vertices': 5, 'edges': 4, 'crossing_vertices': 1})
        self.assertEqual(result['algorithm_config']['vertex_merge_tolerance'], TOL)
        self.assertEqual(self.processor.get_metrics()['graph_edges'], 4)

    def test_process_without_input(self):
        result = self.processor.process({})
        self.assertEqual(result['vertices'], [])
        self.assertEqual(result['edges'], [])


if __name__ == '__main__':
    unittest.main()

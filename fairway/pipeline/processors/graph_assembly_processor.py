"""
GRAPH processor - Build routable graph vertices and edges from swept lanes.

The sweep only shares a vertex between the two chains of one crossing.
This step groups everything that lands on the same spot (crossings found
by different chain pairs, lane end points that touch) into a single graph
vertex by snapping coordinates to a grid of ``vertex_merge_tolerance``,
then cuts every lane at its crossings into edges between graph vertices.
"""

import time
from typing import Dict, Any, List, Optional, Tuple

from shapely.geometry import LineString, Point, mapping

from .base_processor import BaseProcessor
from .chain_utils import stitch
from ...models import Chain, Lane, Vertex


class _VertexIndex:
    """Graph vertices keyed by snapped grid cell."""

    def __init__(self, tolerance: float):
        self.tolerance = tolerance
        self.vertices: List[Dict[str, Any]] = []
        self._by_key: Dict[Tuple[int, int], Dict[str, Any]] = {}

    def _key(self, x: float, y: float) -> Tuple[int, int]:
        return (round(x / self.tolerance), round(y / self.tolerance))

    def vertex_for(self, v: Vertex, lane: Lane) -> Dict[str, Any]:
        key = self._key(v.x, v.y)
        node = self._by_key.get(key)
        if node is None:
            node = {
                'id': len(self.vertices) + 1,
                'x': v.x,
                'y': v.y,
                'lanes': set(),
                'parts': set(),
                'intersections': set(),
            }
            self._by_key[key] = node
            self.vertices.append(node)
        node['lanes'].add(lane.lane_id)
        node['parts'].add(lane.id)
        if v.is_intersection and getattr(v, 'id', None) is not None:
            node['intersections'].add(v.id)
        return node


def _edge(edge_id: int, lane: Lane, piece: List[Vertex],
          source: Dict[str, Any], target: Dict[str, Any]) -> Optional[Dict[str, Any]]:
    coordinates = [(v.x, v.y) for v in piece]
    length = LineString(coordinates).length
    if source is target and length == 0:
        return None
    return {
        'id': edge_id,
        'lane': lane.id,
        'lane_id': lane.lane_id,
        'depth': lane.depth,
        'source': source['id'],
        'target': target['id'],
        'length': length,
        'coordinates': coordinates,
    }


def _assemble_graph(
    lanes: List[Lane],
    chains_by_lane: Dict[Any, List[Chain]],
    tolerance: float,
) -> Tuple[List[Dict[str, Any]], List[Dict[str, Any]]]:
    """
    Returns (vertices, edges). Vertices carry sorted ``lanes`` (fairway
    numbers), ``parts`` (Lane ids) and ``intersections`` lists; edges follow
    source lane direction.
    """
    index = _VertexIndex(tolerance)
    edges: List[Dict[str, Any]] = []

    for lane in lanes:
        chains = chains_by_lane.get(lane.id)
        if not chains:
            continue
        sequence = stitch(chains)
        last = len(sequence) - 1
        start = 0
        source = index.vertex_for(sequence[0], lane)
        for i in range(1, len(sequence)):
            v = sequence[i]
            if not (v.is_intersection or i == last):
                continue
            target = index.vertex_for(v, lane)
            edge = _edge(len(edges) + 1, lane, sequence[start:i + 1], source, target)
            if edge is not None:
                edges.append(edge)
            start, source = i, target

    vertices = []
    for node in index.vertices:
        vertices.append({
            'id': node['id'],
            'x': node['x'],
            'y': node['y'],
            'lanes': sorted(node['lanes'], key=str),
            'parts': sorted(node['parts']),
            'intersections': sorted(node['intersections']),
        })
    return vertices, edges


def to_feature_collections(vertices: List[Dict[str, Any]],
                           edges: List[Dict[str, Any]]) -> Tuple[Dict[str, Any], Dict[str, Any]]:
    """GeoJSON FeatureCollections for graph vertices and edges."""
    vertex_features = [
        {
            'type': 'Feature',
            'geometry': mapping(Point(v['x'], v['y'])),
            'properties': {
                'id': v['id'],
                'lanes': v['lanes'],
                'parts': v['parts'],
                'intersections': v['intersections'],
            },
        }
        for v in vertices
    ]
    edge_features = [
        {
            'type': 'Feature',
            'geometry': mapping(LineString(e['coordinates'])),
            'properties': {k: e[k] for k in ('id', 'lane', 'lane_id', 'depth', 'source', 'target', 'length')},
        }
        for e in edges
    ]
    return (
        {'type': 'FeatureCollection', 'features': vertex_features},
        {'type': 'FeatureCollection', 'features': edge_features},
    )


class GraphAssemblyProcessor(BaseProcessor):
    """Processor building graph vertices and edges."""

    def process(self, pipeline_data: Dict[str, Any]) -> Dict[str, Any]:
        self.log_info("Starting graph assembly")
        start_time = time.time()

        lanes = pipeline_data.get('lanes_results', {}).get('lanes', [])
        chains_by_lane = pipeline_data.get('decompose_results', {}).get('chains_by_lane', {})
        tolerance = self.settings.vertex_merge_tolerance

        vertices, edges = _assemble_graph(lanes, chains_by_lane, tolerance)
        crossing_vertices = sum(1 for v in vertices if v['intersections'])

        duration_ms = int((time.time() - start_time) * 1000)
        self.update_metrics(
            duration_ms=duration_ms,
            graph_vertices=len(vertices),
            graph_edges=len(edges),
            crossing_vertices=crossing_vertices,
        )
        self.log_info(
            "Graph assembly completed",
            graph_vertices=len(vertices),
            graph_edges=len(edges),
            crossing_vertices=crossing_vertices,
            duration_ms=duration_ms,
        )
        return {
            'vertices': vertices,
            'edges': edges,
            'algorithm_config': {
                'vertex_merge_tolerance': tolerance,
            },
            'totals': {
                'vertices': len(vertices),
                'edges': len(edges),
                'crossing_vertices': crossing_vertices,
            },
        }

"""
Lane adapter for GeoJSON-like fairway features.

Features are expected to be re-projected into a planar frame already; an
optional ``transform`` callable can be supplied to do it on the fly.
"""

from typing import Any, Callable, Dict, List, Optional, Tuple
import numpy as np
import structlog

from ..exceptions import MalformedLaneError
from ..models import Lane

logger = structlog.get_logger()

# Source attribute names
LANE_ID_PROPERTY = 'JNRO'
DEPTH_PROPERTY = 'KULKUSYV1'
NAME_PROPERTY = 'VAY_NIMISU'

Transform = Callable[[float, float], Tuple[float, float]]


class LaneAdapter:
    """Adapter for LineString / MultiLineString fairway features."""

    def __init__(self, transform: Optional[Transform] = None, skip_malformed: bool = False):
        self.transform = transform
        self.skip_malformed = skip_malformed
        self.processed_count = 0
        self.skipped_count = 0
        self.error_count = 0
        self._next_id = 1

    def process_features(self, features: List[Dict[str, Any]]) -> List[Lane]:
        """Convert features into lanes, one lane per line part."""
        lanes: List[Lane] = []

        for feature_index, feature in enumerate(features):
            try:
                lanes.extend(self.process_feature(feature, feature_index))
            except MalformedLaneError as e:
                self.error_count += 1
                if not self.skip_malformed:
                    raise
                logger.error(
                    "Skipping malformed lane",
                    feature_index=feature_index,
                    lane=e.lane,
                    point_index=e.point_index,
                    error=str(e)
                )

        return lanes

    def process_feature(self, feature: Dict[str, Any], feature_index: int = 0) -> List[Lane]:
        """Convert a single feature. Unsupported geometry types yield no lanes."""
        geometry = feature.get('geometry') or {}
        properties = feature.get('properties') or {}
        geometry_type = geometry.get('type')

        lane_id = properties.get(LANE_ID_PROPERTY) or 0
        raw_depth = properties.get(DEPTH_PROPERTY) or 0
        try:
            depth = float(raw_depth)
        except (TypeError, ValueError) as e:
            raise MalformedLaneError(
                f"Feature {feature_index} ({LANE_ID_PROPERTY}={lane_id!r}): "
                f"depth {raw_depth!r} is not numeric",
                lane=lane_id
            ) from e
        name = properties.get(NAME_PROPERTY) or ''

        if geometry_type == 'LineString':
            parts = [geometry.get('coordinates') or []]
        elif geometry_type == 'MultiLineString':
            parts = geometry.get('coordinates') or []
        else:
            self.skipped_count += 1
            logger.warning(
                "Unexpected geometry type",
                feature_index=feature_index,
                geometry_type=geometry_type,
                lane_id=lane_id
            )
            return []

        # Validate every part before allocating ids so a bad part leaves no
        # half-converted feature behind
        coordinate_arrays = [
            self._coordinates(raw, lane_id, feature_index, part_index)
            for part_index, raw in enumerate(parts)
        ]

        lanes = []
        for coordinates in coordinate_arrays:
            lanes.append(Lane(
                id=self._next_id,
                lane_id=lane_id,
                depth=depth,
                coordinates=[(float(x), float(y)) for x, y in coordinates],
                name=name,
            ))
            self._next_id += 1
            self.processed_count += 1
        return lanes

    def _coordinates(self, raw: Any, lane_id: Any, feature_index: int, part_index: int) -> np.ndarray:
        """Validate one line part and return it as an (n, 2) float array."""
        where = f"Feature {feature_index} ({LANE_ID_PROPERTY}={lane_id!r}) part {part_index}"
        try:
            arr = np.asarray(raw, dtype=float)
        except (TypeError, ValueError) as e:
            raise MalformedLaneError(f"{where}: coordinates are not numeric", lane=lane_id) from e

        if arr.size == 0:
            arr = arr.reshape(0, 2)
        if arr.ndim != 2 or arr.shape[1] < 2:
            raise MalformedLaneError(f"{where}: expected a list of coordinate pairs", lane=lane_id)
        if arr.shape[0] < 2:
            raise MalformedLaneError(
                f"{where} has {arr.shape[0]} point(s); at least 2 are required",
                lane=lane_id
            )

        arr = arr[:, :2]
        if self.transform is not None:
            arr = np.array([self.transform(x, y) for x, y in arr], dtype=float)

        bad = np.flatnonzero(~np.isfinite(arr).all(axis=1))
        if bad.size:
            raise MalformedLaneError(
                f"{where}: point {int(bad[0])} has a non-finite coordinate",
                lane=lane_id,
                point_index=int(bad[0])
            )
        return arr

    def get_processing_stats(self) -> Dict[str, int]:
        """Get processing statistics."""
        return {
            'processed_count': self.processed_count,
            'skipped_count': self.skipped_count,
            'error_count': self.error_count
        }

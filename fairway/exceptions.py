"""
Error types raised by the lane graph pipeline.
"""

from typing import Any, Optional


class FairwayError(Exception):
    """Base class for pipeline errors."""


class MalformedLaneError(FairwayError, ValueError):
    """A lane polyline that cannot be decomposed into chains."""

    def __init__(self, message: str, lane: Any = None, point_index: Optional[int] = None):
        self.lane = lane
        self.point_index = point_index
        super().__init__(message)


class ChainGrowthError(FairwayError):
    """A chain grew past the configured maximum vertex count during the sweep."""

    def __init__(self, message: str, lane: Any = None, vertex_count: int = 0):
        self.lane = lane
        self.vertex_count = vertex_count
        super().__init__(message)

"""
Adapter layer for turning source geometry into Lane records.
"""

from .lane_adapter import LaneAdapter

__all__ = [
    'LaneAdapter',
]

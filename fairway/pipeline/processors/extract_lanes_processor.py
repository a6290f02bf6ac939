"""
LANES processor - Convert source features into lane polylines.
"""

import time
from typing import Dict, Any
from .base_processor import BaseProcessor
from ...adapters.lane_adapter import LaneAdapter

class ExtractLanesProcessor(BaseProcessor):
    """Processor for extracting lanes from fairway features."""

    def process(self, pipeline_data: Dict[str, Any]) -> Dict[str, Any]:
        """Extract lanes from pipeline_data['features']."""
        self.log_info("Starting lane extraction")

        start_time = time.time()

        features = pipeline_data.get('features', [])
        adapter = LaneAdapter(
            transform=pipeline_data.get('transform'),
            skip_malformed=self.settings.malformed_lane_policy == 'skip'
        )

        lanes = adapter.process_features(features)
        stats = adapter.get_processing_stats()
        total_points = sum(len(lane.coordinates) for lane in lanes)

        duration_ms = int((time.time() - start_time) * 1000)
        self.update_metrics(
            duration_ms=duration_ms,
            feature_count=len(features),
            lane_count=len(lanes),
            total_points=total_points,
            **stats
        )

        self.log_info(
            "Lane extraction completed",
            feature_count=len(features),
            lane_count=len(lanes),
            skipped_count=stats['skipped_count'],
            error_count=stats['error_count'],
            duration_ms=duration_ms
        )

        return {
            'lanes': lanes,
            'totals': {
                'features': len(features),
                'lanes': len(lanes),
                'points': total_points,
                'skipped': stats['skipped_count'],
                'malformed': stats['error_count']
            }
        }

"""
SWEEP processor - Find every lane crossing and splice it into the chains.
"""

import time
from typing import Dict, Any
from .base_processor import BaseProcessor
from .sweep_engine import SweepEngine

class SweepIntersectionsProcessor(BaseProcessor):
    """Processor running the sweep-line intersection search."""

    def process(self, pipeline_data: Dict[str, Any]) -> Dict[str, Any]:
        """Sweep all chains from the DECOMPOSE step."""
        self.log_info("Starting intersection sweep")

        start_time = time.time()

        chains = pipeline_data.get('decompose_results', {}).get('chains', [])
        vertices_before = sum(len(chain) for chain in chains)

        engine = SweepEngine(
            max_chain_vertices=self.settings.max_chain_vertices,
            progress_interval=self.settings.sweep_progress_interval
        )
        intersections = engine.sweep(chains)

        vertices_after = sum(len(chain) for chain in chains)

        duration_ms = int((time.time() - start_time) * 1000)
        self.update_metrics(
            duration_ms=duration_ms,
            vertices_before=vertices_before,
            vertices_after=vertices_after,
            **engine.metrics
        )

        self.log_info(
            "Intersection sweep completed",
            chain_count=len(chains),
            intersections=len(intersections),
            comparisons=engine.metrics.get('comparisons'),
            duration_ms=duration_ms
        )

        return {
            'intersections': intersections,
            'totals': {
                'chains': len(chains),
                'intersections': len(intersections),
                'vertices_before': vertices_before,
                'vertices_after': vertices_after
            }
        }

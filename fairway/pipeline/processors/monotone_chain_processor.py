"""
DECOMPOSE processor - Split every lane into x-monotone chains.
"""

import time
from typing import Dict, Any, List
from .base_processor import BaseProcessor
from .chain_utils import decompose
from ...exceptions import MalformedLaneError
from ...models import Chain

class MonotoneChainProcessor(BaseProcessor):
    """Processor for monotone chain decomposition."""

    def process(self, pipeline_data: Dict[str, Any]) -> Dict[str, Any]:
        """Decompose lanes from the LANES step."""
        self.log_info("Starting monotone chain decomposition")

        start_time = time.time()

        lanes = pipeline_data.get('lanes_results', {}).get('lanes', [])
        skip_malformed = self.settings.malformed_lane_policy == 'skip'

        chains: List[Chain] = []
        chains_by_lane: Dict[Any, List[Chain]] = {}
        malformed = 0

        for lane in lanes:
            try:
                lane_chains = decompose(lane.coordinates, lane_id=lane.id)
            except MalformedLaneError as e:
                malformed += 1
                self.log_error(
                    "Lane decomposition failed",
                    lane=lane.id,
                    lane_id=lane.lane_id,
                    point_index=e.point_index,
                    error=str(e)
                )
                if not skip_malformed:
                    raise
                continue
            chains_by_lane[lane.id] = lane_chains
            chains.extend(lane_chains)

        descending = sum(1 for chain in chains if chain.reversed)

        duration_ms = int((time.time() - start_time) * 1000)
        self.update_metrics(
            duration_ms=duration_ms,
            lane_count=len(lanes),
            chain_count=len(chains),
            descending_chains=descending,
            malformed_lanes=malformed
        )

        self.log_info(
            "Monotone chain decomposition completed",
            lane_count=len(lanes),
            chain_count=len(chains),
            duration_ms=duration_ms
        )

        return {
            'chains': chains,
            'chains_by_lane': chains_by_lane,
            'totals': {
                'lanes': len(chains_by_lane),
                'chains': len(chains),
                'descending_chains': descending,
                'malformed': malformed
            }
        }

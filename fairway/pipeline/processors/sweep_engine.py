"""
Sweep-line search for all pairwise crossings among monotone chains.

The sweep keeps two working sets:

* the active chain list: every chain not yet exhausted, ordered by the x of
  the vertex at its cursor (x only, Python's stable sort, no tie-breaker);
* the candidate set: chains that have been advanced at least once and whose
  current segment is eligible for testing.

Each step advances the leftmost active chain by one vertex and tests its new
segment against the current segment of every candidate. A crossing is
spliced into both chains at their cursors as one shared Intersection object.
"""

from typing import Any, Dict, List, Optional, Sequence

import structlog

from ...exceptions import ChainGrowthError
from ...models import Chain, Intersection
from .segment_utils import segment_intersection

logger = structlog.get_logger()


def _current_x(chain: Chain) -> float:
    return chain.vertices[chain.index].x


class _SweepState:
    """Working sets for a single sweep call."""

    def __init__(self, chains: Sequence[Chain]):
        for chain in chains:
            chain.index = 0
        self.active: List[Chain] = sorted(chains, key=_current_x)
        # Insertion-ordered set
        self.candidates: Dict[Chain, None] = {}
        self.output: List[Intersection] = []
        self.iterations = 0
        self.comparisons = 0


class SweepEngine:
    """Finds and splices every pairwise chain crossing."""

    def __init__(self, max_chain_vertices: Optional[int] = None, progress_interval: int = 100):
        self.max_chain_vertices = max_chain_vertices
        self.progress_interval = progress_interval
        self.metrics: Dict[str, Any] = {}

    def sweep(self, chains: Sequence[Chain]) -> List[Intersection]:
        """
        Run the sweep over all chains.

        Every chain's cursor is reset to 0 first; on return every cursor
        equals its chain length. Chains are mutated in place by splicing
        intersection vertices.

        Returns:
            Intersections in discovery order, each with a sequential id and
            the lane ids of both chains.
        """
        state = _SweepState(chains)

        while state.active:
            state.iterations += 1
            if self.progress_interval and state.iterations % self.progress_interval == 0:
                logger.debug(
                    "Sweep progress",
                    iterations=state.iterations,
                    active_chains=len(state.active),
                    intersections=len(state.output),
                )

            current = state.active[0]
            current.index += 1
            if current.index == len(current.vertices):
                state.candidates.pop(current, None)
                state.active.pop(0)
                continue

            state.candidates[current] = None
            for other in list(state.candidates):
                if other is current:
                    continue
                state.comparisons += 1
                self._test_pair(state, current, other)
            state.active.sort(key=_current_x)

        self.metrics = {
            "chains": len(chains),
            "iterations": state.iterations,
            "comparisons": state.comparisons,
            "intersections": len(state.output),
        }
        return state.output

    def _test_pair(self, state: _SweepState, current: Chain, other: Chain) -> None:
        p1, p2 = current.segment()
        p3, p4 = other.segment()
        intersection = segment_intersection(p1, p2, p3, p4)
        if intersection is None:
            return
        self._check_growth(current)
        self._check_growth(other)
        intersection.id = len(state.output) + 1
        intersection.lanes.add(current.lane_id)
        intersection.lanes.add(other.lane_id)
        current.splice(intersection)
        other.splice(intersection)
        state.output.append(intersection)

    def _check_growth(self, chain: Chain) -> None:
        if self.max_chain_vertices is not None and len(chain.vertices) >= self.max_chain_vertices:
            raise ChainGrowthError(
                f"Chain of lane {chain.lane_id!r} reached {len(chain.vertices)} vertices "
                f"(limit {self.max_chain_vertices})",
                lane=chain.lane_id,
                vertex_count=len(chain.vertices),
            )


def find_all_intersections(chains: Sequence[Chain], **kwargs) -> List[Intersection]:
    """Sweep chains with a fresh SweepEngine and return the intersections."""
    return SweepEngine(**kwargs).sweep(chains)

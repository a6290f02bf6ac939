"""
Pipeline executor for the lane graph preprocessing pipeline.
"""

import time
import uuid
from datetime import datetime
from typing import Dict, Any, List, Optional, Callable, Tuple
import structlog

from ..config import Settings, settings as default_settings
from .processors.extract_lanes_processor import ExtractLanesProcessor
from .processors.monotone_chain_processor import MonotoneChainProcessor
from .processors.sweep_intersections_processor import SweepIntersectionsProcessor
from .processors.graph_assembly_processor import GraphAssemblyProcessor

logger = structlog.get_logger()

class PipelineExecutor:
    """Executes the lane graph pipeline (lanes -> chains -> crossings -> graph)."""

    PIPELINE_STEPS = [
        ("LANES", ExtractLanesProcessor),
        ("DECOMPOSE", MonotoneChainProcessor),
        ("SWEEP", SweepIntersectionsProcessor),
        ("GRAPH", GraphAssemblyProcessor),
    ]

    def __init__(self, job_id: uuid.UUID, settings: Optional[Settings] = None):
        self.job_id = job_id
        self.settings = settings if settings is not None else default_settings
        self.processors = {}
        self.steps: Dict[str, Dict[str, Any]] = {}

        # Initialize processors
        for step_name, processor_class in self.PIPELINE_STEPS:
            self.processors[step_name] = processor_class(job_id, self.settings)

    def execute_pipeline(self, features: List[Dict[str, Any]],
                         transform: Optional[Callable[[float, float], Tuple[float, float]]] = None) -> Dict[str, Any]:
        """
        Execute the complete pipeline for a batch of fairway features.

        Args:
            features: GeoJSON-like LineString / MultiLineString features
            transform: Optional planar re-projection applied to every point

        Returns:
            Results keyed by step name
        """
        logger.info(
            "Pipeline execution started",
            job_id=str(self.job_id),
            feature_count=len(features)
        )

        self._create_job_steps()

        pipeline_data = {
            'features': features,
            'transform': transform,
        }

        results = {}

        for step_order, (step_name, _) in enumerate(self.PIPELINE_STEPS, 1):
            try:
                step_result = self._execute_step(step_name, step_order, pipeline_data)
                results[step_name] = step_result

                # Update pipeline data with step results
                pipeline_data[f'{step_name.lower()}_results'] = step_result

            except Exception as e:
                logger.error(
                    "Pipeline step failed",
                    job_id=str(self.job_id),
                    step_name=step_name,
                    error=str(e),
                    error_type=type(e).__name__
                )
                raise

        logger.info(
            "Pipeline execution completed",
            job_id=str(self.job_id),
            results_summary={
                step: result.get('totals', {}) for step, result in results.items()
            }
        )

        return results

    def _create_job_steps(self):
        """Create in-memory step records."""
        self.steps = {}
        for step_order, (step_name, _) in enumerate(self.PIPELINE_STEPS, 1):
            self.steps[step_name] = {
                'step_name': step_name,
                'step_order': step_order,
                'status': 'pending',
                'started_at': None,
                'completed_at': None,
                'failed_at': None,
                'duration_ms': None,
                'metrics': {},
                'error_message': None,
            }

    def _execute_step(self, step_name: str, step_order: int, pipeline_data: Dict[str, Any]) -> Dict[str, Any]:
        """Execute a single pipeline step."""
        step = self.steps.get(step_name)
        if not step:
            raise ValueError(f"Step {step_name} not found")

        step['status'] = 'running'
        step['started_at'] = datetime.utcnow().isoformat()

        logger.info(
            "Pipeline step started",
            job_id=str(self.job_id),
            step_name=step_name,
            step_order=step_order
        )

        start_time = time.time()

        processor = self.processors[step_name]
        try:
            result = processor.process(pipeline_data)
        except Exception as e:
            step['status'] = 'failed'
            step['failed_at'] = datetime.utcnow().isoformat()
            step['duration_ms'] = int((time.time() - start_time) * 1000)
            step['error_message'] = str(e)
            raise

        duration_ms = int((time.time() - start_time) * 1000)

        step['status'] = 'completed'
        step['completed_at'] = datetime.utcnow().isoformat()
        step['duration_ms'] = duration_ms
        step['metrics'] = processor.get_metrics()

        logger.info(
            "Pipeline step completed",
            job_id=str(self.job_id),
            step_name=step_name,
            duration_ms=duration_ms,
            metrics=processor.get_metrics()
        )

        return result

    def get_step_summary(self) -> List[Dict[str, Any]]:
        """Step records in execution order."""
        return [self.steps[name] for name, _ in self.PIPELINE_STEPS if name in self.steps]

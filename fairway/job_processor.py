"""
Job processor for running the lane graph pipeline on a lanes file.
"""

import json
import uuid
from typing import Dict, Any, List, Optional
import structlog

from .config import Settings, settings as default_settings
from .pipeline.pipeline_executor import PipelineExecutor
from .services.artifact_service import ArtifactService

logger = structlog.get_logger()

def load_features(path: str) -> List[Dict[str, Any]]:
    """Load features from a GeoJSON FeatureCollection (or bare feature list)."""
    with open(path, 'r', encoding='utf-8') as f:
        data = json.load(f)
    if isinstance(data, dict):
        if data.get('type') == 'FeatureCollection':
            return list(data.get('features') or [])
        if data.get('type') == 'Feature':
            return [data]
        raise ValueError(f"Unsupported GeoJSON object type: {data.get('type')!r}")
    if isinstance(data, list):
        return data
    raise ValueError(f"Expected a GeoJSON object or feature list, got {type(data).__name__}")

def process_lanes_file(path: str, job_id: Optional[uuid.UUID] = None,
                       settings: Optional[Settings] = None) -> Dict[str, Any]:
    """
    Run the pipeline for one lanes file and store its artifacts.

    Args:
        path: GeoJSON file with fairway features in a planar frame
        job_id: Job identity used for logs and the artifact directory
        settings: Overrides the global settings

    Returns:
        Pipeline results keyed by step name, plus 'artifacts' and 'steps'
    """
    job_id = job_id or uuid.uuid4()
    settings = settings if settings is not None else default_settings

    logger.info(
        "Job processing started",
        job_id=str(job_id),
        path=path
    )

    executor = PipelineExecutor(job_id, settings)

    try:
        features = load_features(path)
        results = executor.execute_pipeline(features)
    except Exception as e:
        logger.error(
            "Job processing failed",
            job_id=str(job_id),
            path=path,
            error=str(e),
            error_type=type(e).__name__
        )
        raise

    artifact_service = ArtifactService(settings.artifacts_dir)
    artifacts = artifact_service.store_final_results(job_id, results)

    summary = {step: result.get('totals', {}) for step, result in results.items()}
    logger.info(
        "Job completed",
        job_id=str(job_id),
        summary=summary,
        artifacts=len(artifacts)
    )

    return {
        **results,
        'artifacts': artifacts,
        'steps': executor.get_step_summary(),
    }

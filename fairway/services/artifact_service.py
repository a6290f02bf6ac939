"""
Artifact service for writing pipeline outputs to disk.
"""

import os
import json
import uuid
from typing import Dict, Any, Optional, List
import structlog

from ..config import settings
from ..pipeline.processors.graph_assembly_processor import to_feature_collections

logger = structlog.get_logger()

class ArtifactService:
    """Service for storing job artifacts as JSON files."""

    def __init__(self, artifacts_dir: Optional[str] = None):
        self.artifacts_dir = artifacts_dir or settings.artifacts_dir
        os.makedirs(self.artifacts_dir, exist_ok=True)

    def create_artifact(self, job_id: uuid.UUID, artifact_name: str,
                        content: Any) -> Optional[Dict[str, Any]]:
        """Write content as JSON under <artifacts_dir>/<job_id>/ and describe it."""
        try:
            job_dir = os.path.join(self.artifacts_dir, str(job_id))
            os.makedirs(job_dir, exist_ok=True)

            safe_name = self._sanitize_filename(artifact_name)
            file_path = os.path.join(job_dir, safe_name)

            content_bytes = json.dumps(content, indent=2, ensure_ascii=False, default=str).encode('utf-8')

            with open(file_path, 'wb') as f:
                f.write(content_bytes)

            return {
                'artifact_name': artifact_name,
                'file_path': file_path,
                'file_size': len(content_bytes),
            }

        except (OSError, TypeError, ValueError) as e:
            # Artifact failures must not fail the job
            logger.error(
                "Failed to write artifact",
                job_id=str(job_id),
                artifact_name=artifact_name,
                error=str(e)
            )
            return None

    def store_final_results(self, job_id: uuid.UUID,
                            final_results: Dict[str, Any]) -> List[Dict[str, Any]]:
        """Write crossings and graph outputs for a finished pipeline run."""
        contents = {}
        sweep = final_results.get('SWEEP')
        if isinstance(sweep, dict):
            contents['intersections.json'] = {
                'intersections': [i.to_dict() for i in sweep.get('intersections', [])],
                'totals': sweep.get('totals', {}),
            }
        graph = final_results.get('GRAPH')
        if isinstance(graph, dict):
            vertex_fc, edge_fc = to_feature_collections(graph.get('vertices', []), graph.get('edges', []))
            contents['graph_vertices.geojson'] = vertex_fc
            contents['graph_edges.geojson'] = edge_fc
        contents['pipeline_summary.json'] = {
            step: result.get('totals', {})
            for step, result in final_results.items()
            if isinstance(result, dict)
        }

        artifacts: List[Dict[str, Any]] = []
        for name, content in contents.items():
            artifact = self.create_artifact(job_id, name, content)
            if artifact:
                artifacts.append(artifact)
        return artifacts

    def _sanitize_filename(self, filename: str) -> str:
        """Sanitize filename for safe storage."""
        unsafe_chars = '<>:"/\\|?*'
        for char in unsafe_chars:
            filename = filename.replace(char, '_')

        if len(filename) > 200:
            name, ext = os.path.splitext(filename)
            filename = name[:190] + ext

        return filename

"""
Configuration settings for the fairway lane graph pipeline.
"""

from pydantic_settings import BaseSettings
from typing import Optional

class Settings(BaseSettings):
    # Application
    environment: str = "development"
    log_level: str = "INFO"

    # File Storage
    artifacts_dir: str = "./artifacts"

    # Lane extraction: "abort" fails the whole batch on the first malformed
    # lane, "skip" logs it and continues with the rest.
    malformed_lane_policy: str = "abort"

    # Sweep
    max_chain_vertices: Optional[int] = None  # None = unbounded growth
    sweep_progress_interval: int = 100

    # Graph assembly: grid size used to snap coincident points together
    vertex_merge_tolerance: float = 1e-6

    class Config:
        env_file = ".env"
        env_prefix = "FAIRWAY_"
        case_sensitive = False

# Global settings instance
settings = Settings()

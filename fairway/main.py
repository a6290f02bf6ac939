"""
Fairway lane graph - command line entry point.

Usage: python -m fairway.main LANES.geojson [LANES.geojson ...]
"""

import logging
import sys
import structlog

from .config import settings
from .exceptions import FairwayError
from .job_processor import process_lanes_file

def configure_logging(level: str = "INFO"):
    """Configure stdlib logging and structlog for JSON output on stderr."""
    logging.basicConfig(
        level=getattr(logging, (level or "INFO").upper()),
        format="%(message)s",
        stream=sys.stderr,
    )

    structlog.configure(
        processors=[
            structlog.stdlib.filter_by_level,
            structlog.stdlib.add_logger_name,
            structlog.stdlib.add_log_level,
            structlog.stdlib.PositionalArgumentsFormatter(),
            structlog.processors.TimeStamper(fmt="iso"),
            structlog.processors.StackInfoRenderer(),
            structlog.processors.format_exc_info,
            structlog.processors.UnicodeDecoder(),
            structlog.processors.JSONRenderer()
        ],
        context_class=dict,
        logger_factory=structlog.stdlib.LoggerFactory(),
        wrapper_class=structlog.stdlib.BoundLogger,
        cache_logger_on_first_use=True,
    )

logger = structlog.get_logger()

def main(argv=None) -> int:
    """Process every lanes file given on the command line."""
    configure_logging(settings.log_level)
    paths = list(sys.argv[1:] if argv is None else argv)

    if not paths:
        logger.error("No lanes files given", usage="python -m fairway.main LANES.geojson ...")
        return 2

    logger.info(
        "Starting fairway lane graph",
        files=paths,
        artifacts_dir=settings.artifacts_dir,
        malformed_lane_policy=settings.malformed_lane_policy
    )

    failed = 0
    for path in paths:
        try:
            process_lanes_file(path)
        except (FairwayError, OSError, ValueError) as e:
            failed += 1
            logger.error("Lanes file failed", path=path, error=str(e))

    logger.info("Fairway lane graph finished", files=len(paths), failed=failed)
    return 1 if failed else 0

if __name__ == '__main__':
    sys.exit(main())

# deploy_platform/run_api.py
"""Run the admin API server."""

import logging

import uvicorn

from deploy_platform.infrastructure.postgres.config import settings

# Setup logging
logging.basicConfig(
    level=getattr(logging, settings.log_level.upper(), logging.INFO),
    format='%(asctime)s - %(name)s - %(levelname)s - %(message)s'
)

logger = logging.getLogger(__name__)


def main():
    logger.info(f"Starting admin API on {settings.host}:{settings.port}")
    uvicorn.run(
        "deploy_platform.api.main:app",
        host=settings.host,
        port=settings.port,
        log_level=settings.log_level.lower(),
    )


if __name__ == "__main__":
    main()

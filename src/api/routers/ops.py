import os
import logging
from fastapi import APIRouter, Response
from prometheus_client import generate_latest, CONTENT_TYPE_LATEST

from api.dependencies import DATA_DIR

router = APIRouter()
logger = logging.getLogger(__name__)


@router.get("/health")
async def health_check() -> dict:
    """Health check endpoint for container orchestration."""
    health = {
        "status": "healthy",
        "profile": os.getenv("DEPLOYMENT_PROFILE", "unknown"),
        "data_dir": str(DATA_DIR),
    }

    # stores create the directory on first write, so a missing one is fine
    if DATA_DIR.exists() and not os.access(DATA_DIR, os.W_OK):
        logger.warning(f"Data directory {DATA_DIR} is not writable")
        health["status"] = "degraded"

    return health


@router.get("/metrics")
async def metrics() -> Response:
    """
    Prometheus scrape endpoint.
    """
    data = generate_latest()
    return Response(content=data, media_type=CONTENT_TYPE_LATEST)

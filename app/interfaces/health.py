"""
Health check router.

Liveness/readiness probe. Reports the application version, whether the
database answers a trivial query, and which cache backend is active.
A database failure degrades the status instead of failing the probe.
"""

import logging

from fastapi import APIRouter, Depends
from sqlalchemy import text
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from app.core.config import settings
from app.interfaces.marketplace.dependencies import get_cache, get_session
from app.interfaces.marketplace.schemas import HealthResponse
from app.shared.cache import CacheClient

logger = logging.getLogger(__name__)

router = APIRouter(tags=["health"])


@router.get(
    "/health",
    response_model=HealthResponse,
    summary="Health check",
    description="Returns application health status, version and backing services.",
)
def health_check(
    session: Session = Depends(get_session),
    cache: CacheClient = Depends(get_cache),
) -> HealthResponse:
    """Return current application health status."""
    try:
        session.execute(text("SELECT 1"))
        database = "ok"
    except SQLAlchemyError as exc:
        logger.warning("Health check database probe failed: %s", type(exc).__name__)
        database = "unavailable"

    return HealthResponse(
        status="ok" if database == "ok" else "degraded",
        version=settings.version,
        database=database,
        cache=cache.backend,
    )

"""Health check endpoints: liveness (no dependencies) and readiness (database round trip)."""

import logging

from fastapi import APIRouter
from fastapi.responses import JSONResponse

from factory_events.infrastructure.persistence import database
from factory_events.schemas.health import (
    HealthResponse,
    ReadinessErrorResponse,
    ReadinessResponse,
)

logger = logging.getLogger(__name__)

router = APIRouter()


@router.get("", response_model=HealthResponse)
def health_check() -> HealthResponse:
    """Return ok status and server time for liveness."""
    return HealthResponse()


@router.get(
    "/ready",
    response_model=ReadinessResponse,
    responses={503: {"description": "Event store unreachable", "model": ReadinessErrorResponse}},
)
async def readiness_check() -> ReadinessResponse | JSONResponse:
    """Return 200 when the event store answers SELECT 1; 503 otherwise."""
    try:
        await database.ping()
    except Exception as e:
        logger.warning("Readiness check failed: %s", e)
        return JSONResponse(
            status_code=503,
            content=ReadinessErrorResponse(
                status="not_ready",
                message="Event store unreachable",
            ).model_dump(),
        )
    return ReadinessResponse()

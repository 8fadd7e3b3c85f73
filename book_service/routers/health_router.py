"""
Health check router.

Provides liveness and readiness probes.
"""

from datetime import datetime, timezone

import structlog
from fastapi import APIRouter, Request, status
from fastapi.responses import JSONResponse
from pymongo.errors import PyMongoError

from .. import __version__
from ..models import HealthResponse, ReadinessResponse

logger = structlog.get_logger(__name__)

router = APIRouter(tags=["Health"])


@router.get("/health", response_model=HealthResponse, summary="Health check")
async def health_check(request: Request):
    """
    Basic health check.

    Always returns 200 OK if the service is running.
    """
    return HealthResponse(
        status="healthy",
        service=request.app.state.settings.SERVICE_NAME,
        version=__version__,
        timestamp=datetime.now(timezone.utc).isoformat(),
    )


@router.get(
    "/ready",
    response_model=ReadinessResponse,
    responses={503: {"description": "Storage engine unreachable"}},
    summary="Readiness check",
)
async def readiness_check(request: Request):
    """
    Readiness check.

    Pings MongoDB when the service runs against it. Returns 503 if the
    ping fails.
    """
    client = getattr(request.app.state, "mongo_client", None)
    checks = {}

    if client is None:
        checks["storage"] = "memory"
    else:
        try:
            await client.admin.command("ping")
            checks["storage"] = "healthy"
        except PyMongoError as e:
            logger.warning("MongoDB ping failed", error=str(e))
            checks["storage"] = "unavailable"

    ready = checks["storage"] != "unavailable"
    response = ReadinessResponse(
        ready=ready, checks=checks, timestamp=datetime.now(timezone.utc).isoformat()
    )

    if not ready:
        return JSONResponse(
            status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
            content=response.model_dump(),
        )
    return response

"""System router for non-versioned application endpoints.

Mounted twice: at the root and under the API prefix, so the health check is
reachable as both ``/health`` and ``/api/health``.
"""

import time

from fastapi import APIRouter, Request
from fastapi.responses import JSONResponse

from midcurve_api.presentation.routers.api.v1.responses import (
    EnvelopeBuilder,
    utc_timestamp,
)

system_router = APIRouter(tags=["System"])


@system_router.get("/health")
async def health(request: Request) -> JSONResponse:
    """Health check endpoint for monitoring and load balancers.

    Returns:
        JSONResponse: status, timestamp, environment, version and uptime
            in seconds. Never cached.
    """
    app_settings = request.app.state.settings
    uptime = time.monotonic() - request.app.state.started_at
    return EnvelopeBuilder.success_response(
        {
            "status": "healthy",
            "timestamp": utc_timestamp(),
            "environment": app_settings.environment.value,
            "version": app_settings.app_version,
            "uptime": round(uptime, 3),
        },
        headers={"Cache-Control": "no-store, must-revalidate"},
    )

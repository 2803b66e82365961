"""Main FastAPI application entry point.

    uvicorn midcurve_api.main:app --port 3001

The services layer is either passed to create_app() or loaded in the
lifespan from the SERVICES_FACTORY import path. Without services, every
service-backed endpoint answers 503 SERVICE_UNAVAILABLE while health keeps
working.
"""

import time
from collections.abc import AsyncGenerator
from contextlib import asynccontextmanager

from fastapi import FastAPI

from midcurve_api.core.config import Settings, get_settings
from midcurve_api.core.container import ServiceHandles, get_logger, load_services
from midcurve_api.presentation.routers.api.middleware.auth_dependencies import (
    build_authenticators,
)
from midcurve_api.presentation.routers.api.middleware.trace_middleware import (
    TraceMiddleware,
)
from midcurve_api.presentation.routers.api.v1 import v1_router
from midcurve_api.presentation.routers.api.v1.errors import register_exception_handlers
from midcurve_api.presentation.routers.system import system_router


def create_app(
    app_settings: Settings | None = None,
    *,
    services: ServiceHandles | None = None,
) -> FastAPI:
    """Build the application.

    Args:
        app_settings: Settings to use. Defaults to the cached environment settings.
        services: Pre-built services layer. When None, SERVICES_FACTORY is
            loaded at startup.

    Returns:
        Configured FastAPI application.
    """
    app_settings = app_settings or get_settings()
    logger = get_logger()

    @asynccontextmanager
    async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
        if app.state.services is None:
            if app_settings.services_factory:
                app.state.services = load_services(
                    app_settings.services_factory, app_settings
                )
                logger.info(
                    "Services loaded",
                    factory=app_settings.services_factory,
                )
            else:
                logger.warning(
                    "No services configured, service-backed endpoints will return 503"
                )
        logger.info(
            "Application started",
            environment=app_settings.environment.value,
            version=app_settings.app_version,
        )
        yield

    app = FastAPI(
        title=app_settings.app_name,
        description="Position tracking API for concentrated liquidity",
        version=app_settings.app_version,
        docs_url="/docs",
        redoc_url="/redoc",
        debug=app_settings.debug,
        lifespan=lifespan,
    )

    app.state.settings = app_settings
    app.state.services = services
    app.state.started_at = time.monotonic()
    app.state.authenticator, app.state.session_authenticator = build_authenticators(
        app_settings, logger
    )

    # Wire trace middleware (request correlation)
    app.add_middleware(TraceMiddleware)

    # Register global exception handlers (error envelopes)
    register_exception_handlers(app)

    app.include_router(system_router)
    app.include_router(system_router, prefix=app_settings.api_prefix)
    app.include_router(v1_router, prefix=app_settings.api_prefix)

    return app


app = create_app()

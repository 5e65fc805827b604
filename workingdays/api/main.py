"""
Entry point for the Working Days HTTP API.

This module creates the FastAPI application, wires up middleware and the
working-time service, and mounts the routes.

Intended usage:
    uvicorn workingdays.api.main:create_app --factory --host 0.0.0.0 --port 3000
or:
    workingdays serve
"""

from __future__ import annotations

import logging
from contextlib import asynccontextmanager
from typing import Optional

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware

from .. import __version__
from ..adapters.holiday_client import HolidayProvider
from ..config import AppConfig
from ..domain.exceptions import ComputationError, InvalidParametersError
from ..logging_config import configure_logging
from ..services.working_time import WorkingTimeService
from .routes import SERVICE_UNAVAILABLE_MESSAGE, error_response, router

logger = logging.getLogger(__name__)


def build_service(config: AppConfig) -> WorkingTimeService:
    """Wire the remote holiday provider into a working-time service."""
    provider = HolidayProvider(
        url=config.holidays.url,
        timeout=config.holidays.timeout_seconds,
    )
    return WorkingTimeService(holiday_provider=provider)


def create_app(
    config: Optional[AppConfig] = None,
    service: Optional[WorkingTimeService] = None,
) -> FastAPI:
    """
    Create and configure the FastAPI application instance.

    Args:
        config: Application configuration; loaded from the default location
            when omitted
        service: Pre-built service (tests inject one with a static calendar)
    """
    config = config or AppConfig.load()
    configure_logging(config.log_level)
    service = service or build_service(config)

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        logger.info(
            "Starting Working Days API",
            extra={
                "version": __version__,
                "validation_profile": config.validation_profile.value,
                "holidays_url": config.holidays.url,
            },
        )
        yield
        logger.info("Shutting down Working Days API")

    app = FastAPI(
        title="Working Days API",
        version=__version__,
        lifespan=lifespan,
    )
    app.state.config = config
    app.state.working_time_service = service

    app.add_middleware(
        CORSMiddleware,
        allow_origins=config.server.cors_origins,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    @app.exception_handler(InvalidParametersError)
    async def _invalid_parameters(request: Request, exc: InvalidParametersError):
        return error_response(400, "InvalidParameters", str(exc))

    @app.exception_handler(ComputationError)
    async def _computation_failed(request: Request, exc: ComputationError):
        logger.error("Computation failed on %s: %s", request.url.path, exc)
        return error_response(503, "ServiceUnavailable", SERVICE_UNAVAILABLE_MESSAGE)

    @app.exception_handler(Exception)
    async def _unexpected(request: Request, exc: Exception):
        logger.exception("Unhandled error on %s", request.url.path)
        return error_response(503, "ServiceUnavailable", SERVICE_UNAVAILABLE_MESSAGE)

    app.include_router(router)

    return app

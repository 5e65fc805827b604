"""
HTTP routes for the working days API.
"""

from __future__ import annotations

from typing import Any, Dict

import pendulum
from fastapi import APIRouter, Depends, Request
from fastapi.responses import JSONResponse, PlainTextResponse

from ..config import ValidationProfile
from ..services.working_time import WorkingTimeService, format_utc
from .validation import parse_working_days_query

router = APIRouter()

SERVICE_UNAVAILABLE_MESSAGE = "Unable to calculate working days"


def get_working_time_service(request: Request) -> WorkingTimeService:
    """Return the service instance wired into the application."""
    return request.app.state.working_time_service


def get_validation_profile(request: Request) -> ValidationProfile:
    return request.app.state.config.validation_profile


def error_response(status_code: int, error: str, message: str) -> JSONResponse:
    return JSONResponse(status_code=status_code, content={"error": error, "message": message})


@router.get("/", response_class=PlainTextResponse, tags=["system"])
def root() -> str:
    return "Working Days API is running"


@router.get("/health", tags=["system"])
def health() -> Dict[str, str]:
    return {"status": "OK", "message": "Service is healthy"}


@router.get("/api/working-days", tags=["working-days"])
def calculate_working_days(
    request: Request,
    service: WorkingTimeService = Depends(get_working_time_service),
    profile: ValidationProfile = Depends(get_validation_profile),
) -> Any:
    """
    Add working days and/or hours to ``date`` (default: now).

    Responds ``{"date": "YYYY-MM-DDTHH:mm:ss.SSSZ"}``. Validation failures
    and computation errors are turned into responses by the handlers
    registered in ``create_app``.
    """
    query = parse_working_days_query(request.query_params, profile)

    start = query.date if query.date is not None else pendulum.now(pendulum.UTC)

    result = service.add_working_time(
        start,
        days=query.days or 0,
        hours=query.hours or 0,
    )

    return {"date": format_utc(result)}


@router.get("/api/holidays", tags=["working-days"])
def list_holidays(
    service: WorkingTimeService = Depends(get_working_time_service),
) -> Dict[str, Any]:
    """Return the holiday calendar currently in use."""
    provider = service.holiday_provider
    holidays = sorted(provider.get_holidays())

    return {
        "source": provider.source,
        "count": len(holidays),
        "holidays": [holiday.isoformat() for holiday in holidays],
    }

"""
Service layer helpers that orchestrate adapters and domain logic.
"""

from .working_time import (
    HolidayProviderProtocol,
    WorkingTimeService,
    ensure_datetime,
    format_utc,
)

__all__ = ["HolidayProviderProtocol", "WorkingTimeService", "ensure_datetime", "format_utc"]

"""
Domain layer - Pure business logic without external dependencies.
"""

from .business_time import BusinessTimeCalculator
from .models import (
    DEFAULT_POLICY,
    REGION_TIMEZONE,
    BusinessState,
    DurationRequest,
    WorkingHoursPolicy,
)

__all__ = [
    "BusinessTimeCalculator",
    "BusinessState",
    "DurationRequest",
    "WorkingHoursPolicy",
    "DEFAULT_POLICY",
    "REGION_TIMEZONE",
]

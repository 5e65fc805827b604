"""
Adapters layer - External integrations (remote holiday calendar).
"""

from .holiday_client import (
    HolidayProvider,
    StaticHolidayProvider,
    load_fallback_holidays,
    parse_holiday_dates,
)

__all__ = [
    "HolidayProvider",
    "StaticHolidayProvider",
    "load_fallback_holidays",
    "parse_holiday_dates",
]

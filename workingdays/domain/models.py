"""
Domain models for business-time calculations.
"""

import math
from dataclasses import dataclass
from decimal import Decimal, InvalidOperation
from enum import Enum
from fractions import Fraction
from typing import Tuple, Union

import pendulum

# Colombia: constant UTC-5, no daylight saving time.
REGION_UTC_OFFSET_HOURS = -5
REGION_TIMEZONE = pendulum.fixed_timezone(REGION_UTC_OFFSET_HOURS * 3600)

Number = Union[int, float, Decimal, Fraction, str]


def to_fraction(value: Number) -> Fraction:
    """
    Convert a numeric input to an exact rational.

    Floats go through their shortest decimal representation so that
    ``0.1`` becomes ``1/10`` rather than the nearest binary fraction.
    """
    if isinstance(value, Fraction):
        return value
    if isinstance(value, bool):
        raise ValueError(f"Expected a number, got {value!r}")
    if isinstance(value, int):
        return Fraction(value)
    if isinstance(value, float):
        if not math.isfinite(value):
            raise ValueError(f"Expected a finite number, got {value!r}")
        return Fraction(Decimal(repr(value)))

    try:
        decimal_value = value if isinstance(value, Decimal) else Decimal(str(value).strip())
    except InvalidOperation as exc:
        raise ValueError(f"Expected a number, got {value!r}") from exc

    if not decimal_value.is_finite():
        raise ValueError(f"Expected a finite number, got {value!r}")
    return Fraction(decimal_value)


@dataclass(frozen=True)
class WorkingHoursPolicy:
    """
    Daily working window with a lunch exclusion, on a 24-hour clock.

    Invariant: start < lunch_start < lunch_end < end <= 24.
    """
    start: int = 8
    lunch_start: int = 12
    lunch_end: int = 13
    end: int = 17

    def __post_init__(self):
        if not 0 <= self.start < self.lunch_start < self.lunch_end < self.end <= 24:
            raise ValueError(
                "Working hours must satisfy start < lunch_start < lunch_end < end <= 24, "
                f"got {self.start}, {self.lunch_start}, {self.lunch_end}, {self.end}"
            )

    @property
    def working_day_hours(self) -> int:
        """Net business hours per day, excluding lunch."""
        return (self.end - self.start) - (self.lunch_end - self.lunch_start)

    def describe(self) -> str:
        """Human-readable summary, e.g. "08:00-12:00, 13:00-17:00"."""
        return (
            f"{self.start:02d}:00-{self.lunch_start:02d}:00, "
            f"{self.lunch_end:02d}:00-{self.end:02d}:00"
        )


DEFAULT_POLICY = WorkingHoursPolicy()


class BusinessState(Enum):
    """Where an instant falls relative to the business calendar."""
    NON_BUSINESS_DAY = "non_business_day"
    BEFORE_OPEN = "before_open"
    IN_LUNCH = "in_lunch"
    AFTER_CLOSE = "after_close"
    IN_SESSION = "in_session"


@dataclass(frozen=True)
class DurationRequest:
    """
    A quantity of working days and working hours to add.

    Both components are exact non-negative rationals; zero for both is a
    pure normalization.
    """
    days: Fraction = Fraction(0)
    hours: Fraction = Fraction(0)

    def __post_init__(self):
        object.__setattr__(self, "days", to_fraction(self.days))
        object.__setattr__(self, "hours", to_fraction(self.hours))
        if self.days < 0:
            raise ValueError(f"days must be non-negative, got {self.days}")
        if self.hours < 0:
            raise ValueError(f"hours must be non-negative, got {self.hours}")

    def split_days(self) -> Tuple[int, Fraction]:
        """Return (whole days, fractional remainder in [0, 1))."""
        whole = math.floor(self.days)
        return whole, self.days - whole

    def total_minutes(self, policy: WorkingHoursPolicy = DEFAULT_POLICY) -> int:
        """
        Whole working minutes contributed by the hours and the fractional day.

        Sub-minute remainders are truncated.
        """
        _, fraction = self.split_days()
        total_hours = self.hours + fraction * policy.working_day_hours
        return math.floor(total_hours * 60)

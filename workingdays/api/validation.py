"""
Request validation profiles for the working-days endpoint.

Two policies are supported and selected through configuration:

- ``lenient``: non-negative decimal ``days``/``hours`` (zero allowed) and an
  ISO 8601 ``date`` carrying an explicit offset or ``Z``.
- ``strict``: positive integer ``days``, positive ``hours`` and a ``date``
  ending in ``Z``.

Both treat empty parameters as absent and require ``days`` or ``hours``.
"""

from __future__ import annotations

import re
from datetime import datetime
from fractions import Fraction
from typing import Any, Dict, Mapping, Optional, Type

import pendulum
from pendulum import DateTime
from pydantic import BaseModel, ConfigDict, ValidationError, field_validator, model_validator

from ..config import ValidationProfile
from ..domain.exceptions import InvalidParametersError
from ..domain.models import to_fraction

_OFFSET_SUFFIX = re.compile(
    r"[T ]\d{2}:\d{2}(:\d{2}(\.\d+)?)?(Z|[+-]\d{2}(:?\d{2})?)$", re.IGNORECASE
)


def _blank_to_none(value: Any) -> Any:
    if value is None:
        return None
    if isinstance(value, str) and not value.strip():
        return None
    return value


def _parse_datetime(value: str, message: str) -> DateTime:
    try:
        parsed = pendulum.parse(value)
    except ValueError as exc:
        raise ValueError(message) from exc

    if not isinstance(parsed, DateTime):
        raise ValueError(message)
    return parsed


class WorkingDaysQuery(BaseModel):
    """Query parameters of ``GET /api/working-days`` (lenient profile)."""

    model_config = ConfigDict(arbitrary_types_allowed=True, extra="ignore")

    days: Optional[Fraction] = None
    hours: Optional[Fraction] = None
    date: Optional[datetime] = None

    @field_validator("days", mode="before")
    @classmethod
    def parse_days(cls, value: Any) -> Optional[Fraction]:
        return cls._non_negative(value, "Days must be a non-negative number.")

    @field_validator("hours", mode="before")
    @classmethod
    def parse_hours(cls, value: Any) -> Optional[Fraction]:
        return cls._non_negative(value, "Hours must be a non-negative number.")

    @field_validator("date", mode="before")
    @classmethod
    def parse_date(cls, value: Any) -> Optional[datetime]:
        value = _blank_to_none(value)
        if value is None or isinstance(value, datetime):
            return value

        message = "Date must be a valid ISO 8601 string with offset (e.g., '...Z')."
        if not isinstance(value, str) or not _OFFSET_SUFFIX.search(value.strip()):
            raise ValueError(message)
        return _parse_datetime(value.strip(), message)

    @model_validator(mode="after")
    def require_days_or_hours(self) -> "WorkingDaysQuery":
        """At least one of the two quantities must be present."""
        if self.days is None and self.hours is None:
            raise ValueError("At least one parameter (days or hours) must be provided.")
        return self

    @staticmethod
    def _non_negative(value: Any, message: str) -> Optional[Fraction]:
        value = _blank_to_none(value)
        if value is None:
            return None
        try:
            number = to_fraction(value)
        except ValueError as exc:
            raise ValueError(message) from exc
        if number < 0:
            raise ValueError(message)
        return number


class StrictWorkingDaysQuery(WorkingDaysQuery):
    """Query parameters under the strict profile."""

    @field_validator("days", mode="before")
    @classmethod
    def parse_days(cls, value: Any) -> Optional[Fraction]:
        number = cls._positive(value, "Days parameter must be a positive integer")
        if number is not None and number.denominator != 1:
            raise ValueError("Days parameter must be a positive integer")
        return number

    @field_validator("hours", mode="before")
    @classmethod
    def parse_hours(cls, value: Any) -> Optional[Fraction]:
        return cls._positive(value, "Hours parameter must be a positive number")

    @field_validator("date", mode="before")
    @classmethod
    def parse_date(cls, value: Any) -> Optional[datetime]:
        value = _blank_to_none(value)
        if value is None or isinstance(value, datetime):
            return value

        if not isinstance(value, str) or not value.strip().endswith("Z"):
            raise ValueError("Date parameter must be a valid ISO 8601 string with Z suffix")
        return _parse_datetime(value.strip(), "Date parameter must be a valid ISO 8601 date")

    @staticmethod
    def _positive(value: Any, message: str) -> Optional[Fraction]:
        number = WorkingDaysQuery._non_negative(value, message)
        if number is not None and number <= 0:
            raise ValueError(message)
        return number


QUERY_MODELS: Dict[ValidationProfile, Type[WorkingDaysQuery]] = {
    ValidationProfile.LENIENT: WorkingDaysQuery,
    ValidationProfile.STRICT: StrictWorkingDaysQuery,
}


def parse_working_days_query(
    params: Mapping[str, Any],
    profile: ValidationProfile = ValidationProfile.LENIENT,
) -> WorkingDaysQuery:
    """
    Validate raw query parameters under the given profile.

    Raises:
        InvalidParametersError: With the first validation message
    """
    model = QUERY_MODELS[ValidationProfile(profile)]
    try:
        return model(**{key: params.get(key) for key in ("days", "hours", "date")})
    except ValidationError as exc:
        raise InvalidParametersError(_first_message(exc)) from exc


def _first_message(exc: ValidationError) -> str:
    errors = exc.errors()
    if not errors:
        return "Invalid parameters"

    first = errors[0]
    original = (first.get("ctx") or {}).get("error")
    if original is not None:
        return str(original)
    return first.get("msg", "Invalid parameters")

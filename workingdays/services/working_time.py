"""
Application service for adding working time to an instant.

The service resolves the holiday calendar through a provider adapter and
delegates the arithmetic to the domain-level ``BusinessTimeCalculator``.
The provider is the only I/O dependency and must be fully resolved before
any date arithmetic runs.
"""

from __future__ import annotations

from datetime import date, datetime
from typing import FrozenSet, Optional, Protocol

import pendulum
from pendulum import DateTime

from ..domain.business_time import BusinessTimeCalculator
from ..domain.exceptions import ComputationError
from ..domain.models import DEFAULT_POLICY, DurationRequest, Number, WorkingHoursPolicy

UTC_FORMAT = "YYYY-MM-DD[T]HH:mm:ss.SSS[Z]"


class HolidayProviderProtocol(Protocol):
    """Protocol describing the holiday provider behaviour needed by the service."""

    @property
    def source(self) -> Optional[str]:
        """Where the calendar came from."""

    def get_holidays(self) -> FrozenSet[date]:
        """Return the set of excluded local dates. Must never raise."""

    def clear_cache(self) -> None:
        """Forget any cached calendar."""


def format_utc(instant: DateTime) -> str:
    """Format an instant as ``YYYY-MM-DDTHH:mm:ss.SSSZ`` in UTC."""
    return instant.in_timezone(pendulum.UTC).format(UTC_FORMAT)


def ensure_datetime(value: datetime) -> DateTime:
    """Accept plain datetimes too; naive values are taken as UTC."""
    if isinstance(value, DateTime):
        return value
    return pendulum.instance(value)


class WorkingTimeService:
    """
    Orchestrates holiday retrieval and the business-time calculation.

    Dependency inversion toward a protocol makes it easy to plug in the
    remote provider or the static one in tests and offline mode.
    """

    def __init__(
        self,
        holiday_provider: HolidayProviderProtocol,
        policy: WorkingHoursPolicy = DEFAULT_POLICY,
    ) -> None:
        self._holiday_provider = holiday_provider
        self._policy = policy

    @property
    def holiday_provider(self) -> HolidayProviderProtocol:
        return self._holiday_provider

    @property
    def policy(self) -> WorkingHoursPolicy:
        return self._policy

    def build_calculator(self) -> BusinessTimeCalculator:
        """Resolve the holiday calendar and build a calculator over it."""
        return BusinessTimeCalculator(
            holidays=self._holiday_provider.get_holidays(),
            policy=self._policy,
        )

    def add_working_time(
        self,
        start: datetime,
        days: Number = 0,
        hours: Number = 0,
    ) -> DateTime:
        """
        Add working days and hours to ``start``.

        Quantities are checked before the calculation starts. A bad quantity
        is a caller error and surfaces as a plain ``ValueError``; only faults
        raised while resolving holidays or computing are wrapped in
        ``ComputationError``.

        Returns:
            The resulting instant in UTC, at millisecond precision

        Raises:
            ValueError: If days or hours are negative or not numbers
            ComputationError: If the calculation fails unexpectedly
        """
        duration = DurationRequest(days=days, hours=hours)
        start_instant = ensure_datetime(start)

        try:
            calculator = self.build_calculator()
            return calculator.add_working_time(
                start_instant,
                days=duration.days,
                hours=duration.hours,
            )
        except Exception as exc:
            raise ComputationError(f"Unable to calculate working time: {exc}") from exc

    def normalize(self, start: datetime) -> DateTime:
        """Return the nearest business instant at or after ``start``, in UTC."""
        calculator = self.build_calculator()
        return calculator.normalize(ensure_datetime(start)).in_timezone(pendulum.UTC)

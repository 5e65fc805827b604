"""
Core business logic for business-time arithmetic.

Pure domain logic: the holiday calendar is handed in already resolved, so
nothing here performs I/O.
"""

from bisect import bisect_right
from datetime import date
from typing import Iterable

import pendulum
from pendulum import DateTime

from .models import (
    DEFAULT_POLICY,
    REGION_TIMEZONE,
    BusinessState,
    DurationRequest,
    Number,
    WorkingHoursPolicy,
)

_MICROS_PER_MINUTE = 60 * 1_000_000
_MICROS_PER_HOUR = 60 * _MICROS_PER_MINUTE

# Any seven consecutive dates contain exactly five weekdays.
_WEEKDAYS_PER_WEEK = 5


def truncate_to_milliseconds(instant: DateTime) -> DateTime:
    """Drop sub-millisecond precision, which the UTC output format cannot carry."""
    return instant.set(microsecond=instant.microsecond // 1000 * 1000)


class BusinessTimeCalculator:
    """
    Adds working days and working hours to an instant.

    Algorithm:
    1. Normalize the start instant forward to the nearest business instant
    2. Advance whole working days date by date, pinning the clock to day-open
    3. Consume the remaining working minutes, skipping lunch, closed hours,
       weekends and holidays
    4. Return the result in UTC

    Business rules are evaluated on the local civil calendar of ``timezone``
    (a fixed offset), never on the host's timezone.
    """

    def __init__(
        self,
        holidays: Iterable[date] = (),
        policy: WorkingHoursPolicy = DEFAULT_POLICY,
        timezone=REGION_TIMEZONE,
    ):
        self.holidays = frozenset(holidays)
        self.policy = policy
        self.timezone = timezone
        self._weekday_holidays = sorted(h for h in self.holidays if h.weekday() < 5)

    def to_local(self, instant: DateTime) -> DateTime:
        """Convert an instant to the regional civil calendar."""
        return instant.in_timezone(self.timezone)

    def is_holiday(self, instant: DateTime) -> bool:
        return self.to_local(instant).date() in self.holidays

    def is_business_day(self, instant: DateTime) -> bool:
        """Monday to Friday and not a holiday, by local date."""
        local = self.to_local(instant)
        return local.weekday() < 5 and local.date() not in self.holidays

    def classify(self, instant: DateTime) -> BusinessState:
        """Place an instant relative to the working calendar."""
        local = self.to_local(instant)

        if not self.is_business_day(local):
            return BusinessState.NON_BUSINESS_DAY

        elapsed = self._micros_into_day(local)

        if elapsed < self.policy.start * _MICROS_PER_HOUR:
            return BusinessState.BEFORE_OPEN
        if elapsed >= self.policy.end * _MICROS_PER_HOUR:
            return BusinessState.AFTER_CLOSE
        if (
            self.policy.lunch_start * _MICROS_PER_HOUR
            <= elapsed
            < self.policy.lunch_end * _MICROS_PER_HOUR
        ):
            return BusinessState.IN_LUNCH

        return BusinessState.IN_SESSION

    def is_business_instant(self, instant: DateTime) -> bool:
        return self.classify(instant) is BusinessState.IN_SESSION

    def normalize(self, instant: DateTime) -> DateTime:
        """
        Move an instant forward to the nearest business instant.

        Never moves backward; an instant that is already in session is
        returned unchanged (in local time). Idempotent.
        """
        current = self.to_local(instant)

        while True:
            state = self.classify(current)

            if state in (BusinessState.NON_BUSINESS_DAY, BusinessState.AFTER_CLOSE):
                current = self._at_hour(current.add(days=1), self.policy.start)
                continue

            if state is BusinessState.BEFORE_OPEN:
                return self._at_hour(current, self.policy.start)

            if state is BusinessState.IN_LUNCH:
                return self._at_hour(current, self.policy.lunch_end)

            return current

    def add_working_time(
        self,
        instant: DateTime,
        days: Number = 0,
        hours: Number = 0,
    ) -> DateTime:
        """
        Add working days and working hours to an instant.

        Args:
            instant: Timezone-aware start instant
            days: Non-negative working days; the fractional part is converted
                to working hours
            hours: Non-negative working hours

        Returns:
            The resulting instant in UTC, at millisecond precision
        """
        duration = DurationRequest(days=days, hours=hours)
        whole_days, _ = duration.split_days()

        current = self.normalize(truncate_to_milliseconds(instant))

        if whole_days > 0:
            current = self.add_working_days(current, whole_days)

        current = self.add_working_minutes(current, duration.total_minutes(self.policy))

        return current.in_timezone(pendulum.UTC)

    def add_working_days(self, instant: DateTime, days: int) -> DateTime:
        """
        Advance ``days`` business dates and pin the result to day-open.

        The original time-of-day is discarded. Long spans are crossed a week
        at a time; the last few days are stepped date by date.
        """
        current = self.to_local(instant)
        remaining = days

        while remaining > _WEEKDAYS_PER_WEEK:
            week_later = current.add(weeks=1)
            remaining -= _WEEKDAYS_PER_WEEK - self._weekday_holidays_between(
                current.date(), week_later.date()
            )
            current = week_later

        for _ in range(remaining):
            current = current.add(days=1)
            while not self.is_business_day(current):
                current = current.add(days=1)

        return self._at_hour(current, self.policy.start)

    def add_working_minutes(self, instant: DateTime, minutes: int) -> DateTime:
        """
        Consume ``minutes`` of in-session time starting at ``instant``.

        Equivalent to stepping one minute at a time while in session, but an
        uninterrupted in-session run is consumed in a single step.
        """
        current = self.to_local(instant)
        remaining = minutes
        day_minutes = self.policy.working_day_hours * 60
        day_open = self.policy.start * _MICROS_PER_HOUR

        while remaining > 0:
            state = self.classify(current)

            if state in (BusinessState.NON_BUSINESS_DAY, BusinessState.AFTER_CLOSE):
                current = self._next_business_day_start(current)
            elif state is BusinessState.BEFORE_OPEN:
                current = self._at_hour(current, self.policy.start)
            elif state is BusinessState.IN_LUNCH:
                current = self._at_hour(current, self.policy.lunch_end)
            elif remaining > day_minutes and self._micros_into_day(current) == day_open:
                # Full days from day-open end at the next day-open once
                # time is left over.
                full_days = (remaining - 1) // day_minutes
                current = self.add_working_days(current, full_days)
                remaining -= full_days * day_minutes
            else:
                step = min(remaining, self._minutes_left_in_run(current))
                current = current.add(minutes=step)
                remaining -= step

        return current

    def _next_business_day_start(self, local: DateTime) -> DateTime:
        current = self._at_hour(local.add(days=1), self.policy.start)
        while not self.is_business_day(current):
            current = current.add(days=1)
        return current

    def _weekday_holidays_between(self, after: date, through: date) -> int:
        """Count holidays falling Monday to Friday in ``(after, through]``."""
        return bisect_right(self._weekday_holidays, through) - bisect_right(
            self._weekday_holidays, after
        )

    def _minutes_left_in_run(self, local: DateTime) -> int:
        """
        Number of whole-minute steps that can be taken from an in-session
        instant before reaching lunch or close.

        A step that starts strictly before the boundary is still counted,
        which is why this rounds up.
        """
        elapsed = self._micros_into_day(local)
        if elapsed < self.policy.lunch_start * _MICROS_PER_HOUR:
            boundary = self.policy.lunch_start * _MICROS_PER_HOUR
        else:
            boundary = self.policy.end * _MICROS_PER_HOUR
        return -(-(boundary - elapsed) // _MICROS_PER_MINUTE)

    @staticmethod
    def _at_hour(local: DateTime, hour: int) -> DateTime:
        return local.set(hour=hour, minute=0, second=0, microsecond=0)

    @staticmethod
    def _micros_into_day(local: DateTime) -> int:
        seconds = (local.hour * 60 + local.minute) * 60 + local.second
        return seconds * 1_000_000 + local.microsecond

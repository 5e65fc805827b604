"""
Holiday calendar client with an embedded fallback list.
"""

from __future__ import annotations

import json
import logging
import threading
from datetime import date
from pathlib import Path
from typing import Any, FrozenSet, Iterable, Optional, Tuple

import pendulum
import requests
from pendulum import DateTime

from ..domain.exceptions import CalendarFetchError
from ..domain.models import REGION_TIMEZONE

logger = logging.getLogger(__name__)

DEFAULT_HOLIDAYS_URL = "https://content.capta.co/Recruitment/WorkingDays.json"
DEFAULT_TIMEOUT_SECONDS = 5.0
FALLBACK_DATA_FILE = Path(__file__).parent / "fallback_holidays.json"

SOURCE_REMOTE = "remote"
SOURCE_FALLBACK = "fallback"


def parse_holiday_dates(entries: Any) -> FrozenSet[date]:
    """
    Parse a JSON payload of ``YYYY-MM-DD`` strings into a set of dates.

    Raises:
        CalendarFetchError: If the payload is not a list of valid date strings
    """
    if not isinstance(entries, list):
        raise CalendarFetchError(
            f"Expected a list of dates, got {type(entries).__name__}"
        )

    holidays = set()
    for entry in entries:
        if not isinstance(entry, str):
            raise CalendarFetchError(f"Holiday entry must be a string, got {entry!r}")
        try:
            holidays.add(pendulum.from_format(entry, "YYYY-MM-DD").date())
        except ValueError as exc:
            raise CalendarFetchError(f"Invalid holiday date {entry!r}: {exc}") from exc

    return frozenset(holidays)


def load_fallback_holidays(data_file: Path = FALLBACK_DATA_FILE) -> FrozenSet[date]:
    """Load the embedded static holiday list shipped with the package."""
    with open(data_file, "r", encoding="utf-8") as f:
        return parse_holiday_dates(json.load(f))


class HolidayProvider:
    """
    Remote holiday calendar with an in-object cache.

    The first call fetches the list once (single bounded-timeout attempt, no
    retries). Any failure is absorbed: the embedded fallback list is cached
    in its place, so callers never see a fetch error. The cache lives until
    ``clear_cache()`` is called.
    """

    def __init__(
        self,
        url: str = DEFAULT_HOLIDAYS_URL,
        timeout: float = DEFAULT_TIMEOUT_SECONDS,
        session: requests.Session | None = None,
        fallback: Iterable[date] | None = None,
        timezone=REGION_TIMEZONE,
    ):
        """
        Initialize the provider.

        Args:
            url: Endpoint returning a JSON array of ``YYYY-MM-DD`` strings
            timeout: Request timeout in seconds
            session: Optional requests session (injected in tests)
            fallback: Optional fallback dates; defaults to the embedded list
            timezone: Fixed-offset timezone used to derive local dates
        """
        self.url = url
        self.timeout = timeout
        self.timezone = timezone
        self._session = session or requests.Session()
        self._fallback = frozenset(fallback) if fallback is not None else None

        self._cache: Optional[FrozenSet[date]] = None
        self._source: Optional[str] = None
        self._lock = threading.Lock()

    @property
    def source(self) -> Optional[str]:
        """Where the cached calendar came from, or None before the first load."""
        return self._source

    def get_holidays(self) -> FrozenSet[date]:
        """Return the holiday set, fetching it on a cache miss."""
        cached = self._cache
        if cached is not None:
            return cached

        with self._lock:
            # Another thread may have filled the cache while we waited.
            if self._cache is None:
                self._cache, self._source = self._resolve()
            return self._cache

    def is_holiday(self, instant: DateTime) -> bool:
        """Check the instant's local civil date against the calendar."""
        return instant.in_timezone(self.timezone).date() in self.get_holidays()

    def holidays_count(self) -> int:
        return len(self.get_holidays())

    def clear_cache(self) -> None:
        """Drop the cached calendar; the next lookup fetches again."""
        with self._lock:
            self._cache = None
            self._source = None

    def _resolve(self) -> Tuple[FrozenSet[date], str]:
        try:
            holidays = self._fetch_remote()
        except CalendarFetchError as exc:
            logger.warning("Failed to fetch holidays from %s: %s", self.url, exc)
        else:
            logger.debug("Loaded %d holidays from %s", len(holidays), self.url)
            return holidays, SOURCE_REMOTE

        logger.info("Using fallback holiday data")
        return self._fallback_holidays(), SOURCE_FALLBACK

    def _fetch_remote(self) -> FrozenSet[date]:
        try:
            response = self._session.get(
                self.url,
                headers={
                    "Accept": "application/json",
                    "Content-Type": "application/json",
                },
                timeout=self.timeout,
            )
            response.raise_for_status()
            data = response.json()

        except requests.exceptions.RequestException as exc:
            raise CalendarFetchError(f"Request failed: {exc}") from exc
        except ValueError as exc:
            raise CalendarFetchError(f"Response is not valid JSON: {exc}") from exc

        return parse_holiday_dates(data)

    def _fallback_holidays(self) -> FrozenSet[date]:
        if self._fallback is None:
            self._fallback = load_fallback_holidays()
        return self._fallback


class StaticHolidayProvider:
    """
    Holiday provider that never touches the network.

    Serves the embedded fallback list, or an explicit set of dates. Used for
    offline mode and in tests.
    """

    def __init__(self, holidays: Iterable[date] | None = None, timezone=REGION_TIMEZONE):
        self.timezone = timezone
        self._holidays = frozenset(holidays) if holidays is not None else None

    @property
    def source(self) -> str:
        return SOURCE_FALLBACK

    def get_holidays(self) -> FrozenSet[date]:
        if self._holidays is None:
            self._holidays = load_fallback_holidays()
        return self._holidays

    def is_holiday(self, instant: DateTime) -> bool:
        return instant.in_timezone(self.timezone).date() in self.get_holidays()

    def holidays_count(self) -> int:
        return len(self.get_holidays())

    def clear_cache(self) -> None:
        """Nothing to refresh; the static list never changes."""

"""
Tests for query validation profiles.
"""

from fractions import Fraction

import pendulum
import pytest

from workingdays.api.validation import parse_working_days_query
from workingdays.config import ValidationProfile
from workingdays.domain.exceptions import InvalidParametersError

LENIENT = ValidationProfile.LENIENT
STRICT = ValidationProfile.STRICT


def _error(params, profile=LENIENT):
    with pytest.raises(InvalidParametersError) as excinfo:
        parse_working_days_query(params, profile)
    return str(excinfo.value)


class TestLenientProfile:
    """Decimal non-negative quantities, date with any explicit offset."""

    def test_days_and_hours(self):
        query = parse_working_days_query({"days": "1", "hours": "2.5"})

        assert query.days == 1
        assert query.hours == Fraction(5, 2)
        assert query.date is None

    def test_zero_is_allowed(self):
        query = parse_working_days_query({"days": "0"})
        assert query.days == 0
        assert query.hours is None

    def test_fractional_days(self):
        assert parse_working_days_query({"days": "0.5"}).days == Fraction(1, 2)

    def test_blank_values_are_absent(self):
        assert _error({"days": "", "hours": "  "}) == (
            "At least one parameter (days or hours) must be provided."
        )

    def test_missing_both(self):
        assert _error({}) == "At least one parameter (days or hours) must be provided."

    @pytest.mark.parametrize("value", ["abc", "-1", "NaN", "1,5"])
    def test_invalid_days(self, value):
        assert _error({"days": value}) == "Days must be a non-negative number."

    @pytest.mark.parametrize("value", ["xyz", "-0.5", "inf"])
    def test_invalid_hours(self, value):
        assert _error({"hours": value}) == "Hours must be a non-negative number."

    @pytest.mark.parametrize(
        "value",
        [
            "2025-04-10T15:00:00Z",
            "2025-04-10T15:00:00.000Z",
            "2025-04-10T10:00:00-05:00",
            "2025-04-10T17:00:00+02:00",
        ],
    )
    def test_dates_with_offset(self, value):
        query = parse_working_days_query({"date": value, "hours": "1"})
        assert pendulum.instance(query.date) == pendulum.parse("2025-04-10T15:00:00Z")

    @pytest.mark.parametrize(
        "value",
        ["2025-04-10T15:00:00", "2025-04-10", "tomorrow", "2025-13-40T10:00:00Z"],
    )
    def test_invalid_dates(self, value):
        assert _error({"date": value, "hours": "1"}) == (
            "Date must be a valid ISO 8601 string with offset (e.g., '...Z')."
        )


class TestStrictProfile:
    """Positive integer days, positive hours, date ending in Z."""

    def test_valid_query(self):
        query = parse_working_days_query(
            {"days": "2", "hours": "1.5", "date": "2025-04-10T15:00:00.000Z"}, STRICT
        )

        assert query.days == 2
        assert query.hours == Fraction(3, 2)
        assert pendulum.instance(query.date) == pendulum.parse("2025-04-10T15:00:00Z")

    @pytest.mark.parametrize("value", ["0", "-2", "1.5", "abc"])
    def test_days_must_be_positive_integer(self, value):
        assert _error({"days": value}, STRICT) == "Days parameter must be a positive integer"

    @pytest.mark.parametrize("value", ["0", "-1", "abc"])
    def test_hours_must_be_positive(self, value):
        assert _error({"hours": value}, STRICT) == "Hours parameter must be a positive number"

    def test_date_requires_z_suffix(self):
        assert _error({"hours": "1", "date": "2025-04-10T10:00:00-05:00"}, STRICT) == (
            "Date parameter must be a valid ISO 8601 string with Z suffix"
        )

    def test_unparseable_date(self):
        assert _error({"hours": "1", "date": "2025-13-40T10:00:00Z"}, STRICT) == (
            "Date parameter must be a valid ISO 8601 date"
        )

    def test_missing_both(self):
        assert _error({}, STRICT) == "At least one parameter (days or hours) must be provided."

    def test_profile_accepts_plain_string(self):
        assert parse_working_days_query({"hours": "1"}, "strict").hours == 1

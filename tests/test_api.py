"""
Tests for the HTTP API.
"""

import re
from datetime import date

import pytest
from fastapi.testclient import TestClient

from workingdays.adapters.holiday_client import StaticHolidayProvider
from workingdays.api.main import create_app
from workingdays.config import AppConfig, ValidationProfile
from workingdays.services.working_time import WorkingTimeService

UTC_PATTERN = re.compile(r"^\d{4}-\d{2}-\d{2}T\d{2}:\d{2}:\d{2}\.\d{3}Z$")


class BrokenHolidayProvider:
    """Provider whose calendar lookup always fails."""

    source = "broken"

    def get_holidays(self):
        raise RuntimeError("calendar unavailable")

    def clear_cache(self):
        pass


def _client(profile=ValidationProfile.LENIENT, provider=None, **kwargs):
    config = AppConfig(validation_profile=profile)
    service = WorkingTimeService(holiday_provider=provider or StaticHolidayProvider())
    return TestClient(create_app(config=config, service=service), **kwargs)


@pytest.fixture
def client():
    return _client()


@pytest.fixture
def strict_client():
    return _client(profile=ValidationProfile.STRICT)


# ---------------------------------------------------------------------------
# System endpoints
# ---------------------------------------------------------------------------


def test_root(client):
    response = client.get("/")

    assert response.status_code == 200
    assert response.text == "Working Days API is running"


def test_health(client):
    response = client.get("/health")

    assert response.status_code == 200
    assert response.json() == {"status": "OK", "message": "Service is healthy"}


def test_cors_header(client):
    response = client.get("/health", headers={"Origin": "https://example.com"})
    assert response.headers["access-control-allow-origin"] == "*"


# ---------------------------------------------------------------------------
# Working days
# ---------------------------------------------------------------------------


@pytest.mark.parametrize(
    "params, expected",
    [
        ({"date": "2025-04-11T22:00:00.000Z", "hours": "1"}, "2025-04-14T14:00:00.000Z"),
        ({"date": "2025-04-09T19:00:00.000Z", "hours": "20"}, "2025-04-14T14:00:00.000Z"),
        ({"date": "2025-04-16T15:00:00.000Z", "days": "1"}, "2025-04-21T13:00:00.000Z"),
        ({"date": "2025-04-10T15:00:00Z", "days": "1", "hours": "2"}, "2025-04-11T15:00:00.000Z"),
        ({"date": "2025-04-08T15:00:00Z", "days": "0.5"}, "2025-04-08T20:00:00.000Z"),
        ({"date": "2025-04-12T15:00:00Z", "days": "0"}, "2025-04-14T13:00:00.000Z"),
    ],
)
def test_working_days(client, params, expected):
    response = client.get("/api/working-days", params=params)

    assert response.status_code == 200
    assert response.json() == {"date": expected}


def test_default_start_is_now(client):
    response = client.get("/api/working-days", params={"days": "100"})

    assert response.status_code == 200
    assert UTC_PATTERN.match(response.json()["date"])


@pytest.mark.parametrize(
    "params, message",
    [
        ({}, "At least one parameter (days or hours) must be provided."),
        ({"days": "-1"}, "Days must be a non-negative number."),
        ({"hours": "abc"}, "Hours must be a non-negative number."),
        (
            {"hours": "1", "date": "2025-04-10T10:00:00"},
            "Date must be a valid ISO 8601 string with offset (e.g., '...Z').",
        ),
    ],
)
def test_invalid_parameters(client, params, message):
    response = client.get("/api/working-days", params=params)

    assert response.status_code == 400
    assert response.json() == {"error": "InvalidParameters", "message": message}


def test_strict_profile_rejects_fractional_days(strict_client):
    response = strict_client.get("/api/working-days", params={"days": "0.5"})

    assert response.status_code == 400
    assert response.json()["message"] == "Days parameter must be a positive integer"


def test_strict_profile_requires_z(strict_client):
    response = strict_client.get(
        "/api/working-days", params={"hours": "1", "date": "2025-04-10T10:00:00-05:00"}
    )

    assert response.status_code == 400
    assert response.json()["message"] == "Date parameter must be a valid ISO 8601 string with Z suffix"


def test_strict_profile_success(strict_client):
    response = strict_client.get(
        "/api/working-days", params={"hours": "1", "date": "2025-04-11T22:00:00.000Z"}
    )

    assert response.status_code == 200
    assert response.json() == {"date": "2025-04-14T14:00:00.000Z"}


def test_computation_failure_returns_503():
    client = _client(provider=BrokenHolidayProvider())

    response = client.get("/api/working-days", params={"hours": "1"})

    assert response.status_code == 503
    assert response.json() == {
        "error": "ServiceUnavailable",
        "message": "Unable to calculate working days",
    }


# ---------------------------------------------------------------------------
# Holidays
# ---------------------------------------------------------------------------


def test_list_holidays(client):
    response = client.get("/api/holidays")
    body = response.json()

    assert response.status_code == 200
    assert body["source"] == "fallback"
    assert body["count"] == 16
    assert body["holidays"][0] == "2025-01-01"
    assert body["holidays"] == sorted(body["holidays"])


def test_list_holidays_custom_calendar():
    client = _client(provider=StaticHolidayProvider(holidays=[date(2026, 1, 1)]))

    assert client.get("/api/holidays").json()["holidays"] == ["2026-01-01"]


def test_unexpected_error_returns_503():
    """Failures outside the calculation map to the same 503 body."""
    client = _client(provider=BrokenHolidayProvider(), raise_server_exceptions=False)

    response = client.get("/api/holidays")

    assert response.status_code == 503
    assert response.json() == {
        "error": "ServiceUnavailable",
        "message": "Unable to calculate working days",
    }
    assert "calendar unavailable" not in response.text

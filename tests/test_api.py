from __future__ import annotations

import json
import os
from datetime import UTC, datetime, timedelta
from pathlib import Path
from typing import Iterable

import sys

PROJECT_ROOT = Path(__file__).resolve().parents[1]
if str(PROJECT_ROOT) not in sys.path:
    sys.path.insert(0, str(PROJECT_ROOT))

import pytest
from fastapi.testclient import TestClient


@pytest.fixture(scope="session")
def api_client() -> Iterable[TestClient]:
    os.environ["SKYCALC_EXTRA_TIMES"] = json.dumps([[-4, "customDawn", "customDusk"]])
    from skycalc_api import app

    with TestClient(app) as client:
        yield client


def test_health_endpoint(api_client: TestClient) -> None:
    response = api_client.get("/health")
    assert response.status_code == 200
    payload = response.json()
    assert payload["ok"] is True
    assert payload["times"][:2] == ["sunrise", "sunset"]
    assert "customDawn" in payload["times"]


def test_sun_times_endpoint(api_client: TestClient) -> None:
    response = api_client.get(
        "/sun/times", params={"lat": 50.5, "lon": 30.5, "at": "2013-03-05T00:00:00Z"}
    )
    assert response.status_code == 200
    times = response.json()["times"]
    sunrise = datetime.fromisoformat(times["sunrise"])
    sunset = datetime.fromisoformat(times["sunset"])
    assert abs(sunrise - datetime(2013, 3, 5, 4, 34, 57, 584000, tzinfo=UTC)) <= timedelta(
        milliseconds=2
    )
    assert abs(sunset - datetime(2013, 3, 5, 15, 46, 56, 730000, tzinfo=UTC)) <= timedelta(
        milliseconds=2
    )
    assert times["sunrise"].endswith("Z")
    assert "customDusk" in times


def test_polar_events_are_null(api_client: TestClient) -> None:
    response = api_client.get(
        "/sun/times", params={"lat": 78.2232, "lon": 15.6469, "at": "2025-06-21T00:00:00Z"}
    )
    assert response.status_code == 200
    times = response.json()["times"]
    assert times["sunrise"] is None
    assert times["solarNoon"] is not None


def test_naive_instant_is_utc(api_client: TestClient) -> None:
    naive = api_client.get("/sun/position", params={"lat": 50.5, "lon": 30.5, "at": "2013-03-05T00:00:00"})
    aware = api_client.get(
        "/sun/position", params={"lat": 50.5, "lon": 30.5, "at": "2013-03-05T02:00:00+02:00"}
    )
    assert naive.status_code == 200
    assert naive.json() == aware.json()
    assert naive.json()["at"] == "2013-03-05T00:00:00Z"
    assert naive.json()["altitude"] == pytest.approx(-0.7000406838781611, abs=1e-7)


def test_moon_position_endpoint(api_client: TestClient) -> None:
    response = api_client.get(
        "/moon/position", params={"lat": 50.5, "lon": 30.5, "at": "2013-03-05T00:00:00Z"}
    )
    assert response.status_code == 200
    payload = response.json()
    assert payload["distance_km"] == pytest.approx(364121.37256256194, abs=1e-3)


def test_moon_illumination_defaults_to_now(api_client: TestClient) -> None:
    response = api_client.get("/moon/illumination")
    assert response.status_code == 200
    payload = response.json()
    assert 0.0 <= payload["fraction"] <= 1.0
    assert 0 <= payload["phase_index"] <= 28


def test_moon_illumination_endpoint(api_client: TestClient) -> None:
    response = api_client.get("/moon/illumination", params={"at": "2013-03-05T00:00:00Z"})
    payload = response.json()
    assert payload["phase"] == pytest.approx(0.7548368838538762, abs=1e-7)
    assert payload["phase_index"] == 21


def test_validation_error(api_client: TestClient) -> None:
    response = api_client.get(
        "/sun/times",
        params={
            "lat": 95,  # invalid latitude
            "lon": 0,
        },
    )
    assert response.status_code == 422
    payload = response.json()
    assert payload["code"] == "validation_error"
    assert payload["ok"] is False


def test_missing_coordinates(api_client: TestClient) -> None:
    response = api_client.get("/moon/position", params={"lat": 10})
    assert response.status_code == 422
    assert response.json()["code"] == "validation_error"

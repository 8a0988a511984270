from __future__ import annotations

import math
from datetime import UTC, datetime, timedelta, timezone
from pathlib import Path

import sys

PROJECT_ROOT = Path(__file__).resolve().parents[1]
if str(PROJECT_ROOT) not in sys.path:
    sys.path.insert(0, str(PROJECT_ROOT))

import erfa
import numpy as np
import pytest

from skycalc.geometry import RAD, altitude, declination, sidereal_time
from skycalc.julian import J2000, days_since_epoch, from_julian_day, to_julian_day
from skycalc.sun import hour_angle


def _erfa_julian_day(dt: datetime) -> float:
    jd1, jd2 = erfa.cal2jd(dt.year, dt.month, dt.day)
    return jd1 + jd2


def _instants():
    start = datetime(1969, 7, 20, 20, 17, 40, 123000, tzinfo=UTC)
    for step in range(0, 40_000, 997):
        yield start + timedelta(days=step, milliseconds=step * 37)


def test_epochs():
    assert to_julian_day(datetime(1970, 1, 1, tzinfo=UTC)) == 2440587.5
    assert to_julian_day(datetime(2000, 1, 1, 12, tzinfo=UTC)) == J2000
    assert days_since_epoch(datetime(2000, 1, 1, 12, tzinfo=UTC)) == 0.0


def test_round_trip_is_exact_to_the_millisecond():
    for instant in _instants():
        assert from_julian_day(to_julian_day(instant)) == instant


def test_matches_erfa_calendar_conversion():
    for instant in _instants():
        instant = instant.replace(hour=0, minute=0, second=0, microsecond=0)
        assert to_julian_day(instant) == pytest.approx(_erfa_julian_day(instant), abs=1e-8)


def test_offset_aware_inputs_are_normalised():
    local = datetime(2013, 3, 5, 2, tzinfo=timezone(timedelta(hours=2)))
    assert to_julian_day(local) == to_julian_day(datetime(2013, 3, 5, tzinfo=UTC))
    assert from_julian_day(to_julian_day(local)).tzinfo == UTC


def test_nan_day_means_no_instant():
    assert from_julian_day(float("nan")) is None
    assert from_julian_day(np.float64("nan")) is None


def test_naive_datetime_rejected():
    with pytest.raises(ValueError, match="timezone-aware"):
        to_julian_day(datetime(2013, 3, 5))


def test_sidereal_time_tracks_erfa_gmst():
    start = datetime(1990, 1, 1, 5, 30, tzinfo=UTC)
    for step in range(0, 14_000, 97):
        instant = start + timedelta(days=step, hours=step % 24)
        jd = to_julian_day(instant)
        gmst = erfa.gmst82(jd, 0.0)
        ours = float(sidereal_time(days_since_epoch(instant), 0.0))
        difference = math.remainder(ours - gmst, 2 * math.pi)
        assert abs(difference) < 0.012


def test_out_of_range_arguments_give_nan():
    with np.errstate(invalid="ignore"):
        assert np.isnan(hour_angle(-18 * RAD, 80 * RAD, 23 * RAD))
    assert float(declination(0.0, 0.0)) == 0.0
    assert float(altitude(0.0, 0.0, 0.0)) == pytest.approx(math.pi / 2)


def test_day_outside_datetime_range_means_no_instant():
    assert from_julian_day(1e12) is None
    assert from_julian_day(-1e12) is None
    assert from_julian_day(float("inf")) is None

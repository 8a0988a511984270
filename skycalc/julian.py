"""Conversions between UTC instants and continuous Julian day numbers."""

from __future__ import annotations

import math
from datetime import UTC, datetime, timedelta
from typing import Optional

__all__ = [
    "DAY_MS",
    "J1970",
    "J2000",
    "days_since_epoch",
    "from_julian_day",
    "to_julian_day",
]

DAY_MS = 1000 * 60 * 60 * 24
J1970 = 2440588
J2000 = 2451545

_UNIX_EPOCH = datetime(1970, 1, 1, tzinfo=UTC)
_ONE_MS = timedelta(milliseconds=1)


def _epoch_milliseconds(instant: datetime) -> float:
    if instant.tzinfo is None:
        raise ValueError("datetime must be timezone-aware (UTC)")
    return (instant - _UNIX_EPOCH) / _ONE_MS


def to_julian_day(instant: datetime) -> float:
    """Return the Julian day number of a timezone-aware *instant*."""

    return _epoch_milliseconds(instant) / DAY_MS - 0.5 + J1970


def from_julian_day(jd: float) -> Optional[datetime]:
    """Return the UTC instant for Julian day *jd*, rounded to the millisecond.

    ``None`` is returned for a NaN day number, which is how the calculators
    report an event that does not happen for the requested date and place,
    and for a day number outside the years 1 to 9999.
    """

    jd = float(jd)
    if math.isnan(jd):
        return None
    try:
        milliseconds = round((jd + 0.5 - J1970) * DAY_MS)
        return _UNIX_EPOCH + timedelta(milliseconds=milliseconds)
    except OverflowError:
        # Outside the range datetime can represent.
        return None


def days_since_epoch(instant: datetime) -> float:
    return to_julian_day(instant) - J2000

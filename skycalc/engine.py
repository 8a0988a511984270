"""Sun and moon queries for a date and place, and the sun-times table.

The module-level functions delegate to a process-wide default calculator.
Tests and services that need an isolated table construct their own
:class:`SkyCalculator` or derive one with :meth:`SkyCalculator.with_time`.
"""

from __future__ import annotations

import json
import logging
from dataclasses import dataclass
from datetime import datetime
from threading import Lock
from typing import Dict, Iterable, Optional, Tuple, Union

import numpy as np

from .geometry import RAD, altitude, azimuth, declination, sidereal_time
from .julian import days_since_epoch, from_julian_day
from .moon import illumination, moon_coordinates, refraction_correction
from .sun import (
    approx_transit,
    ecliptic_longitude,
    equation_of_center,
    hour_angle,
    julian_cycle,
    solar_mean_anomaly,
    solar_transit,
    sun_coordinates,
)

__all__ = [
    "DEFAULT_TIMES",
    "MoonIllumination",
    "MoonPosition",
    "SkyCalculator",
    "SunPosition",
    "SunTimesEntry",
    "add_time",
    "default_calculator",
    "get_moon_illumination",
    "get_moon_position",
    "get_position",
    "get_times",
]

LOGGER = logging.getLogger(__name__)


@dataclass(frozen=True)
class SunTimesEntry:
    """Sun altitude (degrees) and the labels of its morning and evening crossings."""

    angle: float
    rise_label: str
    set_label: str


@dataclass(frozen=True)
class SunPosition:
    azimuth: float
    altitude: float


@dataclass(frozen=True)
class MoonPosition:
    azimuth: float
    altitude: float
    distance: float  # km


@dataclass(frozen=True)
class MoonIllumination:
    fraction: float
    phase: float
    angle: float


DEFAULT_TIMES: Tuple[SunTimesEntry, ...] = (
    SunTimesEntry(-0.83, "sunrise", "sunset"),
    SunTimesEntry(-0.3, "sunriseEnd", "sunsetStart"),
    SunTimesEntry(-6, "dawn", "dusk"),
    SunTimesEntry(-12, "nauticalDawn", "nauticalDusk"),
    SunTimesEntry(-18, "nightEnd", "night"),
    SunTimesEntry(6, "goldenHourEnd", "goldenHour"),
)

TimesLike = Iterable[Union[SunTimesEntry, Tuple[float, str, str]]]


def _as_entry(item: Union[SunTimesEntry, Tuple[float, str, str]]) -> SunTimesEntry:
    if isinstance(item, SunTimesEntry):
        return item
    angle, rise_label, set_label = item
    return SunTimesEntry(float(angle), str(rise_label), str(set_label))


def _observer(lat: float, lon: float) -> Tuple[float, float]:
    """Return ``(lw, phi)``: west-positive longitude and latitude in radians."""

    return RAD * -lon, RAD * lat


class SkyCalculator:
    """Solar and lunar calculator owning an append-only sun-times table."""

    def __init__(self, times: TimesLike = DEFAULT_TIMES) -> None:
        self._times: Tuple[SunTimesEntry, ...] = tuple(_as_entry(item) for item in times)
        self._lock = Lock()

    @property
    def times(self) -> Tuple[SunTimesEntry, ...]:
        """Snapshot of the registered sun-times entries."""

        return self._times

    def add_time(self, angle: float, rise_label: str, set_label: str) -> None:
        """Register a sun altitude whose crossings :meth:`get_times` will report.

        Entries are neither validated nor de-duplicated; a colliding label is
        overwritten in results by whichever entry was registered last.
        """

        entry = SunTimesEntry(angle, rise_label, set_label)
        with self._lock:
            self._times = self._times + (entry,)
        LOGGER.debug(
            json.dumps(
                {
                    "event": "sun_time_registered",
                    "angle": angle,
                    "rise": rise_label,
                    "set": set_label,
                }
            )
        )

    def with_time(self, angle: float, rise_label: str, set_label: str) -> "SkyCalculator":
        """Return a new calculator with one more entry; this one is unchanged."""

        return SkyCalculator(self._times + (SunTimesEntry(angle, rise_label, set_label),))

    def get_position(self, instant: datetime, lat: float, lon: float) -> SunPosition:
        """Azimuth and altitude of the sun in radians."""

        lw, phi = _observer(lat, lon)
        days = days_since_epoch(instant)
        coords = sun_coordinates(days)
        h = sidereal_time(days, lw) - coords.ra

        with np.errstate(invalid="ignore"):
            return SunPosition(
                azimuth=float(azimuth(h, phi, coords.dec)),
                altitude=float(altitude(h, phi, coords.dec)),
            )

    def get_times(
        self, instant: datetime, lat: float, lon: float
    ) -> Dict[str, Optional[datetime]]:
        """Compute sun event times for the solar day nearest *instant*.

        Parameters
        ----------
        instant:
            Timezone-aware datetime.
        lat, lon:
            Geographic coordinates in degrees (east-positive longitude).

        Returns
        -------
        dict
            ``solarNoon`` and ``nadir`` plus both labels of every registered
            entry. Events that do not happen at this place and date (polar
            day or night) map to ``None``.
        """

        lw, phi = _observer(lat, lon)
        days = days_since_epoch(instant)

        cycle = julian_cycle(days, lw)
        ds = approx_transit(0, lw, cycle)

        m = solar_mean_anomaly(ds)
        ecl_lon = ecliptic_longitude(m, equation_of_center(m))
        dec = declination(ecl_lon, 0)

        j_noon = solar_transit(ds, m, ecl_lon)

        result: Dict[str, Optional[datetime]] = {
            "solarNoon": from_julian_day(j_noon),
            "nadir": from_julian_day(j_noon - 0.5),
        }

        with np.errstate(invalid="ignore"):
            for entry in self._times:
                w = hour_angle(entry.angle * RAD, phi, dec)
                j_set = solar_transit(approx_transit(w, lw, cycle), m, ecl_lon)
                j_rise = j_noon - (j_set - j_noon)

                result[entry.rise_label] = from_julian_day(j_rise)
                result[entry.set_label] = from_julian_day(j_set)

        return result

    def get_moon_position(self, instant: datetime, lat: float, lon: float) -> MoonPosition:
        """Azimuth and refraction-corrected altitude (radians) and distance (km)."""

        lw, phi = _observer(lat, lon)
        days = days_since_epoch(instant)
        coords = moon_coordinates(days)
        h = sidereal_time(days, lw) - coords.ra

        with np.errstate(invalid="ignore", divide="ignore"):
            alt = altitude(h, phi, coords.dec)
            alt = alt + refraction_correction(alt)
            return MoonPosition(
                azimuth=float(azimuth(h, phi, coords.dec)),
                altitude=float(alt),
                distance=float(coords.distance),
            )

    def get_moon_illumination(self, instant: datetime) -> MoonIllumination:
        with np.errstate(invalid="ignore"):
            fraction, phase, angle = illumination(days_since_epoch(instant))
        return MoonIllumination(
            fraction=float(fraction), phase=float(phase), angle=float(angle)
        )


default_calculator = SkyCalculator()


def get_position(instant: datetime, lat: float, lon: float) -> SunPosition:
    return default_calculator.get_position(instant, lat, lon)


def get_times(instant: datetime, lat: float, lon: float) -> Dict[str, Optional[datetime]]:
    return default_calculator.get_times(instant, lat, lon)


def add_time(angle: float, rise_label: str, set_label: str) -> None:
    """Register a sun-times entry on the process-wide default calculator."""

    default_calculator.add_time(angle, rise_label, set_label)


def get_moon_position(instant: datetime, lat: float, lon: float) -> MoonPosition:
    return default_calculator.get_moon_position(instant, lat, lon)


def get_moon_illumination(instant: datetime) -> MoonIllumination:
    return default_calculator.get_moon_illumination(instant)

"""Low-precision solar model and the helpers used to time sunrise and sunset."""

from __future__ import annotations

import numpy as np

from .geometry import RAD, EquatorialCoordinates, declination, right_ascension
from .julian import J2000

__all__ = [
    "J0",
    "approx_transit",
    "ecliptic_longitude",
    "equation_of_center",
    "hour_angle",
    "julian_cycle",
    "solar_mean_anomaly",
    "solar_transit",
    "sun_coordinates",
]

PERIHELION = RAD * 102.9372  # Perihelion of the Earth.
J0 = 0.0009


def solar_mean_anomaly(days):
    return RAD * (357.5291 + 0.98560028 * days)


def equation_of_center(mean_anomaly):
    m = mean_anomaly
    return RAD * (1.9148 * np.sin(m) + 0.02 * np.sin(2 * m) + 0.0003 * np.sin(3 * m))


def ecliptic_longitude(mean_anomaly, center):
    return mean_anomaly + center + PERIHELION + np.pi


def sun_coordinates(days) -> EquatorialCoordinates:
    """Geocentric equatorial coordinates of the sun; ecliptic latitude is taken as 0."""

    m = solar_mean_anomaly(days)
    lon = ecliptic_longitude(m, equation_of_center(m))
    return EquatorialCoordinates(ra=right_ascension(lon, 0), dec=declination(lon, 0))


def julian_cycle(days, lw):
    """Index of the solar day whose transit lies nearest to *days*."""

    # Rounds halves up rather than to even.
    return np.floor(days - J0 - lw / (2 * np.pi) + 0.5)


def approx_transit(target_hour_angle, lw, cycle):
    return J0 + (target_hour_angle + lw) / (2 * np.pi) + cycle


def solar_transit(approx, mean_anomaly, ecl_lon):
    """Julian day of the transit nearest the approximate day offset *approx*."""

    return J2000 + approx + 0.0053 * np.sin(mean_anomaly) - 0.0069 * np.sin(2 * ecl_lon)


def hour_angle(target_altitude, phi, dec):
    """Hour angle at which a body of declination *dec* reaches *target_altitude*.

    NaN when that altitude is never reached, or never left, on the day.
    """

    return np.arccos(
        (np.sin(target_altitude) - np.sin(phi) * np.sin(dec))
        / (np.cos(phi) * np.cos(dec))
    )

"""Coordinate transforms shared by the solar and lunar models.

Every function is built from numpy ufuncs and accepts scalars or arrays.
Arguments of ``arcsin``/``arccos`` that fall outside [-1, 1] produce NaN; the
calculators evaluate these under ``numpy.errstate(invalid="ignore")`` and
report NaN as an absent event.
"""

from __future__ import annotations

from dataclasses import dataclass

import numpy as np

__all__ = [
    "OBLIQUITY",
    "RAD",
    "EquatorialCoordinates",
    "altitude",
    "azimuth",
    "declination",
    "right_ascension",
    "sidereal_time",
]

RAD = np.pi / 180.0
OBLIQUITY = RAD * 23.4397  # Obliquity of the Earth.


@dataclass(frozen=True)
class EquatorialCoordinates:
    """Right ascension and declination in radians."""

    ra: float
    dec: float


def right_ascension(lon, lat):
    return np.arctan2(
        np.sin(lon) * np.cos(OBLIQUITY) - np.tan(lat) * np.sin(OBLIQUITY), np.cos(lon)
    )


def declination(lon, lat):
    return np.arcsin(
        np.sin(lat) * np.cos(OBLIQUITY)
        + np.cos(lat) * np.sin(OBLIQUITY) * np.sin(lon)
    )


def azimuth(hour_angle, phi, dec):
    """Azimuth measured from south, positive towards west."""

    return np.arctan2(
        np.sin(hour_angle), np.cos(hour_angle) * np.sin(phi) - np.tan(dec) * np.cos(phi)
    )


def altitude(hour_angle, phi, dec):
    return np.arcsin(
        np.sin(phi) * np.sin(dec) + np.cos(phi) * np.cos(dec) * np.cos(hour_angle)
    )


def sidereal_time(days, lw):
    """Local sidereal time for *days* since J2000 and west-positive longitude *lw*."""

    return RAD * (280.16 + 360.9856235 * days) - lw

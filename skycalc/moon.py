"""Low-precision lunar model: geocentric position, refraction, illumination."""

from __future__ import annotations

from dataclasses import dataclass

import numpy as np

from .geometry import RAD, declination, right_ascension
from .sun import sun_coordinates

__all__ = [
    "SUN_DISTANCE_KM",
    "MoonCoordinates",
    "illumination",
    "moon_coordinates",
    "moon_phase_index",
    "refraction_correction",
]

SUN_DISTANCE_KM = 149598000


@dataclass(frozen=True)
class MoonCoordinates:
    """Geocentric right ascension/declination (radians) and distance (km)."""

    ra: float
    dec: float
    distance: float


def moon_coordinates(days) -> MoonCoordinates:
    lon = RAD * (218.316 + 13.176396 * days)  # ecliptic longitude
    anomaly = RAD * (134.963 + 13.064993 * days)
    node = RAD * (93.272 + 13.229350 * days)  # mean distance

    l = lon + RAD * 6.289 * np.sin(anomaly)
    b = RAD * 5.128 * np.sin(node)
    distance = 385001 - 20905 * np.cos(anomaly)

    return MoonCoordinates(
        ra=right_ascension(l, b), dec=declination(l, b), distance=distance
    )


def refraction_correction(h):
    """Altitude correction for atmospheric refraction; meaningful near the horizon."""

    return RAD * 0.017 / np.tan(h + RAD * 10.26 / (h + RAD * 5.10))


def illumination(days):
    """Return ``(fraction, phase, angle)`` of the moon *days* after J2000.

    ``phase`` runs from 0 (new) through 0.5 (full) towards 1; the sign of the
    bright-limb ``angle`` selects the waxing or waning half.
    """

    s = sun_coordinates(days)
    m = moon_coordinates(days)

    phi = np.arccos(
        np.sin(s.dec) * np.sin(m.dec)
        + np.cos(s.dec) * np.cos(m.dec) * np.cos(s.ra - m.ra)
    )
    inc = np.arctan2(
        SUN_DISTANCE_KM * np.sin(phi), m.distance - SUN_DISTANCE_KM * np.cos(phi)
    )
    angle = np.arctan2(
        np.cos(s.dec) * np.sin(s.ra - m.ra),
        np.sin(s.dec) * np.cos(m.dec) - np.cos(s.dec) * np.sin(m.dec) * np.cos(s.ra - m.ra),
    )

    fraction = (1 + np.cos(inc)) / 2
    phase = 0.5 + 0.5 * inc * np.where(angle < 0, -1.0, 1.0) / np.pi
    return fraction, phase, angle


def moon_phase_index(phase, steps: int = 28) -> int:
    """Bucket a phase in [0, 1) into one of ``steps + 1`` glyph indices."""

    return int(np.floor(phase * steps + 0.5))

"""Sun and moon positions, sun event times and moon illumination."""

from .engine import (
    DEFAULT_TIMES,
    MoonIllumination,
    MoonPosition,
    SkyCalculator,
    SunPosition,
    SunTimesEntry,
    add_time,
    get_moon_illumination,
    get_moon_position,
    get_position,
    get_times,
)
from .julian import days_since_epoch, from_julian_day, to_julian_day
from .moon import moon_phase_index

__all__ = [
    "DEFAULT_TIMES",
    "MoonIllumination",
    "MoonPosition",
    "SkyCalculator",
    "SunPosition",
    "SunTimesEntry",
    "add_time",
    "days_since_epoch",
    "from_julian_day",
    "get_moon_illumination",
    "get_moon_position",
    "get_position",
    "get_times",
    "moon_phase_index",
    "to_julian_day",
]

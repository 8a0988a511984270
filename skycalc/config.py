"""Environment-driven settings for the HTTP service."""

from __future__ import annotations

import json
import logging
import os
from dataclasses import dataclass
from typing import List, Tuple

from .engine import SunTimesEntry

LOGGER = logging.getLogger(__name__)

EXTRA_TIMES_VAR = "SKYCALC_EXTRA_TIMES"
CORS_ORIGINS_VAR = "SKYCALC_CORS_ORIGINS"


class ConfigurationError(RuntimeError):
    """Raised when a configuration variable cannot be parsed."""


@dataclass(frozen=True)
class Settings:
    extra_times: Tuple[SunTimesEntry, ...] = ()
    cors_origins: Tuple[str, ...] = ()


def _parse_extra_times(raw: str) -> Tuple[SunTimesEntry, ...]:
    """Parse a JSON list of ``[angle, rise_label, set_label]`` triples."""

    try:
        items = json.loads(raw)
    except json.JSONDecodeError as exc:
        raise ConfigurationError(f"{EXTRA_TIMES_VAR} is not valid JSON: {exc}") from exc
    if not isinstance(items, list):
        raise ConfigurationError(f"{EXTRA_TIMES_VAR} must be a JSON list")

    entries: List[SunTimesEntry] = []
    for item in items:
        if not isinstance(item, list) or len(item) != 3:
            raise ConfigurationError(
                f"{EXTRA_TIMES_VAR} entries must be [angle, rise_label, set_label]: {item!r}"
            )
        angle, rise_label, set_label = item
        if isinstance(angle, bool) or not isinstance(angle, (int, float)):
            raise ConfigurationError(f"Sun time angle must be a number: {angle!r}")
        if not isinstance(rise_label, str) or not isinstance(set_label, str):
            raise ConfigurationError(f"Sun time labels must be strings: {item!r}")
        entries.append(SunTimesEntry(float(angle), rise_label, set_label))
    return tuple(entries)


def load_settings() -> Settings:
    """Read :class:`Settings` from the environment."""

    raw_times = os.environ.get(EXTRA_TIMES_VAR, "").strip()
    extra_times = _parse_extra_times(raw_times) if raw_times else ()

    raw_origins = os.environ.get(CORS_ORIGINS_VAR, "")
    cors_origins = tuple(
        origin.strip() for origin in raw_origins.split(",") if origin.strip()
    )

    settings = Settings(extra_times=extra_times, cors_origins=cors_origins)
    LOGGER.info(
        json.dumps(
            {
                "event": "config_loaded",
                "extra_times": [entry.rise_label for entry in extra_times]
                + [entry.set_label for entry in extra_times],
                "cors_origins": list(cors_origins),
            }
        )
    )
    return settings

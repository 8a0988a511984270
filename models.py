"""Pydantic models for API requests and responses."""

from __future__ import annotations

from datetime import datetime
from typing import Dict, List, Optional

from pydantic import BaseModel, Field


class InstantQueryParams(BaseModel):
    """Query parameters shared by every endpoint."""

    at: Optional[datetime] = Field(
        None,
        description="Instant to evaluate (ISO-8601); defaults to the current UTC time",
    )


class LocationQueryParams(InstantQueryParams):
    """Validated query parameters for position and times endpoints."""

    lat: float = Field(..., ge=-90.0, le=90.0, description="Latitude in degrees")
    lon: float = Field(..., ge=-180.0, le=180.0, description="Longitude in degrees")


class PositionResponse(BaseModel):
    """Horizontal position of the sun."""

    ok: bool = True
    at: str = Field(..., description="Evaluated instant in UTC (ISO-8601)")
    latitude: float
    longitude: float
    azimuth: Optional[float] = Field(
        ..., description="Azimuth in radians, from south towards west"
    )
    altitude: Optional[float] = Field(..., description="Altitude in radians")


class MoonPositionResponse(PositionResponse):
    """Horizontal position of the moon."""

    distance_km: float = Field(..., description="Geocentric distance in kilometres")


class TimesResponse(BaseModel):
    """Sun event times; ``null`` marks an event that does not occur."""

    ok: bool = True
    at: str
    latitude: float
    longitude: float
    times: Dict[str, Optional[str]] = Field(
        ..., description="Event label to UTC time (ISO-8601)"
    )


class IlluminationResponse(BaseModel):
    """Illuminated fraction and phase of the moon."""

    ok: bool = True
    at: str
    fraction: float = Field(..., ge=0.0, le=1.0, description="Illuminated fraction")
    phase: float = Field(..., description="0 new, 0.25 first quarter, 0.5 full")
    angle: float = Field(..., description="Bright-limb position angle in radians")
    phase_index: int = Field(..., description="Phase bucketed into 0..28")


class HealthResponse(BaseModel):
    """Health-check response."""

    ok: bool = True
    times: List[str]


class ErrorResponse(BaseModel):
    """Error payload."""

    ok: bool = False
    code: str
    error: str

"""FastAPI application exposing sun and moon computations."""

from __future__ import annotations

import json
import logging
import math
import time
from contextlib import asynccontextmanager
from datetime import UTC, datetime
from typing import Optional

from fastapi import Depends, FastAPI, HTTPException, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from models import (
    ErrorResponse,
    HealthResponse,
    IlluminationResponse,
    InstantQueryParams,
    LocationQueryParams,
    MoonPositionResponse,
    PositionResponse,
    TimesResponse,
)
from skycalc import DEFAULT_TIMES, SkyCalculator, moon_phase_index
from skycalc.config import ConfigurationError, load_settings

logging.basicConfig(level=logging.INFO, format="%(message)s")
LOGGER = logging.getLogger("skycalc-api")

APP_DESCRIPTION = (
    "Sun and moon positions, twilight times and moon phase from low-precision"
    " solar and lunar models"
)

try:
    SETTINGS = load_settings()
except ConfigurationError as exc:
    LOGGER.error(json.dumps({"event": "config_failed", "error": str(exc)}))
    raise

CALCULATOR = SkyCalculator(DEFAULT_TIMES + SETTINGS.extra_times)


@asynccontextmanager
async def lifespan(app: FastAPI):
    LOGGER.info(
        json.dumps(
            {
                "event": "startup",
                "times": [entry.rise_label for entry in CALCULATOR.times],
            }
        )
    )
    yield


app = FastAPI(
    title="Skycalc API",
    description=APP_DESCRIPTION,
    version="1.0.0",
    lifespan=lifespan,
)

if SETTINGS.cors_origins:
    app.add_middleware(
        CORSMiddleware,
        allow_origins=list(SETTINGS.cors_origins),
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )


def _resolve_instant(at: Optional[datetime]) -> datetime:
    """Return *at* in UTC; missing means now, naive means UTC."""

    if at is None:
        return datetime.now(UTC)
    if at.tzinfo is None:
        return at.replace(tzinfo=UTC)
    return at.astimezone(UTC)


def _format_utc(dt: Optional[datetime]) -> Optional[str]:
    if dt is None:
        return None
    return dt.astimezone(UTC).isoformat().replace("+00:00", "Z")


def _finite(value: float) -> Optional[float]:
    return None if math.isnan(value) else value


def _error_response(status_code: int, code: str, message: str) -> JSONResponse:
    payload = ErrorResponse(code=code, error=message)
    LOGGER.error(json.dumps({"event": "error", "code": code, "message": message}))
    return JSONResponse(status_code=status_code, content=payload.model_dump())


def _log_request(event: str, start_time: float, **fields: object) -> None:
    duration_ms = (time.perf_counter() - start_time) * 1000.0
    LOGGER.info(
        json.dumps({"event": event, **fields, "duration_ms": round(duration_ms, 3)})
    )


@app.exception_handler(RequestValidationError)
async def validation_exception_handler(
    request: Request, exc: RequestValidationError
) -> JSONResponse:
    messages = ", ".join(error["msg"] for error in exc.errors())
    return _error_response(422, "validation_error", messages)


@app.exception_handler(HTTPException)
async def http_exception_handler(request: Request, exc: HTTPException) -> JSONResponse:
    detail = exc.detail
    if isinstance(detail, dict):
        message = detail.get("error") or detail.get("message") or str(detail)
    elif isinstance(detail, list):
        message = ", ".join(str(item) for item in detail)
    else:
        message = str(detail)
    return _error_response(exc.status_code, f"http_{exc.status_code}", message)


@app.exception_handler(Exception)
async def unhandled_exception_handler(request: Request, exc: Exception) -> JSONResponse:
    LOGGER.exception("Unhandled exception", exc_info=exc)
    return _error_response(500, "internal_error", "Unhandled server error")


ERROR_RESPONSES = {
    400: {"model": ErrorResponse},
    422: {"model": ErrorResponse},
    500: {"model": ErrorResponse},
}


@app.get("/health", response_model=HealthResponse)
def health() -> HealthResponse:
    labels = []
    for entry in CALCULATOR.times:
        labels.extend([entry.rise_label, entry.set_label])
    return HealthResponse(ok=True, times=labels)


@app.get("/sun/position", response_model=PositionResponse, responses=ERROR_RESPONSES)
def sun_position_endpoint(params: LocationQueryParams = Depends()) -> PositionResponse:
    start_time = time.perf_counter()
    instant = _resolve_instant(params.at)
    try:
        position = CALCULATOR.get_position(instant, params.lat, params.lon)
    except ValueError as exc:
        raise HTTPException(status_code=400, detail=str(exc))

    response = PositionResponse(
        at=_format_utc(instant),
        latitude=params.lat,
        longitude=params.lon,
        azimuth=_finite(position.azimuth),
        altitude=_finite(position.altitude),
    )
    _log_request("sun_position", start_time, lat=params.lat, lon=params.lon, at=response.at)
    return response


@app.get("/sun/times", response_model=TimesResponse, responses=ERROR_RESPONSES)
def sun_times_endpoint(params: LocationQueryParams = Depends()) -> TimesResponse:
    start_time = time.perf_counter()
    instant = _resolve_instant(params.at)
    try:
        times = CALCULATOR.get_times(instant, params.lat, params.lon)
    except ValueError as exc:
        raise HTTPException(status_code=400, detail=str(exc))

    response = TimesResponse(
        at=_format_utc(instant),
        latitude=params.lat,
        longitude=params.lon,
        times={label: _format_utc(value) for label, value in times.items()},
    )
    absent = sorted(label for label, value in times.items() if value is None)
    _log_request(
        "sun_times", start_time, lat=params.lat, lon=params.lon, at=response.at, absent=absent
    )
    return response


@app.get("/moon/position", response_model=MoonPositionResponse, responses=ERROR_RESPONSES)
def moon_position_endpoint(params: LocationQueryParams = Depends()) -> MoonPositionResponse:
    start_time = time.perf_counter()
    instant = _resolve_instant(params.at)
    try:
        position = CALCULATOR.get_moon_position(instant, params.lat, params.lon)
    except ValueError as exc:
        raise HTTPException(status_code=400, detail=str(exc))

    response = MoonPositionResponse(
        at=_format_utc(instant),
        latitude=params.lat,
        longitude=params.lon,
        azimuth=_finite(position.azimuth),
        altitude=_finite(position.altitude),
        distance_km=position.distance,
    )
    _log_request("moon_position", start_time, lat=params.lat, lon=params.lon, at=response.at)
    return response


@app.get(
    "/moon/illumination", response_model=IlluminationResponse, responses=ERROR_RESPONSES
)
def moon_illumination_endpoint(
    params: InstantQueryParams = Depends(),
) -> IlluminationResponse:
    start_time = time.perf_counter()
    instant = _resolve_instant(params.at)
    try:
        result = CALCULATOR.get_moon_illumination(instant)
    except ValueError as exc:
        raise HTTPException(status_code=400, detail=str(exc))

    response = IlluminationResponse(
        at=_format_utc(instant),
        fraction=result.fraction,
        phase=result.phase,
        angle=result.angle,
        phase_index=moon_phase_index(result.phase),
    )
    _log_request("moon_illumination", start_time, at=response.at, phase=round(result.phase, 4))
    return response

"""HTTP route definitions for the service."""

from __future__ import annotations

import json
import logging

from fastapi import APIRouter, Depends, Request, status
from fastapi.responses import JSONResponse, PlainTextResponse

from app.schemas import NO_DATA_MESSAGE, ErrorResponse
from services.telemetry import InvalidReadingError, TelemetryService, build_default_service

logger = logging.getLogger(__name__)

READ_ERROR_MESSAGE = "Error reading sensor data"
SAVE_ERROR_MESSAGE = "Error saving sensor data"
SAVE_OK_MESSAGE = "Sensor data saved successfully"

router = APIRouter()


def get_service() -> TelemetryService:
    return build_default_service()


@router.get(
    "/",
    summary="Plain-text liveness banner.",
    response_class=PlainTextResponse,
)
async def root() -> str:
    return "Backend operational."


@router.post(
    "/api/sensor-data/add",
    summary="Store a sensor reading and make it the latest one.",
    response_class=PlainTextResponse,
    responses={
        status.HTTP_400_BAD_REQUEST: {"description": "Body is not a usable reading."},
        status.HTTP_500_INTERNAL_SERVER_ERROR: {"description": "Reading could not be written."},
    },
)
async def add_sensor_data(
    request: Request,
    service: TelemetryService = Depends(get_service),
) -> PlainTextResponse:
    media_type = request.headers.get("content-type", "").split(";", 1)[0].strip().lower()
    if media_type != "application/json":
        return PlainTextResponse(
            "Content-Type must be application/json.",
            status_code=status.HTTP_400_BAD_REQUEST,
        )

    try:
        payload = await request.json()
    except (json.JSONDecodeError, UnicodeDecodeError):
        return PlainTextResponse(
            "Request body must be valid JSON.",
            status_code=status.HTTP_400_BAD_REQUEST,
        )

    try:
        service.ingest(payload)
    except InvalidReadingError as exc:
        logger.warning("Rejected sensor data", extra={"reason": str(exc)})
        return PlainTextResponse(str(exc), status_code=status.HTTP_400_BAD_REQUEST)
    except (OSError, TypeError, ValueError):
        return PlainTextResponse(
            SAVE_ERROR_MESSAGE,
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        )
    return PlainTextResponse(SAVE_OK_MESSAGE)


@router.get(
    "/api/sensor-data/get",
    summary="Fetch the most recent sensor reading.",
    responses={
        status.HTTP_500_INTERNAL_SERVER_ERROR: {"model": ErrorResponse},
    },
)
async def get_sensor_data(
    service: TelemetryService = Depends(get_service),
) -> JSONResponse:
    try:
        reading = service.latest()
    except (OSError, ValueError):
        logger.exception("Error reading sensor data")
        return JSONResponse(
            ErrorResponse(error=READ_ERROR_MESSAGE).model_dump(),
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        )

    if reading is None:
        return JSONResponse(ErrorResponse(error=NO_DATA_MESSAGE).model_dump())
    return JSONResponse(reading)

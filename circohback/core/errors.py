"""
Custom exception hierarchy for the CircohBack growth service.

Rule: every HTTP error has a machine-readable `code` string so clients
can branch on it without parsing English messages.
"""
from __future__ import annotations

import logging
from typing import Any

from fastapi import Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from starlette import status

logger = logging.getLogger(__name__)


# ---------------------------------------------------------------------------
# Exception classes
# ---------------------------------------------------------------------------

class CircohBackException(Exception):
    """Base class for all application-level errors."""
    http_status: int = status.HTTP_500_INTERNAL_SERVER_ERROR
    code: str = "INTERNAL_ERROR"

    def __init__(self, message: str, details: dict[str, Any] | None = None):
        self.message = message
        self.details = details or {}
        super().__init__(message)

    def to_dict(self) -> dict:
        payload: dict[str, Any] = {"code": self.code, "message": self.message}
        if self.details:
            payload["details"] = self.details
        return payload


class GrowthConfigError(CircohBackException):
    """Raised at load time when the level/category table is malformed."""
    http_status = status.HTTP_500_INTERNAL_SERVER_ERROR
    code = "GROWTH_CONFIG_INVALID"

    def __init__(self, message: str, errors: list[str] | None = None):
        super().__init__(
            message=message,
            details={"errors": errors} if errors else {},
        )


class UnknownActivityTypeError(CircohBackException):
    http_status = status.HTTP_422_UNPROCESSABLE_ENTITY
    code = "UNKNOWN_ACTIVITY_TYPE"

    def __init__(self, activity_type: str, known: list[str]):
        super().__init__(
            message=f"Activity type '{activity_type}' is not configured.",
            details={"activity_type": activity_type, "known_types": known},
        )


class LevelUpEventNotFoundError(CircohBackException):
    http_status = status.HTTP_404_NOT_FOUND
    code = "LEVEL_UP_EVENT_NOT_FOUND"

    def __init__(self, user_id: str, event_id: int):
        super().__init__(
            message=f"Level-up event {event_id} not found for user {user_id}.",
            details={"user_id": user_id, "event_id": event_id},
        )


class InvalidHistoryWindowError(CircohBackException):
    http_status = status.HTTP_422_UNPROCESSABLE_ENTITY
    code = "INVALID_HISTORY_WINDOW"

    def __init__(self, start: Any, end: Any, max_days: int | None = None):
        if max_days is None:
            message = f"History window start {start} is after end {end}."
        else:
            message = f"History window {start}..{end} is longer than {max_days} days."
        details: dict[str, Any] = {"start": str(start), "end": str(end)}
        if max_days is not None:
            details["max_days"] = max_days
        super().__init__(message=message, details=details)


# ---------------------------------------------------------------------------
# FastAPI exception handlers
# ---------------------------------------------------------------------------

async def circohback_exception_handler(
    request: Request, exc: CircohBackException
) -> JSONResponse:
    return JSONResponse(
        status_code=exc.http_status,
        content=exc.to_dict(),
    )


async def validation_exception_handler(
    request: Request, exc: RequestValidationError
) -> JSONResponse:
    """Return structured 422 with machine-readable field errors."""
    field_errors = []
    for error in exc.errors():
        field_errors.append({
            "field": ".".join(str(loc) for loc in error["loc"] if loc != "body"),
            "message": error["msg"],
            "type": error["type"],
        })
    return JSONResponse(
        status_code=status.HTTP_422_UNPROCESSABLE_ENTITY,
        content={
            "code": "VALIDATION_ERROR",
            "message": "Request validation failed.",
            "details": {"errors": field_errors},
        },
    )


async def unhandled_exception_handler(request: Request, exc: Exception) -> JSONResponse:
    logger.exception("Unhandled error on %s %s", request.method, request.url.path)
    return JSONResponse(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        content={
            "code": "INTERNAL_ERROR",
            "message": "An unexpected error occurred.",
        },
    )

# tutoring_calendar/errors.py
"""
Domain errors raised by the calendar core.

Each carries its HTTP status code; ``register_error_handlers`` turns them
into JSON responses, so the core never raises HTTPException.
"""

from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse


class CalendarError(Exception):
    """Base exception for calendar/booking errors."""

    status_code = 400


class SessionNotFoundError(CalendarError):
    """Calendar session expired or never existed."""

    status_code = 404


class SlotNotFoundError(CalendarError):
    """Slot id is not part of the active slot set."""

    status_code = 404


class SlotNotBookableError(CalendarError):
    """Only availability slots can be booked."""

    status_code = 409


class BookingInProgressError(CalendarError):
    """A booking for this slot is already in flight."""

    status_code = 409


class InvalidSelectionError(CalendarError):
    """Unknown subject/level, or a day outside the visible week."""

    status_code = 422


def register_error_handlers(app: FastAPI) -> None:
    @app.exception_handler(CalendarError)
    async def calendar_error_handler(request: Request, exc: CalendarError) -> JSONResponse:
        return JSONResponse({"detail": str(exc)}, status_code=exc.status_code)

"""
Centralized error handling for slot operations.
Domain errors are raised by the services; routes map them to HTTPException with slot_error_to_http.
"""
from __future__ import annotations

from fastapi import HTTPException

from weekly_slots.core.constants import MAX_SLOTS_PER_DAY

# ---------------------------------------------------------------------------
# Constants: status codes and user-facing messages
# ---------------------------------------------------------------------------

STATUS_BAD_REQUEST = 400  # malformed time range, weekday, missing date
STATUS_NOT_FOUND = 404
STATUS_CONFLICT = 409  # business rule rejection (capacity)
STATUS_SERVICE_UNAVAILABLE = 503  # storage connectivity / timeout
STATUS_INTERNAL_ERROR = 500

MSG_SLOT_NOT_FOUND = "Slot not found"
MSG_CAPACITY_EXCEEDED = f"Maximum {MAX_SLOTS_PER_DAY} slots allowed per day"
MSG_STORAGE_FAILURE = "Storage is temporarily unavailable. Please retry the request."


class SlotError(Exception):
    """Base class for errors surfaced to the caller of a slot operation."""

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message

    def detail(self):
        return self.message


class ValidationError(SlotError):
    """Malformed input, reported with the offending field."""

    def __init__(self, field: str, message: str):
        super().__init__(f"{field}: {message}")
        self.field = field
        self.field_message = message

    def detail(self):
        return {"field": self.field, "message": self.field_message}


class NotFoundError(SlotError):
    def __init__(self, slot_id=None):
        super().__init__(MSG_SLOT_NOT_FOUND)
        self.slot_id = slot_id


class CapacityExceeded(SlotError):
    def __init__(self, message: str = MSG_CAPACITY_EXCEEDED):
        super().__init__(message)


class StorageFailure(SlotError):
    """Storage collaborator failed (connectivity, timeout, constraint). Never retried here."""

    def __init__(self, message: str = MSG_STORAGE_FAILURE):
        super().__init__(message)


# ---------------------------------------------------------------------------
# Error rules: (error class, status_code). First match wins.
# ---------------------------------------------------------------------------

SLOT_ERROR_RULES: list[tuple[type[SlotError], int]] = [
    (ValidationError, STATUS_BAD_REQUEST),
    (NotFoundError, STATUS_NOT_FOUND),
    (CapacityExceeded, STATUS_CONFLICT),
    (StorageFailure, STATUS_SERVICE_UNAVAILABLE),
]


def slot_error_to_http(exc: SlotError) -> HTTPException:
    """
    Map a SlotError into an HTTPException.
    Uses SLOT_ERROR_RULES for known error types; otherwise returns 500 with the error message.
    """
    for error_cls, status_code in SLOT_ERROR_RULES:
        if isinstance(exc, error_cls):
            return HTTPException(status_code=status_code, detail=exc.detail())
    return HTTPException(status_code=STATUS_INTERNAL_ERROR, detail=exc.message)


# ---------------------------------------------------------------------------
# Request parsing errors (FastAPI/pydantic) use the same 400 {field, message} shape
# ---------------------------------------------------------------------------

_LOCATION_PREFIXES = ("body", "query", "path", "header")


def request_error_detail(errors: list[dict]) -> dict[str, str]:
    """First request validation error as {"field": ..., "message": ...}."""
    if not errors:
        return {"field": "request", "message": "Invalid request"}
    first = errors[0]
    loc = [str(part) for part in first.get("loc", ()) if part not in _LOCATION_PREFIXES]
    return {"field": ".".join(loc) or "request", "message": first.get("msg", "Invalid value")}

"""Custom exceptions for centralized error handling."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any


@dataclass
class AppError(Exception):
    """Base application error."""

    code: str
    message: str
    status_code: int
    details: Any | None = None


class NotFoundError(AppError):
    """Resource not found."""

    def __init__(self, message: str = "Not found", details: Any | None = None) -> None:
        super().__init__(code="not_found", message=message, status_code=404, details=details)


class ValidationError(AppError):
    """Input validation error."""

    def __init__(self, message: str = "Validation error", details: Any | None = None) -> None:
        super().__init__(code="validation_error", message=message, status_code=400, details=details)


class InvalidSlotValueError(AppError):
    """A dialog slot value could not be used (e.g. a bad winner count)."""

    def __init__(self, message: str = "Invalid slot value", details: Any | None = None) -> None:
        super().__init__(code="invalid_slot_value", message=message, status_code=400, details=details)


class EmptyHistoryError(AppError):
    """The most recent draw was requested but nothing has been drawn yet."""

    def __init__(self, message: str = "No draw has been recorded", details: Any | None = None) -> None:
        super().__init__(code="empty_history", message=message, status_code=409, details=details)


class PersistenceLoadError(AppError):
    """The ledger store could not be read."""

    def __init__(self, message: str = "Failed to load ledger", details: Any | None = None) -> None:
        super().__init__(code="persistence_load_failed", message=message, status_code=503, details=details)


class PersistenceSaveError(AppError):
    """The ledger store could not be written."""

    def __init__(self, message: str = "Failed to save ledger", details: Any | None = None) -> None:
        super().__init__(code="persistence_save_failed", message=message, status_code=503, details=details)


class UnrecognizedRequestError(AppError):
    """No handler matches the inbound request."""

    def __init__(self, message: str = "Unrecognized request", details: Any | None = None) -> None:
        super().__init__(code="unrecognized_request", message=message, status_code=400, details=details)

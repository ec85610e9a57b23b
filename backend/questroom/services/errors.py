# backend/questroom/services/errors.py
"""
Domain errors raised by the booking services.

Routers do not catch these; `main.py` maps each class to an HTTP status.
None of the operations that raise them is safe to retry blindly: callers
re-read current state first.
"""


class BookingError(Exception):
    """Base class for all domain errors."""

    status_code = 400

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message


class ValidationError(BookingError):
    """Malformed date range, inverted window, bad party size, bad transition."""

    status_code = 422


class NotFound(BookingError):
    """Chapter, slot or reservation does not exist (or not in the given bucket)."""

    status_code = 404


class SlotUnavailable(BookingError):
    """Slot is already held, disabled or gone. Re-fetch and pick another."""

    status_code = 409


class Conflict(BookingError):
    """Deletion blocked by dependent rows."""

    status_code = 409


class PartialBulkFailure(BookingError):
    """One or more chapters failed during a bulk operation."""

    status_code = 207

    def __init__(self, report):
        failed = [r.chapter_id for r in report.results if not r.ok]
        super().__init__(f"Bulk {report.operation} failed for chapters {failed}")
        self.report = report

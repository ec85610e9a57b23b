# backend/questroom/services/bulk.py
"""
Bulk Operations Façade.

Applies one slot operation to a list of chapters, one chapter at a time.
Each chapter is its own transaction: committed on success, rolled back
on failure. A failing chapter never stops the others; the outcome of
every chapter is returned in a BulkReport.
"""

import logging
from dataclasses import dataclass, field
from datetime import date

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from .errors import BookingError, PartialBulkFailure, ValidationError
from .slots import (
    TimeWindow,
    clear_all,
    clear_day,
    disable_day,
    enable_day,
    generate_slots,
)

logger = logging.getLogger(__name__)

OP_CLEAR_ALL = "clearAll"
OP_CLEAR_DAY = "clearDay"
OP_DISABLE_DAY = "disableDay"
OP_ENABLE_DAY = "enableDay"
OP_ADD_SLOTS = "addSlots"

OPERATIONS = (OP_CLEAR_ALL, OP_CLEAR_DAY, OP_DISABLE_DAY, OP_ENABLE_DAY, OP_ADD_SLOTS)


@dataclass
class ChapterResult:
    chapter_id: int
    ok: bool
    affected: int = 0
    skipped: int = 0
    error: str | None = None
    error_type: str | None = None


@dataclass
class BulkReport:
    operation: str
    results: list[ChapterResult] = field(default_factory=list)

    @property
    def succeeded(self) -> list[int]:
        return [r.chapter_id for r in self.results if r.ok]

    @property
    def failed(self) -> list[int]:
        return [r.chapter_id for r in self.results if not r.ok]

    def raise_for_failures(self) -> None:
        if self.failed:
            raise PartialBulkFailure(self)


def run_bulk(
    db: Session,
    chapter_ids: list[int],
    operation: str,
    day: date | None = None,
    date_from: date | None = None,
    date_to: date | None = None,
    weekday_window: TimeWindow | None = None,
    weekend_window: TimeWindow | None = None,
) -> BulkReport:
    """
    Run `operation` for every chapter in `chapter_ids`, in order.

    Parameter errors (unknown operation, missing date) fail the whole
    request up front; everything else is reported per chapter.
    """
    if operation not in OPERATIONS:
        raise ValidationError(f"Unknown bulk operation {operation!r}")
    if not chapter_ids:
        raise ValidationError("chapterIds must not be empty")
    if operation in (OP_CLEAR_DAY, OP_DISABLE_DAY, OP_ENABLE_DAY) and day is None:
        raise ValidationError(f"{operation} requires a date")
    if operation == OP_ADD_SLOTS and (date_from is None or date_to is None or weekday_window is None):
        raise ValidationError(f"{operation} requires dateRange and weekdayTime")

    report = BulkReport(operation=operation)

    # duplicates would run the same chapter twice
    for chapter_id in dict.fromkeys(chapter_ids):
        try:
            affected, skipped = _apply(
                db, chapter_id, operation, day, date_from, date_to, weekday_window, weekend_window
            )
            db.commit()
        except (BookingError, SQLAlchemyError) as e:
            db.rollback()
            message = e.message if isinstance(e, BookingError) else "Database error"
            logger.warning(f"Bulk {operation}: chapter {chapter_id} failed: {e}")
            report.results.append(ChapterResult(
                chapter_id=chapter_id,
                ok=False,
                error=message,
                error_type=type(e).__name__,
            ))
            continue

        report.results.append(ChapterResult(
            chapter_id=chapter_id,
            ok=True,
            affected=affected,
            skipped=skipped,
        ))

    logger.info(
        f"Bulk {operation}: {len(report.succeeded)} succeeded, {len(report.failed)} failed"
    )
    return report


def _apply(
    db: Session,
    chapter_id: int,
    operation: str,
    day: date | None,
    date_from: date | None,
    date_to: date | None,
    weekday_window: TimeWindow | None,
    weekend_window: TimeWindow | None,
) -> tuple[int, int]:
    """Run one operation for one chapter. Returns (affected, skipped)."""
    if operation == OP_ADD_SLOTS:
        generated = generate_slots(
            db, chapter_id, date_from, date_to, weekday_window, weekend_window
        )
        return len(generated.created), len(generated.skipped)

    if operation == OP_CLEAR_ALL:
        result = clear_all(db, chapter_id)
    elif operation == OP_CLEAR_DAY:
        result = clear_day(db, chapter_id, day)
    elif operation == OP_DISABLE_DAY:
        result = disable_day(db, chapter_id, day)
    else:
        result = enable_day(db, chapter_id, day)

    return result.affected, len(result.skipped_slot_ids)

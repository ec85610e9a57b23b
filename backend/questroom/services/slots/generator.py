# backend/questroom/services/slots/generator.py
"""
Slot Generator.

Expands a date range plus daily time windows into one TimeSlot per day
for a chapter:

  Mon–Fri → weekday window
  Sat–Sun → weekend window (falls back to the weekday window)

Re-running the same request is a no-op: a day that already has a slot
starting at the same time is skipped, and so is a day whose existing slots
overlap the new one. Nothing here commits; the caller owns the transaction.
"""

import logging
from dataclasses import dataclass, field
from datetime import date, datetime

from sqlalchemy.orm import Session

from ...models import Chapters, TimeSlots
from ..errors import ValidationError
from .config import (
    SlotConfig,
    TimeWindow,
    get_slot_config,
    is_weekend,
    iter_dates,
    overlaps,
)

logger = logging.getLogger(__name__)

SKIP_EXISTS = "exists"
SKIP_OVERLAP = "overlap"


@dataclass
class SkippedDay:
    date: date
    reason: str


@dataclass
class GenerationReport:
    chapter_id: int
    created: list[TimeSlots] = field(default_factory=list)
    skipped: list[SkippedDay] = field(default_factory=list)


def generate_slots(
    db: Session,
    chapter_id: int,
    date_from: date,
    date_to: date,
    weekday_window: TimeWindow,
    weekend_window: TimeWindow | None = None,
    config: SlotConfig | None = None,
) -> GenerationReport:
    """
    Generate one slot per calendar day in [date_from, date_to].

    Raises:
        ValidationError: inverted range, range too long, unknown chapter
    """
    config = config or get_slot_config()

    if date_from > date_to:
        raise ValidationError(
            f"Date range start {date_from.isoformat()} is after end {date_to.isoformat()}"
        )

    total_days = (date_to - date_from).days + 1
    if total_days > config.max_generation_days:
        raise ValidationError(
            f"Date range spans {total_days} days, limit is {config.max_generation_days}"
        )

    _require_chapter(db, chapter_id)
    weekend_window = weekend_window or weekday_window

    existing = _existing_intervals(db, chapter_id, date_from, date_to)
    report = GenerationReport(chapter_id=chapter_id)

    for day in iter_dates(date_from, date_to):
        window = weekend_window if is_weekend(day) else weekday_window
        start, end = window.on(day)
        taken = existing.get(day, [])

        if any(s == start for s, _ in taken):
            report.skipped.append(SkippedDay(day, SKIP_EXISTS))
            logger.debug(f"Chapter {chapter_id}: slot {day} {window} exists, skipped")
            continue

        if any(overlaps(start, end, s, e) for s, e in taken):
            report.skipped.append(SkippedDay(day, SKIP_OVERLAP))
            logger.debug(f"Chapter {chapter_id}: slot {day} {window} overlaps, skipped")
            continue

        slot = TimeSlots(
            chapter_id=chapter_id,
            date=day,
            start_time=start,
            end_time=end,
            is_available=True,
            is_disabled=False,
        )
        db.add(slot)
        report.created.append(slot)
        existing.setdefault(day, []).append((start, end))

    db.flush()

    logger.info(
        f"Chapter {chapter_id}: generated {len(report.created)} slots "
        f"for {date_from}..{date_to}, skipped {len(report.skipped)}"
    )
    return report


def add_slots_for_day(
    db: Session,
    chapter_id: int,
    day: date,
    windows: list[TimeWindow],
) -> list[TimeSlots]:
    """
    Create several explicit slots on one date.

    All windows must be free of overlaps with each other and with the
    chapter's existing slots on that date; otherwise nothing is created.
    """
    if not windows:
        raise ValidationError("At least one time range is required")

    _require_chapter(db, chapter_id)

    taken = _existing_intervals(db, chapter_id, day, day).get(day, [])
    planned: list[tuple[datetime, datetime]] = []

    for window in sorted(windows, key=lambda w: w.start):
        start, end = window.on(day)
        for s, e in taken + planned:
            if overlaps(start, end, s, e):
                raise ValidationError(
                    f"Time range {window} overlaps {s:%H:%M}-{e:%H:%M} on {day.isoformat()}"
                )
        planned.append((start, end))

    slots = [
        TimeSlots(
            chapter_id=chapter_id,
            date=day,
            start_time=start,
            end_time=end,
            is_available=True,
            is_disabled=False,
        )
        for start, end in planned
    ]
    db.add_all(slots)
    db.flush()

    logger.info(f"Chapter {chapter_id}: added {len(slots)} slots on {day}")
    return slots


# ── Helpers ──────────────────────────────────────────────────────────────


def _require_chapter(db: Session, chapter_id: int) -> Chapters:
    chapter = db.get(Chapters, chapter_id)
    if not chapter:
        raise ValidationError(f"Chapter {chapter_id} does not exist")
    return chapter


def _existing_intervals(
    db: Session,
    chapter_id: int,
    date_from: date,
    date_to: date,
) -> dict[date, list[tuple[datetime, datetime]]]:
    """Existing (start, end) pairs per date for the chapter."""
    rows = (
        db.query(TimeSlots.date, TimeSlots.start_time, TimeSlots.end_time)
        .filter(
            TimeSlots.chapter_id == chapter_id,
            TimeSlots.date >= date_from,
            TimeSlots.date <= date_to,
        )
        .all()
    )
    result: dict[date, list[tuple[datetime, datetime]]] = {}
    for day, start, end in rows:
        result.setdefault(day, []).append((start, end))
    return result

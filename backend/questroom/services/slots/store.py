# backend/questroom/services/slots/store.py
"""
Availability Store.

Owns the availability flags of time slots:

  is_available  bookable right now
  is_disabled   switched off by an admin, independent of bookings

A slot held by a pending/approved reservation is never made available
here. Day-level clear/enable skip such slots and report them; disable
applies to every slot of the day.

Nothing here commits; the caller owns the transaction.
"""

import logging
from dataclasses import dataclass, field
from datetime import date, datetime

from sqlalchemy.orm import Session, selectinload

from ...models import ACTIVE_STATUSES, Chapters, Reservations, Scenarios, TimeSlots
from ..errors import Conflict, NotFound, SlotUnavailable, ValidationError
from .config import TimeWindow, overlaps

logger = logging.getLogger(__name__)


@dataclass
class DayOperationResult:
    chapter_id: int
    date: date | None
    affected: int = 0
    skipped_slot_ids: list[int] = field(default_factory=list)


# ── Read ─────────────────────────────────────────────────────────────────


def get_slot(db: Session, slot_id: int, lock: bool = False) -> TimeSlots:
    query = db.query(TimeSlots).filter(TimeSlots.id == slot_id)
    if lock:
        query = query.with_for_update()
    slot = query.first()
    if not slot:
        raise NotFound(f"Time slot {slot_id} not found")
    return slot


def list_slots(
    db: Session,
    chapter_id: int,
    date_from: date | None = None,
    date_to: date | None = None,
) -> list[TimeSlots]:
    """
    Slots of a chapter ordered by start time.

    date_from only → that single day; neither → every slot.
    """
    _require_chapter(db, chapter_id)

    query = (
        db.query(TimeSlots)
        .options(selectinload(TimeSlots.reservations))
        .filter(TimeSlots.chapter_id == chapter_id)
    )
    if date_from is not None:
        date_to = date_to or date_from
        if date_from > date_to:
            raise ValidationError("dateTo must not be before date")
        query = query.filter(TimeSlots.date >= date_from, TimeSlots.date <= date_to)

    return query.order_by(TimeSlots.start_time).all()


def list_scenario_slots(
    db: Session,
    scenario_id: int,
    date_from: date | None = None,
    date_to: date | None = None,
) -> list[TimeSlots]:
    """Slots of every chapter of a scenario, ordered by start time then chapter."""
    if not db.get(Scenarios, scenario_id):
        raise NotFound(f"Scenario {scenario_id} not found")

    query = (
        db.query(TimeSlots)
        .join(Chapters, TimeSlots.chapter_id == Chapters.id)
        .options(selectinload(TimeSlots.reservations))
        .filter(Chapters.scenario_id == scenario_id)
    )
    if date_from is not None:
        date_to = date_to or date_from
        if date_from > date_to:
            raise ValidationError("dateTo must not be before date")
        query = query.filter(TimeSlots.date >= date_from, TimeSlots.date <= date_to)

    return query.order_by(TimeSlots.start_time, TimeSlots.chapter_id).all()


def count_active_holders(
    db: Session,
    slot_id: int,
    exclude_reservation_id: int | None = None,
) -> int:
    """Number of pending/approved reservations bound to the slot."""
    query = db.query(Reservations).filter(
        Reservations.time_slot_id == slot_id,
        Reservations.status.in_(ACTIVE_STATUSES),
    )
    if exclude_reservation_id is not None:
        query = query.filter(Reservations.id != exclude_reservation_id)
    return query.count()


# ── Single slot ──────────────────────────────────────────────────────────


def update_slot(
    db: Session,
    slot_id: int,
    day: date | None = None,
    window: TimeWindow | None = None,
) -> TimeSlots:
    """Move a slot to another date and/or time window."""
    slot = get_slot(db, slot_id, lock=True)
    if count_active_holders(db, slot.id):
        raise Conflict(f"Time slot {slot_id} is reserved and cannot be moved")

    day = day or slot.date
    if window is not None:
        start, end = window.on(day)
    else:
        start = datetime.combine(day, slot.start_time.time())
        end = datetime.combine(day, slot.end_time.time())

    others = (
        db.query(TimeSlots)
        .filter(
            TimeSlots.chapter_id == slot.chapter_id,
            TimeSlots.date == day,
            TimeSlots.id != slot.id,
        )
        .all()
    )
    for other in others:
        if overlaps(start, end, other.start_time, other.end_time):
            raise ValidationError(
                f"Time slot would overlap slot {other.id} "
                f"({other.start_time:%H:%M}-{other.end_time:%H:%M}) on {day.isoformat()}"
            )

    slot.date = day
    slot.start_time = start
    slot.end_time = end
    db.flush()
    return slot


def delete_slot(db: Session, slot_id: int) -> None:
    slot = get_slot(db, slot_id, lock=True)
    if count_active_holders(db, slot.id):
        raise Conflict(f"Time slot {slot_id} is reserved and cannot be deleted")
    db.delete(slot)
    db.flush()
    logger.info(f"Time slot {slot_id} deleted")


def set_availability(db: Session, slot_id: int, is_available: bool) -> TimeSlots:
    """
    Set a slot's availability to an explicit target.

    True  → available and not disabled; refused while a reservation holds it.
    False → unavailable and disabled.
    """
    slot = get_slot(db, slot_id, lock=True)

    if is_available:
        if count_active_holders(db, slot.id):
            raise SlotUnavailable(f"Time slot {slot_id} is held by an active reservation")
        slot.is_available = True
        slot.is_disabled = False
    else:
        slot.is_available = False
        slot.is_disabled = True

    db.flush()
    logger.info(f"Time slot {slot_id} availability set to {is_available}")
    return slot


def claim_slot(db: Session, slot_id: int) -> bool:
    """
    Atomically flip an available slot to unavailable.

    Conditional UPDATE: returns False when another transaction got there
    first or the slot is disabled.
    """
    updated = (
        db.query(TimeSlots)
        .filter(
            TimeSlots.id == slot_id,
            TimeSlots.is_available.is_(True),
            TimeSlots.is_disabled.is_(False),
        )
        .update({TimeSlots.is_available: False}, synchronize_session="fetch")
    )
    return updated == 1


def release_slot(
    db: Session,
    slot: TimeSlots | None,
    reservation_id: int,
) -> bool:
    """
    Give a slot back after its reservation stopped holding it.

    Stays unavailable if another active reservation still holds it or an
    admin disabled it. Returns True when the slot became available.
    """
    if slot is None:
        return False

    others = count_active_holders(db, slot.id, exclude_reservation_id=reservation_id)
    if others:
        logger.warning(
            f"Time slot {slot.id} still held by {others} active reservation(s), not released"
        )
        return False

    if slot.is_disabled:
        return False

    slot.is_available = True
    db.flush()
    return True


# ── Day / chapter level ──────────────────────────────────────────────────


def clear_day(db: Session, chapter_id: int, day: date) -> DayOperationResult:
    """Hard-delete the day's slots, keeping the ones with active reservations."""
    _require_chapter(db, chapter_id)
    result = _delete_unheld(db, chapter_id, _day_slots(db, chapter_id, day), day)
    logger.info(
        f"Chapter {chapter_id}: cleared {result.affected} slots on {day}, "
        f"kept {len(result.skipped_slot_ids)} reserved"
    )
    return result


def clear_all(db: Session, chapter_id: int) -> DayOperationResult:
    """Hard-delete every slot of the chapter, keeping reserved ones."""
    _require_chapter(db, chapter_id)
    slots = (
        db.query(TimeSlots)
        .options(selectinload(TimeSlots.reservations))
        .filter(TimeSlots.chapter_id == chapter_id)
        .all()
    )
    result = _delete_unheld(db, chapter_id, slots, None)
    logger.info(
        f"Chapter {chapter_id}: cleared {result.affected} slots, "
        f"kept {len(result.skipped_slot_ids)} reserved"
    )
    return result


def disable_day(db: Session, chapter_id: int, day: date) -> DayOperationResult:
    """Mark every slot of the day unavailable without deleting it."""
    _require_chapter(db, chapter_id)
    result = DayOperationResult(chapter_id=chapter_id, date=day)

    for slot in _day_slots(db, chapter_id, day):
        slot.is_available = False
        slot.is_disabled = True
        result.affected += 1

    db.flush()
    logger.info(f"Chapter {chapter_id}: disabled {result.affected} slots on {day}")
    return result


def enable_day(db: Session, chapter_id: int, day: date) -> DayOperationResult:
    """Mark the day's slots available, except those held by a reservation."""
    _require_chapter(db, chapter_id)
    result = DayOperationResult(chapter_id=chapter_id, date=day)

    for slot in _day_slots(db, chapter_id, day):
        if slot.is_booked:
            # held slots stay unavailable, only the admin flag is lifted
            slot.is_disabled = False
            result.skipped_slot_ids.append(slot.id)
            continue
        slot.is_available = True
        slot.is_disabled = False
        result.affected += 1

    db.flush()
    logger.info(
        f"Chapter {chapter_id}: enabled {result.affected} slots on {day}, "
        f"skipped {len(result.skipped_slot_ids)} reserved"
    )
    return result


# ── Helpers ──────────────────────────────────────────────────────────────


def _require_chapter(db: Session, chapter_id: int) -> Chapters:
    chapter = db.get(Chapters, chapter_id)
    if not chapter:
        raise NotFound(f"Chapter {chapter_id} not found")
    return chapter


def _day_slots(db: Session, chapter_id: int, day: date) -> list[TimeSlots]:
    return (
        db.query(TimeSlots)
        .options(selectinload(TimeSlots.reservations))
        .filter(TimeSlots.chapter_id == chapter_id, TimeSlots.date == day)
        .order_by(TimeSlots.start_time)
        .with_for_update()
        .all()
    )


def _delete_unheld(
    db: Session,
    chapter_id: int,
    slots: list[TimeSlots],
    day: date | None,
) -> DayOperationResult:
    result = DayOperationResult(chapter_id=chapter_id, date=day)
    for slot in slots:
        if slot.is_booked:
            result.skipped_slot_ids.append(slot.id)
            continue
        # ORM nulls time_slot_id on historical reservations; their snapshot stays
        db.delete(slot)
        result.affected += 1
    db.flush()
    return result

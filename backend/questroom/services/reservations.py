# backend/questroom/services/reservations.py
"""
Reservation Binder.

Links a reservation to exactly one time slot and keeps the slot's
availability in step with the reservation status:

  pending  → approved | declined | deleted
  approved → declined | deleted
  declined → approved | deleted
  deleted  (terminal)

pending/approved hold the slot. Moving to declined/deleted releases it,
declined → approved claims it again. Claims go through a conditional
UPDATE in the caller's transaction, so two admins cannot bind the same
slot. Nothing here commits.
"""

import logging
from dataclasses import dataclass
from datetime import date, datetime, time

from sqlalchemy import or_
from sqlalchemy.orm import Session, joinedload

from ..models import ACTIVE_STATUSES, RESERVATION_STATUSES, Chapters, Reservations, TimeSlots
from .errors import NotFound, SlotUnavailable, ValidationError
from .pricing import resolve_price
from .slots import claim_slot, release_slot

logger = logging.getLogger(__name__)

# Bucket names used by the dashboard, mapped to statuses
SOURCE_ALIASES = {
    "pending": "pending",
    "reservations": "pending",
    "approved": "approved",
    "approvedReservations": "approved",
    "declined": "declined",
    "declinedReservations": "declined",
    "deleted": "deleted",
    "deletedReservations": "deleted",
}

# Legacy grouped view: status → bucket key
BUCKETS = {
    "pending": "reservations",
    "approved": "approvedReservations",
    "declined": "declinedReservations",
    "deleted": "deletedReservations",
}

TRANSITIONS = {
    "pending": {"approved", "declined", "deleted"},
    "approved": {"declined", "deleted"},
    "declined": {"approved", "deleted"},
    "deleted": set(),
}


@dataclass(frozen=True)
class Contact:
    name: str
    email: str
    phone: str


def normalize_status(value: str) -> str:
    status = SOURCE_ALIASES.get(value)
    if status is None:
        raise ValidationError(
            f"Unknown reservation status {value!r}, expected one of {', '.join(RESERVATION_STATUSES)}"
        )
    return status


# ── Create ───────────────────────────────────────────────────────────────


def create_reservation(
    db: Session,
    chapter_id: int,
    time_slot_id: int,
    contact: Contact,
    people: int,
    language: str = "fr",
) -> Reservations:
    """
    Bind a new pending reservation to an available slot of the chapter.

    Raises:
        NotFound: unknown chapter, or slot not belonging to it
        ValidationError: party size outside 1..max_player_number
        SlotUnavailable: slot already held or disabled
    """
    chapter = db.get(Chapters, chapter_id)
    if not chapter:
        raise NotFound(f"Chapter {chapter_id} not found")

    slot = (
        db.query(TimeSlots)
        .filter(TimeSlots.id == time_slot_id)
        .with_for_update()
        .first()
    )
    if not slot or slot.chapter_id != chapter_id:
        raise NotFound(f"Time slot {time_slot_id} not found for chapter {chapter_id}")

    if people < 1 or people > chapter.max_player_number:
        raise ValidationError(
            f"Party size must be between 1 and {chapter.max_player_number}, got {people}"
        )

    if not claim_slot(db, slot.id):
        raise SlotUnavailable(f"Time slot {time_slot_id} is no longer available")

    quote = resolve_price(db, people)

    reservation = Reservations(
        name=contact.name,
        email=contact.email,
        phone=contact.phone,
        people=people,
        language=language,
        scenario_id=chapter.scenario_id,
        chapter_id=chapter.id,
        time_slot_id=slot.id,
        slot_start=slot.start_time,
        slot_end=slot.end_time,
        status="pending",
        price_per_person=quote.price_per_person if quote else None,
        total_price=quote.total_price if quote else None,
        currency=quote.currency if quote else None,
    )
    db.add(reservation)
    db.flush()

    logger.info(
        f"Reservation created: reservation_id={reservation.id}, chapter_id={chapter_id}, "
        f"time_slot_id={slot.id}, people={people}"
    )
    return reservation


# ── Status transitions ───────────────────────────────────────────────────


def get_reservation(db: Session, reservation_id: int, source: str | None = None) -> Reservations:
    """
    Fetch a reservation, optionally only from one status bucket.

    A reservation that is not in `source` is reported as not found: the
    caller's view is stale and must be re-read.
    """
    reservation = (
        db.query(Reservations)
        .options(joinedload(Reservations.time_slot))
        .filter(Reservations.id == reservation_id)
        .first()
    )
    if not reservation:
        raise NotFound(f"Reservation {reservation_id} not found")

    if source is not None:
        bucket = normalize_status(source)
        if reservation.status != bucket:
            raise NotFound(f"Reservation {reservation_id} not found in {bucket}")

    return reservation


def update_reservation_status(
    db: Session,
    source: str,
    reservation_id: int,
    new_status: str,
) -> Reservations:
    reservation = get_reservation(db, reservation_id, source)
    new_status = normalize_status(new_status)
    old_status = reservation.status

    if new_status not in TRANSITIONS[old_status]:
        raise ValidationError(f"Cannot move reservation from {old_status} to {new_status}")

    was_holding = old_status in ACTIVE_STATUSES
    will_hold = new_status in ACTIVE_STATUSES

    if will_hold and not was_holding:
        if reservation.time_slot_id is None or not claim_slot(db, reservation.time_slot_id):
            raise SlotUnavailable(
                f"Time slot of reservation {reservation_id} is no longer available"
            )

    reservation.status = new_status

    if was_holding and not will_hold:
        released = release_slot(db, reservation.time_slot, reservation.id)
        logger.debug(f"Reservation {reservation_id}: slot released={released}")

    db.flush()
    logger.info(f"Reservation {reservation_id}: {old_status} → {new_status}")
    return reservation


def delete_reservation(db: Session, source: str, reservation_id: int) -> Reservations:
    """Soft delete: move to the deleted bucket and release the slot."""
    return update_reservation_status(db, source, reservation_id, "deleted")


# ── Listing ──────────────────────────────────────────────────────────────


def list_reservations(
    db: Session,
    status: str | None = None,
    on_date: date | None = None,
    language: str | None = None,
    search: str | None = None,
    chapter_id: int | None = None,
) -> list[Reservations]:
    query = db.query(Reservations)

    if status is not None:
        query = query.filter(Reservations.status == normalize_status(status))
    if chapter_id is not None:
        query = query.filter(Reservations.chapter_id == chapter_id)
    if on_date is not None:
        query = query.filter(
            Reservations.slot_start >= datetime.combine(on_date, time.min),
            Reservations.slot_start <= datetime.combine(on_date, time.max),
        )
    if language:
        query = query.filter(Reservations.language.ilike(language))
    if search:
        pattern = f"%{search}%"
        query = query.filter(
            or_(Reservations.name.ilike(pattern), Reservations.email.ilike(pattern))
        )

    return query.order_by(Reservations.created_at.desc(), Reservations.id.desc()).all()


def group_by_bucket(reservations: list[Reservations]) -> dict[str, list[Reservations]]:
    """Split reservations into the dashboard's four buckets."""
    grouped: dict[str, list[Reservations]] = {bucket: [] for bucket in BUCKETS.values()}
    for reservation in reservations:
        grouped[BUCKETS[reservation.status]].append(reservation)
    return grouped

# backend/questroom/routers/reservations.py
# Status is a single column; {source} in paths names the bucket the
# dashboard saw the reservation in (pending / approved / declined / deleted,
# or the legacy collection names).

import logging
from datetime import date
from typing import Optional

from fastapi import APIRouter, Depends, Query, status
from sqlalchemy.orm import Session

from ..database import get_db
from ..schemas.reservations import (
    ReservationBuckets,
    ReservationCreate,
    ReservationRead,
    ReservationStatusUpdate,
)
from ..services.events import (
    RESERVATION_CREATED,
    RESERVATION_STATUS_CHANGED,
    emit_event,
    reservation_payload,
)
from ..services.reservations import (
    Contact,
    create_reservation,
    delete_reservation,
    get_reservation,
    group_by_bucket,
    list_reservations,
    update_reservation_status,
)

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/reservations", tags=["reservations"])


@router.get("/", response_model=list[ReservationRead])
def list_reservations_endpoint(
    status_filter: Optional[str] = Query(None, alias="status"),
    target_date: Optional[date] = Query(None, alias="date"),
    language: Optional[str] = None,
    search: Optional[str] = None,
    chapter_id: Optional[int] = Query(None, alias="chapterId"),
    db: Session = Depends(get_db),
):
    return list_reservations(
        db,
        status=status_filter,
        on_date=target_date,
        language=language,
        search=search,
        chapter_id=chapter_id,
    )


@router.get("/grouped", response_model=ReservationBuckets)
def list_reservations_grouped(db: Session = Depends(get_db)):
    """All reservations split into the dashboard's four collections."""
    grouped = group_by_bucket(list_reservations(db))
    return ReservationBuckets.model_validate({
        bucket: [ReservationRead.model_validate(r) for r in items]
        for bucket, items in grouped.items()
    })


@router.get("/{id}", response_model=ReservationRead)
def get_reservation_endpoint(id: int, db: Session = Depends(get_db)):
    return get_reservation(db, id)


@router.post("/", response_model=ReservationRead, status_code=status.HTTP_201_CREATED)
def create_reservation_endpoint(data: ReservationCreate, db: Session = Depends(get_db)):
    reservation = create_reservation(
        db,
        chapter_id=data.chapter_id,
        time_slot_id=data.time_slot_id,
        contact=Contact(name=data.name, email=data.email, phone=data.phone),
        people=data.people,
        language=data.language,
    )
    db.commit()
    db.refresh(reservation)

    emit_event(RESERVATION_CREATED, reservation_payload(reservation))
    return reservation


@router.put("/{source}/{id}/status", response_model=ReservationRead)
def update_reservation_status_endpoint(
    source: str,
    id: int,
    data: ReservationStatusUpdate,
    db: Session = Depends(get_db),
):
    reservation = update_reservation_status(db, source, id, data.status)
    db.commit()
    db.refresh(reservation)

    emit_event(RESERVATION_STATUS_CHANGED, reservation_payload(reservation))
    return reservation


@router.delete("/{source}/{id}", response_model=ReservationRead)
def delete_reservation_endpoint(source: str, id: int, db: Session = Depends(get_db)):
    """Soft delete: the reservation moves to the deleted bucket."""
    reservation = delete_reservation(db, source, id)
    db.commit()
    db.refresh(reservation)

    emit_event(RESERVATION_STATUS_CHANGED, reservation_payload(reservation))
    return reservation

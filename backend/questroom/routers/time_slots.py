# backend/questroom/routers/time_slots.py
"""
Time slot API endpoints.

Generation, per-slot edits, availability toggles, day-level and
chapter-level bulk state changes, and the multi-chapter bulk façade.
"""

import logging
from datetime import date
from typing import Optional

from fastapi import APIRouter, Body, Depends, Query, status
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from ..database import get_db
from ..schemas.time_slots import (
    AvailabilityUpdate,
    BulkRequest,
    BulkResponse,
    DayOperationResponse,
    DayRequest,
    GenerationResponse,
    SkippedDayRead,
    TimeRange,
    TimeSlotDayCreate,
    TimeSlotGenerate,
    TimeSlotRead,
    TimeSlotUpdate,
)
from ..services.bulk import run_bulk
from ..services.errors import Conflict, ValidationError
from ..services.slots import (
    TimeWindow,
    add_slots_for_day,
    clear_all,
    clear_day,
    delete_slot,
    disable_day,
    enable_day,
    generate_slots,
    get_slot,
    list_scenario_slots,
    list_slots,
    set_availability,
    update_slot,
)

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/timeSlots", tags=["time_slots"])


def _window(data: Optional[TimeRange]) -> Optional[TimeWindow]:
    if data is None:
        return None
    return TimeWindow(start=data.start_time, end=data.end_time)


def _concurrent_write(db: Session, chapter_id: int) -> Conflict:
    """Another request inserted the same slot between our check and commit."""
    db.rollback()
    logger.warning(f"Chapter {chapter_id}: concurrent slot write, generation rolled back")
    return Conflict(f"Time slots of chapter {chapter_id} changed concurrently, re-read and retry")


def _day_response(result) -> DayOperationResponse:
    return DayOperationResponse(
        chapter_id=result.chapter_id,
        day=result.date,
        affected=result.affected,
        skipped_slot_ids=result.skipped_slot_ids,
    )


# ---------------------------------------------------------------------
# Generation
# ---------------------------------------------------------------------

@router.post("/", response_model=GenerationResponse, status_code=status.HTTP_201_CREATED)
def create_time_slots(data: TimeSlotGenerate, db: Session = Depends(get_db)):
    """Generate one slot per day over a date range (idempotent)."""
    try:
        report = generate_slots(
            db,
            chapter_id=data.chapter_id,
            date_from=data.date_range.date_from,
            date_to=data.date_range.date_to,
            weekday_window=_window(data.weekday_time),
            weekend_window=_window(data.weekend_time),
        )
        db.commit()
    except IntegrityError as exc:
        raise _concurrent_write(db, data.chapter_id) from exc

    return GenerationResponse(
        chapter_id=report.chapter_id,
        created=[TimeSlotRead.model_validate(s) for s in report.created],
        skipped=[SkippedDayRead(day=s.date, reason=s.reason) for s in report.skipped],
    )


@router.post("/day", response_model=list[TimeSlotRead], status_code=status.HTTP_201_CREATED)
def create_time_slots_for_day(data: TimeSlotDayCreate, db: Session = Depends(get_db)):
    try:
        slots = add_slots_for_day(
            db,
            chapter_id=data.chapter_id,
            day=data.day,
            windows=[_window(r) for r in data.time_ranges],
        )
        db.commit()
    except IntegrityError as exc:
        raise _concurrent_write(db, data.chapter_id) from exc
    return slots


# ---------------------------------------------------------------------
# Queries & single slot
# ---------------------------------------------------------------------

@router.get("/", response_model=list[TimeSlotRead])
def list_time_slots(
    chapter_id: Optional[int] = Query(None, alias="chapterId"),
    scenario_id: Optional[int] = Query(None, alias="scenarioId"),
    target_date: Optional[date] = Query(None, alias="date"),
    date_to: Optional[date] = Query(None, alias="dateTo"),
    db: Session = Depends(get_db),
):
    if date_to is not None and target_date is None:
        raise ValidationError("dateTo requires date")
    if (chapter_id is None) == (scenario_id is None):
        raise ValidationError("Exactly one of chapterId or scenarioId is required")
    if scenario_id is not None:
        return list_scenario_slots(db, scenario_id, target_date, date_to)
    return list_slots(db, chapter_id, target_date, date_to)


@router.get("/{id}", response_model=TimeSlotRead)
def get_time_slot(id: int, db: Session = Depends(get_db)):
    return get_slot(db, id)


@router.put("/{id}", response_model=TimeSlotRead)
def update_time_slot(id: int, data: TimeSlotUpdate, db: Session = Depends(get_db)):
    window = None
    if data.start_time is not None or data.end_time is not None:
        if data.start_time is None or data.end_time is None:
            raise ValidationError("startTime and endTime must be given together")
        window = TimeWindow(start=data.start_time, end=data.end_time)

    slot = update_slot(db, id, day=data.day, window=window)
    db.commit()
    db.refresh(slot)
    return slot


@router.delete("/{id}", status_code=status.HTTP_204_NO_CONTENT)
def delete_time_slot(id: int, db: Session = Depends(get_db)):
    delete_slot(db, id)
    db.commit()


@router.put("/{id}/toggle-availability", response_model=TimeSlotRead)
def toggle_availability(id: int, data: AvailabilityUpdate, db: Session = Depends(get_db)):
    """Set availability to an explicit value (never a blind flip)."""
    slot = set_availability(db, id, data.is_available)
    db.commit()
    db.refresh(slot)
    return slot


# ---------------------------------------------------------------------
# Day / chapter level
# ---------------------------------------------------------------------

@router.delete("/clear-all/{chapter_id}", response_model=DayOperationResponse)
def clear_all_time_slots(chapter_id: int, db: Session = Depends(get_db)):
    result = clear_all(db, chapter_id)
    db.commit()
    return _day_response(result)


@router.delete("/clear-day/{chapter_id}", response_model=DayOperationResponse)
def clear_day_time_slots(
    chapter_id: int,
    data: DayRequest = Body(...),
    db: Session = Depends(get_db),
):
    result = clear_day(db, chapter_id, data.day)
    db.commit()
    return _day_response(result)


@router.put("/disable-day/{chapter_id}", response_model=DayOperationResponse)
def disable_day_time_slots(chapter_id: int, data: DayRequest, db: Session = Depends(get_db)):
    result = disable_day(db, chapter_id, data.day)
    db.commit()
    return _day_response(result)


@router.put("/enable-day/{chapter_id}", response_model=DayOperationResponse)
def enable_day_time_slots(chapter_id: int, data: DayRequest, db: Session = Depends(get_db)):
    result = enable_day(db, chapter_id, data.day)
    db.commit()
    return _day_response(result)


# ---------------------------------------------------------------------
# Bulk
# ---------------------------------------------------------------------

@router.post("/bulk", response_model=BulkResponse)
def bulk_time_slots(data: BulkRequest, db: Session = Depends(get_db)):
    """
    Apply one operation to several chapters.

    200 when every chapter succeeded, 207 with the per-chapter report
    otherwise.
    """
    report = run_bulk(
        db,
        chapter_ids=data.chapter_ids,
        operation=data.operation,
        day=data.day,
        date_from=data.date_range.date_from if data.date_range else None,
        date_to=data.date_range.date_to if data.date_range else None,
        weekday_window=_window(data.weekday_time),
        weekend_window=_window(data.weekend_time),
    )
    report.raise_for_failures()
    return BulkResponse.from_report(report)

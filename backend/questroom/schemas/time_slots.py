# backend/questroom/schemas/time_slots.py
"""
Pydantic schemas for the time slot API.

Dates are YYYY-MM-DD, times HH:MM, timestamps ISO-8601.
"""

from datetime import date, datetime, time
from typing import Literal, Optional
from pydantic import BaseModel, Field, field_validator

from .base import CAMEL_CONFIG


def _naive(v: time) -> time:
    """Slot times are local wall-clock times."""
    if v.tzinfo is not None:
        raise ValueError("Time must not carry a UTC offset")
    return v


class TimeRange(BaseModel):
    """Time-of-day window, e.g. 09:00–18:00."""
    start_time: time
    end_time: time

    model_config = CAMEL_CONFIG

    @field_validator("start_time", "end_time")
    @classmethod
    def reject_offset(cls, v: time) -> time:
        return _naive(v)


class DateRange(BaseModel):
    date_from: date = Field(alias="from")
    date_to: date = Field(alias="to")

    model_config = CAMEL_CONFIG


class TimeSlotGenerate(BaseModel):
    """One slot per day in range; weekend window defaults to the weekday one."""
    chapter_id: int
    date_range: DateRange
    weekday_time: TimeRange
    weekend_time: Optional[TimeRange] = None

    model_config = CAMEL_CONFIG


class TimeSlotDayCreate(BaseModel):
    """Several explicit slots on one date."""
    chapter_id: int
    day: date = Field(alias="date")
    time_ranges: list[TimeRange] = Field(min_length=1)

    model_config = CAMEL_CONFIG


class TimeSlotUpdate(BaseModel):
    day: Optional[date] = Field(None, alias="date")
    start_time: Optional[time] = None
    end_time: Optional[time] = None

    model_config = CAMEL_CONFIG

    @field_validator("start_time", "end_time")
    @classmethod
    def reject_offset(cls, v: Optional[time]) -> Optional[time]:
        return v if v is None else _naive(v)


class AvailabilityUpdate(BaseModel):
    is_available: bool

    model_config = CAMEL_CONFIG


class DayRequest(BaseModel):
    day: date = Field(alias="date")

    model_config = CAMEL_CONFIG


class TimeSlotRead(BaseModel):
    id: int
    chapter_id: int
    day: date = Field(alias="date")
    start_time: datetime
    end_time: datetime
    is_available: bool
    is_disabled: bool
    is_booked: bool = False

    model_config = CAMEL_CONFIG


class SkippedDayRead(BaseModel):
    day: date = Field(alias="date")
    reason: str

    model_config = CAMEL_CONFIG


class GenerationResponse(BaseModel):
    chapter_id: int
    created: list[TimeSlotRead]
    skipped: list[SkippedDayRead]

    model_config = CAMEL_CONFIG


class DayOperationResponse(BaseModel):
    chapter_id: int
    day: Optional[date] = Field(None, alias="date")
    affected: int
    skipped_slot_ids: list[int] = []

    model_config = CAMEL_CONFIG


# ── Bulk ─────────────────────────────────────────────────────────────────

BulkOperation = Literal["clearAll", "clearDay", "disableDay", "enableDay", "addSlots"]


class BulkRequest(BaseModel):
    chapter_ids: list[int] = Field(min_length=1)
    operation: BulkOperation
    day: Optional[date] = Field(None, alias="date")
    date_range: Optional[DateRange] = None
    weekday_time: Optional[TimeRange] = None
    weekend_time: Optional[TimeRange] = None

    model_config = CAMEL_CONFIG


class ChapterResultRead(BaseModel):
    chapter_id: int
    ok: bool
    affected: int = 0
    skipped: int = 0
    error: Optional[str] = None
    error_type: Optional[str] = None

    model_config = CAMEL_CONFIG


class BulkResponse(BaseModel):
    operation: str
    results: list[ChapterResultRead]
    succeeded: list[int]
    failed: list[int]

    model_config = CAMEL_CONFIG

    @classmethod
    def from_report(cls, report) -> "BulkResponse":
        return cls(
            operation=report.operation,
            results=[ChapterResultRead.model_validate(r) for r in report.results],
            succeeded=report.succeeded,
            failed=report.failed,
        )

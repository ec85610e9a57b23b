# backend/questroom/schemas/reservations.py

import re
from datetime import datetime
from typing import Literal, Optional
from pydantic import BaseModel, Field, field_validator

from .base import CAMEL_CONFIG

ReservationStatus = Literal["pending", "approved", "declined", "deleted"]


class ReservationCreate(BaseModel):
    chapter_id: int
    time_slot_id: int

    name: str = Field(min_length=1)
    email: str
    phone: str = Field(min_length=4)
    people: int = Field(ge=1)
    language: str = "fr"

    model_config = CAMEL_CONFIG

    @field_validator("phone")
    @classmethod
    def normalize_phone(cls, v: str) -> str:
        """Keep digits and a leading +."""
        v = v.strip()
        digits = re.sub(r"\D", "", v)
        if len(digits) < 4:
            raise ValueError("Phone must contain at least 4 digits")
        return ("+" if v.startswith("+") else "") + digits

    @field_validator("email")
    @classmethod
    def validate_email(cls, v: str) -> str:
        v = v.strip().lower()
        if not re.match(r"^[^@\s]+@[^@\s]+\.[^@\s]+$", v):
            raise ValueError("Invalid email address")
        return v

    @field_validator("language")
    @classmethod
    def normalize_language(cls, v: str) -> str:
        return v.strip().lower()


class ReservationStatusUpdate(BaseModel):
    status: ReservationStatus

    model_config = CAMEL_CONFIG


class ReservationRead(BaseModel):
    id: int

    name: str
    email: str
    phone: str
    people: int
    language: str

    scenario_id: Optional[int] = None
    chapter_id: Optional[int] = None
    time_slot_id: Optional[int] = None
    slot_start: datetime
    slot_end: datetime

    status: ReservationStatus

    price_per_person: Optional[float] = None
    total_price: Optional[float] = None
    currency: Optional[str] = None

    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    model_config = CAMEL_CONFIG


class ReservationBuckets(BaseModel):
    """Legacy grouped view: one list per status."""
    reservations: list[ReservationRead]
    approved_reservations: list[ReservationRead]
    declined_reservations: list[ReservationRead]
    deleted_reservations: list[ReservationRead]

    model_config = CAMEL_CONFIG

# backend/questroom/schemas/prices.py

from datetime import datetime
from typing import Optional
from pydantic import BaseModel, Field

from ..config import settings
from .base import CAMEL_CONFIG


class PriceCreate(BaseModel):
    players_count: int = Field(ge=1)
    is_and_above: bool = False
    price_per_person: float = Field(ge=0)
    currency: str = Field(default_factory=lambda: settings.default_currency)

    model_config = CAMEL_CONFIG


class PriceUpdate(BaseModel):
    players_count: Optional[int] = Field(None, ge=1)
    is_and_above: Optional[bool] = None
    price_per_person: Optional[float] = Field(None, ge=0)
    currency: Optional[str] = None

    model_config = CAMEL_CONFIG


class PriceRead(BaseModel):
    id: int
    players_count: int
    is_and_above: bool
    price_per_person: float
    currency: str

    created_at: Optional[datetime] = None

    model_config = CAMEL_CONFIG

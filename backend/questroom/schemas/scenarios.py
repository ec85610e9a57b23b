# backend/questroom/schemas/scenarios.py

from datetime import datetime
from typing import Optional
from pydantic import BaseModel, Field

from .base import CAMEL_CONFIG


class ScenarioCreate(BaseModel):
    name: str = Field(min_length=1)
    category: Optional[str] = None
    description: Optional[str] = None

    model_config = CAMEL_CONFIG


class ScenarioUpdate(BaseModel):
    name: Optional[str] = Field(None, min_length=1)
    category: Optional[str] = None
    description: Optional[str] = None

    model_config = CAMEL_CONFIG


class ScenarioRead(BaseModel):
    id: int
    name: str
    category: Optional[str] = None
    description: Optional[str] = None

    created_at: Optional[datetime] = None

    model_config = CAMEL_CONFIG

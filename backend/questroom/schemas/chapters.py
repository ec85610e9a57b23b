# backend/questroom/schemas/chapters.py

from datetime import datetime
from typing import Optional
from pydantic import BaseModel, Field, model_validator

from .base import CAMEL_CONFIG


class ChapterCreate(BaseModel):
    scenario_id: int
    name: str = Field(min_length=1)

    min_player_number: int = Field(ge=1)
    max_player_number: int = Field(ge=1)
    # dashboard field "time": session length in minutes
    duration_minutes: int = Field(gt=0, alias="time")
    difficulty: int = Field(ge=1)
    percentage_of_success: Optional[float] = Field(None, ge=0, le=100)

    description: Optional[str] = None
    comment: Optional[str] = None
    place: Optional[str] = None
    image: Optional[str] = None
    video: Optional[str] = None

    model_config = CAMEL_CONFIG

    @model_validator(mode="after")
    def check_player_bounds(self):
        if self.min_player_number > self.max_player_number:
            raise ValueError("minPlayerNumber must not exceed maxPlayerNumber")
        return self


class ChapterUpdate(BaseModel):
    scenario_id: Optional[int] = None
    name: Optional[str] = Field(None, min_length=1)

    min_player_number: Optional[int] = Field(None, ge=1)
    max_player_number: Optional[int] = Field(None, ge=1)
    duration_minutes: Optional[int] = Field(None, gt=0, alias="time")
    difficulty: Optional[int] = Field(None, ge=1)
    percentage_of_success: Optional[float] = Field(None, ge=0, le=100)

    description: Optional[str] = None
    comment: Optional[str] = None
    place: Optional[str] = None
    image: Optional[str] = None
    video: Optional[str] = None

    model_config = CAMEL_CONFIG


class ChapterRead(BaseModel):
    id: int
    scenario_id: int
    name: str

    min_player_number: int
    max_player_number: int
    duration_minutes: int = Field(alias="time")
    difficulty: int
    percentage_of_success: Optional[float] = None

    description: Optional[str] = None
    comment: Optional[str] = None
    place: Optional[str] = None
    image: Optional[str] = None
    video: Optional[str] = None

    created_at: Optional[datetime] = None

    model_config = CAMEL_CONFIG

# backend/questroom/routers/chapters.py
# DELETE = hard, cascades to time slots; blocked while a pending/approved
# reservation references the chapter

import logging

from fastapi import APIRouter, Depends, HTTPException, status
from sqlalchemy.orm import Session

from ..database import get_db
from ..models import (
    ACTIVE_STATUSES,
    Chapters as DBChapters,
    Reservations as DBReservations,
    Scenarios as DBScenarios,
)
from ..schemas.chapters import (
    ChapterCreate,
    ChapterRead,
    ChapterUpdate,
)
from ..services.errors import Conflict, ValidationError

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/chapters", tags=["chapters"])


@router.get("/", response_model=list[ChapterRead])
def list_chapters(db: Session = Depends(get_db)):
    return db.query(DBChapters).order_by(DBChapters.id).all()


@router.get("/{id}", response_model=ChapterRead)
def get_chapter(id: int, db: Session = Depends(get_db)):
    obj = db.get(DBChapters, id)
    if not obj:
        raise HTTPException(status_code=404, detail="Not found")
    return obj


@router.post("/", response_model=ChapterRead, status_code=status.HTTP_201_CREATED)
def create_chapter(data: ChapterCreate, db: Session = Depends(get_db)):
    if not db.get(DBScenarios, data.scenario_id):
        raise ValidationError(f"Scenario {data.scenario_id} does not exist")

    obj = DBChapters(**data.model_dump())
    db.add(obj)
    db.commit()
    db.refresh(obj)
    return obj


@router.put("/{id}", response_model=ChapterRead)
def update_chapter(id: int, data: ChapterUpdate, db: Session = Depends(get_db)):
    obj = db.get(DBChapters, id)
    if not obj:
        raise HTTPException(status_code=404, detail="Not found")

    changes = data.model_dump(exclude_unset=True)
    if "scenario_id" in changes and not db.get(DBScenarios, changes["scenario_id"]):
        raise ValidationError(f"Scenario {changes['scenario_id']} does not exist")

    for field, value in changes.items():
        setattr(obj, field, value)

    if obj.min_player_number > obj.max_player_number:
        raise ValidationError("minPlayerNumber must not exceed maxPlayerNumber")

    db.commit()
    db.refresh(obj)
    return obj


@router.delete("/{id}", status_code=status.HTTP_204_NO_CONTENT)
def delete_chapter(id: int, db: Session = Depends(get_db)):
    obj = db.get(DBChapters, id)
    if not obj:
        raise HTTPException(status_code=404, detail="Not found")

    active = (
        db.query(DBReservations)
        .filter(
            DBReservations.chapter_id == id,
            DBReservations.status.in_(ACTIVE_STATUSES),
        )
        .count()
    )
    if active:
        raise Conflict(f"Chapter {id} has {active} active reservation(s)")

    db.delete(obj)
    db.commit()
    logger.info(f"Chapter {id} deleted with its time slots")

# backend/questroom/routers/scenarios.py
# DELETE = hard, blocked while chapters reference the scenario

from fastapi import APIRouter, Depends, HTTPException, status
from sqlalchemy.orm import Session

from ..database import get_db
from ..models import Chapters as DBChapters, Scenarios as DBScenarios
from ..schemas.scenarios import (
    ScenarioCreate,
    ScenarioRead,
    ScenarioUpdate,
)
from ..services.errors import Conflict

router = APIRouter(prefix="/scenarios", tags=["scenarios"])


@router.get("/", response_model=list[ScenarioRead])
def list_scenarios(db: Session = Depends(get_db)):
    return db.query(DBScenarios).order_by(DBScenarios.id).all()


@router.get("/{id}", response_model=ScenarioRead)
def get_scenario(id: int, db: Session = Depends(get_db)):
    obj = db.get(DBScenarios, id)
    if not obj:
        raise HTTPException(status_code=404, detail="Not found")
    return obj


@router.post("/", response_model=ScenarioRead, status_code=status.HTTP_201_CREATED)
def create_scenario(data: ScenarioCreate, db: Session = Depends(get_db)):
    obj = DBScenarios(**data.model_dump())
    db.add(obj)
    db.commit()
    db.refresh(obj)
    return obj


@router.put("/{id}", response_model=ScenarioRead)
def update_scenario(id: int, data: ScenarioUpdate, db: Session = Depends(get_db)):
    obj = db.get(DBScenarios, id)
    if not obj:
        raise HTTPException(status_code=404, detail="Not found")

    for field, value in data.model_dump(exclude_unset=True).items():
        setattr(obj, field, value)

    db.commit()
    db.refresh(obj)
    return obj


@router.delete("/{id}", status_code=status.HTTP_204_NO_CONTENT)
def delete_scenario(id: int, db: Session = Depends(get_db)):
    obj = db.get(DBScenarios, id)
    if not obj:
        raise HTTPException(status_code=404, detail="Not found")

    chapters = db.query(DBChapters).filter(DBChapters.scenario_id == id).count()
    if chapters:
        raise Conflict(f"Scenario {id} still has {chapters} chapter(s)")

    db.delete(obj)
    db.commit()

# backend/questroom/routers/prices.py
# DELETE = hard

from fastapi import APIRouter, Depends, HTTPException, status
from sqlalchemy.orm import Session

from ..database import get_db
from ..models import Prices as DBPrices
from ..schemas.prices import (
    PriceCreate,
    PriceRead,
    PriceUpdate,
)

router = APIRouter(prefix="/prices", tags=["prices"])


@router.get("/", response_model=list[PriceRead])
def list_prices(db: Session = Depends(get_db)):
    return db.query(DBPrices).order_by(DBPrices.players_count, DBPrices.id).all()


@router.get("/{id}", response_model=PriceRead)
def get_price(id: int, db: Session = Depends(get_db)):
    obj = db.get(DBPrices, id)
    if not obj:
        raise HTTPException(status_code=404, detail="Not found")
    return obj


@router.post("/", response_model=PriceRead, status_code=status.HTTP_201_CREATED)
def create_price(data: PriceCreate, db: Session = Depends(get_db)):
    obj = DBPrices(**data.model_dump())
    db.add(obj)
    db.commit()
    db.refresh(obj)
    return obj


@router.put("/{id}", response_model=PriceRead)
def update_price(id: int, data: PriceUpdate, db: Session = Depends(get_db)):
    obj = db.get(DBPrices, id)
    if not obj:
        raise HTTPException(status_code=404, detail="Not found")

    for field, value in data.model_dump(exclude_unset=True).items():
        setattr(obj, field, value)

    db.commit()
    db.refresh(obj)
    return obj


@router.delete("/{id}", status_code=status.HTTP_204_NO_CONTENT)
def delete_price(id: int, db: Session = Depends(get_db)):
    obj = db.get(DBPrices, id)
    if not obj:
        raise HTTPException(status_code=404, detail="Not found")
    db.delete(obj)
    db.commit()

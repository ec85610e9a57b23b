# backend/questroom/services/pricing.py
"""
Price resolution for a party size.

Rules are keyed by players_count; `is_and_above` makes a rule apply to
every larger party too. An exact match wins over an "and above" rule,
and among "and above" rules the highest threshold wins.
"""

from dataclasses import dataclass

from sqlalchemy.orm import Session

from ..models import Prices


@dataclass(frozen=True)
class PriceQuote:
    price_per_person: float
    total_price: float
    currency: str


def resolve_price(db: Session, people: int) -> PriceQuote | None:
    exact = (
        db.query(Prices)
        .filter(Prices.players_count == people)
        .order_by(Prices.is_and_above.asc(), Prices.id.asc())
        .first()
    )
    rule = exact or (
        db.query(Prices)
        .filter(Prices.is_and_above.is_(True), Prices.players_count <= people)
        .order_by(Prices.players_count.desc(), Prices.id.asc())
        .first()
    )
    if rule is None:
        return None

    return PriceQuote(
        price_per_person=rule.price_per_person,
        total_price=round(rule.price_per_person * people, 2),
        currency=rule.currency,
    )

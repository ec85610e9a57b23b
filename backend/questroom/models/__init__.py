from .entities import (
    ACTIVE_STATUSES,
    RESERVATION_STATUSES,
    Base,
    Chapters,
    Prices,
    Reservations,
    Scenarios,
    TimeSlots,
)

__all__ = [
    "ACTIVE_STATUSES",
    "RESERVATION_STATUSES",
    "Base",
    "Chapters",
    "Prices",
    "Reservations",
    "Scenarios",
    "TimeSlots",
]

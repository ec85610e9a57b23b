# backend/questroom/services/slots/config.py
"""
Slot engine configuration and calendar helpers.
"""

from dataclasses import dataclass
from datetime import date, datetime, time, timedelta
from functools import lru_cache

from ...config import settings
from ..errors import ValidationError

# date.weekday(): 0 = Monday, 6 = Sunday
WEEKEND_DAYS = (5, 6)


@dataclass(frozen=True)
class SlotConfig:
    """
    Configuration for slot generation.

    Attributes:
        max_generation_days: Longest date range accepted in one request
    """
    max_generation_days: int = 366

    def __post_init__(self):
        if self.max_generation_days < 1:
            raise ValueError(f"max_generation_days must be positive, got {self.max_generation_days}")


@lru_cache
def get_slot_config() -> SlotConfig:
    """Get slot configuration (singleton, read from settings)."""
    return SlotConfig(max_generation_days=settings.max_generation_days)


@dataclass(frozen=True)
class TimeWindow:
    """Daily time-of-day interval, e.g. 09:00–18:00."""
    start: time
    end: time

    def __post_init__(self):
        # slots are stored as naive local wall-clock times
        if self.start.tzinfo is not None or self.end.tzinfo is not None:
            raise ValidationError(f"Window times must not carry a UTC offset, got {self.start}-{self.end}")
        if self.start >= self.end:
            raise ValidationError(
                f"Window start {format_time(self.start)} must be before end {format_time(self.end)}"
            )

    def on(self, day: date) -> tuple[datetime, datetime]:
        """Combine the window with a calendar date."""
        return datetime.combine(day, self.start), datetime.combine(day, self.end)

    def __str__(self) -> str:
        return f"{format_time(self.start)}-{format_time(self.end)}"


def format_time(value: time) -> str:
    return f"{value.hour:02d}:{value.minute:02d}"


def is_weekend(day: date) -> bool:
    return day.weekday() in WEEKEND_DAYS


def iter_dates(date_from: date, date_to: date):
    """Yield every date in [date_from, date_to] inclusive."""
    current = date_from
    while current <= date_to:
        yield current
        current += timedelta(days=1)


def overlaps(
    start_a: datetime,
    end_a: datetime,
    start_b: datetime,
    end_b: datetime,
) -> bool:
    """Half-open interval overlap: touching intervals do not overlap."""
    return start_a < end_b and start_b < end_a

# backend/questroom/services/slots/__init__.py
"""
Time-slot availability engine.

Generator: date range + daily windows → per-day slots
Store: queries, availability flags, day/chapter bulk state changes
"""

from .config import SlotConfig, TimeWindow, get_slot_config
from .generator import GenerationReport, SkippedDay, add_slots_for_day, generate_slots
from .store import (
    DayOperationResult,
    claim_slot,
    clear_all,
    clear_day,
    delete_slot,
    disable_day,
    enable_day,
    get_slot,
    list_scenario_slots,
    list_slots,
    release_slot,
    set_availability,
    update_slot,
)

__all__ = [
    "SlotConfig",
    "TimeWindow",
    "get_slot_config",
    "GenerationReport",
    "SkippedDay",
    "add_slots_for_day",
    "generate_slots",
    "DayOperationResult",
    "claim_slot",
    "clear_all",
    "clear_day",
    "delete_slot",
    "disable_day",
    "enable_day",
    "get_slot",
    "list_scenario_slots",
    "list_slots",
    "release_slot",
    "set_availability",
    "update_slot",
]

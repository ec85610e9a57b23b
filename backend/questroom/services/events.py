"""
backend/questroom/services/events.py

Event emitter: pushes reservation events to a Redis list for the
notification service (socket push to the dashboard). Delivery itself
is not handled here.
"""

import json
import time
import logging

from ..config import settings
from ..redis_client import redis_client

logger = logging.getLogger(__name__)

RESERVATION_CREATED = "reservation_created"
RESERVATION_STATUS_CHANGED = "reservation_status_changed"


def emit_event(event_type: str, payload: dict) -> None:
    """
    Emit an event (instant delivery).

    Pushed to the Redis list `settings.events_queue`. Failures are logged,
    never raised: the reservation is already committed.
    """
    if not settings.events_enabled:
        return

    event = {
        "type": event_type,
        **payload,
        "ts": int(time.time()),
    }
    try:
        redis_client.rpush(settings.events_queue, json.dumps(event, default=str))
        logger.info(f"Event emitted: {event_type} → {settings.events_queue}")
    except Exception as e:
        logger.error(f"Failed to emit event {event_type}: {e}")


def reservation_payload(reservation) -> dict:
    return {
        "reservation_id": reservation.id,
        "chapter_id": reservation.chapter_id,
        "scenario_id": reservation.scenario_id,
        "time_slot_id": reservation.time_slot_id,
        "status": reservation.status,
        "name": reservation.name,
        "people": reservation.people,
        "slot_start": reservation.slot_start.isoformat(),
    }

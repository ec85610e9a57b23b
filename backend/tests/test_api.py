import json
from datetime import datetime, time

import pytest

from questroom.models import TimeSlots


@pytest.fixture
def chapter_id(client):
    scenario = client.post("/scenarios/", json={"name": "The Asylum", "category": "horror"})
    assert scenario.status_code == 201
    chapter = client.post("/chapters/", json={
        "scenarioId": scenario.json()["id"],
        "name": "Ward 13",
        "minPlayerNumber": 2,
        "maxPlayerNumber": 6,
        "time": 60,
        "difficulty": 4,
        "percentageOfSuccess": 35,
    })
    assert chapter.status_code == 201
    return chapter.json()["id"]


@pytest.fixture
def week_slots(client, chapter_id):
    resp = client.post("/timeSlots/", json={
        "chapterId": chapter_id,
        "dateRange": {"from": "2025-01-06", "to": "2025-01-12"},
        "weekdayTime": {"startTime": "09:00", "endTime": "18:00"},
        "weekendTime": {"startTime": "10:00", "endTime": "16:00"},
    })
    assert resp.status_code == 201
    return resp.json()["created"]


def _reserve(client, chapter_id, slot_id, **overrides):
    body = {
        "chapterId": chapter_id,
        "timeSlotId": slot_id,
        "name": "Amira",
        "email": "Amira@Example.com",
        "phone": "+216 12 345 678",
        "people": 3,
        "language": "FR",
    }
    body.update(overrides)
    return client.post("/reservations/", json=body)


def test_chapter_uses_dashboard_field_names(client, chapter_id):
    body = client.get(f"/chapters/{chapter_id}").json()

    assert body["time"] == 60
    assert body["maxPlayerNumber"] == 6
    assert "duration_minutes" not in body


def test_chapter_player_bounds_validated(client, chapter_id):
    scenario_id = client.get(f"/chapters/{chapter_id}").json()["scenarioId"]
    resp = client.post("/chapters/", json={
        "scenarioId": scenario_id, "name": "Bad", "minPlayerNumber": 5,
        "maxPlayerNumber": 2, "time": 60, "difficulty": 1,
    })

    assert resp.status_code == 422


def test_generate_week(client, week_slots):
    assert len(week_slots) == 7
    weekend = [s for s in week_slots if s["date"] in ("2025-01-11", "2025-01-12")]
    assert {s["startTime"] for s in weekend} == {"2025-01-11T10:00:00", "2025-01-12T10:00:00"}
    assert all(s["isAvailable"] and not s["isBooked"] for s in week_slots)


def test_generate_twice_skips_existing(client, chapter_id, week_slots):
    resp = client.post("/timeSlots/", json={
        "chapterId": chapter_id,
        "dateRange": {"from": "2025-01-06", "to": "2025-01-12"},
        "weekdayTime": {"startTime": "09:00", "endTime": "18:00"},
        "weekendTime": {"startTime": "10:00", "endTime": "16:00"},
    })

    assert resp.status_code == 201
    assert resp.json()["created"] == []
    assert len(resp.json()["skipped"]) == 7


def test_generate_with_inverted_window(client, chapter_id):
    resp = client.post("/timeSlots/", json={
        "chapterId": chapter_id,
        "dateRange": {"from": "2025-01-06", "to": "2025-01-12"},
        "weekdayTime": {"startTime": "18:00", "endTime": "09:00"},
    })

    assert resp.status_code == 422
    assert "before end" in resp.json()["detail"]


def test_generate_for_unknown_chapter(client):
    resp = client.post("/timeSlots/", json={
        "chapterId": 404,
        "dateRange": {"from": "2025-01-06", "to": "2025-01-06"},
        "weekdayTime": {"startTime": "09:00", "endTime": "18:00"},
    })

    assert resp.status_code == 422


@pytest.mark.parametrize("window", [
    {"startTime": "09:00:00+01:00", "endTime": "18:00"},
    {"startTime": "09:00:00+01:00", "endTime": "18:00:00+01:00"},
])
def test_generate_rejects_times_with_offset(client, chapter_id, window):
    body = {
        "chapterId": chapter_id,
        "dateRange": {"from": "2025-01-06", "to": "2025-01-07"},
        "weekdayTime": window,
    }

    for _ in range(2):
        assert client.post("/timeSlots/", json=body).status_code == 422

    assert client.get("/timeSlots/", params={"chapterId": chapter_id}).json() == []


def test_update_slot_rejects_time_with_offset(client, week_slots):
    slot_id = week_slots[0]["id"]

    resp = client.put(f"/timeSlots/{slot_id}", json={"startTime": "08:00Z", "endTime": "12:00"})

    assert resp.status_code == 422
    assert client.get(f"/timeSlots/{slot_id}").json()["startTime"] == "2025-01-06T09:00:00"


def test_generation_race_is_reported_as_conflict(client, chapter_id, monkeypatch):
    def racing_generate(db, chapter_id, date_from, **kwargs):
        # both inserts pass the existence check, the unique key catches the second
        start = datetime.combine(date_from, time(9))
        end = datetime.combine(date_from, time(18))
        db.add_all([
            TimeSlots(chapter_id=chapter_id, date=date_from, start_time=start, end_time=end)
            for _ in range(2)
        ])
        db.flush()

    monkeypatch.setattr("questroom.routers.time_slots.generate_slots", racing_generate)

    resp = client.post("/timeSlots/", json={
        "chapterId": chapter_id,
        "dateRange": {"from": "2025-01-06", "to": "2025-01-06"},
        "weekdayTime": {"startTime": "09:00", "endTime": "18:00"},
    })

    assert resp.status_code == 409
    assert "retry" in resp.json()["detail"]
    assert client.get("/timeSlots/", params={"chapterId": chapter_id}).json() == []


def test_list_slots_by_date(client, chapter_id, week_slots):
    resp = client.get("/timeSlots/", params={"chapterId": chapter_id, "date": "2025-01-08"})

    assert resp.status_code == 200
    assert [s["date"] for s in resp.json()] == ["2025-01-08"]

    resp = client.get("/timeSlots/", params={"chapterId": chapter_id, "date": "2025-01-06", "dateTo": "2025-01-07"})
    assert len(resp.json()) == 2


def test_list_slots_by_scenario(client, chapter_id, week_slots):
    scenario_id = client.get(f"/chapters/{chapter_id}").json()["scenarioId"]
    sibling = client.post("/chapters/", json={
        "scenarioId": scenario_id, "name": "Ward 14", "minPlayerNumber": 2,
        "maxPlayerNumber": 4, "time": 45, "difficulty": 2,
    }).json()["id"]
    client.post("/timeSlots/day", json={
        "chapterId": sibling,
        "date": "2025-01-08",
        "timeRanges": [{"startTime": "19:00", "endTime": "20:00"}],
    })

    resp = client.get("/timeSlots/", params={"scenarioId": scenario_id, "date": "2025-01-08"})

    assert resp.status_code == 200
    assert [(s["chapterId"], s["startTime"]) for s in resp.json()] == [
        (chapter_id, "2025-01-08T09:00:00"),
        (sibling, "2025-01-08T19:00:00"),
    ]
    assert client.get("/timeSlots/", params={"scenarioId": 999}).status_code == 404
    assert client.get("/timeSlots/").status_code == 422
    assert client.get("/timeSlots/", params={"chapterId": chapter_id, "scenarioId": scenario_id}).status_code == 422


def test_create_slots_for_day(client, chapter_id):
    resp = client.post("/timeSlots/day", json={
        "chapterId": chapter_id,
        "date": "2025-03-01",
        "timeRanges": [
            {"startTime": "10:00", "endTime": "11:00"},
            {"startTime": "11:30", "endTime": "12:30"},
        ],
    })

    assert resp.status_code == 201
    assert [s["startTime"] for s in resp.json()] == ["2025-03-01T10:00:00", "2025-03-01T11:30:00"]


def test_update_and_delete_slot(client, week_slots):
    slot_id = week_slots[0]["id"]

    resp = client.put(f"/timeSlots/{slot_id}", json={"startTime": "08:00", "endTime": "12:00"})
    assert resp.status_code == 200
    assert resp.json()["endTime"] == "2025-01-06T12:00:00"

    assert client.delete(f"/timeSlots/{slot_id}").status_code == 204
    assert client.get(f"/timeSlots/{slot_id}").status_code == 404


def test_toggle_availability(client, week_slots):
    slot_id = week_slots[0]["id"]

    resp = client.put(f"/timeSlots/{slot_id}/toggle-availability", json={"isAvailable": False})
    assert resp.json()["isAvailable"] is False
    assert resp.json()["isDisabled"] is True

    resp = client.put(f"/timeSlots/{slot_id}/toggle-availability", json={"isAvailable": True})
    assert resp.json()["isAvailable"] is True


def test_reservation_lifecycle(client, chapter_id, week_slots, event_queue):
    slot_id = week_slots[0]["id"]

    resp = _reserve(client, chapter_id, slot_id)
    assert resp.status_code == 201
    reservation = resp.json()
    assert reservation["status"] == "pending"
    assert reservation["email"] == "amira@example.com"
    assert reservation["phone"] == "+21612345678"
    assert reservation["language"] == "fr"
    assert client.get(f"/timeSlots/{slot_id}").json()["isAvailable"] is False

    resp = client.put(f"/reservations/pending/{reservation['id']}/status", json={"status": "declined"})
    assert resp.status_code == 200
    assert resp.json()["status"] == "declined"
    assert client.get(f"/timeSlots/{slot_id}").json()["isAvailable"] is True

    events = [json.loads(e) for e in event_queue.lists["events:p2p"]]
    assert [e["type"] for e in events] == ["reservation_created", "reservation_status_changed"]
    assert events[0]["reservation_id"] == reservation["id"]


def test_reserving_taken_slot_conflicts(client, chapter_id, week_slots):
    slot_id = week_slots[0]["id"]
    assert _reserve(client, chapter_id, slot_id).status_code == 201

    resp = _reserve(client, chapter_id, slot_id, name="Karim")

    assert resp.status_code == 409
    assert len(client.get("/reservations/").json()) == 1


def test_reservation_rejects_bad_contact(client, chapter_id, week_slots):
    resp = _reserve(client, chapter_id, week_slots[0]["id"], email="not-an-email")

    assert resp.status_code == 422


def test_delete_reservation_is_soft(client, chapter_id, week_slots):
    slot_id = week_slots[0]["id"]
    reservation_id = _reserve(client, chapter_id, slot_id).json()["id"]

    resp = client.delete(f"/reservations/reservations/{reservation_id}")

    assert resp.status_code == 200
    assert resp.json()["status"] == "deleted"
    assert client.get(f"/reservations/{reservation_id}").json()["status"] == "deleted"
    assert client.get(f"/timeSlots/{slot_id}").json()["isAvailable"] is True


def test_status_update_from_wrong_bucket(client, chapter_id, week_slots):
    reservation_id = _reserve(client, chapter_id, week_slots[0]["id"]).json()["id"]

    resp = client.put(f"/reservations/approved/{reservation_id}/status", json={"status": "declined"})

    assert resp.status_code == 404


def test_grouped_reservations(client, chapter_id, week_slots):
    first = _reserve(client, chapter_id, week_slots[0]["id"]).json()["id"]
    second = _reserve(client, chapter_id, week_slots[1]["id"]).json()["id"]
    client.put(f"/reservations/pending/{second}/status", json={"status": "approved"})

    body = client.get("/reservations/grouped").json()

    assert [r["id"] for r in body["reservations"]] == [first]
    assert [r["id"] for r in body["approvedReservations"]] == [second]
    assert body["declinedReservations"] == []
    assert body["deletedReservations"] == []

    approved = client.get("/reservations/", params={"status": "approved"}).json()
    assert [r["id"] for r in approved] == [second]


def test_day_endpoints(client, chapter_id, week_slots):
    reserved_id = week_slots[0]["id"]
    _reserve(client, chapter_id, reserved_id)

    resp = client.put(f"/timeSlots/disable-day/{chapter_id}", json={"date": "2025-01-06"})
    assert resp.json()["affected"] == 1

    resp = client.put(f"/timeSlots/enable-day/{chapter_id}", json={"date": "2025-01-06"})
    assert resp.json()["affected"] == 0
    assert resp.json()["skippedSlotIds"] == [reserved_id]

    resp = client.request("DELETE", f"/timeSlots/clear-day/{chapter_id}", json={"date": "2025-01-07"})
    assert resp.status_code == 200
    assert resp.json()["affected"] == 1

    resp = client.delete(f"/timeSlots/clear-all/{chapter_id}")
    assert resp.json()["affected"] == 5
    assert resp.json()["skippedSlotIds"] == [reserved_id]


def test_bulk_all_ok(client, chapter_id, week_slots):
    resp = client.post("/timeSlots/bulk", json={
        "chapterIds": [chapter_id],
        "operation": "disableDay",
        "date": "2025-01-06",
    })

    assert resp.status_code == 200
    assert resp.json()["succeeded"] == [chapter_id]


def test_bulk_partial_failure(client, chapter_id, week_slots):
    resp = client.post("/timeSlots/bulk", json={
        "chapterIds": [chapter_id, 9999],
        "operation": "clearAll",
    })

    assert resp.status_code == 207
    report = resp.json()["report"]
    assert report["succeeded"] == [chapter_id]
    assert report["failed"] == [9999]
    assert report["results"][1]["errorType"] == "NotFound"
    assert client.get("/timeSlots/", params={"chapterId": chapter_id}).json() == []


def test_bulk_add_slots(client, chapter_id):
    resp = client.post("/timeSlots/bulk", json={
        "chapterIds": [chapter_id],
        "operation": "addSlots",
        "dateRange": {"from": "2025-01-06", "to": "2025-01-08"},
        "weekdayTime": {"startTime": "09:00", "endTime": "18:00"},
    })

    assert resp.status_code == 200
    assert resp.json()["results"][0]["affected"] == 3


def test_chapter_delete_blocked_by_active_reservation(client, chapter_id, week_slots):
    reservation_id = _reserve(client, chapter_id, week_slots[0]["id"]).json()["id"]

    assert client.delete(f"/chapters/{chapter_id}").status_code == 409

    client.put(f"/reservations/pending/{reservation_id}/status", json={"status": "declined"})
    assert client.delete(f"/chapters/{chapter_id}").status_code == 204

    reservation = client.get(f"/reservations/{reservation_id}").json()
    assert reservation["chapterId"] is None
    assert reservation["timeSlotId"] is None


def test_scenario_delete_blocked_by_chapters(client, chapter_id):
    scenario_id = client.get(f"/chapters/{chapter_id}").json()["scenarioId"]

    assert client.delete(f"/scenarios/{scenario_id}").status_code == 409


def test_price_crud(client):
    resp = client.post("/prices/", json={"playersCount": 4, "isAndAbove": True, "pricePerPerson": 40})
    assert resp.status_code == 201
    price = resp.json()
    assert price["currency"] == "TND"

    resp = client.put(f"/prices/{price['id']}", json={"pricePerPerson": 38.5})
    assert resp.json()["pricePerPerson"] == 38.5

    assert client.delete(f"/prices/{price['id']}").status_code == 204
    assert client.get("/prices/").json() == []

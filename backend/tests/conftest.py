import os
from datetime import date, time

# Settings are read at import time
os.environ.setdefault("DATABASE_URL", "sqlite://")
os.environ.setdefault("EVENTS_QUEUE", "events:p2p")

import pytest
from fastapi.testclient import TestClient
from sqlalchemy import create_engine, event
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

from questroom.database import enable_sqlite_fk, get_db
from questroom.main import app
from questroom.models import Base, Chapters, Scenarios
from questroom.services.slots import TimeWindow, add_slots_for_day


class RecordingRedis:
    """In-memory stand-in for the event queue."""

    def __init__(self):
        self.lists: dict[str, list[str]] = {}

    def rpush(self, key, value):
        self.lists.setdefault(key, []).append(value)
        return len(self.lists[key])

    def ping(self):
        return True


@pytest.fixture
def engine():
    engine = create_engine(
        "sqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    event.listen(engine, "connect", enable_sqlite_fk)
    Base.metadata.create_all(engine)
    yield engine
    engine.dispose()


@pytest.fixture
def session_factory(engine):
    return sessionmaker(autocommit=False, autoflush=False, bind=engine)


@pytest.fixture
def db(session_factory):
    session = session_factory()
    yield session
    session.close()


@pytest.fixture
def client(session_factory):
    def override_get_db():
        session = session_factory()
        try:
            yield session
        finally:
            session.close()

    app.dependency_overrides[get_db] = override_get_db
    with TestClient(app) as c:
        yield c
    app.dependency_overrides.clear()


@pytest.fixture(autouse=True)
def event_queue(monkeypatch):
    fake = RecordingRedis()
    monkeypatch.setattr("questroom.services.events.redis_client", fake)
    return fake


@pytest.fixture
def make_chapter(db):
    counter = {"n": 0}

    def factory(max_players: int = 6, **kwargs) -> Chapters:
        counter["n"] += 1
        scenario_id = kwargs.pop("scenario_id", None)
        if scenario_id is None:
            scenario = Scenarios(name=f"Scenario {counter['n']}", category="horror")
            db.add(scenario)
            db.flush()
            scenario_id = scenario.id
        chapter = Chapters(
            scenario_id=scenario_id,
            name=kwargs.pop("name", f"Chapter {counter['n']}"),
            min_player_number=kwargs.pop("min_players", 2),
            max_player_number=max_players,
            duration_minutes=kwargs.pop("duration_minutes", 60),
            difficulty=kwargs.pop("difficulty", 3),
            **kwargs,
        )
        db.add(chapter)
        db.commit()
        return chapter

    return factory


@pytest.fixture
def chapter(make_chapter):
    return make_chapter()


@pytest.fixture
def day_slots(db, chapter):
    """Two slots on Tuesday 2025-01-07: 10:00–11:00 and 14:00–15:00."""
    slots = add_slots_for_day(
        db,
        chapter.id,
        date(2025, 1, 7),
        [TimeWindow(time(10), time(11)), TimeWindow(time(14), time(15))],
    )
    db.commit()
    return slots

"""Shared fixtures: a seeded SQLite file per test and a fixed clock."""

from datetime import date, datetime

import pytest
from fastapi.testclient import TestClient
from sqlmodel import Session

from barbershop.core import AvailabilityService
from barbershop.db import init_db, make_engine
from barbershop.models import AdminSettings, Barber
from barbershop.repository import BarbershopRepository

# Seeded hours: Mon 07-12 / 15-21, Wed 07-12 / 15-19
MONDAY = date(2025, 8, 18)
WEDNESDAY = date(2025, 8, 20)
CHRISTMAS = date(2025, 12, 25)


class FixedClock:
    def __init__(self, now: datetime):
        self.now = now

    def __call__(self) -> datetime:
        return self.now


@pytest.fixture
def engine(tmp_path):
    engine = make_engine(f"sqlite:///{tmp_path / 'barbershop.db'}")
    init_db(engine, seed=True)
    yield engine
    engine.dispose()


@pytest.fixture
def session(engine):
    with Session(engine) as session:
        yield session


@pytest.fixture
def add(session):
    """Persist rows and return them with ids filled in."""

    def _add(*rows):
        for row in rows:
            session.add(row)
        session.commit()
        for row in rows:
            session.refresh(row)
        return rows[0] if len(rows) == 1 else rows

    return _add


@pytest.fixture
def configure(session):
    """Update the settings singleton."""

    def _configure(**changes):
        settings = session.get(AdminSettings, 1)
        for key, value in changes.items():
            setattr(settings, key, value)
        session.add(settings)
        session.commit()
        return settings

    return _configure


@pytest.fixture
def barbers(add):
    return add(Barber(name="Luis"), Barber(name="Carlos"))


@pytest.fixture
def clock():
    return FixedClock(datetime(2025, 8, 1, 8, 0))


@pytest.fixture
def repository(engine):
    return BarbershopRepository(engine)


@pytest.fixture
def service(repository, clock):
    return AvailabilityService(repository, clock=clock)


@pytest.fixture
def client(engine, service):
    from barbershop.main import create_app

    app = create_app(engine=engine, availability=service)
    return TestClient(app)

# barbershop/db.py

import logging

from sqlmodel import SQLModel, Session, create_engine, select

from . import config
from .data import DEFAULT_BUSINESS_HOURS, DEFAULT_SERVICES, DEFAULT_SETTINGS
from .models import AdminSettings, BusinessHours, Service

logger = logging.getLogger(__name__)


def make_engine(url: str = config.DATABASE_URL, echo: bool = config.SQL_ECHO):
    connect_args = {}
    if url.startswith("sqlite"):
        connect_args["check_same_thread"] = False  # sessions run in the threadpool
    return create_engine(url, echo=echo, connect_args=connect_args)


# Engine = connection to the database
engine = make_engine()


def init_db(bind=None, seed: bool = config.SEED_DEFAULTS) -> None:
    bind = bind if bind is not None else engine
    SQLModel.metadata.create_all(bind)
    if seed:
        with Session(bind) as session:
            seed_defaults(session)


def seed_defaults(session: Session) -> None:
    """Insert the settings row, weekly hours and services that are missing."""
    if session.get(AdminSettings, 1) is None:
        session.add(AdminSettings(id=1, **DEFAULT_SETTINGS))

    for day, (morning, afternoon) in DEFAULT_BUSINESS_HOURS.items():
        if session.get(BusinessHours, day) is not None:
            continue
        hours = BusinessHours(day_of_week=day, is_open=True)
        if morning:
            hours.morning_start, hours.morning_end = morning
        if afternoon:
            hours.afternoon_start, hours.afternoon_end = afternoon
        session.add(hours)

    existing = set(session.exec(select(Service.name)).all())
    for name, (price, duration) in DEFAULT_SERVICES.items():
        if name not in existing:
            session.add(Service(name=name, price=price, duration=duration))

    session.commit()
    logger.info("Default settings, business hours and services are in place")

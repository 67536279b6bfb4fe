# barbershop/routers/barbers_routes.py

import logging
from datetime import datetime
from typing import List

from fastapi import APIRouter, Depends, HTTPException, Path
from sqlmodel import Session, select

from barbershop.deps import get_or_404, get_session
from barbershop.models import AdminSettings, Barber, BarberSchedule as BarberScheduleModel
from barbershop.schemas import (
    BarberCreate,
    BarberPublic,
    BarberSchedulePublic,
    BarberUpdate,
    WeeklyHours,
)

logger = logging.getLogger(__name__)

router = APIRouter(
    prefix="/barbers",
    tags=["barbers"],
)


@router.post("", response_model=BarberPublic, status_code=201)
def create_barber(
    barber: BarberCreate,
    session: Session = Depends(get_session),
):
    db_barber = Barber(name=barber.name, phone=barber.phone, is_active=barber.is_active)
    session.add(db_barber)
    session.commit()
    session.refresh(db_barber)  # fills db_barber.id

    logger.info("Barber %s (%s) added", db_barber.id, db_barber.name)
    return db_barber


@router.get("", response_model=List[BarberPublic])
def list_barbers(
    active_only: bool = False,
    session: Session = Depends(get_session),
):
    stmt = select(Barber)
    if active_only:
        stmt = stmt.where(Barber.is_active == True)  # noqa: E712
    return session.exec(stmt.order_by(Barber.name)).all()


@router.get("/{barber_id}", response_model=BarberPublic)
def get_barber(
    barber_id: int,
    session: Session = Depends(get_session),
):
    return get_or_404(session, Barber, barber_id, "Barber")


@router.patch("/{barber_id}", response_model=BarberPublic)
def update_barber(
    barber_id: int,
    changes: BarberUpdate,
    session: Session = Depends(get_session),
):
    db_barber = get_or_404(session, Barber, barber_id, "Barber")
    for key, value in changes.model_dump(exclude_unset=True).items():
        setattr(db_barber, key, value)
    db_barber.updated_at = datetime.now()

    session.add(db_barber)
    session.commit()
    session.refresh(db_barber)
    return db_barber


@router.delete("/{barber_id}", status_code=204)
def delete_barber(
    barber_id: int,
    session: Session = Depends(get_session),
):
    db_barber = get_or_404(session, Barber, barber_id, "Barber")

    # 1) Weekly schedule rows go with the barber
    schedules = session.exec(
        select(BarberScheduleModel).where(BarberScheduleModel.barber_id == barber_id)
    ).all()
    for schedule in schedules:
        session.delete(schedule)

    # 2) A deleted barber cannot stay the default
    settings = session.get(AdminSettings, 1)
    if settings is not None and settings.default_barber_id == barber_id:
        settings.default_barber_id = None
        session.add(settings)

    session.delete(db_barber)
    session.commit()
    logger.info("Barber %s and %d schedule rows deleted", barber_id, len(schedules))


@router.put("/{barber_id}/schedule/{day_of_week}", response_model=BarberSchedulePublic)
def set_barber_schedule(
    barber_id: int,
    schedule: WeeklyHours,
    day_of_week: int = Path(ge=0, le=6),
    session: Session = Depends(get_session),
):
    get_or_404(session, Barber, barber_id, "Barber")

    # DB upsert: one row per (barber, day)
    key = {"barber_id": barber_id, "day_of_week": day_of_week}
    db_schedule = session.get(BarberScheduleModel, key)
    if db_schedule is None:
        db_schedule = BarberScheduleModel(**key)

    for field, value in schedule.model_dump().items():
        setattr(db_schedule, field, value)

    session.add(db_schedule)
    session.commit()
    session.refresh(db_schedule)
    return db_schedule


@router.get("/{barber_id}/schedule", response_model=List[BarberSchedulePublic])
def get_barber_schedule(
    barber_id: int,
    session: Session = Depends(get_session),
):
    get_or_404(session, Barber, barber_id, "Barber")
    return session.exec(
        select(BarberScheduleModel)
        .where(BarberScheduleModel.barber_id == barber_id)
        .order_by(BarberScheduleModel.day_of_week)
    ).all()


@router.delete("/{barber_id}/schedule/{day_of_week}", status_code=204)
def clear_barber_schedule(
    barber_id: int,
    day_of_week: int = Path(ge=0, le=6),
    session: Session = Depends(get_session),
):
    # without a row the barber inherits the business-wide hours
    db_schedule = session.get(BarberScheduleModel, {"barber_id": barber_id, "day_of_week": day_of_week})
    if db_schedule is None:
        raise HTTPException(status_code=404, detail="Schedule not set")
    session.delete(db_schedule)
    session.commit()

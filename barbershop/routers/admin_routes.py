# barbershop/routers/admin_routes.py

import logging
from datetime import date, datetime
from typing import List, Optional

from fastapi import APIRouter, Depends, HTTPException, Path
from sqlmodel import Session, select

from barbershop.deps import get_or_404, get_session
from barbershop.models import AdminSettings, Barber, BlockedTime, BusinessHours, Holiday
from barbershop.schemas import (
    BlockedTimeCreate,
    BlockedTimePublic,
    BusinessHoursPublic,
    HolidayCreate,
    HolidayPublic,
    SettingsPublic,
    SettingsUpdate,
    WeeklyHours,
)

logger = logging.getLogger(__name__)

router = APIRouter(
    prefix="/admin",
    tags=["admin"],
)


def _settings_row(session: Session) -> AdminSettings:
    settings = session.get(AdminSettings, 1)
    if settings is None:
        settings = AdminSettings(id=1)
        session.add(settings)
    return settings


# business hours

@router.get("/business-hours", response_model=List[BusinessHoursPublic])
def list_business_hours(session: Session = Depends(get_session)):
    return session.exec(select(BusinessHours).order_by(BusinessHours.day_of_week)).all()


@router.get("/business-hours/{day_of_week}", response_model=BusinessHoursPublic)
def get_business_hours(
    day_of_week: int = Path(ge=0, le=6),
    session: Session = Depends(get_session),
):
    return get_or_404(session, BusinessHours, day_of_week, "Business hours")


@router.put("/business-hours/{day_of_week}", response_model=BusinessHoursPublic)
def set_business_hours(
    hours: WeeklyHours,
    day_of_week: int = Path(ge=0, le=6),
    session: Session = Depends(get_session),
):
    db_hours = session.get(BusinessHours, day_of_week)
    if db_hours is None:
        db_hours = BusinessHours(day_of_week=day_of_week)

    for field, value in hours.model_dump().items():
        setattr(db_hours, field, value)

    session.add(db_hours)
    session.commit()
    session.refresh(db_hours)
    logger.info("Business hours for day %s updated", day_of_week)
    return db_hours


# settings

@router.get("/settings", response_model=SettingsPublic)
def get_settings(session: Session = Depends(get_session)):
    settings = session.get(AdminSettings, 1)
    if settings is None:
        settings = AdminSettings(id=1)
    return SettingsPublic.from_model(settings)


@router.patch("/settings", response_model=SettingsPublic)
def update_settings(
    changes: SettingsUpdate,
    session: Session = Depends(get_session),
):
    settings = _settings_row(session)
    updates = changes.model_dump(exclude_unset=True)

    if updates.get("default_barber_id") is not None:
        get_or_404(session, Barber, updates["default_barber_id"], "Barber")

    if "restricted_hours" in updates:
        # replace the list so the JSON column is marked dirty
        labels = changes.restricted_hours or []
        updates["restricted_hours"] = sorted({label.minute for label in labels})

    for key, value in updates.items():
        setattr(settings, key, value)
    settings.updated_at = datetime.now()

    session.add(settings)
    session.commit()
    session.refresh(settings)
    logger.info("Admin settings updated: %s", sorted(updates))
    return SettingsPublic.from_model(settings)


# holidays

@router.post("/holidays", response_model=HolidayPublic, status_code=201)
def create_holiday(
    holiday: HolidayCreate,
    session: Session = Depends(get_session),
):
    stmt = select(Holiday).where(Holiday.date == holiday.date)
    if holiday.barber_id is not None:
        get_or_404(session, Barber, holiday.barber_id, "Barber")
        stmt = stmt.where(Holiday.barber_id == holiday.barber_id)
        detail = "This barber already has a holiday on that date"
    else:
        stmt = stmt.where(Holiday.barber_id == None)  # noqa: E711
        detail = "A general holiday already exists on that date"

    if session.exec(stmt).first() is not None:
        raise HTTPException(status_code=409, detail=detail)

    db_holiday = Holiday(
        date=holiday.date,
        description=holiday.description,
        barber_id=holiday.barber_id,
    )
    session.add(db_holiday)
    session.commit()
    session.refresh(db_holiday)
    logger.info("Holiday on %s added (barber=%s)", db_holiday.date, db_holiday.barber_id)
    return db_holiday


@router.get("/holidays", response_model=List[HolidayPublic])
def list_holidays(
    from_date: Optional[date] = None,
    barber_id: Optional[int] = None,
    session: Session = Depends(get_session),
):
    stmt = select(Holiday)
    if from_date is not None:
        stmt = stmt.where(Holiday.date >= from_date)
    if barber_id is not None:
        stmt = stmt.where(Holiday.barber_id == barber_id)
    return session.exec(stmt.order_by(Holiday.date)).all()


@router.delete("/holidays/{holiday_id}", status_code=204)
def delete_holiday(
    holiday_id: int,
    session: Session = Depends(get_session),
):
    db_holiday = get_or_404(session, Holiday, holiday_id, "Holiday")
    session.delete(db_holiday)
    session.commit()


# blocked times

@router.post("/blocked-times", response_model=BlockedTimePublic, status_code=201)
def create_blocked_time(
    block: BlockedTimeCreate,
    session: Session = Depends(get_session),
):
    if block.barber_id is not None:
        get_or_404(session, Barber, block.barber_id, "Barber")

    db_block = BlockedTime(
        date=block.date,
        slots=sorted({label.minute for label in block.slots}),
        reason=block.reason or "Blocked",
        barber_id=block.barber_id,
    )
    session.add(db_block)
    session.commit()
    session.refresh(db_block)
    logger.info(
        "Blocked %d slot(s) on %s (barber=%s)", len(db_block.slots), db_block.date, db_block.barber_id
    )
    return BlockedTimePublic.from_model(db_block)


@router.get("/blocked-times", response_model=List[BlockedTimePublic])
def list_blocked_times(
    on_date: Optional[date] = None,
    barber_id: Optional[int] = None,
    session: Session = Depends(get_session),
):
    stmt = select(BlockedTime)
    if on_date is not None:
        stmt = stmt.where(BlockedTime.date == on_date)
    if barber_id is not None:
        stmt = stmt.where(BlockedTime.barber_id == barber_id)
    blocks = session.exec(stmt.order_by(BlockedTime.date)).all()
    return [BlockedTimePublic.from_model(b) for b in blocks]


@router.delete("/blocked-times/{block_id}", status_code=204)
def delete_blocked_time(
    block_id: int,
    session: Session = Depends(get_session),
):
    db_block = get_or_404(session, BlockedTime, block_id, "Blocked time")
    session.delete(db_block)
    session.commit()

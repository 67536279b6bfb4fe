# barbershop/routers/appointments_routes.py

from datetime import date
from typing import Optional, List

from fastapi import APIRouter, Depends, HTTPException
from sqlmodel import Session, select

from barbershop.core import AvailabilityService
from barbershop.deps import get_availability, get_session
from barbershop.errors import ConfigurationError, ConflictError, NotFoundError
from barbershop.models import Appointment, AppointmentStatus
from barbershop.schemas import AppointmentCreate, AppointmentPublic


router = APIRouter(
    tags=["appointments"],
)


@router.post("/appointments", response_model=AppointmentPublic, status_code=201)
async def create_appointment(
    appt: AppointmentCreate,
    availability: AvailabilityService = Depends(get_availability),
):
    repository = availability.repository

    # 1) Validate service
    if await repository.find_service(appt.service) is None:
        raise HTTPException(status_code=422, detail="Service not available")

    # 2) Validate barber
    if appt.barber_id is not None:
        barber = await repository.get_barber(appt.barber_id)
        if barber is None:
            raise HTTPException(status_code=404, detail="Barber not found")
        if not barber.is_active:
            raise HTTPException(status_code=422, detail="Barber is not taking appointments")

    # 3) Re-check the slot and insert
    try:
        created = await availability.create_appointment(appt)
    except ConfigurationError as exc:
        raise HTTPException(status_code=422, detail=str(exc))
    except ConflictError as exc:
        raise HTTPException(status_code=409, detail=exc.message)

    return AppointmentPublic.from_model(created)


@router.patch("/appointments/{appt_id}/cancel", response_model=AppointmentPublic)
async def cancel_appointment(
    appt_id: int,
    availability: AvailabilityService = Depends(get_availability),
):
    try:
        target = await availability.cancel_appointment(appt_id)
    except NotFoundError:
        raise HTTPException(status_code=404, detail="Appointment not found")
    return AppointmentPublic.from_model(target)


@router.get("/appointments", response_model=List[AppointmentPublic])
def list_appointments(
    status: Optional[str] = "booked",
    on_date: Optional[date] = None,
    barber_id: Optional[int] = None,
    client_phone: Optional[str] = None,
    session: Session = Depends(get_session),
):
    if status not in ("booked", "cancelled", "all"):
        raise HTTPException(status_code=422, detail="status must be 'booked', 'cancelled', or 'all'")

    stmt = select(Appointment)

    if on_date is not None:
        stmt = stmt.where(Appointment.date == on_date)

    if barber_id is not None:
        stmt = stmt.where(Appointment.barber_id == barber_id)

    if client_phone is not None:
        stmt = stmt.where(Appointment.client_phone == client_phone)

    if status != "all":
        stmt = stmt.where(Appointment.status == AppointmentStatus(status))

    stmt = stmt.order_by(Appointment.date, Appointment.minute)

    return [AppointmentPublic.from_model(a) for a in session.exec(stmt).all()]


@router.get("/appointments/upcoming", response_model=List[AppointmentPublic])
def list_upcoming_appointments(
    barber_id: Optional[int] = None,
    session: Session = Depends(get_session),
):
    stmt = (
        select(Appointment)
        .where(Appointment.status == AppointmentStatus.booked)
        .where(Appointment.date >= date.today())
    )
    if barber_id is not None:
        stmt = stmt.where(Appointment.barber_id == barber_id)

    stmt = stmt.order_by(Appointment.date, Appointment.minute)

    return [AppointmentPublic.from_model(a) for a in session.exec(stmt).all()]


@router.get("/appointments/{appt_id}", response_model=AppointmentPublic)
def get_appointment(
    appt_id: int,
    session: Session = Depends(get_session),
):
    target = session.get(Appointment, appt_id)
    if target is None:
        raise HTTPException(status_code=404, detail="Appointment not found")
    return AppointmentPublic.from_model(target)

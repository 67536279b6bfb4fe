# barbershop/repository.py

import logging
from datetime import date, datetime
from typing import List, Optional

from fastapi.concurrency import run_in_threadpool
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlmodel import Session, select

from .core.scope import Scope
from .errors import ConflictError, DataFetchError, NotFoundError
from .models import (
    AdminSettings,
    Appointment,
    AppointmentStatus,
    Barber,
    BarberSchedule,
    BlockedTime,
    BusinessHours,
    Holiday,
    Service,
)

logger = logging.getLogger(__name__)


class BarbershopRepository:
    """Async reads and writes the availability engine depends on.

    Each call opens its own session in the threadpool, so independent reads
    can run concurrently with ``asyncio.gather``.
    """

    def __init__(self, engine):
        self.engine = engine

    async def _read(self, what: str, fn, *args):
        try:
            return await run_in_threadpool(fn, *args)
        except SQLAlchemyError as exc:
            logger.error("Failed to load %s", what, exc_info=True)
            raise DataFetchError(f"Could not load {what}") from exc

    # reads

    def _holidays(self, day: date) -> List[Holiday]:
        with Session(self.engine) as session:
            return list(session.exec(select(Holiday).where(Holiday.date == day)).all())

    def _blocked_times(self, day: date) -> List[BlockedTime]:
        with Session(self.engine) as session:
            return list(session.exec(select(BlockedTime).where(BlockedTime.date == day)).all())

    def _active_appointments(self, day: date, barber_id: Optional[int]) -> List[Appointment]:
        stmt = (
            select(Appointment)
            .where(Appointment.date == day)
            .where(Appointment.status == AppointmentStatus.booked)
        )
        if barber_id is not None:
            stmt = stmt.where(Appointment.barber_id == barber_id)
        with Session(self.engine) as session:
            return list(session.exec(stmt.order_by(Appointment.minute)).all())

    def _weekly_hours(self, scope: Scope, day_of_week: int):
        with Session(self.engine) as session:
            if scope.is_general:
                return session.get(BusinessHours, day_of_week)
            return session.get(
                BarberSchedule, {"barber_id": scope.barber_id, "day_of_week": day_of_week}
            )

    def _admin_settings(self) -> AdminSettings:
        with Session(self.engine) as session:
            settings = session.get(AdminSettings, 1)
        return settings if settings is not None else AdminSettings(id=1)

    def _barber(self, barber_id: int) -> Optional[Barber]:
        with Session(self.engine) as session:
            return session.get(Barber, barber_id)

    def _service_by_name(self, name: str) -> Optional[Service]:
        with Session(self.engine) as session:
            return session.exec(select(Service).where(Service.name == name)).first()

    async def list_holidays(self, day: date) -> List[Holiday]:
        return await self._read("holidays", self._holidays, day)

    async def list_blocked_times(self, day: date) -> List[BlockedTime]:
        return await self._read("blocked times", self._blocked_times, day)

    async def list_active_appointments(self, day: date, barber_id: Optional[int] = None) -> List[Appointment]:
        return await self._read("appointments", self._active_appointments, day, barber_id)

    async def get_weekly_hours(self, scope: Scope, day_of_week: int):
        return await self._read("weekly hours", self._weekly_hours, scope, day_of_week)

    async def get_admin_settings(self) -> AdminSettings:
        return await self._read("admin settings", self._admin_settings)

    async def get_barber(self, barber_id: int) -> Optional[Barber]:
        return await self._read("barber", self._barber, barber_id)

    async def find_service(self, name: str) -> Optional[Service]:
        return await self._read("services", self._service_by_name, name)

    # writes

    def _insert_appointment(self, appointment: Appointment) -> Appointment:
        with Session(self.engine) as session:
            session.add(appointment)
            try:
                session.commit()
            except IntegrityError:
                session.rollback()
                raise ConflictError()
            session.refresh(appointment)  # fills appointment.id
            return appointment

    def _mark_cancelled(self, appointment_id: int, at: datetime) -> Appointment:
        with Session(self.engine) as session:
            target = session.get(Appointment, appointment_id)
            if target is None:
                raise NotFoundError("Appointment not found")

            # already cancelled: leave it as it is
            if not target.is_active:
                return target

            target.cancel(at)
            session.add(target)
            session.commit()
            session.refresh(target)
            return target

    async def insert_appointment(self, appointment: Appointment) -> Appointment:
        try:
            return await run_in_threadpool(self._insert_appointment, appointment)
        except ConflictError:
            logger.warning(
                "Slot %s was taken before the insert", appointment.active_slot
            )
            raise

    async def mark_appointment_cancelled(self, appointment_id: int, at: datetime) -> Appointment:
        appointment = await run_in_threadpool(self._mark_cancelled, appointment_id, at)
        logger.info("Appointment %s cancelled at %s", appointment.id, appointment.cancelled_at)
        return appointment

# barbershop/core/availability.py

import asyncio
import logging
from dataclasses import dataclass, field
from datetime import date, datetime
from typing import Callable, Dict, FrozenSet, List, Optional

from ..errors import ConfigurationError, ConflictError, EarlyBookingError
from .. import models
from .clock import TimeLabel, day_of_week
from .conflicts import booking_scope, taken_labels
from .overrides import blocked_labels, is_holiday
from .restrictions import is_restricted
from .schedule import nominal_hours, resolve_weekly_hours
from .scope import Scope

logger = logging.getLogger(__name__)


async def _nothing():
    return None


@dataclass
class DaySnapshot:
    """Everything one availability answer is computed from, fetched once."""

    day: date
    scope: Scope
    settings: object
    holidays: list
    blocks: list
    appointments: list
    weekly_hours: Optional[object] = None
    blocked: FrozenSet[TimeLabel] = field(init=False)
    taken: FrozenSet[TimeLabel] = field(init=False)

    def __post_init__(self):
        self.blocked = blocked_labels(self.blocks, self.day, self.scope)
        self.taken = taken_labels(self.appointments, self.day, booking_scope(self.scope, self.settings))

    @property
    def is_holiday(self) -> bool:
        return is_holiday(self.holidays, self.day, self.scope)

    @property
    def nominal(self) -> List[TimeLabel]:
        return nominal_hours(self.weekly_hours)

    def slot_free(self, label: TimeLabel, now: datetime) -> bool:
        if is_restricted(self.day, label, self.settings, now):
            return False
        if self.is_holiday:
            return False
        if label in self.blocked:
            return False
        return label not in self.taken


@dataclass
class DayView:
    day: date
    scope: Scope
    nominal: List[TimeLabel]
    availability: Dict[TimeLabel, bool]
    is_holiday: bool


class AvailabilityService:
    """Answers "which slots are bookable" and books through the same checks.

    Every call reads fresh data from the repository; nothing is cached
    between calls. Repository failures propagate, so a slot is never
    reported free when its data could not be loaded.
    """

    def __init__(self, repository, clock: Callable[[], datetime] = datetime.now):
        self.repository = repository
        self.clock = clock

    async def _weekly_hours(self, day: date, scope: Scope, settings):
        dow = day_of_week(day)
        business, barber = await asyncio.gather(
            self.repository.get_weekly_hours(Scope.general(), dow),
            _nothing() if scope.is_general else self.repository.get_weekly_hours(scope, dow),
        )
        return resolve_weekly_hours(business, barber, settings, scope)

    async def snapshot(self, day: date, scope: Scope, with_hours: bool = True) -> DaySnapshot:
        dow = day_of_week(day)
        settings, holidays, blocks, appointments, business, barber = await asyncio.gather(
            self.repository.get_admin_settings(),
            self.repository.list_holidays(day),
            self.repository.list_blocked_times(day),
            self.repository.list_active_appointments(day),
            self.repository.get_weekly_hours(Scope.general(), dow) if with_hours else _nothing(),
            self.repository.get_weekly_hours(scope, dow)
            if with_hours and not scope.is_general
            else _nothing(),
        )
        return DaySnapshot(
            day=day,
            scope=scope,
            settings=settings,
            holidays=holidays,
            blocks=blocks,
            appointments=appointments,
            weekly_hours=resolve_weekly_hours(business, barber, settings, scope),
        )

    async def nominal_hours(self, day: date, scope: Scope = Scope.general()) -> List[TimeLabel]:
        settings = await self.repository.get_admin_settings()
        return nominal_hours(await self._weekly_hours(day, scope, settings))

    async def is_available(self, day: date, label: TimeLabel, scope: Scope = Scope.general()) -> bool:
        snapshot = await self.snapshot(day, scope, with_hours=False)
        available = snapshot.slot_free(label, self.clock())
        logger.debug("%s %s for %s available=%s", day, label, scope, available)
        return available

    def _evaluate(self, snapshot: DaySnapshot) -> Dict[TimeLabel, bool]:
        labels = snapshot.nominal
        # whole day void: skip per-slot checks
        if not labels or snapshot.is_holiday:
            return {}
        now = self.clock()
        return {label: snapshot.slot_free(label, now) for label in labels}

    async def day_availability(self, day: date, scope: Scope = Scope.general()) -> Dict[TimeLabel, bool]:
        return self._evaluate(await self.snapshot(day, scope))

    async def day_view(self, day: date, scope: Scope = Scope.general()) -> DayView:
        """Full slot grid plus availability, from one snapshot."""
        snapshot = await self.snapshot(day, scope)
        return DayView(
            day=day,
            scope=scope,
            nominal=snapshot.nominal,
            availability=self._evaluate(snapshot),
            is_holiday=snapshot.is_holiday,
        )

    def resolve_barber(self, barber_id: Optional[int], settings) -> Optional[int]:
        if barber_id is not None:
            return barber_id
        if settings.default_barber_id is not None:
            return settings.default_barber_id
        if settings.multiple_barbers_enabled:
            raise ConfigurationError(
                "No barber selected and no default barber configured"
            )
        return None

    async def create_appointment(self, candidate) -> "models.Appointment":
        """Re-check the slot, then insert.

        ``candidate`` carries date, time (a TimeLabel), client_name,
        client_phone, service, barber_id and confirmed. The storage layer's
        unique slot key closes the remaining race window.
        """
        settings = await self.repository.get_admin_settings()
        barber_id = self.resolve_barber(candidate.barber_id, settings)
        scope = Scope.of(barber_id)
        day, label = candidate.date, candidate.time

        snapshot = await self.snapshot(day, scope)
        now = self.clock()

        # 1) Must be on the day's grid and not in the past
        if label not in snapshot.nominal:
            raise ConflictError(f"{label} is outside opening hours on {day.isoformat()}")
        if label.on(day) < now:
            raise ConflictError("Cannot book an appointment in the past")

        # 2) Lead time for restricted hours
        if is_restricted(day, label, snapshot.settings, now):
            logger.warning("Restricted slot %s %s requested for %s", day, label, scope)
            raise EarlyBookingError(label.label, snapshot.settings.early_booking_hours)

        # 3) Holidays, blocks and existing bookings
        if not snapshot.slot_free(label, now):
            logger.warning("Slot %s %s for %s is not available", day, label, scope)
            raise ConflictError()

        appointment = models.Appointment(
            date=day,
            minute=label.minute,
            client_name=candidate.client_name,
            client_phone=candidate.client_phone,
            service=candidate.service,
            barber_id=barber_id,
            confirmed=candidate.confirmed,
            # single-barber shops share one key per hour whatever barber_id holds
            active_slot=models.slot_key(day, label, booking_scope(scope, snapshot.settings).barber_id),
        )
        created = await self.repository.insert_appointment(appointment)
        logger.info("Booked appointment %s on %s at %s for %s", created.id, day, label, scope)
        return created

    async def cancel_appointment(self, appointment_id: int) -> "models.Appointment":
        return await self.repository.mark_appointment_cancelled(appointment_id, self.clock())

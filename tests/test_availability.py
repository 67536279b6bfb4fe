"""Tests for the availability service against a real SQLite database."""

import asyncio
from datetime import datetime, time

import pytest

from barbershop.core import AvailabilityService, Scope, TimeLabel
from barbershop.db import make_engine
from barbershop.errors import ConfigurationError, ConflictError, DataFetchError, EarlyBookingError, NotFoundError
from barbershop.models import Appointment, BarberSchedule, BlockedTime, Holiday, slot_key
from barbershop.repository import BarbershopRepository
from barbershop.schemas import AppointmentCreate

from .conftest import CHRISTMAS, MONDAY, WEDNESDAY


def label(text):
    return TimeLabel.parse(text)


def candidate(day, at, barber_id=None, client="Ana"):
    return AppointmentCreate(
        date=day, time=at, client_name=client, client_phone="8095550000", service="Haircut", barber_id=barber_id
    )


class TestNominalAndDay:
    @pytest.mark.asyncio
    async def test_monday_grid_all_available(self, service):
        expected = [
            "7:00 AM", "8:00 AM", "9:00 AM", "10:00 AM", "11:00 AM",
            "3:00 PM", "4:00 PM", "5:00 PM", "6:00 PM", "7:00 PM", "8:00 PM",
        ]

        hours = await service.nominal_hours(MONDAY)
        availability = await service.day_availability(MONDAY)

        assert [h.label for h in hours] == expected
        assert list(availability) == hours
        assert all(availability.values())

    @pytest.mark.asyncio
    async def test_general_holiday_voids_every_scope(self, service, add, barbers):
        add(Holiday(date=CHRISTMAS, description="Christmas"))

        assert await service.day_availability(CHRISTMAS) == {}
        for barber in barbers:
            assert await service.day_availability(CHRISTMAS, Scope.for_barber(barber.id)) == {}
        assert not await service.is_available(CHRISTMAS, label("9:00 AM"))

    @pytest.mark.asyncio
    async def test_holiday_view_keeps_grid(self, service, add):
        add(Holiday(date=CHRISTMAS, description="Christmas"))

        view = await service.day_view(CHRISTMAS)

        assert view.is_holiday
        assert view.availability == {}
        assert len(view.nominal) > 0

    @pytest.mark.asyncio
    async def test_barber_schedule_in_multi_barber_mode(self, service, add, configure, barbers):
        luis, carlos = barbers
        configure(multiple_barbers_enabled=True)
        add(BarberSchedule(barber_id=luis.id, day_of_week=1, morning_start=time(9), morning_end=time(11)))

        assert await service.nominal_hours(MONDAY, Scope.for_barber(luis.id)) == [label("9:00 AM"), label("10:00 AM")]
        assert len(await service.nominal_hours(MONDAY, Scope.for_barber(carlos.id))) == 11
        assert len(await service.nominal_hours(MONDAY)) == 11


class TestOverrides:
    @pytest.mark.asyncio
    async def test_barber_block_only_hits_that_barber(self, service, add, barbers):
        luis, carlos = barbers
        add(BlockedTime(date=WEDNESDAY, slots=[label("9:00 AM").minute], reason="Meeting", barber_id=luis.id))

        assert not await service.is_available(WEDNESDAY, label("9:00 AM"), Scope.for_barber(luis.id))
        assert await service.is_available(WEDNESDAY, label("9:00 AM"), Scope.for_barber(carlos.id))
        assert await service.is_available(WEDNESDAY, label("9:00 AM"))

    @pytest.mark.asyncio
    async def test_barber_holiday_leaves_others_and_general(self, service, add, barbers):
        luis, carlos = barbers
        add(Holiday(date=WEDNESDAY, description="Day off", barber_id=luis.id))

        assert await service.day_availability(WEDNESDAY, Scope.for_barber(luis.id)) == {}
        assert all((await service.day_availability(WEDNESDAY, Scope.for_barber(carlos.id))).values())
        assert not (await service.day_view(WEDNESDAY)).is_holiday

    @pytest.mark.asyncio
    async def test_barber_appointment_reduces_general_view(self, service, configure, barbers):
        luis, carlos = barbers
        configure(multiple_barbers_enabled=True)
        await service.create_appointment(candidate(WEDNESDAY, "10:00 AM", luis.id))

        assert not await service.is_available(WEDNESDAY, label("10:00 AM"))
        assert not await service.is_available(WEDNESDAY, label("10:00 AM"), Scope.for_barber(luis.id))
        assert await service.is_available(WEDNESDAY, label("10:00 AM"), Scope.for_barber(carlos.id))


class TestRestriction:
    @pytest.mark.asyncio
    async def test_restricted_slot_inside_lead_time(self, service, configure, clock):
        configure(
            early_booking_restriction=True,
            early_booking_hours=24,
            restricted_hours=[label("7:00 AM").minute],
        )
        clock.now = datetime(2025, 8, 19, 8, 0)

        availability = await service.day_availability(WEDNESDAY)

        assert availability[label("7:00 AM")] is False
        assert availability[label("8:00 AM")] is True
        assert not await service.is_available(WEDNESDAY, label("7:00 AM"))

        with pytest.raises(EarlyBookingError) as exc_info:
            await service.create_appointment(candidate(WEDNESDAY, "7:00 AM"))
        assert exc_info.value.lead_hours == 24


class TestBooking:
    @pytest.mark.asyncio
    async def test_single_barber_slot_taken(self, service):
        created = await service.create_appointment(candidate(WEDNESDAY, "10:00 AM"))

        assert created.id is not None
        assert created.barber_id is None
        assert created.is_active
        assert not await service.is_available(WEDNESDAY, label("10:00 AM"))

        with pytest.raises(ConflictError):
            await service.create_appointment(candidate(WEDNESDAY, "10:00 AM", client="Pedro"))

    @pytest.mark.asyncio
    async def test_storage_rejects_duplicate_active_slot(self, repository):
        def row():
            return Appointment(
                date=WEDNESDAY,
                minute=label("10:00 AM").minute,
                client_name="Ana",
                service="Haircut",
                active_slot=slot_key(WEDNESDAY, label("10:00 AM"), None),
            )

        await repository.insert_appointment(row())
        with pytest.raises(ConflictError):
            await repository.insert_appointment(row())

    @pytest.mark.asyncio
    async def test_concurrent_bookings_leave_one_winner(self, service, repository):
        results = await asyncio.gather(
            *(service.create_appointment(candidate(WEDNESDAY, "11:00 AM", client=f"Client {i}")) for i in range(4)),
            return_exceptions=True,
        )

        booked = [r for r in results if isinstance(r, Appointment)]
        conflicts = [r for r in results if isinstance(r, ConflictError)]
        assert len(booked) == 1
        assert len(conflicts) == 3
        assert len(await repository.list_active_appointments(WEDNESDAY)) == 1

    @pytest.mark.asyncio
    async def test_outside_opening_hours(self, service):
        with pytest.raises(ConflictError):
            await service.create_appointment(candidate(WEDNESDAY, "1:00 PM"))

    @pytest.mark.asyncio
    async def test_past_slot(self, service, clock):
        clock.now = datetime(2025, 8, 20, 12, 0)
        with pytest.raises(ConflictError):
            await service.create_appointment(candidate(WEDNESDAY, "9:00 AM"))

    @pytest.mark.asyncio
    async def test_multi_barber_needs_a_barber(self, service, configure):
        configure(multiple_barbers_enabled=True, default_barber_id=None)
        with pytest.raises(ConfigurationError):
            await service.create_appointment(candidate(WEDNESDAY, "9:00 AM"))

    @pytest.mark.asyncio
    async def test_default_barber_is_used(self, service, configure, barbers):
        luis, _ = barbers
        configure(multiple_barbers_enabled=True, default_barber_id=luis.id)

        created = await service.create_appointment(candidate(WEDNESDAY, "9:00 AM"))

        assert created.barber_id == luis.id

    @pytest.mark.asyncio
    async def test_single_chair_default_barber_set_later(self, service, repository, configure, barbers):
        luis, _ = barbers
        await service.create_appointment(candidate(WEDNESDAY, "10:00 AM"))
        configure(default_barber_id=luis.id)

        assert not await service.is_available(WEDNESDAY, label("10:00 AM"), Scope.for_barber(luis.id))
        with pytest.raises(ConflictError):
            await service.create_appointment(candidate(WEDNESDAY, "10:00 AM", client="Pedro"))
        assert len(await repository.list_active_appointments(WEDNESDAY)) == 1

    @pytest.mark.asyncio
    async def test_single_chair_ignores_requested_barber(self, service, repository, barbers):
        luis, carlos = barbers
        first = await service.create_appointment(candidate(WEDNESDAY, "10:00 AM", luis.id))

        with pytest.raises(ConflictError):
            await service.create_appointment(candidate(WEDNESDAY, "10:00 AM", carlos.id, client="Pedro"))
        assert first.active_slot == slot_key(WEDNESDAY, label("10:00 AM"), None)
        assert len(await repository.list_active_appointments(WEDNESDAY)) == 1

    @pytest.mark.asyncio
    async def test_single_chair_storage_key_is_shared(self, service, repository, configure, barbers, monkeypatch):
        luis, _ = barbers
        await repository.insert_appointment(
            Appointment(
                date=WEDNESDAY,
                minute=label("10:00 AM").minute,
                client_name="Ana",
                service="Haircut",
                active_slot=slot_key(WEDNESDAY, label("10:00 AM"), None),
            )
        )
        configure(default_barber_id=luis.id)

        # blind the pre-check so only the unique key stands in the way
        async def nothing_taken(day, barber_id=None):
            return []

        monkeypatch.setattr(repository, "list_active_appointments", nothing_taken)
        with pytest.raises(ConflictError):
            await service.create_appointment(candidate(WEDNESDAY, "10:00 AM", client="Pedro"))


class TestCancellation:
    @pytest.mark.asyncio
    async def test_cancelled_slot_reappears(self, service):
        created = await service.create_appointment(candidate(WEDNESDAY, "10:00 AM"))
        assert (await service.day_availability(WEDNESDAY))[label("10:00 AM")] is False

        cancelled = await service.cancel_appointment(created.id)

        assert not cancelled.is_active
        assert cancelled.active_slot is None
        assert (await service.day_availability(WEDNESDAY))[label("10:00 AM")] is True
        rebooked = await service.create_appointment(candidate(WEDNESDAY, "10:00 AM", client="Pedro"))
        assert rebooked.id != created.id

    @pytest.mark.asyncio
    async def test_cancel_twice_changes_nothing(self, service, clock):
        created = await service.create_appointment(candidate(WEDNESDAY, "10:00 AM"))
        first = await service.cancel_appointment(created.id)

        clock.now = datetime(2025, 8, 2, 9, 0)
        second = await service.cancel_appointment(created.id)

        assert second.cancelled_at == first.cancelled_at
        assert second.status == first.status

    @pytest.mark.asyncio
    async def test_cancel_unknown(self, service):
        with pytest.raises(NotFoundError):
            await service.cancel_appointment(9999)


class BrokenBlocksRepository(BarbershopRepository):
    async def list_blocked_times(self, day):
        raise DataFetchError("Could not load blocked times")


class TestFailClosed:
    @pytest.mark.asyncio
    async def test_fetch_error_propagates(self, engine, clock):
        service = AvailabilityService(BrokenBlocksRepository(engine), clock=clock)

        with pytest.raises(DataFetchError):
            await service.is_available(WEDNESDAY, label("9:00 AM"))
        with pytest.raises(DataFetchError):
            await service.day_availability(WEDNESDAY)
        with pytest.raises(DataFetchError):
            await service.create_appointment(candidate(WEDNESDAY, "9:00 AM"))

    @pytest.mark.asyncio
    async def test_database_errors_become_fetch_errors(self, tmp_path, clock):
        # no tables were ever created here
        engine = make_engine(f"sqlite:///{tmp_path / 'empty.db'}")
        service = AvailabilityService(BarbershopRepository(engine), clock=clock)

        with pytest.raises(DataFetchError):
            await service.day_availability(WEDNESDAY)
        engine.dispose()

# barbershop/core/conflicts.py

from datetime import date
from typing import FrozenSet, Iterable

from .clock import TimeLabel, same_day
from .scope import Scope


def taken_labels(appointments: Iterable, day: date, scope: Scope) -> FrozenSet[TimeLabel]:
    """Labels already held by an active appointment.

    A barber query counts only that barber's bookings. The general query
    counts every barber's bookings, unlike holidays and blocks where it sees
    only unscoped records.
    """
    return frozenset(
        a.time_label
        for a in appointments
        if a.is_active
        and same_day(a.date, day)
        and (scope.is_general or a.barber_id == scope.barber_id)
    )


def booking_scope(scope: Scope, settings) -> Scope:
    """Scope bookings compete in: one shared chair unless multi-barber mode is on."""
    if settings.multiple_barbers_enabled:
        return scope
    return Scope.general()

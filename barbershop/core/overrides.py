# barbershop/core/overrides.py
"""Holidays and blocked times layered over the nominal schedule.

Both follow the same rule: a record without a barber applies to every query,
a barber-scoped record applies only to queries for that barber.
"""

from datetime import date
from typing import FrozenSet, Iterable, List

from .clock import TimeLabel, same_day
from .scope import Scope


def applicable(overrides: Iterable, day: date, scope: Scope) -> List:
    return [o for o in overrides if same_day(o.date, day) and scope.covers(o.barber_id)]


def is_holiday(holidays: Iterable, day: date, scope: Scope) -> bool:
    return bool(applicable(holidays, day, scope))


def blocked_labels(blocks: Iterable, day: date, scope: Scope) -> FrozenSet[TimeLabel]:
    labels = set()
    for block in applicable(blocks, day, scope):
        labels |= block.labels
    return frozenset(labels)

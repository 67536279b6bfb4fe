# barbershop/core/schedule.py

from datetime import time
from typing import List, Optional

from .clock import TimeLabel
from .scope import Scope


def resolve_weekly_hours(business_hours, barber_schedule, settings, scope: Scope):
    """Pick the weekly hours row that governs a day for ``scope``.

    A barber's own row wins only when the query is for that barber, the shop
    runs in multi-barber mode and the row exists. Everything else falls back
    to the business-wide row, which may itself be missing.
    """
    if (
        not scope.is_general
        and settings.multiple_barbers_enabled
        and barber_schedule is not None
    ):
        return barber_schedule
    return business_hours


def hour_labels(start: time, end: time) -> List[TimeLabel]:
    # whole hours in [start, end.hour); a 12:00 or 12:30 end makes 11:00 the last slot
    first = start.hour + (1 if (start.minute or start.second) else 0)
    return [TimeLabel.at(hour) for hour in range(first, end.hour)]


def nominal_hours(weekly_hours: Optional[object]) -> List[TimeLabel]:
    if weekly_hours is None or not weekly_hours.is_open:
        return []

    labels = []
    for start, end in weekly_hours.intervals():
        labels.extend(hour_labels(start, end))
    return sorted(set(labels))

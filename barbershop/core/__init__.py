# barbershop/core/__init__.py
"""Availability resolution: which slots can be booked, and for whom."""

from .availability import AvailabilityService, DaySnapshot, DayView
from .clock import TimeLabel, day_of_week, is_before, is_future, same_day, to_12_hour, to_24_hour
from .scope import Scope

__all__ = [
    "AvailabilityService",
    "DaySnapshot",
    "DayView",
    "Scope",
    "TimeLabel",
    "day_of_week",
    "is_before",
    "is_future",
    "same_day",
    "to_12_hour",
    "to_24_hour",
]

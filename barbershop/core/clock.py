# barbershop/core/clock.py
"""Timezone-free calendar dates and on-the-hour time labels.

Calendar dates are plain ``datetime.date`` values built from (year, month,
day). Nothing in here goes through an epoch timestamp, so a stored date can
never render as the previous day in a negative-UTC-offset locale.

Time labels carry a canonical minute-of-day. The "7:00 AM" string only
exists at the boundary; comparisons and sorting use the integer.
"""

import re
from dataclasses import dataclass
from datetime import date, datetime, time
from typing import Optional

MINUTES_PER_DAY = 24 * 60

_LABEL_RE = re.compile(r"^\s*(\d{1,2}):(\d{2})\s*([AaPp][Mm])?\s*$")


def _day_key(value: date):
    return value.year, value.month, value.day


def same_day(a: date, b: date) -> bool:
    """True when both values fall on the same calendar day (time-of-day ignored)."""
    return _day_key(a) == _day_key(b)


def is_before(a: date, b: date) -> bool:
    return _day_key(a) < _day_key(b)


def is_future(a: date, reference: Optional[date] = None) -> bool:
    """Strictly after the reference day (today when omitted)."""
    if reference is None:
        reference = date.today()
    return _day_key(a) > _day_key(reference)


def day_of_week(value: date) -> int:
    # 0=Sunday .. 6=Saturday; date.weekday() is 0=Monday
    return (value.weekday() + 1) % 7


def parse_date(text: str) -> date:
    """Parse ``YYYY-MM-DD`` into a calendar date."""
    year, month, day = (int(part) for part in text.strip().split("-"))
    return date(year, month, day)


def to_12_hour(minute_of_day: int) -> str:
    hour, minute = divmod(minute_of_day, 60)
    period = "PM" if hour >= 12 else "AM"
    return f"{hour % 12 or 12}:{minute:02d} {period}"


def to_24_hour(label: str) -> int:
    """Minute-of-day for "7:00 AM", "12:00 PM" or "07:00"."""
    match = _LABEL_RE.match(label)
    if match is None:
        raise ValueError(f"Unrecognised time label: {label!r}")

    hour, minute, period = int(match.group(1)), int(match.group(2)), match.group(3)
    if minute > 59:
        raise ValueError(f"Unrecognised time label: {label!r}")

    if period is None:
        if hour > 23:
            raise ValueError(f"Unrecognised time label: {label!r}")
    else:
        if not 1 <= hour <= 12:
            raise ValueError(f"Unrecognised time label: {label!r}")
        hour = hour % 12
        if period.upper() == "PM":
            hour += 12

    return hour * 60 + minute


@dataclass(frozen=True, order=True)
class TimeLabel:
    """One bookable slot start, identified by its minute of the day."""

    minute: int

    def __post_init__(self):
        if not 0 <= self.minute < MINUTES_PER_DAY:
            raise ValueError(f"minute of day out of range: {self.minute}")

    @classmethod
    def parse(cls, text: str) -> "TimeLabel":
        return cls(to_24_hour(text))

    @classmethod
    def at(cls, hour: int, minute: int = 0) -> "TimeLabel":
        return cls(hour * 60 + minute)

    @classmethod
    def from_time(cls, value: time) -> "TimeLabel":
        return cls(value.hour * 60 + value.minute)

    @property
    def hour(self) -> int:
        return self.minute // 60

    @property
    def label(self) -> str:
        return to_12_hour(self.minute)

    @property
    def hhmm(self) -> str:
        return f"{self.minute // 60:02d}:{self.minute % 60:02d}"

    def to_time(self) -> time:
        return time(self.minute // 60, self.minute % 60)

    def on(self, day: date) -> datetime:
        """Naive local datetime for this label on ``day``."""
        return datetime.combine(day, self.to_time())

    def __str__(self) -> str:
        return self.label

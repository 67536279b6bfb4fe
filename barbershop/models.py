# barbershop/models.py

from typing import Optional, List
from datetime import datetime, date as Date, time
from enum import Enum

from sqlalchemy.types import JSON
from sqlmodel import SQLModel, Field, Column

from .core.clock import TimeLabel


class AppointmentStatus(str, Enum):
    booked = "booked"
    cancelled = "cancelled"


def slot_key(day: Date, label: TimeLabel, barber_id: Optional[int]) -> str:
    # unique among active appointments; NULL once cancelled
    return f"{day.isoformat()}|{label.minute}|{'-' if barber_id is None else barber_id}"


class Barber(SQLModel, table=True):
    id: Optional[int] = Field(default=None, primary_key=True)
    name: str
    phone: str = ""
    is_active: bool = True
    created_at: datetime = Field(default_factory=datetime.now)
    updated_at: datetime = Field(default_factory=datetime.now)


class Service(SQLModel, table=True):
    id: Optional[int] = Field(default=None, primary_key=True)
    name: str = Field(index=True, unique=True)
    price: float = 0
    duration: int = 60  # minutes


class WeeklyHoursBase(SQLModel):
    is_open: bool = True
    morning_start: Optional[time] = None
    morning_end: Optional[time] = None
    afternoon_start: Optional[time] = None
    afternoon_end: Optional[time] = None

    def intervals(self) -> List[tuple]:
        """Half-open [start, end) intervals that are actually set."""
        result = []
        for start, end in (
            (self.morning_start, self.morning_end),
            (self.afternoon_start, self.afternoon_end),
        ):
            if start is not None and end is not None and start < end:
                result.append((start, end))
        return result


class BusinessHours(WeeklyHoursBase, table=True):
    day_of_week: int = Field(primary_key=True)  # 0=Sunday .. 6=Saturday


class BarberSchedule(WeeklyHoursBase, table=True):
    barber_id: int = Field(foreign_key="barber.id", primary_key=True)
    day_of_week: int = Field(primary_key=True)


class Holiday(SQLModel, table=True):
    id: Optional[int] = Field(default=None, primary_key=True)
    date: Date = Field(index=True)
    description: str = ""
    barber_id: Optional[int] = Field(default=None, foreign_key="barber.id", index=True)


class BlockedTime(SQLModel, table=True):
    id: Optional[int] = Field(default=None, primary_key=True)
    date: Date = Field(index=True)
    slots: List[int] = Field(default_factory=list, sa_column=Column(JSON))  # minutes of day
    reason: str = "Blocked"
    barber_id: Optional[int] = Field(default=None, foreign_key="barber.id", index=True)

    @property
    def labels(self) -> frozenset:
        return frozenset(TimeLabel(m) for m in self.slots or [])


class Appointment(SQLModel, table=True):
    id: Optional[int] = Field(default=None, primary_key=True)

    date: Date = Field(index=True)
    minute: int  # minute of day
    client_name: str
    client_phone: str = ""
    service: str
    barber_id: Optional[int] = Field(default=None, foreign_key="barber.id", index=True)
    confirmed: bool = True

    status: AppointmentStatus = AppointmentStatus.booked
    created_at: datetime = Field(default_factory=datetime.now)
    cancelled_at: Optional[datetime] = None
    active_slot: Optional[str] = Field(default=None, unique=True)

    @property
    def time_label(self) -> TimeLabel:
        return TimeLabel(self.minute)

    @property
    def is_active(self) -> bool:
        return self.status == AppointmentStatus.booked

    def cancel(self, at: datetime) -> None:
        self.status = AppointmentStatus.cancelled
        self.cancelled_at = at
        self.active_slot = None


class AdminSettings(SQLModel, table=True):
    id: int = Field(default=1, primary_key=True)

    multiple_barbers_enabled: bool = False
    default_barber_id: Optional[int] = None
    early_booking_restriction: bool = False
    early_booking_hours: int = 12
    restricted_hours: List[int] = Field(default_factory=list, sa_column=Column(JSON))  # minutes of day
    reviews_enabled: bool = True
    updated_at: datetime = Field(default_factory=datetime.now)

    @property
    def restricted_labels(self) -> frozenset:
        return frozenset(TimeLabel(m) for m in self.restricted_hours or [])


class Review(SQLModel, table=True):
    id: Optional[int] = Field(default=None, primary_key=True)
    client_name: str
    client_phone: str = ""
    rating: int
    comment: str = ""
    service_used: str = ""
    barber_id: Optional[int] = Field(default=None, foreign_key="barber.id", index=True)
    is_verified: bool = False
    is_approved: bool = False
    created_at: datetime = Field(default_factory=datetime.now)
    updated_at: datetime = Field(default_factory=datetime.now)

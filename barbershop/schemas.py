# barbershop/schemas.py

from datetime import datetime, date, time
from typing import Annotated, List, Optional

from pydantic import BaseModel, Field, PlainSerializer, PlainValidator, WithJsonSchema, model_validator

from .core.clock import TimeLabel
from .models import AppointmentStatus


def _coerce_label(value) -> TimeLabel:
    if isinstance(value, TimeLabel):
        return value
    if isinstance(value, time):
        return TimeLabel.from_time(value)
    if isinstance(value, str):
        return TimeLabel.parse(value)
    raise ValueError("time must be a string like '7:00 AM' or '07:00'")


# "7:00 AM" on the wire, TimeLabel in Python
Label = Annotated[
    TimeLabel,
    PlainValidator(_coerce_label),
    PlainSerializer(lambda label: label.label, return_type=str),
    WithJsonSchema({"type": "string", "examples": ["7:00 AM"]}),
]


class WeeklyHours(BaseModel):
    is_open: bool = True
    morning_start: Optional[time] = None
    morning_end: Optional[time] = None
    afternoon_start: Optional[time] = None
    afternoon_end: Optional[time] = None

    @model_validator(mode="after")
    def check_intervals(self):
        intervals = []
        for name in ("morning", "afternoon"):
            start = getattr(self, f"{name}_start")
            end = getattr(self, f"{name}_end")
            if (start is None) != (end is None):
                raise ValueError(f"{name}_start and {name}_end must be set together")
            if start is None:
                continue
            if start >= end:
                raise ValueError(f"{name}_start must be before {name}_end")
            intervals.append((start, end))
        if len(intervals) == 2:
            (s1, e1), (s2, e2) = intervals
            if s1 < e2 and s2 < e1:
                raise ValueError("morning and afternoon intervals overlap")
        return self


class BusinessHoursPublic(WeeklyHours):
    day_of_week: int


class BarberSchedulePublic(WeeklyHours):
    barber_id: int
    day_of_week: int


class BarberCreate(BaseModel):
    name: str = Field(min_length=1)
    phone: str = ""
    is_active: bool = True


class BarberUpdate(BaseModel):
    name: Optional[str] = Field(default=None, min_length=1)
    phone: Optional[str] = None
    is_active: Optional[bool] = None


class BarberPublic(BaseModel):
    id: int
    name: str
    phone: str
    is_active: bool
    created_at: datetime
    updated_at: datetime


class ServiceCreate(BaseModel):
    name: str = Field(min_length=1)
    price: float = Field(default=0, ge=0)
    duration: int = Field(default=60, gt=0)


class ServiceUpdate(BaseModel):
    name: Optional[str] = Field(default=None, min_length=1)
    price: Optional[float] = Field(default=None, ge=0)
    duration: Optional[int] = Field(default=None, gt=0)


class ServicePublic(BaseModel):
    id: int
    name: str
    price: float
    duration: int


class HolidayCreate(BaseModel):
    date: date
    description: str = ""
    barber_id: Optional[int] = None


class HolidayPublic(HolidayCreate):
    id: int


class BlockedTimeCreate(BaseModel):
    date: date
    slots: List[Label] = Field(min_length=1)
    reason: str = "Blocked"
    barber_id: Optional[int] = None


class BlockedTimePublic(BlockedTimeCreate):
    id: int

    @classmethod
    def from_model(cls, block) -> "BlockedTimePublic":
        return cls(
            id=block.id,
            date=block.date,
            slots=sorted(block.labels),
            reason=block.reason,
            barber_id=block.barber_id,
        )


class AppointmentCreate(BaseModel):
    date: date
    time: Label
    client_name: str = Field(min_length=1)
    client_phone: str = ""
    service: str = Field(min_length=1)
    barber_id: Optional[int] = None
    confirmed: bool = True


class AppointmentPublic(BaseModel):
    id: int
    date: date
    time: Label
    client_name: str
    client_phone: str
    service: str
    barber_id: Optional[int]
    confirmed: bool
    status: AppointmentStatus
    created_at: datetime
    cancelled_at: Optional[datetime] = None

    @classmethod
    def from_model(cls, appt) -> "AppointmentPublic":
        return cls(
            id=appt.id,
            date=appt.date,
            time=appt.time_label,
            client_name=appt.client_name,
            client_phone=appt.client_phone,
            service=appt.service,
            barber_id=appt.barber_id,
            confirmed=appt.confirmed,
            status=appt.status,
            created_at=appt.created_at,
            cancelled_at=appt.cancelled_at,
        )


class SettingsUpdate(BaseModel):
    multiple_barbers_enabled: Optional[bool] = None
    default_barber_id: Optional[int] = None
    early_booking_restriction: Optional[bool] = None
    early_booking_hours: Optional[int] = Field(default=None, ge=0)
    restricted_hours: Optional[List[Label]] = None
    reviews_enabled: Optional[bool] = None


class SettingsPublic(BaseModel):
    multiple_barbers_enabled: bool
    default_barber_id: Optional[int]
    early_booking_restriction: bool
    early_booking_hours: int
    restricted_hours: List[Label]
    reviews_enabled: bool
    updated_at: datetime

    @classmethod
    def from_model(cls, settings) -> "SettingsPublic":
        return cls(
            multiple_barbers_enabled=settings.multiple_barbers_enabled,
            default_barber_id=settings.default_barber_id,
            early_booking_restriction=settings.early_booking_restriction,
            early_booking_hours=settings.early_booking_hours,
            restricted_hours=sorted(settings.restricted_labels),
            reviews_enabled=settings.reviews_enabled,
            updated_at=settings.updated_at,
        )


class SlotAvailability(BaseModel):
    time: Label
    available: bool


class DayAvailabilityResponse(BaseModel):
    date: date
    barber_id: Optional[int]
    is_holiday: bool
    slots: List[SlotAvailability]


class SlotCheckResponse(BaseModel):
    date: date
    time: Label
    barber_id: Optional[int]
    available: bool


class ReviewCreate(BaseModel):
    client_name: str = Field(min_length=1)
    client_phone: str = ""
    rating: int = Field(ge=1, le=5)
    comment: str = ""
    service_used: str = ""
    barber_id: Optional[int] = None


class ReviewUpdate(BaseModel):
    is_approved: Optional[bool] = None
    is_verified: Optional[bool] = None
    comment: Optional[str] = None


class ReviewPublic(ReviewCreate):
    id: int
    is_verified: bool
    is_approved: bool
    created_at: datetime
    updated_at: datetime


class ReviewSummary(BaseModel):
    average_rating: float
    count: int

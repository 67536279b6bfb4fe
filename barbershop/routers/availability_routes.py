# barbershop/routers/availability_routes.py

from datetime import date

from fastapi import APIRouter, Depends, HTTPException

from barbershop.core import AvailabilityService, Scope, TimeLabel
from barbershop.deps import get_availability, get_scope
from barbershop.schemas import DayAvailabilityResponse, SlotAvailability, SlotCheckResponse

router = APIRouter(
    prefix="/availability",
    tags=["availability"],
)


@router.get("", response_model=DayAvailabilityResponse)
async def day_availability(
    date: date,
    scope: Scope = Depends(get_scope),
    availability: AvailabilityService = Depends(get_availability),
):
    view = await availability.day_view(date, scope)

    # full grid; holiday days come back with every slot unavailable
    slots = [
        SlotAvailability(time=label, available=view.availability.get(label, False))
        for label in view.nominal
    ]
    return DayAvailabilityResponse(
        date=date,
        barber_id=scope.barber_id,
        is_holiday=view.is_holiday,
        slots=slots,
    )


@router.get("/slot", response_model=SlotCheckResponse)
async def slot_availability(
    date: date,
    time: str,
    scope: Scope = Depends(get_scope),
    availability: AvailabilityService = Depends(get_availability),
):
    try:
        label = TimeLabel.parse(time)
    except ValueError as exc:
        raise HTTPException(status_code=422, detail=str(exc))

    available = await availability.is_available(date, label, scope)
    return SlotCheckResponse(
        date=date,
        time=label,
        barber_id=scope.barber_id,
        available=available,
    )

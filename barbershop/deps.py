# barbershop/deps.py

from typing import Optional

from fastapi import HTTPException, Request
from sqlmodel import Session

from .core import AvailabilityService, Scope


# Dependency: one session per request
def get_session(request: Request):
    with Session(request.app.state.engine) as session:
        yield session


def get_availability(request: Request) -> AvailabilityService:
    return request.app.state.availability


def get_scope(barber_id: Optional[int] = None) -> Scope:
    return Scope.of(barber_id)


def get_or_404(session: Session, model, key, name: str):
    obj = session.get(model, key)
    if obj is None:
        raise HTTPException(status_code=404, detail=f"{name} not found")
    return obj

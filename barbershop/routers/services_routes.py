# barbershop/routers/services_routes.py

from typing import List

from fastapi import APIRouter, Depends, HTTPException
from sqlalchemy.exc import IntegrityError
from sqlmodel import Session, select

from barbershop.deps import get_or_404, get_session
from barbershop.models import Service
from barbershop.schemas import ServiceCreate, ServicePublic, ServiceUpdate

router = APIRouter(
    prefix="/services",
    tags=["services"],
)


def _commit(session: Session, service: Service) -> Service:
    session.add(service)
    try:
        session.commit()
    except IntegrityError:
        session.rollback()
        raise HTTPException(status_code=409, detail="A service with that name already exists")
    session.refresh(service)
    return service


@router.post("", response_model=ServicePublic, status_code=201)
def create_service(
    service: ServiceCreate,
    session: Session = Depends(get_session),
):
    return _commit(session, Service(**service.model_dump()))


@router.get("", response_model=List[ServicePublic])
def list_services(session: Session = Depends(get_session)):
    return session.exec(select(Service).order_by(Service.name)).all()


@router.patch("/{service_id}", response_model=ServicePublic)
def update_service(
    service_id: int,
    changes: ServiceUpdate,
    session: Session = Depends(get_session),
):
    db_service = get_or_404(session, Service, service_id, "Service")
    for key, value in changes.model_dump(exclude_unset=True).items():
        setattr(db_service, key, value)
    return _commit(session, db_service)


@router.delete("/{service_id}", status_code=204)
def delete_service(
    service_id: int,
    session: Session = Depends(get_session),
):
    db_service = get_or_404(session, Service, service_id, "Service")
    session.delete(db_service)
    session.commit()

# barbershop/routers/reviews_routes.py

import logging
from datetime import datetime
from typing import List

from fastapi import APIRouter, Depends, HTTPException
from sqlalchemy import func
from sqlmodel import Session, select

from barbershop.deps import get_or_404, get_session
from barbershop.models import AdminSettings, Barber, Review
from barbershop.schemas import ReviewCreate, ReviewPublic, ReviewSummary, ReviewUpdate

logger = logging.getLogger(__name__)

router = APIRouter(
    prefix="/reviews",
    tags=["reviews"],
)


@router.post("", response_model=ReviewPublic, status_code=201)
def create_review(
    review: ReviewCreate,
    session: Session = Depends(get_session),
):
    settings = session.get(AdminSettings, 1)
    if settings is not None and not settings.reviews_enabled:
        raise HTTPException(status_code=403, detail="Reviews are disabled")
    if review.barber_id is not None:
        get_or_404(session, Barber, review.barber_id, "Barber")

    # new reviews wait for moderation
    db_review = Review(**review.model_dump(), is_approved=False, is_verified=False)
    session.add(db_review)
    session.commit()
    session.refresh(db_review)
    return db_review


@router.get("", response_model=List[ReviewPublic])
def list_reviews(
    include_pending: bool = False,
    session: Session = Depends(get_session),
):
    stmt = select(Review)
    if not include_pending:
        stmt = stmt.where(Review.is_approved == True)  # noqa: E712
    return session.exec(stmt.order_by(Review.created_at.desc())).all()


@router.get("/summary", response_model=ReviewSummary)
def review_summary(session: Session = Depends(get_session)):
    average, count = session.exec(
        select(func.avg(Review.rating), func.count(Review.id)).where(Review.is_approved == True)  # noqa: E712
    ).one()
    return ReviewSummary(average_rating=round(float(average or 0), 2), count=count)


@router.patch("/{review_id}", response_model=ReviewPublic)
def moderate_review(
    review_id: int,
    changes: ReviewUpdate,
    session: Session = Depends(get_session),
):
    db_review = get_or_404(session, Review, review_id, "Review")
    for key, value in changes.model_dump(exclude_unset=True).items():
        setattr(db_review, key, value)
    db_review.updated_at = datetime.now()

    session.add(db_review)
    session.commit()
    session.refresh(db_review)
    logger.info("Review %s moderated: approved=%s", review_id, db_review.is_approved)
    return db_review


@router.delete("/{review_id}", status_code=204)
def delete_review(
    review_id: int,
    session: Session = Depends(get_session),
):
    db_review = get_or_404(session, Review, review_id, "Review")
    session.delete(db_review)
    session.commit()

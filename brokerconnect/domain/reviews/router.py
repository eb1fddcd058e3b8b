"""Review router - FastAPI endpoints for post-visit reviews"""

from typing import Optional

from fastapi import APIRouter, Depends, status
from sqlalchemy.orm import Session

from ...auth import Identity, get_current_user
from ...database import get_db
from ...models import Review
from ..notifications import NotificationConsumer, NotificationService
from .schemas import BookingReviewStatus, ReviewCreate, ReviewResponse, ReviewSubmitResponse
from .service import ReviewService

router = APIRouter(prefix="/api/reviews", tags=["Reviews"])


def get_review_service(db: Session = Depends(get_db)) -> ReviewService:
    """Dependency injection for ReviewService"""
    return ReviewService(db, NotificationConsumer(NotificationService(db)))


def to_response(review: Optional[Review]) -> Optional[ReviewResponse]:
    if review is None:
        return None
    return ReviewResponse(
        id=review.id,
        bookingId=review.booking_id,
        clientId=review.client_id,
        brokerId=review.broker_id,
        propertyId=review.property_id,
        brokerRating=review.broker_rating,
        brokerComment=review.broker_comment,
        propertyRating=review.property_rating,
        propertyComment=review.property_comment,
        propertyTaken=review.property_taken,
        createdAt=review.created_at,
    )


@router.post("", response_model=ReviewSubmitResponse, status_code=status.HTTP_201_CREATED)
async def submit_review(
    data: ReviewCreate,
    current_user: Identity = Depends(get_current_user),
    service: ReviewService = Depends(get_review_service),
):
    """Review a completed visit; a booking can only be reviewed once"""
    review = service.submit_review(data, current_user)
    return ReviewSubmitResponse(message="Review submitted successfully", review=to_response(review))


@router.get("/booking/{booking_id}", response_model=BookingReviewStatus)
async def get_booking_review(
    booking_id: str,
    current_user: Identity = Depends(get_current_user),
    service: ReviewService = Depends(get_review_service),
):
    review = service.get_review_for_booking(booking_id, current_user)
    return BookingReviewStatus(hasReview=review is not None, review=to_response(review))

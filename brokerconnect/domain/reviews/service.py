"""Review service - the review gate for completed bookings"""

import logging
from typing import Optional

from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from ...auth import Identity
from ...errors import Conflict, Forbidden, InvalidTransition, NotFound, ValidationFailure
from ...events import EventPublisher, ReviewSubmitted
from ...models import Review
from .repository import ReviewRepository
from .schemas import ReviewCreate

logger = logging.getLogger(__name__)


class ReviewService:
    """
    One review per booking, submitted by the booking's client once the
    visit is completed. ``propertyTaken`` hides the property from that
    client's listing; other clients still see it.
    """

    def __init__(self, db: Session, events: EventPublisher):
        self.db = db
        self.repo = ReviewRepository()
        self.events = events

    def submit_review(self, data: ReviewCreate, user: Identity) -> Review:
        booking = self.repo.get_booking(self.db, data.bookingId)
        if not booking:
            raise NotFound("Booking not found")
        if booking.client_id != user.id:
            raise Forbidden("Only the client who made the booking can review it")
        if booking.broker_id != data.brokerId or booking.property_id != data.propertyId:
            raise ValidationFailure("brokerId and propertyId must match the booking")
        if booking.status != "completed":
            raise InvalidTransition(f"Only completed visits can be reviewed (booking is {booking.status})")

        if self.repo.get_review_for_booking(self.db, booking.id):
            raise Conflict("A review has already been submitted for this booking")

        try:
            review = self.repo.create_review(
                self.db,
                booking_id=booking.id,
                client_id=user.id,
                broker_id=booking.broker_id,
                property_id=booking.property_id,
                broker_rating=data.brokerRating,
                broker_comment=data.brokerComment,
                property_rating=data.propertyRating,
                property_comment=data.propertyComment,
                property_taken=data.propertyTaken,
            )
        except IntegrityError as e:
            # Lost a race with a concurrent submission for the same booking
            self.db.rollback()
            logger.warning(f"⚠️ Duplicate review for booking {booking.id}: {e}")
            raise Conflict("A review has already been submitted for this booking") from e

        profile = self.repo.refresh_broker_rating(self.db, booking.broker_id)
        logger.info(
            f"⭐ Review {review.id} for booking {booking.id}; broker rating now "
            f"{profile.rating if profile else 'n/a'}"
        )

        try:
            self.events.publish(
                ReviewSubmitted(
                    review_id=review.id,
                    booking_id=booking.id,
                    broker_id=booking.broker_id,
                    client_name=booking.client_name,
                    property_title=booking.property.title if booking.property else "the property",
                    broker_rating=review.broker_rating,
                )
            )
        except Exception as e:
            logger.error(f"❌ Failed to publish ReviewSubmitted: {e}")

        return review

    def get_review_for_booking(self, booking_id: str, user: Identity) -> Optional[Review]:
        """The booking's review, visible to the booking's client and broker"""
        booking = self.repo.get_booking(self.db, booking_id)
        if not booking:
            raise NotFound("Booking not found")
        if user.id not in (booking.client_id, booking.broker_id) and not user.is_admin:
            raise Forbidden("This booking is assigned to another user")
        return self.repo.get_review_for_booking(self.db, booking_id)

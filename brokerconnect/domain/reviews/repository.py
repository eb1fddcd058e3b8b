"""Review repository - Database operations for reviews"""

from typing import Optional

from sqlalchemy import func
from sqlalchemy.orm import Session

from ...models import Booking, BrokerProfile, Review


class ReviewRepository:
    """Repository for review database operations"""

    @staticmethod
    def get_booking(db: Session, booking_id: str) -> Optional[Booking]:
        return db.query(Booking).filter(Booking.id == booking_id).first()

    @staticmethod
    def get_review_for_booking(db: Session, booking_id: str) -> Optional[Review]:
        return db.query(Review).filter(Review.booking_id == booking_id).first()

    @staticmethod
    def create_review(db: Session, **review_data) -> Review:
        """Insert a review; the unique constraint on booking_id rejects duplicates"""
        review = Review(**review_data)
        db.add(review)
        db.commit()
        db.refresh(review)
        return review

    @staticmethod
    def refresh_broker_rating(db: Session, broker_id: str) -> Optional[BrokerProfile]:
        """Recompute a broker's mean rating and review count from all reviews"""
        profile = db.query(BrokerProfile).filter(BrokerProfile.user_id == broker_id).first()
        if not profile:
            return None

        average, count = (
            db.query(func.avg(Review.broker_rating), func.count(Review.id))
            .filter(Review.broker_id == broker_id)
            .one()
        )
        profile.rating = round(float(average or 0), 2)
        profile.total_reviews = count or 0
        db.commit()
        db.refresh(profile)
        return profile

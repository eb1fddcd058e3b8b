"""Property repository - Database operations for listings"""

from typing import Optional

from sqlalchemy import func, select
from sqlalchemy.orm import Session

from ...models import BrokerProfile, Message, Property, Review, User
from .schemas import PropertyFilters


class PropertyRepository:
    """Repository for property database operations"""

    @staticmethod
    def create_property(db: Session, broker_id: str, **property_data) -> Property:
        prop = Property(broker_id=broker_id, **property_data)
        db.add(prop)
        db.commit()
        db.refresh(prop)
        return prop

    @staticmethod
    def get_user(db: Session, user_id: str) -> Optional[User]:
        return db.query(User).filter(User.id == user_id).first()

    @staticmethod
    def get_property_detail(db: Session, property_id: str) -> Optional[tuple]:
        """Property with its broker user and broker profile"""
        return (
            db.query(Property, User, BrokerProfile)
            .join(User, Property.broker_id == User.id)
            .outerjoin(BrokerProfile, BrokerProfile.user_id == User.id)
            .filter(Property.id == property_id)
            .first()
        )

    @staticmethod
    def search_available(
        db: Session, filters: PropertyFilters, exclude_taken_by: Optional[str] = None
    ) -> list[tuple]:
        """
        Available properties with rating aggregates.

        Ratings come from two independent aggregates over reviews, one
        grouped by property and one grouped by broker, each joined on its
        own key so neither inflates the other's counts.
        """
        property_stats = (
            select(
                Review.property_id.label("property_id"),
                func.avg(Review.property_rating).label("avg_rating"),
                func.count(Review.property_rating).label("review_count"),
            )
            .group_by(Review.property_id)
            .subquery()
        )
        broker_stats = (
            select(
                Review.broker_id.label("broker_id"),
                func.avg(Review.broker_rating).label("avg_rating"),
                func.count(Review.broker_rating).label("review_count"),
            )
            .group_by(Review.broker_id)
            .subquery()
        )

        query = (
            db.query(
                Property,
                User.name,
                User.phone,
                User.email,
                property_stats.c.avg_rating,
                property_stats.c.review_count,
                broker_stats.c.avg_rating,
                broker_stats.c.review_count,
            )
            .join(User, Property.broker_id == User.id)
            .outerjoin(property_stats, property_stats.c.property_id == Property.id)
            .outerjoin(broker_stats, broker_stats.c.broker_id == Property.broker_id)
            .filter(Property.status == "available")
        )

        if exclude_taken_by:
            taken = select(Review.property_id).where(
                Review.client_id == exclude_taken_by, Review.property_taken.is_(True)
            )
            query = query.filter(Property.id.not_in(taken))

        if filters.category:
            query = query.filter(Property.category == filters.category)
        if filters.district:
            query = query.filter(Property.district == filters.district)
        if filters.minPrice is not None:
            query = query.filter(Property.price >= filters.minPrice)
        if filters.maxPrice is not None:
            query = query.filter(Property.price <= filters.maxPrice)
        if filters.rooms is not None:
            query = query.filter(Property.rooms >= filters.rooms)

        return query.order_by(Property.created_at.desc()).all()

    @staticmethod
    def get_broker_properties(db: Session, broker_id: str) -> list[tuple]:
        """A broker's listings with the number of messages about each"""
        message_counts = (
            select(Message.property_id.label("property_id"), func.count(Message.id).label("message_count"))
            .group_by(Message.property_id)
            .subquery()
        )
        return (
            db.query(Property, message_counts.c.message_count)
            .outerjoin(message_counts, message_counts.c.property_id == Property.id)
            .filter(Property.broker_id == broker_id)
            .order_by(Property.created_at.desc())
            .all()
        )

    @staticmethod
    def increment_views(db: Session, property_id: str) -> int:
        updated = (
            db.query(Property)
            .filter(Property.id == property_id)
            .update({Property.views: Property.views + 1}, synchronize_session=False)
        )
        db.commit()
        return updated

    @staticmethod
    def get_taken_properties(db: Session, client_id: str) -> list[tuple]:
        """Properties the client marked as taken, with the review that did it"""
        return (
            db.query(Property, User, Review)
            .join(User, Property.broker_id == User.id)
            .join(Review, Review.property_id == Property.id)
            .filter(Review.client_id == client_id, Review.property_taken.is_(True))
            .order_by(Review.created_at.desc())
            .all()
        )

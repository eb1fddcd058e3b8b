"""Booking repository - Database operations for bookings"""

from typing import Optional

from sqlalchemy.orm import Session

from ...models import Booking, Property, User


class BookingRepository:
    """Repository for booking database operations"""

    @staticmethod
    def get_booking_by_id(db: Session, booking_id: str) -> Optional[Booking]:
        return db.query(Booking).filter(Booking.id == booking_id).first()

    @staticmethod
    def create_booking(db: Session, client_id: str, **booking_data) -> Booking:
        """Create a new booking in pending status"""
        booking = Booking(client_id=client_id, status="pending", **booking_data)
        db.add(booking)
        db.commit()
        db.refresh(booking)
        return booking

    @staticmethod
    def save(db: Session, booking: Booking) -> Booking:
        """Commit pending changes to a booking as one update"""
        db.commit()
        db.refresh(booking)
        return booking

    @staticmethod
    def get_property(db: Session, property_id: str) -> Optional[Property]:
        return db.query(Property).filter(Property.id == property_id).first()

    @staticmethod
    def get_client_bookings(db: Session, client_id: str) -> list[tuple]:
        """Client's bookings joined with property and broker display fields"""
        return (
            db.query(Booking, Property.title, Property.district, Property.area, User.name, User.phone)
            .join(Property, Booking.property_id == Property.id)
            .join(User, Booking.broker_id == User.id)
            .filter(Booking.client_id == client_id)
            .order_by(Booking.visit_date.desc(), Booking.visit_time.desc())
            .all()
        )

    @staticmethod
    def get_broker_bookings(db: Session, broker_id: str) -> list[tuple]:
        """Broker's bookings joined with property display fields"""
        return (
            db.query(Booking, Property.title, Property.district, Property.area)
            .join(Property, Booking.property_id == Property.id)
            .filter(Booking.broker_id == broker_id)
            .order_by(Booking.visit_date.desc(), Booking.visit_time.desc())
            .all()
        )

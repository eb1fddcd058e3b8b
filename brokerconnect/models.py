import uuid
from datetime import datetime, timezone

from sqlalchemy import (
    JSON,
    Boolean,
    Column,
    Date,
    DateTime,
    Float,
    ForeignKey,
    Integer,
    Numeric,
    String,
    Text,
    Time,
    UniqueConstraint,
)
from sqlalchemy.orm import relationship

from .database import Base


def generate_id():
    """Generate a UUID string primary key"""
    return str(uuid.uuid4())


def utcnow():
    """Naive UTC timestamp with microseconds, so newest-first ordering is stable"""
    return datetime.now(timezone.utc).replace(tzinfo=None)


class User(Base):
    __tablename__ = "users"

    id = Column(String(36), primary_key=True, default=generate_id)
    name = Column(String(255), nullable=False)
    email = Column(String(255), unique=True, index=True, nullable=False)
    phone = Column(String(20), nullable=True)
    password_hash = Column(String(255), nullable=False)
    # client, broker, admin - fixed at registration
    role = Column(String(20), nullable=False, default="client", index=True)
    is_verified = Column(Boolean, default=False, nullable=False)

    created_at = Column(DateTime, default=utcnow)
    updated_at = Column(DateTime, default=utcnow, onupdate=utcnow)

    broker_profile = relationship(
        "BrokerProfile", back_populates="user", uselist=False, cascade="all, delete-orphan"
    )
    properties = relationship("Property", back_populates="broker")


class BrokerProfile(Base):
    """Broker-only details, created together with a broker user"""

    __tablename__ = "brokers"

    user_id = Column(String(36), ForeignKey("users.id"), primary_key=True)
    license_number = Column(String(100), nullable=False)
    national_id = Column(String(20), nullable=True)
    # pending → verified | rejected (admin verification flow)
    verification_status = Column(String(20), default="pending", nullable=False)
    rating = Column(Float, default=0.0, nullable=False)
    total_reviews = Column(Integer, default=0, nullable=False)
    commission_pct = Column(Float, default=5.0, nullable=False)

    user = relationship("User", back_populates="broker_profile")


class Property(Base):
    __tablename__ = "properties"

    id = Column(String(36), primary_key=True, default=generate_id)
    title = Column(String(255), nullable=False)
    description = Column(Text, nullable=True)
    category = Column(String(50), nullable=False, index=True)  # sale, rental
    price = Column(Numeric(15, 2), nullable=False)
    currency = Column(String(10), default="UGX", nullable=False)

    # Location
    district = Column(String(100), nullable=True, index=True)
    area = Column(String(100), nullable=True)
    address = Column(String(255), nullable=True)
    latitude = Column(Numeric(10, 8), nullable=True)
    longitude = Column(Numeric(11, 8), nullable=True)

    # Features
    size = Column(Float, nullable=True)
    rooms = Column(Integer, nullable=True)
    bathrooms = Column(Integer, nullable=True)
    amenities = Column(JSON, default=list)
    images = Column(JSON, default=list)  # URLs only
    videos = Column(JSON, default=list)  # URLs only

    # available, pending, sold, rented
    status = Column(String(20), default="available", nullable=False, index=True)
    broker_id = Column(String(36), ForeignKey("users.id"), nullable=False, index=True)
    is_verified = Column(Boolean, default=True, nullable=False)
    views = Column(Integer, default=0, nullable=False)

    created_at = Column(DateTime, default=utcnow)
    updated_at = Column(DateTime, default=utcnow, onupdate=utcnow)

    broker = relationship("User", back_populates="properties")


class Booking(Base):
    """A property visit request between a client and a broker"""

    __tablename__ = "bookings"

    id = Column(String(36), primary_key=True, default=generate_id)
    client_id = Column(String(36), ForeignKey("users.id"), nullable=False, index=True)
    broker_id = Column(String(36), ForeignKey("users.id"), nullable=False, index=True)
    property_id = Column(String(36), ForeignKey("properties.id"), nullable=False)

    # Overwritten on every reschedule / counter-proposal
    visit_date = Column(Date, nullable=False)
    visit_time = Column(Time, nullable=False)
    message = Column(Text, nullable=True)

    client_name = Column(String(255), nullable=False)
    client_phone = Column(String(20), nullable=False)

    # See domain/bookings/state_machine.py for the transition table
    status = Column(String(30), default="pending", nullable=False, index=True)

    created_at = Column(DateTime, default=utcnow)
    updated_at = Column(DateTime, default=utcnow, onupdate=utcnow)

    property = relationship("Property")
    client = relationship("User", foreign_keys=[client_id])
    broker = relationship("User", foreign_keys=[broker_id])


class Message(Base):
    __tablename__ = "messages"

    id = Column(String(36), primary_key=True, default=generate_id)
    sender_id = Column(String(36), ForeignKey("users.id"), nullable=False, index=True)
    receiver_id = Column(String(36), ForeignKey("users.id"), nullable=False, index=True)
    property_id = Column(String(36), ForeignKey("properties.id"), nullable=True)
    text = Column(Text, nullable=False)
    is_read = Column(Boolean, default=False, nullable=False)
    created_at = Column(DateTime, default=utcnow, index=True)

    sender = relationship("User", foreign_keys=[sender_id])


class Notification(Base):
    __tablename__ = "notifications"

    id = Column(String(36), primary_key=True, default=generate_id)
    user_id = Column(String(36), ForeignKey("users.id"), nullable=False, index=True)
    type = Column(String(30), nullable=False)  # message, booking, booking_update
    title = Column(String(255), nullable=False)
    text = Column(Text, nullable=False)
    related_id = Column(String(36), nullable=True)
    is_read = Column(Boolean, default=False, nullable=False)
    created_at = Column(DateTime, default=utcnow, index=True)


class Review(Base):
    __tablename__ = "reviews"
    __table_args__ = (UniqueConstraint("booking_id", name="unique_booking_review"),)

    id = Column(String(36), primary_key=True, default=generate_id)
    booking_id = Column(String(36), ForeignKey("bookings.id"), nullable=False)
    client_id = Column(String(36), ForeignKey("users.id"), nullable=False, index=True)
    broker_id = Column(String(36), ForeignKey("users.id"), nullable=False, index=True)
    property_id = Column(String(36), ForeignKey("properties.id"), nullable=False, index=True)

    broker_rating = Column(Integer, nullable=False)  # 1-5
    broker_comment = Column(Text, nullable=True)
    property_rating = Column(Integer, nullable=False)  # 1-5
    property_comment = Column(Text, nullable=True)
    # Hides the property from this client's available listing
    property_taken = Column(Boolean, default=False, nullable=False)

    created_at = Column(DateTime, default=utcnow)

"""
Domain events published by the booking, messaging and review services.

Services receive an EventPublisher in their constructor and call publish()
after their own write has been committed. Subscribers (notifications) must
not raise back into the publisher.
"""

from dataclasses import dataclass
from datetime import date, time
from typing import Optional, Protocol


class EventPublisher(Protocol):
    def publish(self, event: "DomainEvent") -> None: ...


@dataclass(frozen=True)
class DomainEvent:
    pass


@dataclass(frozen=True)
class BookingEvent(DomainEvent):
    booking_id: str
    client_id: str
    broker_id: str
    client_name: str
    property_title: str
    visit_date: date
    visit_time: time


@dataclass(frozen=True)
class BookingRequested(BookingEvent):
    pass


@dataclass(frozen=True)
class BookingStatusChanged(BookingEvent):
    previous_status: str = ""
    status: str = ""


@dataclass(frozen=True)
class RescheduleProposed(BookingEvent):
    note: Optional[str] = None


@dataclass(frozen=True)
class RescheduleAccepted(BookingEvent):
    pass


@dataclass(frozen=True)
class CounterProposed(BookingEvent):
    note: Optional[str] = None


@dataclass(frozen=True)
class MessageSent(DomainEvent):
    message_id: str
    sender_id: str
    sender_name: str
    receiver_id: str
    property_title: Optional[str] = None


@dataclass(frozen=True)
class ReviewSubmitted(DomainEvent):
    review_id: str
    booking_id: str
    broker_id: str
    client_name: str
    property_title: str
    broker_rating: int


"""Booking service - the booking state machine applied to stored bookings"""

import logging

from sqlalchemy.orm import Session

from ...auth import Identity
from ...errors import Forbidden, NotFound, ValidationFailure
from ...events import (
    BookingRequested,
    BookingStatusChanged,
    CounterProposed,
    DomainEvent,
    EventPublisher,
    RescheduleAccepted,
    RescheduleProposed,
)
from ...models import Booking
from .repository import BookingRepository
from .schemas import BookingCreate, RescheduleRequest, RescheduleResponseRequest
from .state_machine import BookingAction, Party, action_for_status, allowed_actions, next_status

logger = logging.getLogger(__name__)


class BookingService:
    """
    Service layer for the booking lifecycle.

    Every transition is a single update + commit of the booking row. The
    matching domain event is published afterwards; a failure to publish is
    logged and never undoes the transition. A crash between the two leaves
    a transitioned booking without a notification.
    """

    def __init__(self, db: Session, events: EventPublisher):
        self.db = db
        self.repo = BookingRepository()
        self.events = events

    # ------------------------------------------------------------------
    # Queries
    # ------------------------------------------------------------------

    def get_client_bookings(self, user: Identity) -> list[tuple]:
        return self.repo.get_client_bookings(self.db, user.id)

    def get_broker_bookings(self, user: Identity) -> list[tuple]:
        return self.repo.get_broker_bookings(self.db, user.id)

    def get_booking(self, booking_id: str, user: Identity) -> Booking:
        """A booking visible to its client, its broker or an admin"""
        booking = self._get_or_404(booking_id)
        if not user.is_admin:
            self.party_of(booking, user)
        return booking

    def party_of(self, booking: Booking, user: Identity) -> Party:
        """Which side of the booking the caller is on"""
        if user.id == booking.broker_id:
            return Party.BROKER
        if user.id == booking.client_id:
            return Party.CLIENT
        logger.warning(f"⚠️ User {user.id} attempted to access booking {booking.id}")
        raise Forbidden("This booking is assigned to another user")

    def allowed_actions_for(self, booking: Booking, user: Identity) -> list[str]:
        if user.id not in (booking.broker_id, booking.client_id):
            return []
        return [a.value for a in allowed_actions(booking.status, self.party_of(booking, user))]

    # ------------------------------------------------------------------
    # Transitions
    # ------------------------------------------------------------------

    def create_booking(self, data: BookingCreate, user: Identity) -> Booking:
        """Client requests a visit: (none) → pending, broker notified"""
        if not user.is_client:
            raise Forbidden("Only clients can request property visits")

        prop = self.repo.get_property(self.db, data.propertyId)
        if not prop:
            raise NotFound("Property not found")
        if prop.broker_id != data.brokerId:
            raise ValidationFailure("Property is not listed by this broker")
        if prop.status != "available":
            raise ValidationFailure(f"Property is {prop.status} and cannot be visited")

        logger.info(f"📥 Creating booking for client {user.id} on property {prop.id}")
        booking = self.repo.create_booking(
            self.db,
            user.id,
            broker_id=data.brokerId,
            property_id=data.propertyId,
            visit_date=data.visitDate,
            visit_time=data.visitTime,
            client_name=data.clientName,
            client_phone=data.clientPhone,
            message=data.message,
        )

        self._publish(BookingRequested(**self._event_fields(booking)))
        return booking

    def update_status(self, booking_id: str, status: str, user: Identity) -> Booking:
        """Broker confirms, cancels or completes a booking"""
        action = action_for_status(status)
        booking, previous = self._transition(booking_id, action, user)
        self._publish(
            BookingStatusChanged(
                **self._event_fields(booking), previous_status=previous, status=booking.status
            )
        )
        return booking

    def propose_reschedule(self, booking_id: str, data: RescheduleRequest, user: Identity) -> Booking:
        """Broker proposes a new visit time; the previous time is overwritten"""
        booking, _ = self._transition(
            booking_id,
            BookingAction.PROPOSE_RESCHEDULE,
            user,
            visit_date=data.visitDate,
            visit_time=data.visitTime,
            message=data.message,
        )
        self._publish(RescheduleProposed(**self._event_fields(booking), note=data.message))
        return booking

    def respond_to_reschedule(
        self, booking_id: str, data: RescheduleResponseRequest, user: Identity
    ) -> Booking:
        """Client accepts the broker's proposal or counter-proposes a new time"""
        if data.action == "accept":
            booking, _ = self._transition(booking_id, BookingAction.ACCEPT_RESCHEDULE, user)
            self._publish(RescheduleAccepted(**self._event_fields(booking)))
            return booking

        booking, _ = self._transition(
            booking_id,
            BookingAction.COUNTER_PROPOSE,
            user,
            visit_date=data.visitDate,
            visit_time=data.visitTime,
            message=data.message,
        )
        self._publish(CounterProposed(**self._event_fields(booking), note=data.message))
        return booking

    # ------------------------------------------------------------------
    # Internals
    # ------------------------------------------------------------------

    def _get_or_404(self, booking_id: str) -> Booking:
        booking = self.repo.get_booking_by_id(self.db, booking_id)
        if not booking:
            raise NotFound("Booking not found")
        return booking

    def _transition(
        self, booking_id: str, action: BookingAction, user: Identity, **changes
    ) -> tuple[Booking, str]:
        """Validate and apply one transition. Returns (booking, previous status)."""
        booking = self._get_or_404(booking_id)
        party = self.party_of(booking, user)
        target = next_status(booking.status, action, party)

        previous = booking.status
        for key, value in changes.items():
            setattr(booking, key, value)
        booking.status = target.value
        booking = self.repo.save(self.db, booking)

        logger.info(f"🔁 Booking {booking.id}: {previous} → {booking.status} ({action.value} by {party.value})")
        return booking, previous

    def _event_fields(self, booking: Booking) -> dict:
        return {
            "booking_id": booking.id,
            "client_id": booking.client_id,
            "broker_id": booking.broker_id,
            "client_name": booking.client_name,
            "property_title": booking.property.title if booking.property else "the property",
            "visit_date": booking.visit_date,
            "visit_time": booking.visit_time,
        }

    def _publish(self, event: DomainEvent) -> None:
        try:
            self.events.publish(event)
        except Exception as e:
            logger.error(f"❌ Failed to publish {type(event).__name__}: {e}")

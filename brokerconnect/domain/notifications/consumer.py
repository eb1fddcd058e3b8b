"""
Notification consumer - turns domain events into user notifications.

Every handled event produces exactly one notification. The consumer never
raises: a failed write is logged by NotificationService.emit and dropped.
"""

import logging
from datetime import date, time

from ...events import (
    BookingRequested,
    BookingStatusChanged,
    CounterProposed,
    DomainEvent,
    MessageSent,
    RescheduleAccepted,
    RescheduleProposed,
    ReviewSubmitted,
)
from .service import NotificationService

logger = logging.getLogger(__name__)


def format_visit(visit_date: date, visit_time: time) -> tuple[str, str]:
    return visit_date.isoformat(), visit_time.strftime("%H:%M")


class NotificationConsumer:
    """EventPublisher implementation backed by NotificationService"""

    def __init__(self, notifications: NotificationService):
        self.notifications = notifications
        self._handlers = {
            BookingRequested: self._on_booking_requested,
            BookingStatusChanged: self._on_status_changed,
            RescheduleProposed: self._on_reschedule_proposed,
            RescheduleAccepted: self._on_reschedule_accepted,
            CounterProposed: self._on_counter_proposed,
            MessageSent: self._on_message_sent,
            ReviewSubmitted: self._on_review_submitted,
        }

    def publish(self, event: DomainEvent) -> None:
        handler = self._handlers.get(type(event))
        if handler is None:
            logger.warning(f"⚠️ No notification handler for {type(event).__name__}")
            return
        try:
            handler(event)
        except Exception as e:
            logger.error(f"❌ Notification handler for {type(event).__name__} failed: {e}")

    def _on_booking_requested(self, event: BookingRequested) -> None:
        visit_date, visit_time = format_visit(event.visit_date, event.visit_time)
        self.notifications.emit(
            event.broker_id,
            "booking",
            "New Property Visit Request",
            f"{event.client_name} wants to visit {event.property_title} on {visit_date} at {visit_time}",
            event.booking_id,
        )

    def _on_status_changed(self, event: BookingStatusChanged) -> None:
        if event.status == "confirmed" and event.previous_status == "counter_pending":
            text = f"Your proposed time for {event.property_title} has been accepted by the broker"
        else:
            text = f"Your visit request for {event.property_title} has been {event.status}"
        self.notifications.emit(
            event.client_id, "booking_update", "Booking Status Updated", text, event.booking_id
        )

    def _on_reschedule_proposed(self, event: RescheduleProposed) -> None:
        visit_date, visit_time = format_visit(event.visit_date, event.visit_time)
        self.notifications.emit(
            event.client_id,
            "booking_update",
            "Visit Rescheduled - Confirmation Needed",
            f"Your visit for {event.property_title} has been rescheduled to {visit_date} at {visit_time}. "
            "Please confirm or propose a new time.",
            event.booking_id,
        )

    def _on_reschedule_accepted(self, event: RescheduleAccepted) -> None:
        self.notifications.emit(
            event.broker_id,
            "booking_update",
            "Reschedule Accepted",
            f"{event.client_name} accepted the new time for {event.property_title}",
            event.booking_id,
        )

    def _on_counter_proposed(self, event: CounterProposed) -> None:
        visit_date, visit_time = format_visit(event.visit_date, event.visit_time)
        self.notifications.emit(
            event.broker_id,
            "booking_update",
            "New Time Proposed",
            f"{event.client_name} proposed a new time for {event.property_title}: {visit_date} at {visit_time}",
            event.booking_id,
        )

    def _on_message_sent(self, event: MessageSent) -> None:
        about = f" about {event.property_title}" if event.property_title else ""
        self.notifications.emit(
            event.receiver_id,
            "message",
            "New Message",
            f"{event.sender_name} sent you a message{about}",
            event.message_id,
        )

    def _on_review_submitted(self, event: ReviewSubmitted) -> None:
        self.notifications.emit(
            event.broker_id,
            "booking_update",
            "New Review",
            f"{event.client_name} rated your visit for {event.property_title} {event.broker_rating}/5",
            event.booking_id,
        )

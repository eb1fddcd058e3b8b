"""Bookings domain - Property visit requests and the reschedule negotiation"""

from .router import router
from .service import BookingService

__all__ = ["router", "BookingService"]

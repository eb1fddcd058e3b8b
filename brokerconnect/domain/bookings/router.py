"""Booking router - FastAPI endpoints for visit bookings"""

import logging

from fastapi import APIRouter, Depends, status
from sqlalchemy.orm import Session

from ...auth import Identity, get_current_user
from ...database import get_db
from ...models import Booking
from ..notifications import NotificationConsumer, NotificationService
from .schemas import (
    BookingActionResponse,
    BookingCreate,
    BookingResponse,
    BookingStatusUpdate,
    RescheduleRequest,
    RescheduleResponseRequest,
)
from .service import BookingService

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/bookings", tags=["Bookings"])


def get_booking_service(db: Session = Depends(get_db)) -> BookingService:
    """Dependency injection for BookingService, publishing to notifications"""
    return BookingService(db, NotificationConsumer(NotificationService(db)))


def to_response(booking: Booking, service: BookingService, user: Identity, **display) -> BookingResponse:
    return BookingResponse(
        id=booking.id,
        clientId=booking.client_id,
        brokerId=booking.broker_id,
        propertyId=booking.property_id,
        visitDate=booking.visit_date,
        visitTime=booking.visit_time,
        clientName=booking.client_name,
        clientPhone=booking.client_phone,
        message=booking.message,
        status=booking.status,
        createdAt=booking.created_at,
        updatedAt=booking.updated_at,
        allowedActions=service.allowed_actions_for(booking, user),
        **display,
    )


# ============================================================================
# LISTS
# ============================================================================


@router.get("/client", response_model=list[BookingResponse])
async def get_client_bookings(
    current_user: Identity = Depends(get_current_user),
    service: BookingService = Depends(get_booking_service),
):
    """Bookings made by the current user, latest visit first"""
    return [
        to_response(
            booking,
            service,
            current_user,
            propertyTitle=title,
            district=district,
            area=area,
            brokerName=broker_name,
            brokerPhone=broker_phone,
        )
        for booking, title, district, area, broker_name, broker_phone in service.get_client_bookings(
            current_user
        )
    ]


@router.get("/broker", response_model=list[BookingResponse])
async def get_broker_bookings(
    current_user: Identity = Depends(get_current_user),
    service: BookingService = Depends(get_booking_service),
):
    """Bookings assigned to the current broker, latest visit first"""
    return [
        to_response(booking, service, current_user, propertyTitle=title, district=district, area=area)
        for booking, title, district, area in service.get_broker_bookings(current_user)
    ]


@router.get("/{booking_id}", response_model=BookingResponse)
async def get_booking(
    booking_id: str,
    current_user: Identity = Depends(get_current_user),
    service: BookingService = Depends(get_booking_service),
):
    booking = service.get_booking(booking_id, current_user)
    return to_response(
        booking,
        service,
        current_user,
        propertyTitle=booking.property.title if booking.property else None,
        district=booking.property.district if booking.property else None,
        area=booking.property.area if booking.property else None,
    )


# ============================================================================
# TRANSITIONS
# ============================================================================


@router.post("", response_model=BookingActionResponse, status_code=status.HTTP_201_CREATED)
async def create_booking(
    data: BookingCreate,
    current_user: Identity = Depends(get_current_user),
    service: BookingService = Depends(get_booking_service),
):
    """Request a property visit (clients only)"""
    booking = service.create_booking(data, current_user)
    return BookingActionResponse(
        message="Booking created successfully",
        booking=to_response(booking, service, current_user),
    )


@router.put("/{booking_id}/status", response_model=BookingActionResponse)
async def update_booking_status(
    booking_id: str,
    data: BookingStatusUpdate,
    current_user: Identity = Depends(get_current_user),
    service: BookingService = Depends(get_booking_service),
):
    """Confirm, cancel or complete a booking (assigned broker only)"""
    booking = service.update_status(booking_id, data.status, current_user)
    return BookingActionResponse(
        message="Booking status updated",
        booking=to_response(booking, service, current_user),
    )


@router.put("/{booking_id}/reschedule", response_model=BookingActionResponse)
async def reschedule_booking(
    booking_id: str,
    data: RescheduleRequest,
    current_user: Identity = Depends(get_current_user),
    service: BookingService = Depends(get_booking_service),
):
    """Propose a new visit time (assigned broker only)"""
    booking = service.propose_reschedule(booking_id, data, current_user)
    return BookingActionResponse(
        message="Reschedule proposal sent to client",
        booking=to_response(booking, service, current_user),
    )


@router.put("/{booking_id}/reschedule-response", response_model=BookingActionResponse)
async def respond_to_reschedule(
    booking_id: str,
    data: RescheduleResponseRequest,
    current_user: Identity = Depends(get_current_user),
    service: BookingService = Depends(get_booking_service),
):
    """Accept or counter the broker's proposal (assigned client only)"""
    booking = service.respond_to_reschedule(booking_id, data, current_user)
    message = "Reschedule accepted" if data.action == "accept" else "Counter-proposal sent to broker"
    return BookingActionResponse(message=message, booking=to_response(booking, service, current_user))

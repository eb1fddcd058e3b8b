"""Notification router - FastAPI endpoints for polling notifications"""

import logging

from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from ...auth import Identity, get_current_user
from ...database import get_db
from ...models import Notification
from .schemas import MarkAllReadResponse, NotificationResponse, UnreadCountResponse
from .service import NotificationService

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/notifications", tags=["Notifications"])


def get_notification_service(db: Session = Depends(get_db)) -> NotificationService:
    """Dependency injection for NotificationService"""
    return NotificationService(db)


def to_response(n: Notification) -> NotificationResponse:
    return NotificationResponse(
        id=n.id,
        userId=n.user_id,
        type=n.type,
        title=n.title,
        message=n.text,
        relatedId=n.related_id,
        isRead=n.is_read,
        createdAt=n.created_at,
    )


@router.get("", response_model=list[NotificationResponse])
async def get_notifications(
    current_user: Identity = Depends(get_current_user),
    service: NotificationService = Depends(get_notification_service),
):
    """Latest 20 notifications for the current user, newest first"""
    return [to_response(n) for n in service.list_latest(current_user.id)]


@router.get("/unread-count", response_model=UnreadCountResponse)
async def get_unread_count(
    current_user: Identity = Depends(get_current_user),
    service: NotificationService = Depends(get_notification_service),
):
    return UnreadCountResponse(count=service.unread_count(current_user.id))


@router.put("/read-all", response_model=MarkAllReadResponse)
async def mark_all_read(
    current_user: Identity = Depends(get_current_user),
    service: NotificationService = Depends(get_notification_service),
):
    updated = service.mark_all_read(current_user.id)
    return MarkAllReadResponse(message="Notifications marked as read", updated=updated)


@router.put("/{notification_id}/read", response_model=NotificationResponse)
async def mark_notification_read(
    notification_id: str,
    current_user: Identity = Depends(get_current_user),
    service: NotificationService = Depends(get_notification_service),
):
    """Mark one of the current user's notifications as read"""
    return to_response(service.mark_read(notification_id, current_user.id))

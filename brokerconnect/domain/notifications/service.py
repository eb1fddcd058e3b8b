"""Notification service - write path (emitter) and read side for notifications"""

import logging
from typing import Optional

from sqlalchemy.orm import Session

from ...config import NOTIFICATION_PAGE_SIZE
from ...errors import Forbidden, NotFound
from ...models import Notification
from .repository import NotificationRepository

logger = logging.getLogger(__name__)

NOTIFICATION_TYPES = ("message", "booking", "booking_update")


class NotificationService:
    """Service layer for notification business logic"""

    def __init__(self, db: Session):
        self.db = db
        self.repo = NotificationRepository()

    def emit(
        self,
        user_id: str,
        type: str,
        title: str,
        text: str,
        related_id: Optional[str] = None,
    ) -> Optional[Notification]:
        """
        Persist a notification for user_id.

        Fails silently: any error is logged and the session rolled back,
        so callers can treat emission as fire-and-forget.
        """
        try:
            if type not in NOTIFICATION_TYPES:
                raise ValueError(f"Unknown notification type: {type}")
            notification = self.repo.create_notification(
                self.db,
                user_id=user_id,
                type=type,
                title=title,
                text=text,
                related_id=related_id,
            )
            logger.info(f"🔔 {type} notification {notification.id} for user {user_id}: {title}")
            return notification
        except Exception as e:
            self.db.rollback()
            logger.error(f"❌ Failed to create {type} notification for user {user_id}: {e}")
            return None

    def list_latest(self, user_id: str) -> list[Notification]:
        return self.repo.get_latest(self.db, user_id, NOTIFICATION_PAGE_SIZE)

    def mark_read(self, notification_id: str, user_id: str) -> Notification:
        notification = self.repo.get_by_id(self.db, notification_id)
        if not notification:
            raise NotFound("Notification not found")
        if notification.user_id != user_id:
            raise Forbidden("Notification belongs to another user")
        return self.repo.mark_read(self.db, notification)

    def mark_all_read(self, user_id: str) -> int:
        return self.repo.mark_all_read(self.db, user_id)

    def unread_count(self, user_id: str) -> int:
        return self.repo.count_unread(self.db, user_id)

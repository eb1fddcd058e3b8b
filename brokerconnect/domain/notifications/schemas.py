"""Notification domain schemas - Pydantic models for responses"""

from datetime import datetime
from typing import Optional

from pydantic import BaseModel


class NotificationResponse(BaseModel):
    """Schema for a notification"""

    id: str
    userId: str
    type: str
    title: str
    message: str
    relatedId: Optional[str] = None
    isRead: bool
    createdAt: Optional[datetime] = None


class UnreadCountResponse(BaseModel):
    count: int


class MarkAllReadResponse(BaseModel):
    message: str
    updated: int

"""Notifications domain - Poll-based user alerts derived from domain events"""

from .consumer import NotificationConsumer
from .router import router
from .service import NotificationService

__all__ = ["router", "NotificationService", "NotificationConsumer"]

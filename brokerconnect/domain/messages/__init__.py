"""Messaging domain"""

from .router import router
from .service import MessageService

__all__ = ["router", "MessageService"]

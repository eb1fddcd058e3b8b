"""Message router - FastAPI endpoints for client/broker messaging"""

from typing import Optional

from fastapi import APIRouter, Depends, Query, status
from sqlalchemy.orm import Session

from ...auth import Identity, get_current_user
from ...database import get_db
from ..notifications import NotificationConsumer, NotificationService
from .schemas import (
    ConversationResponse,
    MessageCreate,
    MessageResponse,
    MessageSentResponse,
    PropertyChatResponse,
    UnreadMessagesResponse,
)
from .service import MessageService

router = APIRouter(prefix="/api/messages", tags=["Messages"])


def get_message_service(db: Session = Depends(get_db)) -> MessageService:
    """Dependency injection for MessageService"""
    return MessageService(db, NotificationConsumer(NotificationService(db)))


@router.post("", response_model=MessageSentResponse, status_code=status.HTTP_201_CREATED)
async def send_message(
    data: MessageCreate,
    current_user: Identity = Depends(get_current_user),
    service: MessageService = Depends(get_message_service),
):
    message = service.send_message(data, current_user)
    return MessageSentResponse(message="Message sent successfully", messageId=message.id)


@router.get("/unread-count", response_model=UnreadMessagesResponse)
async def get_unread_count(
    current_user: Identity = Depends(get_current_user),
    service: MessageService = Depends(get_message_service),
):
    return UnreadMessagesResponse(unreadCount=service.unread_count(current_user))


@router.get("/conversations", response_model=list[ConversationResponse])
async def get_conversations(
    current_user: Identity = Depends(get_current_user),
    service: MessageService = Depends(get_message_service),
):
    return service.get_conversations(current_user)


@router.get("/property/{property_id}/chats", response_model=list[PropertyChatResponse])
async def get_property_chats(
    property_id: str,
    current_user: Identity = Depends(get_current_user),
    service: MessageService = Depends(get_message_service),
):
    """Per-client threads on one of the broker's properties"""
    return service.get_property_chats(property_id, current_user)


@router.get("/{other_user_id}", response_model=list[MessageResponse])
async def get_thread(
    other_user_id: str,
    propertyId: Optional[str] = Query(None),
    current_user: Identity = Depends(get_current_user),
    service: MessageService = Depends(get_message_service),
):
    """Messages with another user, oldest first. Marks incoming ones read."""
    return [
        MessageResponse(
            id=m.id,
            senderId=m.sender_id,
            senderName=sender_name,
            receiverId=m.receiver_id,
            propertyId=m.property_id,
            message=m.text,
            isRead=m.is_read,
            createdAt=m.created_at,
        )
        for m, sender_name in service.get_thread(other_user_id, current_user, propertyId)
    ]

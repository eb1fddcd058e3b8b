"""Message domain schemas"""

from datetime import datetime
from typing import Optional

from pydantic import BaseModel, Field


class MessageCreate(BaseModel):
    receiverId: str
    propertyId: Optional[str] = None
    message: str = Field(..., min_length=1, max_length=5000)


class MessageResponse(BaseModel):
    id: str
    senderId: str
    senderName: Optional[str] = None
    receiverId: str
    propertyId: Optional[str] = None
    message: str
    isRead: bool
    createdAt: Optional[datetime] = None


class MessageSentResponse(BaseModel):
    message: str
    messageId: str


class UnreadMessagesResponse(BaseModel):
    unreadCount: int


class ConversationResponse(BaseModel):
    """Latest activity between the caller and one other user about one property"""

    otherUserId: str
    otherUserName: Optional[str] = None
    propertyId: Optional[str] = None
    propertyTitle: Optional[str] = None
    lastMessage: str
    lastMessageTime: Optional[datetime] = None


class PropertyChatResponse(BaseModel):
    """One client's thread on a broker's property"""

    clientId: str
    clientName: Optional[str] = None
    lastMessage: str
    lastMessageTime: Optional[datetime] = None
    unreadCount: int = 0

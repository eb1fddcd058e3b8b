"""Message service - direct messages between clients and brokers"""

import logging
from typing import Optional

from sqlalchemy.orm import Session

from ...auth import Identity
from ...errors import Forbidden, NotFound, ValidationFailure
from ...events import EventPublisher, MessageSent
from ...models import Message
from .repository import MessageRepository
from .schemas import ConversationResponse, MessageCreate, PropertyChatResponse

logger = logging.getLogger(__name__)


class MessageService:
    def __init__(self, db: Session, events: EventPublisher):
        self.db = db
        self.repo = MessageRepository()
        self.events = events

    def send_message(self, data: MessageCreate, user: Identity) -> Message:
        if data.receiverId == user.id:
            raise ValidationFailure("You cannot message yourself")

        sender = self.repo.get_user(self.db, user.id)
        if not sender:
            raise NotFound("Sender not found")
        if not self.repo.get_user(self.db, data.receiverId):
            raise NotFound("Recipient not found")

        prop = None
        if data.propertyId:
            prop = self.repo.get_property(self.db, data.propertyId)
            if not prop:
                raise NotFound("Property not found")

        message = self.repo.create_message(self.db, user.id, data.receiverId, data.message, data.propertyId)
        logger.info(f"💬 Message {message.id} from {user.id} to {data.receiverId}")

        try:
            self.events.publish(
                MessageSent(
                    message_id=message.id,
                    sender_id=user.id,
                    sender_name=sender.name,
                    receiver_id=data.receiverId,
                    property_title=prop.title if prop else None,
                )
            )
        except Exception as e:
            logger.error(f"❌ Failed to publish MessageSent for {message.id}: {e}")
        return message

    def unread_count(self, user: Identity) -> int:
        return self.repo.count_unread(self.db, user.id)

    def get_conversations(self, user: Identity) -> list[ConversationResponse]:
        """One entry per (other user, property), most recent activity first"""
        latest: dict[tuple, Message] = {}
        for message in self.repo.get_user_messages(self.db, user.id):
            other = message.receiver_id if message.sender_id == user.id else message.sender_id
            # Rows arrive newest first, so the first hit per key is the latest
            latest.setdefault((other, message.property_id), message)

        names = self.repo.get_names(self.db, {other for other, _ in latest})
        titles = self.repo.get_titles(self.db, {pid for _, pid in latest if pid})

        return [
            ConversationResponse(
                otherUserId=other,
                otherUserName=names.get(other),
                propertyId=property_id,
                propertyTitle=titles.get(property_id),
                lastMessage=message.text,
                lastMessageTime=message.created_at,
            )
            for (other, property_id), message in latest.items()
        ]

    def get_thread(self, other_user_id: str, user: Identity, property_id: Optional[str] = None) -> list[tuple]:
        """The thread with another user; incoming messages in it become read"""
        thread = self.repo.get_thread(self.db, user.id, other_user_id, property_id)
        marked = self.repo.mark_thread_read(self.db, user.id, other_user_id, property_id)
        if marked:
            logger.debug(f"📬 Marked {marked} messages from {other_user_id} as read for {user.id}")
        return thread

    def get_property_chats(self, property_id: str, user: Identity) -> list[PropertyChatResponse]:
        prop = self.repo.get_property(self.db, property_id)
        if not prop:
            raise NotFound("Property not found")
        if prop.broker_id != user.id:
            raise Forbidden("Only the listing broker can view chats for this property")

        chats: dict[str, PropertyChatResponse] = {}
        for message, sender_name in self.repo.get_property_inbox(self.db, property_id, user.id):
            chat = chats.get(message.sender_id)
            if chat is None:
                chat = chats[message.sender_id] = PropertyChatResponse(
                    clientId=message.sender_id,
                    clientName=sender_name,
                    lastMessage=message.text,
                    lastMessageTime=message.created_at,
                )
            if not message.is_read:
                chat.unreadCount += 1
        return list(chats.values())

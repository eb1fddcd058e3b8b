"""Message repository - Database operations for direct messages"""

from typing import Optional

from sqlalchemy import and_, or_
from sqlalchemy.orm import Session

from ...models import Message, Property, User


class MessageRepository:
    """Repository for message database operations"""

    @staticmethod
    def create_message(db: Session, sender_id: str, receiver_id: str, text: str, property_id: Optional[str]) -> Message:
        message = Message(sender_id=sender_id, receiver_id=receiver_id, property_id=property_id, text=text)
        db.add(message)
        db.commit()
        db.refresh(message)
        return message

    @staticmethod
    def get_user(db: Session, user_id: str) -> Optional[User]:
        return db.query(User).filter(User.id == user_id).first()

    @staticmethod
    def get_property(db: Session, property_id: str) -> Optional[Property]:
        return db.query(Property).filter(Property.id == property_id).first()

    @staticmethod
    def count_unread(db: Session, user_id: str) -> int:
        return (
            db.query(Message)
            .filter(Message.receiver_id == user_id, Message.is_read.is_(False))
            .count()
        )

    @staticmethod
    def get_user_messages(db: Session, user_id: str) -> list[Message]:
        """Every message the user sent or received, newest first"""
        return (
            db.query(Message)
            .filter(or_(Message.sender_id == user_id, Message.receiver_id == user_id))
            .order_by(Message.created_at.desc())
            .all()
        )

    @staticmethod
    def get_names(db: Session, user_ids: set) -> dict:
        if not user_ids:
            return {}
        return dict(db.query(User.id, User.name).filter(User.id.in_(user_ids)).all())

    @staticmethod
    def get_titles(db: Session, property_ids: set) -> dict:
        if not property_ids:
            return {}
        return dict(db.query(Property.id, Property.title).filter(Property.id.in_(property_ids)).all())

    @staticmethod
    def get_thread(db: Session, user_id: str, other_user_id: str, property_id: Optional[str] = None) -> list[tuple]:
        """Messages between two users, oldest first, with sender names"""
        query = (
            db.query(Message, User.name)
            .join(User, Message.sender_id == User.id)
            .filter(
                or_(
                    and_(Message.sender_id == user_id, Message.receiver_id == other_user_id),
                    and_(Message.sender_id == other_user_id, Message.receiver_id == user_id),
                )
            )
        )
        if property_id:
            query = query.filter(Message.property_id == property_id)
        return query.order_by(Message.created_at.asc()).all()

    @staticmethod
    def mark_thread_read(db: Session, user_id: str, other_user_id: str, property_id: Optional[str] = None) -> int:
        """Mark messages from other_user to user as read"""
        query = db.query(Message).filter(
            Message.sender_id == other_user_id,
            Message.receiver_id == user_id,
            Message.is_read.is_(False),
        )
        if property_id:
            query = query.filter(Message.property_id == property_id)
        updated = query.update({Message.is_read: True}, synchronize_session=False)
        db.commit()
        return updated

    @staticmethod
    def get_property_inbox(db: Session, property_id: str, broker_id: str) -> list[tuple]:
        """Messages clients sent to the broker about one property, newest first"""
        return (
            db.query(Message, User.name)
            .join(User, Message.sender_id == User.id)
            .filter(Message.property_id == property_id, Message.receiver_id == broker_id)
            .order_by(Message.created_at.desc())
            .all()
        )

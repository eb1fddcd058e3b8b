"""Account repository - Database operations for users"""

from typing import Optional

from sqlalchemy.orm import Session, joinedload

from ...models import BrokerProfile, User


class AccountRepository:
    """Repository for user database operations"""

    @staticmethod
    def get_by_email(db: Session, email: str) -> Optional[User]:
        return (
            db.query(User)
            .options(joinedload(User.broker_profile))
            .filter(User.email == email)
            .first()
        )

    @staticmethod
    def get_by_id(db: Session, user_id: str) -> Optional[User]:
        return (
            db.query(User)
            .options(joinedload(User.broker_profile))
            .filter(User.id == user_id)
            .first()
        )

    @staticmethod
    def create_user(db: Session, broker_profile: Optional[dict] = None, **user_data) -> User:
        """Create a user and, for brokers, their profile in the same commit"""
        user = User(**user_data)
        if broker_profile is not None:
            user.broker_profile = BrokerProfile(**broker_profile)
        db.add(user)
        db.commit()
        db.refresh(user)
        return user

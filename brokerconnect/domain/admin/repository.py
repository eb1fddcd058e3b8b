"""Admin repository - user and broker management queries"""

from typing import Optional

from sqlalchemy.orm import Session, joinedload

from ...models import BrokerProfile, User


class AdminRepository:
    @staticmethod
    def get_brokers(db: Session, verification_status: Optional[str] = None) -> list[User]:
        query = (
            db.query(User)
            .join(BrokerProfile, BrokerProfile.user_id == User.id)
            .options(joinedload(User.broker_profile))
            .filter(User.role == "broker")
        )
        if verification_status:
            query = query.filter(BrokerProfile.verification_status == verification_status)
        return query.order_by(User.created_at.desc()).all()

    @staticmethod
    def get_broker(db: Session, user_id: str) -> Optional[User]:
        return (
            db.query(User)
            .options(joinedload(User.broker_profile))
            .filter(User.id == user_id, User.role == "broker")
            .first()
        )

    @staticmethod
    def get_users(db: Session) -> list[User]:
        return db.query(User).options(joinedload(User.broker_profile)).order_by(User.created_at.desc()).all()

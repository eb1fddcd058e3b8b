"""Admin service - broker verification and user management"""

import logging
from typing import Optional

from sqlalchemy.orm import Session

from ...auth import Identity
from ...errors import NotFound
from ...models import User
from .repository import AdminRepository

logger = logging.getLogger(__name__)

VERIFICATION_OUTCOMES = {"approve": "verified", "reject": "rejected"}


class AdminService:
    def __init__(self, db: Session):
        self.db = db
        self.repo = AdminRepository()

    def list_brokers(self, verification_status: Optional[str] = None) -> list[User]:
        return self.repo.get_brokers(self.db, verification_status)

    def verify_broker(self, broker_id: str, action: str, admin: Identity) -> User:
        """Approve or reject a broker; the user's verified flag follows the outcome"""
        broker = self.repo.get_broker(self.db, broker_id)
        if not broker or broker.broker_profile is None:
            raise NotFound("Broker not found")

        outcome = VERIFICATION_OUTCOMES[action]
        broker.broker_profile.verification_status = outcome
        broker.is_verified = outcome == "verified"
        self.db.commit()
        self.db.refresh(broker)

        logger.info(f"🛡️ Admin {admin.id} set broker {broker_id} to {outcome}")
        return broker

    def list_users(self) -> list[User]:
        return self.repo.get_users(self.db)

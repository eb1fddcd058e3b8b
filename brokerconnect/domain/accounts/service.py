"""Account service - registration, login and profile lookup"""

import logging

from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from ...auth import Identity
from ...config import DEFAULT_BROKER_COMMISSION
from ...errors import AuthRequired, Conflict, NotFound
from ...models import User
from ...security_utils import create_access_token, hash_password, verify_password
from .repository import AccountRepository
from .schemas import LoginRequest, RegisterRequest, UserResponse

logger = logging.getLogger(__name__)


def to_user_response(user: User) -> UserResponse:
    response = UserResponse(
        id=user.id,
        email=user.email,
        name=user.name,
        phone=user.phone,
        role=user.role,
        isVerified=bool(user.is_verified),
        createdAt=user.created_at,
    )
    profile = user.broker_profile
    if user.role == "broker" and profile is not None:
        response.licenseNumber = profile.license_number
        response.nin = profile.national_id
        response.verificationStatus = profile.verification_status
        response.rating = float(profile.rating or 0)
        response.totalReviews = profile.total_reviews or 0
        response.commission = float(profile.commission_pct)
    return response


class AccountService:
    def __init__(self, db: Session):
        self.db = db
        self.repo = AccountRepository()

    def register(self, data: RegisterRequest) -> tuple[User, str]:
        if self.repo.get_by_email(self.db, data.email):
            raise Conflict("Email already registered")

        profile = None
        if data.role == "broker":
            profile = {
                "license_number": data.licenseNumber.strip(),
                "national_id": data.nin,
                "verification_status": "pending",
                "commission_pct": DEFAULT_BROKER_COMMISSION,
            }

        try:
            user = self.repo.create_user(
                self.db,
                broker_profile=profile,
                name=data.name,
                email=data.email,
                phone=data.phone,
                password_hash=hash_password(data.password),
                role=data.role,
                # Clients are usable immediately; brokers wait for an admin
                is_verified=data.role == "client",
            )
        except IntegrityError:
            self.db.rollback()
            raise Conflict("Email already registered") from None

        logger.info(f"✅ Registered {user.role} {user.id}")
        return user, create_access_token(user.id, user.role)

    def login(self, data: LoginRequest) -> tuple[User, str]:
        user = self.repo.get_by_email(self.db, data.email)
        if not user or not verify_password(data.password, user.password_hash):
            logger.warning(f"⚠️ Failed login for {data.email}")
            raise AuthRequired("Invalid credentials")

        logger.info(f"🔑 User {user.id} logged in")
        return user, create_access_token(user.id, user.role)

    def get_me(self, identity: Identity) -> User:
        user = self.repo.get_by_id(self.db, identity.id)
        if not user:
            raise NotFound("User not found")
        return user

import logging
from dataclasses import dataclass
from typing import Optional

from fastapi import Depends
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer

from .errors import AuthInvalid, AuthRequired, Forbidden
from .security_utils import decode_access_token

logger = logging.getLogger(__name__)

# auto_error=False so a missing header becomes AuthRequired (401) rather than FastAPI's 403
security = HTTPBearer(auto_error=False)

ROLES = ("client", "broker", "admin")


@dataclass(frozen=True)
class Identity:
    """The authenticated caller, taken from the token claims"""

    id: str
    role: str

    @property
    def is_client(self) -> bool:
        return self.role == "client"

    @property
    def is_broker(self) -> bool:
        return self.role == "broker"

    @property
    def is_admin(self) -> bool:
        return self.role == "admin"


def identity_from_token(token: str) -> Identity:
    """Validate a bearer token and return the caller identity it carries"""
    payload = decode_access_token(token)
    if payload is None:
        raise AuthInvalid()

    user_id = payload.get("userId")
    role = payload.get("role")
    if not user_id or role not in ROLES:
        logger.warning(f"⚠️ Token missing claims. Available claims: {list(payload.keys())}")
        raise AuthInvalid()

    return Identity(id=str(user_id), role=role)


async def get_current_user(
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(security),
) -> Identity:
    """Get the caller identity from the Authorization bearer token"""
    if not credentials or not credentials.credentials:
        raise AuthRequired()

    identity = identity_from_token(credentials.credentials)
    logger.debug(f"✅ User authenticated: {identity.id} ({identity.role})")
    return identity


async def get_optional_user(
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(security),
) -> Optional[Identity]:
    """
    Like get_current_user, but anonymous callers get None.
    A token that is present but invalid is still rejected.
    """
    if not credentials or not credentials.credentials:
        return None
    return identity_from_token(credentials.credentials)


def require_role(*roles: str):
    """
    Create a dependency that only lets the given roles through

    Example usage:
        @router.post("")
        async def create_property(user: Identity = Depends(require_role("broker"))):
            ...
    """

    async def role_checker(user: Identity = Depends(get_current_user)) -> Identity:
        if user.role not in roles:
            logger.warning(f"⚠️ User {user.id} with role {user.role} denied; requires {roles}")
            raise Forbidden(f"This action requires role: {' or '.join(roles)}")
        return user

    return role_checker

"""Accounts domain - registration, login and the current user"""

from .router import router, users_router
from .service import AccountService, to_user_response

__all__ = ["router", "users_router", "AccountService", "to_user_response"]

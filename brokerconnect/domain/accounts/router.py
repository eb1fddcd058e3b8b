"""Account router - registration, login and the current user"""

from fastapi import APIRouter, Depends, status
from sqlalchemy.orm import Session

from ...auth import Identity, get_current_user
from ...config import (
    LOGIN_RATE_LIMIT,
    LOGIN_RATE_WINDOW_SECONDS,
    REGISTER_RATE_LIMIT,
    REGISTER_RATE_WINDOW_SECONDS,
)
from ...database import get_db
from ...rate_limiter import create_rate_limiter
from .schemas import AuthResponse, LoginRequest, RegisterRequest, UserResponse
from .service import AccountService, to_user_response

router = APIRouter(prefix="/api/auth", tags=["Auth"])
users_router = APIRouter(prefix="/api/users", tags=["Users"])

rate_limit_login = create_rate_limiter(
    limit=LOGIN_RATE_LIMIT, window_seconds=LOGIN_RATE_WINDOW_SECONDS, key_prefix="login"
)
rate_limit_register = create_rate_limiter(
    limit=REGISTER_RATE_LIMIT, window_seconds=REGISTER_RATE_WINDOW_SECONDS, key_prefix="register"
)


def get_account_service(db: Session = Depends(get_db)) -> AccountService:
    """Dependency injection for AccountService"""
    return AccountService(db)


@router.post("/register", response_model=AuthResponse, status_code=status.HTTP_201_CREATED)
async def register(
    data: RegisterRequest,
    _: None = Depends(rate_limit_register),
    service: AccountService = Depends(get_account_service),
):
    """Create a client or broker account and sign it in"""
    user, token = service.register(data)
    return AuthResponse(user=to_user_response(user), token=token)


@router.post("/login", response_model=AuthResponse)
async def login(
    data: LoginRequest,
    _: None = Depends(rate_limit_login),
    service: AccountService = Depends(get_account_service),
):
    user, token = service.login(data)
    return AuthResponse(user=to_user_response(user), token=token)


@users_router.get("/me", response_model=UserResponse)
async def get_me(
    current_user: Identity = Depends(get_current_user),
    service: AccountService = Depends(get_account_service),
):
    """Current user with the latest broker profile data"""
    return to_user_response(service.get_me(current_user))

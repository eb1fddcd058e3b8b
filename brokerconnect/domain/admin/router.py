"""Admin router - every endpoint requires the admin role"""

from typing import Optional

from fastapi import APIRouter, Depends, Query
from sqlalchemy.orm import Session

from ...auth import Identity, require_role
from ...database import get_db
from ..accounts import to_user_response
from ..accounts.schemas import UserResponse
from .schemas import BrokerVerificationRequest, BrokerVerificationResponse
from .service import AdminService

router = APIRouter(prefix="/api/admin", tags=["Admin"])

require_admin = require_role("admin")


def get_admin_service(db: Session = Depends(get_db)) -> AdminService:
    """Dependency injection for AdminService"""
    return AdminService(db)


@router.get("/brokers/pending", response_model=list[UserResponse])
async def get_brokers(
    status: Optional[str] = Query(None, description="pending, verified or rejected; all brokers when omitted"),
    _: Identity = Depends(require_admin),
    service: AdminService = Depends(get_admin_service),
):
    return [to_user_response(broker) for broker in service.list_brokers(status)]


@router.put("/brokers/{broker_id}/verify", response_model=BrokerVerificationResponse)
async def verify_broker(
    broker_id: str,
    data: BrokerVerificationRequest,
    admin: Identity = Depends(require_admin),
    service: AdminService = Depends(get_admin_service),
):
    broker = service.verify_broker(broker_id, data.action, admin)
    return BrokerVerificationResponse(
        message=f"Broker {data.action}d successfully",
        brokerId=broker.id,
        verificationStatus=broker.broker_profile.verification_status,
    )


@router.get("/users", response_model=list[UserResponse])
async def get_users(
    _: Identity = Depends(require_admin),
    service: AdminService = Depends(get_admin_service),
):
    return [to_user_response(user) for user in service.list_users()]

"""Admin schemas"""

from typing import Literal

from pydantic import BaseModel


class BrokerVerificationRequest(BaseModel):
    action: Literal["approve", "reject"]


class BrokerVerificationResponse(BaseModel):
    message: str
    brokerId: str
    verificationStatus: str

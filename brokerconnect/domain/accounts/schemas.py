"""Account schemas - registration, login and the user payload"""

from datetime import datetime
from typing import Literal, Optional

from pydantic import BaseModel, Field, field_validator, model_validator

from ...shared.validators import validate_email, validate_phone


class RegisterRequest(BaseModel):
    name: str = Field(..., min_length=1, max_length=255)
    email: str
    phone: Optional[str] = None
    password: str = Field(..., min_length=6, max_length=128)
    # Admin accounts are provisioned out of band
    role: Literal["client", "broker"] = "client"
    licenseNumber: Optional[str] = Field(None, max_length=100)
    nin: Optional[str] = Field(None, max_length=20)

    @field_validator("email")
    @classmethod
    def check_email(cls, v):
        return validate_email(v)

    @field_validator("phone")
    @classmethod
    def check_phone(cls, v):
        return validate_phone(v)

    @model_validator(mode="after")
    def broker_needs_license(self):
        if self.role == "broker" and not (self.licenseNumber and self.licenseNumber.strip()):
            raise ValueError("licenseNumber is required for broker accounts")
        return self


class LoginRequest(BaseModel):
    email: str
    password: str

    @field_validator("email")
    @classmethod
    def normalize_email(cls, v):
        return v.strip().lower()


class UserResponse(BaseModel):
    """User payload; broker fields are only filled in for brokers"""

    id: str
    email: str
    name: str
    phone: Optional[str] = None
    role: str
    isVerified: bool
    createdAt: Optional[datetime] = None
    licenseNumber: Optional[str] = None
    nin: Optional[str] = None
    verificationStatus: Optional[str] = None
    rating: Optional[float] = None
    totalReviews: Optional[int] = None
    commission: Optional[float] = None


class AuthResponse(BaseModel):
    user: UserResponse
    token: str

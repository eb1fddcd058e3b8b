"""Booking domain schemas - Pydantic models for validation"""

from datetime import date, datetime, time
from typing import Literal, Optional

from pydantic import BaseModel, Field, field_validator, model_validator

from ...shared.validators import validate_phone, validate_visit_date


class BookingCreate(BaseModel):
    """Schema for a client's visit request"""

    brokerId: str
    propertyId: str
    visitDate: date
    visitTime: time
    clientName: str = Field(..., min_length=1, max_length=255)
    clientPhone: str
    message: Optional[str] = None

    @field_validator("clientPhone")
    @classmethod
    def validate_client_phone(cls, v):
        return validate_phone(v)

    @field_validator("visitDate")
    @classmethod
    def validate_date(cls, v):
        return validate_visit_date(v)


class BookingStatusUpdate(BaseModel):
    """Schema for the broker status endpoint (confirmed, cancelled, completed)"""

    status: str


class RescheduleRequest(BaseModel):
    """Schema for a broker's reschedule proposal"""

    visitDate: date
    visitTime: time
    message: Optional[str] = None

    @field_validator("visitDate")
    @classmethod
    def validate_date(cls, v):
        return validate_visit_date(v)


class RescheduleResponseRequest(BaseModel):
    """Schema for the client's answer to a reschedule proposal"""

    action: Literal["accept", "counter"]
    visitDate: Optional[date] = None
    visitTime: Optional[time] = None
    message: Optional[str] = None

    @field_validator("visitDate")
    @classmethod
    def validate_date(cls, v):
        return validate_visit_date(v)

    @model_validator(mode="after")
    def counter_needs_new_time(self):
        if self.action == "counter" and (self.visitDate is None or self.visitTime is None):
            raise ValueError("visitDate and visitTime are required to propose a new time")
        return self


class BookingResponse(BaseModel):
    """Schema for booking response"""

    id: str
    clientId: str
    brokerId: str
    propertyId: str
    visitDate: date
    visitTime: time
    clientName: str
    clientPhone: str
    message: Optional[str] = None
    status: str
    createdAt: Optional[datetime] = None
    updatedAt: Optional[datetime] = None
    # Joined display fields
    propertyTitle: Optional[str] = None
    district: Optional[str] = None
    area: Optional[str] = None
    brokerName: Optional[str] = None
    brokerPhone: Optional[str] = None
    # What the caller may do next
    allowedActions: list[str] = []


class BookingActionResponse(BaseModel):
    message: str
    booking: BookingResponse

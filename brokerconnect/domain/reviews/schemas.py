"""Review domain schemas - Pydantic models for validation"""

from datetime import datetime
from typing import Optional

from pydantic import BaseModel, Field


class ReviewCreate(BaseModel):
    """Schema for a client's post-visit review"""

    bookingId: str
    brokerId: str
    propertyId: str
    brokerRating: int = Field(..., ge=1, le=5)
    brokerComment: Optional[str] = None
    propertyRating: int = Field(..., ge=1, le=5)
    propertyComment: Optional[str] = None
    propertyTaken: bool = False


class ReviewResponse(BaseModel):
    id: str
    bookingId: str
    clientId: str
    brokerId: str
    propertyId: str
    brokerRating: int
    brokerComment: Optional[str] = None
    propertyRating: int
    propertyComment: Optional[str] = None
    propertyTaken: bool
    createdAt: Optional[datetime] = None


class ReviewSubmitResponse(BaseModel):
    message: str
    review: ReviewResponse


class BookingReviewStatus(BaseModel):
    hasReview: bool
    review: Optional[ReviewResponse] = None

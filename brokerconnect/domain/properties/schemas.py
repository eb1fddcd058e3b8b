"""Property domain schemas - Pydantic models for validation"""

from datetime import datetime
from typing import Literal, Optional

from pydantic import BaseModel, Field


class PropertyCreate(BaseModel):
    """Schema for a broker's new listing"""

    title: str = Field(..., min_length=1, max_length=255)
    description: Optional[str] = None
    category: Literal["sale", "rental"]
    price: float = Field(..., gt=0)
    currency: Optional[str] = Field(None, max_length=10)
    district: Optional[str] = None
    area: Optional[str] = None
    address: Optional[str] = None
    latitude: Optional[float] = Field(None, ge=-90, le=90)
    longitude: Optional[float] = Field(None, ge=-180, le=180)
    size: Optional[float] = Field(None, ge=0)
    rooms: Optional[int] = Field(None, ge=0)
    bathrooms: Optional[int] = Field(None, ge=0)
    amenities: list[str] = []
    images: list[str] = []
    videos: list[str] = []


class PropertyFilters(BaseModel):
    """Optional listing filters, AND-combined"""

    category: Optional[str] = None
    district: Optional[str] = None
    minPrice: Optional[float] = None
    maxPrice: Optional[float] = None
    rooms: Optional[int] = None


class Coordinates(BaseModel):
    lat: float
    lng: float


class Location(BaseModel):
    district: Optional[str] = None
    area: Optional[str] = None
    address: Optional[str] = None
    coordinates: Optional[Coordinates] = None


class Features(BaseModel):
    size: Optional[float] = None
    rooms: Optional[int] = None
    bathrooms: Optional[int] = None
    amenities: list[str] = []


class BrokerSummary(BaseModel):
    name: Optional[str] = None
    phone: Optional[str] = None
    email: Optional[str] = None
    rating: Optional[float] = None
    reviewCount: int = 0


class PropertyResponse(BaseModel):
    """Schema for property response"""

    id: str
    title: str
    description: Optional[str] = None
    category: str
    price: float
    currency: str
    location: Location
    features: Features
    images: list[str] = []
    videos: list[str] = []
    status: str
    brokerId: str
    isVerified: bool
    views: int
    createdAt: Optional[datetime] = None
    updatedAt: Optional[datetime] = None
    broker: Optional[BrokerSummary] = None
    rating: Optional[float] = None
    reviewCount: int = 0
    messageCount: Optional[int] = None


class TakenReview(BaseModel):
    rating: int
    comment: Optional[str] = None
    date: Optional[datetime] = None


class TakenPropertyResponse(PropertyResponse):
    review: TakenReview


class PropertyCreatedResponse(BaseModel):
    message: str
    propertyId: str

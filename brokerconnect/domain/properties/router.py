"""Property router - FastAPI endpoints for listings"""

from typing import Optional

from fastapi import APIRouter, Depends, Query, status
from sqlalchemy.orm import Session

from ...auth import Identity, get_current_user, get_optional_user, require_role
from ...database import get_db
from ...models import Property
from .schemas import (
    BrokerSummary,
    Coordinates,
    Features,
    Location,
    PropertyCreate,
    PropertyCreatedResponse,
    PropertyFilters,
    PropertyResponse,
    TakenPropertyResponse,
    TakenReview,
)
from .service import PropertyService

router = APIRouter(prefix="/api/properties", tags=["Properties"])


def get_property_service(db: Session = Depends(get_db)) -> PropertyService:
    """Dependency injection for PropertyService"""
    return PropertyService(db)


def _rating(value) -> Optional[float]:
    return round(float(value), 1) if value is not None else None


def to_response(prop: Property, **extra) -> PropertyResponse:
    coordinates = None
    if prop.latitude is not None and prop.longitude is not None:
        coordinates = Coordinates(lat=float(prop.latitude), lng=float(prop.longitude))

    return PropertyResponse(
        id=prop.id,
        title=prop.title,
        description=prop.description,
        category=prop.category,
        price=float(prop.price),
        currency=prop.currency,
        location=Location(
            district=prop.district, area=prop.area, address=prop.address, coordinates=coordinates
        ),
        features=Features(
            size=prop.size, rooms=prop.rooms, bathrooms=prop.bathrooms, amenities=prop.amenities or []
        ),
        images=prop.images or [],
        videos=prop.videos or [],
        status=prop.status,
        brokerId=prop.broker_id,
        isVerified=prop.is_verified,
        views=prop.views or 0,
        createdAt=prop.created_at,
        updatedAt=prop.updated_at,
        **extra,
    )


@router.get("", response_model=list[PropertyResponse])
async def list_properties(
    category: Optional[str] = Query(None),
    district: Optional[str] = Query(None),
    minPrice: Optional[float] = Query(None),
    maxPrice: Optional[float] = Query(None),
    rooms: Optional[int] = Query(None),
    current_user: Optional[Identity] = Depends(get_optional_user),
    service: PropertyService = Depends(get_property_service),
):
    """Available listings; signed-in clients don't see properties they reported taken"""
    filters = PropertyFilters(
        category=category, district=district, minPrice=minPrice, maxPrice=maxPrice, rooms=rooms
    )
    return [
        to_response(
            prop,
            broker=BrokerSummary(
                name=name,
                phone=phone,
                email=email,
                rating=_rating(broker_rating),
                reviewCount=broker_reviews or 0,
            ),
            rating=_rating(prop_rating),
            reviewCount=prop_reviews or 0,
        )
        for (
            prop,
            name,
            phone,
            email,
            prop_rating,
            prop_reviews,
            broker_rating,
            broker_reviews,
        ) in service.search(filters, current_user)
    ]


@router.post("", response_model=PropertyCreatedResponse, status_code=status.HTTP_201_CREATED)
async def create_property(
    data: PropertyCreate,
    current_user: Identity = Depends(require_role("broker")),
    service: PropertyService = Depends(get_property_service),
):
    prop = service.create_property(data, current_user)
    return PropertyCreatedResponse(message="Property created successfully", propertyId=prop.id)


@router.get("/broker/properties", response_model=list[PropertyResponse])
async def get_broker_properties(
    current_user: Identity = Depends(get_current_user),
    service: PropertyService = Depends(get_property_service),
):
    """The current broker's listings with message counts"""
    return [
        to_response(prop, messageCount=message_count or 0)
        for prop, message_count in service.get_broker_properties(current_user)
    ]


@router.get("/client/taken", response_model=list[TakenPropertyResponse])
async def get_taken_properties(
    current_user: Identity = Depends(get_current_user),
    service: PropertyService = Depends(get_property_service),
):
    """Properties the current client reported as taken"""
    results = []
    for prop, broker, review in service.get_taken_properties(current_user):
        base = to_response(prop, broker=BrokerSummary(name=broker.name, phone=broker.phone))
        results.append(
            TakenPropertyResponse(
                **base.model_dump(),
                review=TakenReview(
                    rating=review.property_rating,
                    comment=review.property_comment,
                    date=review.created_at,
                ),
            )
        )
    return results


@router.get("/{property_id}", response_model=PropertyResponse)
async def get_property(property_id: str, service: PropertyService = Depends(get_property_service)):
    prop, broker, profile = service.get_property(property_id)
    return to_response(
        prop,
        broker=BrokerSummary(
            name=broker.name,
            phone=broker.phone,
            email=broker.email,
            rating=_rating(profile.rating) if profile and profile.total_reviews else None,
            reviewCount=profile.total_reviews if profile else 0,
        ),
    )


@router.post("/{property_id}/view")
async def record_view(property_id: str, service: PropertyService = Depends(get_property_service)):
    service.record_view(property_id)
    return {"success": True}

"""Property service - Business logic for listings"""

import logging
from typing import Optional

from sqlalchemy.orm import Session

from ...auth import Identity
from ...config import DEFAULT_CURRENCY
from ...errors import Forbidden, NotFound
from ...models import Property
from .repository import PropertyRepository
from .schemas import PropertyCreate, PropertyFilters

logger = logging.getLogger(__name__)


class PropertyService:
    """Service layer for property listing operations"""

    def __init__(self, db: Session):
        self.db = db
        self.repo = PropertyRepository()

    def search(self, filters: PropertyFilters, user: Optional[Identity] = None) -> list[tuple]:
        """
        Available properties, newest first.

        Authenticated callers never see properties they have already
        reported as taken in one of their reviews.
        """
        rows = self.repo.search_available(self.db, filters, exclude_taken_by=user.id if user else None)
        logger.debug(f"🔍 Property search {filters.model_dump(exclude_none=True)} → {len(rows)} results")
        return rows

    def create_property(self, data: PropertyCreate, user: Identity) -> Property:
        if not user.is_broker:
            raise Forbidden("Only brokers can list properties")

        broker = self.repo.get_user(self.db, user.id)
        if not broker:
            raise NotFound("Broker not found")

        values = data.model_dump()
        values["currency"] = values.get("currency") or DEFAULT_CURRENCY
        prop = self.repo.create_property(self.db, user.id, is_verified=bool(broker.is_verified), **values)
        logger.info(f"🏠 Broker {user.id} listed property {prop.id}: {prop.title}")
        return prop

    def get_property(self, property_id: str) -> tuple:
        row = self.repo.get_property_detail(self.db, property_id)
        if not row:
            raise NotFound("Property not found")
        return row

    def get_broker_properties(self, user: Identity) -> list[tuple]:
        if not user.is_broker:
            raise Forbidden("Only brokers have property listings")
        return self.repo.get_broker_properties(self.db, user.id)

    def record_view(self, property_id: str) -> None:
        if not self.repo.increment_views(self.db, property_id):
            raise NotFound("Property not found")

    def get_taken_properties(self, user: Identity) -> list[tuple]:
        return self.repo.get_taken_properties(self.db, user.id)

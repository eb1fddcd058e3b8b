"""Property listing domain"""

from .router import router
from .service import PropertyService

__all__ = ["router", "PropertyService"]

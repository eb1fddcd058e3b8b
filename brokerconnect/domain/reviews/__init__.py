"""Reviews domain - One review per completed booking, and the "property taken" flag"""

from .router import router
from .service import ReviewService

__all__ = ["router", "ReviewService"]

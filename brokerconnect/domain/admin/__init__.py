"""Admin domain"""

from .router import router
from .service import AdminService

__all__ = ["router", "AdminService"]

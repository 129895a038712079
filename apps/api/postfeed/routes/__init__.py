"""Route modules."""

from .auth import router as auth_router
from .images import router as images_router
from .posts import router as posts_router
from .status import router as status_router

__all__ = ["auth_router", "images_router", "posts_router", "status_router"]

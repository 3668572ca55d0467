"""
API routers.
"""
from .auth import router as auth_router
from .profiles import router as profiles_router
from .social_networks import router as social_networks_router
from .follows import router as follow_router, my_router
from .notifications import router as notifications_router
from .map import router as map_router
from .categories import router as categories_router

__all__ = [
    "auth_router",
    "profiles_router",
    "social_networks_router",
    "follow_router",
    "my_router",
    "notifications_router",
    "map_router",
    "categories_router",
]

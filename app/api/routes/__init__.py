"""API routes module."""
from app.api.routes.badges import router as badges_router
from app.api.routes.health import router as health_router
from app.api.routes.profiles import router as profiles_router
from app.api.routes.user_badges import router as user_badges_router
from app.api.routes.users import router as users_router

__all__ = [
    "badges_router",
    "health_router",
    "profiles_router",
    "user_badges_router",
    "users_router",
]

"""ORM models for the table backend."""
from app.models.badge import Badge
from app.models.user_badge import UserBadge
from app.models.user_profile import UserProfile

__all__ = ["Badge", "UserBadge", "UserProfile"]

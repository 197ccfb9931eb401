"""Repositories package."""
from app.repositories.badge_repository import BadgeRepository
from app.repositories.base import Repository
from app.repositories.directory import DirectoryRepository
from app.repositories.profile_repository import ProfileRepository
from app.repositories.table import TableRepository
from app.repositories.user_badge_repository import UserBadgeRepository
from app.repositories.user_repository import UserRepository

__all__ = [
    "Repository",
    "TableRepository",
    "DirectoryRepository",
    "UserRepository",
    "ProfileRepository",
    "BadgeRepository",
    "UserBadgeRepository",
]

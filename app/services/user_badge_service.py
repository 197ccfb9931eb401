from typing import Any

from app.core.exceptions import ConflictError
from app.core.logging import get_logger
from app.core.validation import ensure_valid
from app.repositories.badge_repository import BadgeRepository
from app.repositories.user_badge_repository import UserBadgeRepository
from app.repositories.user_repository import UserRepository
from app.schemas.filtering import QueryDefaults
from app.schemas.user_badges import UserBadgeCreate, UserBadgeDTO
from app.services.base import BaseService

logger = get_logger(__name__)


class UserBadgeService(BaseService[UserBadgeDTO]):
    def __init__(
        self,
        grants: UserBadgeRepository,
        users: UserRepository,
        badges: BadgeRepository,
        defaults: QueryDefaults | None = None,
    ):
        super().__init__(grants, defaults)
        self._grants = grants
        self._users = users
        self._badges = badges

    async def grant(self, payload: UserBadgeCreate) -> UserBadgeDTO:
        ensure_valid(payload)
        await self._ensure_exists(self._users, payload.user_id)
        await self._ensure_exists(self._badges, payload.badge_id)
        if await self._grants.exists_for(payload.user_id, payload.badge_id):
            raise ConflictError(
                f"user {payload.user_id} already holds badge {payload.badge_id}",
                code="CF_USER_BADGE_001",
            )

        grant = await self._grants.create(payload)
        logger.info("badge_granted", user_id=payload.user_id, badge_id=payload.badge_id)
        return grant

    async def list_for_user(self, user_id: Any) -> list[UserBadgeDTO]:
        return await self._grants.find_by_user(user_id)

    async def list_for_badge(self, badge_id: Any) -> list[UserBadgeDTO]:
        return await self._grants.find_by_badge(badge_id)

    async def revoke(self, id: Any) -> None:
        await self._grants.delete(id)

from typing import Any

from sqlalchemy.orm import selectinload

from app.models.user_badge import UserBadge
from app.repositories.table import TableRepository
from app.schemas.user_badges import UserBadgeCreate, UserBadgeDTO


class UserBadgeRepository(TableRepository[UserBadgeCreate, UserBadgeDTO]):
    """Badge grants, each read with its badge embedded."""

    entity = "user_badge"
    model = UserBadge
    read_model = UserBadgeDTO
    load_options = (selectinload(UserBadge.badge),)

    async def find_by_user(self, user_id: Any) -> list[UserBadgeDTO]:
        return await self.find_by_field("user_id", user_id)

    async def find_by_badge(self, badge_id: Any) -> list[UserBadgeDTO]:
        return await self.find_by_field("badge_id", badge_id)

    async def exists_for(self, user_id: Any, badge_id: Any) -> bool:
        user_col, badge_col = self._column("user_id"), self._column("badge_id")
        return await self._exists_where(
            user_col == self._coerce(user_col, user_id),
            badge_col == self._coerce(badge_col, badge_id),
        )

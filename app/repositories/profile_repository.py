from typing import Any

from app.core.exceptions import NotFoundError
from app.models.user_profile import UserProfile
from app.repositories.table import TableRepository
from app.schemas.profiles import ProfileCreate, ProfileDTO, ProfileUpdate


class ProfileRepository(TableRepository[ProfileCreate | ProfileUpdate, ProfileDTO]):
    entity = "profile"
    model = UserProfile
    read_model = ProfileDTO
    search_fields = ("fullname", "bio")

    async def find_by_user_id(self, user_id: Any) -> ProfileDTO:
        profiles = await self.find_by_field("user_id", user_id)
        if not profiles:
            raise NotFoundError(self.entity, f"profile for user {user_id} not found", {"user_id": str(user_id)})
        return profiles[0]

    async def exists_by_user_id(self, user_id: Any) -> bool:
        column = self._column("user_id")
        return await self._exists_where(column == self._coerce(column, user_id))

    async def find_by_fullname(self, fullname: str) -> list[ProfileDTO]:
        return await self.find_by_field("fullname", fullname)

    async def update_avatar(self, id: Any, avatar_url: str) -> ProfileDTO:
        return await self._update_values(id, {"avatar_url": avatar_url})

    async def update_identity_image(self, id: Any, image_url: str) -> ProfileDTO:
        return await self._update_values(id, {"identity_image_url": image_url})

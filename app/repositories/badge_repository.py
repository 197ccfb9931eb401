from app.core.exceptions import NotFoundError
from app.models.badge import Badge
from app.repositories.table import TableRepository
from app.schemas.badges import BadgeCreate, BadgeDTO, BadgeUpdate


class BadgeRepository(TableRepository[BadgeCreate | BadgeUpdate, BadgeDTO]):
    entity = "badge"
    model = Badge
    read_model = BadgeDTO
    search_fields = ("name", "description")

    async def find_by_name(self, name: str) -> BadgeDTO:
        badges = await self.find_by_field("name", name)
        if not badges:
            raise NotFoundError(self.entity, f"badge {name!r} not found", {"name": name})
        return badges[0]

    async def exists_by_name(self, name: str) -> bool:
        return await self._exists_where(self._column("name") == name)

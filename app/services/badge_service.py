from typing import Sequence

from app.core.exceptions import ConflictError
from app.core.validation import ensure_valid
from app.repositories.badge_repository import BadgeRepository
from app.schemas.badges import BadgeCreate, BadgeDTO, BadgeUpdate
from app.schemas.filtering import QueryDefaults
from app.services.base import BaseService


class BadgeService(BaseService[BadgeDTO]):
    def __init__(self, badges: BadgeRepository, defaults: QueryDefaults | None = None):
        super().__init__(badges, defaults)
        self._badges = badges

    async def _ensure_name_free(self, name: str) -> None:
        if await self._badges.exists_by_name(name):
            raise ConflictError(f"badge {name!r} already exists", code="CF_BADGE_001")

    async def create(self, payload: BadgeCreate) -> BadgeDTO:
        ensure_valid(payload)
        await self._ensure_name_free(payload.name)
        return await self._badges.create(payload)

    async def bulk_create(self, payloads: Sequence[BadgeCreate]) -> list[BadgeDTO]:
        """Create badges in order, stopping at the first failure.

        Every payload is validated before anything is written. Badges created
        before a failing one are kept.
        """
        ensure_valid(list(payloads))
        created = []
        for payload in payloads:
            await self._ensure_name_free(payload.name)
            created.append(await self._badges.create(payload))
        return created

    async def get_by_name(self, name: str) -> BadgeDTO:
        return await self._badges.find_by_name(name)

    async def update(self, payload: BadgeUpdate) -> BadgeDTO:
        ensure_valid(payload)
        existing = await self._badges.find_by_id(payload.id)
        if payload.name and payload.name != existing.name:
            await self._ensure_name_free(payload.name)
        return await self._badges.update(self._merge_update(existing, payload))

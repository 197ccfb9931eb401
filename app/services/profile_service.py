import os
import uuid
from typing import Any

from app.clients.storage import StorageClient, StorageClientError
from app.core.exceptions import BackendError, ConflictError, NotFoundError, ValidationError
from app.core.logging import get_logger
from app.core.validation import ensure_valid
from app.repositories.profile_repository import ProfileRepository
from app.repositories.user_repository import UserRepository
from app.schemas.filtering import QueryDefaults
from app.schemas.profiles import ProfileCreate, ProfileDTO, ProfileImageUpload, ProfileUpdate
from app.services.achievements import AchievementEvent, AchievementService
from app.services.base import BaseService

logger = get_logger(__name__)

AVATAR_PREFIX = "avatars"
IDENTITY_PREFIX = "identity"


class ProfileService(BaseService[ProfileDTO]):
    """Profiles of directory users.

    Creating a profile fires ``PROFILE_CREATED`` and verifying an identity
    document fires ``IDENTITY_VERIFIED``; the achievement rules decide which
    badges follow.
    """

    def __init__(
        self,
        profiles: ProfileRepository,
        users: UserRepository,
        achievements: AchievementService,
        storage: StorageClient,
        defaults: QueryDefaults | None = None,
    ):
        super().__init__(profiles, defaults)
        self._profiles = profiles
        self._users = users
        self._achievements = achievements
        self._storage = storage

    async def create(self, payload: ProfileCreate) -> ProfileDTO:
        ensure_valid(payload)
        if not await self._users.exists(payload.user_id):
            raise NotFoundError("user", f"user {payload.user_id} not found", {"id": payload.user_id})
        if await self._profiles.exists_by_user_id(payload.user_id):
            raise ConflictError(
                f"user {payload.user_id} already has a profile", code="CF_PROFILE_001"
            )

        profile = await self._profiles.create(payload)
        logger.info("profile_created", profile_id=str(profile.id), user_id=str(profile.user_id))
        await self._achievements.handle(AchievementEvent.PROFILE_CREATED, profile.user_id)
        return profile

    async def get_by_user_id(self, user_id: Any) -> ProfileDTO:
        return await self._profiles.find_by_user_id(user_id)

    async def find_by_fullname(self, fullname: str) -> list[ProfileDTO]:
        return await self._profiles.find_by_fullname(fullname)

    async def update(self, payload: ProfileUpdate) -> ProfileDTO:
        ensure_valid(payload)
        existing = await self._profiles.find_by_id(payload.id)
        return await self._profiles.update(self._merge_update(existing, payload))

    async def _store_image(self, prefix: str, profile: ProfileDTO, upload: ProfileImageUpload) -> str:
        if not upload.content_type.startswith("image/"):
            raise ValidationError("content_type", f"{upload.content_type!r} is not an image type")

        extension = os.path.splitext(upload.filename)[1].lower()
        path = f"{prefix}/{profile.user_id}/{uuid.uuid4().hex}{extension}"
        try:
            await self._storage.upload(path, upload.content, upload.content_type)
        except StorageClientError as e:
            raise BackendError(f"failed to store {prefix} image") from e
        return self._storage.get_public_url(path)

    async def update_avatar(self, upload: ProfileImageUpload) -> ProfileDTO:
        ensure_valid(upload)
        profile = await self._profiles.find_by_id(upload.id)
        url = await self._store_image(AVATAR_PREFIX, profile, upload)
        return await self._profiles.update_avatar(profile.id, url)

    async def verify_identity(self, upload: ProfileImageUpload) -> ProfileDTO:
        """Store the identity document and award the verification badges."""
        ensure_valid(upload)
        profile = await self._profiles.find_by_id(upload.id)
        url = await self._store_image(IDENTITY_PREFIX, profile, upload)
        updated = await self._profiles.update_identity_image(profile.id, url)
        logger.info("identity_verified", profile_id=str(profile.id), user_id=str(profile.user_id))
        await self._achievements.handle(AchievementEvent.IDENTITY_VERIFIED, profile.user_id)
        return updated

from app.core.exceptions import ConflictError
from app.core.logging import get_logger
from app.core.validation import ensure_valid
from app.repositories.user_repository import UserRepository
from app.schemas.filtering import QueryDefaults
from app.schemas.users import DEFAULT_ROLE, UserCreate, UserDTO, UserUpdate
from app.services.base import BaseService

logger = get_logger(__name__)


class UserService(BaseService[UserDTO]):
    def __init__(self, users: UserRepository, defaults: QueryDefaults | None = None):
        super().__init__(users, defaults)
        self._users = users

    async def create(self, payload: UserCreate) -> UserDTO:
        ensure_valid(payload)
        email = payload.email.strip().lower()
        if await self._users.exists_by_email(email):
            raise ConflictError(f"email {email} is already registered", code="CF_USER_001")

        user = await self._users.create(
            payload.model_copy(update={"email": email, "role": payload.role or DEFAULT_ROLE})
        )
        logger.info("user_created", user_id=str(user.id))
        return user

    async def get_by_email(self, email: str) -> UserDTO:
        return await self._users.find_by_email(email)

    async def update(self, payload: UserUpdate) -> UserDTO:
        ensure_valid(payload)
        existing = await self._users.find_by_id(payload.id)

        email = payload.email.strip().lower()
        if email and email != existing.email and await self._users.exists_by_email(email):
            raise ConflictError(f"email {email} is already registered", code="CF_USER_001")

        merged = self._merge_update(existing, payload.model_copy(update={"email": email}))
        return await self._users.update(merged)

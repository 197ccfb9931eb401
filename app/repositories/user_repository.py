from app.core.exceptions import NotFoundError
from app.repositories.directory import DirectoryRepository, FieldKind
from app.schemas.users import UserCreate, UserDTO, UserUpdate


class UserRepository(DirectoryRepository[UserCreate | UserUpdate, UserDTO]):
    """Users live in the identity directory, not in the table backend."""

    entity = "user"
    read_model = UserDTO
    fields = {
        "id": FieldKind.IDENTIFIER,
        "email": FieldKind.TEXT,
        "phone": FieldKind.TEXT,
        "role": FieldKind.TEXT,
        "created_at": FieldKind.TIMESTAMP,
        "last_sign_in_at": FieldKind.TIMESTAMP,
    }
    search_fields = ("email", "phone")

    async def find_by_email(self, email: str) -> UserDTO:
        users = await self.find_by_field("email", email.strip().lower())
        if not users:
            raise NotFoundError(self.entity, f"user with email {email!r} not found", {"email": email})
        return users[0]

    async def exists_by_email(self, email: str) -> bool:
        return bool(await self.find_by_field("email", email.strip().lower()))

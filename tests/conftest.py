"""Shared fixtures: an in-memory SQLite table backend and an in-memory directory."""
import os

os.environ["DATABASE_URL"] = "sqlite+aiosqlite:///:memory:"

import uuid
from datetime import datetime, timedelta, timezone
from typing import Any

import pytest
import pytest_asyncio
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine
from sqlalchemy.pool import StaticPool

import app.models  # noqa: F401
from app.clients.directory import DirectoryClient, DirectoryClientError
from app.clients.storage import StorageClientError
from app.db.database import Base
from app.repositories.badge_repository import BadgeRepository
from app.repositories.profile_repository import ProfileRepository
from app.repositories.user_badge_repository import UserBadgeRepository
from app.repositories.user_repository import UserRepository
from app.schemas.badges import BadgeCreate
from app.services.achievements import AchievementService


class InMemoryDirectory(DirectoryClient):
    """Directory double with the same paging and error behaviour as the real one."""

    def __init__(self):
        self.users: dict[str, dict[str, Any]] = {}
        self.list_calls: list[tuple[int, int]] = []

    def add(self, email: str, **attributes) -> dict[str, Any]:
        created_at = datetime(2024, 1, 1, tzinfo=timezone.utc) + timedelta(minutes=len(self.users))
        entry = {
            "id": str(uuid.uuid4()),
            "email": email,
            "phone": "",
            "role": "authenticated",
            "created_at": created_at.isoformat(),
            "updated_at": created_at.isoformat(),
            "last_sign_in_at": None,
            **attributes,
        }
        self.users[entry["id"]] = entry
        return entry

    async def create_user(self, attributes: dict[str, Any]) -> dict[str, Any]:
        email = attributes.get("email")
        if any(u["email"] == email for u in self.users.values()):
            raise DirectoryClientError(
                "A user with this email address has already been registered",
                status_code=422,
                error_code="email_exists",
            )
        fields = {k: v for k, v in attributes.items() if k != "password"}
        return self.add(**fields)

    async def get_user(self, user_id: str) -> dict[str, Any]:
        if user_id not in self.users:
            raise DirectoryClientError("User not found", status_code=404, error_code="user_not_found")
        return self.users[user_id]

    async def update_user(self, user_id: str, attributes: dict[str, Any]) -> dict[str, Any]:
        entry = await self.get_user(user_id)
        entry.update({k: v for k, v in attributes.items() if k != "password"})
        return entry

    async def delete_user(self, user_id: str) -> None:
        await self.get_user(user_id)
        del self.users[user_id]

    async def list_users(self, page: int, per_page: int) -> list[dict[str, Any]]:
        self.list_calls.append((page, per_page))
        entries = list(self.users.values())
        start = (page - 1) * per_page
        return entries[start:start + per_page]


class RecordingStorage:
    """Storage double that records uploads."""

    def __init__(self):
        self.uploads: list[tuple[str, bytes, str]] = []
        self.fail = False

    async def upload(self, path: str, content: bytes, content_type: str) -> str:
        if self.fail:
            raise StorageClientError("bucket unavailable", status_code=503)
        self.uploads.append((path, content, content_type))
        return path

    def get_public_url(self, path: str) -> str:
        return f"https://cdn.example/{path}"

    async def close(self) -> None:
        return None


@pytest_asyncio.fixture
async def engine():
    engine = create_async_engine(
        "sqlite+aiosqlite://",
        poolclass=StaticPool,
        connect_args={"check_same_thread": False},
    )
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    yield engine
    await engine.dispose()


@pytest.fixture
def session_maker(engine):
    return async_sessionmaker(engine, class_=AsyncSession, expire_on_commit=False)


@pytest_asyncio.fixture
async def session(session_maker):
    async with session_maker() as session:
        yield session


@pytest.fixture
def directory():
    return InMemoryDirectory()


@pytest.fixture
def storage():
    return RecordingStorage()


@pytest.fixture
def user_repo(directory):
    return UserRepository(directory)


@pytest.fixture
def profile_repo(session):
    return ProfileRepository(session)


@pytest.fixture
def badge_repo(session):
    return BadgeRepository(session)


@pytest.fixture
def user_badge_repo(session):
    return UserBadgeRepository(session)


@pytest_asyncio.fixture
async def achievement_badges(badge_repo):
    """Seed the badges awarded by the achievement rules."""
    explorer = await badge_repo.create(BadgeCreate(name="Penjelajah", description="Created a profile"))
    verified = await badge_repo.create(BadgeCreate(name="Warlok", description="Verified local resident"))
    return explorer, verified


@pytest.fixture
def achievements(badge_repo, user_badge_repo):
    return AchievementService(badge_repo, user_badge_repo)

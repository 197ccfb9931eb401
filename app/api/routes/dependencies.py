"""Shared dependencies for API routes.

Repositories and services are built per request. The directory and storage
clients are created once in the application lifespan and read from ``app.state``.
"""
from datetime import datetime

from fastapi import Depends, Query, Request
from sqlalchemy.ext.asyncio import AsyncSession

from app.clients.directory import DirectoryClient
from app.clients.storage import StorageClient
from app.config.settings import get_settings
from app.core.exceptions import ValidationError
from app.db.database import get_db
from app.repositories.badge_repository import BadgeRepository
from app.repositories.profile_repository import ProfileRepository
from app.repositories.user_badge_repository import UserBadgeRepository
from app.repositories.user_repository import UserRepository
from app.schemas.base import APIResponse, ResponseMeta
from app.schemas.filtering import FilterOperator, FilterOption, ListOptions, QueryDefaults
from app.schemas.pagination import PaginatedResult
from app.services.achievements import AchievementService
from app.services.badge_service import BadgeService
from app.services.profile_service import ProfileService
from app.services.user_badge_service import UserBadgeService
from app.services.user_service import UserService

LIST_OPERATORS = {FilterOperator.IN.value, FilterOperator.NOT_IN.value}


def get_query_defaults() -> QueryDefaults:
    return QueryDefaults.from_settings(get_settings())


def get_directory_client(request: Request) -> DirectoryClient:
    return request.app.state.directory_client


def get_storage_client(request: Request) -> StorageClient:
    return request.app.state.storage_client


def parse_filter(raw: str) -> FilterOption:
    """Parse ``field:operator:value``; list operators take comma-separated values."""
    parts = raw.split(":", 2)
    if len(parts) != 3:
        raise ValidationError("filter", f"{raw!r} must look like field:operator:value")
    field, operator, value = parts
    if operator in LIST_OPERATORS:
        return FilterOption(field=field, operator=operator, value=value.split(","))
    return FilterOption(field=field, operator=operator, value=value)


def get_list_options(
    page: int = Query(1),
    per_page: int | None = Query(None),
    sort_by: str | None = Query(None),
    sort_order: str = Query("desc"),
    search: str = Query(""),
    filter: list[str] | None = Query(None),
    defaults: QueryDefaults = Depends(get_query_defaults),
) -> ListOptions:
    opts = ListOptions(
        page=page,
        per_page=per_page if per_page is not None else defaults.default_page_size,
        sort_by=sort_by,
        sort_order=sort_order,
        search=search,
        filters=[parse_filter(f) for f in filter or []],
    )
    opts.normalize(defaults)
    opts.validate_options()
    return opts


def respond(request: Request, data=None, page: PaginatedResult | None = None) -> APIResponse:
    meta = ResponseMeta(
        request_id=getattr(request.state, "request_id", None),
        timestamp=datetime.utcnow(),
    )
    if page is not None:
        return APIResponse(data=page.items, meta=meta, pagination=page.pagination)
    return APIResponse(data=data, meta=meta)


def get_user_repository(
    client: DirectoryClient = Depends(get_directory_client),
    defaults: QueryDefaults = Depends(get_query_defaults),
) -> UserRepository:
    return UserRepository(client, defaults)


def get_profile_repository(
    db: AsyncSession = Depends(get_db),
    defaults: QueryDefaults = Depends(get_query_defaults),
) -> ProfileRepository:
    return ProfileRepository(db, defaults)


def get_badge_repository(
    db: AsyncSession = Depends(get_db),
    defaults: QueryDefaults = Depends(get_query_defaults),
) -> BadgeRepository:
    return BadgeRepository(db, defaults)


def get_user_badge_repository(
    db: AsyncSession = Depends(get_db),
    defaults: QueryDefaults = Depends(get_query_defaults),
) -> UserBadgeRepository:
    return UserBadgeRepository(db, defaults)


def get_achievement_service(
    badges: BadgeRepository = Depends(get_badge_repository),
    grants: UserBadgeRepository = Depends(get_user_badge_repository),
) -> AchievementService:
    return AchievementService(badges, grants)


def get_user_service(
    users: UserRepository = Depends(get_user_repository),
    defaults: QueryDefaults = Depends(get_query_defaults),
) -> UserService:
    return UserService(users, defaults)


def get_badge_service(
    badges: BadgeRepository = Depends(get_badge_repository),
    defaults: QueryDefaults = Depends(get_query_defaults),
) -> BadgeService:
    return BadgeService(badges, defaults)


def get_user_badge_service(
    grants: UserBadgeRepository = Depends(get_user_badge_repository),
    users: UserRepository = Depends(get_user_repository),
    badges: BadgeRepository = Depends(get_badge_repository),
    defaults: QueryDefaults = Depends(get_query_defaults),
) -> UserBadgeService:
    return UserBadgeService(grants, users, badges, defaults)


def get_profile_service(
    profiles: ProfileRepository = Depends(get_profile_repository),
    users: UserRepository = Depends(get_user_repository),
    achievements: AchievementService = Depends(get_achievement_service),
    storage: StorageClient = Depends(get_storage_client),
    defaults: QueryDefaults = Depends(get_query_defaults),
) -> ProfileService:
    return ProfileService(profiles, users, achievements, storage, defaults)

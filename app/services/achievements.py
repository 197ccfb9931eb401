"""Achievement badges awarded as a side effect of profile workflows.

Each ``AchievementEvent`` maps to the names of the badges it awards. A user holds
a badge at most once: ``try_grant`` raises ConflictError for a badge the user
already holds, and ``handle`` treats that case as a no-op.

Grants follow a workflow that has already committed, so ``handle`` logs a
missing badge or a backend failure and carries on without the grant.
"""
from enum import Enum
from typing import Any, Mapping

from app.config.settings import Settings, get_settings
from app.core.exceptions import BackendError, ConflictError, NotFoundError
from app.core.logging import get_logger
from app.repositories.badge_repository import BadgeRepository
from app.repositories.user_badge_repository import UserBadgeRepository
from app.schemas.user_badges import UserBadgeCreate, UserBadgeDTO

logger = get_logger(__name__)


class AchievementEvent(str, Enum):
    PROFILE_CREATED = "profile_created"
    IDENTITY_VERIFIED = "identity_verified"


def default_rules(settings: Settings | None = None) -> dict[AchievementEvent, tuple[str, ...]]:
    settings = settings or get_settings()
    return {
        AchievementEvent.PROFILE_CREATED: (settings.explorer_badge_name,),
        AchievementEvent.IDENTITY_VERIFIED: (settings.verified_locale_badge_name,),
    }


class AchievementService:
    def __init__(
        self,
        badges: BadgeRepository,
        grants: UserBadgeRepository,
        rules: Mapping[AchievementEvent, tuple[str, ...]] | None = None,
    ):
        self._badges = badges
        self._grants = grants
        self._rules = dict(rules) if rules is not None else default_rules()

    @property
    def rules(self) -> dict[AchievementEvent, tuple[str, ...]]:
        return dict(self._rules)

    async def try_grant(self, user_id: Any, badge_name: str) -> UserBadgeDTO:
        """Grant the named badge, raising ConflictError if it is already held."""
        badge = await self._badges.find_by_name(badge_name)
        if await self._grants.exists_for(user_id, badge.id):
            raise ConflictError(
                f"user {user_id} already holds badge {badge_name!r}",
                code="CF_USER_BADGE_001",
            )

        grant = await self._grants.create(
            UserBadgeCreate(user_id=str(user_id), badge_id=str(badge.id))
        )
        logger.info("badge_granted", user_id=str(user_id), badge=badge_name)
        return grant

    async def handle(self, event: AchievementEvent, user_id: Any) -> list[UserBadgeDTO]:
        granted = []
        for badge_name in self._rules.get(event, ()):
            try:
                granted.append(await self.try_grant(user_id, badge_name))
            except ConflictError:
                logger.info(
                    "badge_already_held",
                    trigger=event.value,
                    user_id=str(user_id),
                    badge=badge_name,
                )
            except NotFoundError:
                logger.warning(
                    "achievement_badge_missing",
                    trigger=event.value,
                    badge=badge_name,
                )
            except BackendError as e:
                logger.error(
                    "achievement_grant_failed",
                    trigger=event.value,
                    user_id=str(user_id),
                    badge=badge_name,
                    error=e.message,
                )
        return granted

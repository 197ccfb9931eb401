from datetime import datetime
from typing import ClassVar
from uuid import UUID

from pydantic import BaseModel, ConfigDict

from app.core.validation import RuleSet, identifier, required
from app.schemas.badges import BadgeDTO


class UserBadgeCreate(BaseModel):
    """Grant of one badge to one user."""

    user_id: str = ""
    badge_id: str = ""

    rules: ClassVar[RuleSet] = RuleSet(
        user_id=(required, identifier),
        badge_id=(required, identifier),
    )


class UserBadgeDTO(BaseModel):
    model_config = ConfigDict(frozen=True, from_attributes=True)

    id: UUID
    user_id: UUID
    badge_id: UUID
    created_at: datetime | None = None
    badge: BadgeDTO | None = None

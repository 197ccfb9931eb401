"""User profile payloads and read model."""
from datetime import datetime
from typing import ClassVar
from uuid import UUID

from pydantic import BaseModel, ConfigDict

from app.core.validation import RuleSet, identifier, max_length, required

MAX_IMAGE_BYTES = 5 * 1024 * 1024


class ProfileCreate(BaseModel):
    user_id: str = ""
    fullname: str = ""
    bio: str = ""
    avatar_url: str = ""

    rules: ClassVar[RuleSet] = RuleSet(
        user_id=(required, identifier),
        fullname=(required, max_length(120)),
        bio=(max_length(1000),),
        avatar_url=(max_length(2048),),
    )


class ProfileUpdate(BaseModel):
    """Partial update; empty fields keep their stored value."""

    id: str = ""
    fullname: str = ""
    bio: str = ""

    rules: ClassVar[RuleSet] = RuleSet(
        id=(required, identifier),
        fullname=(max_length(120),),
        bio=(max_length(1000),),
    )


class ProfileImageUpload(BaseModel):
    id: str = ""
    filename: str = ""
    content_type: str = "application/octet-stream"
    content: bytes = b""

    rules: ClassVar[RuleSet] = RuleSet(
        id=(required, identifier),
        filename=(required, max_length(255)),
        content=(required, max_length(MAX_IMAGE_BYTES)),
    )


class ProfileDTO(BaseModel):
    model_config = ConfigDict(frozen=True, from_attributes=True)

    id: UUID
    user_id: UUID
    fullname: str | None = None
    bio: str | None = None
    avatar_url: str | None = None
    identity_image_url: str | None = None
    created_at: datetime | None = None
    updated_at: datetime | None = None

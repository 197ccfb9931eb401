from datetime import datetime
from typing import ClassVar
from uuid import UUID

from pydantic import BaseModel, ConfigDict

from app.core.validation import RuleSet, identifier, max_length, required


class BadgeCreate(BaseModel):
    name: str = ""
    description: str = ""
    icon_url: str = ""

    rules: ClassVar[RuleSet] = RuleSet(
        name=(required, max_length(100)),
        description=(max_length(500),),
        icon_url=(max_length(2048),),
    )


class BadgeUpdate(BaseModel):
    id: str = ""
    name: str = ""
    description: str = ""
    icon_url: str = ""

    rules: ClassVar[RuleSet] = RuleSet(
        id=(required, identifier),
        name=(max_length(100),),
        description=(max_length(500),),
        icon_url=(max_length(2048),),
    )


class BadgeDTO(BaseModel):
    model_config = ConfigDict(frozen=True, from_attributes=True)

    id: UUID
    name: str
    description: str | None = None
    icon_url: str | None = None
    created_at: datetime | None = None
    updated_at: datetime | None = None

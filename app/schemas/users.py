"""Directory user payloads and read model."""
from datetime import datetime
from typing import ClassVar
from uuid import UUID

from pydantic import BaseModel, ConfigDict

from app.core import validation as v
from app.core.validation import RuleSet

DEFAULT_ROLE = "authenticated"


class UserCreate(BaseModel):
    email: str = ""
    password: str = ""
    phone: str = ""
    role: str = ""

    rules: ClassVar[RuleSet] = RuleSet(
        email=(v.required, v.email),
        password=(v.required, v.password),
        phone=(v.max_length(20),),
        role=(v.max_length(32),),
    )


class UserUpdate(BaseModel):
    id: str = ""
    email: str = ""
    password: str = ""
    phone: str = ""
    role: str = ""

    rules: ClassVar[RuleSet] = RuleSet(
        id=(v.required, v.identifier),
        email=(v.email,),
        password=(v.password,),
        phone=(v.max_length(20),),
        role=(v.max_length(32),),
    )


class UserDTO(BaseModel):
    model_config = ConfigDict(frozen=True, from_attributes=True)

    id: UUID
    email: str = ""
    phone: str = ""
    role: str = ""
    last_sign_in_at: datetime | None = None
    created_at: datetime | None = None
    updated_at: datetime | None = None

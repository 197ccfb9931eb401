from datetime import datetime
from typing import Generic, TypeVar

from pydantic import BaseModel, Field

from app.schemas.pagination import Pagination

T = TypeVar('T')


class ResponseMeta(BaseModel):
    request_id: str | None = None
    timestamp: datetime = Field(default_factory=datetime.utcnow)
    warnings: list[str] = Field(default_factory=list)


class APIError(BaseModel):
    code: str
    kind: str
    message: str
    details: dict | None = None


class APIResponse(BaseModel, Generic[T]):
    data: T | None = None
    meta: ResponseMeta | None = None
    errors: list[APIError] = Field(default_factory=list)
    pagination: Pagination | None = None

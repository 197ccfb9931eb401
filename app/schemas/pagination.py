from typing import Generic, TypeVar

from pydantic import BaseModel, ConfigDict

T = TypeVar('T')


class Pagination(BaseModel):
    model_config = ConfigDict(frozen=True)

    total: int
    page: int
    per_page: int
    total_pages: int
    has_next_page: bool

    @classmethod
    def build(cls, total: int, page: int, per_page: int) -> "Pagination":
        per_page = max(per_page, 1)
        return cls(
            total=total,
            page=page,
            per_page=per_page,
            total_pages=(total + per_page - 1) // per_page,
            has_next_page=page * per_page < total,
        )


class PaginatedResult(BaseModel, Generic[T]):
    model_config = ConfigDict(arbitrary_types_allowed=True)

    items: list[T]
    pagination: Pagination

from typing import Any, Generic, Sequence, TypeVar

from pydantic import BaseModel

from app.core.exceptions import NotFoundError
from app.core.validation import is_zero
from app.repositories.base import Repository
from app.schemas.filtering import FilterOption, ListOptions, QueryDefaults
from app.schemas.pagination import PaginatedResult, Pagination

R = TypeVar('R', bound=BaseModel)
P = TypeVar('P', bound=BaseModel)


class BaseService(Generic[R]):
    def __init__(self, repo: Repository, defaults: QueryDefaults | None = None):
        self._repo = repo
        self._defaults = defaults or QueryDefaults()

    async def _ensure_exists(self, repo: Repository, id: Any) -> None:
        if not await repo.exists(id):
            raise NotFoundError(repo.entity, f"{repo.entity} {id} not found", {"id": str(id)})

    @staticmethod
    def _merge_update(existing: BaseModel, payload: P) -> P:
        """Fill the zero-valued fields of ``payload`` from the stored entity."""
        merged = {}
        for name, value in payload.model_dump().items():
            stored = getattr(existing, name, None)
            if is_zero(value) and stored is not None:
                merged[name] = stored
        return payload.model_copy(update=merged)

    def _page(self, items: Sequence[R], total: int, opts: ListOptions) -> PaginatedResult[R]:
        return PaginatedResult(
            items=list(items),
            pagination=Pagination.build(total, opts.page, opts.per_page),
        )

    async def get(self, id: Any) -> R:
        return await self._repo.find_by_id(id)

    async def list(self, opts: ListOptions) -> PaginatedResult[R]:
        opts.normalize(self._defaults)
        items, total = await self._repo.search(opts)
        return self._page(items, total, opts)

    async def count(self, filters: Sequence[FilterOption] = ()) -> int:
        return await self._repo.count(filters)

    async def delete(self, id: Any) -> None:
        await self._repo.delete(id)

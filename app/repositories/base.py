"""Generic repository contract shared by every backend adapter."""
from __future__ import annotations

from abc import ABC, abstractmethod
from typing import Any, Generic, Sequence, TypeVar

from pydantic import BaseModel

from app.core.exceptions import NotFoundError
from app.schemas.filtering import FilterOption, ListOptions

W = TypeVar('W', bound=BaseModel)
R = TypeVar('R', bound=BaseModel)


class Repository(ABC, Generic[W, R]):
    """CRUD, listing and bulk operations over write model ``W`` and read model ``R``.

    Every adapter raises only ``DomainError`` subclasses: NotFoundError,
    ConflictError, ValidationError or BackendError.

    Bulk operations apply the single-item operation to each element in order and
    stop at the first failure. Elements applied before the failure stay applied.
    """

    entity: str = "entity"

    @abstractmethod
    async def create(self, value: W) -> R:
        ...

    @abstractmethod
    async def find_by_id(self, id: str) -> R:
        """Return the entity or raise NotFoundError."""

    @abstractmethod
    async def update(self, value: W) -> R:
        ...

    @abstractmethod
    async def delete(self, id: str) -> None:
        ...

    @abstractmethod
    async def exists(self, id: str) -> bool:
        ...

    @abstractmethod
    async def find_by_field(self, field: str, value: Any) -> list[R]:
        ...

    @abstractmethod
    async def list(self, opts: ListOptions) -> list[R]:
        ...

    @abstractmethod
    async def count(self, filters: Sequence[FilterOption]) -> int:
        ...

    @abstractmethod
    async def search(self, opts: ListOptions) -> tuple[list[R], int]:
        """Return one page of matches and the total number of matches."""

    async def bulk_create(self, values: Sequence[W]) -> list[R]:
        results = []
        for value in values:
            results.append(await self.create(value))
        return results

    async def bulk_update(self, values: Sequence[W]) -> list[R]:
        results = []
        for value in values:
            results.append(await self.update(value))
        return results

    async def bulk_delete(self, ids: Sequence[str]) -> None:
        for id in ids:
            await self.delete(id)

    async def bulk_upsert(self, values: Sequence[W]) -> list[R]:
        """Update each value, creating it when it has no id or does not exist yet."""
        results = []
        for value in values:
            if not getattr(value, "id", None):
                results.append(await self.create(value))
                continue
            try:
                results.append(await self.update(value))
            except NotFoundError:
                results.append(await self.create(value))
        return results

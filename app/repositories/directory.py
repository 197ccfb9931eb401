"""Repository adapter for the identity directory.

The directory only offers page/per_page listing, so filtering, sorting, counting
and the page window are all computed here after walking every directory page.

Sorting is limited to the whitelisted fields below; entries missing the sort
field are placed last regardless of direction.
"""
from __future__ import annotations

from datetime import datetime, timezone
from enum import Enum
from typing import Any, AsyncIterator, Awaitable, Callable, ClassVar, Sequence, TypeVar
from uuid import UUID

from app.clients.directory import DirectoryClient, DirectoryClientError
from app.core.exceptions import (
    BackendError,
    ConflictError,
    DomainError,
    NotFoundError,
    ValidationError,
)
from app.core.logging import get_logger
from app.core.pagination import paginate_results
from app.repositories.base import R, Repository, W
from app.schemas.filtering import FilterOperator, FilterOption, ListOptions, QueryDefaults

logger = get_logger(__name__)

T = TypeVar('T')

CONFLICT_ERROR_CODES = {"email_exists", "phone_exists", "user_already_exists"}


class FieldKind(str, Enum):
    TEXT = "text"
    IDENTIFIER = "identifier"
    TIMESTAMP = "timestamp"


TEXT_OPERATORS = {
    FilterOperator.LIKE,
    FilterOperator.STARTS_WITH,
    FilterOperator.ENDS_WITH,
}


def _as_aware(value: datetime) -> datetime:
    return value if value.tzinfo else value.replace(tzinfo=timezone.utc)


def typed_value(kind: FieldKind, field: str, value: Any) -> Any:
    """Convert a filter value into the type stored for ``kind``.

    Values of the wrong type raise ValidationError instead of being compared
    as strings.
    """
    if isinstance(value, list):
        return [typed_value(kind, field, v) for v in value]

    if kind is FieldKind.TEXT:
        if not isinstance(value, str):
            raise ValidationError(field, f"expects a text value, got {type(value).__name__}")
        return value

    if kind is FieldKind.IDENTIFIER:
        if isinstance(value, UUID):
            return value
        if isinstance(value, str):
            try:
                return UUID(value)
            except ValueError:
                pass
        raise ValidationError(field, f"expects an identifier, got {value!r}")

    if isinstance(value, datetime):
        return _as_aware(value)
    if isinstance(value, str):
        try:
            return _as_aware(datetime.fromisoformat(value))
        except ValueError:
            pass
    raise ValidationError(field, f"expects a timestamp, got {value!r}")


def matches(kind: FieldKind, operator: FilterOperator, actual: Any, expected: Any) -> bool:
    """Evaluate one predicate against a stored value of the given kind."""
    if kind is FieldKind.TIMESTAMP and actual is not None:
        actual = _as_aware(actual)

    if operator is FilterOperator.EQ:
        return actual == expected
    if operator is FilterOperator.NE:
        return actual != expected
    if operator is FilterOperator.IN:
        return actual in expected
    if operator is FilterOperator.NOT_IN:
        return actual not in expected

    if actual is None:
        return False
    haystack = str(actual).lower()
    needle = str(expected).lower()
    if operator is FilterOperator.LIKE:
        return needle in haystack
    if operator is FilterOperator.STARTS_WITH:
        return haystack.startswith(needle)
    if operator is FilterOperator.ENDS_WITH:
        return haystack.endswith(needle)
    raise ValidationError("operator", f"{operator.value!r} is not supported by the directory")


class DirectoryRepository(Repository[W, R]):
    """Repository over a ``DirectoryClient`` with client-side query evaluation."""

    read_model: ClassVar[type[R]]
    fields: ClassVar[dict[str, FieldKind]] = {}
    search_fields: ClassVar[tuple[str, ...]] = ()
    supported_operators: ClassVar[tuple[FilterOperator, ...]] = (
        FilterOperator.EQ,
        FilterOperator.NE,
        FilterOperator.IN,
        FilterOperator.NOT_IN,
        FilterOperator.LIKE,
        FilterOperator.STARTS_WITH,
        FilterOperator.ENDS_WITH,
    )

    def __init__(self, client: DirectoryClient, defaults: QueryDefaults | None = None):
        self._client = client
        self._defaults = defaults or QueryDefaults()

    # -- backend access ------------------------------------------------------

    def _map_error(self, e: DirectoryClientError, action: str) -> DomainError:
        message = str(e)
        if e.status_code == 404:
            return NotFoundError(self.entity, f"{self.entity} not found")
        if (
            e.status_code == 409
            or e.error_code in CONFLICT_ERROR_CODES
            or (e.status_code == 422 and "already" in message.lower())
        ):
            return ConflictError(message, code=f"CF_{self.entity.upper()}_001")
        if e.status_code in (400, 422):
            return ValidationError(self.entity, message)
        logger.error(
            "directory_backend_error",
            entity=self.entity,
            action=action,
            status_code=e.status_code,
            error=message,
        )
        return BackendError(f"failed to {action} {self.entity}")

    async def _call(self, action: str, call: Callable[[], Awaitable[T]]) -> T:
        try:
            return await call()
        except DirectoryClientError as e:
            raise self._map_error(e, action) from e

    async def _entries(self) -> AsyncIterator[R]:
        """Yield every directory entry, one directory page at a time."""
        per_page = self._defaults.max_page_size
        page = 1
        while True:
            batch = await self._call(
                "list", lambda: self._client.list_users(page=page, per_page=per_page)
            )
            for entry in batch:
                yield self._to_read(entry)
            if len(batch) < per_page:
                return
            page += 1

    def _to_read(self, entry: dict[str, Any]) -> R:
        return self.read_model.model_validate(
            {
                name: entry[name]
                for name in self.read_model.model_fields
                if entry.get(name) is not None
            }
        )

    def _attributes(self, value: W) -> dict[str, Any]:
        return {
            name: v
            for name, v in value.model_dump(exclude={"id"}).items()
            if v not in (None, "")
        }

    def _parse_id(self, id: Any) -> UUID:
        return typed_value(FieldKind.IDENTIFIER, "id", id if isinstance(id, UUID) else str(id))

    # -- query evaluation ----------------------------------------------------

    def _kind(self, field: str, purpose: str = "filter") -> FieldKind:
        kind = self.fields.get(field)
        if kind is None:
            raise ValidationError(purpose, f"field {field!r} cannot be queried on {self.entity}")
        return kind

    def _compile(self, filters: Sequence[FilterOption]) -> Callable[[R], bool]:
        """Type-check filters once and return a predicate over read models."""
        compiled = []
        for option in filters:
            kind = self._kind(option.field)
            operator = FilterOperator(option.operator)
            expected = typed_value(kind, option.field, option.value)
            is_list = isinstance(expected, list)
            if operator in (FilterOperator.IN, FilterOperator.NOT_IN) and not is_list:
                raise ValidationError(option.field, f"operator {operator.value!r} expects a list")
            if operator not in (FilterOperator.IN, FilterOperator.NOT_IN) and is_list:
                raise ValidationError(option.field, f"operator {operator.value!r} expects a single value")
            if operator in TEXT_OPERATORS and kind is FieldKind.TIMESTAMP:
                raise ValidationError(option.field, f"operator {operator.value!r} needs a text field")
            compiled.append((option.field, kind, operator, expected))

        def predicate(item: R) -> bool:
            return all(
                matches(kind, operator, getattr(item, field, None), expected)
                for field, kind, operator, expected in compiled
            )

        return predicate

    def _term_matcher(self, term: str) -> Callable[[R], bool]:
        needle = term.lower()

        def predicate(item: R) -> bool:
            if not needle:
                return True
            return any(
                needle in str(getattr(item, name, None) or "").lower()
                for name in self.search_fields
            )

        return predicate

    def _sorted(self, items: list[R], opts: ListOptions) -> list[R]:
        sort_by = opts.sort_by or self._defaults.default_sort_field
        if sort_by not in self.fields:
            if opts.sort_by:
                self._kind(sort_by, purpose="sort_by")
            return items
        kind = self.fields[sort_by]

        def key(item: R):
            value = getattr(item, sort_by, None)
            if kind is FieldKind.TIMESTAMP and value is not None:
                value = _as_aware(value)
            return value

        present = [i for i in items if key(i) is not None]
        missing = [i for i in items if key(i) is None]
        present.sort(key=key, reverse=opts.descending)
        return present + missing

    async def _matching(self, opts: ListOptions, search: str = "") -> list[R]:
        opts.normalize(self._defaults)
        opts.validate_options(self.supported_operators)
        predicate = self._compile(opts.filters)
        term = self._term_matcher(search)
        found = [item async for item in self._entries() if predicate(item) and term(item)]
        return self._sorted(found, opts)

    # -- contract ------------------------------------------------------------

    async def create(self, value: W) -> R:
        attributes = self._attributes(value)
        entry = await self._call("create", lambda: self._client.create_user(attributes))
        logger.info("directory_entry_created", entity=self.entity, id=entry.get("id"))
        return self._to_read(entry)

    async def find_by_id(self, id: Any) -> R:
        user_id = str(self._parse_id(id))
        entry = await self._call("fetch", lambda: self._client.get_user(user_id))
        return self._to_read(entry)

    async def update(self, value: W) -> R:
        if not getattr(value, "id", None):
            raise ValidationError("id", "is required for update")
        user_id = str(self._parse_id(value.id))
        attributes = self._attributes(value)
        entry = await self._call("update", lambda: self._client.update_user(user_id, attributes))
        return self._to_read(entry)

    async def delete(self, id: Any) -> None:
        user_id = str(self._parse_id(id))
        await self._call("delete", lambda: self._client.delete_user(user_id))

    async def exists(self, id: Any) -> bool:
        try:
            await self.find_by_id(id)
        except NotFoundError:
            return False
        return True

    async def find_by_field(self, field: str, value: Any) -> list[R]:
        predicate = self._compile(
            [FilterOption(field=field, operator=FilterOperator.EQ.value, value=value)]
        )
        return [item async for item in self._entries() if predicate(item)]

    async def list(self, opts: ListOptions) -> list[R]:
        found = await self._matching(opts)
        window, _ = paginate_results(found, opts.page, opts.per_page)
        return window

    async def count(self, filters: Sequence[FilterOption]) -> int:
        ListOptions(filters=list(filters)).validate_options(self.supported_operators)
        predicate = self._compile(filters)
        total = 0
        async for item in self._entries():
            if predicate(item):
                total += 1
        return total

    async def search(self, opts: ListOptions) -> tuple[list[R], int]:
        found = await self._matching(opts, opts.search)
        window, pagination = paginate_results(found, opts.page, opts.per_page)
        return window, pagination.total

"""Repository adapter for the relational table backend."""
from __future__ import annotations

from contextlib import asynccontextmanager
from datetime import date, datetime, timezone
from decimal import Decimal
from typing import Any, ClassVar, Sequence
from uuid import UUID

from sqlalchemy import (
    Boolean,
    Column,
    Date,
    DateTime,
    Float,
    Integer,
    Numeric,
    String,
    Uuid,
    cast,
    delete,
    func,
    or_,
    select,
    update,
)
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.sql import Select

from app.core.exceptions import (
    BackendError,
    ConflictError,
    DomainError,
    NotFoundError,
    ValidationError,
)
from app.core.logging import get_logger
from app.db.database import Base, utcnow
from app.repositories.base import R, Repository, W
from app.schemas.filtering import FilterOperator, FilterOption, ListOptions, QueryDefaults

logger = get_logger(__name__)

TRUTHY = {"true", "1", "yes"}
FALSY = {"false", "0", "no"}

TEXT_OPERATORS = {
    FilterOperator.LIKE,
    FilterOperator.STARTS_WITH,
    FilterOperator.ENDS_WITH,
}


class TableRepository(Repository[W, R]):
    """Translates the repository contract into SQL on one table.

    Filters become column predicates, sort options an ORDER BY clause with the
    primary key as tiebreaker, and the page window an OFFSET/LIMIT pair.
    ``search`` ORs a case-insensitive substring match across ``search_fields``.
    """

    model: ClassVar[type[Base]]
    read_model: ClassVar[type[R]]
    search_fields: ClassVar[tuple[str, ...]] = ()
    load_options: ClassVar[tuple] = ()
    supported_operators: ClassVar[tuple[FilterOperator, ...]] = tuple(FilterOperator)

    def __init__(self, session: AsyncSession, defaults: QueryDefaults | None = None):
        self._session = session
        self._defaults = defaults or QueryDefaults()

    # -- translation helpers -------------------------------------------------

    @property
    def _pk(self) -> Column:
        return self.model.__table__.c.id

    def _column(self, name: str, purpose: str = "filter") -> Column:
        column = self.model.__table__.c.get(name)
        if column is None:
            raise ValidationError(purpose, f"unknown field {name!r} for {self.entity}")
        return column

    def _coerce(self, column: Column, value: Any) -> Any:
        """Convert a filter value to the python type of ``column``.

        Query strings arrive as text, so values are parsed here and a value that
        does not parse is a ValidationError rather than a backend failure.
        """
        if isinstance(value, list):
            return [self._coerce(column, v) for v in value]
        if not isinstance(value, str):
            return value

        column_type = column.type
        try:
            if isinstance(column_type, Uuid):
                return UUID(value)
            if isinstance(column_type, DateTime):
                parsed = datetime.fromisoformat(value)
                if column_type.timezone and parsed.tzinfo is None:
                    parsed = parsed.replace(tzinfo=timezone.utc)
                return parsed
            if isinstance(column_type, Date):
                return date.fromisoformat(value)
            if isinstance(column_type, Boolean):
                if value.lower() not in TRUTHY | FALSY:
                    raise ValueError(value)
                return value.lower() in TRUTHY
            if isinstance(column_type, Integer):
                return int(value)
            if isinstance(column_type, Float):
                return float(value)
            if isinstance(column_type, Numeric):
                return Decimal(value)
        except (ValueError, ArithmeticError):
            raise ValidationError(
                column.name, f"{value!r} is not a valid {column_type.__class__.__name__.lower()}"
            )
        return value

    def _parse_id(self, id: Any) -> UUID:
        if isinstance(id, UUID):
            return id
        try:
            return UUID(str(id))
        except ValueError:
            raise ValidationError("id", f"{id!r} is not a valid identifier")

    @staticmethod
    def _text(column: Column):
        return column if isinstance(column.type, String) else cast(column, String)

    def _predicate(self, option: FilterOption):
        column = self._column(option.field)
        operator = FilterOperator(option.operator)
        if operator in TEXT_OPERATORS:
            value = option.value
        else:
            value = self._coerce(column, option.value)

        if operator in (FilterOperator.IN, FilterOperator.NOT_IN):
            if not isinstance(value, list):
                raise ValidationError(option.field, f"operator {operator.value!r} expects a list")
            return column.in_(value) if operator is FilterOperator.IN else column.not_in(value)
        if isinstance(value, list):
            raise ValidationError(option.field, f"operator {operator.value!r} expects a single value")

        if operator is FilterOperator.EQ:
            return column == value
        if operator is FilterOperator.NE:
            return column != value
        if operator is FilterOperator.GT:
            return column > value
        if operator is FilterOperator.LT:
            return column < value
        if operator is FilterOperator.GTE:
            return column >= value
        if operator is FilterOperator.LTE:
            return column <= value
        if operator is FilterOperator.LIKE:
            return self._text(column).icontains(str(value), autoescape=True)
        if operator is FilterOperator.STARTS_WITH:
            return self._text(column).istartswith(str(value), autoescape=True)
        return self._text(column).iendswith(str(value), autoescape=True)

    def _apply_filters(self, stmt: Select, filters: Sequence[FilterOption]) -> Select:
        for option in filters:
            stmt = stmt.where(self._predicate(option))
        return stmt

    def _apply_search(self, stmt: Select, term: str) -> Select:
        if not term or not self.search_fields:
            return stmt
        return stmt.where(
            or_(
                *(
                    self._text(self._column(name)).icontains(term, autoescape=True)
                    for name in self.search_fields
                )
            )
        )

    def _apply_order(self, stmt: Select, opts: ListOptions) -> Select:
        sort_by = opts.sort_by
        if not sort_by and self._defaults.default_sort_field in self.model.__table__.c:
            sort_by = self._defaults.default_sort_field
        if sort_by:
            column = self._column(sort_by, purpose="sort_by")
            stmt = stmt.order_by(column.desc() if opts.descending else column.asc())
        return stmt.order_by(self._pk)

    def _apply_window(self, stmt: Select, opts: ListOptions) -> Select:
        limit, offset = opts.limit_offset()
        return stmt.offset(offset).limit(limit)

    def _select(self) -> Select:
        # Rows are refreshed from the database, never served stale from the identity map.
        return (
            select(self.model)
            .options(*self.load_options)
            .execution_options(populate_existing=True)
        )

    def _to_read(self, row: Base) -> R:
        return self.read_model.model_validate(row)

    def _values(self, value: W) -> dict[str, Any]:
        columns = self.model.__table__.c
        return {
            name: self._coerce(columns[name], v)
            for name, v in value.model_dump().items()
            if name in columns and name not in ("id", "created_at", "updated_at")
        }

    @asynccontextmanager
    async def _guard(self, action: str):
        """Map backend failures onto the error taxonomy."""
        try:
            yield
        except DomainError:
            raise
        except IntegrityError as e:
            await self._session.rollback()
            logger.info("table_constraint_violation", entity=self.entity, action=action)
            raise ConflictError(
                f"{self.entity} {action} conflicts with an existing record",
                code=f"CF_{self.entity.upper()}_001",
            ) from e
        except SQLAlchemyError as e:
            await self._session.rollback()
            logger.error("table_backend_error", entity=self.entity, action=action, error=str(e))
            raise BackendError(f"failed to {action} {self.entity}") from e

    # -- contract ------------------------------------------------------------

    async def create(self, value: W) -> R:
        async with self._guard("create"):
            row = self.model(**self._values(value))
            self._session.add(row)
            await self._session.commit()
            return await self.find_by_id(row.id)

    async def find_by_id(self, id: Any) -> R:
        pk = self._parse_id(id)
        async with self._guard("fetch"):
            result = await self._session.execute(self._select().where(self._pk == pk))
            row = result.scalar_one_or_none()
        if row is None:
            raise NotFoundError(self.entity, f"{self.entity} {pk} not found", {"id": str(pk)})
        return self._to_read(row)

    async def update(self, value: W) -> R:
        id = getattr(value, "id", None)
        if not id:
            raise ValidationError("id", "is required for update")
        return await self._update_values(id, self._values(value))

    async def _update_values(self, id: Any, values: dict[str, Any]) -> R:
        pk = self._parse_id(id)
        if "updated_at" in self.model.__table__.c:
            values = {**values, "updated_at": utcnow()}
        async with self._guard("update"):
            result = await self._session.execute(
                update(self.model)
                .where(self._pk == pk)
                .values(**values)
                .execution_options(synchronize_session=False)
            )
            if result.rowcount == 0:
                await self._session.rollback()
                raise NotFoundError(self.entity, f"{self.entity} {pk} not found", {"id": str(pk)})
            await self._session.commit()
        return await self.find_by_id(pk)

    async def delete(self, id: Any) -> None:
        pk = self._parse_id(id)
        async with self._guard("delete"):
            result = await self._session.execute(
                delete(self.model)
                .where(self._pk == pk)
                .execution_options(synchronize_session=False)
            )
            if result.rowcount == 0:
                await self._session.rollback()
                raise NotFoundError(self.entity, f"{self.entity} {pk} not found", {"id": str(pk)})
            await self._session.commit()

    async def exists(self, id: Any) -> bool:
        pk = self._parse_id(id)
        return await self._exists_where(self._pk == pk)

    async def _exists_where(self, *criteria) -> bool:
        async with self._guard("fetch"):
            result = await self._session.execute(
                select(self._pk).where(*criteria).limit(1)
            )
            return result.first() is not None

    async def find_by_field(self, field: str, value: Any) -> list[R]:
        column = self._column(field)
        async with self._guard("fetch"):
            result = await self._session.execute(
                self._select().where(column == self._coerce(column, value))
            )
            return [self._to_read(row) for row in result.scalars().all()]

    async def list(self, opts: ListOptions) -> list[R]:
        opts.normalize(self._defaults)
        opts.validate_options(self.supported_operators)
        stmt = self._apply_filters(self._select(), opts.filters)
        stmt = self._apply_window(self._apply_order(stmt, opts), opts)
        async with self._guard("list"):
            result = await self._session.execute(stmt)
            return [self._to_read(row) for row in result.scalars().all()]

    async def count(self, filters: Sequence[FilterOption]) -> int:
        ListOptions(filters=list(filters)).validate_options(self.supported_operators)
        stmt = self._apply_filters(select(func.count()).select_from(self.model), filters)
        async with self._guard("count"):
            result = await self._session.execute(stmt)
            return result.scalar_one()

    async def search(self, opts: ListOptions) -> tuple[list[R], int]:
        opts.normalize(self._defaults)
        opts.validate_options(self.supported_operators)
        counted = self._apply_search(
            self._apply_filters(select(self._pk), opts.filters), opts.search
        )
        matched = self._apply_search(
            self._apply_filters(self._select(), opts.filters), opts.search
        )

        async with self._guard("search"):
            # Total reflects the filters and search term, not the page window.
            total = (
                await self._session.execute(
                    select(func.count()).select_from(counted.subquery())
                )
            ).scalar_one()
            result = await self._session.execute(
                self._apply_window(self._apply_order(matched, opts), opts)
            )
            items = [self._to_read(row) for row in result.scalars().all()]
        return items, total

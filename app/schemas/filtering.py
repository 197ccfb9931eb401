"""List/filter/sort/paginate query descriptor shared by every repository."""
from dataclasses import dataclass
from datetime import datetime
from enum import Enum
from typing import Iterable, Mapping, Union
from uuid import UUID

from pydantic import BaseModel, Field

from app.config.settings import Settings
from app.core.exceptions import ValidationError


class FilterOperator(str, Enum):
    EQ = "eq"
    NE = "ne"
    GT = "gt"
    LT = "lt"
    GTE = "gte"
    LTE = "lte"
    IN = "in"
    NOT_IN = "not_in"
    LIKE = "like"
    STARTS_WITH = "starts_with"
    ENDS_WITH = "ends_with"


class SortOrder(str, Enum):
    ASC = "asc"
    DESC = "desc"


Scalar = Union[bool, int, float, datetime, UUID, str]
FilterValue = Union[Scalar, list[Scalar]]


@dataclass(frozen=True)
class QueryDefaults:
    default_page_size: int = 10
    max_page_size: int = 100
    default_sort_field: str = "created_at"

    @classmethod
    def from_settings(cls, settings: Settings) -> "QueryDefaults":
        return cls(
            default_page_size=settings.default_page_size,
            max_page_size=settings.max_page_size,
            default_sort_field=settings.default_sort_field,
        )


class FilterOption(BaseModel):
    field: str = ""
    operator: str = ""
    value: FilterValue | None = None


class ListOptions(BaseModel):
    page: int = 1
    per_page: int = 10
    sort_by: str | None = None
    sort_order: str = SortOrder.DESC.value
    filters: list[FilterOption] = Field(default_factory=list)
    search: str = ""

    def normalize(self, defaults: QueryDefaults | None = None) -> "ListOptions":
        """Clamp pagination into range. Mutates and returns self."""
        defaults = defaults or QueryDefaults()
        if self.page < 1:
            self.page = 1
        if self.per_page < 1:
            self.per_page = defaults.default_page_size
        if self.per_page > defaults.max_page_size:
            self.per_page = defaults.max_page_size
        if not self.sort_order:
            self.sort_order = SortOrder.DESC.value
        return self

    def validate_options(
        self, supported_operators: Iterable[FilterOperator] | None = None
    ) -> None:
        """Reject malformed sort order and filters.

        When ``supported_operators`` is given, any filter using another operator
        fails here instead of being ignored by the backend.
        """
        problems = []

        if self.sort_order not in {s.value for s in SortOrder}:
            problems.append(f"invalid sort order {self.sort_order!r}")

        known = {op.value for op in FilterOperator}
        supported = (
            {FilterOperator(op).value for op in supported_operators}
            if supported_operators is not None
            else known
        )
        for f in self.filters:
            if not f.field:
                problems.append("filter field cannot be empty")
            if not f.operator:
                problems.append("filter operator cannot be empty")
            elif f.operator not in known:
                problems.append(f"unknown filter operator {f.operator!r}")
            elif f.operator not in supported:
                problems.append(f"filter operator {f.operator!r} is not supported by this backend")

        if problems:
            raise ValidationError(
                "list_options",
                "; ".join(problems),
                {"field": "list_options", "problems": problems},
            )

    @property
    def descending(self) -> bool:
        return self.sort_order != SortOrder.ASC.value

    def limit_offset(self) -> tuple[int, int]:
        per_page = self.per_page if self.per_page > 0 else 10
        page = self.page if self.page > 0 else 1
        return per_page, (page - 1) * per_page


def build_filter_options(filters: Mapping[str, FilterValue]) -> list[FilterOption]:
    """Equality filters from a field -> value mapping."""
    return [
        FilterOption(field=field, operator=FilterOperator.EQ.value, value=value)
        for field, value in filters.items()
    ]

from typing import Sequence, TypeVar

from app.schemas.pagination import Pagination

T = TypeVar('T')


def paginate_results(items: Sequence[T], page: int, per_page: int) -> tuple[list[T], Pagination]:
    """Slice an in-memory result set to one page and describe it."""
    total = len(items)
    start = (page - 1) * per_page
    end = min(start + per_page, total)
    if start >= total:
        return [], Pagination.build(total, page, per_page)
    return list(items[start:end]), Pagination.build(total, page, per_page)

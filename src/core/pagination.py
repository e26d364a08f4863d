from dataclasses import dataclass
from math import ceil
from typing import Generic, List, Sequence, TypeVar

T = TypeVar("T")

PAGE_SIZE = 5


@dataclass(frozen=True)
class Page(Generic[T]):
    items: List[T]
    page: int
    total_pages: int

    @property
    def has_next(self) -> bool:
        return self.page < self.total_pages

    @property
    def has_prev(self) -> bool:
        return self.page > 1


def total_pages(result_cnt: int, page_size: int = PAGE_SIZE) -> int:
    if page_size < 1:
        raise ValueError("page_size must be positive")
    return max(1, ceil(result_cnt / page_size))


def clamp_page(page: int, result_cnt: int, page_size: int = PAGE_SIZE) -> int:
    return min(max(1, page), total_pages(result_cnt, page_size))


def paginate(
    results: Sequence[T], page_size: int = PAGE_SIZE, page: int = 1
) -> Page[T]:
    """
    Slice one page out of ``results``. Page numbers start from 1 and are
    clamped into range, so an empty result set still has exactly one page.
    """
    page = clamp_page(page, len(results), page_size)
    start = (page - 1) * page_size
    return Page(
        items=list(results[start : start + page_size]),
        page=page,
        total_pages=total_pages(len(results), page_size),
    )


def next_page(page: int, result_cnt: int, page_size: int = PAGE_SIZE) -> int:
    return clamp_page(page + 1, result_cnt, page_size)


def prev_page(page: int, result_cnt: int, page_size: int = PAGE_SIZE) -> int:
    return clamp_page(page - 1, result_cnt, page_size)

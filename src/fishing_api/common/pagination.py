from __future__ import annotations

from math import ceil
from typing import TypeVar

from fishing_api.common.schemas import NumberedPage, PageInfo

T = TypeVar("T")

DEFAULT_PAGE_LIMIT = 10
MAX_PAGE_LIMIT = 100


def clamp_page(page: int, limit: int) -> tuple[int, int]:
    safe_page = max(1, page)
    safe_limit = max(1, min(limit, MAX_PAGE_LIMIT))
    return safe_page, safe_limit


def page_offset(page: int, limit: int) -> int:
    return (page - 1) * limit


def build_page(*, items: list[T], total: int, page: int, limit: int) -> NumberedPage[T]:
    return NumberedPage[T](
        items=items,
        pagination=PageInfo(
            total=total,
            page=page,
            limit=limit,
            pages=ceil(total / limit) if limit > 0 else 0,
        ),
    )

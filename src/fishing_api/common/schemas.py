from __future__ import annotations

from typing import Generic, TypeVar

from pydantic import BaseModel

T = TypeVar("T")


class PageInfo(BaseModel):
    total: int
    page: int
    limit: int
    pages: int


class NumberedPage(BaseModel, Generic[T]):
    items: list[T]
    pagination: PageInfo


class SuccessResponse(BaseModel):
    success: bool = True

"""
Shared response schemas.
"""

import math
from typing import Generic, TypeVar

from pydantic import BaseModel

T = TypeVar("T")


class PageResponse(BaseModel, Generic[T]):
    """One page of a 1-indexed paginated listing."""

    records: list[T]
    total: int
    page: int
    size: int
    total_pages: int

    @classmethod
    def build(cls, records: list[T], total: int, page: int, size: int) -> "PageResponse[T]":
        """Build a page, deriving total_pages from total and size."""
        total_pages = math.ceil(total / size) if size > 0 else 0
        return cls(records=records, total=total, page=page, size=size, total_pages=total_pages)

    @classmethod
    def empty(cls, page: int, size: int) -> "PageResponse[T]":
        return cls(records=[], total=0, page=page, size=size, total_pages=0)


def page_offset(page: int, size: int) -> int:
    """Convert a 1-indexed page number into a 0-indexed row offset."""
    return (page - 1) * size


class MessageResponse(BaseModel):
    """Plain acknowledgement for operations without a payload."""

    message: str

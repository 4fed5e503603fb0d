"""Page/limit pagination shared by the listing use cases."""

from __future__ import annotations

import math
from dataclasses import dataclass
from typing import Generic, TypeVar

from notifyhub.domain.exceptions import ValidationError

T = TypeVar("T")

DEFAULT_PAGE = 1
DEFAULT_LIMIT = 20
MAX_LIMIT = 100


@dataclass
class Page(Generic[T]):
    items: list[T]
    total: int
    page: int
    limit: int

    @property
    def pages(self) -> int:
        return math.ceil(self.total / self.limit) if self.total else 0


def validate_pagination(page: int | None, limit: int | None) -> tuple[int, int]:
    """Return ``(page, limit)`` with defaults applied.

    Pages are 1-based.
    """

    page = DEFAULT_PAGE if page is None else page
    limit = DEFAULT_LIMIT if limit is None else limit
    if page < 1:
        raise ValidationError("page must be greater than or equal to 1")
    if not 1 <= limit <= MAX_LIMIT:
        raise ValidationError(f"limit must be between 1 and {MAX_LIMIT}")
    return page, limit


def offset_for(page: int, limit: int) -> int:
    return (page - 1) * limit


__all__ = [
    "DEFAULT_LIMIT",
    "DEFAULT_PAGE",
    "MAX_LIMIT",
    "Page",
    "offset_for",
    "validate_pagination",
]

"""Page request / page result value objects.

``PageRequest`` is a frozen pydantic model: pages are zero-based and the
sort direction must parse to ``ASC`` or ``DESC`` (case-insensitive).
Repositories turn it into ``order_by()`` + slicing; a page past the end
yields empty content rather than an error.
"""

from __future__ import annotations

import math
from dataclasses import dataclass, field
from enum import StrEnum
from typing import Generic, List, TypeVar

from pydantic import BaseModel, ConfigDict, Field, ValidationError, field_validator

from modules.core.exceptions import InvalidPageRequest

T = TypeVar("T")


class SortDirection(StrEnum):
    ASC = "ASC"
    DESC = "DESC"


class PageRequest(BaseModel):
    """Immutable paging + sorting arguments."""

    model_config = ConfigDict(frozen=True)

    page: int = Field(default=0, ge=0)
    lines_per_page: int = Field(default=24, ge=1)
    order_by: str = Field(
        default="created_at", pattern=r"^[A-Za-z][A-Za-z0-9]*(?:_[A-Za-z0-9]+)*$"
    )
    direction: SortDirection = SortDirection.ASC

    @field_validator("direction", mode="before")
    @classmethod
    def parse_direction(cls, v: object) -> object:
        if isinstance(v, str):
            return v.strip().upper()
        return v

    @classmethod
    def of(
        cls,
        page: int,
        lines_per_page: int,
        order_by: str,
        direction: str,
    ) -> PageRequest:
        """Build a request, raising ``InvalidPageRequest`` on bad input."""
        try:
            return cls(
                page=page,
                lines_per_page=lines_per_page,
                order_by=order_by,
                direction=direction,
            )
        except ValidationError as exc:
            raise InvalidPageRequest(str(exc)) from exc

    @property
    def offset(self) -> int:
        return self.page * self.lines_per_page

    @property
    def ordering(self) -> str:
        """Django ``order_by`` expression for this request."""
        prefix = "-" if self.direction == SortDirection.DESC else ""
        return f"{prefix}{self.order_by}"


@dataclass(frozen=True)
class Page(Generic[T]):
    """One slice of a sorted result set."""

    content: List[T] = field(default_factory=list)
    number: int = 0
    size: int = 0
    total_elements: int = 0

    @property
    def total_pages(self) -> int:
        if not self.size:
            return 0
        return math.ceil(self.total_elements / self.size)

    @property
    def is_last(self) -> bool:
        return self.number + 1 >= self.total_pages

    def __len__(self) -> int:
        return len(self.content)

    def __iter__(self):
        return iter(self.content)

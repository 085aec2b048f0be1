"""
Pagination and sorting models
"""

import math
from enum import Enum
from typing import Generic, List, Optional, Sequence, TypeVar

from pydantic import BaseModel, Field

T = TypeVar("T")


class Direction(str, Enum):
    """Sort direction"""
    ASC = "ASC"
    DESC = "DESC"


class Order(BaseModel):
    """Single ORDER BY term"""
    property: str
    direction: Direction = Direction.ASC

    @classmethod
    def parse(cls, expression: str) -> "Order":
        """
        Parse a `field[,dir]` sort expression

        Raises:
            ValueError: If the expression is empty or the direction is unknown
        """
        parts = [part.strip() for part in expression.split(",") if part.strip()]
        if not parts:
            raise ValueError("Empty sort expression")
        if len(parts) > 2:
            raise ValueError(f"Invalid sort expression: {expression}")

        direction = Direction.ASC
        if len(parts) == 2:
            try:
                direction = Direction(parts[1].upper())
            except ValueError:
                raise ValueError(f"Invalid sort direction: {parts[1]}") from None

        return cls(property=parts[0], direction=direction)



class Pageable(BaseModel):
    """Page request: zero-based page index, page size and sort orders"""
    page: int = Field(0, ge=0)
    size: int = Field(20, ge=1)
    sort: List[Order] = Field(default_factory=list)

    @property
    def offset(self) -> int:
        return self.page * self.size


class Page(Generic[T]):
    """A slice of results together with the total row count"""

    def __init__(self, content: Sequence[T], pageable: Optional[Pageable], total: int):
        self.content = list(content)
        self.pageable = pageable
        self.total = total

    @property
    def total_pages(self) -> int:
        if self.pageable is None:
            return 1
        return max(1, math.ceil(self.total / self.pageable.size))

    @property
    def number(self) -> int:
        return self.pageable.page if self.pageable else 0

    @property
    def size(self) -> int:
        return self.pageable.size if self.pageable else len(self.content)

    def is_first(self) -> bool:
        return self.number == 0

    def is_last(self) -> bool:
        return self.number + 1 >= self.total_pages

"""
Book entity and transfer models
"""

from dataclasses import dataclass
from typing import Any, ClassVar, Optional, Tuple

from pydantic import BaseModel, ConfigDict, Field

ENTITY_NAME = "book"

TITLE_MIN_LENGTH = 5
TITLE_MAX_LENGTH = 20


@dataclass(eq=False)
class Book:
    """A stored Book record. `id` is assigned by the database on first save."""

    TABLE: ClassVar[str] = "book"
    COLUMNS: ClassVar[Tuple[str, ...]] = ("id", "title", "description", "author")

    id: Optional[int] = None
    title: Optional[str] = None
    description: Optional[str] = None
    author: Optional[str] = None

    def is_new(self) -> bool:
        return self.id is None

    def __eq__(self, other: Any) -> bool:
        if self is other:
            return True
        if not isinstance(other, Book):
            return False
        return self.id is not None and other.id is not None and self.id == other.id

    def __hash__(self) -> int:
        # Constant per class so the hash survives id assignment on save
        return hash(Book)

    def __repr__(self) -> str:
        return (
            f"Book{{id={self.id}, title='{self.title}', "
            f"description='{self.description}', author='{self.author}'}}"
        )


class BookDTO(BaseModel):
    """Wire representation of a Book, validated on create and full update"""
    model_config = ConfigDict(from_attributes=True)

    id: Optional[int] = None
    title: str = Field(min_length=TITLE_MIN_LENGTH, max_length=TITLE_MAX_LENGTH)
    description: Optional[str] = None
    author: str

    def __eq__(self, other: Any) -> bool:
        if self is other:
            return True
        if not isinstance(other, BookDTO):
            return False
        if self.id is None:
            return False
        return self.id == other.id

    def __hash__(self) -> int:
        return hash(self.id)


class BookPatchDTO(BaseModel):
    """Partial Book for merge-patch; absent and null fields are left untouched"""

    id: Optional[int] = None
    title: Optional[str] = Field(None, min_length=TITLE_MIN_LENGTH, max_length=TITLE_MAX_LENGTH)
    description: Optional[str] = None
    author: Optional[str] = None

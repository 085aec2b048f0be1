"""
Conversion between the Book entity and its transfer models
"""

from dataclasses import replace
from typing import Iterable, List, Union

from book_service.models.book import Book, BookDTO, BookPatchDTO


class BookMapper:
    """Maps Book <-> BookDTO and applies merge-patch updates"""

    def to_entity(self, dto: BookDTO) -> Book:
        return Book(id=dto.id, title=dto.title, description=dto.description, author=dto.author)

    def to_dto(self, entity: Book) -> BookDTO:
        # Stored rows are trusted; validation applies to inbound payloads only
        return BookDTO.model_construct(
            id=entity.id, title=entity.title, description=entity.description, author=entity.author
        )

    def to_entities(self, dtos: Iterable[BookDTO]) -> List[Book]:
        return [self.to_entity(dto) for dto in dtos]

    def to_dtos(self, entities: Iterable[Book]) -> List[BookDTO]:
        return [self.to_dto(entity) for entity in entities]

    def partial_update(self, entity: Book, dto: Union[BookDTO, BookPatchDTO]) -> Book:
        """
        Return a copy of `entity` with every non-null field of `dto` applied

        Null and absent fields leave the stored value untouched; `id` is
        never changed.
        """
        merged = replace(entity)
        if dto.title is not None:
            merged.title = dto.title
        if dto.description is not None:
            merged.description = dto.description
        if dto.author is not None:
            merged.author = dto.author
        return merged

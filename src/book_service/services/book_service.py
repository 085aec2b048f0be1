"""
Book service - orchestrates repository calls for the REST layer
"""

import logging
from typing import AsyncIterator, Optional, Union

from fastapi import Depends

from book_service.database.connection import Database, get_database
from book_service.models.book import BookDTO, BookPatchDTO
from book_service.models.pagination import Pageable
from book_service.repositories.book_repository import BookRepository
from book_service.services.book_mapper import BookMapper

logger = logging.getLogger(__name__)


class BookService:
    """Service for managing books"""

    def __init__(self, repository: BookRepository, mapper: Optional[BookMapper] = None):
        self.repository = repository
        self.mapper = mapper or BookMapper()

    async def save(self, book_dto: BookDTO) -> BookDTO:
        """
        Save a book

        Args:
            book_dto: The book to save

        Returns:
            The persisted book
        """
        logger.debug(f"Request to save Book : {book_dto}")
        saved = await self.repository.save(self.mapper.to_entity(book_dto))
        return self.mapper.to_dto(saved)

    async def update(self, book_dto: BookDTO) -> BookDTO:
        """
        Replace every field of an existing book

        Args:
            book_dto: The book to update, carrying its id

        Returns:
            The persisted book
        """
        logger.debug(f"Request to update Book : {book_dto}")
        saved = await self.repository.save(self.mapper.to_entity(book_dto))
        return self.mapper.to_dto(saved)

    async def partial_update(self, book_dto: Union[BookDTO, BookPatchDTO]) -> Optional[BookDTO]:
        """
        Merge the non-null fields of `book_dto` into the stored book

        The read and the write are separate statements; a concurrent
        writer can interleave between them.

        Returns:
            The persisted book, or None if no book exists with that id
        """
        logger.debug(f"Request to partially update Book : {book_dto}")

        existing = await self.repository.find_by_id(book_dto.id)
        if existing is None:
            return None

        merged = self.mapper.partial_update(existing, book_dto)
        saved = await self.repository.save(merged)
        return self.mapper.to_dto(saved)

    async def find_all(self, pageable: Optional[Pageable]) -> AsyncIterator[BookDTO]:
        """Stream the requested page of books"""
        logger.debug("Request to get all Books")
        async for book in self.repository.find_all_by(pageable):
            yield self.mapper.to_dto(book)

    async def count_all(self) -> int:
        return await self.repository.count()

    async def find_one(self, book_id: int) -> Optional[BookDTO]:
        logger.debug(f"Request to get Book : {book_id}")
        book = await self.repository.find_by_id(book_id)
        return self.mapper.to_dto(book) if book is not None else None

    async def exists(self, book_id: int) -> bool:
        return await self.repository.exists_by_id(book_id)

    async def delete(self, book_id: int) -> None:
        logger.debug(f"Request to delete Book : {book_id}")
        await self.repository.delete_by_id(book_id)


def get_book_service(database: Database = Depends(get_database)) -> BookService:
    """FastAPI dependency building a BookService over the app's database pool"""
    return BookService(BookRepository(database.pool))

"""
Book repository - parameterized SQL over the asyncpg pool
"""

import logging
from typing import Any, AsyncIterator, List, Optional, Tuple

import asyncpg

from book_service.models.book import Book
from book_service.models.pagination import Pageable
from book_service.repositories.rowmapper import BookRowMapper
from book_service.repositories.sql_helper import BookSqlHelper, Condition, EntityManager, Table
from book_service.utils.exceptions import ConstraintViolation, RowNotFoundError

logger = logging.getLogger(__name__)

_STORAGE_ERRORS = (
    asyncpg.exceptions.IntegrityConstraintViolationError,
    asyncpg.exceptions.DataError,
)


class BookRepository:
    """Data access for the `book` table"""

    entity_table = Table(Book.TABLE, EntityManager.ENTITY_ALIAS)

    def __init__(
        self,
        pool: asyncpg.Pool,
        row_mapper: Optional[BookRowMapper] = None,
        entity_manager: Optional[EntityManager] = None,
    ):
        self.pool = pool
        self.row_mapper = row_mapper or BookRowMapper()
        self.entity_manager = entity_manager or EntityManager()
        self.sql_helper = BookSqlHelper()

    def create_query(
        self,
        pageable: Optional[Pageable] = None,
        where: Optional[Condition] = None,
    ) -> Tuple[str, List[Any]]:
        """Build the SELECT for this entity with optional paging and predicate"""
        alias = EntityManager.ENTITY_ALIAS
        columns = self.sql_helper.get_columns(self.entity_table, alias)
        return self.entity_manager.create_select(
            self.entity_table, columns, Book.COLUMNS, pageable=pageable, where=where
        )

    def _process(self, row: Any) -> Book:
        return self.row_mapper.apply(row, EntityManager.ENTITY_ALIAS)

    async def find_all_by(self, pageable: Optional[Pageable]) -> AsyncIterator[Book]:
        """
        Stream books for the requested page

        Rows are fetched through a server-side cursor and mapped one at a
        time; the returned iterator can only be consumed once.
        """
        sql, args = self.create_query(pageable)
        logger.debug(f"Executing: {sql} with {args}")

        async with self.pool.acquire() as conn:
            async with conn.transaction():
                async for row in conn.cursor(sql, *args):
                    yield self._process(row)

    def find_all(self) -> AsyncIterator[Book]:
        return self.find_all_by(None)

    async def find_by_id(self, book_id: int) -> Optional[Book]:
        sql, args = self.create_query(where=Condition("id", book_id))
        logger.debug(f"Executing: {sql} with {args}")

        async with self.pool.acquire() as conn:
            row = await conn.fetchrow(sql, *args)

        return self._process(row) if row is not None else None

    async def save(self, entity: Book) -> Book:
        """
        Insert a new book or fully replace an existing one

        Returns:
            The persisted book as read back from the database

        Raises:
            ConstraintViolation: If the update targets a missing row or a
                column violates a storage constraint
        """
        alias = EntityManager.ENTITY_ALIAS
        returning = ", ".join(f"{name} AS {alias}_{name}" for name in Book.COLUMNS)

        if entity.is_new():
            sql = (
                f"INSERT INTO {Book.TABLE} (title, description, author) "
                f"VALUES ($1, $2, $3) RETURNING {returning}"
            )
            args = [entity.title, entity.description, entity.author]
        else:
            sql = (
                f"UPDATE {Book.TABLE} SET title = $1, description = $2, author = $3 "
                f"WHERE id = $4 RETURNING {returning}"
            )
            args = [entity.title, entity.description, entity.author, entity.id]

        logger.debug(f"Executing: {sql}")

        try:
            async with self.pool.acquire() as conn:
                row = await conn.fetchrow(sql, *args)
        except _STORAGE_ERRORS as e:
            logger.error(f"Failed to save {entity!r}: {e}")
            raise ConstraintViolation(str(e), getattr(e, "constraint_name", None)) from e

        if row is None:
            raise RowNotFoundError(f"Failed to update book with id {entity.id}: row not found")

        saved = self._process(row)
        logger.info(f"Saved book {saved.id}")
        return saved

    async def delete_by_id(self, book_id: int) -> None:
        async with self.pool.acquire() as conn:
            status = await conn.execute(f"DELETE FROM {Book.TABLE} WHERE id = $1", book_id)
        logger.debug(f"Delete book {book_id}: {status}")

    async def delete_all(self) -> None:
        async with self.pool.acquire() as conn:
            await conn.execute(f"DELETE FROM {Book.TABLE}")

    async def count(self) -> int:
        async with self.pool.acquire() as conn:
            return await conn.fetchval(f"SELECT COUNT(*) FROM {Book.TABLE}")

    async def exists_by_id(self, book_id: int) -> bool:
        async with self.pool.acquire() as conn:
            return await conn.fetchval(
                f"SELECT EXISTS(SELECT 1 FROM {Book.TABLE} WHERE id = $1)", book_id
            )

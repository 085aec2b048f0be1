"""
Shared test data and in-process stand-ins for the data-access layer
"""

from contextlib import asynccontextmanager
from dataclasses import replace
from typing import Any, AsyncIterator, Dict, List, Optional

from book_service.models.book import Book
from book_service.models.pagination import Direction, Pageable
from book_service.utils.exceptions import RowNotFoundError

DEFAULT_TITLE = "AAAAAAAAAA"
UPDATED_TITLE = "BBBBBBBBBB"

DEFAULT_DESCRIPTION = "AAAAAAAAAA"
UPDATED_DESCRIPTION = "BBBBBBBBBB"

DEFAULT_AUTHOR = "AAAAAAAAAA"
UPDATED_AUTHOR = "BBBBBBBBBB"

ENTITY_API_URL = "/api/books"

TEST_JWT_SECRET = "test-secret-with-at-least-32-bytes-of-entropy"


def create_entity() -> Book:
    return Book(title=DEFAULT_TITLE, description=DEFAULT_DESCRIPTION, author=DEFAULT_AUTHOR)


def create_updated_entity() -> Book:
    return Book(title=UPDATED_TITLE, description=UPDATED_DESCRIPTION, author=UPDATED_AUTHOR)


class InMemoryBookRepository:
    """Dictionary-backed stand-in for BookRepository with the same async surface"""

    def __init__(self):
        self.rows: Dict[int, Book] = {}
        self._next_id = 1

    async def find_all_by(self, pageable: Optional[Pageable]) -> AsyncIterator[Book]:
        books = list(self.rows.values())
        if pageable is not None:
            for order in reversed(pageable.sort):
                books.sort(
                    key=lambda book: (getattr(book, order.property) is None, getattr(book, order.property)),
                    reverse=order.direction == Direction.DESC,
                )
            books = books[pageable.offset:pageable.offset + pageable.size]
        for book in books:
            yield replace(book)

    def find_all(self) -> AsyncIterator[Book]:
        return self.find_all_by(None)

    async def find_by_id(self, book_id: int) -> Optional[Book]:
        book = self.rows.get(book_id)
        return replace(book) if book is not None else None

    async def save(self, entity: Book) -> Book:
        if entity.is_new():
            stored = replace(entity, id=self._next_id)
            self._next_id += 1
        elif entity.id in self.rows:
            stored = replace(entity)
        else:
            raise RowNotFoundError(f"Failed to update book with id {entity.id}: row not found")
        self.rows[stored.id] = stored
        return replace(stored)

    async def delete_by_id(self, book_id: int) -> None:
        self.rows.pop(book_id, None)

    async def delete_all(self) -> None:
        self.rows.clear()

    async def count(self) -> int:
        return len(self.rows)

    async def exists_by_id(self, book_id: int) -> bool:
        return book_id in self.rows


class FakeConnection:
    """Records every statement and replays canned results"""

    def __init__(self):
        self.calls: List[tuple] = []
        self.rows: List[Dict[str, Any]] = []
        self.fetchrow_result: Optional[Dict[str, Any]] = None
        self.fetchval_result: Any = None
        self.error: Optional[Exception] = None

    def _record(self, method: str, sql: str, args: tuple) -> None:
        self.calls.append((method, sql, args))
        if self.error is not None:
            raise self.error

    async def fetchrow(self, sql: str, *args):
        self._record("fetchrow", sql, args)
        return self.fetchrow_result

    async def fetchval(self, sql: str, *args):
        self._record("fetchval", sql, args)
        return self.fetchval_result

    async def execute(self, sql: str, *args):
        self._record("execute", sql, args)
        return "DELETE 1"

    @asynccontextmanager
    async def transaction(self):
        yield

    def cursor(self, sql: str, *args):
        self._record("cursor", sql, args)

        async def rows():
            for row in self.rows:
                yield row

        return rows()


class FakePool:
    def __init__(self, connection: FakeConnection):
        self.connection = connection

    @asynccontextmanager
    async def acquire(self):
        yield self.connection

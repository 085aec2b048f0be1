"""
SELECT statement builder for entity tables

Columns are listed from the entity's declared columns and labelled
`{alias}_{column}` so that a row mapper can read them back by prefix
regardless of how the table is aliased.
"""

from dataclasses import dataclass
from typing import Any, List, Optional, Sequence, Tuple

from book_service.models.book import Book
from book_service.models.pagination import Pageable


@dataclass(frozen=True)
class Table:
    """A table reference with its alias"""
    name: str
    alias: str

    def column(self, name: str) -> str:
        return f"{self.alias}.{name}"

    def __str__(self) -> str:
        return f"{self.name} {self.alias}"


@dataclass(frozen=True)
class Condition:
    """Equality predicate on a single column"""
    column: str
    value: Any


class BookSqlHelper:
    """Column list for the book table"""

    def get_columns(self, table: Table, column_prefix: str) -> List[str]:
        return [f"{table.column(name)} AS {column_prefix}_{name}" for name in Book.COLUMNS]


class EntityManager:
    """Assembles SELECT statements with optional WHERE, ORDER BY and LIMIT/OFFSET"""

    ENTITY_ALIAS = "e"

    def create_select(
        self,
        table: Table,
        columns: Sequence[str],
        sortable: Sequence[str],
        pageable: Optional[Pageable] = None,
        where: Optional[Condition] = None,
    ) -> Tuple[str, List[Any]]:
        """
        Build a parameterized SELECT

        Args:
            table: Aliased table to select from
            columns: Select-list expressions
            sortable: Column names that may appear in ORDER BY
            pageable: Page, size and sort orders (optional)
            where: Equality predicate (optional)

        Returns:
            Tuple of (sql, positional args) using asyncpg `$n` placeholders

        Raises:
            ValueError: If a sort property is not a sortable column
        """
        sql = f"SELECT {', '.join(columns)} FROM {table}"
        args: List[Any] = []

        if where is not None:
            args.append(where.value)
            sql += f" WHERE {table.column(where.column)} = ${len(args)}"

        if pageable is not None:
            if pageable.sort:
                terms = []
                for order in pageable.sort:
                    if order.property not in sortable:
                        raise ValueError(f"Cannot sort by unknown property: {order.property}")
                    terms.append(f"{table.column(order.property)} {order.direction.value}")
                sql += f" ORDER BY {', '.join(terms)}"

            args.append(pageable.size)
            sql += f" LIMIT ${len(args)}"
            args.append(pageable.offset)
            sql += f" OFFSET ${len(args)}"

        return sql, args

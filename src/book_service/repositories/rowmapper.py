"""
Row to entity conversion
"""

from decimal import Decimal
from typing import Any, Mapping, Optional, Type, TypeVar

from book_service.models.book import Book
from book_service.utils.exceptions import TypeConversionError


T = TypeVar("T")


class ColumnConverter:
    """Reads a single column from a row and coerces it to the requested type"""

    def from_row(self, row: Mapping[str, Any], column: str, target_type: Type[T]) -> Optional[T]:
        """
        Extract `column` from `row` as `target_type`

        Args:
            row: asyncpg Record or any mapping keyed by column label
            column: Column label, already prefixed with the table alias
            target_type: int or str

        Returns:
            The coerced value, or None when the column is NULL

        Raises:
            TypeConversionError: If the column is missing or cannot be coerced
        """
        try:
            value = row[column]
        except (KeyError, IndexError):
            raise TypeConversionError(column, None, target_type) from None

        if value is None:
            return None
        return self.convert(column, value, target_type)

    def convert(self, column: str, value: Any, target_type: Type[T]) -> T:
        if target_type is int:
            return self._to_int(column, value)
        if target_type is str:
            return self._to_str(column, value)
        if isinstance(value, target_type):
            return value
        raise TypeConversionError(column, value, target_type)

    def _to_int(self, column: str, value: Any) -> int:
        if isinstance(value, bool):
            raise TypeConversionError(column, value, int)
        if isinstance(value, int):
            return value
        if isinstance(value, Decimal) and value == value.to_integral_value():
            return int(value)
        if isinstance(value, str):
            try:
                return int(value.strip())
            except ValueError:
                raise TypeConversionError(column, value, int) from None
        raise TypeConversionError(column, value, int)

    def _to_str(self, column: str, value: Any) -> str:
        if isinstance(value, str):
            return value
        if isinstance(value, (bytes, bytearray, memoryview)):
            try:
                return bytes(value).decode("utf-8")
            except UnicodeDecodeError:
                raise TypeConversionError(column, value, str) from None
        if isinstance(value, (int, Decimal)) and not isinstance(value, bool):
            return str(value)
        raise TypeConversionError(column, value, str)


class BookRowMapper:
    """Builds a Book from a result row whose columns are labelled `{prefix}_{column}`"""

    def __init__(self, converter: Optional[ColumnConverter] = None):
        self.converter = converter or ColumnConverter()

    def apply(self, row: Mapping[str, Any], prefix: str) -> Book:
        entity = Book()
        entity.id = self.converter.from_row(row, f"{prefix}_id", int)
        entity.title = self.converter.from_row(row, f"{prefix}_title", str)
        entity.description = self.converter.from_row(row, f"{prefix}_description", str)
        entity.author = self.converter.from_row(row, f"{prefix}_author", str)
        return entity

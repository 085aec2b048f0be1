"""
Domain exceptions raised by the data-access and REST layers
"""

from typing import Any, Optional


class BadRequestAlertException(Exception):
    """
    Client error about an entity id, rendered as HTTP 400.

    `error_key` is the machine-readable reason (idexists, idnull,
    idinvalid, idnotfound) and is echoed back as `error.<key>`.
    """

    def __init__(self, message: str, entity_name: str, error_key: str):
        super().__init__(message)
        self.message = message
        self.entity_name = entity_name
        self.error_key = error_key

    @property
    def error_message(self) -> str:
        return f"error.{self.error_key}"


class TypeConversionError(Exception):
    """A stored column value could not be coerced to the declared field type"""

    def __init__(self, column: str, value: Any, target_type: type):
        self.column = column
        self.value = value
        self.target_type = target_type
        super().__init__(
            f"Cannot convert column '{column}' value {value!r} to {target_type.__name__}"
        )


class ConstraintViolation(Exception):
    """A write was rejected by the storage layer or targeted a missing row"""

    def __init__(self, message: str, constraint: Optional[str] = None):
        super().__init__(message)
        self.constraint = constraint


class RowNotFoundError(ConstraintViolation):
    """An update targeted a row that no longer exists"""

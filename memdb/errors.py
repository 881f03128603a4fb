"""
Exception hierarchy for the in-memory database.

Every engine failure is a ``ValueError`` subclass so callers that only know
about ``ValueError`` keep working.
"""

from typing import Any, Optional


class DatabaseError(ValueError):
    """Base class for all engine errors."""

    def __init__(self, message: str, table: Optional[str] = None,
                 column: Optional[str] = None, value: Any = None):
        super().__init__(message)
        self.table = table
        self.column = column
        self.value = value
        # Rows already committed by a multi-row statement that failed partway.
        self.rows_affected = 0


class TableNotFound(DatabaseError):
    def __init__(self, table: str):
        super().__init__(f"Table '{table}' does not exist", table=table)


class TableAlreadyExists(DatabaseError):
    def __init__(self, table: str):
        super().__init__(f"Table '{table}' already exists", table=table)


class ColumnNotFound(DatabaseError):
    def __init__(self, table: str, column: str):
        super().__init__(
            f"Column '{column}' does not exist in table '{table}'",
            table=table, column=column
        )


class InvalidValueType(DatabaseError):
    def __init__(self, table: str, column: str, value: Any, expected: str):
        super().__init__(
            f"Invalid value {value!r} for column '{column}' in table '{table}'. "
            f"Expected {expected}, got {type(value).__name__}",
            table=table, column=column, value=value
        )
        self.expected = expected


class MultiplePrimaryKeys(DatabaseError):
    def __init__(self, table: str, column: str):
        super().__init__(
            f"Table '{table}' cannot have multiple primary keys "
            f"(second primary key column '{column}')",
            table=table, column=column
        )


class ConstraintViolation(DatabaseError):
    """Raised when a row would break a PRIMARY KEY, UNIQUE or NOT NULL rule."""


class PrimaryKeyViolation(ConstraintViolation):
    def __init__(self, table: str, column: str, value: Any):
        super().__init__(
            f"Primary key violation in table '{table}': "
            f"duplicate value {value!r} for key '{column}'",
            table=table, column=column, value=value
        )


class UniqueViolation(ConstraintViolation):
    def __init__(self, table: str, column: str, value: Any):
        super().__init__(
            f"Unique constraint violation in table '{table}': "
            f"duplicate value {value!r} for column '{column}'",
            table=table, column=column, value=value
        )


class MissingRequiredColumn(ConstraintViolation):
    def __init__(self, table: str, column: str):
        super().__init__(
            f"Missing required column '{column}' in table '{table}'",
            table=table, column=column
        )

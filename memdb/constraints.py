"""
Constraint checking for row writes.

Checks run in a fixed order and stop at the first violation:

0. schema conformance (known columns, scalar values, declared types)
1. primary key present and not a duplicate
2. UNIQUE columns not duplicated
3. NOT NULL / primary key columns present

Within a phase, columns are visited in declaration order.
"""

from typing import Iterable, Optional

from .errors import (
    InvalidValueType,
    MissingRequiredColumn,
    PrimaryKeyViolation,
    UniqueViolation,
)
from .table import Table
from .types import Row, is_scalar, values_equal


class ConstraintChecker:
    """Validates rows against the constraints of one table."""

    def __init__(self, table: Table, strict_types: bool = True):
        self.table = table
        self.strict_types = strict_types

    def validate_insert(self, row: Row) -> None:
        self._check_schema(row, row.keys())

        table = self.table
        pk = table.primary_key
        if pk is not None:
            pk_value = row.get(pk)
            if pk_value is None:
                raise MissingRequiredColumn(table.name, pk)
            if table.has_primary_key_value(pk_value):
                raise PrimaryKeyViolation(table.name, pk, pk_value)

        for col in table.schema:
            if col.is_unique and col.name != pk:
                value = row.get(col.name)
                if value is not None and table.has_unique_value(col.name, value):
                    raise UniqueViolation(table.name, col.name, value)

        self._check_required(row)

    def validate_update(self, old_row: Row, new_row: Row,
                        changed: Optional[Iterable[str]] = None) -> None:
        """
        Validate the result of an update.

        Key and uniqueness checks are skipped for values the update leaves
        unchanged: a row never conflicts with itself.
        """
        self._check_schema(new_row, new_row.keys() if changed is None else changed)

        table = self.table
        pk = table.primary_key
        if pk is not None:
            old_pk = old_row.get(pk)
            new_pk = new_row.get(pk)
            if new_pk is None:
                raise MissingRequiredColumn(table.name, pk)
            if not values_equal(old_pk, new_pk) and table.has_primary_key_value(new_pk):
                raise PrimaryKeyViolation(table.name, pk, new_pk)

        for col in table.schema:
            if col.is_unique and col.name != pk:
                old_value = old_row.get(col.name)
                new_value = new_row.get(col.name)
                if (new_value is not None
                        and not values_equal(old_value, new_value)
                        and table.has_unique_value(col.name, new_value)):
                    raise UniqueViolation(table.name, col.name, new_value)

        self._check_required(new_row)

    def validate_values(self, values: Row) -> None:
        """Check that every column exists and every value fits its column."""
        self._check_schema(values, values.keys())

    def _check_schema(self, row: Row, columns: Iterable[str]) -> None:
        table = self.table
        for col_name in columns:
            col = table.get_column(col_name)
            value = row.get(col_name)
            if not is_scalar(value):
                raise InvalidValueType(table.name, col_name, value, col.dtype.value)
            if self.strict_types and not col.validate_value(value):
                raise InvalidValueType(table.name, col_name, value, col.dtype.value)

    def _check_required(self, row: Row) -> None:
        for col in self.table.schema:
            if col.is_required and row.get(col.name) is None:
                raise MissingRequiredColumn(self.table.name, col.name)

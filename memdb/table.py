"""
Table storage: schema, dense row storage and the secondary indexes kept in
step with it.

Rows live in a list and are addressed by position. Deletes swap the last row
into the freed slot, so positions are not stable and row order is not kept
across deletes.
"""

import logging
from typing import Any, Dict, Iterator, List, Optional, Tuple

from .errors import ColumnNotFound, MultiplePrimaryKeys
from .types import Column, Index, Row, Value, values_equal

logger = logging.getLogger(__name__)


class Table:
    """A named table with its rows and indexes."""

    def __init__(self, name: str, schema: List[Column],
                 allow_multiple_primary_keys: bool = False):
        self._name = name
        self._schema = list(schema)
        self._columns: Dict[str, Column] = {col.name: col for col in self._schema}
        self._rows: List[Row] = []
        self._indexes: Dict[str, Index] = {}
        self._primary_key: Optional[str] = None

        for col in self._schema:
            if col.is_primary:
                if self._primary_key is not None and not allow_multiple_primary_keys:
                    raise MultiplePrimaryKeys(name, col.name)
                self._primary_key = col.name
                self.create_index(col.name)
            elif col.is_unique:
                self.create_index(col.name)

    @property
    def name(self) -> str:
        """Table name."""
        return self._name

    @property
    def schema(self) -> List[Column]:
        """Column definitions in declaration order."""
        return list(self._schema)

    @property
    def primary_key(self) -> Optional[str]:
        """Primary key column name, or None."""
        return self._primary_key

    @property
    def rows(self) -> List[Row]:
        """The stored rows. Callers must not mutate them."""
        return self._rows

    def __len__(self) -> int:
        """Number of stored rows."""
        return len(self._rows)

    def row_at(self, position: int) -> Row:
        """Return the stored row at a position."""
        return self._rows[position]

    def positions(self) -> range:
        """All current row positions."""
        return range(len(self._rows))

    def enumerate_rows(self) -> Iterator[Tuple[int, Row]]:
        """Iterate (position, row) pairs in storage order."""
        return enumerate(self._rows)

    # ------------------------------------------------------------------
    # Schema
    # ------------------------------------------------------------------
    def has_column(self, column_name: str) -> bool:
        """Check if a column exists in the schema."""
        return column_name in self._columns

    def get_column(self, column_name: str) -> Column:
        """Return a column definition or raise ColumnNotFound."""
        try:
            return self._columns[column_name]
        except KeyError:
            raise ColumnNotFound(self._name, column_name) from None

    def describe(self) -> Dict[str, Any]:
        """Get information about the table."""
        return {
            'name': self._name,
            'primary_key': self._primary_key,
            'columns': [
                {
                    'name': col.name,
                    'type': col.dtype.value,
                    'is_primary': col.is_primary,
                    'is_unique': col.is_unique,
                    'not_null': col.is_required,
                }
                for col in self._schema
            ],
            'indexes': sorted(self._indexes),
            'row_count': len(self._rows),
        }

    # ------------------------------------------------------------------
    # Indexes
    # ------------------------------------------------------------------
    def create_index(self, column_name: str) -> None:
        """Index a column, backfilling from the current rows. No-op if present."""
        if not self.has_column(column_name):
            raise ColumnNotFound(self._name, column_name)
        if column_name in self._indexes:
            return

        index = Index(column_name)
        for position, row in enumerate(self._rows):
            index.add(row.get(column_name), position)
        self._indexes[column_name] = index
        logger.debug("Created index on %s.%s (%d rows scanned)",
                     self._name, column_name, len(self._rows))

    def get_index(self, column_name: str) -> Optional[Index]:
        """Return the index on a column, if any."""
        return self._indexes.get(column_name)

    def has_index(self, column_name: str) -> bool:
        """Check if a column is indexed."""
        return column_name in self._indexes

    def _column_has_value(self, column_name: str, value: Value) -> bool:
        if value is None:
            return False
        index = self._indexes.get(column_name)
        if index is not None:
            return index.has(value)

        # Fallback: linear scan
        return any(values_equal(row.get(column_name), value) for row in self._rows)

    def has_primary_key_value(self, value: Value) -> bool:
        """Check if a primary key value is already stored."""
        if self._primary_key is None:
            return False
        return self._column_has_value(self._primary_key, value)

    def has_unique_value(self, column_name: str, value: Value) -> bool:
        """Check if a value is already stored in a column."""
        return self._column_has_value(column_name, value)

    # ------------------------------------------------------------------
    # Row mutation
    # ------------------------------------------------------------------
    def add_row(self, row: Row) -> int:
        """Append a row and index it. Returns its position."""
        position = len(self._rows)
        self._rows.append(row)
        for col_name, index in self._indexes.items():
            index.add(row.get(col_name), position)
        return position

    def update_row(self, position: int, new_row: Row) -> None:
        """Replace a row in place, reindexing changed values."""
        old_row = self._rows[position]
        for col_name, index in self._indexes.items():
            old_value = old_row.get(col_name)
            new_value = new_row.get(col_name)
            if not values_equal(old_value, new_value):
                index.update(old_value, new_value, position)
        self._rows[position] = new_row

    def delete_row(self, position: int) -> None:
        """Remove a row by swapping the last row into its slot."""
        row = self._rows[position]
        for col_name, index in self._indexes.items():
            index.remove(row.get(col_name), position)

        last_position = len(self._rows) - 1
        if position != last_position:
            moved = self._rows[last_position]
            self._rows[position] = moved
            for col_name, index in self._indexes.items():
                index.remap(moved.get(col_name), last_position, position)

        self._rows.pop()

"""
Core data types for the in-memory database: values, rows, columns and indexes.
"""

from enum import Enum
from typing import Any, Dict, Hashable, List, Optional, Tuple, Union
from dataclasses import dataclass


Value = Union[int, str, bool, None]
Row = Dict[str, Value]

# bool is checked before int everywhere: True is an int to Python, not to us.
SCALAR_TYPES = (bool, int, str)


class DataType(Enum):
    """Supported column data types."""
    INT = "INT"
    STRING = "STRING"
    BOOL = "BOOL"


def is_scalar(value: Any) -> bool:
    """Return True for values a row may hold (NULL included)."""
    return value is None or isinstance(value, SCALAR_TYPES)


def kind_of(value: Value) -> Optional[DataType]:
    """Map a value to its DataType, or None for NULL and foreign values."""
    if isinstance(value, bool):
        return DataType.BOOL
    if isinstance(value, int):
        return DataType.INT
    if isinstance(value, str):
        return DataType.STRING
    return None


def value_key(value: Value) -> Tuple[Optional[DataType], Hashable]:
    """Hash key for a value that keeps True and 1 in separate buckets."""
    return kind_of(value), value


def values_equal(a: Value, b: Value) -> bool:
    """Equality defined only between values of the same kind."""
    return kind_of(a) is kind_of(b) and a == b


def compare_values(a: Value, b: Value) -> Optional[int]:
    """
    Order two values.

    Returns -1, 0 or 1 for two INTs or two STRINGs, and None when the pair
    has no ordering (mixed kinds, booleans, NULL).
    """
    kind = kind_of(a)
    if kind is not kind_of(b) or kind not in (DataType.INT, DataType.STRING):
        return None
    if a < b:
        return -1
    if a > b:
        return 1
    return 0


def copy_row(row: Row) -> Row:
    return dict(row)


@dataclass
class Column:
    """Represents a table column definition."""
    name: str
    dtype: DataType
    is_primary: bool = False
    is_unique: bool = False
    not_null: bool = False

    @property
    def is_required(self) -> bool:
        """Primary key columns are implicitly NOT NULL."""
        return self.not_null or self.is_primary

    def validate_value(self, value: Any) -> bool:
        """Validate a value against the column's data type."""
        if value is None:
            return True  # NULL is handled by the NOT NULL check
        return kind_of(value) is self.dtype


class Index:
    """
    Hash index over one column.

    Maps a value to the row positions holding it, in the order they were
    added. NULL is never indexed.
    """

    def __init__(self, column_name: str):
        self.column_name = column_name
        self._index: Dict[Hashable, List[int]] = {}

    def add(self, value: Value, position: int) -> None:
        """Add a position under a value. NULL is ignored."""
        if value is None:
            return
        self._index.setdefault(value_key(value), []).append(position)

    def remove(self, value: Value, position: int) -> None:
        """Drop one position from a value's bucket, deleting empty buckets."""
        if value is None:
            return
        key = value_key(value)
        bucket = self._index.get(key)
        if bucket is None:
            return
        try:
            bucket.remove(position)
        except ValueError:
            return
        if not bucket:
            del self._index[key]

    def update(self, old_value: Value, new_value: Value, position: int) -> None:
        """Move a position from one value to another."""
        self.remove(old_value, position)
        self.add(new_value, position)

    def remap(self, value: Value, old_position: int, new_position: int) -> None:
        """Point an entry at a row that moved to another position."""
        if value is None:
            return
        bucket = self._index.get(value_key(value))
        if bucket is None:
            return
        for i, position in enumerate(bucket):
            if position == old_position:
                bucket[i] = new_position
                return

    def lookup(self, value: Value) -> List[int]:
        """Positions holding a value; empty for NULL or unknown values."""
        if value is None:
            return []
        return list(self._index.get(value_key(value), ()))

    def has(self, value: Value) -> bool:
        """Check if any row holds a value."""
        if value is None:
            return False
        return value_key(value) in self._index

    def __len__(self) -> int:
        """Number of distinct indexed values."""
        return len(self._index)

"""
Main database engine class.
"""

import logging
from typing import Any, Dict, List, Optional, Sequence

from .commands import Condition, JoinCondition
from .config import EngineConfig
from .errors import TableAlreadyExists, TableNotFound
from .executor import QueryExecutor
from .join import inner_join
from .locking import ReadWriteLock
from .table import Table
from .types import Column, Row, Value

logger = logging.getLogger(__name__)


class DatabaseEngine:
    """
    In-memory database: a registry of tables plus the CRUD and join entry
    points.

    One reader/writer lock covers the registry and every table's contents.
    Reads (select, join, listing) run concurrently; any write blocks
    everything else until it finishes.
    """

    def __init__(self, config: Optional[EngineConfig] = None):
        self.config = config or EngineConfig()
        self.executor = QueryExecutor(self.config)
        self._tables: Dict[str, Table] = {}
        self._lock = ReadWriteLock()

    def _resolve(self, name: str) -> Table:
        """Look up a table. The caller must hold the lock."""
        try:
            return self._tables[name]
        except KeyError:
            raise TableNotFound(name) from None

    # ------------------------------------------------------------------
    # Registry
    # ------------------------------------------------------------------
    def create_table(self, name: str, schema: Sequence[Column]) -> None:
        """Create a table with the given schema."""
        with self._lock.write_locked():
            if name in self._tables:
                raise TableAlreadyExists(name)
            self._tables[name] = Table(
                name, list(schema),
                allow_multiple_primary_keys=self.config.allow_multiple_primary_keys,
            )
        logger.debug("Created table %s with %d column(s)", name, len(schema))

    def get_table(self, name: str) -> Table:
        """Return the live table. Mutate it only through the engine."""
        with self._lock.read_locked():
            return self._resolve(name)

    def drop_table(self, name: str) -> None:
        """Remove a table and its indexes."""
        with self._lock.write_locked():
            self._resolve(name)
            del self._tables[name]
        logger.debug("Dropped table %s", name)

    def list_tables(self) -> List[str]:
        """List all tables in the database."""
        with self._lock.read_locked():
            return sorted(self._tables)

    def table_exists(self, name: str) -> bool:
        """Check if a table exists."""
        with self._lock.read_locked():
            return name in self._tables

    def describe_table(self, name: str) -> Dict[str, Any]:
        """Get information about a table."""
        with self._lock.read_locked():
            return self._resolve(name).describe()

    def create_index(self, table_name: str, column_name: str) -> None:
        """Index a column of a table, backfilling existing rows."""
        with self._lock.write_locked():
            self._resolve(table_name).create_index(column_name)

    # ------------------------------------------------------------------
    # CRUD
    # ------------------------------------------------------------------
    def insert(self, table_name: str, row: Row) -> int:
        """
        Insert a row.

        Returns:
            The row's storage position (not stable across deletes).

        Raises:
            TableNotFound, ColumnNotFound, InvalidValueType,
            PrimaryKeyViolation, UniqueViolation, MissingRequiredColumn
        """
        with self._lock.write_locked():
            return self.executor.insert(self._resolve(table_name), row)

    def select(self, table_name: str, columns: Optional[Sequence[str]] = None,
               condition: Optional[Condition] = None) -> List[Row]:
        """
        Return copies of the rows matching ``condition`` (all rows if None),
        projected to ``columns`` (all columns if empty or ``["*"]``).
        """
        with self._lock.read_locked():
            return self.executor.select(self._resolve(table_name), columns, condition)

    def update(self, table_name: str, updates: Dict[str, Value],
               condition: Optional[Condition] = None) -> int:
        """
        Update matching rows. Returns the number of rows updated.

        Not atomic across rows: on a constraint failure the rows updated before
        it stay updated, and the error's ``rows_affected`` says how many.
        """
        with self._lock.write_locked():
            return self.executor.update(self._resolve(table_name), updates, condition)

    def delete(self, table_name: str, condition: Optional[Condition] = None) -> int:
        """Delete matching rows (all rows if no condition). Returns the count."""
        with self._lock.write_locked():
            return self.executor.delete(self._resolve(table_name), condition)

    # ------------------------------------------------------------------
    # JOIN
    # ------------------------------------------------------------------
    def inner_join(self, left_table: str, right_table: str, condition: JoinCondition,
                   select_columns: Optional[Sequence[str]] = None) -> List[Row]:
        """Equality INNER JOIN of two tables with table-qualified output keys."""
        with self._lock.read_locked():
            left = self._resolve(left_table)
            right = self._resolve(right_table)
            return inner_join(left, right, condition, select_columns)

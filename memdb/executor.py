"""
Query executor that applies structured commands to a single table.

The executor does no locking and no table lookup; the engine resolves the
table and holds the database lock around every call.
"""

import logging
from typing import Dict, List, Optional, Sequence

from .commands import Condition, evaluate_condition, normalize_columns, project_row
from .config import EngineConfig
from .constraints import ConstraintChecker
from .errors import DatabaseError
from .table import Table
from .types import Row, Value, copy_row

logger = logging.getLogger(__name__)


class QueryExecutor:
    """Executes CRUD commands against tables."""

    def __init__(self, config: EngineConfig):
        self.config = config

    def _checker(self, table: Table) -> ConstraintChecker:
        return ConstraintChecker(table, strict_types=self.config.strict_types)

    def insert(self, table: Table, row: Row) -> int:
        """Validate and append a row. Returns its storage position."""
        new_row = copy_row(row)
        self._checker(table).validate_insert(new_row)
        return table.add_row(new_row)

    def candidate_positions(self, table: Table, condition: Optional[Condition]) -> List[int]:
        """Positions worth checking for a condition, in storage order."""
        if condition is not None and condition.operator == "=":
            index = table.get_index(condition.column)
            if index is not None:
                return sorted(index.lookup(condition.value))
        return list(table.positions())

    def select(self, table: Table, columns: Optional[Sequence[str]] = None,
               condition: Optional[Condition] = None) -> List[Row]:
        """Return projected copies of the matching rows, in storage order."""
        selected = normalize_columns(columns)
        result = []
        for position in self.candidate_positions(table, condition):
            row = table.row_at(position)
            if condition is not None and not evaluate_condition(row, condition):
                continue
            result.append(project_row(row, selected))
        return result

    def update(self, table: Table, updates: Dict[str, Value],
               condition: Optional[Condition] = None) -> int:
        """
        Apply ``updates`` to every matching row.

        Rows are validated one at a time. When one fails, rows already updated
        stay updated and the raised error records how many there were in
        ``rows_affected``.
        """
        checker = self._checker(table)
        changes = dict(updates)
        checker.validate_values(changes)
        updated_count = 0

        for position in table.positions():
            row = table.row_at(position)
            if condition is not None and not evaluate_condition(row, condition):
                continue

            updated_row = copy_row(row)
            updated_row.update(changes)
            try:
                # Columns and types were checked once above.
                checker.validate_update(row, updated_row, ())
            except DatabaseError as exc:
                exc.rows_affected = updated_count
                raise

            table.update_row(position, updated_row)
            updated_count += 1

        logger.debug("Updated %d row(s) in %s", updated_count, table.name)
        return updated_count

    def delete(self, table: Table, condition: Optional[Condition] = None) -> int:
        """Delete matching rows. Returns the count."""
        # Walk backwards: swap-remove only ever moves an already-checked row.
        deleted_count = 0
        for position in reversed(table.positions()):
            if condition is not None and not evaluate_condition(table.row_at(position), condition):
                continue
            table.delete_row(position)
            deleted_count += 1

        logger.debug("Deleted %d row(s) from %s", deleted_count, table.name)
        return deleted_count

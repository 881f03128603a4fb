"""
INNER JOIN between two tables.

Only equi-joins are supported:

    SELECT ...
    FROM left_table
    INNER JOIN right_table
      ON left_table.left_column = right_table.right_column

Output rows carry fully qualified ``table.column`` keys, whether or not the
two tables share column names.
"""

from typing import List, Optional, Sequence

from .commands import JoinCondition, normalize_columns
from .errors import ColumnNotFound
from .table import Table
from .types import Row, values_equal


def merge_rows(left_row: Row, right_row: Row, left_name: str, right_name: str) -> Row:
    merged = {f"{left_name}.{k}": v for k, v in left_row.items()}
    merged.update({f"{right_name}.{k}": v for k, v in right_row.items()})
    return merged


def inner_join(left: Table, right: Table, condition: JoinCondition,
               select_columns: Optional[Sequence[str]] = None) -> List[Row]:
    """
    Join ``left`` to ``right`` on equal column values.

    Uses the right table's index on the join column when there is one,
    otherwise scans the right table once per left row. Left rows with a NULL
    join value produce nothing. Output follows left storage order, then index
    bucket or right storage order.
    """
    left_col = condition.left_column
    right_col = condition.right_column
    if not left.has_column(left_col):
        raise ColumnNotFound(left.name, left_col)
    if not right.has_column(right_col):
        raise ColumnNotFound(right.name, right_col)

    selected = normalize_columns(select_columns)
    right_index = right.get_index(right_col)
    result = []

    for left_row in left.rows:
        left_value = left_row.get(left_col)
        if left_value is None:
            continue

        if right_index is not None:
            matches = right_index.lookup(left_value)
        else:
            # Nested loop join
            matches = [
                position for position, right_row in right.enumerate_rows()
                if values_equal(right_row.get(right_col), left_value)
            ]

        for position in matches:
            merged = merge_rows(left_row, right.row_at(position), left.name, right.name)
            if selected:
                merged = {col: merged[col] for col in selected if col in merged}
            result.append(merged)

    return result

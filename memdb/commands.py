"""
Structured command inputs handed to the engine by a command layer, and the
helpers that apply them to rows.
"""

from typing import List, Literal, Optional, Sequence, Union

from pydantic import BaseModel, ConfigDict, StrictBool, StrictInt, StrictStr

from .types import Row, compare_values, copy_row, values_equal


Operator = Literal["=", "!=", ">", "<", ">=", "<="]

# StrictBool first so True is not read as an int.
ScalarValue = Optional[Union[StrictBool, StrictInt, StrictStr]]


class Condition(BaseModel):
    """A single WHERE predicate: ``column <operator> value``."""
    model_config = ConfigDict(frozen=True)

    column: str
    operator: Operator
    value: ScalarValue = None


class JoinCondition(BaseModel):
    """Equality join predicate: ``left.left_column = right.right_column``."""
    model_config = ConfigDict(frozen=True)

    left_column: str
    right_column: str


def evaluate_condition(row: Row, condition: Condition) -> bool:
    """
    Check a row against a condition.

    A missing column never satisfies a condition. ``=`` never matches NULL,
    so it agrees with index lookups; ``!=`` holds for any value not equal
    to the target, NULL included. Ordering operators only hold between two
    INTs or two STRINGs.
    """
    if condition.column not in row:
        return False
    value = row[condition.column]
    target = condition.value

    op = condition.operator
    if op == "!=":
        return not values_equal(value, target)
    if op == "=":
        return value is not None and values_equal(value, target)

    order = compare_values(value, target)
    if order is None:
        return False
    if op == ">":
        return order > 0
    if op == "<":
        return order < 0
    if op == ">=":
        return order >= 0
    return order <= 0


def project_row(row: Row, columns: Optional[Sequence[str]]) -> Row:
    """Copy a row, keeping only the requested columns that it has."""
    if not columns:
        return copy_row(row)
    return {col: row[col] for col in columns if col in row}


def normalize_columns(columns: Optional[Sequence[str]]) -> List[str]:
    """Treat ``None`` and ``["*"]`` as "all columns"."""
    if not columns or list(columns) == ["*"]:
        return []
    return list(columns)

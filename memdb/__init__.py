"""
Embeddable in-memory relational store.
"""

from .commands import Condition, JoinCondition
from .config import EngineConfig
from .engine import DatabaseEngine
from .errors import (
    ColumnNotFound,
    ConstraintViolation,
    DatabaseError,
    InvalidValueType,
    MissingRequiredColumn,
    MultiplePrimaryKeys,
    PrimaryKeyViolation,
    TableAlreadyExists,
    TableNotFound,
    UniqueViolation,
)
from .types import Column, DataType, Index, Row

__all__ = [
    'Column',
    'ColumnNotFound',
    'Condition',
    'ConstraintViolation',
    'DataType',
    'DatabaseEngine',
    'DatabaseError',
    'EngineConfig',
    'Index',
    'InvalidValueType',
    'JoinCondition',
    'MissingRequiredColumn',
    'MultiplePrimaryKeys',
    'PrimaryKeyViolation',
    'Row',
    'TableAlreadyExists',
    'TableNotFound',
    'UniqueViolation',
]

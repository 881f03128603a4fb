"""Shared fixtures for engine tests."""

import pytest

from memdb import Column, DatabaseEngine, DataType


@pytest.fixture
def engine():
    """Create an empty engine."""
    return DatabaseEngine()


@pytest.fixture
def users_engine(engine):
    """Engine with users(id INT PK, name STRING NOT NULL, email STRING UNIQUE)."""
    engine.create_table("users", [
        Column("id", DataType.INT, is_primary=True),
        Column("name", DataType.STRING, not_null=True),
        Column("email", DataType.STRING, is_unique=True),
    ])
    return engine

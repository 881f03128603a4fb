"""Configuration for the database engine."""

from dataclasses import dataclass


@dataclass
class EngineConfig:
    """Tunable behavior of a DatabaseEngine.

    Attributes:
        strict_types: Reject written values that do not match the declared
            column type.
        allow_multiple_primary_keys: Accept schemas declaring more than one
            primary key column; the last one declared becomes the key.
    """

    strict_types: bool = True
    allow_multiple_primary_keys: bool = False

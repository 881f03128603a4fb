"""Tests for the table registry and CRUD entry points."""

import pytest

from memdb import (
    Column,
    ColumnNotFound,
    Condition,
    DatabaseEngine,
    DatabaseError,
    DataType,
    EngineConfig,
    InvalidValueType,
    MissingRequiredColumn,
    MultiplePrimaryKeys,
    PrimaryKeyViolation,
    TableAlreadyExists,
    TableNotFound,
    UniqueViolation,
)


def where(column, operator, value):
    return Condition(column=column, operator=operator, value=value)


@pytest.fixture
def ages_engine(engine):
    """people(id INT PK, age INT, name STRING) with four rows."""
    engine.create_table("people", [
        Column("id", DataType.INT, is_primary=True),
        Column("age", DataType.INT),
        Column("name", DataType.STRING),
    ])
    for i, (age, name) in enumerate([(25, "ann"), (30, "bob"), (35, "cy"), (30, "di")], start=1):
        engine.insert("people", {"id": i, "age": age, "name": name})
    return engine


# ----------------------------------------------------------------------
# Registry
# ----------------------------------------------------------------------

def test_create_and_list_tables(engine):
    engine.create_table("b", [Column("x", DataType.INT)])
    engine.create_table("a", [Column("x", DataType.INT)])
    assert engine.list_tables() == ["a", "b"]
    assert engine.table_exists("a")
    assert not engine.table_exists("c")


def test_create_duplicate_table(users_engine):
    with pytest.raises(TableAlreadyExists):
        users_engine.create_table("users", [Column("x", DataType.INT)])


def test_create_table_with_two_primary_keys(engine):
    with pytest.raises(MultiplePrimaryKeys):
        engine.create_table("t", [
            Column("a", DataType.INT, is_primary=True),
            Column("b", DataType.INT, is_primary=True),
        ])
    assert not engine.table_exists("t")


def test_two_primary_keys_allowed_by_config():
    engine = DatabaseEngine(EngineConfig(allow_multiple_primary_keys=True))
    engine.create_table("t", [
        Column("a", DataType.INT, is_primary=True),
        Column("b", DataType.INT, is_primary=True),
    ])
    assert engine.get_table("t").primary_key == "b"


def test_get_missing_table(engine):
    with pytest.raises(TableNotFound) as exc_info:
        engine.get_table("nope")
    assert exc_info.value.table == "nope"


def test_errors_are_value_errors(engine):
    with pytest.raises(ValueError):
        engine.select("nope")


def test_drop_table(users_engine):
    users_engine.drop_table("users")
    assert not users_engine.table_exists("users")
    with pytest.raises(TableNotFound):
        users_engine.drop_table("users")


def test_describe_table(users_engine):
    users_engine.insert("users", {"id": 1, "name": "a"})
    info = users_engine.describe_table("users")
    assert info["row_count"] == 1
    assert [c["name"] for c in info["columns"]] == ["id", "name", "email"]


def test_create_index(ages_engine):
    ages_engine.create_index("people", "age")
    assert ages_engine.get_table("people").has_index("age")
    with pytest.raises(ColumnNotFound):
        ages_engine.create_index("people", "height")
    with pytest.raises(TableNotFound):
        ages_engine.create_index("nope", "age")


# ----------------------------------------------------------------------
# Insert
# ----------------------------------------------------------------------

def test_users_scenario(users_engine):
    users_engine.insert("users", {"id": 1, "name": "a", "email": "a@x"})
    with pytest.raises(PrimaryKeyViolation):
        users_engine.insert("users", {"id": 1, "name": "b", "email": "b@x"})
    assert len(users_engine.select("users")) == 1


def test_insert_duplicate_unique(users_engine):
    users_engine.insert("users", {"id": 1, "name": "a", "email": "a@x"})
    with pytest.raises(UniqueViolation):
        users_engine.insert("users", {"id": 2, "name": "b", "email": "a@x"})


def test_unique_column_may_be_omitted_twice(users_engine):
    users_engine.insert("users", {"id": 1, "name": "a"})
    users_engine.insert("users", {"id": 2, "name": "b"})
    assert len(users_engine.select("users")) == 2


def test_insert_missing_not_null(users_engine):
    with pytest.raises(MissingRequiredColumn):
        users_engine.insert("users", {"id": 1})
    with pytest.raises(MissingRequiredColumn):
        users_engine.insert("users", {"name": "a"})


def test_insert_into_missing_table(engine):
    with pytest.raises(TableNotFound):
        engine.insert("nope", {"id": 1})


def test_insert_copies_row(users_engine):
    row = {"id": 1, "name": "a"}
    users_engine.insert("users", row)
    row["name"] = "changed"
    assert users_engine.select("users")[0]["name"] == "a"


def test_insert_then_select_by_primary_key(users_engine):
    row = {"id": 7, "name": "g", "email": "g@x"}
    users_engine.insert("users", row)
    assert users_engine.select("users", None, where("id", "=", 7)) == [row]


# ----------------------------------------------------------------------
# Select
# ----------------------------------------------------------------------

def test_select_all(ages_engine):
    assert [r["id"] for r in ages_engine.select("people")] == [1, 2, 3, 4]


def test_select_star_means_all_columns(ages_engine):
    rows = ages_engine.select("people", ["*"], where("id", "=", 1))
    assert rows == [{"id": 1, "age": 25, "name": "ann"}]


def test_select_projection_skips_missing_columns(ages_engine):
    rows = ages_engine.select("people", ["name", "height"], where("id", "=", 2))
    assert rows == [{"name": "bob"}]


def test_select_returns_copies(ages_engine):
    ages_engine.select("people")[0]["name"] = "zzz"
    assert ages_engine.select("people")[0]["name"] == "ann"


@pytest.mark.parametrize("operator,value,expected", [
    ("=", 30, [2, 4]),
    ("!=", 30, [1, 3]),
    (">", 30, [3]),
    ("<", 30, [1]),
    (">=", 30, [2, 3, 4]),
    ("<=", 30, [1, 2, 4]),
])
def test_select_operators(ages_engine, operator, value, expected):
    rows = ages_engine.select("people", ["id"], where("age", operator, value))
    assert [r["id"] for r in rows] == expected


def test_select_string_ordering(ages_engine):
    rows = ages_engine.select("people", ["name"], where("name", ">", "bob"))
    assert [r["name"] for r in rows] == ["cy", "di"]


def test_unordered_comparison_matches_nothing(ages_engine):
    # An INT column compared with a STRING has no order, so neither side holds.
    assert ages_engine.select("people", None, where("age", ">", "30")) == []
    assert ages_engine.select("people", None, where("age", "<=", "30")) == []


def test_cross_type_equality(ages_engine):
    assert ages_engine.select("people", None, where("age", "=", "30")) == []
    assert len(ages_engine.select("people", None, where("age", "!=", "30"))) == 4


def test_null_never_equals(users_engine):
    users_engine.insert("users", {"id": 1, "name": "a"})
    users_engine.insert("users", {"id": 2, "name": "b", "email": "b@x"})
    assert users_engine.select("users", None, where("email", "=", None)) == []
    assert users_engine.select("users", None, where("email", ">", "a")) == [
        {"id": 2, "name": "b", "email": "b@x"},
    ]


def test_null_is_not_equal_to_a_value(users_engine):
    users_engine.insert("users", {"id": 1, "name": "a", "email": None})
    users_engine.insert("users", {"id": 2, "name": "b", "email": "b@x"})
    rows = users_engine.select("users", ["id"], where("email", "!=", "zzz"))
    assert rows == [{"id": 1}, {"id": 2}]
    rows = users_engine.select("users", ["id"], where("email", "!=", None))
    assert rows == [{"id": 2}]


def test_delete_not_equal_removes_null_rows(users_engine):
    users_engine.insert("users", {"id": 1, "name": "a", "email": None})
    users_engine.insert("users", {"id": 2, "name": "b", "email": "x"})
    assert users_engine.delete("users", where("email", "!=", "x")) == 1
    assert users_engine.select("users", ["id"]) == [{"id": 2}]


def test_condition_on_unknown_column_matches_nothing(ages_engine):
    assert ages_engine.select("people", None, where("height", "=", 1)) == []


def test_index_and_scan_agree(ages_engine):
    condition = where("age", "=", 30)
    ages_engine.delete("people", where("id", "=", 1))
    ages_engine.insert("people", {"id": 5, "age": 30, "name": "ed"})
    scanned = ages_engine.select("people", None, condition)

    ages_engine.create_index("people", "age")
    indexed = ages_engine.select("people", None, condition)

    assert indexed == scanned
    assert sorted(r["id"] for r in indexed) == [2, 4, 5]


def test_select_from_missing_table(engine):
    with pytest.raises(TableNotFound):
        engine.select("nope")


# ----------------------------------------------------------------------
# Update
# ----------------------------------------------------------------------

def test_update_matching_rows(ages_engine):
    count = ages_engine.update("people", {"name": "thirty"}, where("age", "=", 30))
    assert count == 2
    rows = ages_engine.select("people", ["name"], where("age", "=", 30))
    assert rows == [{"name": "thirty"}, {"name": "thirty"}]


def test_update_all_rows(ages_engine):
    assert ages_engine.update("people", {"age": 1}) == 4


def test_update_primary_key_reindexes(ages_engine):
    ages_engine.update("people", {"id": 10}, where("id", "=", 1))
    assert ages_engine.select("people", ["name"], where("id", "=", 10)) == [{"name": "ann"}]
    assert ages_engine.select("people", None, where("id", "=", 1)) == []


def test_update_same_value_is_allowed(users_engine):
    users_engine.insert("users", {"id": 1, "name": "a", "email": "a@x"})
    assert users_engine.update("users", {"email": "a@x"}, where("id", "=", 1)) == 1


def test_update_stops_at_first_violation(ages_engine):
    # ids 1..4 become 100: the first row succeeds, the second collides.
    with pytest.raises(PrimaryKeyViolation) as exc_info:
        ages_engine.update("people", {"id": 100})
    assert exc_info.value.rows_affected == 1

    ids = [r["id"] for r in ages_engine.select("people")]
    assert ids == [100, 2, 3, 4]


def test_update_unknown_column(ages_engine):
    with pytest.raises(ColumnNotFound):
        ages_engine.update("people", {"height": 3}, where("id", "=", 1))


def test_update_checks_columns_even_when_nothing_matches(ages_engine):
    with pytest.raises(ColumnNotFound) as exc_info:
        ages_engine.update("people", {"height": 3}, where("id", "=", 999))
    assert exc_info.value.rows_affected == 0
    with pytest.raises(InvalidValueType):
        ages_engine.update("people", {"age": "old"}, where("id", "=", 999))


def test_update_wrong_type(ages_engine):
    with pytest.raises(DatabaseError):
        ages_engine.update("people", {"age": "old"}, where("id", "=", 1))
    assert ages_engine.select("people", ["age"], where("id", "=", 1)) == [{"age": 25}]


def test_update_missing_table(engine):
    with pytest.raises(TableNotFound):
        engine.update("nope", {"a": 1})


# ----------------------------------------------------------------------
# Delete
# ----------------------------------------------------------------------

def test_delete_matching_rows(ages_engine):
    assert ages_engine.delete("people", where("age", "=", 30)) == 2
    remaining = ages_engine.select("people")
    assert len(remaining) == 2
    assert all(r["age"] != 30 for r in remaining)


def test_delete_all_rows(ages_engine):
    assert ages_engine.delete("people") == 4
    assert ages_engine.select("people") == []


def test_delete_frees_unique_values(users_engine):
    users_engine.insert("users", {"id": 1, "name": "a", "email": "a@x"})
    users_engine.delete("users", where("id", "=", 1))
    users_engine.insert("users", {"id": 1, "name": "b", "email": "a@x"})


def test_delete_reorders_rows(ages_engine):
    ages_engine.delete("people", where("id", "=", 1))
    assert [r["id"] for r in ages_engine.select("people")] == [4, 2, 3]


def test_relocated_row_still_found_by_index(ages_engine):
    ages_engine.create_index("people", "name")
    ages_engine.delete("people", where("id", "=", 4))  # last row
    ages_engine.delete("people", where("id", "=", 1))  # id 3 moves to slot 0
    ages_engine.delete("people", where("id", "=", 2))  # id 3 is now last; 2 goes

    rows = ages_engine.select("people", None, where("name", "=", "cy"))
    assert rows == [{"id": 3, "age": 35, "name": "cy"}]
    assert ages_engine.select("people", ["id"], where("id", "=", 3)) == [{"id": 3}]
    assert ages_engine.select("people", None, where("name", "=", "bob")) == []


def test_delete_missing_table(engine):
    with pytest.raises(TableNotFound):
        engine.delete("nope")

"""Tests for statement execution against the in-memory store."""

import logging
import threading

import pytest

from marketdb.errors import ParameterCountError
from marketdb.parsing.statement_parser import (
    CompoundCondition,
    Condition,
    DeleteStatement,
    InsertStatement,
    OrderBy,
    SelectStatement,
)
from marketdb.store import DEFAULT_ORDERINGS, MutationResult, Store, row_matches, strict_equals


@pytest.fixture
def store():
    return Store({"foods": [], "orders": []})


def insert(store, table, row):
    columns = ", ".join(row)
    placeholders = ", ".join("?" for _ in row)
    return store.execute_write(f"INSERT INTO {table} ({columns}) VALUES ({placeholders})", list(row.values()))


class TestInsertAndSelect:
    def test_select_by_id(self, store):
        """A row inserted with placeholders is found by its id."""
        insert(store, "foods", {"id": "1", "name": "Soup"})

        rows = store.execute_read("SELECT * FROM foods WHERE id = ?", ["1"])

        assert len(rows) == 1
        assert rows[0]["name"] == "Soup"

    def test_inserted_rows_appear_exactly_once(self, store):
        for i in range(5):
            insert(store, "foods", {"id": str(i), "name": f"food {i}"})

        rows = store.execute_read("SELECT * FROM foods")

        assert [row["id"] for row in rows] == ["0", "1", "2", "3", "4"]

    def test_insert_result(self, store):
        """An insert reports one change and a clock-based row id."""
        result = insert(store, "foods", {"id": "1"})

        assert result.changes == 1
        assert result.applied
        assert result.last_insert_row_id > 0

    def test_insert_into_missing_table_is_a_no_op(self, store, caplog):
        with caplog.at_level(logging.WARNING, logger="marketdb.store"):
            result = insert(store, "missing", {"id": "1"})

        assert result == MutationResult()
        assert not store.has_table("missing")
        assert "missing" in caplog.text

    def test_select_missing_table(self, store):
        assert store.execute_read("SELECT * FROM missing") == []

    def test_no_match(self, store):
        insert(store, "foods", {"id": "1"})

        assert store.execute_read("SELECT * FROM foods WHERE id = ?", ["2"]) == []
        assert store.execute_read_one("SELECT * FROM foods WHERE id = ?", ["2"]) is None

    def test_read_one_returns_first_match(self, store):
        insert(store, "foods", {"id": "1", "category": "soup"})
        insert(store, "foods", {"id": "2", "category": "soup"})

        row = store.execute_read_one("SELECT * FROM foods WHERE category = ?", ["soup"])

        assert row["id"] == "1"

    def test_rows_are_copies(self, store):
        """Changing a returned row leaves the table alone."""
        insert(store, "foods", {"id": "1", "name": "Soup"})

        row = store.execute_read_one("SELECT * FROM foods WHERE id = ?", ["1"])
        row["name"] = "Changed"

        assert store.execute_read_one("SELECT * FROM foods WHERE id = ?", ["1"])["name"] == "Soup"

    def test_column_projection(self, store):
        insert(store, "foods", {"id": "1", "name": "Soup", "price": 10})

        assert store.execute_read("SELECT id, price FROM foods") == [{"id": "1", "price": 10}]

    def test_descriptor_statements(self, store):
        """Descriptors built by the caller run without any text."""
        store.execute_write(InsertStatement("foods", columns=["id", "name"]), ["1", "Soup"])

        rows = store.execute_read(SelectStatement("foods", where=Condition("id")), ["1"])

        assert rows == [{"id": "1", "name": "Soup"}]


class TestWhere:
    def test_strict_equality(self, store):
        """Values compare by type as well as value."""
        insert(store, "foods", {"id": 1})

        assert store.execute_read("SELECT * FROM foods WHERE id = ?", ["1"]) == []
        assert len(store.execute_read("SELECT * FROM foods WHERE id = ?", [1])) == 1

    def test_missing_field_never_matches(self, store):
        insert(store, "foods", {"id": "1"})

        assert store.execute_read("SELECT * FROM foods WHERE cookId = ?", [None]) == []

    def test_null_field_matches_none(self, store):
        insert(store, "foods", {"id": "1", "cookId": None})

        assert len(store.execute_read("SELECT * FROM foods WHERE cookId = ?", [None])) == 1

    def test_or_condition(self, store):
        insert(store, "orders", {"id": "1", "buyerId": "a", "sellerId": "b"})
        insert(store, "orders", {"id": "2", "buyerId": "b", "sellerId": "c"})
        insert(store, "orders", {"id": "3", "buyerId": "c", "sellerId": "d"})

        rows = store.execute_read("SELECT * FROM orders WHERE buyerId = ? OR sellerId = ?", ["b", "b"])

        assert [row["id"] for row in rows] == ["1", "2"]

    def test_and_condition(self, store):
        insert(store, "orders", {"id": "1", "buyerId": "a", "sellerId": "b"})
        insert(store, "orders", {"id": "2", "buyerId": "a", "sellerId": "c"})

        rows = store.execute_read("SELECT * FROM orders WHERE buyerId = ? AND sellerId = ?", ["a", "c"])

        assert [row["id"] for row in rows] == ["2"]

    def test_literal_value(self, store):
        insert(store, "orders", {"id": "1", "status": "pending"})

        assert len(store.execute_read("SELECT * FROM orders WHERE status = 'pending'")) == 1

    def test_strict_equals(self):
        assert strict_equals(1, 1)
        assert strict_equals(1, 1.0)
        assert not strict_equals(True, 1)
        assert not strict_equals(0, False)
        assert strict_equals(False, False)
        assert not strict_equals("1", 1)

    def test_row_matches_compound(self):
        predicate = CompoundCondition(Condition("a", 1), "and", Condition("b", 2))

        assert row_matches({"a": 1, "b": 2}, predicate)
        assert not row_matches({"a": 1, "b": 3}, predicate)


class TestOrderBy:
    def test_created_at_desc(self, store):
        for created_at in ("2024-01-01", "2024-03-01", "2024-02-01"):
            insert(store, "foods", {"id": created_at, "createdAt": created_at})

        rows = store.execute_read("SELECT * FROM foods ORDER BY createdAt DESC")

        assert [row["createdAt"] for row in rows] == ["2024-03-01", "2024-02-01", "2024-01-01"]

    def test_timestamp_asc(self, store):
        store.create_table_if_missing("messages")
        for ts in ("2024-03-15T19:40:00.000Z", "2024-03-15T19:35:00.000Z", "2024-03-15T19:50:00.000Z"):
            insert(store, "messages", {"timestamp": ts})

        rows = store.execute_read("SELECT * FROM messages ORDER BY timestamp ASC")

        assert [row["timestamp"][11:16] for row in rows] == ["19:35", "19:40", "19:50"]

    def test_sort_with_where(self, store):
        insert(store, "orders", {"id": "1", "buyerId": "u", "orderDate": "2024-01-01T00:00:00Z"})
        insert(store, "orders", {"id": "2", "buyerId": "x", "orderDate": "2024-06-01T00:00:00Z"})
        insert(store, "orders", {"id": "3", "buyerId": "u", "orderDate": "2024-02-01T00:00:00Z"})

        rows = store.execute_read("SELECT * FROM orders WHERE buyerId = ? ORDER BY orderDate DESC", ["u"])

        assert [row["id"] for row in rows] == ["3", "1"]

    def test_unrecognized_ordering_keeps_insertion_order(self, store):
        """Only the configured (field, direction) pairs sort."""
        for created_at in ("2024-01-01", "2024-03-01", "2024-02-01"):
            insert(store, "foods", {"id": created_at, "createdAt": created_at})

        rows = store.execute_read("SELECT * FROM foods ORDER BY createdAt ASC")

        assert [row["id"] for row in rows] == ["2024-01-01", "2024-03-01", "2024-02-01"]

    def test_any_ordering_when_unrestricted(self):
        store = Store({"foods": []}, orderings=None)
        for created_at in ("2024-03-01", "2024-01-01", "2024-02-01"):
            insert(store, "foods", {"createdAt": created_at})

        rows = store.execute_read("SELECT * FROM foods ORDER BY createdAt ASC")

        assert [row["createdAt"] for row in rows] == ["2024-01-01", "2024-02-01", "2024-03-01"]

    def test_unparseable_timestamps_sort_last(self, store):
        insert(store, "foods", {"id": "a", "createdAt": "not a date"})
        insert(store, "foods", {"id": "b", "createdAt": "2024-01-01"})
        insert(store, "foods", {"id": "c"})
        insert(store, "foods", {"id": "d", "createdAt": "2024-05-01"})

        rows = store.execute_read(SelectStatement("foods", order_by=OrderBy("createdAt", "desc")))

        assert [row["id"] for row in rows] == ["d", "b", "a", "c"]

    def test_default_orderings(self):
        assert ("createdAt", "desc") in DEFAULT_ORDERINGS
        assert ("timestamp", "asc") in DEFAULT_ORDERINGS
        assert ("createdAt", "asc") not in DEFAULT_ORDERINGS


class TestUpdate:
    def test_update_status(self, store):
        insert(store, "orders", {"id": "1", "status": "pending"})

        result = store.execute_write("UPDATE orders SET status = ? WHERE id = ?", ["confirmed", "1"])

        assert result.changes == 1
        assert store.execute_read_one("SELECT * FROM orders WHERE id = ?", ["1"])["status"] == "confirmed"

    def test_update_is_idempotent(self, store):
        insert(store, "orders", {"id": "1", "status": "pending", "quantity": 1})
        statement = "UPDATE orders SET status = ?, quantity = ? WHERE id = ?"

        store.execute_write(statement, ["ready", 3, "1"])
        once = store.snapshot()
        store.execute_write(statement, ["ready", 3, "1"])

        assert store.snapshot() == once

    def test_update_changes_first_match_only(self, store):
        insert(store, "orders", {"id": "1", "status": "pending"})
        insert(store, "orders", {"id": "2", "status": "pending"})

        store.execute_write("UPDATE orders SET status = ? WHERE status = ?", ["ready", "pending"])

        assert [row["status"] for row in store.execute_read("SELECT * FROM orders")] == ["ready", "pending"]

    def test_update_no_match(self, store):
        insert(store, "orders", {"id": "1", "status": "pending"})

        result = store.execute_write("UPDATE orders SET status = ? WHERE id = ?", ["ready", "9"])

        assert result.changes == 0
        assert not result.applied

    def test_update_adds_new_field(self, store):
        insert(store, "orders", {"id": "1"})

        store.execute_write("UPDATE orders SET note = ? WHERE id = ?", ["ring twice", "1"])

        assert store.execute_read_one("SELECT * FROM orders WHERE id = ?", ["1"])["note"] == "ring twice"


class TestDelete:
    def test_deleted_rows_are_gone(self, store):
        insert(store, "foods", {"id": "1"})
        insert(store, "foods", {"id": "2"})

        result = store.execute_write("DELETE FROM foods WHERE id = ?", ["1"])

        assert result.changes == 1
        assert store.execute_read("SELECT * FROM foods WHERE id = ?", ["1"]) == []
        assert [row["id"] for row in store.execute_read("SELECT * FROM foods")] == ["2"]

    def test_delete_removes_every_match(self, store):
        for i in range(3):
            insert(store, "foods", {"id": str(i), "cookId": "c1"})
        insert(store, "foods", {"id": "x", "cookId": "c2"})

        result = store.execute_write(DeleteStatement("foods", where=Condition("cookId")), ["c1"])

        assert result.changes == 3
        assert store.row_count("foods") == 1

    def test_delete_no_match(self, store):
        assert store.execute_write("DELETE FROM foods WHERE id = ?", ["1"]).changes == 0


class TestParseMisses:
    def test_unrecognized_read_is_empty(self, store, caplog):
        with caplog.at_level(logging.WARNING, logger="marketdb.store"):
            rows = store.execute_read("SELECT name FROM")

        assert rows == []
        assert "Unrecognized statement" in caplog.text

    def test_unrecognized_write_is_no_op(self, store, caplog):
        with caplog.at_level(logging.WARNING, logger="marketdb.store"):
            result = store.execute_write("TRUNCATE foods")

        assert result == MutationResult()
        assert "Unrecognized statement" in caplog.text

    def test_select_through_execute_write(self, store):
        assert store.execute_write("SELECT * FROM foods") == MutationResult()

    def test_write_through_execute_read(self, store):
        assert store.execute_read("DELETE FROM foods WHERE id = ?", ["1"]) == []

    def test_wrong_parameter_count_raises(self, store):
        with pytest.raises(ParameterCountError):
            store.execute_read("SELECT * FROM foods WHERE id = ?", [])

    def test_parse_raises(self, store):
        with pytest.raises(SyntaxError):
            store.parse("SELEC * FROM foods")


class TestTables:
    def test_create_table(self, store):
        result = store.execute_write("CREATE TABLE IF NOT EXISTS reviews (id TEXT PRIMARY KEY, rating REAL)")

        assert result.changes == 1
        assert store.has_table("reviews")
        assert store.get_table("reviews").columns == ["id", "rating"]

    def test_create_existing_table_keeps_rows(self, store):
        insert(store, "foods", {"id": "1"})

        result = store.execute_write("CREATE TABLE IF NOT EXISTS foods")

        assert result.changes == 0
        assert store.row_count("foods") == 1

    def test_create_declares_columns_on_seeded_table(self, store):
        """Declaring a table that already holds rows records its columns."""
        insert(store, "foods", {"id": "1"})

        store.execute_script("CREATE TABLE IF NOT EXISTS foods (id TEXT PRIMARY KEY, name TEXT)")

        assert store.get_table("foods").columns == ["id", "name"]
        assert store.row_count("foods") == 1

    def test_execute_script(self, store):
        applied = store.execute_script("""
            CREATE TABLE IF NOT EXISTS users (uid TEXT);
            CREATE TABLE IF NOT EXISTS chats (id TEXT);
        """)

        assert applied == 2
        assert set(store.table_names()) == {"foods", "orders", "users", "chats"}

    def test_execute_script_skips_other_statements(self, store):
        applied = store.execute_script("CREATE TABLE a; DELETE FROM foods WHERE id = '1'")

        assert applied == 1

    def test_execute_dispatches(self, store):
        assert isinstance(store.execute("INSERT INTO foods (id) VALUES (?)", ["1"]), MutationResult)
        assert store.execute("SELECT * FROM foods") == [{"id": "1"}]

    def test_snapshot_is_deep_copy(self):
        source = {"foods": [{"id": "1", "ingredients": ["a"]}]}
        store = Store(source)

        source["foods"][0]["ingredients"].append("b")
        snapshot = store.snapshot()
        snapshot["foods"][0]["ingredients"].append("c")

        assert store.snapshot() == {"foods": [{"id": "1", "ingredients": ["a"]}]}

    def test_reset(self, store):
        insert(store, "foods", {"id": "1"})

        store.reset({"users": [{"uid": "u"}]})

        assert store.table_names() == ["users"]
        assert store.row_count("foods") == 0

    def test_concurrent_inserts(self, store):
        """Inserts from many threads are all kept."""
        def worker(n):
            for i in range(50):
                insert(store, "foods", {"id": f"{n}-{i}"})

        threads = [threading.Thread(target=worker, args=(n,)) for n in range(8)]
        for thread in threads:
            thread.start()
        for thread in threads:
            thread.join()

        assert store.row_count("foods") == 400

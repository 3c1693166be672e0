"""Tests for the marketdb shell."""

import pytest

from marketdb.api.client import ApiClient
from marketdb.api.routes import build_router
from marketdb.config import get_settings
from marketdb.repl import _split_statements, format_value, main, print_tables, run_command, run_file
from marketdb.store import MutationResult


@pytest.fixture(autouse=True)
def fresh_settings(monkeypatch):
    monkeypatch.delenv("MARKETDB_SEED_ENABLED", raising=False)
    get_settings.cache_clear()
    yield
    get_settings.cache_clear()


class TestSplitStatements:
    def test_split(self):
        assert _split_statements("SELECT * FROM a; SELECT * FROM b;") == ["SELECT * FROM a", "SELECT * FROM b"]

    def test_semicolon_in_string(self):
        assert _split_statements("INSERT INTO a (x) VALUES ('a;b'); SELECT * FROM a") == [
            "INSERT INTO a (x) VALUES ('a;b')",
            "SELECT * FROM a",
        ]


class TestFormatValue:
    def test_values(self):
        assert format_value(None) == "NULL"
        assert format_value(True) == "true"
        assert format_value("soup") == "'soup'"
        assert format_value(["a"]) == '["a"]'
        assert format_value("x" * 100).endswith("...'")


def test_print_tables(seeded_store, capsys):
    """Seeded tables list their rows and the columns declared by the schema."""
    print_tables(seeded_store)

    out = capsys.readouterr().out
    assert "foods (3 rows): id, name, description, price" in out
    assert "users (3 rows): uid, email" in out


class TestRunCommand:
    def test_statement(self, seeded_store):
        client = ApiClient(build_router(seeded_store))

        rows = run_command("SELECT * FROM foods WHERE id = 'food-1'", seeded_store, client)

        assert rows[0]["name"] == "Lentil Soup"

    def test_write(self, seeded_store):
        client = ApiClient(build_router(seeded_store))

        result = run_command("DELETE FROM orders WHERE buyerId = 'buyer-1'", seeded_store, client)

        assert result == MutationResult(changes=2, last_insert_row_id=result.last_insert_row_id)

    def test_request(self, seeded_store):
        client = ApiClient(build_router(seeded_store))

        response = run_command('PUT /orders/order-2/status {"status": "ready"}', seeded_store, client)

        assert response.status == 200
        assert seeded_store.execute_read_one("SELECT * FROM orders WHERE id = 'order-2'")["status"] == "ready"

    def test_syntax_error(self, seeded_store):
        client = ApiClient(build_router(seeded_store))

        with pytest.raises(SyntaxError):
            run_command("SELECT FROM", seeded_store, client)


class TestMain:
    def test_command(self, capsys):
        assert main(["-c", "SELECT name FROM foods WHERE id = 'food-2'"]) == 0

        out = capsys.readouterr().out
        assert "Stuffed Vine Leaves" in out
        assert "(1 row)" in out

    def test_request_command(self, capsys):
        assert main(["-c", "GET /foods/food-99"]) == 0

        out = capsys.readouterr().out
        assert "HTTP 404" in out
        assert "Food not found" in out

    def test_bad_command(self, capsys):
        assert main(["-c", "SELEC * FROM foods"]) == 1

        assert "Error:" in capsys.readouterr().out

    def test_empty(self, capsys):
        assert main(["--empty", "-c", "SELECT * FROM foods"]) == 0

        assert "(no results)" in capsys.readouterr().out

    def test_file(self, tmp_path, capsys):
        script = tmp_path / "script.sql"
        script.write_text(
            "-- add a food and read it back\n"
            "INSERT INTO foods (id, name, price, cookName, category)\n"
            "  VALUES ('food-9', 'Baklava', 60.0, 'Zeynep', 'Desserts');\n"
            "GET /foods/food-9\n"
            "SELECT id FROM foods WHERE name = 'Baklava';\n"
        )

        assert main(["-f", str(script), "-v"]) == 0

        out = capsys.readouterr().out
        assert "1 row affected" in out
        assert "> GET /foods/food-9" in out
        assert "HTTP 200" in out
        assert "'food-9'" in out

    def test_missing_file(self, tmp_path, capsys):
        assert main(["-f", str(tmp_path / "nope.sql")]) == 1

        assert "File not found" in capsys.readouterr().err


def test_run_file_reports_failures(tmp_path, seeded_store, capsys):
    script = tmp_path / "bad.sql"
    script.write_text("SELECT * FROM foods WHERE id = ?;\nSELECT uid FROM users WHERE uid = 'buyer-1';\n")

    assert run_file(script, seeded_store) == 1

    out = capsys.readouterr().out
    assert "Error:" in out
    assert "'buyer-1'" in out

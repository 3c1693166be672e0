"""Interactive shell for the marketdb store and API."""

from __future__ import annotations

import argparse
import asyncio
import json
import logging
import readline  # noqa: F401 - enables line editing in input()
import sys
from pathlib import Path
from typing import Any

from marketdb.api.client import ApiClient
from marketdb.api.routes import build_router
from marketdb.api.types import Response
from marketdb.config import Settings, get_settings
from marketdb.database import SCHEMA, build_tables
from marketdb.errors import ParameterCountError
from marketdb.store import MutationResult, Store

HTTP_METHODS = ("GET", "POST", "PUT", "DELETE")


def _split_statements(content: str) -> list[str]:
    """Split content into statements on semicolons outside of string literals."""
    statements = []
    current = []
    in_string = False

    for ch in content:
        if ch == "'":
            # A doubled quote toggles twice and leaves the state unchanged
            in_string = not in_string
            current.append(ch)
        elif ch == ";" and not in_string:
            stmt = "".join(current).strip()
            if stmt:
                statements.append(stmt)
            current = []
        else:
            current.append(ch)

    stmt = "".join(current).strip()
    if stmt:
        statements.append(stmt)

    return statements


def format_value(value: Any, max_width: int = 40) -> str:
    """Format a value for display."""
    if value is None:
        return "NULL"
    elif isinstance(value, bool):
        return "true" if value else "false"
    elif isinstance(value, float):
        return f"{value:.6g}"
    elif isinstance(value, str):
        if len(value) > max_width:
            return repr(value[:max_width - 3] + "...")
        return repr(value)
    else:
        s = json.dumps(value) if isinstance(value, (list, dict)) else str(value)
        if len(s) > max_width:
            return s[:max_width - 3] + "..."
        return s


def print_rows(rows: list[dict[str, Any]]) -> None:
    """Print rows in a formatted table."""
    if not rows:
        print("(no results)")
        return

    columns: list[str] = []
    for row in rows:
        for col in row:
            if col not in columns:
                columns.append(col)

    # Calculate column widths
    col_widths = {col: len(col) for col in columns}
    for row in rows:
        for col in columns:
            col_widths[col] = max(col_widths[col], len(format_value(row.get(col))))

    # Cap column widths
    max_col_width = 40
    for col in col_widths:
        col_widths[col] = min(col_widths[col], max_col_width)

    header = " | ".join(col.ljust(col_widths[col])[:col_widths[col]] for col in columns)
    print(header)
    print("-" * len(header))

    for row in rows:
        values = []
        for col in columns:
            val = format_value(row.get(col))
            if len(val) > col_widths[col]:
                val = val[: col_widths[col] - 3] + "..."
            values.append(val.ljust(col_widths[col]))
        print(" | ".join(values))

    print(f"\n({len(rows)} row{'s' if len(rows) != 1 else ''})")


def print_result(result: list[dict[str, Any]] | MutationResult | Response) -> None:
    """Print a statement or request result."""
    if isinstance(result, MutationResult):
        print(f"{result.changes} row{'s' if result.changes != 1 else ''} affected")
    elif isinstance(result, Response):
        print(f"HTTP {result.status}")
        if result.error is not None:
            print(f"Error: {result.error}")
        elif isinstance(result.data, list) and all(isinstance(item, dict) for item in result.data):
            print_rows(result.data)
        elif result.data is not None:
            print(json.dumps(result.data, indent=2))
    else:
        print_rows(result)


def print_tables(store: Store) -> None:
    """Print each table with its row count and declared columns."""
    for name in store.table_names():
        table = store.get_table(name)
        if table is None:
            continue
        columns = ", ".join(table.columns) if table.columns else "(no declared columns)"
        print(f"{name} ({len(table)} rows): {columns}")


def open_store(settings: Settings, empty: bool = False) -> Store:
    """Create a store for the shell, seeded unless ``empty``."""
    store = Store({} if empty else build_tables(settings), orderings=settings.orderings())
    store.execute_script(SCHEMA)
    return store


def run_command(line: str, store: Store, client: ApiClient) -> list[dict[str, Any]] | MutationResult | Response:
    """Execute one statement, or dispatch one request line like ``GET /foods``.

    Raises:
        SyntaxError: If the statement is not recognized.
        ValueError: If a request body is not valid JSON.
    """
    parts = line.strip().split(None, 2)
    if parts and parts[0].upper() in HTTP_METHODS and len(parts) >= 2 and parts[1].startswith("/"):
        body = json.loads(parts[2]) if len(parts) == 3 else None
        return asyncio.run(client.request(parts[0].upper(), parts[1], body=body))

    # Parse here so the shell reports errors instead of logging them
    statement = store.parse(line)
    return store.execute(statement)


def print_help() -> None:
    """Print help information."""
    print("""
marketdb - in-memory marketplace store

STATEMENTS (end with ;):
  CREATE TABLE IF NOT EXISTS <table> [(col TYPE, ...)]
  INSERT INTO <table> (col, ...) VALUES ('text', 42, 1.5, NULL, ...)
  SELECT * FROM <table> [WHERE col = value [AND|OR ...]] [ORDER BY col ASC|DESC]
  UPDATE <table> SET col = value, ... WHERE col = value
  DELETE FROM <table> WHERE col = value

REQUESTS:
  GET /foods                       Dispatch a request through the API router
  GET /orders?userId=u1&type=buyer
  POST /orders {"id": "o9", ...}   Body is JSON

COMMANDS:
  tables                           List tables, row counts and columns
  reset                            Rebuild every table from the seed
  help                             Show this help
  exit | quit                      Leave the shell
""")


def run_repl(store: Store, settings: Settings, empty: bool = False) -> int:
    """Run the interactive shell."""
    print("marketdb shell")
    print("Type 'help' for commands, 'exit' to quit.\n")

    client = ApiClient(build_router(store))

    history_file = Path.home() / ".marketdb_history"
    try:
        readline.read_history_file(history_file)
    except (FileNotFoundError, OSError):
        pass

    buffer: list[str] = []
    try:
        while True:
            try:
                line = input("...> " if buffer else "marketdb> ")
            except EOFError:
                print()
                break

            stripped = line.strip()
            if not buffer:
                if not stripped:
                    continue
                command = stripped.lower()
                if command in ("exit", "quit"):
                    break
                elif command == "help":
                    print_help()
                    continue
                elif command == "tables":
                    print_tables(store)
                    continue
                elif command == "reset":
                    store.reset({} if empty else build_tables(settings))
                    store.execute_script(SCHEMA)
                    print("Tables reset.")
                    continue
                elif stripped.split(None, 1)[0].upper() in HTTP_METHODS and " /" in stripped:
                    _run_and_print(stripped, store, client)
                    continue

            # Statements continue until a line ends with ;
            buffer.append(line)
            if not stripped.endswith(";"):
                continue
            text = "\n".join(buffer)
            buffer = []
            for statement in _split_statements(text):
                _run_and_print(statement, store, client)
    except KeyboardInterrupt:
        print()
    finally:
        try:
            readline.write_history_file(history_file)
        except OSError:
            pass

    return 0


def _run_and_print(line: str, store: Store, client: ApiClient) -> bool:
    try:
        print_result(run_command(line, store, client))
    except (SyntaxError, ParameterCountError, ValueError) as e:
        print(f"Error: {e}")
        return False
    return True


def run_file(file_path: Path, store: Store, verbose: bool = False) -> int:
    """Execute statements and request lines from a file.

    Returns:
        0 on success, 1 on error
    """
    try:
        content = file_path.read_text()
    except OSError as e:
        print(f"Error reading file: {e}", file=sys.stderr)
        return 1

    # Request lines stand alone; statement lines are joined and split on ;
    client = ApiClient(build_router(store))
    commands: list[str] = []
    pending: list[str] = []
    for line in content.split("\n"):
        stripped = line.strip()
        if not stripped or stripped.startswith("--"):
            continue
        if stripped.split(None, 1)[0].upper() in HTTP_METHODS and " /" in stripped:
            commands.extend(_split_statements("\n".join(pending)))
            pending = []
            commands.append(stripped)
        else:
            pending.append(line)
    commands.extend(_split_statements("\n".join(pending)))

    if not commands:
        print("No statements found in file", file=sys.stderr)
        return 1

    failed = False
    for command in commands:
        if verbose:
            print(f"> {command}")
        if not _run_and_print(command, store, client):
            failed = True
    return 1 if failed else 0


def main(argv: list[str] | None = None) -> int:
    """Main entry point."""
    arg_parser = argparse.ArgumentParser(
        description="Interactive shell for the marketdb in-memory store"
    )
    arg_parser.add_argument(
        "-c", "--command",
        type=str,
        help="Execute a single statement or request and exit",
    )
    arg_parser.add_argument(
        "-f", "--file",
        type=Path,
        help="Execute statements from a file and exit",
    )
    arg_parser.add_argument(
        "--empty",
        action="store_true",
        help="Start with empty tables instead of the seed",
    )
    arg_parser.add_argument(
        "-v", "--verbose",
        action="store_true",
        help="Print each statement before executing (for -f/--file)",
    )

    args = arg_parser.parse_args(argv)

    settings = get_settings()
    logging.basicConfig(level=settings.log_level, format="%(levelname)s %(name)s: %(message)s")

    try:
        store = open_store(settings, empty=args.empty)
    except (OSError, ValueError) as e:
        print(f"Error loading seed: {e}", file=sys.stderr)
        return 1

    if args.file:
        if not args.file.exists():
            print(f"Error: File not found: {args.file}", file=sys.stderr)
            return 1
        return run_file(args.file, store, args.verbose)

    if args.command:
        client = ApiClient(build_router(store))
        return 0 if _run_and_print(args.command, store, client) else 1

    return run_repl(store, settings, empty=args.empty)


if __name__ == "__main__":
    sys.exit(main())

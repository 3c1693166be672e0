"""In-memory table store that executes SQL-shaped statements."""

from __future__ import annotations

import logging
import threading
import time
from dataclasses import dataclass
from typing import Any, Iterable, Mapping, Sequence

from marketdb.binding import bind
from marketdb.parsing.statement_parser import (
    CompoundCondition,
    CreateTableStatement,
    DeleteStatement,
    InsertStatement,
    Predicate,
    SelectStatement,
    Statement,
    StatementParser,
    UpdateStatement,
)
from marketdb.table import Row, Table
from marketdb.timestamps import sort_rows_by_timestamp

logger = logging.getLogger(__name__)

# (field, direction) pairs whose ORDER BY sorts by timestamp
DEFAULT_ORDERINGS: frozenset[tuple[str, str]] = frozenset({
    ("createdAt", "desc"),
    ("orderDate", "desc"),
    ("lastMessageTime", "desc"),
    ("timestamp", "asc"),
})

_MISSING = object()


@dataclass
class MutationResult:
    """Outcome of a write.

    ``changes`` is the number of rows inserted, updated or deleted.
    ``last_insert_row_id`` is a millisecond clock reading, not derived from the
    row and not guaranteed unique.
    """

    changes: int = 0
    last_insert_row_id: int = 0

    @property
    def applied(self) -> bool:
        return self.changes > 0


def strict_equals(left: Any, right: Any) -> bool:
    """Equality that never confuses booleans with numbers."""
    if isinstance(left, bool) or isinstance(right, bool):
        return type(left) is type(right) and left == right
    return left == right


def row_matches(row: Row, predicate: Predicate) -> bool:
    """Evaluate a bound predicate against a row."""
    if isinstance(predicate, CompoundCondition):
        if predicate.operator == "and":
            return row_matches(row, predicate.left) and row_matches(row, predicate.right)
        return row_matches(row, predicate.left) or row_matches(row, predicate.right)
    return strict_equals(row.get(predicate.field, _MISSING), predicate.value)


def _now_ms() -> int:
    return time.time_ns() // 1_000_000


class Store:
    """Holds named tables and executes statements against them.

    Statements are either text (parsed here) or descriptors built by the
    caller. Reads never raise for a missing table or an unrecognized
    statement; writes that change nothing report ``changes == 0``. Anything
    the store cannot interpret is logged as a warning.
    """

    def __init__(
        self,
        snapshot: Mapping[str, Iterable[Row]] | None = None,
        orderings: Iterable[tuple[str, str]] | None = DEFAULT_ORDERINGS,
    ) -> None:
        """Initialize the store.

        Args:
            snapshot: Initial tables, deep-copied. ``None`` starts empty.
            orderings: Recognized ``(field, direction)`` ORDER BY pairs.
                ``None`` sorts on any field.
        """
        self.parser = StatementParser()
        self.orderings = frozenset((f, d.lower()) for f, d in orderings) if orderings is not None else None
        self._tables: dict[str, Table] = {}
        self._lock = threading.RLock()
        self.reset(snapshot)

    # --- Table management ---

    def reset(self, snapshot: Mapping[str, Iterable[Row]] | None = None) -> None:
        """Discard every table and rebuild from ``snapshot``."""
        tables = {name: Table(name, rows) for name, rows in (snapshot or {}).items()}
        with self._lock:
            self._tables = tables

    def snapshot(self) -> dict[str, list[Row]]:
        """Deep copy of every table's rows."""
        with self._lock:
            tables = dict(self._tables)
        return {name: table.dump() for name, table in tables.items()}

    def table_names(self) -> list[str]:
        with self._lock:
            return list(self._tables)

    def has_table(self, name: str) -> bool:
        with self._lock:
            return name in self._tables

    def get_table(self, name: str) -> Table | None:
        with self._lock:
            return self._tables.get(name)

    def row_count(self, name: str) -> int:
        table = self.get_table(name)
        return len(table) if table is not None else 0

    def create_table_if_missing(self, name: str, columns: list[str] | None = None) -> Table:
        """Return the named table, creating it empty if needed.

        An existing table without declared columns takes ``columns``; its rows
        are kept.
        """
        with self._lock:
            table = self._tables.get(name)
            if table is None:
                table = Table(name, columns=columns)
                self._tables[name] = table
                logger.debug("Created table %s", name)
            elif columns and not table.columns:
                table.columns = list(columns)
            return table

    # --- Statement handling ---

    def parse(self, text: str) -> Statement:
        """Parse statement text. Raises SyntaxError if it is not recognized."""
        return self.parser.parse(text)

    def _prepare(self, statement: str | Statement, params: Sequence[Any]) -> Statement | None:
        """Parse (if needed) and bind a statement; None if the text is unrecognized."""
        if isinstance(statement, str):
            try:
                statement = self.parser.parse(statement)
            except SyntaxError as e:
                logger.warning("Unrecognized statement %r: %s", statement, e)
                return None
        return bind(statement, params)

    def execute_script(self, script: str) -> int:
        """Run every CREATE TABLE statement in a ``;``-separated script.

        Returns the number of statements applied.
        """
        try:
            statements = self.parser.parse_program(script)
        except SyntaxError as e:
            logger.warning("Unrecognized script: %s", e)
            return 0

        applied = 0
        for statement in statements:
            if isinstance(statement, CreateTableStatement):
                self.create_table_if_missing(statement.table, [c.name for c in statement.columns])
                applied += 1
            else:
                logger.warning("Skipping %s in schema script", type(statement).__name__)
        return applied

    def execute(self, statement: str | Statement, params: Sequence[Any] = ()) -> list[Row] | MutationResult:
        """Execute any statement: SELECT returns rows, everything else a MutationResult."""
        if isinstance(statement, str):
            try:
                parsed = self.parser.parse(statement)
            except SyntaxError as e:
                logger.warning("Unrecognized statement %r: %s", statement, e)
                return MutationResult()
            statement = parsed
        if isinstance(statement, SelectStatement):
            return self.execute_read(statement, params)
        return self.execute_write(statement, params)

    def execute_read(self, statement: str | Statement, params: Sequence[Any] = ()) -> list[Row]:
        """Run a SELECT and return matching rows (copies)."""
        bound = self._prepare(statement, params)
        if bound is None:
            return []
        if not isinstance(bound, SelectStatement):
            logger.warning("execute_read expects a SELECT, got %s", type(bound).__name__)
            return []

        table = self.get_table(bound.table)
        if table is None:
            return []

        where = bound.where
        rows = table.select(None if where is None else lambda row: row_matches(row, where))

        if bound.order_by is not None:
            order = bound.order_by
            if self.orderings is None or (order.field, order.direction) in self.orderings:
                rows = sort_rows_by_timestamp(rows, order.field, descending=order.descending)
            else:
                logger.debug("Ignoring ORDER BY %s %s on %s", order.field, order.direction.upper(), bound.table)

        if bound.columns is not None:
            rows = [{column: row.get(column) for column in bound.columns} for row in rows]
        return rows

    def execute_read_one(self, statement: str | Statement, params: Sequence[Any] = ()) -> Row | None:
        """Run a SELECT and return the first row, or None."""
        rows = self.execute_read(statement, params)
        return rows[0] if rows else None

    def execute_write(self, statement: str | Statement, params: Sequence[Any] = ()) -> MutationResult:
        """Run a CREATE TABLE, INSERT, UPDATE or DELETE."""
        bound = self._prepare(statement, params)
        if bound is None:
            return MutationResult()

        if isinstance(bound, CreateTableStatement):
            existed = self.has_table(bound.table)
            self.create_table_if_missing(bound.table, [c.name for c in bound.columns])
            return MutationResult(changes=0 if existed else 1)

        if isinstance(bound, SelectStatement):
            logger.warning("execute_write got a SELECT on %s; nothing written", bound.table)
            return MutationResult()

        table = self.get_table(bound.table)
        if table is None:
            logger.warning("%s on missing table %s ignored", type(bound).__name__, bound.table)
            return MutationResult()

        if isinstance(bound, InsertStatement):
            table.insert(dict(zip(bound.columns, bound.values or [])))
            return MutationResult(changes=1, last_insert_row_id=_now_ms())

        if isinstance(bound, UpdateStatement):
            if bound.where is None:
                logger.warning("UPDATE on %s without WHERE ignored", bound.table)
                return MutationResult()
            where = bound.where
            changes = {a.field: a.value for a in bound.assignments}
            changed = table.update_first(lambda row: row_matches(row, where), changes)
            return MutationResult(changes=changed, last_insert_row_id=_now_ms())

        if isinstance(bound, DeleteStatement):
            if bound.where is None:
                logger.warning("DELETE on %s without WHERE ignored", bound.table)
                return MutationResult()
            where = bound.where
            removed = table.delete_where(lambda row: row_matches(row, where))
            return MutationResult(changes=removed, last_insert_row_id=_now_ms())

        raise ValueError(f"Unknown statement type: {type(bound)}")

    def __repr__(self) -> str:
        return f"Store(tables={self.table_names()!r})"


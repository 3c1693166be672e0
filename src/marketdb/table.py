"""In-memory row storage for a single table."""

from __future__ import annotations

import copy
import threading
from typing import Any, Callable, Iterable

Row = dict[str, Any]
RowPredicate = Callable[[Row], bool]


class Table:
    """Ordered rows for one table, guarded by the table's own lock.

    Every method runs under the lock, so concurrent callers serialize per
    table and readers never see a half-applied write. Rows handed out are
    copies; changing them does not change the table.
    """

    def __init__(self, name: str, rows: Iterable[Row] | None = None, columns: list[str] | None = None) -> None:
        self.name = name
        self.columns: list[str] = list(columns or [])
        self._rows: list[Row] = [copy.deepcopy(dict(row)) for row in rows or []]
        self._lock = threading.RLock()

    def __len__(self) -> int:
        with self._lock:
            return len(self._rows)

    def __repr__(self) -> str:
        return f"Table({self.name!r}, rows={len(self)})"

    def insert(self, row: Row) -> int:
        """Append a row and return its position."""
        with self._lock:
            self._rows.append(dict(row))
            return len(self._rows) - 1

    def select(self, predicate: RowPredicate | None = None) -> list[Row]:
        """Return copies of the rows matching ``predicate`` (all rows if None)."""
        with self._lock:
            return [dict(row) for row in self._rows if predicate is None or predicate(row)]

    def update_first(self, predicate: RowPredicate, changes: Row) -> int:
        """Overwrite ``changes`` on the first matching row. Returns rows changed (0 or 1)."""
        with self._lock:
            for row in self._rows:
                if predicate(row):
                    row.update(changes)
                    return 1
            return 0

    def delete_where(self, predicate: RowPredicate) -> int:
        """Remove every matching row. Returns the number removed."""
        with self._lock:
            kept = [row for row in self._rows if not predicate(row)]
            removed = len(self._rows) - len(kept)
            self._rows = kept
            return removed

    def dump(self) -> list[Row]:
        """Return a deep copy of the rows, for snapshots."""
        with self._lock:
            return copy.deepcopy(self._rows)

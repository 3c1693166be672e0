"""Timestamp helpers used for ORDER BY and for stamping new records."""

from __future__ import annotations

from datetime import date, datetime, timezone
from typing import Any


def timestamp_key(value: Any) -> float | None:
    """Convert a stored value into epoch milliseconds, or None if it is not a time.

    Strings are read as ISO 8601; a bare date or a time without an offset is
    taken as UTC. Numbers are already epoch milliseconds.
    """
    if value is None or isinstance(value, bool):
        return None
    if isinstance(value, (int, float)):
        return float(value)
    if isinstance(value, datetime):
        parsed = value
    elif isinstance(value, date):
        parsed = datetime(value.year, value.month, value.day)
    elif isinstance(value, str):
        text = value.strip()
        if text.endswith(("Z", "z")):
            text = text[:-1] + "+00:00"
        try:
            parsed = datetime.fromisoformat(text)
        except ValueError:
            return None
    else:
        return None

    if parsed.tzinfo is None:
        parsed = parsed.replace(tzinfo=timezone.utc)
    return parsed.timestamp() * 1000


def sort_rows_by_timestamp(rows: list[dict[str, Any]], field: str, descending: bool = False) -> list[dict[str, Any]]:
    """Stable sort on ``field`` read as a timestamp.

    Rows whose field is missing or unparseable keep their relative order after
    every row with a usable timestamp.
    """
    timed = []
    untimed = []
    for row in rows:
        key = timestamp_key(row.get(field))
        if key is None:
            untimed.append(row)
        else:
            timed.append((key, row))
    timed.sort(key=lambda pair: pair[0], reverse=descending)
    return [row for _, row in timed] + untimed


def utc_now_iso() -> str:
    """Current UTC time as ``YYYY-MM-DDTHH:MM:SS.mmmZ``."""
    now = datetime.now(timezone.utc)
    return now.isoformat(timespec="milliseconds").replace("+00:00", "Z")

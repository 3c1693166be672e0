"""Positional parameter binding for statement descriptors."""

from __future__ import annotations

from dataclasses import replace
from typing import Any, Iterator, Sequence

from marketdb.errors import ParameterCountError
from marketdb.parsing.statement_parser import (
    Assignment,
    CompoundCondition,
    Condition,
    CreateTableStatement,
    DeleteStatement,
    InsertStatement,
    Placeholder,
    Predicate,
    SelectStatement,
    Statement,
    UpdateStatement,
)


def _predicate_values(predicate: Predicate | None) -> Iterator[Any]:
    if predicate is None:
        return
    if isinstance(predicate, CompoundCondition):
        yield from _predicate_values(predicate.left)
        yield from _predicate_values(predicate.right)
    else:
        yield predicate.value


def _statement_values(statement: Statement) -> Iterator[Any]:
    """Yield every value slot in the order its text would list it."""
    if isinstance(statement, InsertStatement):
        yield from statement.values or []
    elif isinstance(statement, UpdateStatement):
        for assignment in statement.assignments:
            yield assignment.value
        yield from _predicate_values(statement.where)
    elif isinstance(statement, (SelectStatement, DeleteStatement)):
        yield from _predicate_values(statement.where)


def count_placeholders(statement: Statement) -> int:
    """Return the number of ``?`` slots in a statement."""
    return sum(1 for value in _statement_values(statement) if isinstance(value, Placeholder))


class _ParamCursor:
    """Hands out parameters left to right."""

    def __init__(self, params: Sequence[Any]) -> None:
        self._params = params
        self._pos = 0

    def resolve(self, value: Any) -> Any:
        if not isinstance(value, Placeholder):
            return value
        bound = self._params[self._pos]
        self._pos += 1
        return bound

    def bind_predicate(self, predicate: Predicate | None) -> Predicate | None:
        if predicate is None:
            return None
        if isinstance(predicate, CompoundCondition):
            left = self.bind_predicate(predicate.left)
            right = self.bind_predicate(predicate.right)
            return CompoundCondition(left=left, operator=predicate.operator, right=right)  # type: ignore[arg-type]
        return Condition(field=predicate.field, value=self.resolve(predicate.value))


def bind(statement: Statement, params: Sequence[Any] = ()) -> Statement:
    """Return a copy of ``statement`` with every placeholder replaced.

    Raises:
        ParameterCountError: If the number of placeholders differs from
            ``len(params)``, or an INSERT lists a different number of columns
            than values.
    """
    if isinstance(statement, InsertStatement) and len(statement.columns) != len(statement.values or []):
        raise ParameterCountError(
            f"INSERT INTO {statement.table} lists {len(statement.columns)} column(s) "
            f"but {len(statement.values or [])} value(s)"
        )

    expected = count_placeholders(statement)
    if expected != len(params):
        raise ParameterCountError(
            f"Statement on '{statement.table}' expects {expected} parameter(s), got {len(params)}"
        )

    cursor = _ParamCursor(params)
    if isinstance(statement, InsertStatement):
        return replace(statement, values=[cursor.resolve(v) for v in statement.values or []])
    if isinstance(statement, UpdateStatement):
        assignments = [Assignment(field=a.field, value=cursor.resolve(a.value)) for a in statement.assignments]
        return replace(statement, assignments=assignments, where=cursor.bind_predicate(statement.where))
    if isinstance(statement, (SelectStatement, DeleteStatement)):
        return replace(statement, where=cursor.bind_predicate(statement.where))
    if isinstance(statement, CreateTableStatement):
        return statement
    raise ValueError(f"Unknown statement type: {type(statement)}")

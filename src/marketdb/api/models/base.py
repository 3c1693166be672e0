"""Shared record and model plumbing for the entity models."""

from __future__ import annotations

import json
import logging
import re
from dataclasses import MISSING, asdict, dataclass, fields
from functools import lru_cache
from typing import Any, ClassVar, Generic, Mapping, Sequence, TypeVar

from pydantic import TypeAdapter
from pydantic import ValidationError as PayloadError

from marketdb.errors import ValidationError
from marketdb.parsing.statement_parser import (
    PARAM,
    Assignment,
    Condition,
    DeleteStatement,
    InsertStatement,
    OrderBy,
    Predicate,
    SelectStatement,
    UpdateStatement,
)
from marketdb.store import MutationResult, Store
from marketdb.table import Row

logger = logging.getLogger(__name__)


def to_camel(name: str) -> str:
    """Convert a snake_case attribute name to its camelCase column name."""
    return re.sub(r"_([a-z0-9])", lambda m: m.group(1).upper(), name)


def describe_errors(exc: PayloadError) -> str:
    """Summarize pydantic validation errors using camelCase field names."""
    parts = []
    for err in exc.errors():
        location = ".".join(to_camel(str(part)) for part in err["loc"])
        parts.append(f"{location}: {err['msg']}" if location else err["msg"])
    return "; ".join(parts)


@lru_cache(maxsize=None)
def _adapter(record_type: type) -> TypeAdapter:
    return TypeAdapter(record_type)


R = TypeVar("R", bound="Record")


@dataclass
class Record:
    """Base for one entity's fields.

    Attributes are snake_case; columns and API payloads use camelCase.
    ``json_fields`` are stored as JSON strings and ``flag_fields`` as 0/1.
    """

    json_fields: ClassVar[tuple[str, ...]] = ()
    flag_fields: ClassVar[tuple[str, ...]] = ()

    @classmethod
    def columns(cls) -> list[str]:
        return [to_camel(f.name) for f in fields(cls)]

    @classmethod
    def encode(cls, name: str, value: Any) -> Any:
        """Encode one attribute value for storage."""
        if name in cls.json_fields:
            return None if value is None else json.dumps(value)
        if name in cls.flag_fields:
            return 1 if value else 0
        return value

    @classmethod
    def decode(cls, name: str, value: Any) -> Any:
        """Decode one stored column value."""
        if name in cls.json_fields:
            if not isinstance(value, str):
                return value
            try:
                return json.loads(value)
            except json.JSONDecodeError:
                logger.warning("%s.%s holds invalid JSON; returning it as text", cls.__name__, to_camel(name))
                return value
        if name in cls.flag_fields:
            return bool(value)
        return value

    @classmethod
    def from_row(cls: type[R], row: Row) -> R:
        """Build a record from a stored row."""
        kwargs = {}
        for f in fields(cls):
            column = to_camel(f.name)
            if column not in row:
                continue
            value = cls.decode(f.name, row[column])
            if value is None and f.default_factory is not MISSING:
                value = f.default_factory()
            kwargs[f.name] = value
        return cls(**kwargs)

    @classmethod
    def from_payload(cls: type[R], payload: Any) -> R:
        """Build a record from a camelCase request body.

        Raises:
            ValidationError: If the payload is not an object, lacks a
                required field, or carries a value of the wrong type.
        """
        if not isinstance(payload, Mapping):
            raise ValidationError("Request body must be an object")
        names = {to_camel(f.name): f.name for f in fields(cls)}
        data = {names[key]: value for key, value in payload.items() if key in names}
        try:
            return _adapter(cls).validate_python(data)
        except PayloadError as e:
            raise ValidationError(f"Invalid request body: {describe_errors(e)}") from e

    def to_row(self) -> Row:
        """Encode the record as a stored row."""
        return {to_camel(f.name): self.encode(f.name, getattr(self, f.name)) for f in fields(self)}

    def to_dict(self) -> dict[str, Any]:
        """The record as a camelCase API payload."""
        return {to_camel(name): value for name, value in asdict(self).items()}


class Model(Generic[R]):
    """Issues statements for one table and converts rows to records."""

    table: ClassVar[str]
    key: ClassVar[str] = "id"
    record_type: type[R]

    def __init__(self, store: Store) -> None:
        self.store = store

    def _select(
        self,
        where: Predicate | None = None,
        params: Sequence[Any] = (),
        order_by: OrderBy | None = None,
    ) -> list[R]:
        statement = SelectStatement(self.table, where=where, order_by=order_by)
        return [self.record_type.from_row(row) for row in self.store.execute_read(statement, params)]

    def _select_one(self, where: Predicate, params: Sequence[Any]) -> R | None:
        row = self.store.execute_read_one(SelectStatement(self.table, where=where), params)
        return self.record_type.from_row(row) if row is not None else None

    def find_by_key(self, value: Any) -> R | None:
        return self._select_one(Condition(to_camel(self.key)), [value])

    def _insert(self, record: R) -> MutationResult:
        row = record.to_row()
        statement = InsertStatement(self.table, columns=list(row))
        return self.store.execute_write(statement, list(row.values()))

    def _update(self, key_value: Any, updates: Mapping[str, Any]) -> MutationResult:
        """Update snake_case ``updates`` on the row whose key equals ``key_value``."""
        names = {f.name for f in fields(self.record_type)}
        changes = {}
        for name, value in updates.items():
            if name == self.key:
                continue
            if name not in names:
                raise ValidationError(f"Unknown field for {self.table}: {name}")
            changes[to_camel(name)] = self.record_type.encode(name, value)
        if not changes:
            return MutationResult()

        statement = UpdateStatement(
            self.table,
            assignments=[Assignment(column, PARAM) for column in changes],
            where=Condition(to_camel(self.key)),
        )
        return self.store.execute_write(statement, [*changes.values(), key_value])

    def _delete(self, key_value: Any) -> MutationResult:
        statement = DeleteStatement(self.table, where=Condition(to_camel(self.key)))
        return self.store.execute_write(statement, [key_value])

"""Parsing module for store statements."""

from marketdb.parsing.statement_parser import (
    PARAM,
    Assignment,
    ColumnDef,
    CompoundCondition,
    Condition,
    CreateTableStatement,
    DeleteStatement,
    InsertStatement,
    OrderBy,
    Placeholder,
    SelectStatement,
    Statement,
    StatementParser,
    UpdateStatement,
)

__all__ = [
    "PARAM",
    "Assignment",
    "ColumnDef",
    "CompoundCondition",
    "Condition",
    "CreateTableStatement",
    "DeleteStatement",
    "InsertStatement",
    "OrderBy",
    "Placeholder",
    "SelectStatement",
    "Statement",
    "StatementParser",
    "UpdateStatement",
]

"""Parser for the SQL-shaped statements understood by the table store.

The parser turns statement text into the typed descriptors below. Callers that
know the shape of their operation up front can build the same descriptors
directly and skip text parsing altogether.
"""

from __future__ import annotations

import threading
from dataclasses import dataclass, field
from typing import Any

import ply.yacc as yacc

from marketdb.parsing.statement_lexer import StatementLexer


@dataclass(frozen=True)
class Placeholder:
    """A positional ``?`` parameter, bound when the statement executes."""

    def __repr__(self) -> str:
        return "?"


PARAM = Placeholder()


@dataclass
class Condition:
    """An equality test: ``field = value``."""

    field: str
    value: Any = PARAM


@dataclass
class CompoundCondition:
    """A compound condition (AND/OR)."""

    left: Condition | CompoundCondition
    operator: str  # and, or
    right: Condition | CompoundCondition


Predicate = Condition | CompoundCondition


@dataclass
class OrderBy:
    """An ORDER BY clause on a single field."""

    field: str
    direction: str = "asc"  # asc, desc

    @property
    def descending(self) -> bool:
        return self.direction == "desc"


@dataclass
class ColumnDef:
    """A column in a CREATE TABLE column list. Recorded, never enforced."""

    name: str
    type_name: str | None = None
    primary_key: bool = False
    not_null: bool = False


@dataclass
class Assignment:
    """A ``field = value`` pair in an UPDATE SET clause."""

    field: str
    value: Any = PARAM


@dataclass
class CreateTableStatement:
    """CREATE TABLE [IF NOT EXISTS] name [(columns)]."""

    table: str
    columns: list[ColumnDef] = field(default_factory=list)
    if_not_exists: bool = True


@dataclass
class InsertStatement:
    """INSERT INTO table (columns) VALUES (values).

    When ``values`` is omitted every column is bound to a placeholder.
    """

    table: str
    columns: list[str] = field(default_factory=list)
    values: list[Any] | None = None

    def __post_init__(self) -> None:
        if self.values is None:
            self.values = [PARAM] * len(self.columns)


@dataclass
class SelectStatement:
    """SELECT * | columns FROM table [WHERE ...] [ORDER BY ...]."""

    table: str
    columns: list[str] | None = None  # None means *
    where: Predicate | None = None
    order_by: OrderBy | None = None


@dataclass
class UpdateStatement:
    """UPDATE table SET assignments WHERE ..."""

    table: str
    assignments: list[Assignment] = field(default_factory=list)
    where: Predicate | None = None


@dataclass
class DeleteStatement:
    """DELETE FROM table WHERE ..."""

    table: str
    where: Predicate | None = None


Statement = CreateTableStatement | InsertStatement | SelectStatement | UpdateStatement | DeleteStatement


class StatementParser:
    """Parser for store statements."""

    tokens = StatementLexer.tokens

    # Operator precedence
    precedence = (
        ("left", "OR"),
        ("left", "AND"),
    )

    def __init__(self) -> None:
        self.lexer = StatementLexer()
        self.lexer.build()
        self.parser: yacc.LRParser = None  # type: ignore
        # ply keeps parse state on the parser and lexer objects
        self._lock = threading.Lock()

    def p_program_single(self, p: yacc.YaccProduction) -> None:
        """program : statement"""
        p[0] = [p[1]]

    def p_program_multiple(self, p: yacc.YaccProduction) -> None:
        """program : program SEMICOLON statement"""
        p[0] = p[1] + [p[3]]

    def p_program_trailing_semicolon(self, p: yacc.YaccProduction) -> None:
        """program : program SEMICOLON"""
        p[0] = p[1]

    def p_statement(self, p: yacc.YaccProduction) -> None:
        """statement : create_table
                     | insert
                     | select
                     | update
                     | delete"""
        p[0] = p[1]

    # --- CREATE TABLE ---

    def p_create_table(self, p: yacc.YaccProduction) -> None:
        """create_table : CREATE TABLE IDENTIFIER column_defs"""
        p[0] = CreateTableStatement(table=p[3], columns=p[4], if_not_exists=False)

    def p_create_table_if_not_exists(self, p: yacc.YaccProduction) -> None:
        """create_table : CREATE TABLE IF NOT EXISTS IDENTIFIER column_defs"""
        p[0] = CreateTableStatement(table=p[6], columns=p[7], if_not_exists=True)

    def p_column_defs_empty(self, p: yacc.YaccProduction) -> None:
        """column_defs : """
        p[0] = []

    def p_column_defs(self, p: yacc.YaccProduction) -> None:
        """column_defs : LPAREN column_def_list RPAREN"""
        p[0] = p[2]

    def p_column_def_list_single(self, p: yacc.YaccProduction) -> None:
        """column_def_list : column_def"""
        p[0] = [p[1]]

    def p_column_def_list_multiple(self, p: yacc.YaccProduction) -> None:
        """column_def_list : column_def_list COMMA column_def"""
        p[0] = p[1] + [p[3]]

    def p_column_def(self, p: yacc.YaccProduction) -> None:
        """column_def : IDENTIFIER column_modifiers"""
        column = ColumnDef(name=p[1])
        for modifier in p[2]:
            if modifier == "primary_key":
                column.primary_key = True
            elif modifier == "not_null":
                column.not_null = True
            elif column.type_name is None:
                column.type_name = modifier
            else:
                column.type_name = f"{column.type_name} {modifier}"
        p[0] = column

    def p_column_modifiers_empty(self, p: yacc.YaccProduction) -> None:
        """column_modifiers : """
        p[0] = []

    def p_column_modifiers_type(self, p: yacc.YaccProduction) -> None:
        """column_modifiers : column_modifiers IDENTIFIER"""
        p[0] = p[1] + [p[2].upper()]

    def p_column_modifiers_primary_key(self, p: yacc.YaccProduction) -> None:
        """column_modifiers : column_modifiers PRIMARY KEY"""
        p[0] = p[1] + ["primary_key"]

    def p_column_modifiers_not_null(self, p: yacc.YaccProduction) -> None:
        """column_modifiers : column_modifiers NOT NULL"""
        p[0] = p[1] + ["not_null"]

    # --- INSERT ---

    def p_insert(self, p: yacc.YaccProduction) -> None:
        """insert : INSERT INTO IDENTIFIER LPAREN identifier_list RPAREN VALUES LPAREN value_list RPAREN"""
        p[0] = InsertStatement(table=p[3], columns=p[5], values=p[9])

    # --- SELECT ---

    def p_select(self, p: yacc.YaccProduction) -> None:
        """select : SELECT select_list FROM IDENTIFIER where_clause order_clause"""
        p[0] = SelectStatement(table=p[4], columns=p[2], where=p[5], order_by=p[6])

    def p_select_list_star(self, p: yacc.YaccProduction) -> None:
        """select_list : STAR"""
        p[0] = None

    def p_select_list_columns(self, p: yacc.YaccProduction) -> None:
        """select_list : identifier_list"""
        p[0] = p[1]

    def p_where_clause_empty(self, p: yacc.YaccProduction) -> None:
        """where_clause : """
        p[0] = None

    def p_where_clause(self, p: yacc.YaccProduction) -> None:
        """where_clause : WHERE condition"""
        p[0] = p[2]

    def p_order_clause_empty(self, p: yacc.YaccProduction) -> None:
        """order_clause : """
        p[0] = None

    def p_order_clause(self, p: yacc.YaccProduction) -> None:
        """order_clause : ORDER BY IDENTIFIER order_direction"""
        p[0] = OrderBy(field=p[3], direction=p[4])

    def p_order_direction_default(self, p: yacc.YaccProduction) -> None:
        """order_direction : """
        p[0] = "asc"

    def p_order_direction(self, p: yacc.YaccProduction) -> None:
        """order_direction : ASC
                           | DESC"""
        p[0] = p[1].lower()

    # --- UPDATE ---

    def p_update(self, p: yacc.YaccProduction) -> None:
        """update : UPDATE IDENTIFIER SET assignment_list WHERE condition"""
        p[0] = UpdateStatement(table=p[2], assignments=p[4], where=p[6])

    def p_assignment_list_single(self, p: yacc.YaccProduction) -> None:
        """assignment_list : assignment"""
        p[0] = [p[1]]

    def p_assignment_list_multiple(self, p: yacc.YaccProduction) -> None:
        """assignment_list : assignment_list COMMA assignment"""
        p[0] = p[1] + [p[3]]

    def p_assignment(self, p: yacc.YaccProduction) -> None:
        """assignment : IDENTIFIER EQ value"""
        p[0] = Assignment(field=p[1], value=p[3])

    # --- DELETE ---

    def p_delete(self, p: yacc.YaccProduction) -> None:
        """delete : DELETE FROM IDENTIFIER WHERE condition"""
        p[0] = DeleteStatement(table=p[3], where=p[5])

    # --- Shared rules ---

    def p_condition_equals(self, p: yacc.YaccProduction) -> None:
        """condition : IDENTIFIER EQ value"""
        p[0] = Condition(field=p[1], value=p[3])

    def p_condition_and(self, p: yacc.YaccProduction) -> None:
        """condition : condition AND condition"""
        p[0] = CompoundCondition(left=p[1], operator="and", right=p[3])

    def p_condition_or(self, p: yacc.YaccProduction) -> None:
        """condition : condition OR condition"""
        p[0] = CompoundCondition(left=p[1], operator="or", right=p[3])

    def p_condition_paren(self, p: yacc.YaccProduction) -> None:
        """condition : LPAREN condition RPAREN"""
        p[0] = p[2]

    def p_identifier_list_single(self, p: yacc.YaccProduction) -> None:
        """identifier_list : IDENTIFIER"""
        p[0] = [p[1]]

    def p_identifier_list_multiple(self, p: yacc.YaccProduction) -> None:
        """identifier_list : identifier_list COMMA IDENTIFIER"""
        p[0] = p[1] + [p[3]]

    def p_value_list_single(self, p: yacc.YaccProduction) -> None:
        """value_list : value"""
        p[0] = [p[1]]

    def p_value_list_multiple(self, p: yacc.YaccProduction) -> None:
        """value_list : value_list COMMA value"""
        p[0] = p[1] + [p[3]]

    def p_value_placeholder(self, p: yacc.YaccProduction) -> None:
        """value : PLACEHOLDER"""
        p[0] = PARAM

    def p_value_literal(self, p: yacc.YaccProduction) -> None:
        """value : STRING
                 | INTEGER
                 | FLOAT"""
        p[0] = p[1]

    def p_value_null(self, p: yacc.YaccProduction) -> None:
        """value : NULL"""
        p[0] = None

    def p_error(self, p: yacc.YaccProduction) -> None:
        if p:
            raise SyntaxError(f"Syntax error at '{p.value}' (position {p.lexpos})")
        else:
            raise SyntaxError("Syntax error at end of input")

    def build(self, **kwargs: Any) -> None:
        """Build the parser."""
        self.parser = yacc.yacc(module=self, start="program", **kwargs)

    def parse_program(self, data: str) -> list[Statement]:
        """Parse a ``;``-separated script into its statements."""
        if not data.strip():
            return []
        with self._lock:
            if self.parser is None:
                self.build(debug=False, write_tables=False)
            return self.parser.parse(data, lexer=self.lexer.lexer)

    def parse(self, data: str) -> Statement:
        """Parse a single statement."""
        statements = self.parse_program(data)
        if len(statements) != 1:
            raise SyntaxError(f"Expected one statement, found {len(statements)}")
        return statements[0]

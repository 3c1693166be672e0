"""Tests for positional parameter binding."""

import pytest

from marketdb.binding import bind, count_placeholders
from marketdb.errors import ParameterCountError
from marketdb.parsing.statement_parser import (
    PARAM,
    Assignment,
    CompoundCondition,
    Condition,
    CreateTableStatement,
    InsertStatement,
    SelectStatement,
    StatementParser,
    UpdateStatement,
)


@pytest.fixture(scope="module")
def parser():
    return StatementParser()


class TestCountPlaceholders:
    def test_insert(self, parser):
        assert count_placeholders(parser.parse("INSERT INTO t (a, b, c) VALUES (?, 'x', ?)")) == 2

    def test_update_counts_set_and_where(self, parser):
        assert count_placeholders(parser.parse("UPDATE t SET a = ?, b = ? WHERE id = ?")) == 3

    def test_select_without_where(self, parser):
        assert count_placeholders(parser.parse("SELECT * FROM t")) == 0

    def test_create_table(self):
        assert count_placeholders(CreateTableStatement("t")) == 0


class TestBind:
    def test_binds_in_text_order(self, parser):
        """UPDATE takes SET values first and the WHERE value last."""
        stmt = parser.parse("UPDATE orders SET status = ? WHERE id = ?")

        bound = bind(stmt, ["confirmed", "1"])

        assert bound.assignments == [Assignment("status", "confirmed")]
        assert bound.where == Condition("id", "1")

    def test_compound_condition_left_to_right(self):
        stmt = SelectStatement("chats", where=CompoundCondition(Condition("buyerId"), "or", Condition("sellerId")))

        bound = bind(stmt, ["u1", "u2"])

        assert bound.where.left.value == "u1"
        assert bound.where.right.value == "u2"

    def test_literals_are_kept(self):
        stmt = UpdateStatement("t", [Assignment("a", 5), Assignment("b", PARAM)], where=Condition("id", "x"))

        bound = bind(stmt, [7])

        assert [a.value for a in bound.assignments] == [5, 7]
        assert bound.where.value == "x"

    def test_original_is_not_mutated(self, parser):
        stmt = parser.parse("SELECT * FROM foods WHERE id = ?")

        bind(stmt, ["1"])

        assert stmt.where.value is PARAM

    def test_too_few_params(self, parser):
        with pytest.raises(ParameterCountError, match="expects 2 parameter"):
            bind(parser.parse("UPDATE t SET a = ? WHERE id = ?"), ["x"])

    def test_too_many_params(self, parser):
        with pytest.raises(ParameterCountError):
            bind(parser.parse("SELECT * FROM t WHERE id = ?"), ["1", "2"])

    def test_insert_column_value_mismatch(self):
        stmt = InsertStatement("t", columns=["a", "b"], values=[PARAM])

        with pytest.raises(ParameterCountError, match="2 column"):
            bind(stmt, ["x"])

    def test_parameter_count_error_is_value_error(self):
        assert issubclass(ParameterCountError, ValueError)

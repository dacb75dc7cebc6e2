"""
Tests for predicate AST nodes
"""

from tabletprune.sql.ast_nodes import ColumnRef, Condition, FunctionCall, WhereClause


class TestColumnRef:
    def test_repr(self):
        assert repr(ColumnRef("id")) == "id"
        assert repr(ColumnRef("id", table="t")) == "t.id"

    def test_hashable(self):
        assert len({ColumnRef("id"), ColumnRef("id")}) == 1


class TestFunctionCall:
    def test_referenced_column(self):
        assert FunctionCall("abs", (ColumnRef("x"),)).referenced_column() == "x"

    def test_nested(self):
        call = FunctionCall("upper", (FunctionCall("trim", (ColumnRef("name"),)),))

        assert call.referenced_column() == "name"
        assert repr(call) == "upper(trim(name))"

    def test_no_column(self):
        assert FunctionCall("now").referenced_column() is None

    def test_args_become_tuple(self):
        assert FunctionCall("abs", [ColumnRef("x")]).args == (ColumnRef("x"),)


class TestCondition:
    def test_bare_column(self):
        condition = Condition(ColumnRef("id"), "=", 5)

        assert condition.column == "id"
        assert condition.is_bare_column()
        assert repr(condition) == "id = 5"

    def test_function_column(self):
        condition = Condition(FunctionCall("abs", (ColumnRef("id"),)), "IN", [1, 2])

        assert condition.column == "id"
        assert not condition.is_bare_column()
        assert repr(condition) == "abs(id) IN (1, 2)"

    def test_where_clause_repr(self):
        where = WhereClause([Condition(ColumnRef("a"), "=", 1), Condition(ColumnRef("b"), ">", 2)])

        assert repr(where) == "a = 1 AND b > 2"

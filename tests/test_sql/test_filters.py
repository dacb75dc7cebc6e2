"""
Tests for ColumnFilter normalization
"""

import pytest

from tabletprune.sql.ast_nodes import ColumnRef, Condition, FunctionCall, WhereClause
from tabletprune.sql.filters import MembershipFilter, RangeFilter, build_column_filters


def cond(column, operator, value):
    return Condition(ColumnRef(column), operator, value)


class TestRangeFilter:
    def test_point(self):
        assert RangeFilter.equal_to(ColumnRef("a"), 1).is_point()

    def test_not_point(self):
        assert not RangeFilter(ColumnRef("a"), 1, True, 2, True).is_point()
        assert not RangeFilter(ColumnRef("a"), 1, False, 1, True).is_point()
        assert not RangeFilter(ColumnRef("a"), lower=1, lower_inclusive=True).is_point()

    def test_repr(self):
        assert repr(RangeFilter.equal_to(ColumnRef("a"), 1)) == "a = 1"
        assert repr(RangeFilter(ColumnRef("a"), lower=1)) == "a in (1, +inf)"


class TestMembershipFilter:
    def test_values_become_tuple(self):
        assert MembershipFilter(ColumnRef("a"), [1, 2]).values == (1, 2)

    def test_repr(self):
        assert repr(MembershipFilter(ColumnRef("a"), ("x",))) == "a IN ('x')"


class TestBuildColumnFilters:
    def test_equality(self):
        filters = build_column_filters([cond("dt", "=", "2019-08-22")])

        assert filters == {"dt": RangeFilter.equal_to(ColumnRef("dt"), "2019-08-22")}

    def test_in_list(self):
        filters = build_column_filters([cond("id", "IN", [1, 2, 1])])

        assert filters["id"] == MembershipFilter(ColumnRef("id"), (1, 2, 1))

    def test_keys_lowercased(self):
        filters = build_column_filters([cond("DealDate", "=", "x")])

        assert list(filters) == ["dealdate"]

    def test_bounds_tighten(self):
        filters = build_column_filters([cond("id", ">", 1), cond("id", ">=", 3), cond("id", "<", 10)])

        assert filters["id"] == RangeFilter(ColumnRef("id"), 3, True, 10, False)

    def test_equal_bounds_merge_to_point(self):
        filters = build_column_filters([cond("id", ">=", 5), cond("id", "<=", 5)])

        assert filters["id"].is_point()

    def test_same_bound_exclusive_wins(self):
        filters = build_column_filters([cond("id", ">=", 5), cond("id", ">", 5)])

        assert filters["id"].lower_inclusive is False

    def test_incomparable_bounds_keep_first(self):
        filters = build_column_filters([cond("id", ">", 5), cond("id", ">", "7")])

        assert filters["id"].lower == 5

    def test_point_beats_membership(self):
        filters = build_column_filters([cond("id", "IN", [1, 2]), cond("id", "=", 2)])

        assert filters["id"].is_point()

    def test_membership_beats_range(self):
        filters = build_column_filters([cond("id", ">", 0), cond("id", "IN", [1, 2])])

        assert isinstance(filters["id"], MembershipFilter)

    def test_shorter_membership_wins(self):
        filters = build_column_filters([cond("id", "IN", [1, 2, 3]), cond("id", "IN", [2, 3])])

        assert filters["id"].values == (2, 3)

    def test_bare_column_beats_function(self):
        wrapped = Condition(FunctionCall("abs", (ColumnRef("id"),)), "=", 1)
        filters = build_column_filters([wrapped, cond("id", "IN", [1, 2, 3])])

        assert filters["id"].operand == ColumnRef("id")

    def test_function_only(self):
        wrapped = Condition(FunctionCall("abs", (ColumnRef("id"),)), "IN", [1, 2])
        filters = build_column_filters([wrapped])

        assert isinstance(filters["id"].operand, FunctionCall)

    def test_non_restricting_ignored(self):
        filters = build_column_filters([cond("id", "!=", 3), cond("id", "not in", [1])])

        assert filters == {}

    def test_unknown_operator_warns(self):
        with pytest.warns(UserWarning, match="Unknown operator"):
            filters = build_column_filters([cond("id", "~", 3)])

        assert filters == {}

    def test_where_clause_conditions(self):
        where = WhereClause([cond("a", "=", 1), cond("b", "IN", ["x", "y"])])

        filters = build_column_filters(where.conditions)

        assert set(filters) == {"a", "b"}

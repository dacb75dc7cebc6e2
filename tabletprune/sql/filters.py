"""
Per-column filters used for distribution pruning

A ColumnFilter is the normalized form of the predicates on one column: either
a Range (bounds with inclusivity) or a Membership list. A column without a
filter is simply absent from the mapping.

``build_column_filters`` turns AND-ed conditions into that mapping. Every
conjunct on its own is a sound restriction, so when a column carries several
conditions we keep the one that is cheapest to enumerate rather than trying to
intersect literals whose types have not been resolved yet.
"""

import warnings
from dataclasses import dataclass, field
from typing import Any, Iterable

from tabletprune.sql.ast_nodes import ColumnRef, Condition, Operand

_LOWER_OPERATORS = {">": False, ">=": True}
_UPPER_OPERATORS = {"<": False, "<=": True}
_EQUALITY_OPERATORS = {"=", "=="}
# Known operators that never narrow the set of buckets
_NON_RESTRICTING_OPERATORS = {"!=", "<>", "NOT IN", "LIKE", "NOT LIKE", "IS NULL", "IS NOT NULL"}


@dataclass(frozen=True)
class RangeFilter:
    """
    Range predicate on a column

    A bound of None is open. ``col = v`` is the range [v, v].
    """

    operand: Operand
    lower: Any = None
    lower_inclusive: bool = False
    upper: Any = None
    upper_inclusive: bool = False

    @classmethod
    def equal_to(cls, operand: Operand, value: Any) -> "RangeFilter":
        return cls(operand, value, True, value, True)

    def is_point(self) -> bool:
        """Both bounds present, inclusive and equal"""
        return (
            self.lower is not None
            and self.upper is not None
            and self.lower_inclusive
            and self.upper_inclusive
            and self.lower == self.upper
        )

    def __repr__(self) -> str:
        if self.is_point():
            return f"{self.operand!r} = {self.lower!r}"
        left = "[" if self.lower_inclusive else "("
        right = "]" if self.upper_inclusive else ")"
        lower = "-inf" if self.lower is None else repr(self.lower)
        upper = "+inf" if self.upper is None else repr(self.upper)
        return f"{self.operand!r} in {left}{lower}, {upper}{right}"


@dataclass(frozen=True)
class MembershipFilter:
    """IN-list predicate on a column; values are kept verbatim"""

    operand: Operand
    values: tuple = field(default_factory=tuple)

    def __post_init__(self):
        object.__setattr__(self, "values", tuple(self.values))

    def __repr__(self) -> str:
        return f"{self.operand!r} IN ({', '.join(repr(v) for v in self.values)})"


ColumnFilter = RangeFilter | MembershipFilter


def build_column_filters(conditions: Iterable[Condition]) -> dict[str, ColumnFilter]:
    """
    Normalize AND-ed conditions into one filter per column

    Rules:
    - ``=`` gives a point range, ``>``/``>=``/``<``/``<=`` give bounds
    - ``IN`` gives a membership list
    - per column, prefer a point range, then the shortest membership list,
      then a (tightened) range
    - a condition on the bare column beats one on a function of it
    - ``!=``, ``NOT IN`` and similar never restrict; unknown operators are
      ignored with a warning

    Args:
        conditions: Conditions from a WHERE clause, all AND-ed together

    Returns:
        Mapping of column name (lower-cased) to its filter
    """
    filters: dict[str, ColumnFilter] = {}

    for condition in conditions:
        column = condition.column
        if column is None:
            continue

        candidate = _condition_to_filter(condition)
        if candidate is None:
            continue

        key = column.lower()
        existing = filters.get(key)
        filters[key] = candidate if existing is None else _prefer(existing, candidate)

    return filters


def _condition_to_filter(condition: Condition) -> ColumnFilter | None:
    op = condition.operator.strip().upper()
    operand = condition.operand

    if op in _EQUALITY_OPERATORS:
        return RangeFilter.equal_to(operand, condition.value)
    if op == "IN":
        return MembershipFilter(operand, tuple(condition.value))
    if op in _LOWER_OPERATORS:
        return RangeFilter(operand, lower=condition.value, lower_inclusive=_LOWER_OPERATORS[op])
    if op in _UPPER_OPERATORS:
        return RangeFilter(operand, upper=condition.value, upper_inclusive=_UPPER_OPERATORS[op])
    if op in _NON_RESTRICTING_OPERATORS:
        return None

    # Unknown operator, no restriction for this condition
    warnings.warn(f"Unknown operator: {condition.operator}", UserWarning)
    return None


def _rank(column_filter: ColumnFilter) -> tuple[int, float]:
    """Lower rank means cheaper to enumerate"""
    bare = 0 if isinstance(column_filter.operand, ColumnRef) else 1
    if isinstance(column_filter, RangeFilter):
        return (bare, 1) if column_filter.is_point() else (bare, float("inf"))
    # An empty list is malformed and resolves to nothing useful
    return (bare, len(column_filter.values) or float("inf"))


def _prefer(existing: ColumnFilter, candidate: ColumnFilter) -> ColumnFilter:
    if (
        isinstance(existing, RangeFilter)
        and isinstance(candidate, RangeFilter)
        and not existing.is_point()
        and not candidate.is_point()
        and existing.operand == candidate.operand
    ):
        return _merge_ranges(existing, candidate)

    if _rank(candidate) < _rank(existing):
        return candidate
    return existing


def _merge_ranges(a: RangeFilter, b: RangeFilter) -> RangeFilter:
    """Intersect two ranges, keeping a's bound when bounds are not comparable"""
    lower, lower_inclusive = _pick_bound(
        (a.lower, a.lower_inclusive), (b.lower, b.lower_inclusive), tighter=lambda x, y: x > y
    )
    upper, upper_inclusive = _pick_bound(
        (a.upper, a.upper_inclusive), (b.upper, b.upper_inclusive), tighter=lambda x, y: x < y
    )
    return RangeFilter(a.operand, lower, lower_inclusive, upper, upper_inclusive)


def _pick_bound(a, b, tighter):
    if a[0] is None:
        return b
    if b[0] is None:
        return a
    try:
        if tighter(b[0], a[0]):
            return b
        if b[0] == a[0]:
            # Same value: exclusive is tighter
            return (a[0], a[1] and b[1])
    except TypeError:
        # Mixed literal types, either bound alone is still sound
        pass
    return a

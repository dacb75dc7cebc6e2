"""
Candidate resolution

Turns the per-column filters into the finite set of values each distribution
column can take. Anything that cannot be reduced to discrete values becomes
UNRESOLVED, which forces a full scan rather than risking a missed tablet.
"""

import logging
from dataclasses import dataclass
from enum import Enum
from typing import Any, Mapping, Sequence

from tabletprune.core.catalog import DistributionColumn
from tabletprune.core.errors import LiteralCoercionError
from tabletprune.core.types import coerce_literal
from tabletprune.sql.ast_nodes import ColumnRef
from tabletprune.sql.filters import ColumnFilter, MembershipFilter, RangeFilter

logger = logging.getLogger(__name__)


class CandidateKind(Enum):
    SINGLETON = "singleton"
    EXPLICIT = "explicit"
    UNRESOLVED = "unresolved"


@dataclass(frozen=True)
class CandidateSet:
    """
    Values one distribution column may take under the query's predicates

    Attributes:
        column: Distribution column name
        kind: SINGLETON, EXPLICIT or UNRESOLVED
        values: Coerced candidate values in enumeration order
        reason: Why the column is unresolved (empty otherwise)
    """

    column: str
    kind: CandidateKind
    values: tuple = ()
    reason: str = ""

    @classmethod
    def singleton(cls, column: str, value: Any) -> "CandidateSet":
        return cls(column, CandidateKind.SINGLETON, (value,))

    @classmethod
    def explicit(cls, column: str, values: Sequence[Any]) -> "CandidateSet":
        return cls(column, CandidateKind.EXPLICIT, tuple(values))

    @classmethod
    def unresolved(cls, column: str, reason: str) -> "CandidateSet":
        return cls(column, CandidateKind.UNRESOLVED, (), reason)

    @property
    def is_resolved(self) -> bool:
        return self.kind is not CandidateKind.UNRESOLVED

    @property
    def size(self) -> int | None:
        """Number of candidates, None when unbounded"""
        return len(self.values) if self.is_resolved else None

    def __repr__(self) -> str:
        if not self.is_resolved:
            return f"{self.column}: unresolved ({self.reason})"
        return f"{self.column}: {self.kind.value} {list(self.values)!r}"


def resolve_candidates(
    columns: Sequence[DistributionColumn],
    filters: Mapping[str, ColumnFilter],
    dedupe: bool = True,
) -> list[CandidateSet]:
    """
    Resolve one CandidateSet per distribution column, in column order

    Args:
        columns: Ordered distribution columns
        filters: Column name -> filter; need not cover every column and is
            matched case-insensitively
        dedupe: Remove repeated values from membership lists

    Returns:
        CandidateSets aligned one-to-one with ``columns``
    """
    by_name = {}
    for name, column_filter in filters.items():
        by_name.setdefault(name.lower(), column_filter)

    candidates = []
    for column in columns:
        candidate = resolve_column(column, by_name.get(column.name.lower()), dedupe)
        logger.debug("Resolved distribution column %r", candidate)
        candidates.append(candidate)
    return candidates


def resolve_column(
    column: DistributionColumn, column_filter: ColumnFilter | None, dedupe: bool = True
) -> CandidateSet:
    """Resolve the candidates of a single column"""
    if column_filter is None:
        return CandidateSet.unresolved(column.name, "no filter")

    operand = column_filter.operand
    if not isinstance(operand, ColumnRef) or operand.name.lower() != column.name.lower():
        return CandidateSet.unresolved(column.name, f"operand {operand!r} is not the bare column")

    try:
        if isinstance(column_filter, RangeFilter):
            return _resolve_range(column, column_filter)
        if isinstance(column_filter, MembershipFilter):
            return _resolve_membership(column, column_filter, dedupe)
    except LiteralCoercionError as e:
        return CandidateSet.unresolved(column.name, str(e))

    return CandidateSet.unresolved(column.name, f"unsupported filter {type(column_filter).__name__}")


def _resolve_range(column: DistributionColumn, column_filter: RangeFilter) -> CandidateSet:
    if column_filter.lower is None or column_filter.upper is None:
        return CandidateSet.unresolved(column.name, "open range")

    if not (column_filter.lower_inclusive and column_filter.upper_inclusive):
        return CandidateSet.unresolved(column.name, "exclusive range bound")

    lower = coerce_literal(column_filter.lower, column.type)
    upper = coerce_literal(column_filter.upper, column.type)
    if lower != upper:
        # Hashing does not preserve order, a range cannot be enumerated
        return CandidateSet.unresolved(column.name, "range bounds differ")

    return CandidateSet.singleton(column.name, lower)


def _resolve_membership(
    column: DistributionColumn, column_filter: MembershipFilter, dedupe: bool
) -> CandidateSet:
    if not column_filter.values:
        return CandidateSet.unresolved(column.name, "empty IN list")

    values = [coerce_literal(value, column.type) for value in column_filter.values]
    if dedupe:
        values = list(dict.fromkeys(values))

    if len(values) == 1:
        return CandidateSet.singleton(column.name, values[0])
    return CandidateSet.explicit(column.name, values)

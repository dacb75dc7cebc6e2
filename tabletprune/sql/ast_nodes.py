"""
AST node definitions for normalized WHERE predicates

These dataclasses describe predicates after SQL parsing. Only the shape
matters for pruning: whether the left-hand side is a bare column reference
or something computed from it.
"""

from dataclasses import dataclass
from typing import Any


@dataclass(frozen=True)
class ColumnRef:
    """A bare column reference, optionally table-qualified"""

    name: str
    table: str | None = None

    def __repr__(self) -> str:
        return f"{self.table}.{self.name}" if self.table else self.name


@dataclass(frozen=True)
class FunctionCall:
    """
    A function applied to one or more arguments

    Examples:
        abs(main_brand_id), substr(name, 1, 3)
    """

    name: str
    args: tuple = ()

    def __post_init__(self):
        object.__setattr__(self, "args", tuple(self.args))

    def referenced_column(self) -> str | None:
        """First column referenced anywhere inside the call"""
        for arg in self.args:
            if isinstance(arg, ColumnRef):
                return arg.name
            if isinstance(arg, FunctionCall):
                nested = arg.referenced_column()
                if nested is not None:
                    return nested
        return None

    def __repr__(self) -> str:
        return f"{self.name}({', '.join(repr(a) for a in self.args)})"


Operand = ColumnRef | FunctionCall


@dataclass
class Condition:
    """A single WHERE condition: operand operator value"""

    operand: Operand
    operator: str  # '=', '>', '<', '>=', '<=', '!=', 'IN'
    value: Any  # list of literals for IN

    @property
    def column(self) -> str | None:
        """Name of the column this condition constrains"""
        if isinstance(self.operand, ColumnRef):
            return self.operand.name
        return self.operand.referenced_column()

    def is_bare_column(self) -> bool:
        return isinstance(self.operand, ColumnRef)

    def __repr__(self) -> str:
        if self.operator.upper() == "IN":
            values = ", ".join(repr(v) for v in self.value)
            return f"{self.operand!r} IN ({values})"
        return f"{self.operand!r} {self.operator} {self.value!r}"


@dataclass
class WhereClause:
    """WHERE clause containing multiple AND-ed conditions"""

    conditions: list[Condition]

    def __repr__(self) -> str:
        return " AND ".join(str(c) for c in self.conditions)

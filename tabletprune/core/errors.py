"""Exception hierarchy for tabletprune.

Pruning itself never raises for well-typed input: anything it cannot resolve
degrades to scanning more tablets. These errors cover malformed construction
of snapshots, literals and configuration.
"""


class TabletPruneError(Exception):
    """Base class for all tabletprune errors."""


class InvalidAssignmentError(TabletPruneError, ValueError):
    """Raised when a tablet assignment is inconsistent with its bucket count."""


class LiteralCoercionError(TabletPruneError, ValueError):
    """Raised when a literal cannot be converted to a column's declared type."""

    def __init__(self, value, column_type, detail: str = ""):
        self.value = value
        self.column_type = column_type
        message = f"Cannot coerce {value!r} to {column_type}"
        if detail:
            message += f": {detail}"
        super().__init__(message)


class UnsupportedColumnTypeError(TabletPruneError, ValueError):
    """Raised when a type name cannot be used as a distribution key."""


class ConfigurationError(TabletPruneError, ValueError):
    """Raised for invalid pruner configuration values."""

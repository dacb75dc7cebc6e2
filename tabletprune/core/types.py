"""Type system for distribution columns.

This module defines the column types that may take part in hash distribution
and converts query literals into the Python values the bucket hash encodes.
"""

from datetime import date, datetime
from decimal import Decimal
from enum import Enum
from typing import Any

from tabletprune.core.errors import LiteralCoercionError, UnsupportedColumnTypeError


class ColumnType(Enum):
    """Column types allowed as distribution keys."""

    # Integer types
    TINYINT = "TINYINT"
    SMALLINT = "SMALLINT"
    INT = "INT"
    BIGINT = "BIGINT"
    LARGEINT = "LARGEINT"

    # Boolean
    BOOLEAN = "BOOLEAN"

    # Temporal types
    DATE = "DATE"
    DATETIME = "DATETIME"

    # String types
    CHAR = "CHAR"
    VARCHAR = "VARCHAR"

    def __str__(self) -> str:
        return self.value

    @classmethod
    def parse(cls, name: "str | ColumnType") -> "ColumnType":
        """Look up a type by name, case-insensitively.

        ``STRING`` and ``INTEGER`` are accepted as aliases of ``VARCHAR`` and
        ``INT``.
        """
        if isinstance(name, ColumnType):
            return name
        key = str(name).strip().upper()
        key = _TYPE_ALIASES.get(key, key)
        try:
            return cls(key)
        except ValueError:
            raise UnsupportedColumnTypeError(f"Unsupported distribution column type: {name}") from None

    def is_integer(self) -> bool:
        """Check if type is a fixed-width integer."""
        return self in _INTEGER_WIDTHS

    def is_temporal(self) -> bool:
        """Check if type is temporal (DATE or DATETIME)."""
        return self in (ColumnType.DATE, ColumnType.DATETIME)

    def is_string(self) -> bool:
        """Check if type is variable-length text."""
        return self in (ColumnType.CHAR, ColumnType.VARCHAR)

    @property
    def byte_width(self) -> int | None:
        """Encoded width in bytes for integer types, None for everything else."""
        return _INTEGER_WIDTHS.get(self)


_TYPE_ALIASES = {
    "INTEGER": "INT",
    "STRING": "VARCHAR",
    "TEXT": "VARCHAR",
    "BOOL": "BOOLEAN",
    "TIMESTAMP": "DATETIME",
}

_INTEGER_WIDTHS = {
    ColumnType.TINYINT: 1,
    ColumnType.SMALLINT: 2,
    ColumnType.INT: 4,
    ColumnType.BIGINT: 8,
    ColumnType.LARGEINT: 16,
}

# Only unambiguous layouts: day-first and month-first formats could map one
# literal onto two different dates, which would hash to the wrong bucket.
_DATE_FORMATS = [
    "%Y-%m-%d",  # ISO: 2024-01-15
    "%Y%m%d",  # Compact: 20240115
]

_DATETIME_FORMATS = [
    "%Y-%m-%d %H:%M:%S",  # SQL format: 2024-01-15 10:30:00
    "%Y-%m-%d %H:%M:%S.%f",  # SQL with microseconds
    "%Y-%m-%dT%H:%M:%S",  # ISO 8601: 2024-01-15T10:30:00
    "%Y-%m-%dT%H:%M:%S.%f",  # ISO with microseconds
    "%Y%m%d%H%M%S",  # Compact: 20240115103000
]


def parse_date(value: str) -> date | None:
    """Try to parse a date from an ISO or compact string.

    Args:
        value: String to parse

    Returns:
        date object if successful, None otherwise
    """
    if not isinstance(value, str):
        return None

    value = value.strip()

    for fmt in _DATE_FORMATS:
        try:
            return datetime.strptime(value, fmt).date()
        except ValueError:
            continue

    return None


def parse_datetime(value: str) -> datetime | None:
    """Try to parse a datetime from an ISO or SQL-style string.

    A bare date parses as midnight of that day.

    Args:
        value: String to parse

    Returns:
        datetime object if successful, None otherwise
    """
    if not isinstance(value, str):
        return None

    value = value.strip()

    for fmt in _DATETIME_FORMATS:
        try:
            return datetime.strptime(value, fmt)
        except ValueError:
            continue

    d = parse_date(value)
    if d is not None:
        return datetime(d.year, d.month, d.day)

    return None


def coerce_literal(value: Any, column_type: ColumnType) -> Any:
    """Convert a query literal to the canonical Python value for a column type.

    Integers become ``int``, booleans ``bool``, DATE ``date``, DATETIME
    ``datetime`` and text types ``str``. Two literals that denote the same
    column value always coerce to equal Python values.

    Args:
        value: Literal as supplied by the predicate (often a string)
        column_type: Declared type of the distribution column

    Returns:
        Canonical typed value

    Raises:
        LiteralCoercionError: If the literal cannot denote a value of the type

    Examples:
        >>> coerce_literal("42", ColumnType.INT)
        42
        >>> coerce_literal("2024-01-15", ColumnType.DATE)
        datetime.date(2024, 1, 15)
    """
    if value is None:
        raise LiteralCoercionError(value, column_type, "NULL has no bucket")

    if column_type.is_integer():
        return _coerce_integer(value, column_type)

    if column_type == ColumnType.BOOLEAN:
        return _coerce_boolean(value, column_type)

    if column_type == ColumnType.DATE:
        return _coerce_date(value, column_type)

    if column_type == ColumnType.DATETIME:
        return _coerce_datetime(value, column_type)

    # CHAR / VARCHAR: a number compared with text matches '07' and '7.0' as
    # well as '7', so only a text literal names a single bucket
    if isinstance(value, str):
        return value
    raise LiteralCoercionError(value, column_type, f"{type(value).__name__} literal on a text column")


def _coerce_integer(value: Any, column_type: ColumnType) -> int:
    if isinstance(value, bool):
        raise LiteralCoercionError(value, column_type, "boolean is not an integer")

    if isinstance(value, int):
        result = value
    elif isinstance(value, Decimal) and value == value.to_integral_value():
        result = int(value)
    elif isinstance(value, str):
        try:
            result = int(value.strip())
        except ValueError:
            raise LiteralCoercionError(value, column_type, "not an integer") from None
    else:
        raise LiteralCoercionError(value, column_type, f"unsupported literal {type(value).__name__}")

    bits = column_type.byte_width * 8
    low, high = -(1 << (bits - 1)), (1 << (bits - 1)) - 1
    if not low <= result <= high:
        raise LiteralCoercionError(value, column_type, f"out of range [{low}, {high}]")
    return result


def _coerce_boolean(value: Any, column_type: ColumnType) -> bool:
    if isinstance(value, bool):
        return value
    if isinstance(value, int) and value in (0, 1):
        return bool(value)
    if isinstance(value, str):
        lowered = value.strip().lower()
        if lowered in ("true", "1"):
            return True
        if lowered in ("false", "0"):
            return False
    raise LiteralCoercionError(value, column_type, "not a boolean")


def _coerce_date(value: Any, column_type: ColumnType) -> date:
    if isinstance(value, datetime):
        if value.time() != datetime.min.time():
            raise LiteralCoercionError(value, column_type, "has a time component")
        return value.date()

    if isinstance(value, date):
        return value

    if isinstance(value, str):
        d = parse_date(value)
        if d is not None:
            return d
        # '2024-01-15 00:00:00' still names a whole day
        dt = parse_datetime(value)
        if dt is not None and dt.time() == datetime.min.time():
            return dt.date()

    raise LiteralCoercionError(value, column_type, "not a date")


def _coerce_datetime(value: Any, column_type: ColumnType) -> datetime:
    if isinstance(value, datetime):
        # Bucket placement is timezone-naive
        return value.replace(tzinfo=None)

    if isinstance(value, date):
        return datetime(value.year, value.month, value.day)

    if isinstance(value, str):
        dt = parse_datetime(value)
        if dt is not None:
            return dt

    raise LiteralCoercionError(value, column_type, "not a datetime")

"""
Catalog snapshots consumed by the pruner

The live catalog is an external collaborator. The planner takes an immutable
snapshot of a table's distribution columns and its bucket-to-tablet map and
hands that snapshot to the pruning call, so concurrently planned queries never
share mutable catalog state.
"""

from dataclasses import dataclass, field
from types import MappingProxyType
from typing import Iterable, Iterator, Mapping, Sequence

from tabletprune.core.errors import InvalidAssignmentError
from tabletprune.core.types import ColumnType


@dataclass(frozen=True)
class DistributionColumn:
    """A column whose value feeds the bucket hash"""

    name: str
    type: ColumnType

    def __post_init__(self):
        # Accept type names such as "DATE" or "varchar"
        object.__setattr__(self, "type", ColumnType.parse(self.type))

    def __repr__(self) -> str:
        return f"{self.name} {self.type}"


class TabletAssignment:
    """
    Immutable mapping from bucket ordinal to tablet id

    ``bucket_count`` is the modulus used when rows were placed. The mapping
    may cover only some ordinals when upstream partition pruning already
    removed buckets; a missing ordinal simply has no tablet to scan.

    Example:
        ```python
        assignment = TabletAssignment.from_tablet_ids([10001, 10002, 10003])
        assignment.tablet_for(1)  # 10002
        ```
    """

    def __init__(self, buckets: Mapping[int, int], bucket_count: int):
        """
        Initialize assignment

        Args:
            buckets: Bucket ordinal -> tablet id
            bucket_count: Number of buckets rows were hashed into

        Raises:
            InvalidAssignmentError: If bucket_count is not positive or an
                ordinal falls outside 0..bucket_count-1
        """
        if bucket_count <= 0:
            raise InvalidAssignmentError(f"bucket_count must be positive, got {bucket_count}")

        for ordinal in buckets:
            if not 0 <= ordinal < bucket_count:
                raise InvalidAssignmentError(
                    f"Bucket ordinal {ordinal} outside range 0..{bucket_count - 1}"
                )

        self._buckets = MappingProxyType(dict(sorted(buckets.items())))
        self._bucket_count = bucket_count

    @classmethod
    def from_tablet_ids(cls, tablet_ids: Sequence[int]) -> "TabletAssignment":
        """Build a dense assignment where tablet_ids[i] owns bucket i"""
        return cls(dict(enumerate(tablet_ids)), len(tablet_ids))

    @property
    def bucket_count(self) -> int:
        return self._bucket_count

    @property
    def buckets(self) -> Mapping[int, int]:
        """Read-only view of bucket ordinal -> tablet id"""
        return self._buckets

    def tablet_for(self, bucket: int) -> int | None:
        """Tablet owning the bucket, or None if the ordinal was pruned upstream"""
        return self._buckets.get(bucket)

    def tablet_ids(self) -> frozenset[int]:
        """Every tablet id present in the assignment"""
        return frozenset(self._buckets.values())

    def is_sparse(self) -> bool:
        return len(self._buckets) < self._bucket_count

    def restrict(self, buckets: Iterable[int]) -> "TabletAssignment":
        """Snapshot keeping only the given ordinals (upstream pruning)"""
        keep = set(buckets)
        return TabletAssignment(
            {b: t for b, t in self._buckets.items() if b in keep}, self._bucket_count
        )

    def __len__(self) -> int:
        return len(self._buckets)

    def __contains__(self, bucket: object) -> bool:
        return bucket in self._buckets

    def __iter__(self) -> Iterator[int]:
        return iter(self._buckets)

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, TabletAssignment):
            return NotImplemented
        return (
            self._bucket_count == other._bucket_count
            and dict(self._buckets) == dict(other._buckets)
        )

    def __hash__(self) -> int:
        return hash((self._bucket_count, tuple(self._buckets.items())))

    def __repr__(self) -> str:
        return f"TabletAssignment({len(self._buckets)}/{self._bucket_count} buckets)"


@dataclass(frozen=True)
class DistributedTable:
    """
    Snapshot of a hash-distributed table

    Attributes:
        name: Table name
        distribution_columns: Ordered distribution key; the order must match
            the order used when rows were placed
        assignment: Bucket ordinal -> tablet id
    """

    name: str
    distribution_columns: tuple[DistributionColumn, ...]
    assignment: TabletAssignment = field(compare=False)

    def __post_init__(self):
        object.__setattr__(self, "distribution_columns", tuple(self.distribution_columns))

    def get_column(self, name: str) -> DistributionColumn | None:
        """Distribution column by name (case-insensitive), or None"""
        lowered = name.lower()
        for column in self.distribution_columns:
            if column.name.lower() == lowered:
                return column
        return None

    def column_names(self) -> list[str]:
        return [column.name for column in self.distribution_columns]

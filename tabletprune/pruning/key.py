"""
Composite distribution key

An ordered stack of (value, type) entries, one per distribution column, used
while enumerating candidate combinations. The hash of every prefix is kept
alongside its entry so ``hash()`` never re-encodes earlier columns.
"""

from contextlib import contextmanager
from typing import Any, Iterator

from tabletprune.core.types import ColumnType
from tabletprune.pruning.hashing import DEFAULT_BUCKET_HASH, BucketHash


class CompositeKey:
    """
    Push/pop stack of typed values with an order-sensitive hash

    Example:
        ```python
        key = CompositeKey(capacity=2)
        with key.pushed("2019-08-22", ColumnType.DATE):
            with key.pushed("1323", ColumnType.VARCHAR):
                bucket = key.hash() % 300
        ```
    """

    def __init__(self, capacity: int, bucket_hash: BucketHash = DEFAULT_BUCKET_HASH):
        """
        Initialize an empty key

        Args:
            capacity: Maximum number of entries (the distribution column count)
            bucket_hash: Hash shared with storage-side placement
        """
        self.capacity = capacity
        self.bucket_hash = bucket_hash
        self._entries: list[tuple[Any, ColumnType]] = []
        self._states: list[int] = [bucket_hash.initial_state()]

    def push(self, value: Any, column_type: ColumnType) -> None:
        """
        Append an entry

        Raises:
            OverflowError: If the key already holds ``capacity`` entries
            LiteralCoercionError: If the value does not fit the type
        """
        if len(self._entries) >= self.capacity:
            raise OverflowError(f"CompositeKey is full ({self.capacity} entries)")

        chunk = self.bucket_hash.encode(value, column_type)
        self._states.append(self.bucket_hash.update(self._states[-1], chunk))
        self._entries.append((value, column_type))

    def pop(self) -> tuple[Any, ColumnType]:
        """
        Remove and return the last entry

        Raises:
            IndexError: If the key is empty
        """
        if not self._entries:
            raise IndexError("pop from empty CompositeKey")
        self._states.pop()
        return self._entries.pop()

    @contextmanager
    def pushed(self, value: Any, column_type: ColumnType) -> Iterator["CompositeKey"]:
        """Push for the duration of a block, popping on exit"""
        self.push(value, column_type)
        try:
            yield self
        finally:
            self.pop()

    def hash(self) -> int:
        """Unsigned 32-bit hash over the entries currently pushed"""
        return self.bucket_hash.finalize(self._states[-1])

    def is_complete(self) -> bool:
        return len(self._entries) == self.capacity

    def __len__(self) -> int:
        return len(self._entries)

    def __iter__(self) -> Iterator[tuple[Any, ColumnType]]:
        return iter(self._entries)

    def __repr__(self) -> str:
        values = ", ".join(f"{value!r}:{column_type}" for value, column_type in self._entries)
        return f"CompositeKey([{values}])"

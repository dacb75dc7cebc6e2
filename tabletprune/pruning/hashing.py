"""
Bucket hash contract

Rows are placed into buckets by hashing their distribution-column values in
column order; the planner must reproduce that hash exactly or it will prune
tablets that hold data. Both sides therefore go through one shared
``BucketHash`` object.

Contract ``crc32-v1``:

    hash = CRC-32 (zlib polynomial) over the concatenated encodings, & 0xFFFFFFFF

    TINYINT/SMALLINT/INT/BIGINT/LARGEINT  signed little-endian, 1/2/4/8/16 bytes
    BOOLEAN                               one byte, 0x00 or 0x01
    DATE                                  UTF-8 of 'YYYY-MM-DD'
    DATETIME                              UTF-8 of 'YYYY-MM-DD HH:MM:SS[.ffffff]'
    CHAR/VARCHAR                          UTF-8 of the text

Changing any encoding changes row placement and requires a new version.
"""

import zlib
from abc import ABC, abstractmethod
from typing import Any, Iterable, Mapping, Sequence

from tabletprune.core.catalog import DistributionColumn
from tabletprune.core.types import ColumnType, coerce_literal


class BucketHash(ABC):
    """
    Order-sensitive hash over a sequence of typed values

    Implementations are incremental: a state is threaded through ``update``
    once per encoded value and turned into an unsigned 32-bit value by
    ``finalize``. This lets a composite key keep the hash of every prefix.
    """

    version: str = ""

    @abstractmethod
    def encode(self, value: Any, column_type: ColumnType) -> bytes:
        """
        Encode one value as bytes

        Raises:
            LiteralCoercionError: If the value cannot be coerced to the type
        """
        pass

    @abstractmethod
    def initial_state(self) -> int:
        """State before any value has been hashed"""
        pass

    @abstractmethod
    def update(self, state: int, chunk: bytes) -> int:
        """Fold one encoded value into the state"""
        pass

    @abstractmethod
    def finalize(self, state: int) -> int:
        """Unsigned 32-bit hash for a state"""
        pass

    def digest(self, chunks: Iterable[bytes]) -> int:
        """Hash already-encoded values in order"""
        state = self.initial_state()
        for chunk in chunks:
            state = self.update(state, chunk)
        return self.finalize(state)

    def hash_values(self, entries: Iterable[tuple[Any, ColumnType]]) -> int:
        """Hash (value, type) pairs in order"""
        return self.digest(self.encode(value, column_type) for value, column_type in entries)

    def bucket_for_row(
        self, row: Mapping[str, Any], columns: Sequence[DistributionColumn], bucket_count: int
    ) -> int:
        """
        Bucket a row is placed into at write time

        Args:
            row: Column name -> value
            columns: Ordered distribution columns
            bucket_count: Number of buckets of the table

        Returns:
            Bucket ordinal in 0..bucket_count-1
        """
        entries = [(row[column.name], column.type) for column in columns]
        return self.hash_values(entries) % bucket_count

    def __repr__(self) -> str:
        return f"{self.__class__.__name__}(version={self.version!r})"


class Crc32BucketHash(BucketHash):
    """The ``crc32-v1`` contract shared by storage placement and the planner"""

    version = "crc32-v1"

    def encode(self, value: Any, column_type: ColumnType) -> bytes:
        value = coerce_literal(value, column_type)

        if column_type.is_integer():
            return value.to_bytes(column_type.byte_width, "little", signed=True)

        if column_type == ColumnType.BOOLEAN:
            return b"\x01" if value else b"\x00"

        if column_type == ColumnType.DATE:
            return value.isoformat().encode("utf-8")

        if column_type == ColumnType.DATETIME:
            # isoformat appends .ffffff only when microseconds are set
            return value.isoformat(sep=" ").encode("utf-8")

        return value.encode("utf-8")

    def initial_state(self) -> int:
        return 0

    def update(self, state: int, chunk: bytes) -> int:
        return zlib.crc32(chunk, state)

    def finalize(self, state: int) -> int:
        return state & 0xFFFFFFFF


DEFAULT_BUCKET_HASH = Crc32BucketHash()

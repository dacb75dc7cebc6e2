"""
tabletprune - hash-distribution tablet pruning for query planners

Given the ordered distribution columns of a table, the per-column filters of
a query and the bucket -> tablet assignment, select the tablets that could
hold matching rows. Uncertainty always resolves toward scanning more.
"""

__version__ = "0.1.0"

# Main API
from tabletprune.core.catalog import DistributedTable, DistributionColumn, TabletAssignment
from tabletprune.core.config import PrunerConfig
from tabletprune.core.types import ColumnType
from tabletprune.pruning.hashing import DEFAULT_BUCKET_HASH, BucketHash, Crc32BucketHash
from tabletprune.pruning.pruner import HashDistributionPruner, PruneResult, prune_tablets
from tabletprune.sql.ast_nodes import ColumnRef, FunctionCall
from tabletprune.sql.filters import MembershipFilter, RangeFilter

__all__ = [
    "__version__",
    "prune_tablets",
    "HashDistributionPruner",
    "PruneResult",
    "PrunerConfig",
    "ColumnType",
    "DistributionColumn",
    "DistributedTable",
    "TabletAssignment",
    "BucketHash",
    "Crc32BucketHash",
    "DEFAULT_BUCKET_HASH",
    "ColumnRef",
    "FunctionCall",
    "RangeFilter",
    "MembershipFilter",
]

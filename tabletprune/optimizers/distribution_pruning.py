"""
Distribution Pruning Optimizer

Skips tablets whose hash bucket cannot hold rows matching the WHERE clause.
Only works for equality and IN predicates on every distribution column.

Example:
    DISTRIBUTED BY HASH(dt, brand_id) BUCKETS 300

    Query: SELECT * FROM sales WHERE dt = '2019-08-22' AND brand_id IN ('1323', '2528')
    → 2 combinations → at most 2 of 300 tablets scanned
"""

from tabletprune.core.config import PrunerConfig
from tabletprune.core.scan import OlapScanNode
from tabletprune.optimizers.base import Optimizer
from tabletprune.pruning.pruner import HashDistributionPruner
from tabletprune.sql.filters import build_column_filters


class DistributionPruningOptimizer(Optimizer):
    """
    Prune tablets of a hash-distributed table

    Benefits:
    - Point lookups on the distribution key read a single tablet
    - Small IN lists read a handful of tablets instead of all of them

    When any distribution column is unconstrained, constrained by a range,
    or wrapped in a function, every tablet is kept.
    """

    def __init__(self, config: PrunerConfig | None = None):
        self.config = config or PrunerConfig()

    def get_name(self) -> str:
        return "Distribution pruning"

    def can_optimize(self, node: OlapScanNode) -> bool:
        """
        Check if distribution pruning is applicable

        Conditions:
        1. Table is hash distributed
        2. Query has WHERE conditions

        Args:
            node: Scan node to optimize

        Returns:
            True if optimization can be applied
        """
        if not node.supports_distribution_pruning():
            return False

        if not node.where or not node.where.conditions:
            return False

        return True

    def optimize(self, node: OlapScanNode) -> str | None:
        """
        Apply distribution pruning

        Args:
            node: Scan node to optimize

        Returns:
            Tablets kept and combinations hashed, or None after a fallback
        """
        filters = build_column_filters(node.where.conditions)
        pruner = HashDistributionPruner(
            node.table.distribution_columns,
            filters,
            node.table.assignment,
            self.config,
        )
        result = pruner.prune()
        node.set_prune_result(result)

        if result.fell_back:
            return None
        return f"{len(result)} of {result.total_tablets} tablet(s) from {result.combinations} combination(s)"

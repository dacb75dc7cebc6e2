"""
Scan node for a hash-distributed table

The scan node is what planner rules operate on: it carries the table snapshot
and the normalized WHERE clause, and optimizers narrow the set of tablets it
will read. Building scan ranges from the selected tablets happens downstream.
"""

from tabletprune.core.catalog import DistributedTable
from tabletprune.sql.ast_nodes import WhereClause


class OlapScanNode:
    """
    Scan over the tablets of one table

    Attributes:
        table: Immutable table snapshot
        where: Normalized predicates, or None
        selected_tablet_ids: Tablets the scan will read; starts as all of them
        prune_result: Result of distribution pruning, if it ran
    """

    def __init__(self, table: DistributedTable, where: WhereClause | None = None):
        self.table = table
        self.where = where
        self.selected_tablet_ids: frozenset = table.assignment.tablet_ids()
        self.prune_result = None

    def supports_distribution_pruning(self) -> bool:
        """Does the table have a hash distribution key to prune on?"""
        return bool(self.table.distribution_columns)

    def set_prune_result(self, result) -> None:
        """
        Narrow the scan to the tablets of a pruning result

        Tablets not already selected stay excluded, so rules compose.
        """
        self.prune_result = result
        self.selected_tablet_ids = self.selected_tablet_ids & result.tablet_ids

    def selected_buckets(self) -> list[tuple[int, int]]:
        """(bucket, tablet_id) pairs the scan will read, in bucket order"""
        return [
            (bucket, tablet_id)
            for bucket, tablet_id in self.table.assignment.buckets.items()
            if tablet_id in self.selected_tablet_ids
        ]

    def to_dataframe(self):
        """
        Selected buckets as a pandas DataFrame

        Returns:
            pandas.DataFrame with columns ``bucket`` and ``tablet_id``
        """
        try:
            import pandas as pd
        except ImportError:
            raise ImportError("Pandas is required for to_dataframe()")

        return pd.DataFrame(self.selected_buckets(), columns=["bucket", "tablet_id"])

    def __repr__(self) -> str:
        where = f" WHERE {self.where}" if self.where and self.where.conditions else ""
        return (
            f"OlapScanNode({self.table.name}{where}, "
            f"tablets={len(self.selected_tablet_ids)}/{len(self.table.assignment.tablet_ids())})"
        )

"""
Tests for OlapScanNode
"""

import pytest

from tabletprune.core.catalog import DistributedTable, DistributionColumn, TabletAssignment
from tabletprune.core.scan import OlapScanNode
from tabletprune.core.types import ColumnType
from tabletprune.pruning.pruner import PruneResult
from tabletprune.sql.ast_nodes import ColumnRef, Condition, WhereClause


@pytest.fixture
def table():
    return DistributedTable(
        "events",
        [DistributionColumn("id", ColumnType.INT)],
        TabletAssignment.from_tablet_ids([10, 11, 12, 13]),
    )


class TestOlapScanNode:
    def test_initially_selects_all(self, table):
        node = OlapScanNode(table)

        assert node.selected_tablet_ids == frozenset({10, 11, 12, 13})
        assert node.prune_result is None

    def test_supports_pruning(self, table):
        assert OlapScanNode(table).supports_distribution_pruning()

        unkeyed = DistributedTable("t", [], TabletAssignment.from_tablet_ids([1]))
        assert not OlapScanNode(unkeyed).supports_distribution_pruning()

    def test_prune_result_narrows(self, table):
        node = OlapScanNode(table)
        result = PruneResult(frozenset({11, 13}), False, 2, "2 combination(s)", 4)

        node.set_prune_result(result)

        assert node.selected_tablet_ids == frozenset({11, 13})
        assert node.selected_buckets() == [(1, 11), (3, 13)]

    def test_results_compose(self, table):
        node = OlapScanNode(table)
        node.set_prune_result(PruneResult(frozenset({11, 13}), False, 2, "", 4))
        node.set_prune_result(PruneResult(frozenset({10, 11, 12, 13}), True, None, "", 4))

        assert node.selected_tablet_ids == frozenset({11, 13})

    def test_to_dataframe(self, table):
        pd = pytest.importorskip("pandas")
        node = OlapScanNode(table)
        node.set_prune_result(PruneResult(frozenset({12}), False, 1, "", 4))

        df = node.to_dataframe()

        assert isinstance(df, pd.DataFrame)
        assert list(df.columns) == ["bucket", "tablet_id"]
        assert df.to_dict("records") == [{"bucket": 2, "tablet_id": 12}]

    def test_repr(self, table):
        where = WhereClause([Condition(ColumnRef("id"), "=", 3)])

        assert repr(OlapScanNode(table, where)) == "OlapScanNode(events WHERE id = 3, tablets=4/4)"

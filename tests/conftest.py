"""
Pytest configuration and shared fixtures
"""

import pytest

from tabletprune.core.catalog import DistributionColumn, TabletAssignment
from tabletprune.core.types import ColumnType
from tabletprune.sql.ast_nodes import ColumnRef
from tabletprune.sql.filters import MembershipFilter, RangeFilter


@pytest.fixture
def tablet_ids():
    """Tablet ids 0..299, tablet i owns bucket i"""
    return list(range(300))


@pytest.fixture
def assignment(tablet_ids):
    """Dense 300-bucket assignment"""
    return TabletAssignment.from_tablet_ids(tablet_ids)


@pytest.fixture
def sales_columns():
    """Five distribution columns of a sales fact table"""
    return [
        DistributionColumn("dealDate", ColumnType.DATE),
        DistributionColumn("main_brand_id", ColumnType.CHAR),
        DistributionColumn("item_third_cate_id", ColumnType.CHAR),
        DistributionColumn("channel", ColumnType.CHAR),
        DistributionColumn("shop_type", ColumnType.CHAR),
    ]


@pytest.fixture
def sales_filters():
    """
    Filters with candidate sizes 1, 5, 2, 2, 1 (20 combinations)

    Returns a builder so tests can widen the shop_type list.
    """

    def build(shop_types=("2",)):
        return {
            "dealDate": RangeFilter.equal_to(ColumnRef("dealDate"), "2019-08-22"),
            "main_brand_id": MembershipFilter(
                ColumnRef("main_brand_id"), ("1323", "2528", "9610", "3893", "6121")
            ),
            "item_third_cate_id": MembershipFilter(
                ColumnRef("item_third_cate_id"), ("9719", "11163")
            ),
            "channel": MembershipFilter(ColumnRef("channel"), ("1", "3")),
            "shop_type": MembershipFilter(ColumnRef("shop_type"), tuple(shop_types)),
        }

    return build


@pytest.fixture
def id_column():
    """Single INT distribution column"""
    return [DistributionColumn("id", ColumnType.INT)]

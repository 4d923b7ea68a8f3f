# backend/tests/test_network.py
"""
Tests for the cross-store network overview.
"""

from decimal import Decimal

from shopgenie.models.order import LiveActivityItem, SalesData
from shopgenie.models.store import Store, StoreSettings
from shopgenie.services.network import summarize_network


def make_store(name, sales, connected=False, feed=()):
    return Store(
        settings=StoreSettings(name=name, stripe_connected=connected),
        sales_data=[SalesData(date=day, sales=Decimal(amount), visitors=visitors) for day, amount, visitors in sales],
        live_feed=list(feed),
    )


def test_empty_network():
    overview = summarize_network([])

    assert overview.total_revenue == 0
    assert overview.store_count == 0
    assert overview.global_feed == []


def test_totals_and_alerts():
    stores = [
        make_store("A", [("Mon", "10", 3), ("Tue", "5", 1)], connected=True),
        make_store("B", [("Tue", "7.50", 2), ("Wed", "1", 0)]),
    ]

    overview = summarize_network(stores)

    assert overview.total_revenue == Decimal("23.50")
    assert overview.total_visitors == 6
    assert overview.alerts == 1
    assert overview.sales_by_day == [
        {"date": "Mon", "sales": Decimal("10")},
        {"date": "Tue", "sales": Decimal("12.50")},
        {"date": "Wed", "sales": Decimal("1")},
    ]


def test_global_feed_is_newest_first_and_limited():
    old = [
        LiveActivityItem(type="order", message=f"old {i}", timestamp=f"2024-01-01T00:00:{i:02d}+00:00")
        for i in range(8)
    ]
    new = [
        LiveActivityItem(type="fulfillment", message=f"new {i}", timestamp=f"2024-02-01T00:00:{i:02d}+00:00")
        for i in range(8)
    ]
    stores = [make_store("Old Shop", [], feed=old), make_store("New Shop", [], feed=new)]

    feed = summarize_network(stores).global_feed

    assert len(feed) == 10
    assert feed[0].activity.message == "new 7"
    assert feed[0].store_name == "New Shop"
    assert feed[-1].store_name == "Old Shop"
    assert feed[-1].activity.message == "old 6"


def test_storefront_exposes_overview(shop):
    shop.create_store("Second", "General")

    overview = shop.network_overview()

    assert overview.store_count == 2
    assert overview.alerts == 2

"""
Network overview: totals across every store in the collection.
"""

from dataclasses import dataclass, field
from decimal import Decimal
from typing import Dict, List

from shopgenie.models.order import LiveActivityItem
from shopgenie.models.store import Store

GLOBAL_FEED_LIMIT = 10


@dataclass
class NetworkActivity:
    """A live feed entry labelled with the store it happened in."""
    store_id: str
    store_name: str
    activity: LiveActivityItem


@dataclass
class NetworkOverview:
    total_revenue: Decimal = Decimal("0")
    total_visitors: int = 0
    store_count: int = 0
    alerts: int = 0
    sales_by_day: List[Dict[str, object]] = field(default_factory=list)
    global_feed: List[NetworkActivity] = field(default_factory=list)


def summarize_network(stores: List[Store], feed_limit: int = GLOBAL_FEED_LIMIT) -> NetworkOverview:
    """
    Aggregate revenue, visitors and activity over `stores`.

    alerts counts stores without payments enabled. sales_by_day sums sales
    per day label, in the order labels are first seen. The global feed is
    newest first.
    """
    overview = NetworkOverview(store_count=len(stores))
    by_day: Dict[str, Decimal] = {}
    feed: List[NetworkActivity] = []

    for store in stores:
        if not store.settings.stripe_connected:
            overview.alerts += 1
        for entry in store.sales_data:
            overview.total_revenue += entry.sales
            overview.total_visitors += entry.visitors
            by_day[entry.date] = by_day.get(entry.date, Decimal("0")) + entry.sales
        feed.extend(NetworkActivity(store.id, store.settings.name, item) for item in store.live_feed)

    overview.sales_by_day = [{"date": day, "sales": sales} for day, sales in by_day.items()]
    feed.sort(key=lambda entry: entry.activity.timestamp, reverse=True)
    overview.global_feed = feed[:feed_limit]
    return overview

"""
Shopping cart and order placement.

The cart is not part of any store: it belongs to the browsing session and is
emptied whenever the active store changes. Placing an order applies one
combined update to the active store (order list, payout balance, today's
sales aggregate and the live feed).
"""

import logging
from decimal import Decimal
from typing import Dict, List, Optional

from shopgenie.config import Settings, get_settings
from shopgenie.models.base import new_id
from shopgenie.models.order import CartItem, Customer, LiveActivityItem, Order, cart_line_key
from shopgenie.models.product import Product, ProductVariant
from shopgenie.models.store import Store
from shopgenie.services.collection import StoreCollection
from shopgenie.services.notifications import NotificationChannel

logger = logging.getLogger(__name__)

ORDER_NUMBER_BASE = 1000


class Cart:
    """Cart lines plus the open/closed state of the cart panel."""

    def __init__(self):
        self.items: List[CartItem] = []
        self.is_open = False

    @property
    def subtotal(self) -> Decimal:
        return sum((item.line_total for item in self.items), Decimal("0"))

    @property
    def item_count(self) -> int:
        return sum(item.quantity for item in self.items)

    def clear(self):
        self.items = []


def push_activity(feed: List[LiveActivityItem], item: LiveActivityItem, limit: int) -> List[LiveActivityItem]:
    """Prepend `item`, keeping the newest `limit` entries."""
    return [item, *feed][:limit]


class CheckoutService:

    def __init__(
        self,
        collection: StoreCollection,
        notifier: NotificationChannel,
        cart: Optional[Cart] = None,
        settings: Optional[Settings] = None,
    ):
        self.collection = collection
        self.notifier = notifier
        self.cart = cart or Cart()
        self.settings = settings or get_settings()

    # =========================================================================
    # CART
    # =========================================================================

    def add_to_cart(self, product: Product, answers: Optional[Dict[str, str]] = None, variant: Optional[ProductVariant] = None) -> bool:
        """
        Add one unit of `product` (optionally a variant, with buyer answers).

        Lines with the same product, variant and answers are merged. Physical
        and subscription products are limited by the stock on hand.
        """
        stock = variant.inventory if variant is not None else product.inventory
        if product.tracks_inventory and stock <= 0:
            self.notifier.notify("Product out of stock", "error")
            return False

        key = cart_line_key(product.id, variant, answers)
        existing = next((item for item in self.cart.items if item.line_key == key), None)
        if existing is not None:
            if product.tracks_inventory and existing.quantity >= existing.stock:
                self.notifier.notify(f"Only {existing.stock} available", "error")
                return False
            self.cart.items = [
                item.model_copy(update={"quantity": item.quantity + 1}) if item is existing else item
                for item in self.cart.items
            ]
        else:
            self.cart.items = [*self.cart.items, CartItem.from_product(product, answers, variant)]

        self.cart.is_open = True
        self.notifier.notify("Added to bag")
        return True

    def remove_from_cart(self, product_id: str) -> bool:
        """Drop every line of `product_id`, whatever its variant or answers."""
        remaining = [item for item in self.cart.items if item.id != product_id]
        removed = len(remaining) != len(self.cart.items)
        self.cart.items = remaining
        return removed

    def clear_cart(self):
        self.cart.clear()

    # =========================================================================
    # ORDERS
    # =========================================================================

    def checkout(self, customer: Customer) -> Optional[Order]:
        """Validate the buyer's details, then place the order."""
        if not (customer.name and customer.email and customer.address):
            self.notifier.notify("Please fill in all fields", "error")
            return None
        return self.create_order(customer)

    def create_order(self, customer: Customer) -> Optional[Order]:
        """
        Turn the cart into an order on the active store.

        Returns None, changing nothing, when the cart is empty or no store
        matches the active id.
        """
        if not self.cart.items:
            return None
        store = self.collection.find(self.collection.active_id)
        if store is None:
            return None

        items = list(self.cart.items)
        subtotal = sum((item.line_total for item in items), Decimal("0"))
        cost = sum((item.line_cost for item in items), Decimal("0"))
        # An explicit 0 is a real rate; only an unset rate takes the default.
        tax_rate = store.settings.tax_rate if store.settings.tax_rate is not None else self.settings.DEFAULT_TAX_RATE
        tax = subtotal * tax_rate
        total = subtotal + tax

        order = Order(
            id=f"#{ORDER_NUMBER_BASE + len(store.orders) + 1}",
            customer=customer,
            items=items,
            subtotal=subtotal,
            tax=tax,
            total=total,
            cost=cost,
            transaction_id=f"ord_{new_id()}",
        )
        activity = LiveActivityItem(
            type="order",
            message=f"New Order from {customer.name}",
            amount=total,
            customer_location=customer.location,
        )

        def apply(current: Store) -> Store:
            sales_data = list(current.sales_data)
            if sales_data:
                today = sales_data[-1]
                sales_data[-1] = today.model_copy(update={
                    "sales": today.sales + total,
                    "profit": today.profit + order.profit,
                    "visitors": today.visitors + 1,
                })
            return current.model_copy(update={
                "orders": [order, *current.orders],
                "payout_balance": current.payout_balance + total,
                "sales_data": sales_data,
                "live_feed": push_activity(current.live_feed, activity, self.settings.LIVE_FEED_LIMIT),
            })

        self.collection.update_store(store.id, apply)
        self.cart.clear()
        logger.info(f"Order {order.id} placed on store {store.id} for {total}")
        return order

    def fulfill_order(self, order_id: str, tracking_number: str, carrier: str) -> bool:
        store = self.collection.find(self.collection.active_id)
        if store is None or not any(o.id == order_id for o in store.orders):
            return False

        activity = LiveActivityItem(type="fulfillment", message=f"Order {order_id} Shipped via {carrier}")
        self.collection.update_store(store.id, lambda s: s.model_copy(update={
            "orders": [
                o.model_copy(update={"status": "fulfilled", "tracking_number": tracking_number, "carrier": carrier})
                if o.id == order_id else o
                for o in s.orders
            ],
            "live_feed": push_activity(s.live_feed, activity, self.settings.LIVE_FEED_LIMIT),
        }))
        self.notifier.notify(f"Order {order_id} marked as fulfilled.")
        return True

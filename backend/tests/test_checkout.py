# backend/tests/test_checkout.py
"""
Tests for the cart and the order transaction.
"""

from decimal import Decimal

import pytest

from shopgenie.models.order import Customer
from shopgenie.models.product import ProductVariant

from conftest import make_product, messages


@pytest.fixture
def customer():
    return Customer(name="Jane Doe", email="jane@example.com", address="1 Main St", city="Austin", country="USA")


# ============================================================================
# CART
# ============================================================================

def test_same_line_merges_into_one(shop):
    product = make_product(inventory=2)

    assert shop.add_to_cart(product, {"engraving": "JD"})
    assert shop.add_to_cart(product, {"engraving": "JD"})

    assert len(shop.cart.items) == 1
    assert shop.cart.items[0].quantity == 2
    assert shop.cart.item_count == 2
    assert shop.cart.is_open is True


def test_different_answers_make_separate_lines(shop):
    product = make_product(inventory=5)

    shop.add_to_cart(product, {"engraving": "A"})
    shop.add_to_cart(product, {"engraving": "B"})
    shop.add_to_cart(product)

    assert [item.quantity for item in shop.cart.items] == [1, 1, 1]


def test_out_of_stock_is_rejected(shop):
    assert shop.add_to_cart(make_product(inventory=0)) is False

    assert shop.cart.items == []
    assert shop.cart.is_open is False
    assert messages(shop.notifier) == ["Product out of stock"]


def test_stock_boundary_for_second_unit(shop):
    product = make_product(inventory=1)

    assert shop.add_to_cart(product) is True
    assert shop.add_to_cart(product) is False

    assert shop.cart.items[0].quantity == 1
    assert messages(shop.notifier) == ["Added to bag", "Only 1 available"]


def test_variant_stock_is_used(shop):
    variant = ProductVariant(title="Large", price=Decimal("30"), inventory=0)
    product = make_product(inventory=10, has_variants=True, variants=[variant])

    assert shop.add_to_cart(product, variant=variant) is False
    assert shop.cart.items == []


def test_variant_stock_bounds_merged_line(shop):
    variant = ProductVariant(title="Large", price=Decimal("30"), inventory=2)
    product = make_product(inventory=10, has_variants=True, variants=[variant])

    assert shop.add_to_cart(product, variant=variant) is True
    assert shop.add_to_cart(product, variant=variant) is True
    assert shop.add_to_cart(product, variant=variant) is False

    assert shop.cart.items[0].quantity == 2
    assert messages(shop.notifier)[-1] == "Only 2 available"


def test_digital_products_skip_stock(shop):
    ebook = make_product(title="E-book", product_type="digital", inventory=0)

    assert shop.add_to_cart(ebook) is True
    assert shop.add_to_cart(ebook) is True
    assert shop.cart.items[0].quantity == 2


def test_remove_drops_every_line_of_the_product(shop):
    product = make_product(inventory=5)
    other = make_product(title="Cap", inventory=5)
    shop.add_to_cart(product, {"engraving": "A"})
    shop.add_to_cart(product, {"engraving": "B"})
    shop.add_to_cart(other)

    assert shop.remove_from_cart(product.id) is True

    assert [item.id for item in shop.cart.items] == [other.id]


def test_cart_cleared_on_store_switch_and_create(shop):
    first_id = shop.active_store_id
    shop.add_to_cart(make_product())

    shop.create_store("Second", "General")
    assert shop.cart.items == []

    shop.add_to_cart(make_product())
    shop.switch_store(first_id)
    assert shop.cart.items == []


# ============================================================================
# ORDERS
# ============================================================================

def test_order_arithmetic(shop, customer):
    tee = make_product(price=Decimal("10"), cost_per_item=Decimal("4"), inventory=5)
    shop.add_to_cart(tee)
    shop.add_to_cart(tee)
    shop.add_to_cart(make_product(title="Sticker", price=Decimal("5"), cost_per_item=Decimal("1"), inventory=5))
    sales_before = shop.sales_data[-1]

    order = shop.create_order(customer)

    assert order.subtotal == Decimal("25")
    assert order.tax == Decimal("2.00")
    assert order.total == Decimal("27.00")
    assert order.cost == Decimal("9")
    assert order.profit == Decimal("16")
    assert order.id == "#1001"
    assert order.transaction_id.startswith("ord_")
    assert order.status == "unfulfilled"

    assert shop.orders[0] == order
    assert shop.payout_balance == Decimal("27.00")
    today = shop.sales_data[-1]
    assert today.sales == sales_before.sales + Decimal("27.00")
    assert today.profit == sales_before.profit + Decimal("16")
    assert today.visitors == sales_before.visitors + 1

    feed = shop.live_feed[0]
    assert feed.type == "order"
    assert feed.message == "New Order from Jane Doe"
    assert feed.amount == Decimal("27.00")
    assert feed.customer_location == "Austin, USA"
    assert shop.cart.items == []


def test_empty_cart_does_not_create_order(shop, customer):
    assert shop.create_order(customer) is None
    assert shop.orders == []
    assert shop.payout_balance == 0


def test_order_numbers_increment(shop, customer):
    for expected in ("#1001", "#1002"):
        shop.add_to_cart(make_product())
        assert shop.create_order(customer).id == expected


def test_tax_rate_from_store_settings(shop, customer):
    shop.update_settings({"tax_rate": Decimal("0")})
    shop.add_to_cart(make_product(price=Decimal("10")))

    order = shop.create_order(customer)

    assert order.tax == 0
    assert order.total == Decimal("10")


def test_missing_tax_rate_uses_default(shop, customer):
    shop.update_settings({"tax_rate": None})
    shop.add_to_cart(make_product(price=Decimal("10")))

    assert shop.create_order(customer).tax == Decimal("0.80")


def test_checkout_requires_customer_details(shop):
    shop.add_to_cart(make_product())
    shop.notifier.clear()

    assert shop.checkout(Customer(name="Jane", email="", address="1 Main St")) is None
    assert messages(shop.notifier) == ["Please fill in all fields"]
    assert len(shop.cart.items) == 1


def test_checkout_places_order(shop, customer):
    shop.add_to_cart(make_product())
    assert shop.checkout(customer) is not None
    assert len(shop.orders) == 1


def test_live_feed_is_capped(shop, customer):
    for _ in range(13):
        shop.add_to_cart(make_product())
        shop.create_order(customer)
    for order in shop.orders[:12]:
        shop.fulfill_order(order.id, "1Z999", "UPS")

    feed = shop.live_feed
    assert len(feed) == 20
    assert feed[0].type == "fulfillment"
    assert feed[0].message == f"Order {shop.orders[11].id} Shipped via UPS"


def test_fulfill_order(shop, customer):
    shop.add_to_cart(make_product())
    order = shop.create_order(customer)
    shop.notifier.clear()

    assert shop.fulfill_order(order.id, "1Z999", "UPS") is True

    fulfilled = shop.orders[0]
    assert fulfilled.status == "fulfilled"
    assert fulfilled.tracking_number == "1Z999"
    assert fulfilled.carrier == "UPS"
    assert messages(shop.notifier) == [f"Order {order.id} marked as fulfilled."]


def test_fulfill_unknown_order_is_silent(shop):
    assert shop.fulfill_order("#9999", "1Z", "UPS") is False
    assert shop.live_feed == []
    assert shop.notifier.notifications == []


def test_orders_do_not_leak_between_stores(shop, customer):
    first_id = shop.active_store_id
    other = shop.create_store("Other", "General")
    other_before = shop.collection.find(other.id)
    shop.switch_store(first_id)

    shop.add_to_cart(make_product())
    shop.create_order(customer)

    assert shop.collection.find(other.id) == other_before
    assert shop.collection.find(other.id).orders == []

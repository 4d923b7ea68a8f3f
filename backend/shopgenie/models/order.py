"""
Order models - cart lines, orders, daily sales aggregates and the live feed.
"""

import json
from datetime import datetime, timezone
from decimal import Decimal
from typing import Dict, List, Literal, Optional

from pydantic import Field

from shopgenie.models.base import StoreModel, new_id
from shopgenie.models.product import Product, ProductVariant

OrderStatus = Literal["paid", "unfulfilled", "fulfilled", "refunded"]
ActivityType = Literal["order", "visitor", "fulfillment", "payment"]


def utc_now_iso() -> str:
    return datetime.now(timezone.utc).isoformat()


def cart_line_key(product_id: str, variant: Optional[ProductVariant] = None, answers: Optional[Dict[str, str]] = None) -> str:
    """
    Composite identity of a cart line: product id, then "-<variant id>",
    then the serialized buyer answers. Two lines merge iff their keys match.
    """
    key = product_id
    if variant is not None:
        key += f"-{variant.id}"
    if answers is not None:
        key += json.dumps(answers, separators=(",", ":"))
    return key


class Customer(StoreModel):
    name: str
    email: str
    address: str = ""
    city: str = ""
    zip: str = ""
    country: str = ""

    @property
    def location(self) -> str:
        return f"{self.city}, {self.country}"


class CartItem(Product):
    """A product snapshot plus the buyer's quantity, answers and variant choice."""

    quantity: int = Field(default=1, ge=1)
    answers: Optional[Dict[str, str]] = None
    selected_variant: Optional[ProductVariant] = None

    @classmethod
    def from_product(cls, product: Product, answers: Optional[Dict[str, str]] = None, variant: Optional[ProductVariant] = None) -> "CartItem":
        return cls.model_validate({
            **product.model_dump(),
            "quantity": 1,
            "answers": answers,
            "selected_variant": variant,
        })

    @property
    def line_key(self) -> str:
        return cart_line_key(self.id, self.selected_variant, self.answers)

    @property
    def stock(self) -> int:
        """Units available for this line: the variant's stock when one is selected."""
        if self.selected_variant is not None:
            return self.selected_variant.inventory
        return self.inventory

    @property
    def line_total(self) -> Decimal:
        return self.price * self.quantity

    @property
    def line_cost(self) -> Decimal:
        return (self.cost_per_item or Decimal("0")) * self.quantity


class Order(StoreModel):
    """
    Immutable record of a checkout. Only fulfillment may later change
    status, tracking_number and carrier.
    """

    id: str
    customer: Customer
    items: List[CartItem]
    subtotal: Decimal
    tax: Decimal
    total: Decimal
    cost: Decimal
    date: str = Field(default_factory=utc_now_iso)
    status: OrderStatus = "unfulfilled"
    payment_method: str = "Credit Card"
    tracking_number: Optional[str] = None
    carrier: Optional[str] = None
    transaction_id: Optional[str] = None

    @property
    def profit(self) -> Decimal:
        return self.subtotal - self.cost


class SalesData(StoreModel):
    """One day of aggregates. The last entry of a store's list is "today"."""
    date: str
    sales: Decimal = Decimal("0")
    profit: Decimal = Decimal("0")
    visitors: int = 0


class LiveActivityItem(StoreModel):
    id: str = Field(default_factory=new_id)
    type: ActivityType
    message: str
    timestamp: str = Field(default_factory=utc_now_iso)
    amount: Optional[Decimal] = None
    customer_location: Optional[str] = None

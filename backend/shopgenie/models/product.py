"""
Product models - catalog entries, variants and buyer questions.
"""

from decimal import Decimal
from typing import List, Literal, Optional

from pydantic import Field

from shopgenie.models.base import StoreModel, new_id

ProductType = Literal["physical", "digital", "service", "subscription"]

# These types never hold stock, so inventory checks are skipped for them.
UNTRACKED_PRODUCT_TYPES = ("digital", "service")


class ProductVariant(StoreModel):
    id: str = Field(default_factory=new_id)
    title: str
    price: Decimal = Decimal("0")
    inventory: int = 0
    sku: Optional[str] = None


class ProductOption(StoreModel):
    id: str = Field(default_factory=new_id)
    name: str
    values: List[str] = []


class BuyerQuestion(StoreModel):
    """A question the buyer answers at add-to-cart time (engraving text, size...)."""
    id: str = Field(default_factory=new_id)
    label: str
    type: Literal["text", "select", "boolean"] = "text"


class Product(StoreModel):
    """
    A catalog entry owned by one store.

    stripe_product_id / stripe_price_id are filled in by the catalog sync
    after the product is already stored locally. Their absence is normal.
    """

    id: str = Field(default_factory=new_id)
    title: str
    description: str = ""
    price: Decimal = Decimal("0")
    compare_at_price: Optional[Decimal] = None
    cost_per_item: Decimal = Decimal("0")
    image: str = ""
    images: List[str] = []
    category: str = ""
    inventory: int = 0
    sku: Optional[str] = None
    barcode: Optional[str] = None
    status: Literal["active", "draft"] = "active"
    supplier_url: Optional[str] = None
    product_type: ProductType = "physical"
    vendor: Optional[str] = None
    has_variants: bool = False
    variants: List[ProductVariant] = []
    options: List[ProductOption] = []
    tags: List[str] = []
    seo_title: Optional[str] = None
    seo_description: Optional[str] = None
    handle: Optional[str] = None
    features: List[str] = []
    buyer_questions: List[BuyerQuestion] = []

    # Stripe catalog mirror
    stripe_product_id: Optional[str] = None
    stripe_price_id: Optional[str] = None

    @property
    def tracks_inventory(self) -> bool:
        return self.product_type not in UNTRACKED_PRODUCT_TYPES

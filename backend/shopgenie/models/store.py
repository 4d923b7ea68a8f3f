"""
Store (tenant) models and the tenant collection.

The collection holds every store plus the id of the active one and the
global Stripe platform keys. Reads resolve the active store through
TenantCollection.active_store; writes go through StoreCollection in
shopgenie.services.collection.
"""

from decimal import Decimal
from typing import Callable, List, Optional

from pydantic import Field

from shopgenie.models.base import StoreModel, new_id
from shopgenie.models.brand import BrandIdentity
from shopgenie.models.marketing import CustomerReview, Discount, MarketingCampaign, MarketingStats
from shopgenie.models.order import LiveActivityItem, Order, SalesData
from shopgenie.models.product import Product
from shopgenie.models.sections import ProfileSection


class SocialLink(StoreModel):
    platform: str
    url: str


class StoreSettings(StoreModel):
    """
    Display, legal and visual settings of a store.

    primary_color, background_color, text_color, font_family, border_radius
    and logo also live on BrandIdentity; brand updates project them back here.
    """

    name: str = "My Brand"
    description: str = "Welcome to my official store."
    bio: Optional[str] = "We create sustainable, high-quality products for modern living."
    contact_email: str = ""
    category: str = "General"
    currency: str = "USD"
    country: str = "United States"
    language: str = "English"
    timezone: str = "UTC-05:00 Eastern Time"
    logo: str = "https://via.placeholder.com/200x200?text=Logo"
    banner: str = "https://via.placeholder.com/1200x400?text=Store+Banner"
    primary_color: str = "#00A884"
    secondary_color: Optional[str] = None
    background_color: Optional[str] = "#FFFFFF"
    text_color: Optional[str] = "#111B21"
    font_family: str = "Inter"
    border_radius: str = "12px"
    button_style: Optional[str] = "rounded"
    view_mode: str = "classic"
    show_powered_by: bool = True
    social_links: List[SocialLink] = Field(default_factory=lambda: [
        SocialLink(platform="Instagram", url="#"),
        SocialLink(platform="TikTok", url="#"),
    ])
    beginner_mode: bool = True
    is_paused: bool = False
    drop_mode: bool = False
    legal_pages_generated: bool = False

    # Payments
    stripe_connected: bool = False
    stripe_public_key: str = ""
    stripe_secret_key: str = ""
    tax_rate: Optional[Decimal] = Decimal("0.08")


class Store(StoreModel):
    """One tenant. Replaced wholesale on every change."""

    id: str = Field(default_factory=new_id)
    stripe_account_id: Optional[str] = None
    settings: StoreSettings = StoreSettings()
    brand_identity: BrandIdentity = BrandIdentity()
    campaigns: List[MarketingCampaign] = []
    reviews: List[CustomerReview] = []
    products: List[Product] = []
    orders: List[Order] = []
    discounts: List[Discount] = []
    sales_data: List[SalesData] = []
    live_feed: List[LiveActivityItem] = []
    payout_balance: Decimal = Decimal("0")
    sections: List[ProfileSection] = []
    marketing_stats: MarketingStats = MarketingStats()

    @property
    def name(self) -> str:
        return self.settings.name


class PlatformCredentials(StoreModel):
    """Global Stripe keys shared by every store in platform mode."""
    public_key: str = ""
    secret_key: str = ""


class TenantCollection(StoreModel):
    stores: List[Store] = []
    active_id: str = ""
    platform_credentials: PlatformCredentials = PlatformCredentials()

    def find(self, store_id: str) -> Optional[Store]:
        for store in self.stores:
            if store.id == store_id:
                return store
        return None

    @property
    def active_store(self) -> Optional[Store]:
        """The active store, or the first store when active_id matches none."""
        store = self.find(self.active_id)
        if store is None and self.stores:
            return self.stores[0]
        return store

    def replace_store(self, store_id: str, transform: Callable[[Store], Store]) -> "TenantCollection":
        """
        Apply `transform` to the store with `store_id`, keeping every other
        entry (and the list order) as is. Returns self when nothing matched
        or the transform returned the store unchanged.
        """
        changed = False
        stores = []
        for store in self.stores:
            if store.id == store_id:
                updated = transform(store)
                changed = changed or updated is not store
                stores.append(updated)
            else:
                stores.append(store)
        if not changed:
            return self
        return self.model_copy(update={"stores": stores})

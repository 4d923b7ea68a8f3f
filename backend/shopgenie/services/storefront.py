"""
Storefront - the single entry point a UI layer talks to.

Wires the store collection, notification channel, cart and the per-concern
services together, and exposes read projections of the active store. The
projections resolve the active store on every access; nothing here caches a
Store.
"""

import logging
from decimal import Decimal
from typing import Any, Dict, List, Literal, Mapping, Optional

from shopgenie.config import Settings, get_settings
from shopgenie.integrations.gemini import GeminiClient
from shopgenie.integrations.stripe_catalog import SECRET_KEY_PREFIX, StripeAPIError
from shopgenie.models.ai import ChatTurn, DuelScenario, ProductSuggestion, SocialPostContent
from shopgenie.models.brand import BrandIdentity
from shopgenie.models.marketing import CustomerReview, Discount, MarketingCampaign, MarketingStats
from shopgenie.models.order import Customer, LiveActivityItem, Order, SalesData
from shopgenie.models.product import Product, ProductVariant
from shopgenie.models.sections import ProfileSection, SectionType
from shopgenie.models.store import Store, StoreSettings
from shopgenie.services.branding import BrandingService
from shopgenie.services.catalog import CatalogService, ConnectorFactory
from shopgenie.services.checkout import Cart, CheckoutService
from shopgenie.services.collection import StoreCollection
from shopgenie.services.marketing import MarketingService
from shopgenie.services.network import NetworkOverview, summarize_network
from shopgenie.services.notifications import Notification, NotificationChannel
from shopgenie.services.persistence import SnapshotStore, StorageBackend, build_storage
from shopgenie.services.sections import SectionService
from shopgenie.services.session import SessionGuard, SessionProvider, StaticSessionProvider

logger = logging.getLogger(__name__)


class Storefront:

    def __init__(
        self,
        collection: StoreCollection,
        notifier: NotificationChannel,
        ai: Optional[GeminiClient] = None,
        connector_factory: Optional[ConnectorFactory] = None,
        session_provider: Optional[SessionProvider] = None,
        settings: Optional[Settings] = None,
    ):
        self.settings = settings or get_settings()
        self.collection = collection
        self.notifier = notifier
        self.ai = ai
        self.session = SessionGuard(session_provider or StaticSessionProvider())

        self.checkout_service = CheckoutService(collection, notifier, cart=Cart(), settings=self.settings)
        self.catalog = CatalogService(collection, notifier, connector_factory, settings=self.settings)
        self.branding = BrandingService(collection, notifier, ai=ai)
        self.marketing = MarketingService(collection, notifier, ai=ai, settings=self.settings)
        self.sections_service = SectionService(collection, notifier)

        # Carts never follow the user into another store
        collection.on_tenant_change(self.checkout_service.clear_cart)

    @classmethod
    def from_settings(
        cls,
        settings: Optional[Settings] = None,
        storage: Optional[StorageBackend] = None,
        ai: Optional[GeminiClient] = None,
        connector_factory: Optional[ConnectorFactory] = None,
        session_provider: Optional[SessionProvider] = None,
    ) -> "Storefront":
        """Build a storefront, loading the persisted collection from `storage`."""
        settings = settings or get_settings()
        notifier = NotificationChannel(ttl_seconds=settings.NOTIFICATION_TTL_SECONDS)
        snapshots = SnapshotStore(storage or build_storage(settings), prefix=settings.STORAGE_KEY_PREFIX)
        collection = StoreCollection(snapshots, notifier, settings=settings)
        return cls(
            collection,
            notifier,
            ai=ai if ai is not None else GeminiClient(settings),
            connector_factory=connector_factory,
            session_provider=session_provider,
            settings=settings,
        )

    # =========================================================================
    # PROJECTIONS
    # =========================================================================

    @property
    def stores(self) -> List[Store]:
        return self.collection.stores

    @property
    def active_store(self) -> Optional[Store]:
        return self.collection.active_store

    @property
    def active_store_id(self) -> str:
        return self.collection.active_id

    @property
    def store_settings(self) -> StoreSettings:
        store = self.active_store
        return store.settings if store else StoreSettings()

    @property
    def brand_identity(self) -> BrandIdentity:
        store = self.active_store
        return store.brand_identity if store else BrandIdentity()

    @property
    def products(self) -> List[Product]:
        store = self.active_store
        return store.products if store else []

    @property
    def orders(self) -> List[Order]:
        store = self.active_store
        return store.orders if store else []

    @property
    def campaigns(self) -> List[MarketingCampaign]:
        store = self.active_store
        return store.campaigns if store else []

    @property
    def reviews(self) -> List[CustomerReview]:
        store = self.active_store
        return store.reviews if store else []

    @property
    def discounts(self) -> List[Discount]:
        store = self.active_store
        return store.discounts if store else []

    @property
    def sales_data(self) -> List[SalesData]:
        store = self.active_store
        return store.sales_data if store else []

    @property
    def live_feed(self) -> List[LiveActivityItem]:
        store = self.active_store
        return store.live_feed if store else []

    @property
    def sections(self) -> List[ProfileSection]:
        store = self.active_store
        return store.sections if store else []

    @property
    def payout_balance(self) -> Decimal:
        store = self.active_store
        return store.payout_balance if store else Decimal("0")

    @property
    def marketing_stats(self) -> MarketingStats:
        store = self.active_store
        return store.marketing_stats if store else MarketingStats()

    @property
    def cart(self) -> Cart:
        return self.checkout_service.cart

    @property
    def notifications(self) -> List[Notification]:
        return self.notifier.notifications

    def network_overview(self) -> NetworkOverview:
        return summarize_network(self.collection.stores)

    # =========================================================================
    # NOTIFICATIONS
    # =========================================================================

    def notify(self, message: str, type: str = "success") -> str:
        return self.notifier.notify(message, type)

    def dismiss_notification(self, notification_id: str):
        self.notifier.dismiss(notification_id)

    # =========================================================================
    # TENANTS AND PLATFORM KEYS
    # =========================================================================

    def create_store(self, name: str, category: str) -> Store:
        return self.collection.create_store(name, category)

    def switch_store(self, store_id: str) -> bool:
        return self.collection.switch_store(store_id)

    def archive_store(self, store_id: str) -> bool:
        return self.collection.archive_store(store_id)

    def update_platform_credentials(self, public_key: str, secret_key: str):
        self.collection.update_platform_credentials(public_key, secret_key)

    async def connect_platform_credentials(self, public_key: str, secret_key: str) -> bool:
        """
        Verify a platform secret key against Stripe before storing it.

        The key must look like a secret key and resolve to an account;
        otherwise nothing is stored and an error notification is raised.
        """
        if not secret_key or not secret_key.startswith(SECRET_KEY_PREFIX):
            self.notifier.notify("Invalid Secret Key format. Must start with 'sk_'.", "error")
            return False
        try:
            account = await self.catalog.connector_factory(secret_key).retrieve_account()
        except StripeAPIError as e:
            logger.warning(f"Stripe key verification failed: {e}")
            self.notifier.notify(f"Stripe Connection Failed: {e}", "error")
            return False

        self.collection.update_platform_credentials(public_key, secret_key)
        self.notifier.notify(f"Connected to Stripe Account: {account.email or account.id}")
        return True

    # =========================================================================
    # SETTINGS AND BRAND
    # =========================================================================

    def update_settings(self, updates: Mapping[str, Any]) -> bool:
        return self.branding.update_settings(updates)

    def update_brand_identity(self, updates: Mapping[str, Any]) -> bool:
        return self.branding.update_brand_identity(updates)

    async def apply_brand_strategy(self) -> bool:
        return await self.branding.apply_brand_strategy()

    # =========================================================================
    # CATALOG
    # =========================================================================

    async def add_product(self, product: Product, wait_for_sync: bool = True) -> bool:
        return await self.catalog.add_product(product, wait_for_sync=wait_for_sync)

    def update_product(self, product_id: str, updates: Mapping[str, Any]) -> bool:
        return self.catalog.update_product(product_id, updates)

    def delete_product(self, product_id: str) -> bool:
        return self.catalog.delete_product(product_id)

    async def generate_product_details(self, product_name: str) -> Optional[ProductSuggestion]:
        if self.ai is None:
            return None
        return await self.ai.generate_product_details(product_name, self.store_settings.category)

    # =========================================================================
    # CART AND ORDERS
    # =========================================================================

    def add_to_cart(self, product: Product, answers: Optional[Dict[str, str]] = None, variant: Optional[ProductVariant] = None) -> bool:
        return self.checkout_service.add_to_cart(product, answers, variant)

    def remove_from_cart(self, product_id: str) -> bool:
        return self.checkout_service.remove_from_cart(product_id)

    def clear_cart(self):
        self.checkout_service.clear_cart()

    def checkout(self, customer: Customer) -> Optional[Order]:
        return self.checkout_service.checkout(customer)

    def create_order(self, customer: Customer) -> Optional[Order]:
        return self.checkout_service.create_order(customer)

    def fulfill_order(self, order_id: str, tracking_number: str, carrier: str) -> bool:
        return self.checkout_service.fulfill_order(order_id, tracking_number, carrier)

    # =========================================================================
    # MARKETING
    # =========================================================================

    def update_marketing_stats(self, updates: Mapping[str, Any]) -> Optional[MarketingStats]:
        return self.marketing.update_marketing_stats(updates)

    def add_campaign(self, campaign: MarketingCampaign) -> bool:
        return self.marketing.add_campaign(campaign)

    def remove_campaign(self, campaign_id: str) -> bool:
        return self.marketing.remove_campaign(campaign_id)

    def add_review(self, review: CustomerReview) -> bool:
        return self.marketing.add_review(review)

    def reply_to_review(self, review_id: str, reply: str) -> bool:
        return self.marketing.reply_to_review(review_id, reply)

    def add_discount(self, code: str, percentage: int) -> Optional[Discount]:
        return self.marketing.add_discount(code, percentage)

    def toggle_discount(self, discount_id: str) -> bool:
        return self.marketing.toggle_discount(discount_id)

    def remove_discount(self, discount_id: str) -> bool:
        return self.marketing.remove_discount(discount_id)

    async def start_duel(self) -> Optional[DuelScenario]:
        return await self.marketing.start_duel()

    def resolve_duel(self, scenario: DuelScenario, choice: Literal["A", "B"], wager: int) -> Optional[MarketingStats]:
        return self.marketing.resolve_duel(scenario, choice, wager)

    async def generate_social_post(self, product: Product, platform: str) -> Optional[SocialPostContent]:
        if self.ai is None:
            return None
        return await self.ai.generate_social_post(product, platform, self.brand_identity)

    async def chat_with_brand(self, message: str, history: List[ChatTurn]) -> str:
        if self.ai is None:
            return "AI not configured."
        return await self.ai.chat_with_brand_persona(message, history, self.brand_identity, self.store_settings.name)

    async def analyze_sales(self) -> str:
        if self.ai is None:
            return "AI not configured."
        return await self.ai.analyze_sales_data(self.sales_data)

    async def generate_store_concept(self, topic: str) -> str:
        if self.ai is None:
            return "AI not configured."
        return await self.ai.generate_store_concept(topic)

    # =========================================================================
    # PAGE BUILDER
    # =========================================================================

    def add_section(self, section_type: SectionType | str, initial_content: Optional[Mapping[str, Any]] = None) -> Optional[ProfileSection]:
        return self.sections_service.add_section(section_type, initial_content)

    def remove_section(self, section_id: str) -> bool:
        return self.sections_service.remove_section(section_id)

    def update_section(self, section_id: str, content: Mapping[str, Any]) -> bool:
        return self.sections_service.update_section(section_id, content)

    def toggle_section_visibility(self, section_id: str) -> bool:
        return self.sections_service.toggle_section_visibility(section_id)

    def move_section(self, section_id: str, direction: Literal["up", "down"]) -> bool:
        return self.sections_service.move_section(section_id, direction)

    # =========================================================================
    # SESSION
    # =========================================================================

    def sign_out(self):
        self.session.sign_out()

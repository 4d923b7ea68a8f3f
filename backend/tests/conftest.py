# backend/tests/conftest.py
"""
Shared fixtures: settings without environment leakage, in-memory storage,
a controllable clock and a storefront wired to fakes.
"""

from decimal import Decimal
from unittest.mock import AsyncMock, MagicMock

import pytest

from shopgenie.config import Settings
from shopgenie.integrations.base import CatalogAccount, CatalogConnector, CatalogItem, CatalogPrice
from shopgenie.models.product import Product
from shopgenie.services.notifications import NotificationChannel
from shopgenie.services.persistence import MemoryStorage, SnapshotStore
from shopgenie.services.collection import StoreCollection
from shopgenie.services.storefront import Storefront


class FakeClock:
    """Monotonic clock advanced by hand."""

    def __init__(self, now: float = 0.0):
        self.now = now

    def __call__(self) -> float:
        return self.now

    def advance(self, seconds: float):
        self.now += seconds


@pytest.fixture
def settings():
    return Settings(
        _env_file=None,
        DEBUG=True,
        STORAGE_BACKEND="memory",
        GEMINI_API_KEY=None,
        NOTIFICATION_TTL_SECONDS=3.0,
        LIVE_FEED_LIMIT=20,
        DEFAULT_TAX_RATE=Decimal("0.08"),
        LEVEL_UP_THRESHOLD=5000,
    )


@pytest.fixture
def storage():
    return MemoryStorage()


@pytest.fixture
def clock():
    return FakeClock()


@pytest.fixture
def notifier(clock):
    return NotificationChannel(ttl_seconds=3.0, clock=clock)


@pytest.fixture
def collection(storage, notifier, settings):
    return StoreCollection(SnapshotStore(storage), notifier, settings=settings)


@pytest.fixture
def connector():
    """Catalog connector double that succeeds by default."""
    mock = MagicMock(spec=CatalogConnector)
    mock.create_product = AsyncMock(return_value=CatalogItem(id="prod_123", name="Tee"))
    mock.create_price = AsyncMock(return_value=CatalogPrice(id="price_456", product_id="prod_123", unit_amount=2500, currency="usd"))
    mock.update_product = AsyncMock(return_value=CatalogItem(id="prod_123", name="Tee"))
    mock.retrieve_account = AsyncMock(return_value=CatalogAccount(id="acct_1", email="owner@example.com"))
    return mock


@pytest.fixture
def connector_factory(connector):
    return MagicMock(return_value=connector)


@pytest.fixture
def ai():
    """AI collaborator double; every contract returns None unless a test sets it."""
    mock = MagicMock()
    mock.generate_product_details = AsyncMock(return_value=None)
    mock.generate_brand_strategy = AsyncMock(return_value=None)
    mock.generate_duel_scenario = AsyncMock(return_value=None)
    mock.generate_social_post = AsyncMock(return_value=None)
    mock.chat_with_brand_persona = AsyncMock(return_value="Hello from the brand.")
    mock.analyze_sales_data = AsyncMock(return_value="Sales are flat.")
    mock.generate_store_concept = AsyncMock(return_value="Tagline: Brew joy | Theme: Warm earth tones")
    return mock


@pytest.fixture
def storefront(collection, notifier, ai, connector_factory, settings):
    return Storefront(collection, notifier, ai=ai, connector_factory=connector_factory, settings=settings)


@pytest.fixture
def shop(storefront):
    """Storefront with one active store."""
    storefront.create_store("Demo Shop", "General")
    storefront.notifier.clear()
    return storefront


def make_product(**overrides) -> Product:
    data = {"title": "Tee", "description": "Soft cotton tee", "price": Decimal("25"), "inventory": 5}
    data.update(overrides)
    return Product(**data)


def messages(notifier: NotificationChannel):
    return [n.message for n in notifier.notifications]

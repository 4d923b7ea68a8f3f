"""
Product catalog with a best-effort Stripe mirror.

Local state is always written first. Creating a product then runs a
reconciliation task that calls Stripe and, on completion, patches only the
Stripe ids onto the product in the store it was created in. Updates to title
or description are pushed to Stripe in a detached task whose failures are
only logged. Deletes never reach Stripe.
"""

import asyncio
import logging
from typing import Any, Callable, Dict, Mapping, Optional, Set

from shopgenie.config import Settings, get_settings
from shopgenie.integrations.base import CatalogConnector
from shopgenie.integrations.stripe_catalog import StripeCatalogClient, is_usable_secret_key, to_minor_units
from shopgenie.models.product import Product
from shopgenie.models.store import Store
from shopgenie.services.collection import StoreCollection
from shopgenie.services.notifications import NotificationChannel

logger = logging.getLogger(__name__)

ConnectorFactory = Callable[[str], CatalogConnector]

SYNCED_FIELDS = ("title", "description")


class CatalogService:

    def __init__(
        self,
        collection: StoreCollection,
        notifier: NotificationChannel,
        connector_factory: Optional[ConnectorFactory] = None,
        settings: Optional[Settings] = None,
    ):
        self.collection = collection
        self.notifier = notifier
        self.settings = settings or get_settings()
        self.connector_factory = connector_factory or (lambda key: StripeCatalogClient(key, settings=self.settings))
        self._pending: Set[asyncio.Task] = set()

    def secret_key_for(self, store: Store) -> str:
        """The store's own secret key, else the platform key."""
        return store.settings.stripe_secret_key or self.collection.platform_credentials.secret_key

    def _track(self, coro) -> asyncio.Task:
        task = asyncio.create_task(coro)
        self._pending.add(task)
        task.add_done_callback(self._pending.discard)
        return task

    async def drain(self):
        """Wait for every outstanding Stripe task."""
        while self._pending:
            await asyncio.gather(*list(self._pending), return_exceptions=True)

    # =========================================================================
    # CREATE
    # =========================================================================

    async def add_product(self, product: Product, wait_for_sync: bool = True) -> bool:
        """
        Insert `product` at the head of the active store's catalog, then
        mirror it to Stripe when a usable secret key is available.

        With wait_for_sync=False the Stripe round trip is left running in the
        background; drain() waits for it.
        """
        store = self.collection.find(self.collection.active_id)
        if store is None:
            return False

        self.collection.update_store(store.id, lambda s: s.model_copy(update={"products": [product, *s.products]}))
        self.notifier.notify("Product added.")

        secret_key = self.secret_key_for(store)
        if not is_usable_secret_key(secret_key):
            return True

        task = self._track(self._reconcile_new_product(store.id, product, secret_key, store.settings.currency))
        if wait_for_sync:
            await task
        return True

    async def _reconcile_new_product(self, store_id: str, product: Product, secret_key: str, currency: str):
        connector = self.connector_factory(secret_key)
        ids: Dict[str, str] = {}
        try:
            item = await connector.create_product(
                name=product.title,
                description=product.description,
                images=[product.image] if product.image else [],
            )
            ids["stripe_product_id"] = item.id
            price = await connector.create_price(item.id, to_minor_units(product.price), (currency or "usd").lower())
            ids["stripe_price_id"] = price.id
        except Exception as e:
            logger.warning(f"Stripe sync failed for product {product.id} in store {store_id}: {e}")
            self.notifier.notify("Stripe sync failed, created locally only.", "error")
        else:
            logger.info(f"Synced product {product.id} to Stripe as {ids['stripe_product_id']}")
            self.notifier.notify("Synced to Stripe Catalog!")

        if ids:
            self._patch_stripe_ids(store_id, product.id, ids)

    def _patch_stripe_ids(self, store_id: str, product_id: str, ids: Mapping[str, str]) -> bool:
        """Write the Stripe ids onto one product; nothing else on the store changes."""
        store = self.collection.find(store_id)
        if store is None or not any(p.id == product_id for p in store.products):
            logger.info(f"Product {product_id} no longer in store {store_id}; dropping Stripe ids")
            return False
        return self.collection.update_store(store_id, lambda s: s.model_copy(update={
            "products": [p.model_copy(update=dict(ids)) if p.id == product_id else p for p in s.products],
        }))

    # =========================================================================
    # UPDATE / DELETE
    # =========================================================================

    def update_product(self, product_id: str, updates: Mapping[str, Any]) -> bool:
        store = self.collection.find(self.collection.active_id)
        existing = next((p for p in store.products if p.id == product_id), None) if store else None
        if existing is None:
            return False

        updated = existing.merged(updates)
        self.collection.update_store(store.id, lambda s: s.model_copy(update={
            "products": [updated if p.id == product_id else p for p in s.products],
        }))
        self.notifier.notify("Product updated.")

        touched = {Product.field_name(key) for key in updates}
        secret_key = self.secret_key_for(store)
        if existing.stripe_product_id and touched.intersection(SYNCED_FIELDS) and is_usable_secret_key(secret_key):
            try:
                asyncio.get_running_loop()
            except RuntimeError:
                logger.debug(f"No event loop; skipping Stripe update for {existing.stripe_product_id}")
                return True
            self._track(self._push_product_update(updated, secret_key))
        return True

    async def _push_product_update(self, product: Product, secret_key: str):
        try:
            await self.connector_factory(secret_key).update_product(
                product.stripe_product_id,
                name=product.title,
                description=product.description,
            )
            logger.info(f"Stripe product {product.stripe_product_id} updated")
        except Exception as e:
            logger.warning(f"Stripe update failed for {product.stripe_product_id}: {e}")

    def delete_product(self, product_id: str) -> bool:
        store = self.collection.find(self.collection.active_id)
        if store is None or not any(p.id == product_id for p in store.products):
            return False
        self.collection.update_store(store.id, lambda s: s.model_copy(update={
            "products": [p for p in s.products if p.id != product_id],
        }))
        self.notifier.notify("Product deleted.")
        return True

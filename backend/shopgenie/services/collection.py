"""
StoreCollection - owner of every store, the active selection and the
global Stripe keys.

Every write replaces the whole TenantCollection value and persists the
slices that changed. Nothing outside this class keeps a reference to a
Store: reads resolve the active store on demand, writes go through
update_active_store() (or update_store() for a specific tenant).
"""

import logging
import random
from typing import Callable, List, Optional

from shopgenie.config import Settings, get_settings
from shopgenie.models.brand import BrandColors, BrandIdentity
from shopgenie.models.defaults import accent_color_for, default_sections, initial_sales_data
from shopgenie.models.store import PlatformCredentials, Store, StoreSettings, TenantCollection
from shopgenie.services.notifications import NotificationChannel
from shopgenie.services.persistence import SnapshotStore

logger = logging.getLogger(__name__)

StoreTransform = Callable[[Store], Store]


class StoreCollection:

    def __init__(
        self,
        snapshots: SnapshotStore,
        notifier: NotificationChannel,
        settings: Optional[Settings] = None,
    ):
        self.snapshots = snapshots
        self.notifier = notifier
        self.settings = settings or get_settings()
        self._state = snapshots.load()
        self._tenant_change_listeners: List[Callable[[], None]] = []
        logger.info(f"Loaded {len(self._state.stores)} store(s), active id '{self._state.active_id}'")

    # =========================================================================
    # READS
    # =========================================================================

    @property
    def state(self) -> TenantCollection:
        return self._state

    @property
    def stores(self) -> List[Store]:
        return self._state.stores

    @property
    def active_id(self) -> str:
        return self._state.active_id

    @property
    def platform_credentials(self) -> PlatformCredentials:
        return self._state.platform_credentials

    @property
    def active_store(self) -> Optional[Store]:
        """Store shown to the user; falls back to the first store."""
        return self._state.active_store

    def find(self, store_id: str) -> Optional[Store]:
        return self._state.find(store_id)

    # =========================================================================
    # WRITES
    # =========================================================================

    def on_tenant_change(self, listener: Callable[[], None]):
        """Register a callback run after a store is created or switched to."""
        self._tenant_change_listeners.append(listener)

    def _commit(self, new_state: TenantCollection):
        previous = self._state
        if new_state is previous:
            return
        self._state = new_state
        self.snapshots.save(previous, new_state)

    def _tenant_changed(self):
        for listener in self._tenant_change_listeners:
            listener()

    def update_store(self, store_id: str, transform: StoreTransform) -> bool:
        """
        Replace the store with `store_id` by transform(store).

        Returns False, changing nothing, when no store has that id.
        """
        if self._state.find(store_id) is None:
            logger.debug(f"update_store: no store with id '{store_id}'")
            return False
        self._commit(self._state.replace_store(store_id, transform))
        return True

    def update_active_store(self, transform: StoreTransform) -> bool:
        """
        Replace the active store by transform(store).

        Unlike the active_store read, this does not fall back to the first
        store: with no store matching active_id the call is a no-op.
        """
        return self.update_store(self._state.active_id, transform)

    def create_store(self, name: str, category: str) -> Store:
        credentials = self._state.platform_credentials
        platform_mode = bool(credentials.secret_key)
        theme_color = accent_color_for(category)

        store = Store(
            stripe_account_id=f"acct_virtual_{random.randint(0, 99999999):08d}" if platform_mode else None,
            settings=StoreSettings(
                name=name,
                category=category,
                primary_color=theme_color,
                logo=f"https://via.placeholder.com/200x200?text={name[:1]}",
                stripe_connected=platform_mode,
                stripe_public_key=credentials.public_key,
                stripe_secret_key=credentials.secret_key,
                tax_rate=self.settings.DEFAULT_TAX_RATE,
            ),
            brand_identity=BrandIdentity(colors=BrandColors(primary=theme_color)),
            sales_data=initial_sales_data(),
            sections=default_sections(),
        )

        self._commit(self._state.model_copy(update={
            "stores": [*self._state.stores, store],
            "active_id": store.id,
        }))
        self._tenant_changed()
        logger.info(f"Created store {store.id} ({name}, {category})")
        self.notifier.notify(f'Store "{name}" created!', "success")
        return store

    def switch_store(self, store_id: str) -> bool:
        target = self._state.find(store_id)
        if target is None:
            return False
        self._commit(self._state.model_copy(update={"active_id": store_id}))
        self._tenant_changed()
        self.notifier.notify(f"Switched to: {target.settings.name}", "info")
        return True

    def update_platform_credentials(self, public_key: str, secret_key: str):
        """
        Replace the global Stripe keys and stamp them onto every store's
        settings, marking all stores payment-enabled.
        """
        stores = [
            store.model_copy(update={
                "settings": store.settings.model_copy(update={
                    "stripe_public_key": public_key,
                    "stripe_secret_key": secret_key,
                    "stripe_connected": True,
                }),
            })
            for store in self._state.stores
        ]
        self._commit(self._state.model_copy(update={
            "stores": stores,
            "platform_credentials": PlatformCredentials(public_key=public_key, secret_key=secret_key),
        }))
        self.notifier.notify("Stripe keys updated globally.")

    def archive_store(self, store_id: str) -> bool:
        """Archiving is not supported yet; stores are never removed."""
        store = self._state.find(store_id)
        if store is None:
            return False
        self.notifier.notify(f"Archiving is not available yet for {store.settings.name}.", "info")
        return False

"""
Store settings and brand identity updates.

BrandIdentity and StoreSettings overlap (primary/background/text color, body
font, border radius, logo). Brand updates write the identity first and then
project the touched fields onto settings through project_brand_onto_settings(),
so readers of either representation stay consistent.
"""

import logging
from typing import Any, Dict, Mapping, Optional

from pydantic import BaseModel

from shopgenie.integrations.gemini import GeminiClient
from shopgenie.models.brand import BrandIdentity
from shopgenie.models.store import Store, StoreSettings
from shopgenie.services.collection import StoreCollection
from shopgenie.services.notifications import NotificationChannel

logger = logging.getLogger(__name__)

NESTED_BRAND_GROUPS = ("colors", "typography", "styling")


def _as_updates(value: Any) -> Dict[str, Any]:
    if isinstance(value, BaseModel):
        return value.model_dump(exclude_unset=True)
    return dict(value)


def _group_value(updates: Mapping[str, Any], group: str, key: str) -> Any:
    """Read updates[group][key], accepting field names or camelCase aliases."""
    values = updates.get(group) or {}
    if isinstance(values, BaseModel):
        values = values.model_dump(exclude_unset=True)
    model = type(getattr(BrandIdentity(), group))
    for name, value in values.items():
        if model.field_name(name) == key:
            return value
    return None


def merge_brand_identity(current: BrandIdentity, updates: Mapping[str, Any]) -> BrandIdentity:
    """
    Merge `updates` into `current`. colors, typography and styling are merged
    field by field, so a partial colors update keeps the other colors.
    """
    changes: Dict[str, Any] = {}
    for key, value in updates.items():
        name = BrandIdentity.field_name(key)
        if name in NESTED_BRAND_GROUPS:
            if value is not None:
                changes[name] = getattr(current, name).merged(_as_updates(value))
        else:
            changes[name] = value
    return current.merged(changes)


def _pixels(value: float) -> str:
    return f"{value:g}px"


def project_brand_onto_settings(settings: StoreSettings, updates: Mapping[str, Any]) -> StoreSettings:
    """
    Copy the brand fields present in `updates` onto the legacy settings.

    Only fields the update actually carries are projected; unrelated
    settings are left alone.
    """
    projected: Dict[str, Any] = {}

    primary = _group_value(updates, "colors", "primary")
    if primary:
        projected["primary_color"] = primary
    background = _group_value(updates, "colors", "background")
    if background:
        projected["background_color"] = background
    text = _group_value(updates, "colors", "text")
    if text:
        projected["text_color"] = text
    body_font = _group_value(updates, "typography", "body_font")
    if body_font:
        projected["font_family"] = body_font
    radius = _group_value(updates, "styling", "border_radius")
    if radius is not None:
        projected["border_radius"] = _pixels(float(radius))
    logo = updates.get("logo_url") or updates.get("logoUrl")
    if logo:
        projected["logo"] = logo

    if not projected:
        return settings
    return settings.model_copy(update=projected)


class BrandingService:
    """Settings and brand identity mutations on the active store."""

    def __init__(self, collection: StoreCollection, notifier: NotificationChannel, ai: Optional[GeminiClient] = None):
        self.collection = collection
        self.notifier = notifier
        self.ai = ai

    def update_settings(self, updates: Mapping[str, Any]) -> bool:
        """Shallow-merge `updates` into the active store's settings."""
        changed = self.collection.update_active_store(
            lambda store: store.model_copy(update={"settings": store.settings.merged(updates)})
        )
        self.notifier.notify("Settings saved.")
        return changed

    def update_brand_identity(self, updates: Mapping[str, Any]) -> bool:
        def apply(store: Store) -> Store:
            identity = merge_brand_identity(store.brand_identity, updates)
            return store.model_copy(update={
                "brand_identity": identity,
                "settings": project_brand_onto_settings(store.settings, updates),
            })

        return self.collection.update_active_store(apply)

    async def apply_brand_strategy(self) -> bool:
        """Ask the AI collaborator for mission/vision/values/tone and apply them."""
        store = self.collection.active_store
        if store is None or self.ai is None:
            return False
        strategy = await self.ai.generate_brand_strategy(store.settings.name, store.settings.category)
        if strategy is None:
            logger.warning(f"No brand strategy generated for store {store.id}")
            self.notifier.notify("Could not generate a brand strategy. Try again.", "error")
            return False
        self.update_brand_identity(strategy.model_dump())
        self.notifier.notify("Brand strategy applied.")
        return True

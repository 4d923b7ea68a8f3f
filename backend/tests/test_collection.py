# backend/tests/test_collection.py
"""
Tests for the store collection: tenant creation, switching, platform keys
and the active-store replace primitive.
"""

import json

from shopgenie.models.sections import SectionType
from shopgenie.services.collection import StoreCollection
from shopgenie.services.persistence import SnapshotStore

from conftest import make_product, messages


def test_create_store_builds_full_defaults(collection, notifier):
    store = collection.create_store("Glow Lab", "Beauty & Skincare")

    assert collection.active_id == store.id
    assert store.settings.primary_color == "#E91E63"
    assert store.brand_identity.colors.primary == "#E91E63"
    assert [s.type for s in store.sections] == [SectionType.HERO, SectionType.PRODUCTS]
    assert store.sections[0].content.headline == "Welcome to My Store"
    assert store.sections[1].content.title == "Latest Drops"
    assert len(store.sales_data) == 7
    assert all(entry.sales == 0 and entry.visitors == 0 for entry in store.sales_data)
    assert store.marketing_stats.level == 1
    assert store.marketing_stats.title == "Apprentice"
    assert store.products == [] and store.orders == [] and store.discounts == []
    assert store.stripe_account_id is None
    assert store.settings.stripe_connected is False
    assert messages(notifier) == ['Store "Glow Lab" created!']


def test_create_store_accent_colors(collection):
    assert collection.create_store("A", "Streetwear Fashion").settings.primary_color == "#111B21"
    assert collection.create_store("B", "Tech Gadgets").settings.primary_color == "#007AFF"
    assert collection.create_store("C", "Garden").settings.primary_color == "#00A884"


def test_create_store_in_platform_mode(collection):
    collection.update_platform_credentials("pk_live_1", "sk_live_1")

    store = collection.create_store("Platform Shop", "General")

    assert store.stripe_account_id.startswith("acct_virtual_")
    assert store.settings.stripe_connected is True
    assert store.settings.stripe_public_key == "pk_live_1"
    assert store.settings.stripe_secret_key == "sk_live_1"


def test_switch_to_unknown_store_is_silent(collection, notifier):
    store = collection.create_store("One", "General")
    notifier.clear()

    assert collection.switch_store("missing") is False
    assert collection.active_id == store.id
    assert notifier.notifications == []


def test_switch_store_notifies_with_name(collection, notifier):
    first = collection.create_store("One", "General")
    collection.create_store("Two", "General")
    notifier.clear()

    assert collection.switch_store(first.id) is True

    assert collection.active_id == first.id
    assert notifier.notifications[0].message == "Switched to: One"
    assert notifier.notifications[0].type == "info"


def test_tenant_change_listeners_run_on_create_and_switch(collection):
    calls = []
    collection.on_tenant_change(lambda: calls.append("changed"))

    first = collection.create_store("One", "General")
    collection.switch_store(first.id)
    collection.switch_store("missing")

    assert calls == ["changed", "changed"]


def test_platform_credentials_stamp_every_store(collection, notifier):
    collection.create_store("One", "General")
    collection.create_store("Two", "General")

    collection.update_platform_credentials("pk_test_9", "sk_test_9")

    assert collection.platform_credentials.secret_key == "sk_test_9"
    for store in collection.stores:
        assert store.settings.stripe_connected is True
        assert store.settings.stripe_public_key == "pk_test_9"
        assert store.settings.stripe_secret_key == "sk_test_9"
    assert messages(notifier)[-1] == "Stripe keys updated globally."


def test_update_active_store_replaces_only_active_entry(collection):
    a = collection.create_store("A", "General")
    b = collection.create_store("B", "General")
    c = collection.create_store("C", "General")
    collection.switch_store(b.id)
    before = list(collection.stores)

    changed = collection.update_active_store(
        lambda s: s.model_copy(update={"products": [make_product()]})
    )

    assert changed is True
    after = collection.stores
    assert [s.id for s in after] == [a.id, b.id, c.id]
    assert after[0] is before[0]
    assert after[2] is before[2]
    assert len(after[1].products) == 1


def test_update_active_store_without_match_is_noop(collection):
    collection.create_store("A", "General")
    collection._state = collection.state.model_copy(update={"active_id": "gone"})
    before = collection.state

    changed = collection.update_active_store(lambda s: s.model_copy(update={"products": [make_product()]}))

    assert changed is False
    assert collection.state is before
    # Reads still fall back to the first store
    assert collection.active_store is before.stores[0]


def test_update_active_store_on_empty_collection(collection):
    assert collection.active_store is None
    assert collection.update_active_store(lambda s: s) is False


def test_every_change_is_persisted(storage, notifier, settings):
    collection = StoreCollection(SnapshotStore(storage), notifier, settings=settings)
    store = collection.create_store("Saved", "General")
    collection.update_active_store(lambda s: s.model_copy(update={"products": [make_product(title="Mug")]}))

    assert storage.data["shopgenie_active_id"] == store.id
    saved = json.loads(storage.data["shopgenie_stores"])
    assert saved[0]["products"][0]["title"] == "Mug"

    reloaded = StoreCollection(SnapshotStore(storage), notifier, settings=settings)
    assert reloaded.active_store.products[0].title == "Mug"
    assert reloaded.active_store.sections[0].content.headline == "Welcome to My Store"


def test_archive_store_is_not_supported(collection, notifier):
    store = collection.create_store("Keep", "General")
    notifier.clear()

    assert collection.archive_store(store.id) is False
    assert collection.find(store.id) is not None
    assert notifier.notifications[0].type == "info"

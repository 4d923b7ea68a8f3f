# backend/tests/test_notifications.py
"""
Tests for the notification channel: ordering, idempotent dismissal and
expiry both with and without a running event loop.
"""

import asyncio

import pytest

from shopgenie.services.notifications import NotificationChannel


def test_notify_appends_in_order(notifier):
    first = notifier.notify("Saved")
    second = notifier.notify("Oops", "error")

    items = notifier.notifications
    assert [n.id for n in items] == [first, second]
    assert items[1].type == "error"
    assert first != second


def test_dismiss_is_idempotent(notifier):
    notification_id = notifier.notify("Hello")

    notifier.dismiss(notification_id)
    notifier.dismiss(notification_id)
    notifier.dismiss("never-existed")

    assert notifier.notifications == []


def test_expiry_without_event_loop(notifier, clock):
    notifier.notify("Old")
    clock.advance(2.0)
    notifier.notify("New")

    clock.advance(1.0)
    assert [n.message for n in notifier.notifications] == ["New"]

    clock.advance(2.0)
    assert notifier.notifications == []


@pytest.mark.asyncio
async def test_timer_dismisses_inside_event_loop():
    channel = NotificationChannel(ttl_seconds=0.01)
    channel.notify("Short lived")
    assert len(channel._items) == 1

    await asyncio.sleep(0.05)

    assert channel._items == []


@pytest.mark.asyncio
async def test_manual_dismiss_cancels_timer():
    channel = NotificationChannel(ttl_seconds=10)
    notification_id = channel.notify("Bye")
    timer = channel._items[0].timer

    channel.dismiss(notification_id)

    assert timer.cancelled()
    assert channel.notifications == []

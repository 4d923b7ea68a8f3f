# backend/tests/test_marketing.py
"""
Tests for marketing stats (level-up rule), campaigns, reviews, discounts
and the duel arena.
"""

import pytest

from shopgenie.models.ai import DuelScenario
from shopgenie.models.marketing import CustomerReview, MarketingCampaign, MarketingStats
from shopgenie.services.marketing import apply_level_up

from conftest import messages


@pytest.fixture
def scenario():
    return DuelScenario(
        product_name="AeroMug",
        product_context="A self-heating travel mug",
        option_a="Coffee that stays hot. Finally.",
        option_b="A mug for your coffee.",
        winner="A",
        reason="Specific benefit with a hook.",
        odds=1.8,
    )


# ============================================================================
# LEVEL-UP RULE
# ============================================================================

def test_earnings_at_threshold_do_not_level_up():
    stats, leveled = apply_level_up(MarketingStats(total_earnings=5000), 5000)
    assert leveled is False
    assert stats.level == 1


def test_earnings_past_threshold_level_up_once():
    stats, leveled = apply_level_up(MarketingStats(total_earnings=5001), 5000)
    assert leveled is True
    assert stats.level == 2
    assert stats.title == "Strategist"


def test_large_jump_advances_a_single_level():
    stats, _ = apply_level_up(MarketingStats(total_earnings=50000), 5000)
    assert stats.level == 2


def test_title_clamps_to_last_rank():
    stats, _ = apply_level_up(MarketingStats(level=6, title="Legend", total_earnings=40000), 5000)
    assert stats.level == 7
    assert stats.title == "Legend"


def test_update_marketing_stats_boundary(shop):
    shop.update_marketing_stats({"total_earnings": 4999})

    shop.update_marketing_stats({"total_earnings": 5000})
    assert shop.marketing_stats.level == 1

    shop.update_marketing_stats({"totalEarnings": 5001})
    assert shop.marketing_stats.level == 2
    assert shop.marketing_stats.title == "Strategist"
    assert messages(shop.notifier) == ["Leveled Up! You are now a Strategist"]


def test_unrelated_update_still_checks_level(shop):
    shop.collection.update_active_store(lambda s: s.model_copy(update={
        "marketing_stats": s.marketing_stats.model_copy(update={"total_earnings": 6000}),
    }))

    stats = shop.update_marketing_stats({"ad_credits": 900})

    assert stats.level == 2
    assert stats.ad_credits == 900


# ============================================================================
# CAMPAIGNS, REVIEWS, DISCOUNTS
# ============================================================================

def test_campaign_add_and_remove(shop):
    campaign = MarketingCampaign(title="Summer drop", platform="Instagram")

    assert shop.add_campaign(campaign) is True
    assert shop.campaigns == [campaign]
    assert shop.remove_campaign(campaign.id) is True
    assert shop.campaigns == []
    assert shop.remove_campaign(campaign.id) is False
    assert messages(shop.notifier) == ["Campaign scheduled.", "Campaign removed."]


def test_review_reply(shop):
    review = CustomerReview(customer_name="Ana", rating=5, comment="Love it", sentiment="positive")
    shop.add_review(review)

    assert shop.reply_to_review(review.id, "Thank you!") is True
    assert shop.reviews[0].reply == "Thank you!"
    assert shop.reply_to_review("missing", "Hi") is False
    assert messages(shop.notifier) == ["Review added.", "Reply posted."]


def test_discount_lifecycle(shop):
    discount = shop.add_discount("SAVE10", 10)

    assert discount.active is True
    assert shop.discounts[0].code == "SAVE10"

    shop.toggle_discount(discount.id)
    assert shop.discounts[0].active is False

    shop.remove_discount(discount.id)
    assert shop.discounts == []
    assert messages(shop.notifier)[0] == "Discount SAVE10 created."


def test_discount_rejects_bad_percentage(shop):
    assert shop.add_discount("FREE", 0) is None
    assert shop.discounts == []
    assert shop.notifier.notifications[0].type == "error"


# ============================================================================
# DUEL ARENA
# ============================================================================

@pytest.mark.asyncio
async def test_start_duel_requires_credits(shop, ai, scenario):
    shop.update_marketing_stats({"ad_credits": 5})
    ai.generate_duel_scenario.return_value = scenario

    assert await shop.start_duel() is None
    assert messages(shop.notifier)[-1] == "Insufficient Ad Credits. Wait for daily reset."
    ai.generate_duel_scenario.assert_not_awaited()


@pytest.mark.asyncio
async def test_start_duel_uses_store_category(shop, ai, scenario):
    ai.generate_duel_scenario.return_value = scenario

    assert await shop.start_duel() == scenario
    ai.generate_duel_scenario.assert_awaited_once_with("General")


@pytest.mark.asyncio
async def test_start_duel_failure_notifies(shop, ai):
    assert await shop.start_duel() is None
    assert messages(shop.notifier) == ["Failed to generate scenario. Try again."]


def test_winning_duel(shop, scenario):
    stats = shop.resolve_duel(scenario, "A", 100)

    assert stats.ad_credits == 1180
    assert stats.wins == 1
    assert stats.streak == 1
    assert stats.total_earnings == 180
    assert messages(shop.notifier) == ["You won 180 Credits!"]


def test_losing_duel_resets_streak(shop, scenario):
    shop.resolve_duel(scenario, "A", 100)

    stats = shop.resolve_duel(scenario, "B", 200)

    assert stats.ad_credits == 980
    assert stats.losses == 1
    assert stats.streak == 0
    assert stats.total_earnings == 180
    assert shop.notifier.notifications[-1].message == "Lost 200 Credits. Better luck next time!"


def test_wager_must_fit_credits(shop, scenario):
    assert shop.resolve_duel(scenario, "A", 0) is None
    assert shop.resolve_duel(scenario, "A", 1001) is None
    assert shop.marketing_stats == MarketingStats()


def test_resolve_duel_without_matching_active_store(shop, scenario):
    shop.collection._state = shop.collection.state.model_copy(update={"active_id": "gone"})

    assert shop.resolve_duel(scenario, "A", 100) is None
    assert messages(shop.notifier) == []
    assert shop.collection.stores[0].marketing_stats == MarketingStats()

"""
Marketing mutations: campaigns, reviews, discounts, gamified stats and the
marketing duel arena.
"""

import logging
import math
from typing import Any, Literal, Mapping, Optional, Tuple

from shopgenie.config import Settings, get_settings
from shopgenie.integrations.gemini import GeminiClient
from shopgenie.models.ai import DuelScenario
from shopgenie.models.marketing import RANK_TITLES, CustomerReview, Discount, MarketingCampaign, MarketingStats
from shopgenie.models.store import Store
from shopgenie.services.collection import StoreCollection
from shopgenie.services.notifications import NotificationChannel

logger = logging.getLogger(__name__)

MIN_DUEL_CREDITS = 10


def apply_level_up(stats: MarketingStats, threshold: int = 5000) -> Tuple[MarketingStats, bool]:
    """
    Promote one level when total earnings exceed level * threshold.

    Checked once per call: an earnings jump spanning several thresholds
    still advances a single level. The title is clamped to the last rank.
    """
    if stats.total_earnings > stats.level * threshold:
        level = stats.level + 1
        title = RANK_TITLES[min(level - 1, len(RANK_TITLES) - 1)]
        return stats.model_copy(update={"level": level, "title": title}), True
    return stats, False


class MarketingService:

    def __init__(
        self,
        collection: StoreCollection,
        notifier: NotificationChannel,
        ai: Optional[GeminiClient] = None,
        settings: Optional[Settings] = None,
    ):
        self.collection = collection
        self.notifier = notifier
        self.ai = ai
        self.settings = settings or get_settings()

    # --- Stats ---

    def update_marketing_stats(self, updates: Mapping[str, Any]) -> Optional[MarketingStats]:
        """Merge `updates` into the stats, then run the level-up rule once."""
        result = {}

        def apply(store: Store) -> Store:
            stats, leveled = apply_level_up(store.marketing_stats.merged(updates), self.settings.LEVEL_UP_THRESHOLD)
            result["stats"], result["leveled"] = stats, leveled
            return store.model_copy(update={"marketing_stats": stats})

        if not self.collection.update_active_store(apply):
            return None
        if result["leveled"]:
            self.notifier.notify(f"Leveled Up! You are now a {result['stats'].title}", "success")
        return result["stats"]

    # --- Campaigns ---

    def add_campaign(self, campaign: MarketingCampaign) -> bool:
        changed = self.collection.update_active_store(
            lambda store: store.model_copy(update={"campaigns": [*store.campaigns, campaign]})
        )
        if changed:
            self.notifier.notify("Campaign scheduled.")
        return changed

    def remove_campaign(self, campaign_id: str) -> bool:
        store = self.collection.find(self.collection.active_id)
        if store is None or not any(c.id == campaign_id for c in store.campaigns):
            return False
        self.collection.update_active_store(
            lambda s: s.model_copy(update={"campaigns": [c for c in s.campaigns if c.id != campaign_id]})
        )
        self.notifier.notify("Campaign removed.")
        return True

    # --- Reviews ---

    def add_review(self, review: CustomerReview) -> bool:
        changed = self.collection.update_active_store(
            lambda store: store.model_copy(update={"reviews": [review, *store.reviews]})
        )
        if changed:
            self.notifier.notify("Review added.")
        return changed

    def reply_to_review(self, review_id: str, reply: str) -> bool:
        store = self.collection.find(self.collection.active_id)
        if store is None or not any(r.id == review_id for r in store.reviews):
            return False
        self.collection.update_active_store(lambda s: s.model_copy(update={
            "reviews": [r.model_copy(update={"reply": reply}) if r.id == review_id else r for r in s.reviews],
        }))
        self.notifier.notify("Reply posted.")
        return True

    # --- Discounts ---

    def add_discount(self, code: str, percentage: int) -> Optional[Discount]:
        if not 0 < percentage <= 100:
            self.notifier.notify("Discount percentage must be between 1 and 100.", "error")
            return None
        discount = Discount(code=code, percentage=percentage)
        changed = self.collection.update_active_store(
            lambda store: store.model_copy(update={"discounts": [*store.discounts, discount]})
        )
        if not changed:
            return None
        self.notifier.notify(f"Discount {code} created.")
        return discount

    def toggle_discount(self, discount_id: str) -> bool:
        store = self.collection.find(self.collection.active_id)
        target = next((d for d in store.discounts if d.id == discount_id), None) if store else None
        if target is None:
            return False
        self.collection.update_active_store(lambda s: s.model_copy(update={
            "discounts": [d.model_copy(update={"active": not d.active}) if d.id == discount_id else d for d in s.discounts],
        }))
        self.notifier.notify(f"Discount {target.code} {'paused' if target.active else 'activated'}.")
        return True

    def remove_discount(self, discount_id: str) -> bool:
        store = self.collection.find(self.collection.active_id)
        if store is None or not any(d.id == discount_id for d in store.discounts):
            return False
        self.collection.update_active_store(
            lambda s: s.model_copy(update={"discounts": [d for d in s.discounts if d.id != discount_id]})
        )
        self.notifier.notify("Discount removed.")
        return True

    # --- Growth arena ---

    async def start_duel(self) -> Optional[DuelScenario]:
        """Generate a duel scenario for the active store's category."""
        store = self.collection.find(self.collection.active_id)
        if store is None:
            return None
        if store.marketing_stats.ad_credits < MIN_DUEL_CREDITS:
            self.notifier.notify("Insufficient Ad Credits. Wait for daily reset.", "error")
            return None
        scenario = await self.ai.generate_duel_scenario(store.settings.category) if self.ai else None
        if scenario is None:
            self.notifier.notify("Failed to generate scenario. Try again.", "error")
        return scenario

    def resolve_duel(self, scenario: DuelScenario, choice: Literal["A", "B"], wager: int) -> Optional[MarketingStats]:
        """
        Settle a wager on `choice`. A win pays floor(wager * odds) credits,
        a loss forfeits the wager and resets the streak.
        """
        store = self.collection.find(self.collection.active_id)
        if store is None:
            return None
        stats = store.marketing_stats
        if wager <= 0 or wager > stats.ad_credits:
            self.notifier.notify(f"Wager must be between 1 and {stats.ad_credits} credits.", "error")
            return None

        logger.info(f"Duel on store {store.id}: picked {choice}, winner {scenario.winner}, wager {wager}")
        if choice == scenario.winner:
            earnings = math.floor(wager * scenario.odds)
            updated = self.update_marketing_stats({
                "ad_credits": stats.ad_credits + earnings,
                "wins": stats.wins + 1,
                "streak": stats.streak + 1,
                "total_earnings": stats.total_earnings + earnings,
            })
            if updated is None:
                return None
            self.notifier.notify(f"You won {earnings} Credits!", "success")
        else:
            updated = self.update_marketing_stats({
                "ad_credits": stats.ad_credits - wager,
                "losses": stats.losses + 1,
                "streak": 0,
            })
            if updated is None:
                return None
            self.notifier.notify(f"Lost {wager} Credits. Better luck next time!", "error")
        return updated

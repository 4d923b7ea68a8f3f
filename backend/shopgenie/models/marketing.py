"""
Marketing models - discounts, campaigns, reviews and the gamified stats.
"""

from typing import List, Literal, Optional

from pydantic import Field

from shopgenie.models.base import StoreModel, new_id
from shopgenie.models.order import utc_now_iso

# Rank names in promotion order; level N holds RANK_TITLES[N - 1].
RANK_TITLES: List[str] = ["Apprentice", "Strategist", "Growth Hacker", "CMO", "Tycoon", "Legend"]


class Discount(StoreModel):
    id: str = Field(default_factory=new_id)
    code: str
    percentage: int
    uses: int = 0
    active: bool = True


class MarketingCampaign(StoreModel):
    id: str = Field(default_factory=new_id)
    title: str
    platform: Literal["Instagram", "TikTok", "Email", "Blog", "YouTube"]
    status: Literal["planned", "active", "completed"] = "planned"
    date: str = Field(default_factory=utc_now_iso)
    content: str = ""


class CustomerReview(StoreModel):
    id: str = Field(default_factory=new_id)
    customer_name: str
    rating: int = Field(ge=1, le=5)
    comment: str
    date: str = Field(default_factory=utc_now_iso)
    product_id: Optional[str] = None
    sentiment: Literal["positive", "neutral", "negative"] = "neutral"
    reply: Optional[str] = None


class MarketingStats(StoreModel):
    ad_credits: int = 1000
    level: int = 1
    title: str = RANK_TITLES[0]
    wins: int = 0
    losses: int = 0
    streak: int = 0
    total_earnings: int = 0

    @property
    def win_rate(self) -> int:
        """Whole-percent win rate; 0 before the first duel."""
        played = self.wins + self.losses
        if played == 0:
            return 0
        return round(self.wins / played * 100)

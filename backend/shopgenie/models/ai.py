"""
Response contracts of the AI content collaborator.
"""

from decimal import Decimal
from typing import List, Literal

from shopgenie.models.base import StoreModel


class ProductSuggestion(StoreModel):
    description: str
    price: Decimal
    tags: List[str] = []
    marketing_hook: str = ""


class BrandStrategy(StoreModel):
    mission: str
    vision: str
    values: List[str]
    tone_of_voice: str


class DuelScenario(StoreModel):
    """Two marketing hooks for an invented product, with the better one declared."""
    product_name: str
    product_context: str
    option_a: str
    option_b: str
    winner: Literal["A", "B"]
    reason: str
    odds: float


class SocialPostContent(StoreModel):
    caption: str
    hashtags: List[str] = []
    visual_description: str = ""
    estimated_reach: str = ""
    best_time: str = ""


class ChatTurn(StoreModel):
    role: Literal["user", "model"]
    text: str

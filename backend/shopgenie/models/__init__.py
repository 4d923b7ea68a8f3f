"""
Pydantic models for the ShopGenie store engine.

This package is organized by domain:
- base.py: StoreModel base class and id helper
- product.py: Product, variants, options, buyer questions
- order.py: Cart lines, orders, sales aggregates, live feed
- marketing.py: Discounts, campaigns, reviews, marketing stats
- brand.py: Brand identity tokens
- sections.py: Page builder sections and their typed content
- store.py: Store settings, Store and the tenant collection
- ai.py: AI collaborator response contracts
- defaults.py: Initial sub-documents for new stores

For convenience, the commonly used models are re-exported from this module.
"""

# Base
from shopgenie.models.base import StoreModel, new_id

# Catalog and orders
from shopgenie.models.product import Product, ProductVariant, ProductOption, BuyerQuestion
from shopgenie.models.order import Customer, CartItem, Order, SalesData, LiveActivityItem, cart_line_key

# Marketing and brand
from shopgenie.models.marketing import Discount, MarketingCampaign, CustomerReview, MarketingStats, RANK_TITLES
from shopgenie.models.brand import BrandIdentity, BrandColors, BrandTypography, BrandStyling

# Builder
from shopgenie.models.sections import ProfileSection, SectionType, SectionContent, default_content

# Tenants
from shopgenie.models.store import Store, StoreSettings, SocialLink, PlatformCredentials, TenantCollection

# AI contracts
from shopgenie.models.ai import ProductSuggestion, BrandStrategy, DuelScenario, SocialPostContent, ChatTurn

__all__ = [
    "StoreModel",
    "new_id",
    "Product",
    "ProductVariant",
    "ProductOption",
    "BuyerQuestion",
    "Customer",
    "CartItem",
    "Order",
    "SalesData",
    "LiveActivityItem",
    "cart_line_key",
    "Discount",
    "MarketingCampaign",
    "CustomerReview",
    "MarketingStats",
    "RANK_TITLES",
    "BrandIdentity",
    "BrandColors",
    "BrandTypography",
    "BrandStyling",
    "ProfileSection",
    "SectionType",
    "SectionContent",
    "default_content",
    "Store",
    "StoreSettings",
    "SocialLink",
    "PlatformCredentials",
    "TenantCollection",
    "ProductSuggestion",
    "BrandStrategy",
    "DuelScenario",
    "SocialPostContent",
    "ChatTurn",
]

"""
Initial sub-documents for a freshly created store.
"""

from datetime import date, timedelta
from typing import List, Optional

from shopgenie.models.order import SalesData
from shopgenie.models.sections import HeroContent, ProductsContent, ProfileSection, SectionType

DEFAULT_ACCENT = "#00A884"

# Checked in order; a later match wins, so "tech beauty" resolves to beauty.
CATEGORY_ACCENTS = (
    ("fashion", "#111B21"),
    ("tech", "#007AFF"),
    ("beauty", "#E91E63"),
)

SALES_WINDOW_DAYS = 7


def accent_color_for(category: str) -> str:
    """Theme color derived from keywords in the store category."""
    color = DEFAULT_ACCENT
    lowered = category.lower()
    for keyword, accent in CATEGORY_ACCENTS:
        if keyword in lowered:
            color = accent
    return color


def initial_sales_data(today: Optional[date] = None) -> List[SalesData]:
    """Seven zeroed days labelled by weekday, oldest first."""
    today = today or date.today()
    return [
        SalesData(date=(today - timedelta(days=offset)).strftime("%a"))
        for offset in range(SALES_WINDOW_DAYS - 1, -1, -1)
    ]


def default_sections() -> List[ProfileSection]:
    return [
        ProfileSection(
            id="hero-default",
            type=SectionType.HERO,
            content=HeroContent(
                headline="Welcome to My Store",
                subheadline="Discover unique products curated just for you.",
                layout="center",
            ),
        ),
        ProfileSection(
            id="products-default",
            type=SectionType.PRODUCTS,
            content=ProductsContent(title="Latest Drops"),
        ),
    ]

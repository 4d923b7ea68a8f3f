"""
Page builder sections.

A ProfileSection's content model is picked by its SectionType. Every content
model defaults every field, so default_content() is total over SectionType and
a freshly added block never has a missing field. Content models accept extra
keys so editors can attach presentation fields the builder does not know about.
"""

from datetime import datetime, timedelta, timezone
from enum import Enum
from typing import Any, Dict, List, Mapping, Optional, Type

from pydantic import ConfigDict, Field, SerializeAsAny, model_validator

from shopgenie.models.base import StoreModel, new_id

PLACEHOLDER = "https://via.placeholder.com"


class SectionType(str, Enum):
    HERO = "hero"
    TEXT = "text"
    IMAGE = "image"
    LINKS = "links"
    VIDEO = "video"
    PRODUCTS = "products"
    FEATURED_PRODUCT = "featured-product"
    TESTIMONIAL = "testimonial"
    NEWSLETTER = "newsletter"
    COUNTDOWN = "countdown"
    FAQ = "faq"
    GALLERY = "gallery"
    CONTACT = "contact"
    VIDEO_HERO = "video-hero"
    FEATURES = "features"
    STORY = "story"
    MAP = "map"
    PRICING = "pricing"
    STATS = "stats"
    PARTNERS = "partners"
    COLLECTIONS = "collections"
    BANNER = "banner"
    INSTAGRAM = "instagram"


class SectionContent(StoreModel):
    model_config = ConfigDict(extra="allow")


# --- Nested items ---

class LinkItem(StoreModel):
    id: str = "1"
    label: str = "New Link"
    url: str = "#"
    style: str = "solid"


class FaqItem(StoreModel):
    question: str
    answer: str


class FeatureItem(StoreModel):
    title: str
    desc: str


class PricingPlan(StoreModel):
    name: str
    price: str
    features: List[str] = []


class StatItem(StoreModel):
    label: str
    value: str


class CollectionTile(StoreModel):
    name: str
    image: str


def _tomorrow_iso() -> str:
    return (datetime.now(timezone.utc) + timedelta(days=1)).isoformat()


# --- Content per section type ---

class HeroContent(SectionContent):
    headline: str = "Your Headline Here"
    subheadline: str = "Describe your value proposition."
    layout: str = "center"


class TextContent(SectionContent):
    text: str = "Write something engaging about your brand here."


class LinksContent(SectionContent):
    links: List[LinkItem] = Field(default_factory=lambda: [LinkItem()])


class ImageContent(SectionContent):
    url: str = f"{PLACEHOLDER}/800x400"
    caption: str = ""


class VideoContent(SectionContent):
    url: str = ""
    caption: str = ""


class ProductsContent(SectionContent):
    title: str = "Featured Products"


class FeaturedProductContent(SectionContent):
    product_id: str = ""
    layout: str = "split"


class TestimonialContent(SectionContent):
    quote: str = "Share a customer review here."
    author: str = "Customer Name"
    rating: int = 5


class NewsletterContent(SectionContent):
    title: str = "Join the Club"
    subtitle: str = "Get exclusive offers."


class CountdownContent(SectionContent):
    title: str = "Next Drop In"
    target_date: str = Field(default_factory=_tomorrow_iso)


class FaqContent(SectionContent):
    title: str = "Common Questions"
    items: List[FaqItem] = Field(default_factory=lambda: [
        FaqItem(question="Shipping policy?", answer="We ship worldwide."),
    ])


class GalleryContent(SectionContent):
    images: List[str] = Field(default_factory=lambda: [f"{PLACEHOLDER}/300"] * 2)


class ContactContent(SectionContent):
    title: str = "Get in Touch"
    email: str = "support@brand.com"


class VideoHeroContent(SectionContent):
    video_url: str = "https://www.w3schools.com/html/mov_bbb.mp4"
    headline: str = "Cinematic Experience"
    subheadline: str = "Watch our story unfold."


class FeaturesContent(SectionContent):
    title: str = "Why Choose Us"
    items: List[FeatureItem] = Field(default_factory=lambda: [
        FeatureItem(title="Fast Shipping", desc="2-day delivery"),
        FeatureItem(title="Secure", desc="Encrypted payments"),
        FeatureItem(title="Support", desc="24/7 assistance"),
    ])


class StoryContent(SectionContent):
    title: str = "Our Origins"
    text: str = "It started with a simple idea..."
    image_url: str = f"{PLACEHOLDER}/600x400"
    layout: str = "image-left"


class MapContent(SectionContent):
    address: str = "123 Commerce St, New York, NY"
    title: str = "Visit Our Flagship"


class PricingContent(SectionContent):
    title: str = "Plans"
    plans: List[PricingPlan] = Field(default_factory=lambda: [
        PricingPlan(name="Starter", price="$0", features=["Basic access"]),
        PricingPlan(name="Pro", price="$29", features=["Full access", "Priority support"]),
    ])


class StatsContent(SectionContent):
    items: List[StatItem] = Field(default_factory=lambda: [
        StatItem(label="Happy Customers", value="10k+"),
        StatItem(label="Years", value="5+"),
        StatItem(label="Products", value="500+"),
    ])


class PartnersContent(SectionContent):
    title: str = "Trusted By"
    logos: List[str] = Field(default_factory=lambda: [f"{PLACEHOLDER}/100x50"] * 3)


class CollectionsContent(SectionContent):
    title: str = "Shop by Category"
    collections: List[CollectionTile] = Field(default_factory=lambda: [
        CollectionTile(name="Summer", image=f"{PLACEHOLDER}/300"),
        CollectionTile(name="Winter", image=f"{PLACEHOLDER}/300"),
    ])


class BannerContent(SectionContent):
    text: str = "Free shipping on orders over $50!"
    background_color: str = "#000000"
    text_color: str = "#ffffff"


class InstagramContent(SectionContent):
    title: str = "@MyBrand"
    images: List[str] = Field(default_factory=lambda: [f"{PLACEHOLDER}/200"] * 4)


CONTENT_MODELS: Dict[SectionType, Type[SectionContent]] = {
    SectionType.HERO: HeroContent,
    SectionType.TEXT: TextContent,
    SectionType.IMAGE: ImageContent,
    SectionType.LINKS: LinksContent,
    SectionType.VIDEO: VideoContent,
    SectionType.PRODUCTS: ProductsContent,
    SectionType.FEATURED_PRODUCT: FeaturedProductContent,
    SectionType.TESTIMONIAL: TestimonialContent,
    SectionType.NEWSLETTER: NewsletterContent,
    SectionType.COUNTDOWN: CountdownContent,
    SectionType.FAQ: FaqContent,
    SectionType.GALLERY: GalleryContent,
    SectionType.CONTACT: ContactContent,
    SectionType.VIDEO_HERO: VideoHeroContent,
    SectionType.FEATURES: FeaturesContent,
    SectionType.STORY: StoryContent,
    SectionType.MAP: MapContent,
    SectionType.PRICING: PricingContent,
    SectionType.STATS: StatsContent,
    SectionType.PARTNERS: PartnersContent,
    SectionType.COLLECTIONS: CollectionsContent,
    SectionType.BANNER: BannerContent,
    SectionType.INSTAGRAM: InstagramContent,
}


def content_model_for(section_type: SectionType | str) -> Type[SectionContent]:
    return CONTENT_MODELS[SectionType(section_type)]


def default_content(section_type: SectionType | str) -> SectionContent:
    """Fully populated content for a new block of `section_type`."""
    return content_model_for(section_type)()


def build_content(section_type: SectionType | str, overrides: Optional[Mapping[str, Any]] = None) -> SectionContent:
    """Default content for the type with `overrides` merged on top."""
    content = default_content(section_type)
    if overrides:
        content = content.merged(overrides)
    return content


class ProfileSection(StoreModel):
    id: str = Field(default_factory=new_id)
    type: SectionType
    title: Optional[str] = None
    is_visible: bool = True
    content: SerializeAsAny[SectionContent]

    @model_validator(mode="before")
    @classmethod
    def _typed_content(cls, data: Any) -> Any:
        """Coerce raw content into the content model of the section's type."""
        if not isinstance(data, dict):
            return data
        section_type = data.get("type")
        content = data.get("content")
        if section_type is None:
            return data
        model = content_model_for(section_type)
        if isinstance(content, model):
            return data
        if isinstance(content, SectionContent):
            content = content.model_dump()
        return {**data, "content": model.model_validate(content or {})}

"""
Brand identity models - design tokens and voice.
"""

from typing import List, Literal, Optional

from shopgenie.models.base import StoreModel


class BrandColors(StoreModel):
    primary: str = "#00A884"
    secondary: str = "#111B21"
    accent: str = "#34B7F1"
    background: str = "#FFFFFF"
    surface: str = "#F9FAFB"
    text: str = "#111827"
    border: str = "#E5E7EB"


class BrandTypography(StoreModel):
    heading_font: str = "Inter"
    body_font: str = "Inter"
    scale: float = 1.0  # 0.8 to 1.2
    letter_spacing: Literal["tighter", "tight", "normal", "wide", "widest"] = "normal"
    heading_weight: Literal["400", "500", "600", "700", "800", "900"] = "700"


class BrandStyling(StoreModel):
    border_radius: float = 12  # px
    border_width: float = 1  # px
    shadow_strength: float = 0.5  # 0 to 1
    button_style: Literal["flat", "gradient", "outline", "soft", "neo"] = "flat"
    input_style: Literal["modern", "filled", "outlined", "underlined"] = "outlined"
    card_style: Literal["flat", "shadow", "border", "glass"] = "shadow"
    noise_texture: bool = False


class BrandIdentity(StoreModel):
    mission: str = "To inspire and innovate with every product we create."
    vision: str = "A world where quality and design are accessible to everyone."
    values: List[str] = ["Quality", "Integrity", "Innovation"]
    tone_of_voice: str = "Friendly, Professional, and Trustworthy"
    colors: BrandColors = BrandColors()
    typography: BrandTypography = BrandTypography()
    styling: BrandStyling = BrandStyling()
    logo_url: Optional[str] = None
    favicon_url: Optional[str] = None
    cover_image: Optional[str] = None

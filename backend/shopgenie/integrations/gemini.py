"""
Gemini API Client.

Wrapper for Google's Generative Language REST API, used for product copy,
brand strategy, marketing duels, the brand persona chat and social posts.

Every public call degrades instead of raising: structured calls return None
and text calls return a short fallback message when the API is not
configured or the request fails.
"""

import json
import logging
from typing import Any, Dict, List, Optional, Type, TypeVar

import httpx
from pydantic import ValidationError
from tenacity import retry, stop_after_attempt, wait_exponential, retry_if_exception, before_sleep_log

from shopgenie.config import Settings, get_settings
from shopgenie.models.ai import BrandStrategy, ChatTurn, DuelScenario, ProductSuggestion, SocialPostContent
from shopgenie.models.base import StoreModel
from shopgenie.models.brand import BrandIdentity
from shopgenie.models.order import SalesData
from shopgenie.models.product import Product

logger = logging.getLogger(__name__)

T = TypeVar("T", bound=StoreModel)

NOT_CONFIGURED = "AI not configured."


class AIServiceError(Exception):
    """Raised internally when the Gemini API rejects a request."""

    def __init__(self, message: str, status_code: Optional[int] = None):
        self.status_code = status_code
        super().__init__(message)


def is_rate_limited(exception):
    """Return True for quota / rate-limit failures, the only ones worth retrying."""
    if isinstance(exception, AIServiceError):
        return exception.status_code == 429 or "quota" in str(exception).lower()
    return False


PRODUCT_SCHEMA = {
    "type": "OBJECT",
    "properties": {
        "description": {"type": "STRING"},
        "price": {"type": "NUMBER"},
        "tags": {"type": "ARRAY", "items": {"type": "STRING"}},
        "marketingHook": {"type": "STRING"},
    },
    "required": ["description", "price", "tags", "marketingHook"],
}

BRAND_SCHEMA = {
    "type": "OBJECT",
    "properties": {
        "mission": {"type": "STRING"},
        "vision": {"type": "STRING"},
        "values": {"type": "ARRAY", "items": {"type": "STRING"}},
        "toneOfVoice": {"type": "STRING"},
    },
    "required": ["mission", "vision", "values", "toneOfVoice"],
}

DUEL_SCHEMA = {
    "type": "OBJECT",
    "properties": {
        "productName": {"type": "STRING"},
        "productContext": {"type": "STRING", "description": "Short description of what the product is"},
        "optionA": {"type": "STRING"},
        "optionB": {"type": "STRING"},
        "winner": {"type": "STRING", "enum": ["A", "B"]},
        "reason": {"type": "STRING"},
        "odds": {"type": "NUMBER"},
    },
    "required": ["productName", "productContext", "optionA", "optionB", "winner", "reason", "odds"],
}

SOCIAL_SCHEMA = {
    "type": "OBJECT",
    "properties": {
        "caption": {"type": "STRING"},
        "hashtags": {"type": "ARRAY", "items": {"type": "STRING"}},
        "visualDescription": {"type": "STRING"},
        "estimatedReach": {"type": "STRING"},
        "bestTime": {"type": "STRING"},
    },
    "required": ["caption", "hashtags", "visualDescription", "estimatedReach", "bestTime"],
}


class GeminiClient:
    """Client for interacting with the Gemini API."""

    def __init__(self, settings: Optional[Settings] = None, api_key: Optional[str] = None, transport: Optional[httpx.AsyncBaseTransport] = None):
        settings = settings or get_settings()
        self.api_key = api_key if api_key is not None else settings.GEMINI_API_KEY
        self.model = settings.GEMINI_MODEL
        self.base_url = settings.GEMINI_API_BASE.rstrip("/")
        self.transport = transport

    @property
    def is_configured(self) -> bool:
        return bool(self.api_key)

    # =========================================================================
    # TRANSPORT
    # =========================================================================

    @retry(
        retry=retry_if_exception(is_rate_limited),
        wait=wait_exponential(multiplier=1, min=1, max=8),
        stop=stop_after_attempt(4),
        before_sleep=before_sleep_log(logger, logging.WARNING),
        reraise=True
    )
    async def generate(
        self,
        contents: List[Dict[str, Any]],
        system: Optional[str] = None,
        response_schema: Optional[Dict[str, Any]] = None,
    ) -> str:
        """
        Run one generateContent call and return the text of the first candidate.

        Args:
            contents: Gemini content turns ({"role", "parts"})
            system: Optional system instruction
            response_schema: When given, JSON output constrained to this schema
        """
        body: Dict[str, Any] = {"contents": contents}
        if system:
            body["systemInstruction"] = {"parts": [{"text": system}]}
        if response_schema:
            body["generationConfig"] = {
                "responseMimeType": "application/json",
                "responseSchema": response_schema,
            }

        url = f"{self.base_url}/models/{self.model}:generateContent"
        headers = {"Content-Type": "application/json", "x-goog-api-key": self.api_key or ""}

        try:
            async with httpx.AsyncClient(timeout=60.0, transport=self.transport) as client:
                response = await client.post(url, headers=headers, json=body)
        except httpx.HTTPError as e:
            raise AIServiceError(f"Gemini request failed: {e}") from e

        if response.status_code != 200:
            raise AIServiceError(f"Gemini API error: {response.status_code} - {response.text}", response.status_code)

        data = response.json()
        try:
            return "".join(part.get("text", "") for part in data["candidates"][0]["content"]["parts"])
        except (KeyError, IndexError, TypeError):
            return ""

    async def generate_text(self, prompt: str, system: Optional[str] = None) -> str:
        return await self.generate([{"role": "user", "parts": [{"text": prompt}]}], system=system)

    async def generate_structured(self, prompt: str, model: Type[T], schema: Dict[str, Any], system: Optional[str] = None) -> Optional[T]:
        """Generate JSON constrained to `schema` and parse it into `model`. None on any failure."""
        if not self.is_configured:
            return None
        try:
            text = await self.generate(
                [{"role": "user", "parts": [{"text": prompt}]}],
                system=system,
                response_schema=schema,
            )
            if not text:
                return None
            return model.model_validate(json.loads(text))
        except (AIServiceError, ValidationError, ValueError) as e:
            logger.error(f"[Gemini Structured Data Error] {model.__name__}: {e}")
            return None

    # =========================================================================
    # CONTRACTS
    # =========================================================================

    async def generate_product_details(self, product_name: str, category: str) -> Optional[ProductSuggestion]:
        prompt = (
            f'Act as an e-commerce expert. Generate a compelling product description, a suggested price (USD), '
            f'relevant tags, and a short marketing hook for a product named "{product_name}" in the category '
            f'"{category}". Keep the description under 80 words.'
        )
        return await self.generate_structured(prompt, ProductSuggestion, PRODUCT_SCHEMA)

    async def generate_brand_strategy(self, store_name: str, category: str) -> Optional[BrandStrategy]:
        prompt = (
            f'Act as a world-class Brand Strategist. Create a brand identity for an online store named '
            f'"{store_name}" in the "{category}" industry. Provide a Mission Statement, a Vision Statement, '
            f'3 Core Values, and a Tone of Voice description.'
        )
        return await self.generate_structured(prompt, BrandStrategy, BRAND_SCHEMA)

    async def generate_duel_scenario(self, category: str) -> Optional[DuelScenario]:
        prompt = f"""
            Act as a master marketing psychologist.
            1. Invent a hypothetical e-commerce product in the "{category}" niche.
            2. Create two different marketing headlines (Subject Lines or Ad Hooks) for this product.
               - One should be "Good/Standard".
               - One should be "Excellent/High-Converting" based on principles like urgency, social proof, or emotional hook.
            3. Determine which one is better (The Winner).
            4. Explain WHY it is better in one concise sentence.
            5. Assign "Odds" (multiplier) between 1.5 and 2.5 based on how obvious the win is (Higher odds = harder to guess).
        """
        return await self.generate_structured(prompt, DuelScenario, DUEL_SCHEMA)

    async def generate_social_post(self, product: Product, platform: str, identity: BrandIdentity) -> Optional[SocialPostContent]:
        prompt = f"""
            Create a viral social media post for the platform "{platform}".

            Product: {product.title} - {product.description}
            Brand Tone: {identity.tone_of_voice}

            Output JSON with:
            1. caption: High converting copy, include emojis.
            2. hashtags: 5 relevant tags.
            3. visualDescription: A short description of what the image/video should look like.
            4. estimatedReach: A fictional estimate (e.g. "1.2k - 5k").
            5. bestTime: Best time to post today.
        """
        return await self.generate_structured(prompt, SocialPostContent, SOCIAL_SCHEMA)

    async def chat_with_brand_persona(self, message: str, history: List[ChatTurn], identity: BrandIdentity, store_name: str) -> str:
        """Answer `message` in character as the brand."""
        if not self.is_configured:
            return NOT_CONFIGURED

        system = f"""
            You are NOT an AI assistant. You ARE the physical embodiment of the brand "{store_name}".

            Your Brand Identity:
            - Mission: {identity.mission}
            - Values: {", ".join(identity.values)}
            - Tone of Voice: {identity.tone_of_voice}

            Rules:
            1. Respond STRICTLY in the tone of voice defined above.
            2. Defend your brand values if challenged.
            3. Keep responses concise (under 50 words) unless asked for more.
            4. Do not break character.
        """
        contents = [{"role": turn.role, "parts": [{"text": turn.text}]} for turn in history]
        contents.append({"role": "user", "parts": [{"text": message}]})
        try:
            return await self.generate(contents, system=system) or "..."
        except AIServiceError as e:
            logger.error(f"Brand Chat Error: {e}")
            return "I'm having a bit of an identity crisis right now. Try again."

    async def analyze_sales_data(self, sales: List[SalesData]) -> str:
        if not self.is_configured:
            return "AI Configuration missing. Please set GEMINI_API_KEY."
        data = json.dumps([entry.to_snapshot() for entry in sales[-7:]])
        prompt = f"""
            Analyze the following sales data for the last 7 days of an online store:
            {data}

            Provide a concise summary (max 3 sentences) of the trend and 2 actionable tips to improve sales next week.
            Format the output as simple text, not Markdown.
        """
        try:
            return await self.generate_text(prompt)
        except AIServiceError as e:
            logger.error(f"[Gemini Reasoning Error] {e}")
            return "Reasoning failed."

    async def generate_store_concept(self, topic: str) -> str:
        if not self.is_configured:
            return "Please set GEMINI_API_KEY to use AI features."
        prompt = (
            f"Generate a catchy store tagline and a one-sentence visual theme description for an online store "
            f'that sells: {topic}. Return in format: "Tagline: [tagline] | Theme: [description]"'
        )
        try:
            return await self.generate_text(prompt) or "Could not generate concept."
        except AIServiceError as e:
            logger.error(f"Gemini Concept Gen Error: {e}")
            return "Error generating concept."

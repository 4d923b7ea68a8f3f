import logging
from decimal import Decimal, ROUND_HALF_UP
from typing import Any, Dict, List, Optional

import httpx
from tenacity import retry, stop_after_attempt, wait_exponential, retry_if_exception, before_sleep_log

from shopgenie.config import Settings, get_settings
from shopgenie.integrations.base import CatalogAccount, CatalogConnector, CatalogItem, CatalogPrice

logger = logging.getLogger(__name__)

SECRET_KEY_PREFIX = "sk_"
DESCRIPTION_LIMIT = 500


class StripeAPIError(Exception):
    """Raised when Stripe rejects a request or cannot be reached."""

    def __init__(self, message: str, status_code: Optional[int] = None):
        self.status_code = status_code
        super().__init__(message)


def is_usable_secret_key(secret_key: Optional[str]) -> bool:
    """True for a non-empty key following Stripe's secret-key prefix."""
    return bool(secret_key) and secret_key.startswith(SECRET_KEY_PREFIX)


def to_minor_units(amount: Decimal) -> int:
    """Major currency units to Stripe's integer minor units (cents)."""
    return int((Decimal(amount) * 100).quantize(Decimal("1"), rounding=ROUND_HALF_UP))


def is_hosted_image(url: Optional[str]) -> bool:
    """Stripe only accepts fully-qualified image URLs, never inline data."""
    return bool(url) and url.startswith(("http://", "https://"))


def is_retryable_error(exception):
    """Return True if exception is a retryable Stripe error (429, 5xx)."""
    if isinstance(exception, StripeAPIError) and exception.status_code is not None:
        return exception.status_code == 429 or exception.status_code >= 500
    return False


class StripeCatalogClient(CatalogConnector):
    """
    Stripe Products/Prices adapter using raw HTTP requests.
    """

    def __init__(self, secret_key: str, settings: Optional[Settings] = None, transport: Optional[httpx.AsyncBaseTransport] = None, **kwargs):
        super().__init__(secret_key, **kwargs)
        settings = settings or get_settings()
        self.base_url = settings.STRIPE_API_BASE.rstrip("/")
        self.timeout = settings.STRIPE_TIMEOUT_SECONDS
        self.transport = transport

    def _headers(self) -> Dict[str, str]:
        return {
            "Authorization": f"Bearer {self.secret_key}",
            "Content-Type": "application/x-www-form-urlencoded",
        }

    @retry(
        retry=retry_if_exception(is_retryable_error),
        wait=wait_exponential(multiplier=0.5, min=0.5, max=8),
        stop=stop_after_attempt(3),
        before_sleep=before_sleep_log(logger, logging.WARNING),
        reraise=True
    )
    async def _request(self, method: str, path: str, data: Optional[Dict[str, Any]] = None) -> Dict[str, Any]:
        url = f"{self.base_url}{path}"
        try:
            async with httpx.AsyncClient(timeout=self.timeout, transport=self.transport) as client:
                response = await client.request(method, url, headers=self._headers(), data=data)
        except httpx.HTTPError as e:
            raise StripeAPIError(f"Stripe request {method} {path} failed: {e}") from e

        if response.status_code >= 400:
            try:
                message = response.json().get("error", {}).get("message") or response.text
            except ValueError:
                message = response.text
            raise StripeAPIError(f"Stripe API error: {response.status_code} - {message}", response.status_code)

        return response.json()

    async def create_product(self, name: str, description: Optional[str] = None, images: Optional[List[str]] = None) -> CatalogItem:
        """
        Creates a Product in Stripe.
        """
        body: Dict[str, Any] = {"name": name}
        if description:
            body["description"] = description[:DESCRIPTION_LIMIT]
        hosted = [image for image in images or [] if is_hosted_image(image)]
        if hosted:
            body["images[]"] = hosted

        data = await self._request("POST", "/products", body)
        logger.info(f"Stripe Product Created: {data['id']}")
        return CatalogItem(id=data["id"], name=data.get("name", name))

    async def create_price(self, product_id: str, unit_amount: int, currency: str) -> CatalogPrice:
        """
        Creates a Price in Stripe for an existing Product.
        """
        body = {
            "unit_amount": str(unit_amount),
            "currency": currency.lower(),
            "product": product_id,
        }
        data = await self._request("POST", "/prices", body)
        logger.info(f"Stripe Price Created: {data['id']} for {product_id}")
        return CatalogPrice(
            id=data["id"],
            product_id=product_id,
            unit_amount=int(data.get("unit_amount", unit_amount)),
            currency=data.get("currency", currency.lower()),
        )

    async def update_product(self, product_id: str, name: Optional[str] = None, description: Optional[str] = None) -> CatalogItem:
        body: Dict[str, Any] = {}
        if name:
            body["name"] = name
        if description:
            body["description"] = description[:DESCRIPTION_LIMIT]
        data = await self._request("POST", f"/products/{product_id}", body)
        return CatalogItem(id=data["id"], name=data.get("name", name or ""))

    async def retrieve_account(self) -> CatalogAccount:
        data = await self._request("GET", "/account")
        return CatalogAccount(id=data["id"], email=data.get("email"))

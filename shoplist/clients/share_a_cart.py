"""
Share-a-Cart client - fetches cart snapshots from the share-a-cart API

GET {api_base}/{cart_id} returns the cart JSON. Failure mapping:
- 404, or an empty / null body → CartNotFoundError
- timeout, connection error, any other non-2xx status → CartNetworkError
- body is not JSON → MalformedCartError
- JSON fails the Cart schema → CartSchemaError

No retries here; callers decide what to do with a failed load.
"""
from typing import Optional, Protocol

import httpx
import structlog

from shoplist.common.config import Settings, get_settings
from shoplist.common.errors import (
    CartNetworkError,
    CartNotFoundError,
    MalformedCartError,
)
from shoplist.common.schemas.cart import Cart, validate_cart

logger = structlog.get_logger()


class CartFetcher(Protocol):
    """Anything that can produce a validated Cart for an id."""

    async def fetch_cart(self, cart_id: str) -> Cart:
        ...


class ShareACartClient:
    """
    Async HTTP client for the share-a-cart API.

    Usage:
        client = ShareACartClient()
        cart = await client.fetch_cart("T4GEU")
    """

    def __init__(
        self,
        settings: Optional[Settings] = None,
        transport: Optional[httpx.AsyncBaseTransport] = None,
        strict: Optional[bool] = None,
    ):
        """
        Args:
            settings: Application settings (api base, timeout, strict_validation)
            transport: Custom httpx transport (tests use httpx.MockTransport)
            strict: Validate payloads without type coercion
                (defaults to settings.strict_validation)
        """
        self.settings = settings or get_settings()
        self.transport = transport
        self.strict = self.settings.strict_validation if strict is None else strict

    def cart_url(self, cart_id: str) -> str:
        return f"{self.settings.share_a_cart_api_base.rstrip('/')}/{cart_id}"

    async def fetch_cart(self, cart_id: str) -> Cart:
        """
        Fetch and validate one cart.

        Raises:
            CartNotFoundError, CartNetworkError, MalformedCartError, CartSchemaError
        """
        url = self.cart_url(cart_id)
        logger.info("cart_fetch_started", cart_id=cart_id, url=url)

        try:
            async with httpx.AsyncClient(
                timeout=self.settings.fetch_timeout_seconds,
                follow_redirects=True,
                transport=self.transport,
            ) as client:
                response = await client.get(
                    url,
                    headers={"Accept": "application/json"},
                )
        except httpx.TimeoutException as e:
            logger.warning("cart_fetch_timeout", cart_id=cart_id,
                           timeout=self.settings.fetch_timeout_seconds)
            raise CartNetworkError(cart_id, "request timed out") from e
        except httpx.HTTPError as e:
            logger.warning("cart_fetch_transport_error", cart_id=cart_id, error=str(e))
            raise CartNetworkError(cart_id, str(e)) from e

        if response.status_code == 404:
            logger.info("cart_not_found", cart_id=cart_id)
            raise CartNotFoundError(cart_id, "cart does not exist or has expired")

        if not response.is_success:
            logger.warning("cart_fetch_failed", cart_id=cart_id, status_code=response.status_code)
            raise CartNetworkError(cart_id, f"HTTP {response.status_code}")

        if not response.content.strip():
            raise CartNotFoundError(cart_id, "empty response")

        try:
            data = response.json()
        except ValueError as e:
            logger.warning("cart_payload_not_json", cart_id=cart_id, error=str(e))
            raise MalformedCartError(cart_id, "response is not JSON") from e

        if data is None:
            raise CartNotFoundError(cart_id, "null cart")

        cart = validate_cart(data, strict=self.strict, cart_id=cart_id)

        logger.info("cart_fetch_success",
                    cart_id=cart_id,
                    items=len(cart.items),
                    vendor=cart.vendor_display_name or cart.vendor)
        return cart

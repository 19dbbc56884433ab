"""
Printful Proxy - Printful API Client
====================================

What:  Concrete PrintfulGateway talking to the Printful REST API (v1).
How:   One shared httpx.AsyncClient with Bearer auth; every response is
       unwrapped from Printful's `{code, result, error}` envelope.
Who:   Instantiated once at import; called by ProxyService for each request.

Resilience Strategy:
    - GET requests are retried with tenacity (exponential backoff + jitter)
      on transport errors, HTTP 429 and HTTP 5xx.
    - POST and DELETE are sent exactly once. Creating an order or a store
      product is not idempotent on Printful's side.
    - Every failure leaves this module as PrintfulAPIError carrying the
      message Printful returned (or a description of the transport failure).

Printful envelope:
    Success:  {"code": 200, "result": {...}}
    Failure:  {"code": 404, "result": "Not Found",
               "error": {"reason": "NotFound", "message": "Order not found"}}
"""

import logging
import time
import uuid
from decimal import ROUND_HALF_UP, Decimal, InvalidOperation
from typing import Any, Dict, List, Optional
from urllib.parse import quote

import httpx
from tenacity import (
    before_sleep_log,
    retry,
    retry_if_exception_type,
    stop_after_attempt,
    wait_exponential_jitter,
)

from printful_proxy.config import settings
from printful_proxy.exceptions import PrintfulAPIError, PrintfulProxyError, ValidationError
from printful_proxy.services.printful_base import PrintfulGateway

logger = logging.getLogger(__name__)


# ══════════════════════════════════════════════════════════════════════════
# Popular Products
# ══════════════════════════════════════════════════════════════════════════

# Curated catalog shortcuts for quick product creation and the capability
# listing. `placement` is the print file type expected by sync variants.
POPULAR_PRODUCTS: List[Dict[str, Any]] = [
    {
        "type": "tshirt",
        "id": 71,
        "name": "Unisex Staple T-Shirt | Bella + Canvas 3001",
        "placement": "front",
    },
    {
        "type": "hoodie",
        "id": 146,
        "name": "Unisex Heavy Blend Hoodie | Gildan 18500",
        "placement": "front",
    },
    {
        "type": "mug",
        "id": 19,
        "name": "White Glossy Mug",
        "placement": "default",
    },
    {
        "type": "poster",
        "id": 1,
        "name": "Enhanced Matte Paper Poster (in)",
        "placement": "default",
    },
    {
        "type": "sticker",
        "id": 358,
        "name": "Kiss-Cut Stickers",
        "placement": "default",
    },
]

POPULAR_PRODUCTS_BY_TYPE: Dict[str, Dict[str, Any]] = {
    product["type"]: product for product in POPULAR_PRODUCTS
}


class _RetryableResponse(Exception):
    """Raised inside the retry loop for 429/5xx so tenacity tries again."""

    def __init__(self, response: httpx.Response):
        self.response = response
        super().__init__(f"Printful returned HTTP {response.status_code}")


def _is_retryable_status(status_code: int) -> bool:
    return status_code == 429 or status_code >= 500


# ══════════════════════════════════════════════════════════════════════════
# Printful Client
# ══════════════════════════════════════════════════════════════════════════

class PrintfulClient(PrintfulGateway):
    """
    httpx-based Printful API client.

    Args (all optional, default to settings):
        api_key:   Printful private token
        base_url:  API root, e.g. https://api.printful.com
        store_id:  Value for the X-PF-Store-Id header
        transport: httpx transport override (tests pass httpx.MockTransport)
    """

    def __init__(
        self,
        api_key: Optional[str] = None,
        base_url: Optional[str] = None,
        store_id: Optional[str] = None,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        self.api_key = api_key if api_key is not None else settings.printful_api_key
        self.base_url = (base_url or settings.printful_base_url).rstrip("/")
        self.store_id = store_id if store_id is not None else settings.printful_store_id
        self._transport = transport
        self._client: Optional[httpx.AsyncClient] = None

        logger.info(
            "PrintfulClient initialized with base_url=%s, store_id=%s, retry(attempts=%d)",
            self.base_url,
            self.store_id or "-",
            settings.retry_max_attempts,
        )

    # ── Connection Management ─────────────────────────────────────────────

    def _headers(self) -> Dict[str, str]:
        headers = {
            "Authorization": f"Bearer {self.api_key}",
            "Content-Type": "application/json",
            "Accept": "application/json",
        }
        if self.store_id:
            headers["X-PF-Store-Id"] = str(self.store_id)
        return headers

    def _get_client(self) -> httpx.AsyncClient:
        """Return the shared AsyncClient, creating it on first use."""
        if self._client is None or self._client.is_closed:
            self._client = httpx.AsyncClient(
                base_url=self.base_url,
                headers=self._headers(),
                timeout=settings.printful_timeout,
                transport=self._transport,
            )
        return self._client

    async def aclose(self) -> None:
        """Close pooled connections. Called from the application lifespan."""
        if self._client is not None and not self._client.is_closed:
            await self._client.aclose()
        self._client = None

    # ── Request Pipeline ──────────────────────────────────────────────────

    async def _send(
        self,
        method: str,
        path: str,
        params: Optional[Dict[str, Any]] = None,
        json: Optional[Any] = None,
    ) -> httpx.Response:
        client = self._get_client()
        return await client.request(method, path, params=params, json=json)

    @retry(
        retry=retry_if_exception_type((httpx.TransportError, _RetryableResponse)),
        stop=stop_after_attempt(settings.retry_max_attempts),
        # attempt 1 → ~1s, attempt 2 → ~2s, attempt 3 → ~4s (+ up to 1s jitter)
        wait=wait_exponential_jitter(
            multiplier=settings.retry_min_wait,
            max=settings.retry_max_wait,
            jitter=1,
        ),
        before_sleep=before_sleep_log(logger, logging.WARNING),
        reraise=True,
    )
    async def _send_with_retry(
        self,
        method: str,
        path: str,
        params: Optional[Dict[str, Any]] = None,
        json: Optional[Any] = None,
    ) -> httpx.Response:
        response = await self._send(method, path, params=params, json=json)
        if _is_retryable_status(response.status_code):
            raise _RetryableResponse(response)
        return response

    async def _request(
        self,
        method: str,
        path: str,
        params: Optional[Dict[str, Any]] = None,
        json: Optional[Any] = None,
    ) -> Any:
        """
        Send one Printful request and return the unwrapped `result`.

        Raises:
            PrintfulAPIError: missing credentials, transport failure,
                              non-2xx status, error envelope, malformed body
        """
        if not self.api_key:
            raise PrintfulAPIError("PRINTFUL_API_KEY is not configured")

        # Short ID to correlate retry and failure lines for one upstream call
        call_id = str(uuid.uuid4())[:8]
        start_time = time.perf_counter()

        try:
            if method == "GET":
                response = await self._send_with_retry(method, path, params=params, json=json)
            else:
                response = await self._send(method, path, params=params, json=json)
        except _RetryableResponse as e:
            # Retries exhausted on 429/5xx: report Printful's own error message
            response = e.response
        except httpx.TransportError as e:
            duration_ms = (time.perf_counter() - start_time) * 1000
            logger.warning(
                "[%s] Printful %s %s failed after %.0fms: %s",
                call_id,
                method,
                path,
                duration_ms,
                repr(e),
            )
            raise PrintfulAPIError(
                message=f"Could not reach Printful ({type(e).__name__})",
                context={"call_id": call_id, "path": path},
            ) from e

        duration_ms = (time.perf_counter() - start_time) * 1000
        logger.debug(
            "[%s] Printful %s %s -> %d in %.0fms",
            call_id,
            method,
            path,
            response.status_code,
            duration_ms,
        )
        return self._unwrap(response, call_id)

    @staticmethod
    def _unwrap(response: httpx.Response, call_id: str = "") -> Any:
        """Extract `result` from the Printful envelope or raise PrintfulAPIError."""
        status = response.status_code

        try:
            body = response.json()
        except ValueError:
            if response.is_error:
                raise PrintfulAPIError(
                    message=f"Printful API error: HTTP {status}",
                    status_code=status,
                    context={"call_id": call_id},
                )
            raise PrintfulAPIError(
                message="Malformed response from Printful",
                status_code=status,
                context={"call_id": call_id},
            )

        if not isinstance(body, dict):
            raise PrintfulAPIError(
                message="Malformed response from Printful",
                status_code=status,
                context={"call_id": call_id},
            )

        error = body.get("error")
        if response.is_error or error:
            reason = error.get("reason") if isinstance(error, dict) else None
            message = None
            if isinstance(error, dict):
                message = error.get("message")
            if not message and isinstance(body.get("result"), str):
                message = body["result"]
            if not message:
                message = f"Printful API error: HTTP {status} {response.reason_phrase}".strip()
            raise PrintfulAPIError(
                message=message,
                status_code=status,
                reason=reason,
                context={"call_id": call_id},
            )

        if "result" not in body:
            raise PrintfulAPIError(
                message="Malformed response from Printful",
                status_code=status,
                context={"call_id": call_id},
            )
        return body["result"]

    # ── Reads ─────────────────────────────────────────────────────────────

    async def get_catalog(self) -> List[Dict[str, Any]]:
        return await self._request("GET", "/products")

    async def get_product(self, product_id: int) -> Dict[str, Any]:
        return await self._request("GET", f"/products/{product_id}")

    async def list_orders(self, status: Optional[str] = None) -> List[Dict[str, Any]]:
        # Printful caps page size at 100
        params: Dict[str, Any] = {"limit": 100}
        if status:
            params["status"] = status
        return await self._request("GET", "/orders", params=params)

    async def get_order(self, order_id: str) -> Dict[str, Any]:
        return await self._request("GET", f"/orders/{_order_segment(order_id)}")

    async def get_store_info(self) -> Dict[str, Any]:
        return await self._request("GET", "/store")

    # ── Writes ────────────────────────────────────────────────────────────

    async def quick_create_product(
        self,
        name: str,
        design_url: str,
        product_type: str,
        retail_markup: Optional[float] = None,
    ) -> Dict[str, Any]:
        """
        Create a store product from one design on a popular catalog product.

        Flow:
            1. Resolve product_type to a catalog product (POPULAR_PRODUCTS)
            2. Fetch the catalog product's variants and base prices
            3. POST /store/products with one sync variant per catalog variant,
               priced at base price * markup, printing the design at the
               product type's placement

        Only the first `quick_create_max_variants` in-stock, priced variants
        are synced.
        """
        popular = POPULAR_PRODUCTS_BY_TYPE.get(product_type)
        if popular is None:
            raise ValidationError(
                message=(
                    f"Unknown productType '{product_type}'. "
                    f"Use: {', '.join(POPULAR_PRODUCTS_BY_TYPE)}"
                ),
                field="productType",
            )

        markup = retail_markup if retail_markup is not None else settings.default_retail_markup

        catalog = await self.get_product(popular["id"])
        variants = [
            v for v in (catalog or {}).get("variants", [])
            if v.get("in_stock", True) and v.get("price") is not None
        ][: settings.quick_create_max_variants]

        if not variants:
            raise PrintfulAPIError(
                message=f"No variants available for catalog product {popular['id']}",
                context={"product_type": product_type},
            )

        payload = {
            "sync_product": {"name": name, "thumbnail": design_url},
            "sync_variants": [
                {
                    "variant_id": variant["id"],
                    "retail_price": _retail_price(variant["price"], markup),
                    "files": [{"type": popular["placement"], "url": design_url}],
                }
                for variant in variants
            ],
        }

        logger.info(
            "Creating store product '%s' on catalog product %d with %d variants",
            name,
            popular["id"],
            len(variants),
        )
        return await self._request("POST", "/store/products", json=payload)

    async def create_mockup(
        self,
        product_id: int,
        variant_ids: List[int],
        files: List[Dict[str, Any]],
    ) -> Dict[str, Any]:
        payload = {"variant_ids": variant_ids, "format": "jpg", "files": files}
        return await self._request(
            "POST", f"/mockup-generator/create-task/{product_id}", json=payload
        )

    async def get_shipping_rates(
        self,
        recipient: Dict[str, Any],
        items: List[Dict[str, Any]],
    ) -> List[Dict[str, Any]]:
        return await self._request(
            "POST", "/shipping/rates", json={"recipient": recipient, "items": items}
        )

    async def estimate_costs(
        self,
        recipient: Dict[str, Any],
        items: List[Dict[str, Any]],
    ) -> Dict[str, Any]:
        return await self._request(
            "POST", "/orders/estimate-costs", json={"recipient": recipient, "items": items}
        )

    async def create_order(
        self,
        recipient: Dict[str, Any],
        items: List[Dict[str, Any]],
        retail_costs: Dict[str, Any],
    ) -> Dict[str, Any]:
        payload = {"recipient": recipient, "items": items, "retail_costs": retail_costs}
        return await self._request("POST", "/orders", json=payload)

    async def cancel_order(self, order_id: str) -> Dict[str, Any]:
        return await self._request("DELETE", f"/orders/{_order_segment(order_id)}")

    # ── Diagnostics ───────────────────────────────────────────────────────

    async def health_check(self) -> bool:
        try:
            await self.get_store_info()
            return True
        except PrintfulProxyError as e:
            logger.warning("Printful health check failed: %s", e.message)
            return False


def _order_segment(order_id: str) -> str:
    """
    Escape a caller-supplied order ID for use as one path segment.

    `/`, `?` and `#` are percent-encoded so the request stays on
    /orders/{id}; `@` is kept for external IDs (`@my-order-1`).
    """
    segment = quote(str(order_id), safe="@")
    if segment in (".", ".."):
        raise ValidationError(message="Invalid order ID", field="id", context={"value": order_id})
    return segment


def _retail_price(base_price: Any, markup: float) -> str:
    """Catalog price string * markup, rounded half-up to cents."""
    try:
        price = Decimal(str(base_price)) * Decimal(str(markup))
    except InvalidOperation:
        raise PrintfulAPIError(
            message=f"Printful returned an invalid variant price: {base_price!r}",
            context={"price": base_price},
        )
    return str(price.quantize(Decimal("0.01"), rounding=ROUND_HALF_UP))


# ── Singleton Instance ────────────────────────────────────────────────────
# Holds the shared connection pool; closed in the app lifespan.
printful_client = PrintfulClient()

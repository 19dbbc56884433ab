"""
Printful Proxy - Proxy Service (Action Dispatch)
================================================

What:  Maps one proxy request (method + action + params/body) onto exactly
       one PrintfulGateway call and wraps the result in a JSON envelope.
How:   Actions are closed enums (ReadAction, WriteAction); each member has
       one handler in a dispatch table. Required inputs are checked before
       the gateway is called; anything the gateway raises becomes an
       UpstreamError.
Who:   Called by the /api/printful route handlers.

Envelopes:
    GET     catalog → {products}   product → {product}   orders → {orders}
            order → {order}        store → {store}
            (no/unknown action) → {actions, popularProducts}
    POST    create-product → {success, product}   mockup → {success, mockup}
            shipping-rates → {rates}   estimate → {costs}
            order → {success, order}
    DELETE  → {success, message: "Order cancelled"}

Error Handling Strategy:
    ValidationError   caller input problem, raised before any upstream call (400)
    UpstreamError     anything raised while awaiting the gateway (500)
    Proxy exceptions raised by the gateway itself propagate unchanged.
"""

import logging
from typing import Any, Awaitable, Callable, Dict, List, Mapping, Optional

from pydantic import ValidationError as PydanticValidationError

from printful_proxy.exceptions import PrintfulProxyError, UpstreamError, ValidationError
from printful_proxy.schemas.printful import (
    WRITE_REQUEST_MODELS,
    CreateOrderRequest,
    CreateProductRequest,
    EstimateCostsRequest,
    MockupRequest,
    ReadAction,
    ShippingRatesRequest,
    WriteAction,
    WriteRequest,
)
from printful_proxy.services.printful_base import PrintfulGateway
from printful_proxy.services.printful_client import (
    POPULAR_PRODUCTS,
    POPULAR_PRODUCTS_BY_TYPE,
    printful_client,
)

logger = logging.getLogger(__name__)

INVALID_WRITE_ACTION_MESSAGE = (
    "Invalid action. Use: " + ", ".join(action.value for action in WriteAction)
)


def _is_blank(value: Any) -> bool:
    """A required field counts as missing when absent, null or empty."""
    if value is None:
        return True
    if isinstance(value, (str, list, dict)) and len(value) == 0:
        return True
    return False


class ProxyService:
    """
    Stateless dispatcher between the HTTP routes and a PrintfulGateway.

    Args:
        client: Gateway to call. Defaults to the shared PrintfulClient,
                resolved on each call so tests can patch the module singleton.
    """

    def __init__(self, client: Optional[PrintfulGateway] = None):
        self._client = client

        self._read_handlers: Dict[ReadAction, Callable[[Mapping[str, str]], Awaitable[Dict[str, Any]]]] = {
            ReadAction.CATALOG: self._read_catalog,
            ReadAction.PRODUCT: self._read_product,
            ReadAction.ORDERS: self._read_orders,
            ReadAction.ORDER: self._read_order,
            ReadAction.STORE: self._read_store,
        }
        self._write_handlers: Dict[WriteAction, Callable[[Any], Awaitable[Dict[str, Any]]]] = {
            WriteAction.CREATE_PRODUCT: self._write_create_product,
            WriteAction.MOCKUP: self._write_mockup,
            WriteAction.SHIPPING_RATES: self._write_shipping_rates,
            WriteAction.ESTIMATE: self._write_estimate,
            WriteAction.ORDER: self._write_order,
        }

    @property
    def client(self) -> PrintfulGateway:
        return self._client if self._client is not None else printful_client

    # ══════════════════════════════════════════════════════════════════════
    # Upstream boundary
    # ══════════════════════════════════════════════════════════════════════

    async def _upstream(self, call: Callable[[], Awaitable[Any]]) -> Any:
        """
        Await one gateway call, converting foreign exceptions to UpstreamError.

        The error message is the raised exception's text; error categories
        are not distinguished.
        """
        try:
            return await call()
        except PrintfulProxyError:
            raise
        except Exception as e:
            logger.debug("Wrapping %s from Printful gateway", type(e).__name__, exc_info=True)
            raise UpstreamError(
                message=str(e) or type(e).__name__,
                context={"error_type": type(e).__name__},
            ) from e

    # ══════════════════════════════════════════════════════════════════════
    # GET
    # ══════════════════════════════════════════════════════════════════════

    def capabilities(self) -> Dict[str, Any]:
        """Listing returned for GET without a recognized action (not an error)."""
        return {
            "actions": [action.value for action in ReadAction],
            "popularProducts": [dict(product) for product in POPULAR_PRODUCTS],
        }

    async def handle_read(
        self, action: Optional[str], params: Mapping[str, str]
    ) -> Dict[str, Any]:
        """
        Dispatch a GET request.

        Args:
            action: Raw `action` query value (may be None or unknown)
            params: All query parameters (`id`, `status`)

        Raises:
            ValidationError: Missing or non-integer `id`
            UpstreamError:   Gateway call failed
        """
        read_action = ReadAction.parse(action)
        if read_action is None:
            return self.capabilities()
        return await self._read_handlers[read_action](params)

    async def _read_catalog(self, params: Mapping[str, str]) -> Dict[str, Any]:
        products = await self._upstream(lambda: self.client.get_catalog())
        return {"products": products}

    async def _read_product(self, params: Mapping[str, str]) -> Dict[str, Any]:
        raw_id = params.get("id")
        if not raw_id:
            raise ValidationError(message="Product ID required", field="id")
        try:
            product_id = int(raw_id)
        except ValueError:
            raise ValidationError(
                message="Product ID must be an integer",
                field="id",
                context={"value": raw_id},
            )
        product = await self._upstream(lambda: self.client.get_product(product_id))
        return {"product": product}

    async def _read_orders(self, params: Mapping[str, str]) -> Dict[str, Any]:
        status = params.get("status") or None
        orders = await self._upstream(lambda: self.client.list_orders(status=status))
        return {"orders": orders}

    async def _read_order(self, params: Mapping[str, str]) -> Dict[str, Any]:
        order_id = params.get("id")
        if not order_id:
            raise ValidationError(message="Order ID required", field="id")
        order = await self._upstream(lambda: self.client.get_order(order_id))
        return {"order": order}

    async def _read_store(self, params: Mapping[str, str]) -> Dict[str, Any]:
        store = await self._upstream(lambda: self.client.get_store_info())
        return {"store": store}

    # ══════════════════════════════════════════════════════════════════════
    # POST
    # ══════════════════════════════════════════════════════════════════════

    def resolve_write_action(self, action: Optional[str]) -> WriteAction:
        """
        Resolve the POST action before the body is read.

        Raises:
            ValidationError: Missing or unknown action, listing valid actions
        """
        write_action = WriteAction.parse(action)
        if write_action is None:
            raise ValidationError(
                message=INVALID_WRITE_ACTION_MESSAGE,
                field="action",
                context={"action": action},
            )
        return write_action

    def validate_body(self, action: WriteAction, body: Any) -> WriteRequest:
        """
        Check presence of every required field, then validate types.

        All missing fields are reported together; type errors report the
        first offending field.
        """
        if not isinstance(body, dict):
            raise ValidationError(message="Request body must be a JSON object", field="body")

        model = WRITE_REQUEST_MODELS[action]
        missing: List[str] = [
            name for name in model.required_fields() if _is_blank(body.get(name))
        ]
        if missing:
            raise ValidationError(
                message=f"Missing required field(s): {', '.join(missing)}",
                field=missing[0],
                context={"missing": missing, "action": action.value},
            )

        try:
            return model.model_validate(body)
        except PydanticValidationError as e:
            first = e.errors()[0]
            loc = first.get("loc") or ("body",)
            field = str(loc[0])
            raise ValidationError(
                message=f"Invalid value for '{field}': {first.get('msg', 'invalid')}",
                field=field,
                context={"action": action.value},
            )

    async def handle_write(self, action: WriteAction, body: Any) -> Dict[str, Any]:
        """
        Dispatch a POST request whose action has been resolved.

        Raises:
            ValidationError: Body is not an object, or fields are missing/invalid
            UpstreamError:   Gateway call failed
        """
        request = self.validate_body(action, body)
        return await self._write_handlers[action](request)

    async def _write_create_product(self, request: CreateProductRequest) -> Dict[str, Any]:
        if request.product_type not in POPULAR_PRODUCTS_BY_TYPE:
            raise ValidationError(
                message=(
                    f"Unknown productType '{request.product_type}'. "
                    f"Use: {', '.join(POPULAR_PRODUCTS_BY_TYPE)}"
                ),
                field="productType",
            )
        product = await self._upstream(
            lambda: self.client.quick_create_product(
                name=request.name,
                design_url=request.design_url,
                product_type=request.product_type,
                retail_markup=request.retail_markup,
            )
        )
        return {"success": True, "product": product}

    async def _write_mockup(self, request: MockupRequest) -> Dict[str, Any]:
        mockup = await self._upstream(
            lambda: self.client.create_mockup(
                product_id=request.product_id,
                variant_ids=request.variant_ids,
                files=request.files,
            )
        )
        return {"success": True, "mockup": mockup}

    async def _write_shipping_rates(self, request: ShippingRatesRequest) -> Dict[str, Any]:
        rates = await self._upstream(
            lambda: self.client.get_shipping_rates(
                recipient=request.recipient, items=request.items
            )
        )
        return {"rates": rates}

    async def _write_estimate(self, request: EstimateCostsRequest) -> Dict[str, Any]:
        costs = await self._upstream(
            lambda: self.client.estimate_costs(recipient=request.recipient, items=request.items)
        )
        return {"costs": costs}

    async def _write_order(self, request: CreateOrderRequest) -> Dict[str, Any]:
        order = await self._upstream(
            lambda: self.client.create_order(
                recipient=request.recipient,
                items=request.items,
                retail_costs=request.retail_costs,
            )
        )
        return {"success": True, "order": order}

    # ══════════════════════════════════════════════════════════════════════
    # DELETE
    # ══════════════════════════════════════════════════════════════════════

    async def handle_delete(self, order_id: Optional[str]) -> Dict[str, Any]:
        """
        Cancel an order.

        Raises:
            ValidationError: `orderId` missing (no upstream call made)
            UpstreamError:   Gateway call failed
        """
        if not order_id:
            raise ValidationError(message="Order ID required", field="orderId")
        await self._upstream(lambda: self.client.cancel_order(order_id))
        logger.info("Order %s cancelled", order_id)
        return {"success": True, "message": "Order cancelled"}


# ── Singleton Instance ────────────────────────────────────────────────────
# Stateless; the gateway is resolved per call.
proxy_service = ProxyService()

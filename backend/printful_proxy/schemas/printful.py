"""
Printful Proxy - Pydantic Request/Response Schemas
==================================================

What:  The closed set of proxy actions and the body schema of each write action.
How:   ReadAction/WriteAction enumerate the `action` query values per HTTP
       method. Each WriteAction has a request model whose required fields
       (by wire name) are checked before the model is validated.
Who:   Used by ProxyService for dispatch/validation and by the routes for
       OpenAPI documentation.

Wire names are kept exactly as the frontend sends them (`designUrl`,
`productType`, `retail_costs`); models expose Pythonic attribute names
through aliases.
"""

from enum import Enum
from typing import Any, Dict, List, Optional, Type

from pydantic import BaseModel, Field


# ══════════════════════════════════════════════════════════════════════════
# Actions
# ══════════════════════════════════════════════════════════════════════════


class ReadAction(str, Enum):
    """Values of `action` accepted by GET /api/printful."""

    CATALOG = "catalog"
    PRODUCT = "product"
    ORDERS = "orders"
    ORDER = "order"
    STORE = "store"

    @classmethod
    def parse(cls, value: Optional[str]) -> Optional["ReadAction"]:
        """Return the matching member, or None for a missing/unknown action."""
        try:
            return cls(value)
        except ValueError:
            return None


class WriteAction(str, Enum):
    """Values of `action` accepted by POST /api/printful."""

    CREATE_PRODUCT = "create-product"
    MOCKUP = "mockup"
    SHIPPING_RATES = "shipping-rates"
    ESTIMATE = "estimate"
    ORDER = "order"

    @classmethod
    def parse(cls, value: Optional[str]) -> Optional["WriteAction"]:
        try:
            return cls(value)
        except ValueError:
            return None


# ══════════════════════════════════════════════════════════════════════════
# Write Request Models: what the client sends in the POST body
# ══════════════════════════════════════════════════════════════════════════


class WriteRequest(BaseModel):
    """
    Base for POST bodies.

    Unknown keys are ignored so the frontend can send extra UI state without
    breaking the call. Fields are populated by wire name (alias).
    """

    model_config = {"populate_by_name": True, "extra": "ignore"}

    @classmethod
    def required_fields(cls) -> List[str]:
        """Wire names of required fields, in declaration order."""
        return [
            field.alias or name
            for name, field in cls.model_fields.items()
            if field.is_required()
        ]


class CreateProductRequest(WriteRequest):
    """
    What:  Quick store product creation from one design image.
    Who:   POST /api/printful?action=create-product

    retailMarkup is a price multiplier (1.5 → catalog price + 50%).
    When omitted, DEFAULT_RETAIL_MARKUP applies.
    """

    name: str = Field(description="Store product name")
    design_url: str = Field(alias="designUrl", description="Public URL of the print file")
    product_type: str = Field(alias="productType", description="Popular product key, e.g. tshirt")
    retail_markup: Optional[float] = Field(
        default=None,
        alias="retailMarkup",
        gt=0,
        description="Multiplier applied to catalog variant prices",
    )


class MockupRequest(WriteRequest):
    """Mockup generation task for a catalog product."""

    product_id: int = Field(alias="productId", description="Catalog product ID")
    variant_ids: List[int] = Field(alias="variantIds", description="Catalog variant IDs")
    files: List[Dict[str, Any]] = Field(
        description="Print files: [{placement, image_url, position?}]"
    )


class ShippingRatesRequest(WriteRequest):
    recipient: Dict[str, Any] = Field(
        description="Address: {address1, city, country_code, state_code?, zip}"
    )
    items: List[Dict[str, Any]] = Field(description="[{variant_id, quantity}]")


class EstimateCostsRequest(ShippingRatesRequest):
    pass


class CreateOrderRequest(WriteRequest):
    """Order creation; Printful stores new orders as drafts."""

    recipient: Dict[str, Any] = Field(description="Shipping recipient")
    items: List[Dict[str, Any]] = Field(description="Order line items")
    retail_costs: Dict[str, Any] = Field(
        description="Retail costs shown on the packing slip: {currency, subtotal, ...}"
    )


WRITE_REQUEST_MODELS: Dict[WriteAction, Type[WriteRequest]] = {
    WriteAction.CREATE_PRODUCT: CreateProductRequest,
    WriteAction.MOCKUP: MockupRequest,
    WriteAction.SHIPPING_RATES: ShippingRatesRequest,
    WriteAction.ESTIMATE: EstimateCostsRequest,
    WriteAction.ORDER: CreateOrderRequest,
}


# ══════════════════════════════════════════════════════════════════════════
# Response Models: documented in OpenAPI, envelopes are built as dicts
# ══════════════════════════════════════════════════════════════════════════


class ErrorResponse(BaseModel):
    """
    Error body for every failed proxy call.

    Example:
        {"error": "Order ID required"}
    """

    error: str = Field(description="Human-readable error description")


class CapabilityResponse(BaseModel):
    """GET /api/printful without a recognized action."""

    actions: List[str] = Field(description="Supported GET actions")
    popularProducts: List[Dict[str, Any]] = Field(
        description="Curated catalog products usable with create-product"
    )


class HealthResponse(BaseModel):
    """
    What:  Health check response showing service and upstream status.
    Who:   Returned by GET /health for monitoring and load balancer checks.
    """

    status: str = Field(description="Overall service status: healthy, degraded")
    version: str = Field(description="Application version")
    printful: str = Field(description="Printful API status: available, unavailable")
    uptime_seconds: float = Field(description="Seconds since service started")

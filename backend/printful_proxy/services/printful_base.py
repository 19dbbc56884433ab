"""
Printful Proxy - Abstract Printful Gateway Interface
====================================================

What:  Abstract base class defining the operations the proxy consumes from
       Printful.
How:   The concrete PrintfulClient (httpx) implements every method; tests
       substitute stubs with the same surface.
Who:   Called by ProxyService, one method per proxy action.

Contract:
    - Every operation is async and either returns a JSON-serializable value
      (dict or list) or raises an exception with a human-readable message.
    - Implementations translate their own transport/HTTP failures into
      PrintfulAPIError; the proxy treats anything raised as an upstream error.
    - Argument names are Pythonic (`design_url`); wire names (`designUrl`)
      are handled by the request schemas.
"""

from abc import ABC, abstractmethod
from typing import Any, Dict, List, Optional


class PrintfulGateway(ABC):
    """Async interface to the Printful print-on-demand API."""

    # ── Reads ─────────────────────────────────────────────────────────────

    @abstractmethod
    async def get_catalog(self) -> List[Dict[str, Any]]:
        """List catalog products available for fulfillment."""
        ...

    @abstractmethod
    async def get_product(self, product_id: int) -> Dict[str, Any]:
        """
        Get one catalog product with its variants.

        Args:
            product_id: Printful catalog product ID (e.g. 71 for Bella+Canvas 3001)
        """
        ...

    @abstractmethod
    async def list_orders(self, status: Optional[str] = None) -> List[Dict[str, Any]]:
        """
        List store orders, optionally filtered by status
        (draft, pending, failed, canceled, inprocess, onhold, partial, fulfilled).
        """
        ...

    @abstractmethod
    async def get_order(self, order_id: str) -> Dict[str, Any]:
        """Get one order by Printful ID or by external ID prefixed with '@'."""
        ...

    @abstractmethod
    async def get_store_info(self) -> Dict[str, Any]:
        """Get information about the store the token belongs to."""
        ...

    # ── Writes ────────────────────────────────────────────────────────────

    @abstractmethod
    async def quick_create_product(
        self,
        name: str,
        design_url: str,
        product_type: str,
        retail_markup: Optional[float] = None,
    ) -> Dict[str, Any]:
        """
        Create a store (sync) product from a single design image.

        Args:
            name:          Store product name
            design_url:    Publicly reachable URL of the print file
            product_type:  Key of a popular product (e.g. "tshirt", "mug")
            retail_markup: Multiplier applied to catalog variant prices
        """
        ...

    @abstractmethod
    async def create_mockup(
        self,
        product_id: int,
        variant_ids: List[int],
        files: List[Dict[str, Any]],
    ) -> Dict[str, Any]:
        """Start a mockup generation task; returns the task descriptor."""
        ...

    @abstractmethod
    async def get_shipping_rates(
        self,
        recipient: Dict[str, Any],
        items: List[Dict[str, Any]],
    ) -> List[Dict[str, Any]]:
        """Calculate available shipping rates for a recipient and item list."""
        ...

    @abstractmethod
    async def estimate_costs(
        self,
        recipient: Dict[str, Any],
        items: List[Dict[str, Any]],
    ) -> Dict[str, Any]:
        """Estimate order costs (subtotal, shipping, tax, total) without creating it."""
        ...

    @abstractmethod
    async def create_order(
        self,
        recipient: Dict[str, Any],
        items: List[Dict[str, Any]],
        retail_costs: Dict[str, Any],
    ) -> Dict[str, Any]:
        """Create a new order (as a draft, per Printful defaults)."""
        ...

    @abstractmethod
    async def cancel_order(self, order_id: str) -> Dict[str, Any]:
        """Cancel an order that has not yet been fulfilled."""
        ...

    # ── Diagnostics ───────────────────────────────────────────────────────

    @abstractmethod
    async def health_check(self) -> bool:
        """
        Check if Printful is reachable with the configured credentials.

        Returns: True if reachable and authenticated, False otherwise.
        Never raises.
        """
        ...

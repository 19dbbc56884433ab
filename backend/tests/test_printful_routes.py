"""
Printful Proxy - API Endpoint Tests
===================================

What:  Integration tests for /api/printful (GET, POST, DELETE).
How:   Uses httpx AsyncClient with ASGITransport against the real app;
       the proxy service is backed by the stub gateway from conftest.

Test Categories:
    1. GET actions and the capability listing
    2. POST action resolution and body validation
    3. DELETE cancellation
    4. Upstream failures surfacing as 500 {"error": ...}
    5. Request ID header
"""

import pytest

from printful_proxy.exceptions import PrintfulAPIError

INVALID_ACTION = "Invalid action. Use: create-product, mockup, shipping-rates, estimate, order"

RECIPIENT = {"name": "Jane Doe", "address1": "19749 Dearborn St", "country_code": "US", "zip": "91311"}
ITEMS = [{"variant_id": 4012, "quantity": 1}]

# (gateway method, HTTP method, query params, JSON body) for every proxy action
UPSTREAM_CALLS = [
    ("get_catalog", "GET", {"action": "catalog"}, None),
    ("get_product", "GET", {"action": "product", "id": "71"}, None),
    ("list_orders", "GET", {"action": "orders"}, None),
    ("get_order", "GET", {"action": "order", "id": "1001"}, None),
    ("get_store_info", "GET", {"action": "store"}, None),
    (
        "quick_create_product",
        "POST",
        {"action": "create-product"},
        {"name": "Logo Mug", "designUrl": "https://cdn.example.com/logo.png", "productType": "mug"},
    ),
    (
        "create_mockup",
        "POST",
        {"action": "mockup"},
        {"productId": 71, "variantIds": [4012], "files": [{"placement": "front"}]},
    ),
    ("get_shipping_rates", "POST", {"action": "shipping-rates"}, {"recipient": RECIPIENT, "items": ITEMS}),
    ("estimate_costs", "POST", {"action": "estimate"}, {"recipient": RECIPIENT, "items": ITEMS}),
    (
        "create_order",
        "POST",
        {"action": "order"},
        {"recipient": RECIPIENT, "items": ITEMS, "retail_costs": {"currency": "USD"}},
    ),
    ("cancel_order", "DELETE", {"orderId": "1001"}, None),
]


# ══════════════════════════════════════════════════════════════════════════
# GET
# ══════════════════════════════════════════════════════════════════════════

class TestReadEndpoint:
    """Tests for GET /api/printful."""

    @pytest.mark.asyncio
    async def test_product(self, test_client, stub_gateway):
        stub_gateway.get_product.return_value = {"id": 42, "name": "Mug"}

        response = await test_client.get("/api/printful", params={"action": "product", "id": "42"})

        assert response.status_code == 200
        assert response.json() == {"product": {"id": 42, "name": "Mug"}}
        stub_gateway.get_product.assert_awaited_once_with(42)

    @pytest.mark.asyncio
    @pytest.mark.parametrize(
        "action,message",
        [("product", "Product ID required"), ("order", "Order ID required")],
    )
    async def test_missing_id(self, test_client, stub_gateway, action, message):
        response = await test_client.get("/api/printful", params={"action": action})

        assert response.status_code == 400
        assert response.json() == {"error": message}
        assert stub_gateway.mock_calls == []

    @pytest.mark.asyncio
    async def test_non_integer_product_id(self, test_client, stub_gateway):
        response = await test_client.get("/api/printful", params={"action": "product", "id": "abc"})

        assert response.status_code == 400
        assert "integer" in response.json()["error"]

    @pytest.mark.asyncio
    @pytest.mark.parametrize(
        "params,method,key",
        [
            ({"action": "catalog"}, "get_catalog", "products"),
            ({"action": "orders"}, "list_orders", "orders"),
            ({"action": "order", "id": "1001"}, "get_order", "order"),
            ({"action": "store"}, "get_store_info", "store"),
        ],
    )
    async def test_success_envelopes(self, test_client, stub_gateway, params, method, key):
        getattr(stub_gateway, method).return_value = {"marker": method}

        response = await test_client.get("/api/printful", params=params)

        assert response.status_code == 200
        assert response.json() == {key: {"marker": method}}

    @pytest.mark.asyncio
    async def test_orders_status_filter(self, test_client, stub_gateway):
        stub_gateway.list_orders.return_value = [{"id": 1, "status": "draft"}]

        response = await test_client.get(
            "/api/printful", params={"action": "orders", "status": "draft"}
        )

        assert response.json() == {"orders": [{"id": 1, "status": "draft"}]}
        stub_gateway.list_orders.assert_awaited_once_with(status="draft")

    @pytest.mark.asyncio
    async def test_no_action_lists_capabilities(self, test_client, stub_gateway):
        response = await test_client.get("/api/printful")

        assert response.status_code == 200
        data = response.json()
        assert data["actions"] == ["catalog", "product", "orders", "order", "store"]
        assert {p["type"] for p in data["popularProducts"]} == {
            "tshirt", "hoodie", "mug", "poster", "sticker",
        }
        assert stub_gateway.mock_calls == []

    @pytest.mark.asyncio
    async def test_unknown_action_lists_capabilities(self, test_client):
        response = await test_client.get("/api/printful", params={"action": "inventory"})

        assert response.status_code == 200
        assert "popularProducts" in response.json()


# ══════════════════════════════════════════════════════════════════════════
# POST
# ══════════════════════════════════════════════════════════════════════════

class TestWriteEndpoint:
    """Tests for POST /api/printful."""

    @pytest.mark.asyncio
    @pytest.mark.parametrize("params", [{}, {"action": "refund"}, {"action": "catalog"}])
    async def test_invalid_action(self, test_client, stub_gateway, params):
        response = await test_client.post("/api/printful", params=params, json={})

        assert response.status_code == 400
        assert response.json() == {"error": INVALID_ACTION}
        assert stub_gateway.mock_calls == []

    @pytest.mark.asyncio
    async def test_invalid_action_reported_before_body(self, test_client):
        response = await test_client.post(
            "/api/printful",
            params={"action": "refund"},
            content=b"{not json",
            headers={"Content-Type": "application/json"},
        )

        assert response.status_code == 400
        assert response.json() == {"error": INVALID_ACTION}

    @pytest.mark.asyncio
    async def test_invalid_json(self, test_client, stub_gateway):
        response = await test_client.post(
            "/api/printful",
            params={"action": "estimate"},
            content=b"{not json",
            headers={"Content-Type": "application/json"},
        )

        assert response.status_code == 400
        assert response.json() == {"error": "Request body must be valid JSON"}
        assert stub_gateway.mock_calls == []

    @pytest.mark.asyncio
    async def test_body_not_an_object(self, test_client, stub_gateway):
        response = await test_client.post(
            "/api/printful", params={"action": "estimate"}, json=["recipient", "items"]
        )

        assert response.status_code == 400
        assert response.json() == {"error": "Request body must be a JSON object"}

    @pytest.mark.asyncio
    async def test_order_missing_items(self, test_client, stub_gateway, sample_recipient):
        response = await test_client.post(
            "/api/printful",
            params={"action": "order"},
            json={"recipient": sample_recipient, "retail_costs": {"currency": "USD"}},
        )

        assert response.status_code == 400
        assert "items" in response.json()["error"]
        assert stub_gateway.mock_calls == []

    @pytest.mark.asyncio
    async def test_order(self, test_client, stub_gateway, sample_recipient, sample_items):
        stub_gateway.create_order.return_value = {"id": 9001, "status": "draft"}
        body = {
            "recipient": sample_recipient,
            "items": sample_items,
            "retail_costs": {"currency": "USD", "subtotal": "29.98"},
        }

        response = await test_client.post("/api/printful", params={"action": "order"}, json=body)

        assert response.status_code == 200
        assert response.json() == {"success": True, "order": {"id": 9001, "status": "draft"}}
        stub_gateway.create_order.assert_awaited_once_with(
            recipient=sample_recipient,
            items=sample_items,
            retail_costs={"currency": "USD", "subtotal": "29.98"},
        )

    @pytest.mark.asyncio
    async def test_create_product(self, test_client, stub_gateway):
        stub_gateway.quick_create_product.return_value = {"id": 77, "name": "Logo Mug"}

        response = await test_client.post(
            "/api/printful",
            params={"action": "create-product"},
            json={
                "name": "Logo Mug",
                "designUrl": "https://cdn.example.com/logo.png",
                "productType": "mug",
            },
        )

        assert response.status_code == 200
        assert response.json() == {"success": True, "product": {"id": 77, "name": "Logo Mug"}}
        stub_gateway.quick_create_product.assert_awaited_once_with(
            name="Logo Mug",
            design_url="https://cdn.example.com/logo.png",
            product_type="mug",
            retail_markup=None,
        )

    @pytest.mark.asyncio
    async def test_mockup(self, test_client, stub_gateway):
        stub_gateway.create_mockup.return_value = {"task_key": "gt-123", "status": "pending"}
        files = [{"placement": "front", "image_url": "https://cdn.example.com/logo.png"}]

        response = await test_client.post(
            "/api/printful",
            params={"action": "mockup"},
            json={"productId": 71, "variantIds": [4012, 4013], "files": files},
        )

        assert response.status_code == 200
        assert response.json() == {
            "success": True,
            "mockup": {"task_key": "gt-123", "status": "pending"},
        }
        stub_gateway.create_mockup.assert_awaited_once_with(
            product_id=71, variant_ids=[4012, 4013], files=files
        )

    @pytest.mark.asyncio
    async def test_shipping_rates(self, test_client, stub_gateway, sample_recipient, sample_items):
        stub_gateway.get_shipping_rates.return_value = [{"id": "STANDARD", "rate": "4.99"}]

        response = await test_client.post(
            "/api/printful",
            params={"action": "shipping-rates"},
            json={"recipient": sample_recipient, "items": sample_items},
        )

        assert response.status_code == 200
        assert response.json() == {"rates": [{"id": "STANDARD", "rate": "4.99"}]}

    @pytest.mark.asyncio
    async def test_estimate_missing_recipient(self, test_client, stub_gateway, sample_items):
        response = await test_client.post(
            "/api/printful", params={"action": "estimate"}, json={"items": sample_items}
        )

        assert response.status_code == 400
        assert response.json() == {"error": "Missing required field(s): recipient"}
        assert stub_gateway.mock_calls == []


# ══════════════════════════════════════════════════════════════════════════
# DELETE
# ══════════════════════════════════════════════════════════════════════════

class TestDeleteEndpoint:
    """Tests for DELETE /api/printful."""

    @pytest.mark.asyncio
    async def test_missing_order_id(self, test_client, stub_gateway):
        response = await test_client.delete("/api/printful")

        assert response.status_code == 400
        assert response.json() == {"error": "Order ID required"}
        assert stub_gateway.mock_calls == []

    @pytest.mark.asyncio
    async def test_cancel(self, test_client, stub_gateway):
        stub_gateway.cancel_order.return_value = {"id": 555, "status": "canceled"}

        response = await test_client.delete("/api/printful", params={"orderId": "555"})

        assert response.status_code == 200
        assert response.json() == {"success": True, "message": "Order cancelled"}
        stub_gateway.cancel_order.assert_awaited_once_with("555")


# ══════════════════════════════════════════════════════════════════════════
# Upstream failures
# ══════════════════════════════════════════════════════════════════════════

class TestUpstreamFailures:
    """Any gateway failure becomes 500 with the failure's message."""

    @pytest.mark.asyncio
    @pytest.mark.parametrize(
        "gateway_method,http_method,params,body",
        UPSTREAM_CALLS,
        ids=[call[0] for call in UPSTREAM_CALLS],
    )
    @pytest.mark.parametrize(
        "error",
        [
            RuntimeError("socket closed"),
            PrintfulAPIError("Order can not be cancelled", status_code=400, reason="BadRequest"),
        ],
        ids=["unexpected", "printful"],
    )
    async def test_every_action(
        self, test_client, stub_gateway, gateway_method, http_method, params, body, error
    ):
        getattr(stub_gateway, gateway_method).side_effect = error

        response = await test_client.request(http_method, "/api/printful", params=params, json=body)

        assert response.status_code == 500
        assert response.json() == {"error": str(error)}
        getattr(stub_gateway, gateway_method).assert_awaited_once()


# ══════════════════════════════════════════════════════════════════════════
# Request ID
# ══════════════════════════════════════════════════════════════════════════

class TestRequestId:

    @pytest.mark.asyncio
    async def test_generated(self, test_client):
        response = await test_client.get("/api/printful")

        assert len(response.headers["X-Request-ID"]) == 8

    @pytest.mark.asyncio
    async def test_caller_id_echoed_on_errors(self, test_client):
        response = await test_client.delete("/api/printful", headers={"X-Request-ID": "trace-abc"})

        assert response.status_code == 400
        assert response.headers["X-Request-ID"] == "trace-abc"
        assert response.json() == {"error": "Order ID required"}

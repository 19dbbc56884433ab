"""
Printful Proxy - Test Configuration (conftest.py)
=================================================

What:  Shared pytest fixtures for the entire test suite.
How:   pytest auto-discovers conftest.py and makes fixtures available to all tests.

Fixture Hierarchy:
    Function-scoped (created fresh for each test):
    ├── stub_gateway:   AsyncMock shaped like PrintfulGateway (call counting)
    ├── proxy:          ProxyService wired to stub_gateway
    ├── sample_recipient / sample_items: order payload fragments
    └── test_client:    HTTPX AsyncClient against the app, proxy routes using stub_gateway
"""

import os

# Settings are read at import time, so the environment is set before any
# printful_proxy import. Retry waits are zeroed to keep retry tests instant.
os.environ["PRINTFUL_API_KEY"] = "test-key-not-real"
os.environ["PRINTFUL_BASE_URL"] = "https://api.printful.test"
os.environ["RETRY_MAX_ATTEMPTS"] = "3"
os.environ["RETRY_MIN_WAIT"] = "0"
os.environ["RETRY_MAX_WAIT"] = "0"
os.environ["LOG_LEVEL"] = "WARNING"

from unittest.mock import AsyncMock, patch  # noqa: E402

import pytest  # noqa: E402
import pytest_asyncio  # noqa: E402
from httpx import ASGITransport, AsyncClient  # noqa: E402

from printful_proxy.services.printful_base import PrintfulGateway  # noqa: E402
from printful_proxy.services.proxy_service import ProxyService  # noqa: E402


@pytest.fixture
def stub_gateway():
    """
    Provides a stub Printful gateway.

    What:    AsyncMock with the PrintfulGateway surface; every method is awaitable.
    Usage:
        stub_gateway.get_product.return_value = {"id": 42}
        stub_gateway.get_product.assert_awaited_once_with(42)
        assert stub_gateway.mock_calls == []   # no upstream call made
    """
    return AsyncMock(spec=PrintfulGateway)


@pytest.fixture
def proxy(stub_gateway):
    return ProxyService(client=stub_gateway)


@pytest.fixture
def sample_recipient():
    return {
        "name": "Jane Doe",
        "address1": "19749 Dearborn St",
        "city": "Chatsworth",
        "state_code": "CA",
        "country_code": "US",
        "zip": "91311",
    }


@pytest.fixture
def sample_items():
    return [{"variant_id": 4012, "quantity": 2}]


@pytest_asyncio.fixture
async def test_client(proxy):
    """
    Provides an async HTTP test client for endpoint testing.

    How:     ASGITransport routes requests straight into the app; the route
             module's proxy_service is swapped for one backed by stub_gateway.
    """
    from printful_proxy.main import app

    with patch("printful_proxy.routes.printful.proxy_service", proxy):
        transport = ASGITransport(app=app)
        async with AsyncClient(transport=transport, base_url="http://test") as client:
            yield client

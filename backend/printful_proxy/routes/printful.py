"""
Printful Proxy - Proxy Route Handlers
=====================================

What:  GET, POST and DELETE handlers for /api/printful.
How:   Extract `action`, query parameters and the JSON body, delegate to
       ProxyService, return the envelope as JSON.
Who:   Called by the frontend (the /pod browsing page and the storefront).

Status codes:
    200  success envelope
    400  missing/invalid caller input (ValidationError, global handler)
    500  upstream failure (UpstreamError, global handler)
"""

import logging
from typing import Any, Optional

from fastapi import APIRouter, Query, Request
from fastapi.responses import JSONResponse

from printful_proxy.exceptions import ValidationError
from printful_proxy.schemas.printful import ErrorResponse
from printful_proxy.services.proxy_service import proxy_service

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api", tags=["Printful"])

_ERROR_RESPONSES = {
    400: {"description": "Missing or invalid input", "model": ErrorResponse},
    500: {"description": "Printful request failed", "model": ErrorResponse},
}


async def _read_json_body(request: Request) -> Any:
    """Parse the request body as JSON, reporting bad JSON as caller error."""
    try:
        return await request.json()
    except ValueError:
        raise ValidationError(message="Request body must be valid JSON", field="body")


@router.get(
    "/printful",
    responses={200: {"description": "Action result or capability listing"}, **_ERROR_RESPONSES},
    summary="Read from Printful",
    description=(
        "Actions: catalog, product (id), orders (status), order (id), store. "
        "Without a recognized action, lists the actions and popular products."
    ),
)
async def printful_get(
    request: Request,
    action: Optional[str] = Query(default=None, description="catalog | product | orders | order | store"),
) -> JSONResponse:
    result = await proxy_service.handle_read(action, request.query_params)
    return JSONResponse(content=result)


@router.post(
    "/printful",
    responses={200: {"description": "Action result"}, **_ERROR_RESPONSES},
    summary="Write to Printful",
    description=(
        "Actions: create-product, mockup, shipping-rates, estimate, order. "
        "Body is a JSON object with the action's fields."
    ),
)
async def printful_post(
    request: Request,
    action: Optional[str] = Query(
        default=None,
        description="create-product | mockup | shipping-rates | estimate | order",
    ),
) -> JSONResponse:
    """
    Run one write action.

    The action is resolved before the body is parsed, so an unknown action
    is reported as such even when the body is malformed.
    """
    write_action = proxy_service.resolve_write_action(action)
    body = await _read_json_body(request)
    result = await proxy_service.handle_write(write_action, body)
    return JSONResponse(content=result)


@router.delete(
    "/printful",
    responses={200: {"description": "Order cancelled"}, **_ERROR_RESPONSES},
    summary="Cancel a Printful order",
)
async def printful_delete(
    order_id: Optional[str] = Query(default=None, alias="orderId", description="Order to cancel"),
) -> JSONResponse:
    result = await proxy_service.handle_delete(order_id)
    return JSONResponse(content=result)

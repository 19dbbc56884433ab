"""
Printful Proxy - Health Check Route
===================================

What:  Health check endpoint for monitoring and load balancer probes.
How:   Calls the Printful gateway's lightweight health check (GET /store).

Status levels:
    - healthy:   Printful reachable with the configured token
    - degraded:  Printful unreachable or token rejected; the process itself
                 still serves requests, so the HTTP status stays 200
"""

import logging
import time

from fastapi import APIRouter

from printful_proxy import __version__
from printful_proxy.schemas.printful import HealthResponse

logger = logging.getLogger(__name__)

router = APIRouter(tags=["Health"])

# Set once when the module loads
_start_time = time.time()


@router.get(
    "/health",
    response_model=HealthResponse,
    summary="Service health check",
    description="Returns the health status of the proxy and of the Printful API.",
)
async def health_check() -> HealthResponse:
    printful_status = "available"
    overall = "healthy"

    try:
        from printful_proxy.services.printful_client import printful_client

        if not await printful_client.health_check():
            printful_status = "unavailable"
            overall = "degraded"
    except Exception as e:
        printful_status = "unavailable"
        overall = "degraded"
        logger.warning("Health check: Printful unreachable: %s", str(e))

    return HealthResponse(
        status=overall,
        version=__version__,
        printful=printful_status,
        uptime_seconds=round(time.time() - _start_time, 2),
    )

# Middleware package init
"""
Printful Proxy - Middleware Package
===================================

Middleware Chain:
    Request → [Request ID] → [Logging] → [GZip] → [CORS] → Route Handler

    1. Request ID first so every later log line can carry it
    2. Logging measures the full handler duration, including the Printful call
    3. GZip and CORS are Starlette's stock middleware

Responses unwind in reverse order, which is how X-Request-ID ends up on
every response, error responses included.
"""

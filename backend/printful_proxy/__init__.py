"""
Printful Proxy - Application Package Initializer
================================================

What: Marks the `printful_proxy` directory as a Python package.
Who:  Used by uvicorn (`uvicorn printful_proxy.main:app`), pytest, and the
      route/service modules through absolute imports.

Architecture Note:
    The backend is a thin adapter in front of the Printful REST API:

    ┌─────────────────────────────────────┐
    │           Routes (API Layer)        │  ← query params, JSON body, status codes
    ├─────────────────────────────────────┤
    │     Proxy Service (Action Dispatch) │  ← action enums, required fields, envelopes
    ├─────────────────────────────────────┤
    │   Printful Gateway (Upstream API)   │  ← httpx client, auth, Printful envelope
    └─────────────────────────────────────┘

    No layer keeps state between requests. The only process-wide resource
    is the upstream HTTP connection pool, owned by the Printful client.
"""

__version__ = "1.0.0"

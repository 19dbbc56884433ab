# Services package init
"""
Printful Proxy - Services Layer
===============================

Service Inventory:
    - PrintfulGateway (abstract): Operations the proxy consumes from Printful
    - PrintfulClient:             httpx implementation against api.printful.com
    - ProxyService:               Action dispatch, input checks, JSON envelopes

Routes never call PrintfulClient directly; they go through ProxyService so
the gateway can be swapped for a stub in tests.
"""

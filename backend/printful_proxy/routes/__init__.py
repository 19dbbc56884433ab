# Routes package init
"""
Printful Proxy - API Routes Package
===================================

Route Inventory:
    - printful.py:  GET    /api/printful   (catalog, product, orders, order, store)
                    POST   /api/printful   (create-product, mockup, shipping-rates,
                                            estimate, order)
                    DELETE /api/printful   (cancel order)
    - pod.py:       GET    /pod            (browsing page)
    - health.py:    GET    /health         (service health check)

Routes stay thin: they pull the action, query parameters and body off the
request and hand them to ProxyService. Error responses come from the global
exception handlers in main.py.
"""

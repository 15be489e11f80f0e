"""
Products API - Routes Package
=============================

Route Inventory:
    - api.py:       GET /api, GET /api/ping
    - products.py:  GET|POST /api/products, GET|PUT|PATCH|DELETE /api/products/{id}

Routes stay thin: validate the request, call ProductService, wrap the result
in the ``{"data": ...}`` envelope with the right status code.
"""

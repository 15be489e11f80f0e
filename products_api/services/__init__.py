"""
Products API - Services Layer
=============================

Service Inventory:
    - ProductService: list/get/create/update/toggle/delete against the
      products table, with not-found and database error classification
"""

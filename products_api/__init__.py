"""
Products API - Application Package
==================================

What: CRUD REST API for a single "products" resource.
Who:  Imported by uvicorn (``products_api.main:app``), the data CLI and pytest.

Layers:

    ┌─────────────────────────────────────┐
    │      Routes + Validation (HTTP)     │  ← status codes, request rules
    ├─────────────────────────────────────┤
    │         Services (Handlers)         │  ← ORM calls, not-found checks
    ├─────────────────────────────────────┤
    │       Models & Schemas (Data)       │  ← SQLAlchemy ORM + Pydantic
    ├─────────────────────────────────────┤
    │        Database (Persistence)       │  ← injected async engine/sessions
    └─────────────────────────────────────┘
"""

__version__ = "1.0.0"

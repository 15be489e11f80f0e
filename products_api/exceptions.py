"""
Products API - Custom Exception Hierarchy
=========================================

What:  Application exceptions, each answered with one HTTP status.
How:   Every exception carries a client-safe ``message`` and a ``context``
       dict that is logged server-side but never returned.
       ValidationError, NotFoundError and DatabaseError are mapped by the
       global handlers registered in ``products_api.main``.
       OriginNotAllowedError is built before routing by
       ``OriginGuardMiddleware``, which answers the 403 itself.

Exception Hierarchy:
    ProductsAPIError (base)
    ├── ValidationError        → 400 {"errors": [...]}
    ├── NotFoundError          → 404 {"error": "product not found"}
    ├── OriginNotAllowedError  → 403 {"error": "CORS error"} (origin guard)
    └── DatabaseError          → 500 {"error": "Internal server error"}
"""

from typing import Any, Dict, List, Optional

from products_api.validation import FieldError


class ProductsAPIError(Exception):
    """
    Base exception for all application errors.

    Attributes:
        message:  Client-facing description
        context:  Debug information (logged, NOT returned to the client)
    """

    def __init__(
        self,
        message: str = "An unexpected error occurred",
        context: Optional[Dict[str, Any]] = None,
    ):
        self.message = message
        self.context = context or {}
        super().__init__(self.message)


class ValidationError(ProductsAPIError):
    """
    Raised when a request breaks one or more validation rules.

    HTTP: 400 Bad Request, body ``{"errors": [FieldError, ...]}``.
    The whole violation list is kept so the client sees every failed rule at once.
    """

    def __init__(self, errors: List[FieldError], context: Optional[Dict[str, Any]] = None):
        self.errors = list(errors)
        ctx = context or {}
        ctx["fields"] = sorted({error.path for error in self.errors if error.path})
        super().__init__(message="Request validation failed", context=ctx)


class NotFoundError(ProductsAPIError):
    """
    Raised when a product id has no matching row.

    HTTP: 404 Not Found. The message is the same for every id-based
    operation, delete included.
    """

    def __init__(
        self,
        resource: str = "product",
        resource_id: Optional[Any] = None,
        context: Optional[Dict[str, Any]] = None,
    ):
        ctx = context or {}
        ctx["resource"] = resource
        if resource_id is not None:
            ctx["resource_id"] = resource_id
        super().__init__(message=f"{resource} not found", context=ctx)


class OriginNotAllowedError(ProductsAPIError):
    """Raised by the origin guard for a browser Origin outside the allowlist. HTTP: 403."""

    def __init__(self, origin: str, context: Optional[Dict[str, Any]] = None):
        ctx = context or {}
        ctx["origin"] = origin
        super().__init__(message="CORS error", context=ctx)
        self.origin = origin


class DatabaseError(ProductsAPIError):
    """
    Raised when a query, insert, update or delete fails unexpectedly.

    HTTP: 500 Internal Server Error. The response body is always generic;
    the operation name and original error type stay in ``context``.
    """

    def __init__(
        self,
        message: str = "A database error occurred. Please try again later.",
        context: Optional[Dict[str, Any]] = None,
    ):
        super().__init__(message=message, context=context)

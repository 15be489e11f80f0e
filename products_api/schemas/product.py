"""
Products API - Pydantic Request/Response Schemas
================================================

What:  The API contract of the products resource.
How:   Response models are used as FastAPI ``response_model``s (serialization
       + OpenAPI). Request models only document the bodies: requests are
       validated by ``products_api.validation`` so that rule failures come
       back as 400 ``{"errors": [...]}`` instead of FastAPI's 422.

Schemas are separate from the SQLAlchemy model so the exposed fields are
explicit (the list view hides timestamps, the detail view shows them).
"""

from datetime import datetime
from typing import Any, List, Optional

from pydantic import AliasChoices, BaseModel, Field


# ══════════════════════════════════════════════════════════════════════════
# Response Models
# ══════════════════════════════════════════════════════════════════════════


class ProductSummary(BaseModel):
    """Product as it appears in the list endpoint (no timestamps)."""
    id: int = Field(description="The Product ID", examples=[1])
    name: str = Field(description="The Product name", examples=["Gaming mouse"])
    price: float = Field(description="The Product price", examples=[40])
    availability: bool = Field(description="The Product availability", examples=[True])

    model_config = {"from_attributes": True}


class ProductResponse(ProductSummary):
    """
    Full product representation returned by every single-product endpoint.

    Timestamps are read from the ORM attributes ``created_at``/``updated_at``
    and serialized as ``createdAt``/``updatedAt``.
    """
    created_at: datetime = Field(
        validation_alias=AliasChoices("createdAt", "created_at"),
        serialization_alias="createdAt",
        description="When the product was created (UTC)",
    )
    updated_at: datetime = Field(
        validation_alias=AliasChoices("updatedAt", "updated_at"),
        serialization_alias="updatedAt",
        description="When the product was last modified (UTC)",
    )


class ProductEnvelope(BaseModel):
    data: ProductResponse


class ProductListEnvelope(BaseModel):
    data: List[ProductSummary] = Field(description="Up to 50 products ordered by id")


class MessageEnvelope(BaseModel):
    data: str = Field(examples=["Product deleted"])


class ApiMessage(BaseModel):
    msg: str = Field(examples=["Desde Api"])


# ══════════════════════════════════════════════════════════════════════════
# Request Bodies (documentation only)
# ══════════════════════════════════════════════════════════════════════════


class ProductCreate(BaseModel):
    name: str = Field(examples=["Gaming mouse"])
    price: float = Field(gt=0, examples=[40])


class ProductUpdate(ProductCreate):
    availability: bool = Field(examples=[True])


# ══════════════════════════════════════════════════════════════════════════
# Error Response Models
# ══════════════════════════════════════════════════════════════════════════


class FieldErrorItem(BaseModel):
    """
    One violated rule.

    Example:
        {"type": "field", "value": 0, "msg": "Price not valid",
         "path": "price", "location": "body"}
    """
    type: str = Field(default="field")
    value: Optional[Any] = Field(default=None, description="Offending value, omitted when missing")
    msg: str = Field(description="Human-readable rule message")
    path: str = Field(description="Field name")
    location: str = Field(description="'params' or 'body'")


class ValidationErrorResponse(BaseModel):
    errors: List[FieldErrorItem]


class ErrorResponse(BaseModel):
    error: str = Field(description="Error message", examples=["product not found"])

"""
Products API - Products Route Handlers
======================================

What:  The six products endpoints under ``/api/products``.
How:   Each route declares its validation dependency first (so invalid
       requests never open a database session), then the session
       dependency, then delegates to ProductService.

Route → rules → service:
    GET    /              –                      list_products
    GET    /{id}          PRODUCT_ID_RULES       get_product
    POST   /              CREATE_PRODUCT_RULES   create_product
    PUT    /{id}          UPDATE_PRODUCT_RULES   update_product
    PATCH  /{id}          PRODUCT_ID_RULES       toggle_availability
    DELETE /{id}          PRODUCT_ID_RULES       delete_product

The ``{id}`` path parameter is read as a raw string by the validation
dependency ("Id not valid" instead of FastAPI's 422), so it is documented
through ``openapi_extra``.
"""

from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession

from products_api.database import get_db_session
from products_api.routes.dependencies import validate_request
from products_api.schemas.product import (
    ErrorResponse,
    MessageEnvelope,
    ProductCreate,
    ProductEnvelope,
    ProductListEnvelope,
    ProductUpdate,
    ValidationErrorResponse,
)
from products_api.services.product_service import product_service
from products_api.validation import (
    CREATE_PRODUCT_RULES,
    PRODUCT_ID_RULES,
    UPDATE_PRODUCT_RULES,
    RequestData,
)

router = APIRouter(prefix="/api/products", tags=["Products"])


# ── OpenAPI fragments ─────────────────────────────────────────────────────

def _id_parameter(description: str) -> dict:
    return {
        "in": "path",
        "name": "id",
        "description": description,
        "required": True,
        "schema": {"type": "integer"},
    }


def _json_body(model) -> dict:
    return {
        "required": True,
        "content": {"application/json": {"schema": model.model_json_schema()}},
    }


BAD_REQUEST = {400: {"description": "Bad Request - invalid id or input data", "model": ValidationErrorResponse}}
NOT_FOUND = {404: {"description": "Product not found", "model": ErrorResponse}}
SERVER_ERROR = {500: {"description": "Server error", "model": ErrorResponse}}


# ── Routes ────────────────────────────────────────────────────────────────

@router.get(
    "",
    response_model=ProductListEnvelope,
    responses=SERVER_ERROR,
    summary="Get a list of products",
    description="Returns up to 50 products ordered by id, without timestamps.",
)
async def list_products(db: AsyncSession = Depends(get_db_session)) -> ProductListEnvelope:
    products = await product_service.list_products(db)
    return ProductListEnvelope(data=products)


@router.get(
    "/{id}",
    response_model=ProductEnvelope,
    responses={**BAD_REQUEST, **NOT_FOUND, **SERVER_ERROR},
    summary="Get a product by ID",
    description="Returns a product based on its unique ID.",
    openapi_extra={"parameters": [_id_parameter("The ID of the product to retrieve")]},
)
async def get_product(
    data: RequestData = Depends(validate_request(PRODUCT_ID_RULES)),
    db: AsyncSession = Depends(get_db_session),
) -> ProductEnvelope:
    product = await product_service.get_product(db, data.int_param("id"))
    return ProductEnvelope(data=product)


@router.post(
    "",
    status_code=201,
    response_model=ProductEnvelope,
    responses={**BAD_REQUEST, **SERVER_ERROR},
    summary="Create a product",
    description="Creates a new product. Availability defaults to true.",
    openapi_extra={"requestBody": _json_body(ProductCreate)},
)
async def create_product(
    data: RequestData = Depends(validate_request(CREATE_PRODUCT_RULES)),
    db: AsyncSession = Depends(get_db_session),
) -> ProductEnvelope:
    product = await product_service.create_product(db, data.body)
    return ProductEnvelope(data=product)


@router.put(
    "/{id}",
    response_model=ProductEnvelope,
    responses={**BAD_REQUEST, **NOT_FOUND, **SERVER_ERROR},
    summary="Update a product with user input",
    description="Replaces name, price and availability; all three are required.",
    openapi_extra={
        "parameters": [_id_parameter("The ID of the product to update")],
        "requestBody": _json_body(ProductUpdate),
    },
)
async def update_product(
    data: RequestData = Depends(validate_request(UPDATE_PRODUCT_RULES)),
    db: AsyncSession = Depends(get_db_session),
) -> ProductEnvelope:
    product = await product_service.update_product(db, data.int_param("id"), data.body)
    return ProductEnvelope(data=product)


@router.patch(
    "/{id}",
    response_model=ProductEnvelope,
    responses={**BAD_REQUEST, **NOT_FOUND, **SERVER_ERROR},
    summary="Toggle product availability",
    description="Flips the availability flag. Any request body is ignored.",
    openapi_extra={"parameters": [_id_parameter("The ID of the product to toggle")]},
)
async def toggle_availability(
    data: RequestData = Depends(validate_request(PRODUCT_ID_RULES)),
    db: AsyncSession = Depends(get_db_session),
) -> ProductEnvelope:
    product = await product_service.toggle_availability(db, data.int_param("id"))
    return ProductEnvelope(data=product)


@router.delete(
    "/{id}",
    response_model=MessageEnvelope,
    responses={**BAD_REQUEST, **NOT_FOUND, **SERVER_ERROR},
    summary="Delete a product by a given ID",
    description="Returns a confirmation message.",
    openapi_extra={"parameters": [_id_parameter("The ID of the product to delete")]},
)
async def delete_product(
    data: RequestData = Depends(validate_request(PRODUCT_ID_RULES)),
    db: AsyncSession = Depends(get_db_session),
) -> MessageEnvelope:
    message = await product_service.delete_product(db, data.int_param("id"))
    return MessageEnvelope(data=message)

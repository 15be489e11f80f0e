"""
Products API - Product Service
==============================

What:  One coroutine per products operation: list, get, create, full update,
       availability toggle and delete.
How:   Receives an AsyncSession (injected per request) plus already-validated
       input, performs the ORM calls, and returns Pydantic response models.
Who:   Called by the route handlers in ``products_api.routes.products``.

Error Handling:
    - Missing rows become NotFoundError (→ 404) before any mutation. Ids
      outside the primary key's range are not found without a query.
    - SQLAlchemyError is logged with the operation name and wrapped in
      DatabaseError (→ 500 with a generic body). The session dependency
      rolls the transaction back.

Concurrency:
    No row locking. Two concurrent updates of the same product are
    last-write-wins.
"""

import logging
from typing import Any, Dict, List

from sqlalchemy import select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from products_api.exceptions import DatabaseError, NotFoundError
from products_api.models.product import Product
from products_api.schemas.product import ProductResponse, ProductSummary
from products_api.validation import to_boolean, to_number

logger = logging.getLogger(__name__)

# Fixed page size of the list endpoint (no pagination parameters)
LIST_LIMIT = 50

PRODUCT_DELETED = "Product deleted"

# Range of the INTEGER primary key (int4 on PostgreSQL); no row can have an id outside it
MIN_PRODUCT_ID = -(2 ** 31)
MAX_PRODUCT_ID = 2 ** 31 - 1


class ProductService:
    """
    Stateless business layer for the products table.

    Every public method either returns a response model or raises
    NotFoundError / DatabaseError; nothing is swallowed.
    """

    async def list_products(self, db: AsyncSession, limit: int = LIST_LIMIT) -> List[ProductSummary]:
        """
        Return up to ``limit`` products ordered by ascending id.

        Query plan:
            SELECT ... FROM products ORDER BY id ASC LIMIT 50
        """
        try:
            result = await db.execute(
                select(Product).order_by(Product.id.asc()).limit(limit)
            )
            products = result.scalars().all()
        except SQLAlchemyError as e:
            raise self._database_error("list_products", e)

        return [ProductSummary.model_validate(product) for product in products]

    async def get_product(self, db: AsyncSession, product_id: int) -> ProductResponse:
        product = await self._get_or_404(db, product_id)
        return ProductResponse.model_validate(product)

    async def create_product(self, db: AsyncSession, payload: Dict[str, Any]) -> ProductResponse:
        """
        Insert a product from a validated request body.

        Only ``name``, ``price`` and ``availability`` are taken from the body;
        ``id`` and the timestamps are always system-assigned and any other
        key is ignored. ``availability`` defaults to True when absent or not
        boolean-like.
        """
        availability = to_boolean(payload.get("availability"))
        product = Product(
            name=str(payload["name"]),
            price=to_number(payload["price"]),
            availability=True if availability is None else availability,
        )
        try:
            db.add(product)
            await db.commit()
            await db.refresh(product)
        except SQLAlchemyError as e:
            raise self._database_error("create_product", e)

        logger.info("Product %s created", product.id)
        return ProductResponse.model_validate(product)

    async def update_product(
        self,
        db: AsyncSession,
        product_id: int,
        payload: Dict[str, Any],
    ) -> ProductResponse:
        """
        Full replacement of the mutable fields (PUT semantics).

        ``name``, ``price`` and ``availability`` are all required by the
        request rules, so every one of them is overwritten.
        """
        product = await self._get_or_404(db, product_id)

        product.name = str(payload["name"])
        product.price = to_number(payload["price"])
        product.availability = to_boolean(payload["availability"])

        try:
            await db.commit()
            await db.refresh(product)
        except SQLAlchemyError as e:
            raise self._database_error("update_product", e, product_id=product_id)

        logger.info("Product %s updated", product_id)
        return ProductResponse.model_validate(product)

    async def toggle_availability(self, db: AsyncSession, product_id: int) -> ProductResponse:
        """
        Flip ``availability`` (PATCH semantics). The request body is never read,
        so calling this twice restores the original value.
        """
        product = await self._get_or_404(db, product_id)
        product.availability = not product.availability

        try:
            await db.commit()
            await db.refresh(product)
        except SQLAlchemyError as e:
            raise self._database_error("toggle_availability", e, product_id=product_id)

        logger.info("Product %s availability set to %s", product_id, product.availability)
        return ProductResponse.model_validate(product)

    async def delete_product(self, db: AsyncSession, product_id: int) -> str:
        """Remove the row and return the confirmation string sent to the client."""
        product = await self._get_or_404(db, product_id)

        try:
            await db.delete(product)
            await db.commit()
        except SQLAlchemyError as e:
            raise self._database_error("delete_product", e, product_id=product_id)

        logger.info("Product %s deleted", product_id)
        return PRODUCT_DELETED

    # ── Helpers ───────────────────────────────────────────────────────────

    async def _get_or_404(self, db: AsyncSession, product_id: int) -> Product:
        if not MIN_PRODUCT_ID <= product_id <= MAX_PRODUCT_ID:
            raise NotFoundError(resource="product", resource_id=product_id)

        try:
            product = await db.get(Product, product_id)
        except SQLAlchemyError as e:
            raise self._database_error("get_product", e, product_id=product_id)

        if product is None:
            raise NotFoundError(resource="product", resource_id=product_id)
        return product

    @staticmethod
    def _database_error(operation: str, error: Exception, **context: Any) -> DatabaseError:
        logger.error("Database error in %s: %s", operation, error, exc_info=True)
        return DatabaseError(
            context={"operation": operation, "error_type": type(error).__name__, **context},
        )


# Stateless, shared by all requests
product_service = ProductService()

"""
Products API - Product Service Unit Tests
=========================================

What:  Tests for ProductService business logic with a mocked AsyncSession.
How:   No database: ``db.get``/``db.execute`` return real Product instances
       built by the ``make_product`` fixture, and commit/refresh are AsyncMocks.

What we test:
    ✅ Not found raises NotFoundError before any write
    ✅ Create takes only name/price/availability from the body
    ✅ Full update overwrites every mutable field
    ✅ Toggle flips availability
    ✅ SQLAlchemy failures become DatabaseError
"""

from datetime import datetime, timezone
from unittest.mock import AsyncMock, MagicMock

import pytest
from sqlalchemy.exc import IntegrityError, OperationalError

from products_api.exceptions import DatabaseError, NotFoundError
from products_api.services.product_service import (
    MAX_PRODUCT_ID,
    MIN_PRODUCT_ID,
    PRODUCT_DELETED,
    ProductService,
)


def scalars_result(items):
    result = MagicMock()
    result.scalars.return_value.all.return_value = items
    return result


class TestListProducts:

    def setup_method(self):
        self.service = ProductService()

    @pytest.mark.asyncio
    async def test_returns_summaries(self, mock_db_session, make_product):
        mock_db_session.execute.return_value = scalars_result(
            [make_product(id=1), make_product(id=2, name="Teclado")]
        )

        result = await self.service.list_products(mock_db_session)

        assert [p.id for p in result] == [1, 2]
        assert result[1].name == "Teclado"
        assert "created_at" not in result[0].model_dump()

    @pytest.mark.asyncio
    async def test_database_failure_raises_database_error(self, mock_db_session):
        mock_db_session.execute.side_effect = OperationalError("SELECT", {}, Exception("down"))

        with pytest.raises(DatabaseError) as exc_info:
            await self.service.list_products(mock_db_session)

        assert exc_info.value.context["operation"] == "list_products"
        assert exc_info.value.context["error_type"] == "OperationalError"


class TestGetProduct:

    def setup_method(self):
        self.service = ProductService()

    @pytest.mark.asyncio
    async def test_not_found(self, mock_db_session):
        """Missing id should raise NotFoundError with the client-facing message."""
        mock_db_session.get.return_value = None

        with pytest.raises(NotFoundError) as exc_info:
            await self.service.get_product(mock_db_session, 20000)

        assert exc_info.value.message == "product not found"
        assert exc_info.value.context["resource_id"] == 20000

    @pytest.mark.asyncio
    @pytest.mark.parametrize("product_id", [MAX_PRODUCT_ID + 1, MIN_PRODUCT_ID - 1, int("9" * 30)])
    async def test_id_outside_key_range_is_not_queried(self, mock_db_session, product_id):
        with pytest.raises(NotFoundError):
            await self.service.get_product(mock_db_session, product_id)

        mock_db_session.get.assert_not_awaited()

    @pytest.mark.asyncio
    async def test_largest_key_is_queried(self, mock_db_session):
        mock_db_session.get.return_value = None

        with pytest.raises(NotFoundError):
            await self.service.get_product(mock_db_session, MAX_PRODUCT_ID)

        mock_db_session.get.assert_awaited_once()

    @pytest.mark.asyncio
    async def test_found(self, mock_db_session, make_product):
        mock_db_session.get.return_value = make_product(id=5)

        result = await self.service.get_product(mock_db_session, 5)

        assert result.id == 5
        assert result.model_dump(by_alias=True)["createdAt"] is not None


class TestCreateProduct:

    def setup_method(self):
        self.service = ProductService()

    @staticmethod
    def assign_identity(product_id):
        async def refresh(product):
            now = datetime.now(timezone.utc)
            product.id = product_id
            product.created_at = now
            product.updated_at = now
        return refresh

    @pytest.mark.asyncio
    async def test_creates_with_default_availability(self, mock_db_session):
        mock_db_session.refresh.side_effect = self.assign_identity(7)

        result = await self.service.create_product(
            mock_db_session, {"name": "Mouse", "price": "50", "id": 999}
        )

        added = mock_db_session.add.call_args.args[0]
        assert added.name == "Mouse"
        assert added.price == 50.0
        assert added.availability is True
        assert result.id == 7
        mock_db_session.commit.assert_awaited_once()

    @pytest.mark.asyncio
    async def test_keeps_boolean_like_availability(self, mock_db_session):
        mock_db_session.refresh.side_effect = self.assign_identity(8)

        result = await self.service.create_product(
            mock_db_session, {"name": "Mouse", "price": 10, "availability": "false"}
        )

        assert result.availability is False

    @pytest.mark.asyncio
    async def test_commit_failure_raises_database_error(self, mock_db_session):
        mock_db_session.commit.side_effect = IntegrityError("INSERT", {}, Exception("constraint"))

        with pytest.raises(DatabaseError) as exc_info:
            await self.service.create_product(mock_db_session, {"name": "Mouse", "price": 10})

        assert exc_info.value.context["operation"] == "create_product"
        mock_db_session.refresh.assert_not_awaited()


class TestUpdateProduct:

    def setup_method(self):
        self.service = ProductService()

    @pytest.mark.asyncio
    async def test_overwrites_all_fields(self, mock_db_session, make_product):
        product = make_product(id=3)
        mock_db_session.get.return_value = product

        result = await self.service.update_product(
            mock_db_session, 3, {"name": "Monitor plano", "price": "250", "availability": "0"}
        )

        assert product.name == "Monitor plano"
        assert product.price == 250.0
        assert product.availability is False
        assert result.name == "Monitor plano"
        mock_db_session.commit.assert_awaited_once()

    @pytest.mark.asyncio
    async def test_not_found_does_not_commit(self, mock_db_session):
        mock_db_session.get.return_value = None

        with pytest.raises(NotFoundError):
            await self.service.update_product(
                mock_db_session, 99999, {"name": "x", "price": 1, "availability": True}
            )

        mock_db_session.commit.assert_not_awaited()


class TestToggleAvailability:

    def setup_method(self):
        self.service = ProductService()

    @pytest.mark.asyncio
    async def test_flips_flag(self, mock_db_session, make_product):
        product = make_product(availability=True)
        mock_db_session.get.return_value = product

        result = await self.service.toggle_availability(mock_db_session, 1)

        assert result.availability is False
        assert product.availability is False

    @pytest.mark.asyncio
    async def test_twice_restores_flag(self, mock_db_session, make_product):
        mock_db_session.get.return_value = make_product(availability=False)

        await self.service.toggle_availability(mock_db_session, 1)
        result = await self.service.toggle_availability(mock_db_session, 1)

        assert result.availability is False


class TestDeleteProduct:

    def setup_method(self):
        self.service = ProductService()

    @pytest.mark.asyncio
    async def test_deletes_and_confirms(self, mock_db_session, make_product):
        product = make_product()
        mock_db_session.get.return_value = product

        message = await self.service.delete_product(mock_db_session, 1)

        assert message == PRODUCT_DELETED == "Product deleted"
        mock_db_session.delete.assert_awaited_once_with(product)
        mock_db_session.commit.assert_awaited_once()

    @pytest.mark.asyncio
    async def test_not_found_message_is_lowercase(self, mock_db_session):
        mock_db_session.get.return_value = None

        with pytest.raises(NotFoundError) as exc_info:
            await self.service.delete_product(mock_db_session, 1)

        assert exc_info.value.message == "product not found"
        mock_db_session.delete.assert_not_awaited()

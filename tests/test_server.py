"""
Tests for the API root, the liveness ping, generated docs and access logging.
"""

import logging

import pytest


class TestApiRoot:

    @pytest.mark.asyncio
    async def test_api_root_message(self, test_client):
        response = await test_client.get("/api")

        assert response.status_code == 200
        assert response.json()["msg"] == "Desde Api"

    @pytest.mark.asyncio
    async def test_ping_returns_plain_text(self, test_client):
        response = await test_client.get("/api/ping")

        assert response.status_code == 200
        assert response.text == "pong"
        assert response.headers["content-type"].startswith("text/plain")


class TestDocs:

    @pytest.mark.asyncio
    async def test_openapi_document(self, test_client):
        response = await test_client.get("/openapi.json")

        assert response.status_code == 200
        schema = response.json()
        assert schema["info"]["title"] == "REST API FastAPI / SQLAlchemy"
        assert "/api/products" in schema["paths"]
        assert set(schema["paths"]["/api/products/{id}"]) == {"get", "put", "patch", "delete"}
        assert {"name": "Products", "description": "CRUD products"} in schema["tags"]

    @pytest.mark.asyncio
    async def test_id_parameter_is_documented(self, test_client):
        schema = (await test_client.get("/openapi.json")).json()

        parameters = schema["paths"]["/api/products/{id}"]["get"]["parameters"]
        assert parameters[0]["name"] == "id"
        assert parameters[0]["in"] == "path"

    @pytest.mark.asyncio
    async def test_swagger_ui_is_served(self, test_client):
        response = await test_client.get("/docs")

        assert response.status_code == 200
        assert "text/html" in response.headers["content-type"]


class TestRequestLogging:

    @pytest.mark.asyncio
    async def test_successful_request_is_logged_at_info(self, test_client, caplog):
        with caplog.at_level(logging.INFO, logger="products_api.access"):
            await test_client.get("/api")

        records = [r for r in caplog.records if r.name == "products_api.access"]
        assert len(records) == 1
        assert records[0].levelno == logging.INFO
        assert records[0].getMessage().startswith("GET /api 200")

    @pytest.mark.asyncio
    async def test_not_found_is_logged_at_warning(self, test_client, caplog):
        with caplog.at_level(logging.INFO, logger="products_api.access"):
            await test_client.get("/api/products/12345")

        records = [r for r in caplog.records if r.name == "products_api.access"]
        assert records[0].levelno == logging.WARNING
        assert records[0].status == 404

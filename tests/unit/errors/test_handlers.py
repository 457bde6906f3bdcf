"""Tests for Problem Details exception handlers."""

import pytest
from fastapi import FastAPI
from httpx import ASGITransport, AsyncClient

from sitekit.core.errors import (
    ApiError,
    ConfigurationError,
    ServiceUnavailableError,
    register_exception_handlers,
)


@pytest.fixture
async def client():
    app = FastAPI()
    register_exception_handlers(app)

    @app.get("/upstream")
    async def upstream() -> None:
        raise ApiError("Not allowed", status_code=403, details={"url": "/secret"})

    @app.get("/unavailable")
    async def unavailable() -> None:
        raise ServiceUnavailableError()

    @app.get("/boom")
    async def boom() -> None:
        raise RuntimeError("boom")

    transport = ASGITransport(app=app, raise_app_exceptions=False)
    async with AsyncClient(transport=transport, base_url="http://test") as ac:
        yield ac


class TestAppExceptionHandler:
    """Tests for AppException responses."""

    @pytest.mark.asyncio
    async def test_api_error_mirrors_upstream_status(self, client: AsyncClient):
        response = await client.get("/upstream")

        assert response.status_code == 403
        data = response.json()
        assert data["title"] == "Api Error"
        assert data["detail"] == "Not allowed"
        assert data["instance"] == "/upstream"
        assert data["url"] == "/secret"

    @pytest.mark.asyncio
    async def test_service_unavailable(self, client: AsyncClient):
        response = await client.get("/unavailable")

        assert response.status_code == 503
        assert response.json()["detail"] == "Service temporarily unavailable"

    @pytest.mark.asyncio
    async def test_unhandled_exception(self, client: AsyncClient):
        response = await client.get("/boom")

        assert response.status_code == 500
        assert response.json()["detail"] == "An unexpected error occurred"


class TestExceptions:
    """Tests for exception defaults."""

    def test_api_error_default_status(self):
        assert ApiError().status_code == 502

    def test_configuration_error_without_key(self):
        error = ConfigurationError()

        assert error.message == "Configuration item not found"
        assert error.details == {}

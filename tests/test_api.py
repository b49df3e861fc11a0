"""Tests for API endpoints."""

import logging
from unittest.mock import AsyncMock, MagicMock

import pytest
from httpx import ASGITransport, AsyncClient

from config import Config
from shortcodes.errors import StoreError
from shortcodes.service import ShortCodeService
from web_app import create_app


def _build_app(service, db_url):
    return create_app(service_instance=service, config=Config(database_url=db_url))


@pytest.fixture
async def client(service, db_url):
    """Create test client."""
    app = _build_app(service, db_url)
    async with AsyncClient(transport=ASGITransport(app=app), base_url="http://testserver") as ac:
        yield ac


class TestAPIEndpoints:
    """Test API endpoints."""

    async def test_encode(self, client):
        """Test POST /encode."""
        response = await client.post("/encode", json={"value": "https://example.com/test"})

        assert response.status_code == 200
        assert response.json() == {"code": "01"}

    async def test_encode_then_decode(self, client, sample_values):
        """Test POST /encode followed by POST /decode."""
        for value in sample_values:
            code = (await client.post("/encode", json={"value": value})).json()["code"]

            response = await client.post("/decode", json={"code": code})

            assert response.status_code == 200
            assert response.json() == {"value": value}

    async def test_encode_twice(self, client):
        """The same value keeps its code."""
        first = await client.post("/encode", json={"value": "repeat"})
        second = await client.post("/encode", json={"value": "repeat"})

        assert first.json()["code"] == second.json()["code"]

    async def test_encode_empty_value(self, client):
        """Test POST /encode with an empty value."""
        response = await client.post("/encode", json={"value": ""})

        assert response.status_code == 400
        assert response.json() == {"error": "value is empty"}

    async def test_encode_lone_surrogate(self, client):
        """A JSON-escaped lone surrogate is a client error."""
        response = await client.post(
            "/encode",
            content=b'{"value": "\\ud800"}',
            headers={"Content-Type": "application/json"},
        )

        assert response.status_code == 400
        assert response.json() == {"error": "value is not valid UTF-8"}

    async def test_encode_missing_value(self, client):
        """A body without value fails request validation."""
        response = await client.post("/encode", json={})

        assert response.status_code == 422

    @pytest.mark.parametrize("code", ["a", "abcdef", "zz9!!"])
    async def test_decode_malformed(self, client, code):
        """Test POST /decode with malformed codes."""
        response = await client.post("/decode", json={"code": code})

        assert response.status_code == 400
        assert "error" in response.json()

    async def test_decode_not_found(self, client):
        """Test POST /decode for a nonexistent code."""
        response = await client.post("/decode", json={"code": "zzzzz"})

        assert response.status_code == 404
        assert response.json() == {"error": "not found"}

    async def test_encode_exhausted(self, client, set_next_identity):
        """Code space exhaustion maps to 507."""
        set_next_identity(62 ** 5)

        response = await client.post("/encode", json={"value": "overflow"})

        assert response.status_code == 507
        assert "exhausted" in response.json()["error"]

    async def test_store_failure_is_opaque(self, db_url):
        """Store errors become a generic 500 without internal detail."""
        store = MagicMock()
        store.get_by_value = AsyncMock(side_effect=StoreError("database is locked at /secret/path"))
        store.get_by_code = AsyncMock(side_effect=StoreError("database is locked at /secret/path"))
        app = _build_app(ShortCodeService(store=store), db_url)

        async with AsyncClient(transport=ASGITransport(app=app), base_url="http://testserver") as ac:
            encode_response = await ac.post("/encode", json={"value": "v"})
            decode_response = await ac.post("/decode", json={"code": "01"})

        for response in (encode_response, decode_response):
            assert response.status_code == 500
            assert response.json() == {"error": "internal error"}

    async def test_health_check(self, client):
        """Test GET /health."""
        response = await client.get("/health")

        assert response.status_code == 200
        data = response.json()
        assert data["status"] == "healthy"
        assert data["database"] == "healthy"
        assert data["cache"] == "healthy"
        assert "timestamp" in data

    async def test_request_log_names_outcome(self, client, caplog):
        """Each request is logged with its status and error kind."""
        caplog.set_level(logging.INFO, logger="web_app")

        await client.post("/encode", json={"value": "logged"})
        await client.post("/decode", json={"code": "zzzzz"})

        messages = [r.getMessage() for r in caplog.records if r.name == "web_app.middleware.logging"]
        assert any("POST /encode -> 200 (ok)" in m for m in messages)
        assert any("POST /decode -> 404 (not-found)" in m for m in messages)
        warnings = [r for r in caplog.records if "(not-found)" in r.getMessage()]
        assert warnings[0].levelno == logging.WARNING

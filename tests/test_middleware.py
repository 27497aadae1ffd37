"""Middleware tests: request ID, rate limiting, CORS, error handling."""

import pytest
from httpx import ASGITransport, AsyncClient

from cfc.errors import CapacityExceeded
from cfc.main import create_app


@pytest.mark.asyncio
async def test_request_id_generated(client: AsyncClient) -> None:
    """Request ID is auto-generated when not provided."""
    response = await client.get("/health")
    assert len(response.headers["x-request-id"]) == 36  # UUID format


@pytest.mark.asyncio
async def test_request_id_preserved(client: AsyncClient) -> None:
    response = await client.get("/health", headers={"X-Request-Id": "test-abc-123"})
    assert response.headers["x-request-id"] == "test-abc-123"


@pytest.mark.asyncio
async def test_no_rate_limit_without_redis(client: AsyncClient) -> None:
    """With the memory backend there is no Redis, so requests pass unlimited."""
    for _ in range(120):
        response = await client.get("/api/v1/levels")
        assert response.status_code == 200
    assert "x-ratelimit-limit" not in response.headers


@pytest.mark.asyncio
async def test_rate_limit_blocks_excess(client: AsyncClient, redis_client) -> None:
    """101st request in a window returns 429 with Retry-After."""
    keys = await redis_client.keys("cfc:ratelimit:*")
    if keys:
        await redis_client.delete(*keys)

    response = await client.get("/api/v1/levels")
    assert response.headers["x-ratelimit-limit"] == "100"
    for _ in range(99):
        await client.get("/api/v1/levels")
    response = await client.get("/api/v1/levels")
    assert response.status_code == 429
    assert "retry-after" in response.headers

    keys = await redis_client.keys("cfc:ratelimit:*")
    if keys:
        await redis_client.delete(*keys)


@pytest.mark.asyncio
async def test_cors_preflight(client: AsyncClient) -> None:
    response = await client.options(
        "/api/v1/levels",
        headers={
            "Origin": "http://localhost:3000",
            "Access-Control-Request-Method": "GET",
        },
    )
    assert response.headers["access-control-allow-origin"] == "http://localhost:3000"


@pytest.mark.asyncio
async def test_404_returns_json(client: AsyncClient) -> None:
    response = await client.get("/nonexistent-path")
    assert response.status_code == 404
    assert response.json()["detail"] == "Not Found"


@pytest.mark.asyncio
async def test_validation_error_format(client: AsyncClient) -> None:
    response = await client.post("/api/v1/auth/login", json={"email": "x"})
    assert response.status_code == 422
    data = response.json()
    assert data["detail"] == "Validation error"
    assert isinstance(data["errors"], list)


@pytest.mark.asyncio
async def test_service_error_and_500_return_json() -> None:
    """Domain errors keep their status and code; anything else becomes a JSON 500."""
    app = create_app()

    @app.get("/boom/domain")
    async def domain_error():
        raise CapacityExceeded("Maximum 3 active requests allowed")

    @app.get("/boom/crash")
    async def crash():
        raise RuntimeError("kaput")

    transport = ASGITransport(app=app, raise_app_exceptions=False)
    async with AsyncClient(transport=transport, base_url="http://test") as ac:
        domain = await ac.get("/boom/domain")
        assert domain.status_code == 409
        assert domain.json() == {"detail": "Maximum 3 active requests allowed", "error": "capacity_exceeded"}

        crashed = await ac.get("/boom/crash")
        assert crashed.status_code == 500
        assert crashed.json() == {"detail": "Internal server error"}

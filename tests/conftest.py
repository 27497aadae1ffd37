"""Shared test fixtures."""

from __future__ import annotations

import os
import uuid
from collections.abc import AsyncGenerator, Awaitable, Callable
from datetime import datetime, timedelta, timezone
from typing import Any

import pytest
import pytest_asyncio
from httpx import ASGITransport, AsyncClient

os.environ["CFC_STORAGE_BACKEND"] = "memory"
os.environ["CFC_ADMIN_EMAILS"] = '["admin@example.com"]'
os.environ["CFC_LOG_FORMAT"] = "console"

from cfc.config import get_settings  # noqa: E402
from cfc.database import close_store, init_store  # noqa: E402
from cfc.db.models import FoodRequest, FoodType, Hero, Quantity, Rating, Requester, RequestStatus  # noqa: E402
from cfc.db.store import InMemoryStore  # noqa: E402
from cfc.main import create_app  # noqa: E402
from cfc.redis_client import close_redis, init_redis  # noqa: E402

PASSWORD = "SecurePass1"

# Monday 2026-03-02, 14:00 Halifax time (UTC-4 before DST starts on the 8th)
BASE_TIME = datetime(2026, 3, 2, 18, 0, tzinfo=timezone.utc)


# ---------------------------------------------------------------------------
# Store fixtures
# ---------------------------------------------------------------------------


@pytest.fixture
def store() -> InMemoryStore:
    """Fresh in-memory store per test."""
    get_settings.cache_clear()
    return InMemoryStore(namespace="test")


@pytest_asyncio.fixture
async def redis_client() -> AsyncGenerator[Any, None]:
    """Redis client on a scratch namespace. Skips when no server is reachable."""
    settings = get_settings()
    rc = await init_redis(settings.redis_url)
    try:
        await rc.ping()
    except Exception:
        await close_redis()
        pytest.skip("Redis not available")
    yield rc
    keys = await rc.keys("cfctest:*")
    if keys:
        await rc.delete(*keys)
    await close_redis()


# ---------------------------------------------------------------------------
# Record factories
# ---------------------------------------------------------------------------


@pytest.fixture
def make_hero(store: InMemoryStore) -> Callable[..., Awaitable[Hero]]:
    """Insert a hero straight into the store."""

    async def _make(**overrides: Any) -> Hero:
        fields: dict[str, Any] = {
            "id": f"hero-{uuid.uuid4().hex[:8]}",
            "email": f"{uuid.uuid4().hex[:8]}@example.com",
            "password": "not-a-real-hash",
            "name": "Test Hero",
            "neighborhood": "North End",
            "created_at": BASE_TIME - timedelta(days=60),
        }
        fields.update(overrides)
        hero = Hero(**fields)
        await store.update_users(lambda users: users.append(hero))
        return hero

    return _make


@pytest.fixture
def make_requester(store: InMemoryStore) -> Callable[..., Awaitable[Requester]]:
    """Insert a requester straight into the store."""

    async def _make(**overrides: Any) -> Requester:
        fields: dict[str, Any] = {
            "id": f"requester-{uuid.uuid4().hex[:8]}",
            "email": f"{uuid.uuid4().hex[:8]}@example.com",
            "password": "not-a-real-hash",
            "name": "Test Requester",
            "neighborhood": "North End",
            "created_at": BASE_TIME - timedelta(days=60),
        }
        fields.update(overrides)
        requester = Requester(**fields)
        await store.update_users(lambda users: users.append(requester))
        return requester

    return _make


@pytest.fixture
def make_delivery(store: InMemoryStore) -> Callable[..., Awaitable[FoodRequest]]:
    """Insert a request in any state. ``completed_at`` implies completed."""

    async def _make(
        hero_id: str | None = None,
        completed_at: datetime | None = None,
        stars: int | None = None,
        **overrides: Any,
    ) -> FoodRequest:
        created = (completed_at or BASE_TIME) - timedelta(hours=3)
        fields: dict[str, Any] = {
            "id": f"request-{uuid.uuid4().hex[:8]}",
            "requester_id": "requester-x",
            "hero_id": hero_id,
            "status": RequestStatus.PENDING,
            "food_type": FoodType.PRODUCE,
            "quantity": Quantity.SINGLE,
            "delivery_address": "1 Agricola St, North End, Halifax",
            "preferred_time_start": created,
            "preferred_time_end": created + timedelta(hours=6),
            "created_at": created,
        }
        if completed_at is not None:
            fields.update(
                status=RequestStatus.COMPLETED,
                accepted_at=created + timedelta(minutes=10),
                in_progress_at=created + timedelta(minutes=30),
                completed_at=completed_at,
            )
        if stars is not None:
            fields["rating"] = Rating(stars=stars, created_at=completed_at or created)
        fields.update(overrides)
        request = FoodRequest(**fields)
        await store.update_requests(lambda requests: requests.append(request))
        return request

    return _make


# ---------------------------------------------------------------------------
# HTTP client fixtures
# ---------------------------------------------------------------------------


@pytest_asyncio.fixture
async def client() -> AsyncGenerator[AsyncClient, None]:
    """Async HTTP test client over the app with an in-memory store."""
    get_settings.cache_clear()
    app = create_app()
    await init_store(get_settings())

    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as ac:
        yield ac

    await close_store()


async def _register(client: AsyncClient, user_type: str, email: str, **extra: Any) -> dict:
    """Register through the API and return the token response body."""
    body = {
        "email": email,
        "password": PASSWORD,
        "name": extra.pop("name", f"{user_type.title()} {email.split('@')[0]}"),
        "neighborhood": extra.pop("neighborhood", "North End"),
        "type": user_type,
        **extra,
    }
    response = await client.post("/api/v1/auth/register", json=body)
    assert response.status_code == 201, response.text
    return response.json()


def _bearer(token_body: dict) -> dict[str, str]:
    return {"Authorization": f"Bearer {token_body['access_token']}"}


@pytest_asyncio.fixture
async def hero_auth(client: AsyncClient) -> dict:
    """Registered hero: ``{"user": ..., "headers": ...}``."""
    data = await _register(client, "hero", "hero@example.com", transport_method="bike")
    return {"user": data["user"], "headers": _bearer(data)}


@pytest_asyncio.fixture
async def requester_auth(client: AsyncClient) -> dict:
    """Registered requester: ``{"user": ..., "headers": ...}``."""
    data = await _register(client, "requester", "requester@example.com")
    return {"user": data["user"], "headers": _bearer(data)}


@pytest_asyncio.fixture
async def admin_auth(client: AsyncClient) -> dict:
    """Registered requester whose email is in CFC_ADMIN_EMAILS."""
    data = await _register(client, "requester", "admin@example.com")
    return {"user": data["user"], "headers": _bearer(data)}


def _new_request_body(**overrides: Any) -> dict:
    now = datetime.now(timezone.utc)
    body = {
        "food_type": "produce",
        "quantity": "family_2_4",
        "delivery_address": "2045 Gottingen St, North End, Halifax",
        "delivery_lat": 44.6572,
        "delivery_lng": -63.5918,
        "preferred_time_start": now.isoformat(),
        "preferred_time_end": (now + timedelta(hours=4)).isoformat(),
        "contact_method": "sms",
    }
    body.update(overrides)
    return body


@pytest.fixture
def base_time() -> datetime:
    return BASE_TIME


@pytest.fixture
def request_body() -> Callable[..., dict]:
    """Builder for a valid POST /api/v1/requests body."""
    return _new_request_body


@pytest.fixture
def signup(client: AsyncClient) -> Callable[..., Awaitable[dict]]:
    """Register another user: ``await signup("hero", "x@example.com")``."""

    async def _signup(user_type: str, email: str, **extra: Any) -> dict:
        data = await _register(client, user_type, email, **extra)
        return {"user": data["user"], "headers": _bearer(data)}

    return _signup

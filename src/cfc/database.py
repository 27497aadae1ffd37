"""Store initialisation and access."""

from __future__ import annotations

from cfc.config import Settings
from cfc.db.store import InMemoryStore, RedisStore, Store
from cfc.redis_client import close_redis, get_redis, init_redis

_store: Store | None = None


async def init_store(settings: Settings) -> Store:
    """Initialize the configured store backend."""
    global _store  # noqa: PLW0603
    if settings.storage_backend == "memory":
        _store = InMemoryStore(namespace=settings.storage_namespace)
    elif settings.storage_backend == "redis":
        await init_redis(settings.redis_url)
        _store = RedisStore(get_redis(), namespace=settings.storage_namespace)
    else:
        msg = f"Unknown storage backend: {settings.storage_backend}"
        raise RuntimeError(msg)
    return _store


async def close_store() -> None:
    """Release the store and any Redis connection pool behind it."""
    global _store  # noqa: PLW0603
    if isinstance(_store, RedisStore):
        await close_redis()
    _store = None


def get_store() -> Store:
    """Get the active store (FastAPI dependency)."""
    if _store is None:
        msg = "Store not initialized. Call init_store() first."
        raise RuntimeError(msg)
    return _store

"""Key-value persistence gateway.

Two collections (users, requests) are each stored as one JSON array under a
namespaced key, next to two scalars: the current-session user id and the
seed data version. Reads and writes always cover a whole collection.

Mutations go through ``update_users`` / ``update_requests``: the store loads
the collection, hands it to a callback that mutates it in place and returns
a result, then writes it back. If the callback raises, nothing is written.
Both backends make that read-modify-write atomic, so checks done inside the
callback (e.g. "status is still pending") cannot be invalidated by a
concurrent writer.
"""

from __future__ import annotations

import asyncio
import logging
from abc import ABC, abstractmethod
from collections.abc import Callable
from typing import Any, TypeVar

from redis.asyncio import Redis
from redis.exceptions import WatchError

from cfc.db.models import (
    FoodRequest,
    dump_requests,
    dump_users,
    load_requests,
    load_users,
)

logger = logging.getLogger(__name__)

T = TypeVar("T")

MAX_TRANSACTION_ATTEMPTS = 50

UsersMutation = Callable[[list[Any]], T]
RequestsMutation = Callable[[list[FoodRequest]], T]


class Store(ABC):
    """Abstract storage interface the services depend on."""

    def __init__(self, namespace: str = "cfc") -> None:
        self.namespace = namespace

    @property
    def users_key(self) -> str:
        return f"{self.namespace}:users"

    @property
    def requests_key(self) -> str:
        return f"{self.namespace}:requests"

    @property
    def current_user_key(self) -> str:
        return f"{self.namespace}:current_user"

    @property
    def seed_version_key(self) -> str:
        return f"{self.namespace}:seed_version"

    # --- collections ---

    @abstractmethod
    async def get_users(self) -> list[Any]: ...

    @abstractmethod
    async def put_users(self, users: list[Any]) -> None: ...

    @abstractmethod
    async def update_users(self, mutate: UsersMutation[T]) -> T: ...

    @abstractmethod
    async def get_requests(self) -> list[FoodRequest]: ...

    @abstractmethod
    async def put_requests(self, requests: list[FoodRequest]) -> None: ...

    @abstractmethod
    async def update_requests(self, mutate: RequestsMutation[T]) -> T: ...

    # --- scalars ---

    @abstractmethod
    async def get_current_user_id(self) -> str | None: ...

    @abstractmethod
    async def set_current_user_id(self, user_id: str | None) -> None: ...

    @abstractmethod
    async def get_seed_version(self) -> str | None: ...

    @abstractmethod
    async def set_seed_version(self, version: str | None) -> None: ...

    # --- admin ---

    @abstractmethod
    async def clear(self) -> None:
        """Remove both collections and both scalars."""

    @abstractmethod
    async def ping(self) -> bool: ...

    # --- convenience lookups ---

    async def get_user(self, user_id: str) -> Any | None:
        for user in await self.get_users():
            if user.id == user_id:
                return user
        return None

    async def get_user_by_email(self, email: str) -> Any | None:
        wanted = email.strip().lower()
        for user in await self.get_users():
            if user.email.lower() == wanted:
                return user
        return None

    async def get_request(self, request_id: str) -> FoodRequest | None:
        for request in await self.get_requests():
            if request.id == request_id:
                return request
        return None


class InMemoryStore(Store):
    """Process-local store. Keeps serialized JSON so records never alias."""

    def __init__(self, namespace: str = "cfc") -> None:
        super().__init__(namespace)
        self._data: dict[str, str] = {}
        self._users_lock = asyncio.Lock()
        self._requests_lock = asyncio.Lock()

    async def get_users(self) -> list[Any]:
        return load_users(self._data.get(self.users_key))

    async def put_users(self, users: list[Any]) -> None:
        async with self._users_lock:
            self._data[self.users_key] = dump_users(users)

    async def update_users(self, mutate: UsersMutation[T]) -> T:
        async with self._users_lock:
            users = load_users(self._data.get(self.users_key))
            result = mutate(users)
            self._data[self.users_key] = dump_users(users)
            return result

    async def get_requests(self) -> list[FoodRequest]:
        return load_requests(self._data.get(self.requests_key))

    async def put_requests(self, requests: list[FoodRequest]) -> None:
        async with self._requests_lock:
            self._data[self.requests_key] = dump_requests(requests)

    async def update_requests(self, mutate: RequestsMutation[T]) -> T:
        async with self._requests_lock:
            requests = load_requests(self._data.get(self.requests_key))
            result = mutate(requests)
            self._data[self.requests_key] = dump_requests(requests)
            return result

    async def get_current_user_id(self) -> str | None:
        return self._data.get(self.current_user_key)

    async def set_current_user_id(self, user_id: str | None) -> None:
        if user_id is None:
            self._data.pop(self.current_user_key, None)
        else:
            self._data[self.current_user_key] = user_id

    async def get_seed_version(self) -> str | None:
        return self._data.get(self.seed_version_key)

    async def set_seed_version(self, version: str | None) -> None:
        if version is None:
            self._data.pop(self.seed_version_key, None)
        else:
            self._data[self.seed_version_key] = version

    async def clear(self) -> None:
        for key in (self.users_key, self.requests_key, self.current_user_key, self.seed_version_key):
            self._data.pop(key, None)

    async def ping(self) -> bool:
        return True


class RedisStore(Store):
    """Redis-backed store. Atomic updates use WATCH/MULTI/EXEC."""

    def __init__(self, redis: Redis, namespace: str = "cfc", max_attempts: int = MAX_TRANSACTION_ATTEMPTS) -> None:
        super().__init__(namespace)
        self.redis = redis
        self.max_attempts = max_attempts

    async def _transact(
        self,
        key: str,
        load: Callable[[Any], list[Any]],
        dump: Callable[[list[Any]], str],
        mutate: Callable[[list[Any]], T],
    ) -> T:
        """Optimistic read-modify-write of one key.

        Retried on concurrent writes up to ``max_attempts`` times, after which
        the last ``WatchError`` propagates.
        """
        async with self.redis.pipeline(transaction=True) as pipe:
            attempt = 0
            while True:
                attempt += 1
                try:
                    await pipe.watch(key)
                    items = load(await pipe.get(key))
                    result = mutate(items)
                    pipe.multi()
                    pipe.set(key, dump(items))
                    await pipe.execute()
                    return result
                except WatchError:
                    if attempt >= self.max_attempts:
                        logger.error("Gave up on %s after %d concurrent writes", key, attempt)
                        raise
                    logger.debug("Concurrent write on %s, retrying", key)

    async def get_users(self) -> list[Any]:
        return load_users(await self.redis.get(self.users_key))

    async def put_users(self, users: list[Any]) -> None:
        await self.redis.set(self.users_key, dump_users(users))

    async def update_users(self, mutate: UsersMutation[T]) -> T:
        return await self._transact(self.users_key, load_users, dump_users, mutate)

    async def get_requests(self) -> list[FoodRequest]:
        return load_requests(await self.redis.get(self.requests_key))

    async def put_requests(self, requests: list[FoodRequest]) -> None:
        await self.redis.set(self.requests_key, dump_requests(requests))

    async def update_requests(self, mutate: RequestsMutation[T]) -> T:
        return await self._transact(self.requests_key, load_requests, dump_requests, mutate)

    async def get_current_user_id(self) -> str | None:
        return await self.redis.get(self.current_user_key)

    async def set_current_user_id(self, user_id: str | None) -> None:
        if user_id is None:
            await self.redis.delete(self.current_user_key)
        else:
            await self.redis.set(self.current_user_key, user_id)

    async def get_seed_version(self) -> str | None:
        return await self.redis.get(self.seed_version_key)

    async def set_seed_version(self, version: str | None) -> None:
        if version is None:
            await self.redis.delete(self.seed_version_key)
        else:
            await self.redis.set(self.seed_version_key, version)

    async def clear(self) -> None:
        await self.redis.delete(
            self.users_key, self.requests_key, self.current_user_key, self.seed_version_key
        )

    async def ping(self) -> bool:
        return bool(await self.redis.ping())

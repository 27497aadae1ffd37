"""User management business logic."""

from __future__ import annotations

from typing import TYPE_CHECKING, Any

import structlog

from cfc.errors import NotFound

if TYPE_CHECKING:
    from cfc.db.store import Store

logger = structlog.get_logger()


async def get_user(store: Store, user_id: str) -> Any:
    """Fetch a user or raise NotFound."""
    user = await store.get_user(user_id)
    if user is None:
        raise NotFound(f"User {user_id} not found")
    return user


async def update_profile(
    store: Store,
    user_id: str,
    *,
    name: str | None = None,
    phone: str | None = None,
    neighborhood: str | None = None,
) -> Any:
    """Update contact/profile fields. Reward fields are not editable here."""

    def _update(users: list) -> Any:
        for user in users:
            if user.id == user_id:
                if name is not None:
                    user.name = name
                if phone is not None:
                    user.phone = phone
                if neighborhood is not None:
                    user.neighborhood = neighborhood
                return user
        raise NotFound(f"User {user_id} not found")

    user = await store.update_users(_update)
    logger.info("profile_updated", user_id=user_id)
    return user


async def delete_user(store: Store, user_id: str) -> bool:
    """Administrative removal. Clears the session pointer if it pointed here."""

    def _delete(users: list) -> bool:
        before = len(users)
        users[:] = [u for u in users if u.id != user_id]
        return len(users) != before

    deleted = await store.update_users(_delete)
    if deleted:
        if await store.get_current_user_id() == user_id:
            await store.set_current_user_id(None)
        logger.warning("user_deleted", user_id=user_id)
    return deleted

"""
Authentication business logic.

Handles registration, password login and the store's current-session pointer.
"""

from __future__ import annotations

import uuid
from datetime import datetime, timezone
from typing import TYPE_CHECKING, Any

import structlog

from cfc.auth.password import (
    check_needs_rehash,
    hash_password,
    validate_password_strength,
    verify_password,
)
from cfc.db.models import Hero, Requester, TransportMethod, UserType
from cfc.errors import DuplicateEmail, NotFound

if TYPE_CHECKING:
    from cfc.db.store import Store

logger = structlog.get_logger()


# ---------------------------------------------------------------------------
# User queries
# ---------------------------------------------------------------------------


async def get_user_by_id(store: Store, user_id: str) -> Any | None:
    """Fetch a user by id."""
    return await store.get_user(user_id)


async def get_user_by_email(store: Store, email: str) -> Any | None:
    """Fetch a user by email (case-insensitive)."""
    return await store.get_user_by_email(email)


# ---------------------------------------------------------------------------
# Registration
# ---------------------------------------------------------------------------


async def register_user(
    store: Store,
    *,
    email: str,
    password: str,
    name: str,
    user_type: UserType,
    phone: str = "",
    neighborhood: str = "",
    transport_method: TransportMethod = TransportMethod.CAR,
) -> Hero | Requester:
    """
    Register a new hero or requester.

    Raises:
        PasswordStrengthError: If the password is too weak.
        DuplicateEmail: If the email is already registered (any case).
    """
    validate_password_strength(password)

    fields: dict[str, Any] = {
        "id": str(uuid.uuid4()),
        "email": email.strip().lower(),
        "password": hash_password(password),
        "name": name,
        "phone": phone,
        "neighborhood": neighborhood,
        "created_at": datetime.now(timezone.utc),
    }
    user: Hero | Requester
    if UserType(user_type) == UserType.HERO:
        user = Hero(**fields, transport_method=transport_method)
    else:
        user = Requester(**fields)

    def _insert(users: list) -> None:
        if any(u.email.lower() == user.email for u in users):
            raise DuplicateEmail("Email already registered")
        users.append(user)

    await store.update_users(_insert)
    logger.info("user_registered", user_id=user.id, user_type=user.type)
    return user


# ---------------------------------------------------------------------------
# Login / session
# ---------------------------------------------------------------------------


async def authenticate_user(store: Store, email: str, password: str) -> Any | None:
    """
    Verify email + password. Returns the user, or None on any mismatch.

    Rehashes the stored password transparently when argon2 parameters changed.
    """
    user = await get_user_by_email(store, email)
    if user is None or not verify_password(password, user.password):
        logger.info("login_failed", email=email)
        return None

    if check_needs_rehash(user.password):
        new_hash = hash_password(password)

        def _rehash(users: list) -> None:
            for u in users:
                if u.id == user.id:
                    u.password = new_hash

        await store.update_users(_rehash)

    return user


async def start_session(store: Store, user_id: str) -> None:
    """Point the store's current session at ``user_id``."""
    if await store.get_user(user_id) is None:
        raise NotFound(f"User {user_id} not found")
    await store.set_current_user_id(user_id)
    logger.info("session_started", user_id=user_id)


async def end_session(store: Store) -> None:
    """Clear the current session pointer."""
    await store.set_current_user_id(None)


async def get_session_user(store: Store) -> Any | None:
    """User the current session points at, if any."""
    user_id = await store.get_current_user_id()
    return await store.get_user(user_id) if user_id else None

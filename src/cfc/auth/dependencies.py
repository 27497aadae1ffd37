"""FastAPI authentication dependencies."""

from __future__ import annotations

from typing import Any

import jwt
from fastapi import Depends, HTTPException, Security
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer

from cfc.auth.jwt import verify_token
from cfc.auth.service import get_user_by_id
from cfc.config import get_settings
from cfc.database import get_store
from cfc.db.models import Hero, Requester
from cfc.db.store import Store

_bearer = HTTPBearer()


async def get_current_user(
    credentials: HTTPAuthorizationCredentials = Security(_bearer),
    store: Store = Depends(get_store),
) -> Any:
    """
    Extract and verify JWT, return the stored user record.

    Raises 401 on a bad token or a user that no longer exists.
    """
    try:
        payload = verify_token(credentials.credentials, expected_type="access")
    except jwt.InvalidTokenError as e:
        raise HTTPException(status_code=401, detail=str(e)) from e

    user = await get_user_by_id(store, payload["sub"])
    if user is None:
        raise HTTPException(status_code=401, detail="User not found")
    return user


async def get_current_hero(user: Any = Depends(get_current_user)) -> Hero:
    """Same as get_current_user but the caller must be a hero."""
    if not isinstance(user, Hero):
        raise HTTPException(status_code=403, detail="Only heroes can do this")
    return user


async def get_current_requester(user: Any = Depends(get_current_user)) -> Requester:
    """Same as get_current_user but the caller must be a requester."""
    if not isinstance(user, Requester):
        raise HTTPException(status_code=403, detail="Only requesters can do this")
    return user


async def get_current_admin(user: Any = Depends(get_current_user)) -> Any:
    """Caller's email must be listed in CFC_ADMIN_EMAILS."""
    admins = {e.lower() for e in get_settings().admin_emails}
    if user.email.lower() not in admins:
        raise HTTPException(status_code=403, detail="Admin access required")
    return user

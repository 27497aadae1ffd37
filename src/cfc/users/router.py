"""User router for /api/v1/users/* profile endpoints."""

from __future__ import annotations

from typing import Any

from fastapi import APIRouter, Depends

from cfc.auth.dependencies import get_current_user
from cfc.auth.schemas import PublicUserResponse, UserResponse, public_user_response, user_response
from cfc.database import get_store
from cfc.db.store import Store
from cfc.users.schemas import ProfileUpdateRequest
from cfc.users.service import get_user, update_profile

router = APIRouter(prefix="/api/v1/users", tags=["Users"])


@router.get("/me", response_model=UserResponse)
async def get_me(user: Any = Depends(get_current_user)) -> UserResponse:
    """The caller's own profile."""
    return user_response(user)


@router.patch("/me", response_model=UserResponse)
async def update_me(
    body: ProfileUpdateRequest,
    user: Any = Depends(get_current_user),
    store: Store = Depends(get_store),
) -> UserResponse:
    """Update the caller's profile."""
    updated = await update_profile(
        store, user.id, name=body.name, phone=body.phone, neighborhood=body.neighborhood
    )
    return user_response(updated)


@router.get("/{user_id}", response_model=PublicUserResponse)
async def get_public_profile(user_id: str, store: Store = Depends(get_store)) -> PublicUserResponse:
    """Public view of any user."""
    return public_user_response(await get_user(store, user_id))

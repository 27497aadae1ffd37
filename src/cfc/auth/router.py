"""Authentication router for /api/v1/auth/* endpoints."""

from __future__ import annotations

from typing import Any

import structlog
from fastapi import APIRouter, Depends, HTTPException

from cfc.auth.dependencies import get_current_user
from cfc.auth.jwt import create_access_token
from cfc.auth.password import PasswordStrengthError
from cfc.auth.schemas import (
    LoginRequest,
    RegisterRequest,
    SessionResponse,
    TokenResponse,
    UserResponse,
    user_response,
)
from cfc.auth.service import (
    authenticate_user,
    end_session,
    get_session_user,
    register_user,
    start_session,
)
from cfc.config import get_settings
from cfc.database import get_store
from cfc.db.store import Store

logger = structlog.get_logger()

router = APIRouter(prefix="/api/v1/auth", tags=["Authentication"])


async def _issue_token(store: Store, user: Any) -> TokenResponse:
    """Start a session for ``user`` and return a bearer token."""
    settings = get_settings()
    await start_session(store, user.id)
    return TokenResponse(
        access_token=create_access_token(user.id, user.type),
        token_type="bearer",
        expires_in=settings.jwt_access_token_expire_minutes * 60,
        user=user_response(user),
    )


@router.post("/register", response_model=TokenResponse, status_code=201)
async def register(body: RegisterRequest, store: Store = Depends(get_store)) -> TokenResponse:
    """Create a hero or requester account and sign it in."""
    try:
        user = await register_user(
            store,
            email=body.email,
            password=body.password,
            name=body.name,
            user_type=body.type,
            phone=body.phone,
            neighborhood=body.neighborhood,
            transport_method=body.transport_method,
        )
    except PasswordStrengthError as e:
        raise HTTPException(status_code=400, detail=str(e)) from e
    return await _issue_token(store, user)


@router.post("/login", response_model=TokenResponse)
async def login(body: LoginRequest, store: Store = Depends(get_store)) -> TokenResponse:
    """Sign in with email + password."""
    user = await authenticate_user(store, body.email, body.password)
    if user is None:
        raise HTTPException(status_code=401, detail="Invalid email or password")
    logger.info("login_success", user_id=user.id)
    return await _issue_token(store, user)


@router.post("/logout", status_code=204)
async def logout(
    _user: Any = Depends(get_current_user),
    store: Store = Depends(get_store),
) -> None:
    """Clear the current session pointer."""
    await end_session(store)


@router.get("/me", response_model=UserResponse)
async def me(user: Any = Depends(get_current_user)) -> UserResponse:
    """The signed-in user's own record."""
    return user_response(user)


@router.get("/session", response_model=SessionResponse)
async def session(store: Store = Depends(get_store)) -> SessionResponse:
    """The user the current session pointer refers to, if anyone is signed in."""
    user = await get_session_user(store)
    if user is None:
        return SessionResponse(active=False)
    return SessionResponse(active=True, user=user_response(user))

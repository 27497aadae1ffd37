"""Request/response schemas for authentication and user endpoints."""

from __future__ import annotations

from datetime import datetime

from pydantic import BaseModel, EmailStr, Field, field_validator

from cfc.db.models import Hero, TransportMethod, UserType
from cfc.gamification.level_thresholds import LEVEL_ORDER


class RegisterRequest(BaseModel):
    """Registration for either role. Transport method only matters for heroes."""

    email: EmailStr
    password: str = Field(..., min_length=1, max_length=128)
    name: str = Field(..., min_length=1, max_length=100)
    phone: str = Field("", max_length=30)
    neighborhood: str = Field("", max_length=100)
    type: UserType
    transport_method: TransportMethod = TransportMethod.CAR

    @field_validator("email")
    @classmethod
    def normalize_email(cls, v: str) -> str:
        """Normalize email to lowercase."""
        return v.lower().strip()


class LoginRequest(BaseModel):
    """Login with email + password."""

    email: EmailStr
    password: str = Field(..., min_length=1, max_length=128)

    @field_validator("email")
    @classmethod
    def normalize_email(cls, v: str) -> str:
        """Normalize email to lowercase."""
        return v.lower().strip()


class UserResponse(BaseModel):
    """Private view of a user, returned to the user themselves."""

    id: str
    email: str
    name: str
    phone: str
    neighborhood: str
    type: UserType
    created_at: datetime
    # Hero only
    transport_method: TransportMethod | None = None
    points: int | None = None
    level: int | None = None
    level_name: str | None = None
    badges: list[str] | None = None
    claimed_coupons: list[str] | None = None
    average_rating: float | None = None
    total_deliveries: int | None = None
    # Requester only
    delivery_history: list[str] | None = None


class PublicUserResponse(BaseModel):
    """What other users may see. No contact details."""

    id: str
    name: str
    neighborhood: str
    type: UserType
    level_name: str | None = None
    points: int | None = None
    badges: list[str] | None = None
    average_rating: float | None = None
    total_deliveries: int | None = None


class TokenResponse(BaseModel):
    access_token: str
    token_type: str = "bearer"
    expires_in: int
    user: UserResponse


class SessionResponse(BaseModel):
    """Who the stored session pointer refers to. ``user`` is None when signed out."""

    active: bool
    user: UserResponse | None = None


def user_response(user: object) -> UserResponse:
    """Build a UserResponse from a stored user record (password omitted)."""
    data = user.model_dump(exclude={"password"})  # type: ignore[attr-defined]
    if isinstance(user, Hero):
        data["level_name"] = LEVEL_ORDER[user.level] if 0 <= user.level < len(LEVEL_ORDER) else LEVEL_ORDER[0]
    return UserResponse(**data)


def public_user_response(user: object) -> PublicUserResponse:
    full = user_response(user)
    return PublicUserResponse(**full.model_dump(include=set(PublicUserResponse.model_fields)))

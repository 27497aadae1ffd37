"""Request schemas for user endpoints."""

from __future__ import annotations

from pydantic import BaseModel, Field


class ProfileUpdateRequest(BaseModel):
    """Partial profile update. Omitted fields stay as they are."""

    name: str | None = Field(None, min_length=1, max_length=100)
    phone: str | None = Field(None, max_length=30)
    neighborhood: str | None = Field(None, max_length=100)

"""Request/response schemas for food request endpoints."""

from __future__ import annotations

from datetime import datetime, timezone

from pydantic import BaseModel, Field, model_validator

from cfc.db.models import (
    DeliveryTimeliness,
    FoodQuality,
    FoodRequest,
    FoodType,
    Quantity,
    Rating,
)
from cfc.gamification.schemas import DeliveryRewardResponse


class NewRequest(BaseModel):
    """Details a requester supplies when asking for a delivery."""

    food_type: FoodType = FoodType.MIXED
    quantity: Quantity = Quantity.SINGLE
    delivery_address: str = Field(..., min_length=1, max_length=300)
    delivery_lat: float = Field(0.0, ge=-90, le=90)
    delivery_lng: float = Field(0.0, ge=-180, le=180)
    preferred_time_start: datetime
    preferred_time_end: datetime
    special_notes: str = Field("", max_length=1000)
    contact_method: str = Field("", max_length=50)

    @model_validator(mode="after")
    def check_window(self) -> NewRequest:
        """Preferred window must not end before it starts."""
        start = _as_utc(self.preferred_time_start)
        end = _as_utc(self.preferred_time_end)
        if end < start:
            msg = "preferred_time_end must not be before preferred_time_start"
            raise ValueError(msg)
        self.preferred_time_start = start
        self.preferred_time_end = end
        return self


def _as_utc(value: datetime) -> datetime:
    return value.replace(tzinfo=timezone.utc) if value.tzinfo is None else value


class RatingIn(BaseModel):
    stars: int = Field(..., ge=1, le=5)
    feedback: str = Field("", max_length=1000)
    timeliness: DeliveryTimeliness = DeliveryTimeliness.ON_TIME
    food_quality: FoodQuality = FoodQuality.GOOD

    def to_rating(self, now: datetime) -> Rating:
        return Rating(
            stars=self.stars,
            feedback=self.feedback,
            timeliness=self.timeliness,
            food_quality=self.food_quality,
            created_at=now,
        )


class CompleteRequest(BaseModel):
    rating: RatingIn | None = None


class CancelRequest(BaseModel):
    reason: str = Field("", max_length=500)


class RequestListResponse(BaseModel):
    requests: list[FoodRequest]
    total: int


class CompletionResponse(BaseModel):
    request: FoodRequest
    reward: DeliveryRewardResponse

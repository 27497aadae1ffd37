"""Persisted records: users (heroes and requesters) and food requests.

Records are pydantic models. Python attributes are snake_case; the JSON kept
in the store uses camelCase keys (``heroId``, ``preferredTimeEnd`` ...).
"""

from __future__ import annotations

from datetime import datetime, timezone
from enum import Enum
from typing import Annotated, Literal, Union

from pydantic import BaseModel, ConfigDict, Field, TypeAdapter, field_validator
from pydantic.alias_generators import to_camel


class UserType(str, Enum):
    HERO = "hero"
    REQUESTER = "requester"


class TransportMethod(str, Enum):
    CAR = "car"
    BIKE = "bike"
    WALKING = "walking"
    TRANSIT = "transit"


class RequestStatus(str, Enum):
    PENDING = "pending"
    ACCEPTED = "accepted"
    IN_PROGRESS = "in_progress"
    COMPLETED = "completed"
    CANCELLED = "cancelled"


class FoodType(str, Enum):
    PRODUCE = "produce"
    CANNED_GOODS = "canned_goods"
    BREAD = "bread"
    DAIRY = "dairy"
    MIXED = "mixed"


class Quantity(str, Enum):
    SINGLE = "single"
    FAMILY_2_4 = "family_2_4"
    FAMILY_5_PLUS = "family_5_plus"


class DeliveryTimeliness(str, Enum):
    ON_TIME = "on_time"
    SLIGHTLY_LATE = "slightly_late"
    LATE = "late"


class FoodQuality(str, Enum):
    GOOD = "good"
    ACCEPTABLE = "acceptable"
    POOR = "poor"


ACTIVE_STATUSES = frozenset({RequestStatus.ACCEPTED, RequestStatus.IN_PROGRESS})
TERMINAL_STATUSES = frozenset({RequestStatus.COMPLETED, RequestStatus.CANCELLED})


class Record(BaseModel):
    """Base for stored records: camelCase JSON, UTC-aware datetimes."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    @field_validator("*", mode="after")
    @classmethod
    def _assume_utc(cls, value: object) -> object:
        # Naive datetimes coming from clients or old data are taken as UTC
        if isinstance(value, datetime) and value.tzinfo is None:
            return value.replace(tzinfo=timezone.utc)
        return value


# ---------------------------------------------------------------------------
# Users
# ---------------------------------------------------------------------------


class BaseUser(Record):
    id: str
    email: str
    password: str  # argon2id hash
    name: str
    phone: str = ""
    neighborhood: str = ""
    created_at: datetime


class Hero(BaseUser):
    type: Literal["hero"] = "hero"
    transport_method: TransportMethod = TransportMethod.CAR
    points: int = Field(default=0, ge=0)
    level: int = 0  # index into LEVELS
    badges: list[str] = []
    claimed_coupons: list[str] = []
    average_rating: float = 0.0
    total_deliveries: int = 0


class Requester(BaseUser):
    type: Literal["requester"] = "requester"
    delivery_history: list[str] = []


User = Annotated[Union[Hero, Requester], Field(discriminator="type")]


def is_hero(user: object) -> bool:
    return isinstance(user, Hero)


def is_requester(user: object) -> bool:
    return isinstance(user, Requester)


# ---------------------------------------------------------------------------
# Requests
# ---------------------------------------------------------------------------


class Rating(Record):
    stars: int = Field(ge=1, le=5)
    feedback: str = ""
    timeliness: DeliveryTimeliness = DeliveryTimeliness.ON_TIME
    food_quality: FoodQuality = FoodQuality.GOOD
    created_at: datetime


class FoodRequest(Record):
    id: str
    requester_id: str
    hero_id: str | None = None
    status: RequestStatus = RequestStatus.PENDING
    food_type: FoodType = FoodType.MIXED
    quantity: Quantity = Quantity.SINGLE
    delivery_address: str
    delivery_lat: float = 0.0
    delivery_lng: float = 0.0
    preferred_time_start: datetime
    preferred_time_end: datetime
    special_notes: str = ""
    contact_method: str = ""
    rating: Rating | None = None
    created_at: datetime
    accepted_at: datetime | None = None
    in_progress_at: datetime | None = None
    completed_at: datetime | None = None
    cancelled_at: datetime | None = None
    cancel_reason: str | None = None

    @property
    def is_active(self) -> bool:
        return self.status in ACTIVE_STATUSES

    @property
    def is_terminal(self) -> bool:
        return self.status in TERMINAL_STATUSES


USERS_ADAPTER: TypeAdapter[list[User]] = TypeAdapter(list[User])
REQUESTS_ADAPTER: TypeAdapter[list[FoodRequest]] = TypeAdapter(list[FoodRequest])


def dump_users(users: list) -> str:
    return USERS_ADAPTER.dump_json(users, by_alias=True).decode()


def load_users(raw: str | bytes | None) -> list:
    if not raw:
        return []
    return USERS_ADAPTER.validate_json(raw)


def dump_requests(requests: list[FoodRequest]) -> str:
    return REQUESTS_ADAPTER.dump_json(requests, by_alias=True).decode()


def load_requests(raw: str | bytes | None) -> list[FoodRequest]:
    if not raw:
        return []
    return REQUESTS_ADAPTER.validate_json(raw)

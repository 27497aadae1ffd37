"""Demo data seeding, guarded by the stored seed version."""

from __future__ import annotations

import logging
from datetime import datetime, timedelta, timezone
from typing import TYPE_CHECKING

from cfc.auth.password import hash_password
from cfc.config import get_settings
from cfc.db.models import FoodRequest, FoodType, Hero, Quantity, Requester, RequestStatus, TransportMethod

if TYPE_CHECKING:
    from cfc.db.store import Store

logger = logging.getLogger(__name__)

DEMO_PASSWORD = "DemoPass123"

HERO_SEED_DATA: list[dict] = [
    {
        "id": "hero-sarah",
        "email": "sarah@example.com",
        "name": "Sarah Chen",
        "phone": "902-555-0101",
        "neighborhood": "North End",
        "transport_method": TransportMethod.BIKE,
    },
    {
        "id": "hero-marcus",
        "email": "marcus@example.com",
        "name": "Marcus Williams",
        "phone": "902-555-0102",
        "neighborhood": "Dartmouth",
        "transport_method": TransportMethod.CAR,
    },
]

REQUESTER_SEED_DATA: list[dict] = [
    {
        "id": "requester-maria",
        "email": "maria@example.com",
        "name": "Maria Santos",
        "phone": "902-555-0201",
        "neighborhood": "North End",
    },
    {
        "id": "requester-james",
        "email": "james@example.com",
        "name": "James Wilson",
        "phone": "902-555-0202",
        "neighborhood": "Clayton Park",
    },
]

REQUEST_SEED_DATA: list[dict] = [
    {
        "id": "request-1",
        "requester_id": "requester-maria",
        "food_type": FoodType.PRODUCE,
        "quantity": Quantity.FAMILY_2_4,
        "delivery_address": "2045 Gottingen St, North End, Halifax",
        "delivery_lat": 44.6572,
        "delivery_lng": -63.5918,
        "special_notes": "Ring the side door",
        "contact_method": "sms",
    },
    {
        "id": "request-2",
        "requester_id": "requester-james",
        "food_type": FoodType.CANNED_GOODS,
        "quantity": Quantity.SINGLE,
        "delivery_address": "88 Dunbrack St, Clayton Park, Halifax",
        "delivery_lat": 44.6543,
        "delivery_lng": -63.6427,
        "contact_method": "call",
    },
    {
        "id": "request-3",
        "requester_id": "requester-maria",
        "food_type": FoodType.BREAD,
        "quantity": Quantity.FAMILY_5_PLUS,
        "delivery_address": "5520 Russell St, North End, Halifax",
        "delivery_lat": 44.6611,
        "delivery_lng": -63.5981,
        "contact_method": "sms",
    },
]


def build_demo_data(now: datetime) -> tuple[list, list[FoodRequest]]:
    """Demo users and pending requests, all created relative to ``now``."""
    password = hash_password(DEMO_PASSWORD)
    users: list = [
        Hero(**data, password=password, created_at=now - timedelta(days=30)) for data in HERO_SEED_DATA
    ]
    users += [
        Requester(
            **data,
            password=password,
            created_at=now - timedelta(days=20),
            delivery_history=[r["id"] for r in REQUEST_SEED_DATA if r["requester_id"] == data["id"]],
        )
        for data in REQUESTER_SEED_DATA
    ]
    requests = [
        FoodRequest(
            **data,
            status=RequestStatus.PENDING,
            preferred_time_start=now + timedelta(hours=2),
            preferred_time_end=now + timedelta(hours=5),
            created_at=now - timedelta(hours=1),
        )
        for data in REQUEST_SEED_DATA
    ]
    return users, requests


async def seed_demo_data(store: Store, force: bool = False, now: datetime | None = None) -> bool:
    """Write the demo data set unless the current seed version is already stored.

    Each collection is seeded only while it is empty, so existing users and
    requests survive a version bump. ``force=True`` replaces both collections.

    Returns True if any data was written.
    """
    version = get_settings().seed_version
    if not force and await store.get_seed_version() == version:
        logger.info("Seed data version %s already present, skipping", version)
        return False

    users, requests = build_demo_data(now or datetime.now(timezone.utc))
    if not force:
        if await store.get_users():
            users = []
        if await store.get_requests():
            requests = []

    if users or force:
        await store.put_users(users)
    if requests or force:
        await store.put_requests(requests)
    await store.set_seed_version(version)
    logger.info("Seeded %d users and %d requests (version %s)", len(users), len(requests), version)
    return bool(users or requests)

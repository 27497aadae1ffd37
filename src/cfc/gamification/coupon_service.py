"""Coupon eligibility and redemption."""

from __future__ import annotations

import logging
from datetime import datetime, timedelta, timezone
from typing import TYPE_CHECKING

from pydantic import BaseModel

from cfc.config import get_settings
from cfc.db.models import Hero
from cfc.errors import AlreadyClaimed, InsufficientPoints, NotFound
from cfc.gamification.catalog import COUPON_TIERS, COUPONS_BY_ID

if TYPE_CHECKING:
    from cfc.db.store import Store

logger = logging.getLogger(__name__)


class ClaimedCoupon(BaseModel):
    id: str
    value: int
    business: str
    description: str
    points_required: int
    qr_code: str
    claimed_at: datetime
    expires_at: datetime


def get_available_coupons(hero: Hero) -> list[dict]:
    """Tiers the hero has enough points for. Claimed tiers are not filtered out."""
    return [c for c in COUPON_TIERS if hero.points >= c["points_required"]]


def coupon_code(coupon_id: str, hero_id: str) -> str:
    return f"CFC-{coupon_id.upper()}-{hero_id[:8]}"


async def claim_coupon(
    store: Store,
    hero: Hero,
    coupon_id: str,
    now: datetime | None = None,
) -> ClaimedCoupon:
    """Redeem a coupon tier for points.

    Points are deducted but the level is left where it is.

    Raises:
        NotFound: unknown coupon id or hero.
        InsufficientPoints: hero has fewer points than the tier requires.
        AlreadyClaimed: hero already redeemed this tier.
    """
    tier = COUPONS_BY_ID.get(coupon_id)
    if tier is None:
        raise NotFound(f"Coupon {coupon_id} not found")

    if now is None:
        now = datetime.now(timezone.utc)
    validity = timedelta(days=get_settings().coupon_validity_days)

    def _claim(users: list) -> Hero:
        for user in users:
            if user.id == hero.id and isinstance(user, Hero):
                if user.points < tier["points_required"]:
                    raise InsufficientPoints(
                        f"Coupon {coupon_id} needs {tier['points_required']} points, hero has {user.points}"
                    )
                if coupon_id in user.claimed_coupons:
                    raise AlreadyClaimed(f"Coupon {coupon_id} already claimed")
                user.points -= tier["points_required"]
                user.claimed_coupons.append(coupon_id)
                return user
        raise NotFound(f"Hero {hero.id} not found")

    await store.update_users(_claim)
    logger.info("Hero %s claimed coupon %s", hero.id, coupon_id)

    return ClaimedCoupon(
        **tier,
        qr_code=coupon_code(coupon_id, hero.id),
        claimed_at=now,
        expires_at=now + validity,
    )

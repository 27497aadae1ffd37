"""Badge evaluation and award with duplicate prevention."""

from __future__ import annotations

import logging
from collections.abc import Iterable
from datetime import tzinfo
from typing import TYPE_CHECKING

from cfc.db.models import FoodRequest, Hero, Quantity
from cfc.errors import NotFound
from cfc.gamification.catalog import BADGES
from cfc.gamification.streak_service import completed_deliveries, get_local_tz, is_morning, is_weekend

if TYPE_CHECKING:
    from cfc.db.store import Store

logger = logging.getLogger(__name__)

FAMILY_QUANTITIES = frozenset({Quantity.FAMILY_2_4, Quantity.FAMILY_5_PLUS})


def compute_badge_metrics(
    hero: Hero,
    history: Iterable[FoodRequest],
    tz: tzinfo | None = None,
) -> dict[str, int]:
    """Count each badge criterion over the hero's completed deliveries."""
    tz = tz or get_local_tz()
    delivered = completed_deliveries(hero.id, history)
    neighborhood = hero.neighborhood.strip().lower()

    return {
        "deliveries": len(delivered),
        "morning_deliveries": sum(1 for r in delivered if is_morning(r.completed_at, tz)),
        "weekend_deliveries": sum(1 for r in delivered if is_weekend(r.completed_at, tz)),
        "family_deliveries": sum(1 for r in delivered if r.quantity in FAMILY_QUANTITIES),
        # Substring match on the address until requests carry a neighborhood field
        "neighborhood_deliveries": sum(
            1 for r in delivered if neighborhood and neighborhood in r.delivery_address.lower()
        ),
    }


def qualifying_badges(metrics: dict[str, int]) -> list[str]:
    """Badge ids whose threshold is met, in catalog order."""
    return [b["id"] for b in BADGES if metrics.get(b["criteria"], 0) >= b["requirement"]]


def new_badges_for(hero: Hero, history: Iterable[FoodRequest], tz: tzinfo | None = None) -> list[str]:
    """Badges the hero qualifies for but does not hold yet."""
    held = set(hero.badges)
    return [b for b in qualifying_badges(compute_badge_metrics(hero, history, tz)) if b not in held]


async def check_and_award_badges(store: Store, hero: Hero, tz: tzinfo | None = None) -> list[str]:
    """Award every newly qualified badge. Returns the ids awarded (may be empty).

    Badges are only ever added, and each at most once: the held set is
    re-read inside the atomic update, so a second call on the same history
    returns an empty list.
    """
    history = await store.get_requests()

    def _award(users: list) -> list[str]:
        for user in users:
            if user.id == hero.id and isinstance(user, Hero):
                awarded = new_badges_for(user, history, tz)
                user.badges.extend(awarded)
                return awarded
        raise NotFound(f"Hero {hero.id} not found")

    awarded = await store.update_users(_award)
    for badge_id in awarded:
        logger.info("Badge earned: %s by hero %s", badge_id, hero.id)
    return awarded

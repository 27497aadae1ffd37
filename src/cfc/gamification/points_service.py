"""Point awards, rating aggregates and the delivery reward pipeline."""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from datetime import datetime, timezone, tzinfo
from typing import TYPE_CHECKING

from cfc.db.models import Hero, RequestStatus
from cfc.errors import InvalidTransition, NotFound
from cfc.gamification.badge_service import check_and_award_badges
from cfc.gamification.level_thresholds import LEVEL_ORDER, calculate_level, level_index, round_half_up
from cfc.gamification.scoring import PointBonus, calculate_points, determine_bonuses

if TYPE_CHECKING:
    from cfc.db.store import Store

logger = logging.getLogger(__name__)


def _find_hero(users: list, hero_id: str) -> Hero:
    for user in users:
        if user.id == hero_id and isinstance(user, Hero):
            return user
    raise NotFound(f"Hero {hero_id} not found")


async def get_hero(store: Store, hero_id: str) -> Hero:
    """Fetch a hero record or raise NotFound."""
    user = await store.get_user(hero_id)
    if not isinstance(user, Hero):
        raise NotFound(f"Hero {hero_id} not found")
    return user


async def award_points(store: Store, hero: Hero, points: int) -> Hero:
    """Add points to a hero and recompute the level from the new total."""

    def _award(users: list) -> Hero:
        stored = _find_hero(users, hero.id)
        stored.points += points
        stored.level = level_index(calculate_level(stored.points))
        return stored

    updated = await store.update_users(_award)
    logger.info("Awarded %d points to hero %s (total %d)", points, hero.id, updated.points)
    return updated


async def update_hero_rating(store: Store, hero: Hero) -> Hero:
    """Recompute average rating and delivery count from rated deliveries.

    Heroes without any rated delivery are returned unchanged.
    """
    rated = [
        r for r in await store.get_requests()
        if r.hero_id == hero.id and r.status == RequestStatus.COMPLETED and r.rating is not None
    ]
    if not rated:
        return hero

    average = round_half_up(sum(r.rating.stars for r in rated) / len(rated), 1)

    def _update(users: list) -> Hero:
        stored = _find_hero(users, hero.id)
        stored.average_rating = average
        stored.total_deliveries = len(rated)
        return stored

    return await store.update_users(_update)


@dataclass
class DeliveryReward:
    """Everything a hero earned for one completed delivery."""

    hero_id: str
    request_id: str
    points_earned: int
    bonuses: PointBonus
    new_badges: list[str] = field(default_factory=list)
    total_points: int = 0
    old_level: str = LEVEL_ORDER[0]
    new_level: str = LEVEL_ORDER[0]

    @property
    def leveled_up(self) -> bool:
        return level_index(self.new_level) > level_index(self.old_level)


async def credit_delivery(
    store: Store,
    request_id: str,
    now: datetime | None = None,
    tz: tzinfo | None = None,
) -> DeliveryReward:
    """Run the reward pipeline for a completed request.

    1. Determine bonuses against the hero's history
    2. Award base + bonus points, recompute level
    3. Award newly qualified badges
    4. Refresh rating aggregates
    """
    if now is None:
        now = datetime.now(timezone.utc)

    history = await store.get_requests()
    request = next((r for r in history if r.id == request_id), None)
    if request is None:
        raise NotFound(f"Request {request_id} not found")
    if request.status != RequestStatus.COMPLETED or request.hero_id is None:
        raise InvalidTransition("Only completed deliveries earn points")

    hero = await get_hero(store, request.hero_id)
    old_level = LEVEL_ORDER[hero.level] if 0 <= hero.level < len(LEVEL_ORDER) else LEVEL_ORDER[0]

    bonuses = determine_bonuses(hero, request, history, now=now, tz=tz)
    points = calculate_points(bonuses)
    hero = await award_points(store, hero, points)
    new_badges = await check_and_award_badges(store, hero, tz=tz)
    hero = await update_hero_rating(store, hero)

    reward = DeliveryReward(
        hero_id=hero.id,
        request_id=request_id,
        points_earned=points,
        bonuses=bonuses,
        new_badges=new_badges,
        total_points=hero.points,
        old_level=old_level,
        new_level=LEVEL_ORDER[hero.level],
    )
    if reward.leveled_up:
        logger.info("Hero %s leveled up: %s -> %s", hero.id, reward.old_level, reward.new_level)
    return reward

"""Delivery scoring: bonus detection and point calculation.

Base delivery     → 100
First of the day  → +25
On time           → +50
Five-star rating  → +25
7-day streak      → +200
"""

from __future__ import annotations

from collections.abc import Iterable
from dataclasses import asdict, dataclass
from datetime import datetime, tzinfo

from cfc.db.models import FoodRequest, Hero
from cfc.gamification.streak_service import completed_deliveries, get_local_tz, has_weekly_streak, local_day

POINTS: dict[str, int] = {
    "delivery_base": 100,
    "first_of_day_bonus": 25,
    "on_time_bonus": 50,
    "five_star_bonus": 25,
    "weekly_streak_bonus": 200,
}


@dataclass
class PointBonus:
    first_of_day: bool = False
    on_time: bool = False
    five_star_rating: bool = False
    weekly_streak: bool = False

    def active(self) -> list[str]:
        """Names of the bonuses that apply."""
        return [name for name, value in asdict(self).items() if value]


def calculate_points(bonuses: PointBonus | None = None) -> int:
    """Base points plus every bonus that applies. No caps."""
    bonuses = bonuses or PointBonus()
    points = POINTS["delivery_base"]
    if bonuses.first_of_day:
        points += POINTS["first_of_day_bonus"]
    if bonuses.on_time:
        points += POINTS["on_time_bonus"]
    if bonuses.five_star_rating:
        points += POINTS["five_star_bonus"]
    if bonuses.weekly_streak:
        points += POINTS["weekly_streak_bonus"]
    return points


def determine_bonuses(
    hero: Hero,
    request: FoodRequest,
    history: Iterable[FoodRequest],
    now: datetime | None = None,
    tz: tzinfo | None = None,
) -> PointBonus:
    """Evaluate each bonus for ``request`` against the hero's history.

    ``history`` is the full request collection; only the hero's completed
    deliveries are considered. ``request`` itself never counts against its
    own first-of-day bonus.
    """
    tz = tz or get_local_tz()
    history = list(history)
    bonuses = PointBonus()

    if request.completed_at is not None:
        day = local_day(request.completed_at, tz)
        same_day = [
            r for r in completed_deliveries(hero.id, history)
            if r.id != request.id and local_day(r.completed_at, tz) == day
        ]
        bonuses.first_of_day = not same_day
        bonuses.on_time = request.completed_at <= request.preferred_time_end

    bonuses.five_star_rating = request.rating is not None and request.rating.stars == 5
    bonuses.weekly_streak = has_weekly_streak(hero.id, history, now, tz)
    return bonuses

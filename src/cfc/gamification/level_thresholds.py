"""Level thresholds and computation.

Hero.level stores the index of the tier in LEVELS. It is recomputed from
points whenever points are awarded and never set on its own.
"""

from __future__ import annotations

import math
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from cfc.db.models import Hero

LEVELS: list[dict] = [
    {"name": "Beginner", "min_points": 0, "max_points": 499},
    {"name": "Helper", "min_points": 500, "max_points": 999},
    {"name": "Hero", "min_points": 1000, "max_points": 2499},
    {"name": "Super Hero", "min_points": 2500, "max_points": 4999},
    {"name": "Champion", "min_points": 5000, "max_points": None},
]

LEVEL_ORDER: list[str] = [lvl["name"] for lvl in LEVELS]


def round_half_up(value: float, digits: int = 0) -> float:
    """Round .5 away from zero for positives (round() would go to even)."""
    factor = 10**digits
    return math.floor(value * factor + 0.5) / factor


def calculate_level(points: int) -> str:
    """Return the name of the tier whose range contains ``points``."""
    for level in LEVELS:
        upper = level["max_points"]
        if points >= level["min_points"] and (upper is None or points <= upper):
            return level["name"]
    return LEVELS[0]["name"]


def level_index(name: str) -> int:
    """Position of a tier in LEVELS. Raises ValueError for unknown names."""
    return LEVEL_ORDER.index(name)


def get_level_info(hero: Hero) -> dict:
    """Current tier, next tier and progress towards it.

    The current tier comes from the hero's stored level, which may sit above
    what the current points would give after a coupon claim. Progress is
    clamped to 0-100 in that case.
    """
    index = hero.level if 0 <= hero.level < len(LEVELS) else 0
    current = LEVELS[index]
    next_level = LEVELS[index + 1] if index + 1 < len(LEVELS) else None

    if next_level is None:
        return {
            "current": current,
            "next": None,
            "points_to_next": 0,
            "progress": 100,
        }

    span = next_level["min_points"] - current["min_points"]
    progress = int(round_half_up((hero.points - current["min_points"]) / span * 100))

    return {
        "current": current,
        "next": next_level,
        "points_to_next": next_level["min_points"] - hero.points,
        "progress": max(0, min(100, progress)),
    }

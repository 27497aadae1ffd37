"""Hero leaderboard ranking.

Heroes are sorted descending by the chosen metric. Ties keep their input
order and ranks are positional: two heroes on 1000 points get ranks 1 and 2.
"""

from __future__ import annotations

from typing import Any

from pydantic import BaseModel

from cfc.db.models import Hero

SORT_FIELDS: dict[str, str] = {
    "points": "points",
    "deliveries": "total_deliveries",
    "rating": "average_rating",
}


class LeaderboardEntry(BaseModel):
    user_id: str
    name: str
    points: int
    total_deliveries: int
    average_rating: float
    rank: int


def get_leaderboard(users: list[Any], sort_by: str = "points") -> list[LeaderboardEntry]:
    """Rank every hero in ``users`` by ``sort_by`` (points, deliveries or rating)."""
    if sort_by not in SORT_FIELDS:
        raise ValueError(f"Unknown sort field: {sort_by}. Valid fields: {list(SORT_FIELDS)}")
    attr = SORT_FIELDS[sort_by]

    heroes = [u for u in users if isinstance(u, Hero)]
    # sorted() is stable, so equal scores keep their original relative order
    ranked = sorted(heroes, key=lambda h: getattr(h, attr), reverse=True)

    return [
        LeaderboardEntry(
            user_id=hero.id,
            name=hero.name,
            points=hero.points,
            total_deliveries=hero.total_deliveries,
            average_rating=hero.average_rating,
            rank=idx + 1,
        )
        for idx, hero in enumerate(ranked)
    ]


def get_top_heroes(users: list[Any], limit: int = 10, sort_by: str = "points") -> list[LeaderboardEntry]:
    """First ``limit`` entries of the leaderboard."""
    return get_leaderboard(users, sort_by)[: max(limit, 0)]

"""Leaderboard ranking tests."""

from __future__ import annotations

import pytest

from cfc.db.models import Hero, Requester
from cfc.leaderboard.ranking import get_leaderboard, get_top_heroes


def _hero(hero_id: str, points: int = 0, deliveries: int = 0, rating: float = 0.0) -> Hero:
    return Hero(
        id=hero_id,
        email=f"{hero_id}@example.com",
        password="x",
        name=hero_id,
        created_at="2026-01-01T00:00:00Z",
        points=points,
        total_deliveries=deliveries,
        average_rating=rating,
    )


class TestGetLeaderboard:
    def test_ties_keep_input_order(self):
        users = [_hero("heroA", 500), _hero("heroB", 1000), _hero("heroC", 1000)]
        board = get_leaderboard(users, "points")
        assert [(e.user_id, e.rank) for e in board] == [("heroB", 1), ("heroC", 2), ("heroA", 3)]

    def test_sort_by_deliveries(self):
        users = [_hero("a", deliveries=3), _hero("b", deliveries=12), _hero("c", deliveries=7)]
        assert [e.user_id for e in get_leaderboard(users, "deliveries")] == ["b", "c", "a"]

    def test_sort_by_rating(self):
        users = [_hero("a", rating=4.2), _hero("b", rating=4.9), _hero("c", rating=3.0)]
        assert [e.user_id for e in get_leaderboard(users, "rating")] == ["b", "a", "c"]

    def test_requesters_excluded(self):
        requester = Requester(
            id="r", email="r@example.com", password="x", name="r", created_at="2026-01-01T00:00:00Z"
        )
        board = get_leaderboard([requester, _hero("a", 10)])
        assert [e.user_id for e in board] == ["a"]

    def test_entries_carry_stats(self):
        entry = get_leaderboard([_hero("a", 1500, 12, 4.8)])[0]
        assert entry.points == 1500
        assert entry.total_deliveries == 12
        assert entry.average_rating == 4.8
        assert entry.rank == 1

    def test_empty(self):
        assert get_leaderboard([]) == []

    def test_unknown_sort_field(self):
        with pytest.raises(ValueError, match="Unknown sort field"):
            get_leaderboard([_hero("a")], "name")


class TestTopHeroes:
    def test_limit(self):
        users = [_hero(f"h{i}", points=i * 100) for i in range(20)]
        top = get_top_heroes(users, limit=3)
        assert [e.user_id for e in top] == ["h19", "h18", "h17"]
        assert [e.rank for e in top] == [1, 2, 3]

    def test_limit_larger_than_field(self):
        assert len(get_top_heroes([_hero("a"), _hero("b")], limit=10)) == 2

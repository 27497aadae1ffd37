"""Integration tests for the leaderboard endpoint."""

from __future__ import annotations

from httpx import AsyncClient

from cfc.database import get_store


async def _set_stats(user_id: str, **stats) -> None:
    def _update(users):
        for user in users:
            if user.id == user_id:
                for name, value in stats.items():
                    setattr(user, name, value)

    await get_store().update_users(_update)


class TestLeaderboard:
    async def test_ranked_by_points(self, client: AsyncClient, hero_auth: dict, signup, requester_auth: dict):
        other = await signup("hero", "second@example.com")
        await _set_stats(hero_auth["user"]["id"], points=300)
        await _set_stats(other["user"]["id"], points=900)

        response = await client.get("/api/v1/leaderboard")
        assert response.status_code == 200
        data = response.json()
        assert data["sort_by"] == "points"
        assert data["total"] == 2
        assert [(e["user_id"], e["rank"]) for e in data["entries"]] == [
            (other["user"]["id"], 1),
            (hero_auth["user"]["id"], 2),
        ]

    async def test_sort_by_rating_with_limit(self, client: AsyncClient, hero_auth: dict, signup):
        other = await signup("hero", "second@example.com")
        await _set_stats(hero_auth["user"]["id"], average_rating=4.9)
        await _set_stats(other["user"]["id"], average_rating=3.2)

        response = await client.get("/api/v1/leaderboard", params={"sort_by": "rating", "limit": 1})
        entries = response.json()["entries"]
        assert [e["user_id"] for e in entries] == [hero_auth["user"]["id"]]

    async def test_unknown_sort_field(self, client: AsyncClient):
        response = await client.get("/api/v1/leaderboard", params={"sort_by": "name"})
        assert response.status_code == 400

    async def test_empty(self, client: AsyncClient):
        response = await client.get("/api/v1/leaderboard")
        assert response.json()["entries"] == []

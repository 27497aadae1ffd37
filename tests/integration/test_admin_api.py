"""Integration tests for the admin data endpoints."""

from __future__ import annotations

from httpx import AsyncClient

from cfc.database import get_store


class TestAdminAccess:
    async def test_non_admin_forbidden(self, client: AsyncClient, hero_auth: dict):
        response = await client.get("/api/v1/admin/export", headers=hero_auth["headers"])
        assert response.status_code == 403

    async def test_requires_auth(self, client: AsyncClient):
        response = await client.get("/api/v1/admin/export")
        assert response.status_code in (401, 403)


class TestExportImport:
    async def test_export_shape(self, client: AsyncClient, admin_auth: dict, hero_auth: dict):
        response = await client.get("/api/v1/admin/export", headers=admin_auth["headers"])
        assert response.status_code == 200
        data = response.json()
        assert set(data) == {"users", "requests", "currentUserId"}
        assert len(data["users"]) == 2
        assert data["currentUserId"] == hero_auth["user"]["id"]
        hero = next(u for u in data["users"] if u["type"] == "hero")
        assert "claimedCoupons" in hero
        assert "averageRating" in hero

    async def test_round_trip(self, client: AsyncClient, admin_auth: dict, hero_auth: dict):
        exported = (await client.get("/api/v1/admin/export", headers=admin_auth["headers"])).json()
        await get_store().put_users([])

        response = await client.post("/api/v1/admin/import", json=exported, headers=admin_auth["headers"])
        assert response.status_code == 200
        assert response.json() == {"users": 2, "requests": 0}
        assert (await get_store().get_user(hero_auth["user"]["id"])).transport_method == "bike"


class TestMaintenance:
    async def test_seed(self, client: AsyncClient, admin_auth: dict):
        first = await client.post("/api/v1/admin/seed", headers=admin_auth["headers"])
        assert first.json() == {"seeded": True}
        assert len(await get_store().get_requests()) == 3

        # Registered users are kept; only the empty request collection was seeded
        assert await get_store().get_user(admin_auth["user"]["id"]) is not None
        assert await get_store().get_user_by_email("sarah@example.com") is None

    async def test_force_seed_replaces_data(self, client: AsyncClient, admin_auth: dict):
        response = await client.post("/api/v1/admin/seed?force=true", headers=admin_auth["headers"])
        assert response.json() == {"seeded": True}
        assert await get_store().get_user(admin_auth["user"]["id"]) is None
        assert await get_store().get_user_by_email("sarah@example.com") is not None

    async def test_delete_request(self, client: AsyncClient, admin_auth: dict, requester_auth: dict, request_body):
        created = await client.post("/api/v1/requests", json=request_body(), headers=requester_auth["headers"])
        request_id = created.json()["id"]

        response = await client.delete(f"/api/v1/admin/requests/{request_id}", headers=admin_auth["headers"])
        assert response.status_code == 204
        assert await get_store().get_request(request_id) is None

        missing = await client.delete(f"/api/v1/admin/requests/{request_id}", headers=admin_auth["headers"])
        assert missing.status_code == 404

    async def test_delete_user(self, client: AsyncClient, admin_auth: dict, hero_auth: dict):
        response = await client.delete(f"/api/v1/admin/users/{hero_auth['user']['id']}", headers=admin_auth["headers"])
        assert response.status_code == 204
        assert await get_store().get_user(hero_auth["user"]["id"]) is None
        # The hero held the session pointer
        assert await get_store().get_current_user_id() is None

        gone = await client.get("/api/v1/auth/me", headers=hero_auth["headers"])
        assert gone.status_code == 401

    async def test_clear(self, client: AsyncClient, admin_auth: dict, hero_auth: dict):
        response = await client.delete("/api/v1/admin/data", headers=admin_auth["headers"])
        assert response.status_code == 204
        assert await get_store().get_users() == []
        assert await get_store().get_current_user_id() is None

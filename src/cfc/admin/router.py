"""Admin router: bulk data operations under /api/v1/admin."""

from __future__ import annotations

from typing import Any

from fastapi import APIRouter, Depends, HTTPException

from cfc.admin.service import AppData, clear_all_data, export_data, import_data
from cfc.auth.dependencies import get_current_admin
from cfc.database import get_store
from cfc.db.seed import seed_demo_data
from cfc.db.store import Store
from cfc.deliveries.lifecycle import delete_request
from cfc.users.service import delete_user

router = APIRouter(prefix="/api/v1/admin", tags=["Admin"], dependencies=[Depends(get_current_admin)])


@router.get("/export")
async def export_all(store: Store = Depends(get_store)) -> dict[str, Any]:
    """Dump users, requests and the session pointer."""
    data = await export_data(store)
    return data.model_dump(mode="json", by_alias=True)


@router.post("/import")
async def import_all(body: AppData, store: Store = Depends(get_store)) -> dict[str, Any]:
    """Replace the stored collections with the posted snapshot."""
    return await import_data(store, body)


@router.delete("/data", status_code=204)
async def clear_all(store: Store = Depends(get_store)) -> None:
    await clear_all_data(store)


@router.post("/seed")
async def seed(force: bool = False, store: Store = Depends(get_store)) -> dict[str, bool]:
    """Seed empty collections with demo data. ``force`` replaces existing data."""
    return {"seeded": await seed_demo_data(store, force=force)}


@router.delete("/users/{user_id}", status_code=204)
async def remove_user(user_id: str, store: Store = Depends(get_store)) -> None:
    if not await delete_user(store, user_id):
        raise HTTPException(status_code=404, detail="User not found")


@router.delete("/requests/{request_id}", status_code=204)
async def remove_request(request_id: str, store: Store = Depends(get_store)) -> None:
    if not await delete_request(store, request_id):
        raise HTTPException(status_code=404, detail="Request not found")

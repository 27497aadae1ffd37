"""Leaderboard API endpoint."""

from __future__ import annotations

from fastapi import APIRouter, Depends, HTTPException, Query
from pydantic import BaseModel

from cfc.database import get_store
from cfc.db.store import Store
from cfc.leaderboard.ranking import LeaderboardEntry, get_top_heroes

router = APIRouter(prefix="/api/v1", tags=["Leaderboard"])


class LeaderboardResponse(BaseModel):
    sort_by: str
    entries: list[LeaderboardEntry]
    total: int


@router.get("/leaderboard", response_model=LeaderboardResponse)
async def get_leaderboard(
    sort_by: str = Query("points", description="points, deliveries or rating"),
    limit: int = Query(10, ge=1, le=100),
    store: Store = Depends(get_store),
):
    """Top heroes ranked by the chosen metric."""
    try:
        entries = get_top_heroes(await store.get_users(), limit=limit, sort_by=sort_by)
    except ValueError as e:
        raise HTTPException(status_code=400, detail=str(e)) from e
    return LeaderboardResponse(sort_by=sort_by, entries=entries, total=len(entries))

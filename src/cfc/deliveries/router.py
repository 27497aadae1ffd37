"""Food request API endpoints."""

from __future__ import annotations

from datetime import datetime, timezone
from typing import Any

from fastapi import APIRouter, Depends, Query

from cfc.auth.dependencies import get_current_hero, get_current_requester, get_current_user
from cfc.database import get_store
from cfc.db.models import FoodRequest, Hero, Requester, RequestStatus, is_requester
from cfc.db.store import Store
from cfc.deliveries import lifecycle
from cfc.deliveries.schemas import (
    CancelRequest,
    CompleteRequest,
    CompletionResponse,
    NewRequest,
    RatingIn,
    RequestListResponse,
)
from cfc.gamification.points_service import credit_delivery, get_hero, update_hero_rating
from cfc.gamification.schemas import DeliveryRewardResponse

router = APIRouter(prefix="/api/v1/requests", tags=["Requests"])


def _listing(requests: list[FoodRequest]) -> RequestListResponse:
    ordered = sorted(requests, key=lambda r: r.created_at, reverse=True)
    return RequestListResponse(requests=ordered, total=len(ordered))


# ── Queries ──


@router.get("", response_model=RequestListResponse)
async def list_requests(
    status: RequestStatus | None = Query(None),
    _user: Any = Depends(get_current_user),
    store: Store = Depends(get_store),
):
    """All requests, newest first, optionally filtered by status."""
    if status is None:
        return _listing(await lifecycle.list_requests(store))
    return _listing(await lifecycle.get_requests_by_status(store, status))


@router.get("/pending", response_model=RequestListResponse)
async def list_pending(
    _user: Any = Depends(get_current_user),
    store: Store = Depends(get_store),
):
    """Requests waiting for a hero."""
    return _listing(await lifecycle.get_pending_requests(store))


@router.get("/mine", response_model=RequestListResponse)
async def list_mine(
    user: Any = Depends(get_current_user),
    store: Store = Depends(get_store),
):
    """Requests the caller created (requester) or delivers (hero)."""
    requests = await lifecycle.get_requests_by_user(store, user.id, as_requester=is_requester(user))
    return _listing(requests)


@router.get("/active", response_model=RequestListResponse)
async def list_active(
    hero: Hero = Depends(get_current_hero),
    store: Store = Depends(get_store),
):
    """The hero's accepted and in-progress requests."""
    return _listing(await lifecycle.get_active_requests_for_hero(store, hero.id))


@router.get("/{request_id}", response_model=FoodRequest)
async def get_request(
    request_id: str,
    _user: Any = Depends(get_current_user),
    store: Store = Depends(get_store),
):
    return await lifecycle.get_request(store, request_id)


# ── Commands ──


@router.post("", response_model=FoodRequest, status_code=201)
async def create_request(
    body: NewRequest,
    requester: Requester = Depends(get_current_requester),
    store: Store = Depends(get_store),
):
    """Ask for a delivery."""
    return await lifecycle.create_request(store, requester.id, body)


@router.post("/{request_id}/accept", response_model=FoodRequest)
async def accept_request(
    request_id: str,
    hero: Hero = Depends(get_current_hero),
    store: Store = Depends(get_store),
):
    """Take a pending request. 409 when the hero is at the active cap."""
    return await lifecycle.accept_request(store, request_id, hero.id)


@router.post("/{request_id}/start", response_model=FoodRequest)
async def start_request(
    request_id: str,
    hero: Hero = Depends(get_current_hero),
    store: Store = Depends(get_store),
):
    """Mark an accepted request as picked up."""
    return await lifecycle.mark_in_progress(store, request_id, actor_id=hero.id)


@router.post("/{request_id}/complete", response_model=CompletionResponse)
async def complete_request(
    request_id: str,
    body: CompleteRequest | None = None,
    hero: Hero = Depends(get_current_hero),
    store: Store = Depends(get_store),
):
    """Mark the delivery done and credit the hero's reward."""
    now = datetime.now(timezone.utc)
    rating = body.rating.to_rating(now) if body is not None and body.rating is not None else None
    request = await lifecycle.complete_request(store, request_id, rating, actor_id=hero.id, now=now)
    reward = await credit_delivery(store, request.id, now=now)
    return CompletionResponse(
        request=request,
        reward=DeliveryRewardResponse(
            points_earned=reward.points_earned,
            bonuses=reward.bonuses.active(),
            new_badges=reward.new_badges,
            total_points=reward.total_points,
            old_level=reward.old_level,
            new_level=reward.new_level,
            leveled_up=reward.leveled_up,
        ),
    )


@router.post("/{request_id}/cancel", response_model=FoodRequest)
async def cancel_request(
    request_id: str,
    body: CancelRequest,
    user: Any = Depends(get_current_user),
    store: Store = Depends(get_store),
):
    """Cancel on behalf of the requester or the assigned hero."""
    return await lifecycle.cancel_request(store, request_id, body.reason, actor_id=user.id)


@router.post("/{request_id}/rate", response_model=FoodRequest)
async def rate_request(
    request_id: str,
    body: RatingIn,
    requester: Requester = Depends(get_current_requester),
    store: Store = Depends(get_store),
):
    """Rate a completed delivery and refresh the hero's rating."""
    rating = body.to_rating(datetime.now(timezone.utc))
    request = await lifecycle.rate_request(store, request_id, rating, actor_id=requester.id)
    await update_hero_rating(store, await get_hero(store, request.hero_id))
    return request

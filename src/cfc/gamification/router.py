"""Gamification API endpoints: levels, badges and coupons."""

from __future__ import annotations

from fastapi import APIRouter, Depends

from cfc.auth.dependencies import get_current_hero
from cfc.database import get_store
from cfc.db.models import Hero
from cfc.db.store import Store
from cfc.gamification.badge_service import compute_badge_metrics
from cfc.gamification.catalog import BADGES, BADGES_BY_ID, COUPON_TIERS
from cfc.gamification.coupon_service import claim_coupon, get_available_coupons
from cfc.gamification.level_thresholds import LEVELS, get_level_info
from cfc.gamification.schemas import (
    AllBadgesResponse,
    AllCouponsResponse,
    AllLevelsResponse,
    BadgeResponse,
    ClaimCouponResponse,
    CouponTierResponse,
    LevelEntry,
    LevelInfoResponse,
    UserBadgesResponse,
    UserCouponsResponse,
)
from cfc.gamification.streak_service import get_local_tz

router = APIRouter(prefix="/api/v1", tags=["Gamification"])


# ── Public endpoints ──


@router.get("/levels", response_model=AllLevelsResponse)
async def list_levels():
    """Get all level definitions."""
    return AllLevelsResponse(levels=[LevelEntry(**lvl) for lvl in LEVELS])


@router.get("/badges", response_model=AllBadgesResponse)
async def list_badges():
    """Get all badge definitions."""
    return AllBadgesResponse(badges=[BadgeResponse(**b) for b in BADGES])


@router.get("/coupons", response_model=AllCouponsResponse)
async def list_coupons():
    """Get all coupon tiers."""
    return AllCouponsResponse(coupons=[CouponTierResponse(**c) for c in COUPON_TIERS])


# ── Hero endpoints ──


@router.get("/users/me/level", response_model=LevelInfoResponse)
async def get_my_level(hero: Hero = Depends(get_current_hero)):
    """Current level, next level and progress towards it."""
    info = get_level_info(hero)
    return LevelInfoResponse(
        points=hero.points,
        current=LevelEntry(**info["current"]),
        next=LevelEntry(**info["next"]) if info["next"] else None,
        points_to_next=info["points_to_next"],
        progress=info["progress"],
    )


@router.get("/users/me/badges", response_model=UserBadgesResponse)
async def get_my_badges(
    hero: Hero = Depends(get_current_hero),
    store: Store = Depends(get_store),
):
    """Earned badges plus the current count for each badge criterion."""
    metrics = compute_badge_metrics(hero, await store.get_requests(), get_local_tz())
    earned = [BadgeResponse(**BADGES_BY_ID[b]) for b in hero.badges if b in BADGES_BY_ID]
    return UserBadgesResponse(
        earned=earned,
        progress=metrics,
        total_available=len(BADGES),
        total_earned=len(earned),
    )


@router.get("/users/me/coupons", response_model=UserCouponsResponse)
async def get_my_coupons(hero: Hero = Depends(get_current_hero)):
    """Coupon tiers the hero can afford and the ones already claimed."""
    return UserCouponsResponse(
        points=hero.points,
        available=[CouponTierResponse(**c) for c in get_available_coupons(hero)],
        claimed=hero.claimed_coupons,
    )


@router.post("/users/me/coupons/{coupon_id}/claim", response_model=ClaimCouponResponse)
async def claim_my_coupon(
    coupon_id: str,
    hero: Hero = Depends(get_current_hero),
    store: Store = Depends(get_store),
):
    """Redeem a coupon tier for points."""
    coupon = await claim_coupon(store, hero, coupon_id)
    updated = await store.get_user(hero.id)
    return ClaimCouponResponse(coupon=coupon, remaining_points=updated.points)

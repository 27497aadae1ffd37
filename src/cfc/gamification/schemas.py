"""Pydantic response models for gamification endpoints."""

from __future__ import annotations

from pydantic import BaseModel

from cfc.gamification.coupon_service import ClaimedCoupon


# --- Levels ---


class LevelEntry(BaseModel):
    name: str
    min_points: int
    max_points: int | None = None


class AllLevelsResponse(BaseModel):
    levels: list[LevelEntry]


class LevelInfoResponse(BaseModel):
    points: int
    current: LevelEntry
    next: LevelEntry | None = None
    points_to_next: int
    progress: int


# --- Badges ---


class BadgeResponse(BaseModel):
    id: str
    name: str
    description: str
    icon: str
    criteria: str
    requirement: int


class AllBadgesResponse(BaseModel):
    badges: list[BadgeResponse]


class UserBadgesResponse(BaseModel):
    earned: list[BadgeResponse]
    progress: dict[str, int]  # criterion -> current count
    total_available: int
    total_earned: int


# --- Coupons ---


class CouponTierResponse(BaseModel):
    id: str
    value: int
    business: str
    description: str
    points_required: int


class AllCouponsResponse(BaseModel):
    coupons: list[CouponTierResponse]


class UserCouponsResponse(BaseModel):
    points: int
    available: list[CouponTierResponse]
    claimed: list[str]


class ClaimCouponResponse(BaseModel):
    coupon: ClaimedCoupon
    remaining_points: int


# --- Delivery reward ---


class DeliveryRewardResponse(BaseModel):
    points_earned: int
    bonuses: list[str]
    new_badges: list[str]
    total_points: int
    old_level: str
    new_level: str
    leveled_up: bool

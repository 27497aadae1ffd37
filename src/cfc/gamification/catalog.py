"""Static badge and coupon catalogs."""

from __future__ import annotations

BADGES: list[dict] = [
    # Delivery milestones
    {
        "id": "first_delivery",
        "name": "First Delivery",
        "description": "Complete your first delivery",
        "icon": "\U0001f389",
        "criteria": "deliveries",
        "requirement": 1,
    },
    {
        "id": "reliable",
        "name": "Reliable",
        "description": "Complete 5 deliveries",
        "icon": "⭐",
        "criteria": "deliveries",
        "requirement": 5,
    },
    {
        "id": "dedicated",
        "name": "Dedicated",
        "description": "Complete 10 deliveries",
        "icon": "\U0001f4aa",
        "criteria": "deliveries",
        "requirement": 10,
    },
    {
        "id": "champion",
        "name": "Community Champion",
        "description": "Complete 25 deliveries",
        "icon": "\U0001f3c6",
        "criteria": "deliveries",
        "requirement": 25,
    },
    # Habits
    {
        "id": "early_bird",
        "name": "Early Bird",
        "description": "Complete 3 morning deliveries (before 10am)",
        "icon": "\U0001f305",
        "criteria": "morning_deliveries",
        "requirement": 3,
    },
    {
        "id": "weekend_warrior",
        "name": "Weekend Warrior",
        "description": "Complete 5 weekend deliveries",
        "icon": "\U0001f3af",
        "criteria": "weekend_deliveries",
        "requirement": 5,
    },
    {
        "id": "full_cart",
        "name": "Full Cart",
        "description": "Deliver family-size orders 5 times",
        "icon": "\U0001f6d2",
        "criteria": "family_deliveries",
        "requirement": 5,
    },
    {
        "id": "neighborhood_hero",
        "name": "Neighborhood Hero",
        "description": "Complete 10 deliveries in the same area",
        "icon": "\U0001f3d8️",
        "criteria": "neighborhood_deliveries",
        "requirement": 10,
    },
]

BADGES_BY_ID: dict[str, dict] = {b["id"]: b for b in BADGES}

COUPON_TIERS: list[dict] = [
    {
        "id": "coffee_5",
        "value": 5,
        "business": "Local Coffee Shop",
        "description": "$5 off your next purchase",
        "points_required": 500,
    },
    {
        "id": "grocery_10",
        "value": 10,
        "business": "Community Grocery",
        "description": "$10 off groceries",
        "points_required": 1000,
    },
    {
        "id": "restaurant_20",
        "value": 20,
        "business": "Halifax Restaurant",
        "description": "$20 dining credit",
        "points_required": 2500,
    },
    {
        "id": "giftcard_50",
        "value": 50,
        "business": "Local Business Alliance",
        "description": "$50 gift card",
        "points_required": 5000,
    },
]

COUPONS_BY_ID: dict[str, dict] = {c["id"]: c for c in COUPON_TIERS}

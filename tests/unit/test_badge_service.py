"""Badge evaluation and award tests."""

from __future__ import annotations

from datetime import datetime, timedelta, timezone
from zoneinfo import ZoneInfo

import pytest

from cfc.db.models import Quantity
from cfc.errors import NotFound
from cfc.gamification.badge_service import (
    check_and_award_badges,
    compute_badge_metrics,
    qualifying_badges,
)
from cfc.gamification.catalog import BADGES, BADGES_BY_ID

HALIFAX = ZoneInfo("America/Halifax")


class TestCatalog:
    def test_eight_badges_with_unique_ids(self):
        assert len(BADGES) == 8
        assert len(BADGES_BY_ID) == 8

    def test_every_badge_has_criteria_and_requirement(self):
        for badge in BADGES:
            assert badge["criteria"]
            assert badge["requirement"] >= 1


class TestQualifyingBadges:
    def test_nothing_at_zero(self):
        assert qualifying_badges({}) == []

    def test_delivery_milestones(self):
        assert qualifying_badges({"deliveries": 10}) == ["first_delivery", "reliable", "dedicated"]

    def test_habit_badges(self):
        metrics = {"morning_deliveries": 3, "weekend_deliveries": 5, "family_deliveries": 5}
        assert qualifying_badges(metrics) == ["early_bird", "weekend_warrior", "full_cart"]


class TestMetrics:
    async def test_counts_use_local_time(self, make_hero, make_delivery, store):
        hero = await make_hero(neighborhood="Clayton Park")
        # 09:30 local on a Monday
        await make_delivery(hero_id=hero.id, completed_at=datetime(2026, 3, 2, 13, 30, tzinfo=timezone.utc))
        # 23:00 local Friday, already Saturday in UTC
        await make_delivery(hero_id=hero.id, completed_at=datetime(2026, 3, 7, 3, 0, tzinfo=timezone.utc))
        # Saturday afternoon, family order in Clayton Park
        await make_delivery(
            hero_id=hero.id,
            completed_at=datetime(2026, 3, 7, 18, 0, tzinfo=timezone.utc),
            quantity=Quantity.FAMILY_5_PLUS,
            delivery_address="88 Dunbrack St, Clayton Park, Halifax",
        )

        metrics = compute_badge_metrics(hero, await store.get_requests(), HALIFAX)
        assert metrics == {
            "deliveries": 3,
            "morning_deliveries": 1,
            "weekend_deliveries": 1,
            "family_deliveries": 1,
            "neighborhood_deliveries": 1,
        }

    async def test_open_requests_do_not_count(self, make_hero, make_delivery, store):
        hero = await make_hero()
        await make_delivery(hero_id=hero.id)
        metrics = compute_badge_metrics(hero, await store.get_requests(), HALIFAX)
        assert metrics["deliveries"] == 0


class TestCheckAndAward:
    async def test_no_deliveries_no_badges(self, store, make_hero):
        hero = await make_hero()
        assert await check_and_award_badges(store, hero, HALIFAX) == []

    async def test_first_delivery(self, store, make_hero, make_delivery, base_time):
        hero = await make_hero()
        await make_delivery(hero_id=hero.id, completed_at=base_time)

        assert await check_and_award_badges(store, hero, HALIFAX) == ["first_delivery"]
        assert (await store.get_user(hero.id)).badges == ["first_delivery"]

    async def test_award_is_idempotent(self, store, make_hero, make_delivery, base_time):
        hero = await make_hero()
        await make_delivery(hero_id=hero.id, completed_at=base_time)

        await check_and_award_badges(store, hero, HALIFAX)
        assert await check_and_award_badges(store, hero, HALIFAX) == []
        assert (await store.get_user(hero.id)).badges == ["first_delivery"]

    async def test_only_new_badges_returned(self, store, make_hero, make_delivery, base_time):
        hero = await make_hero(badges=["first_delivery"])
        for i in range(5):
            await make_delivery(hero_id=hero.id, completed_at=base_time - timedelta(days=i))

        assert await check_and_award_badges(store, hero, HALIFAX) == ["reliable"]
        assert (await store.get_user(hero.id)).badges == ["first_delivery", "reliable"]

    async def test_early_bird(self, store, make_hero, make_delivery):
        hero = await make_hero(neighborhood="")
        for day in range(3):
            morning = datetime(2026, 3, 2 + day, 12, 0, tzinfo=timezone.utc)  # 08:00 local
            await make_delivery(hero_id=hero.id, completed_at=morning)

        awarded = await check_and_award_badges(store, hero, HALIFAX)
        assert "early_bird" in awarded

    async def test_neighborhood_hero(self, store, make_hero, make_delivery, base_time):
        hero = await make_hero(neighborhood="North End")
        for i in range(10):
            await make_delivery(hero_id=hero.id, completed_at=base_time - timedelta(days=i))

        awarded = await check_and_award_badges(store, hero, HALIFAX)
        assert "neighborhood_hero" in awarded
        assert "dedicated" in awarded

    async def test_badges_never_removed(self, store, make_hero):
        hero = await make_hero(badges=["champion"])
        await check_and_award_badges(store, hero, HALIFAX)
        assert (await store.get_user(hero.id)).badges == ["champion"]

    async def test_unknown_hero(self, store, make_hero):
        hero = await make_hero()
        ghost = hero.model_copy(update={"id": "ghost"})
        with pytest.raises(NotFound):
            await check_and_award_badges(store, ghost, HALIFAX)

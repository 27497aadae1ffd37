"""Delivery calendar helpers and daily-streak evaluation.

Calendar questions (same day, morning, weekend, last 7 days) are answered in
the community's local timezone (``CFC_LOCAL_TIMEZONE``), not UTC, so a
delivery at 9pm Halifax time counts for that evening and not the next day.
"""

from __future__ import annotations

from collections.abc import Iterable
from datetime import date, datetime, timedelta, timezone, tzinfo
from functools import lru_cache
from zoneinfo import ZoneInfo

from cfc.config import get_settings
from cfc.db.models import FoodRequest, RequestStatus

STREAK_DAYS = 7
MORNING_CUTOFF_HOUR = 10


@lru_cache
def _zone(name: str) -> ZoneInfo:
    return ZoneInfo(name)


def get_local_tz() -> tzinfo:
    """Timezone used for calendar-day comparisons."""
    return _zone(get_settings().local_timezone)


def local_day(dt: datetime, tz: tzinfo | None = None) -> date:
    """Calendar day of ``dt`` in the local timezone."""
    return dt.astimezone(tz or get_local_tz()).date()


def is_morning(dt: datetime, tz: tzinfo | None = None) -> bool:
    """Before 10am local time."""
    return dt.astimezone(tz or get_local_tz()).hour < MORNING_CUTOFF_HOUR


def is_weekend(dt: datetime, tz: tzinfo | None = None) -> bool:
    """Saturday or Sunday, local time."""
    return dt.astimezone(tz or get_local_tz()).weekday() >= 5


def last_days(now: datetime | None = None, days: int = STREAK_DAYS, tz: tzinfo | None = None) -> list[date]:
    """The ``days`` calendar days ending today, most recent first."""
    if now is None:
        now = datetime.now(timezone.utc)
    today = local_day(now, tz)
    return [today - timedelta(days=i) for i in range(days)]


def completed_deliveries(hero_id: str, history: Iterable[FoodRequest]) -> list[FoodRequest]:
    """Completed requests delivered by ``hero_id``."""
    return [
        r for r in history
        if r.hero_id == hero_id and r.status == RequestStatus.COMPLETED and r.completed_at is not None
    ]


def has_weekly_streak(
    hero_id: str,
    history: Iterable[FoodRequest],
    now: datetime | None = None,
    tz: tzinfo | None = None,
) -> bool:
    """True if the hero completed at least one delivery on each of the last 7 days.

    Recomputed from the full history on every call.
    """
    tz = tz or get_local_tz()
    delivered_days = {local_day(r.completed_at, tz) for r in completed_deliveries(hero_id, history)}
    return all(day in delivered_days for day in last_days(now, STREAK_DAYS, tz))

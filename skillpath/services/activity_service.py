"""Learning activity service: daily counters and streaks."""

import datetime as dt
from collections.abc import Iterable, Sequence
from datetime import date, timedelta
from typing import Protocol

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from skillpath.core.config import get_settings
from skillpath.core.database import upsert_insert
from skillpath.core.logging import get_logger
from skillpath.models.progress import LearningActivity
from skillpath.schemas.activity import ChartDay

logger = get_logger(__name__)

WEEK_DAYS = 7


class DailyRecord(Protocol):
    date: dt.date
    minutes_spent: int


def today() -> date:
    return date.today()


# ============================================================================
# Aggregation
# ============================================================================


def compute_streak(records: Iterable[DailyRecord], on: date) -> int:
    """Consecutive days with learning time, ending today or yesterday.

    A streak that ended yesterday is still alive today. A today record with
    no minutes (e.g. only a skill completion was logged) is ignored, so it
    does not break such a streak. Any other gap or empty day ends the walk.
    """
    ordered = sorted(records, key=lambda r: r.date, reverse=True)
    if ordered and ordered[0].date == on and ordered[0].minutes_spent <= 0:
        ordered = ordered[1:]
    if not ordered:
        return 0

    newest = ordered[0].date
    if newest == on:
        expected = on
    elif newest == on - timedelta(days=1):
        expected = newest
    else:
        return 0

    streak = 0
    for record in ordered:
        if record.date != expected or record.minutes_spent <= 0:
            break
        streak += 1
        expected -= timedelta(days=1)
    return streak


def in_trailing_window(day: date, on: date, days: int) -> bool:
    """True for the ``days`` calendar days ending with ``on`` (both ends inclusive)."""
    return on - timedelta(days=days - 1) <= day <= on


def weekly_minutes(records: Iterable[DailyRecord], on: date) -> int:
    return sum(r.minutes_spent for r in records if in_trailing_window(r.date, on, WEEK_DAYS))


def weekly_goal_percent(minutes: int, weekly_hours: float | None) -> int:
    hours = weekly_hours or get_settings().DEFAULT_WEEKLY_GOAL_HOURS
    goal_minutes = hours * 60
    return min(100, int(minutes / goal_minutes * 100 + 0.5))


def chart_series(records: Sequence[LearningActivity], on: date) -> list[ChartDay]:
    """Minutes and skills per day for the last week, oldest first."""
    by_day = {r.date: r for r in records}
    series = []
    for offset in range(WEEK_DAYS - 1, -1, -1):
        day = on - timedelta(days=offset)
        record = by_day.get(day)
        series.append(
            ChartDay(
                date=day,
                day=day.strftime("%a"),
                minutes=record.minutes_spent if record else 0,
                skills=record.skills_completed if record else 0,
            )
        )
    return series


# ============================================================================
# Store operations
# ============================================================================


async def record_activity(
    db: AsyncSession,
    *,
    user_id: int,
    minutes: int = 0,
    skills_completed: int = 0,
    on: date | None = None,
) -> LearningActivity:
    """Add to the user's counters for a day, creating the day's row if needed.

    Note: This function assumes the caller will commit the transaction.
    """
    day = on or today()
    stmt = upsert_insert(db, LearningActivity).values(
        user_id=user_id,
        date=day,
        minutes_spent=minutes,
        skills_completed=skills_completed,
    )
    stmt = stmt.on_conflict_do_update(
        index_elements=["user_id", "date"],
        set_={
            "minutes_spent": LearningActivity.minutes_spent + stmt.excluded.minutes_spent,
            "skills_completed": LearningActivity.skills_completed
            + stmt.excluded.skills_completed,
        },
    )
    await db.execute(stmt)

    result = await db.execute(
        select(LearningActivity)
        .where(LearningActivity.user_id == user_id, LearningActivity.date == day)
        .execution_options(populate_existing=True)
    )
    record = result.scalar_one()
    logger.debug(
        "Activity recorded",
        user_id=user_id,
        date=day.isoformat(),
        minutes=minutes,
        skills_completed=skills_completed,
    )
    return record


async def list_activity(
    db: AsyncSession, user_id: int, on: date, days: int
) -> list[LearningActivity]:
    """Activity rows within the trailing window, oldest first."""
    result = await db.execute(
        select(LearningActivity)
        .where(
            LearningActivity.user_id == user_id,
            LearningActivity.date >= on - timedelta(days=days - 1),
            LearningActivity.date <= on,
        )
        .order_by(LearningActivity.date)
    )
    return list(result.scalars().all())


"""Dashboard statistics for the active roadmap."""

from datetime import date

from sqlalchemy.ext.asyncio import AsyncSession

from skillpath.core.config import get_settings
from skillpath.schemas.activity import DashboardStats
from skillpath.services import activity_service, progress_service


async def dashboard_stats(
    db: AsyncSession,
    *,
    user_id: int,
    roadmap_id: int | None,
    weekly_hours: float | None,
    on: date | None = None,
) -> DashboardStats:
    """Streak, time totals and completion of the roadmap being followed.

    Activity is read over the configured trailing window (30 days by
    default), so streaks and totals never look further back than that.
    """
    day = on or activity_service.today()
    records = await activity_service.list_activity(
        db, user_id, day, get_settings().ACTIVITY_WINDOW_DAYS
    )

    rows = []
    if roadmap_id is not None:
        rows = await progress_service.get_progress_rows(db, user_id, roadmap_id)
    week = activity_service.weekly_minutes(records, day)

    return DashboardStats(
        streak=activity_service.compute_streak(records, day),
        total_minutes=sum(r.minutes_spent for r in records),
        weekly_minutes=week,
        weekly_goal_percent=activity_service.weekly_goal_percent(week, weekly_hours),
        completion_percent=progress_service.completion_percent(rows),
        completed_skills=sum(1 for row in rows if row.completed),
        total_skills=len(rows),
        chart=activity_service.chart_series(records, day),
    )

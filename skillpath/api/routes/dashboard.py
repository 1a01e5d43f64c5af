"""Dashboard route."""

from fastapi import APIRouter

from skillpath.api.deps import CurrentUser, DBSession
from skillpath.schemas import DashboardStats
from skillpath.services import dashboard_service, profile_service, roadmap_service

router = APIRouter(prefix="/dashboard", tags=["dashboard"])


@router.get("", response_model=DashboardStats)
async def get_dashboard(db: DBSession, user_id: CurrentUser) -> DashboardStats:
    """Streak, weekly goal and completion of the active roadmap."""
    profile = await profile_service.get_or_create_profile(db, user_id)
    roadmap = await roadmap_service.get_active_roadmap(db, user_id)
    return await dashboard_service.dashboard_stats(
        db,
        user_id=user_id,
        roadmap_id=roadmap.id if roadmap else None,
        weekly_hours=profile.weekly_hours,
    )

"""Learning activity routes."""

from fastapi import APIRouter, status

from skillpath.api.deps import CurrentUser, DBSession
from skillpath.core.config import get_settings
from skillpath.core.database import commit
from skillpath.schemas import ActivityLog, ActivityResponse
from skillpath.services import activity_service, profile_service

router = APIRouter(prefix="/activity", tags=["activity"])


@router.post("", response_model=ActivityResponse, status_code=status.HTTP_201_CREATED)
async def log_activity(data: ActivityLog, db: DBSession, user_id: CurrentUser) -> ActivityResponse:
    """Add learning minutes to a day (today unless a date is given)."""
    await profile_service.get_or_create_profile(db, user_id)
    record = await activity_service.record_activity(
        db,
        user_id=user_id,
        minutes=data.minutes,
        skills_completed=data.skills_completed,
        on=data.date,
    )
    await commit(db)
    return ActivityResponse.model_validate(record)


@router.get("", response_model=list[ActivityResponse])
async def list_activity(db: DBSession, user_id: CurrentUser) -> list[ActivityResponse]:
    """Daily activity over the trailing window, oldest first."""
    records = await activity_service.list_activity(
        db, user_id, activity_service.today(), get_settings().ACTIVITY_WINDOW_DAYS
    )
    return [ActivityResponse.model_validate(r) for r in records]

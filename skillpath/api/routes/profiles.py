"""Profile and onboarding routes."""

from fastapi import APIRouter

from skillpath.api.deps import CurrentUser, DBSession, Generator
from skillpath.core.database import commit
from skillpath.core.logging import get_logger
from skillpath.schemas import (
    AssessmentSubmission,
    CareerChoice,
    GenerateRoadmapResponse,
    GenerationRequest,
    ProfileResponse,
    ProfileUpdate,
    RoadmapResponse,
)
from skillpath.services import profile_service, roadmap_service

logger = get_logger(__name__)
router = APIRouter(prefix="/profile", tags=["profile"])


async def _respond(db: DBSession, user_id: int) -> ProfileResponse:
    profile = await profile_service.get_or_create_profile(db, user_id)
    has_roadmap = await roadmap_service.get_active_roadmap(db, user_id) is not None
    return profile_service.to_response(profile, has_roadmap)


@router.get("", response_model=ProfileResponse)
async def get_profile(db: DBSession, user_id: CurrentUser) -> ProfileResponse:
    """Get the current user's profile and onboarding stage."""
    return await _respond(db, user_id)


@router.patch("", response_model=ProfileResponse)
async def update_profile(
    data: ProfileUpdate, db: DBSession, user_id: CurrentUser
) -> ProfileResponse:
    profile = await profile_service.get_or_create_profile(db, user_id)
    await profile_service.update_profile(db, profile, data)
    await commit(db)
    return await _respond(db, user_id)


@router.post("/assessment", response_model=ProfileResponse)
async def submit_assessment(
    data: AssessmentSubmission, db: DBSession, user_id: CurrentUser
) -> ProfileResponse:
    """Store the preliminary assessment answers."""
    profile = await profile_service.get_or_create_profile(db, user_id)
    await profile_service.record_assessment(db, profile, data.answers, data.recommended_career)
    await commit(db)
    return await _respond(db, user_id)


@router.post("/career", response_model=ProfileResponse)
async def choose_career(
    data: CareerChoice, db: DBSession, user_id: CurrentUser
) -> ProfileResponse:
    profile = await profile_service.get_or_create_profile(db, user_id)
    await profile_service.select_career(db, profile, data.target_skill)
    await commit(db)
    return await _respond(db, user_id)


@router.post("/onboarding", response_model=GenerateRoadmapResponse)
async def complete_onboarding(
    data: GenerationRequest,
    db: DBSession,
    user_id: CurrentUser,
    generator: Generator,
) -> GenerateRoadmapResponse:
    """Save the onboarding answers, then generate the first roadmap.

    The answers are committed before generation starts, so they survive a
    failed generation and the learner can simply retry.
    """
    profile = await profile_service.get_or_create_profile(db, user_id)
    await profile_service.complete_onboarding(db, profile, data)
    await commit(db)

    roadmap = await roadmap_service.generate_roadmap(
        db, user_id=user_id, request=data, generator=generator
    )
    return GenerateRoadmapResponse(roadmap=RoadmapResponse.model_validate(roadmap))


@router.post("/restart", response_model=ProfileResponse)
async def restart_onboarding(db: DBSession, user_id: CurrentUser) -> ProfileResponse:
    """Start over. Existing roadmaps are kept."""
    profile = await profile_service.get_or_create_profile(db, user_id)
    await profile_service.restart(db, profile)
    await commit(db)
    return await _respond(db, user_id)

"""Profile service: onboarding funnel state and profile updates."""

from sqlalchemy.ext.asyncio import AsyncSession

from skillpath.core.config import get_settings
from skillpath.core.database import upsert_insert
from skillpath.core.logging import get_logger
from skillpath.models.profile import Profile
from skillpath.schemas.profile import ProfileResponse, ProfileStage, ProfileUpdate
from skillpath.schemas.roadmap import GenerationRequest

logger = get_logger(__name__)

RECOMMENDED_TAG = "Recommended:"


async def get_or_create_profile(db: AsyncSession, user_id: int) -> Profile:
    """Return the user's profile, creating an empty one on first access.

    Two concurrent first requests may both try to create the row; the loser's
    insert is ignored.
    """
    profile = await db.get(Profile, user_id)
    if profile:
        return profile

    stmt = upsert_insert(db, Profile).values(
        id=user_id, existing_skills=[], assessment_answers=[], onboarding_completed=False
    )
    await db.execute(stmt.on_conflict_do_nothing(index_elements=["id"]))
    profile = await db.get(Profile, user_id)
    logger.info("Profile created", user_id=user_id)
    return profile


def has_completed_assessment(profile: Profile) -> bool:
    """True once the preliminary assessment was answered.

    Legacy profiles only carry the answers as ``General_Q*`` tags inside
    ``existing_skills``.
    """
    if profile.assessment_answers:
        return True
    prefix = get_settings().ASSESSMENT_TAG_PREFIX
    return any(tag.startswith(prefix) for tag in profile.existing_skills or [])


def recommended_career(profile: Profile) -> str | None:
    for tag in profile.existing_skills or []:
        if tag.startswith(RECOMMENDED_TAG):
            return tag.removeprefix(RECOMMENDED_TAG).strip() or None
    return None


def compute_stage(profile: Profile, has_roadmap: bool) -> ProfileStage:
    if not has_completed_assessment(profile):
        return ProfileStage.NEEDS_ASSESSMENT
    if not profile.target_skill:
        return ProfileStage.NEEDS_CAREER_CHOICE
    if not profile.onboarding_completed or not has_roadmap:
        return ProfileStage.NEEDS_ONBOARDING
    return ProfileStage.READY


def to_response(profile: Profile, has_roadmap: bool) -> ProfileResponse:
    response = ProfileResponse.model_validate(profile)
    response.stage = compute_stage(profile, has_roadmap)
    response.recommended_career = recommended_career(profile)
    return response


async def update_profile(db: AsyncSession, profile: Profile, data: ProfileUpdate) -> Profile:
    """Apply the fields present in ``data``; an explicit null clears a field."""
    for field, value in data.model_dump(exclude_unset=True).items():
        if field == "existing_skills" and value is None:
            value = []
        setattr(profile, field, value)
    await db.flush()
    logger.info("Profile updated", user_id=profile.id)
    return profile


async def record_assessment(
    db: AsyncSession,
    profile: Profile,
    answers: list[str],
    recommendation: str | None = None,
) -> Profile:
    """Store the preliminary assessment and the career it points to."""
    profile.assessment_answers = list(answers)
    if recommendation:
        tags = [t for t in profile.existing_skills or [] if not t.startswith(RECOMMENDED_TAG)]
        profile.existing_skills = [*tags, f"{RECOMMENDED_TAG} {recommendation}"]
    await db.flush()
    logger.info("Assessment recorded", user_id=profile.id, answers=len(answers))
    return profile


async def select_career(db: AsyncSession, profile: Profile, target_skill: str) -> Profile:
    """Choose a new target; onboarding has to be redone for it."""
    profile.target_skill = target_skill.strip()
    profile.onboarding_completed = False
    await db.flush()
    logger.info("Career selected", user_id=profile.id, target_skill=profile.target_skill)
    return profile


async def complete_onboarding(
    db: AsyncSession, profile: Profile, request: GenerationRequest
) -> Profile:
    """Save the onboarding answers that feed roadmap generation."""
    profile.education_level = request.education_level
    profile.existing_skills = [
        *request.existing_skills,
        *(t for t in profile.existing_skills or [] if t.startswith(RECOMMENDED_TAG)),
    ]
    profile.target_skill = request.target_skill
    profile.weekly_hours = request.weekly_hours
    if request.context and isinstance(request.context.daily_time, int | float):
        profile.daily_hours = float(request.context.daily_time)
    profile.onboarding_completed = True
    await db.flush()
    logger.info("Onboarding completed", user_id=profile.id, target_skill=request.target_skill)
    return profile


async def restart(db: AsyncSession, profile: Profile) -> Profile:
    """Start over: onboarding is reopened, existing roadmaps are left untouched."""
    profile.onboarding_completed = False
    await db.flush()
    logger.info("Onboarding restarted", user_id=profile.id)
    return profile

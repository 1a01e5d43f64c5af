"""Profile and onboarding schemas."""

from datetime import datetime
from enum import Enum

from pydantic import BaseModel, ConfigDict, Field


class ProfileStage(str, Enum):
    """Where the learner is in the onboarding funnel."""

    NEEDS_ASSESSMENT = "needs_assessment"
    NEEDS_CAREER_CHOICE = "needs_career_choice"
    NEEDS_ONBOARDING = "needs_onboarding"
    READY = "ready"


class ProfileResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    display_name: str | None
    education_level: str | None
    existing_skills: list[str]
    target_skill: str | None
    weekly_hours: float | None
    daily_hours: float | None
    onboarding_completed: bool
    assessment_answers: list[str]
    active_roadmap_id: int | None
    created_at: datetime
    updated_at: datetime
    stage: ProfileStage | None = None
    recommended_career: str | None = None


class ProfileUpdate(BaseModel):
    display_name: str | None = None
    education_level: str | None = None
    existing_skills: list[str] | None = None
    weekly_hours: float | None = Field(default=None, gt=0)
    daily_hours: float | None = Field(default=None, gt=0)


class AssessmentSubmission(BaseModel):
    answers: list[str] = Field(min_length=1)
    recommended_career: str | None = None


class CareerChoice(BaseModel):
    target_skill: str = Field(min_length=1)

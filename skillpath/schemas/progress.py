"""Progress, quiz and note schemas."""

from datetime import datetime

from pydantic import BaseModel, ConfigDict, Field

from skillpath.schemas.roadmap import ResourceLink


class SkillKey(BaseModel):
    """Identifies a skill within a roadmap (phase name + skill name)."""

    phase: str
    skill_name: str = Field(alias="skillName")

    model_config = ConfigDict(populate_by_name=True)


class SkillState(BaseModel):
    """Navigable state of one skill."""

    phase: str
    phase_index: int
    skill_name: str
    skill_index: int
    position: int
    description: str = ""
    time_estimate: str | None = None
    resources: list[ResourceLink] = []
    has_quiz: bool
    completed: bool
    completed_at: datetime | None = None
    locked: bool
    locked_reason: str | None = None


class PhaseState(BaseModel):
    name: str
    description: str | None = None
    duration_days: float | str | None = None
    completion_percent: int
    skills: list[SkillState]


class RoadmapState(BaseModel):
    """Unlock chain and completion aggregates of a roadmap."""

    roadmap_id: int
    target_skill: str
    overall_percent: int
    completed_count: int
    total_count: int
    next_skill: SkillState | None = None
    synced: bool = True
    phases: list[PhaseState]


class QuizSubmission(SkillKey):
    """Selected option per question index."""

    answers: dict[int, int]


class QuizResult(BaseModel):
    passed: bool
    score: int
    total: int
    threshold: int


class SkillProgressResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    roadmap_id: int
    phase: str
    skill_name: str
    completed: bool
    completed_at: datetime | None


class NoteUpsert(SkillKey):
    content: str


class NoteResponse(BaseModel):
    phase: str
    skill_name: str
    content: str
    updated_at: datetime | None = None

"""Pydantic schemas."""

from skillpath.schemas.activity import (
    ActivityLog,
    ActivityResponse,
    ChartDay,
    DashboardStats,
)
from skillpath.schemas.profile import (
    AssessmentSubmission,
    CareerChoice,
    ProfileResponse,
    ProfileStage,
    ProfileUpdate,
)
from skillpath.schemas.progress import (
    NoteResponse,
    NoteUpsert,
    PhaseState,
    QuizResult,
    QuizSubmission,
    RoadmapState,
    SkillKey,
    SkillProgressResponse,
    SkillState,
)
from skillpath.schemas.roadmap import (
    GenerateRoadmapResponse,
    GenerationContext,
    GenerationRequest,
    RoadmapDocument,
    RoadmapResponse,
    SharedRoadmapResponse,
)

__all__ = [
    "ActivityLog",
    "ActivityResponse",
    "ChartDay",
    "DashboardStats",
    "AssessmentSubmission",
    "CareerChoice",
    "ProfileResponse",
    "ProfileStage",
    "ProfileUpdate",
    "NoteResponse",
    "NoteUpsert",
    "PhaseState",
    "QuizResult",
    "QuizSubmission",
    "RoadmapState",
    "SkillKey",
    "SkillProgressResponse",
    "SkillState",
    "GenerateRoadmapResponse",
    "GenerationContext",
    "GenerationRequest",
    "RoadmapDocument",
    "RoadmapResponse",
    "SharedRoadmapResponse",
]

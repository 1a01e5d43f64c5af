"""Service layer modules."""

from skillpath.services import (
    activity_service,
    dashboard_service,
    note_service,
    profile_service,
    progress_service,
    quiz_service,
    roadmap_service,
)

__all__ = [
    "activity_service",
    "dashboard_service",
    "note_service",
    "profile_service",
    "progress_service",
    "quiz_service",
    "roadmap_service",
]

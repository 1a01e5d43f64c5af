"""Roadmap, progress, quiz and note routes."""

from typing import Annotated

from fastapi import APIRouter, Query

from skillpath.api.deps import CurrentUser, DBSession, Generator
from skillpath.core.errors import RoadmapNotFound
from skillpath.core.logging import get_logger
from skillpath.schemas import (
    GenerateRoadmapResponse,
    GenerationRequest,
    NoteResponse,
    NoteUpsert,
    QuizResult,
    QuizSubmission,
    RoadmapResponse,
    RoadmapState,
    SkillKey,
    SkillProgressResponse,
)
from skillpath.services import (
    note_service,
    progress_service,
    quiz_service,
    roadmap_service,
)

logger = get_logger(__name__)
router = APIRouter(prefix="/roadmaps", tags=["roadmaps"])


@router.post("/generate", response_model=GenerateRoadmapResponse)
async def generate_roadmap(
    data: GenerationRequest,
    db: DBSession,
    user_id: CurrentUser,
    generator: Generator,
) -> GenerateRoadmapResponse:
    """Generate a roadmap and make it the active one.

    Errors are reported as ``{"error": message}``: 429 when the generation
    service is rate limited, 402 when its credits are exhausted, 409 while
    another generation for the same user is running and 500 otherwise.
    """
    roadmap = await roadmap_service.generate_roadmap(
        db, user_id=user_id, request=data, generator=generator
    )
    return GenerateRoadmapResponse(roadmap=RoadmapResponse.model_validate(roadmap))


@router.get("", response_model=list[RoadmapResponse])
async def list_roadmaps(db: DBSession, user_id: CurrentUser) -> list[RoadmapResponse]:
    """List the user's roadmaps, newest first."""
    roadmaps = await roadmap_service.list_user_roadmaps(db, user_id)
    return [RoadmapResponse.model_validate(r) for r in roadmaps]


@router.get("/active", response_model=RoadmapResponse)
async def get_active_roadmap(db: DBSession, user_id: CurrentUser) -> RoadmapResponse:
    roadmap = await roadmap_service.get_active_roadmap(db, user_id)
    if not roadmap:
        raise RoadmapNotFound("No active roadmap")
    return RoadmapResponse.model_validate(roadmap)


@router.get("/{roadmap_id}", response_model=RoadmapResponse)
async def get_roadmap(roadmap_id: int, db: DBSession, user_id: CurrentUser) -> RoadmapResponse:
    roadmap = await roadmap_service.get_roadmap(db, user_id, roadmap_id)
    return RoadmapResponse.model_validate(roadmap)


@router.get("/{roadmap_id}/progress", response_model=RoadmapState)
async def get_roadmap_progress(
    roadmap_id: int, db: DBSession, user_id: CurrentUser
) -> RoadmapState:
    """Unlock chain and completion of a roadmap.

    Missing progress rows are created first. If that fails the state is
    still returned, built from the rows that exist, with ``synced: false``.
    """
    roadmap = await roadmap_service.get_roadmap(db, user_id, roadmap_id)
    document = roadmap_service.document_of(roadmap)
    return await progress_service.get_roadmap_state(db, user_id, roadmap, document)


@router.post("/{roadmap_id}/skills/complete", response_model=SkillProgressResponse)
async def complete_skill(
    roadmap_id: int, data: SkillKey, db: DBSession, user_id: CurrentUser
) -> SkillProgressResponse:
    """Complete an unlocked skill that has no quiz."""
    roadmap = await roadmap_service.get_roadmap(db, user_id, roadmap_id)
    row = await progress_service.complete_without_quiz(
        db,
        user_id=user_id,
        roadmap_id=roadmap_id,
        document=roadmap_service.document_of(roadmap),
        phase=data.phase,
        skill_name=data.skill_name,
    )
    return SkillProgressResponse.model_validate(row)


@router.post("/{roadmap_id}/skills/quiz", response_model=QuizResult)
async def submit_quiz(
    roadmap_id: int, data: QuizSubmission, db: DBSession, user_id: CurrentUser
) -> QuizResult:
    """Grade a quiz attempt. A passing attempt completes the skill."""
    roadmap = await roadmap_service.get_roadmap(db, user_id, roadmap_id)
    return await quiz_service.submit_quiz(
        db,
        user_id=user_id,
        roadmap_id=roadmap_id,
        document=roadmap_service.document_of(roadmap),
        phase=data.phase,
        skill_name=data.skill_name,
        answers=data.answers,
    )


@router.get("/{roadmap_id}/notes", response_model=NoteResponse)
async def get_note(
    roadmap_id: int,
    db: DBSession,
    user_id: CurrentUser,
    phase: str,
    skill_name: Annotated[str, Query(alias="skillName")],
) -> NoteResponse:
    """Get the note of a skill; an empty note when none was written."""
    await roadmap_service.get_roadmap(db, user_id, roadmap_id)
    note = await note_service.get_note(
        db, user_id=user_id, roadmap_id=roadmap_id, phase=phase, skill_name=skill_name
    )
    if not note:
        return NoteResponse(phase=phase, skill_name=skill_name, content="")
    return NoteResponse(
        phase=note.phase, skill_name=note.skill_name, content=note.content, updated_at=note.updated_at
    )


@router.put("/{roadmap_id}/notes", response_model=NoteResponse)
async def save_note(
    roadmap_id: int, data: NoteUpsert, db: DBSession, user_id: CurrentUser
) -> NoteResponse:
    await roadmap_service.get_roadmap(db, user_id, roadmap_id)
    note = await note_service.upsert_note(
        db,
        user_id=user_id,
        roadmap_id=roadmap_id,
        phase=data.phase,
        skill_name=data.skill_name,
        content=data.content,
    )
    return NoteResponse(
        phase=note.phase, skill_name=note.skill_name, content=note.content, updated_at=note.updated_at
    )

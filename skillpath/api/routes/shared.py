"""Public read-only roadmap links."""

from fastapi import APIRouter

from skillpath.api.deps import DBSession
from skillpath.schemas import SharedRoadmapResponse
from skillpath.services import roadmap_service

router = APIRouter(prefix="/shared", tags=["shared"])


@router.get("/roadmaps/{roadmap_id}", response_model=SharedRoadmapResponse)
async def get_shared_roadmap(roadmap_id: int, db: DBSession) -> SharedRoadmapResponse:
    """Phases and skills of a roadmap. No user header is needed."""
    roadmap = await roadmap_service.get_shared_roadmap(db, roadmap_id)
    return SharedRoadmapResponse.build(roadmap, roadmap_service.document_of(roadmap))

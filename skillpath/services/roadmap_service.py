"""Roadmap service: generation, persistence and lookup of roadmaps."""

from contextlib import contextmanager
from typing import Any

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from skillpath.core.database import commit
from skillpath.core.errors import GenerationInProgress, RoadmapNotFound
from skillpath.core.logging import get_logger
from skillpath.generation import RoadmapGenerator
from skillpath.models.roadmap import SkillRoadmap
from skillpath.schemas.roadmap import (
    CURRENT_SCHEMA_VERSION,
    GenerationRequest,
    RoadmapDocument,
    load_document,
)
from skillpath.services import profile_service

logger = get_logger(__name__)

# Users with a generation request in flight in this process
_generating: set[int] = set()


@contextmanager
def _single_generation(user_id: int):
    if user_id in _generating:
        raise GenerationInProgress()
    _generating.add(user_id)
    try:
        yield
    finally:
        _generating.discard(user_id)


def document_of(roadmap: SkillRoadmap) -> RoadmapDocument:
    """Parsed, normalized curriculum of a stored roadmap."""
    return load_document(roadmap.roadmap_data, roadmap.schema_version)


# ============================================================================
# Persistence
# ============================================================================


async def create_roadmap(
    db: AsyncSession,
    *,
    user_id: int,
    target_skill: str,
    roadmap_data: dict[str, Any],
    schema_version: int = CURRENT_SCHEMA_VERSION,
) -> SkillRoadmap:
    """Store a new roadmap and make it the user's active one.

    Previous roadmaps are kept as they are.

    Note: This function commits the transaction.
    """
    profile = await profile_service.get_or_create_profile(db, user_id)

    roadmap = SkillRoadmap(
        user_id=user_id,
        target_skill=target_skill,
        roadmap_data=roadmap_data,
        schema_version=schema_version,
    )
    db.add(roadmap)
    await db.flush()

    profile.active_roadmap_id = roadmap.id
    await commit(db)
    await db.refresh(roadmap)

    logger.info(
        "Roadmap created",
        roadmap_id=roadmap.id,
        user_id=user_id,
        target_skill=target_skill,
        schema_version=schema_version,
    )
    return roadmap


async def generate_roadmap(
    db: AsyncSession,
    *,
    user_id: int,
    request: GenerationRequest,
    generator: RoadmapGenerator,
) -> SkillRoadmap:
    """Run the generation contract and store its result.

    Only one generation per user may be in flight at a time; a second one
    fails with GenerationInProgress instead of queuing.
    """
    with _single_generation(user_id):
        roadmap_data = await generator.generate(request)
        return await create_roadmap(
            db,
            user_id=user_id,
            target_skill=request.target_skill,
            roadmap_data=roadmap_data,
        )


# ============================================================================
# Lookup
# ============================================================================


async def get_active_roadmap(db: AsyncSession, user_id: int) -> SkillRoadmap | None:
    """The roadmap the user is following.

    Profiles created before the explicit pointer existed fall back to the
    most recently created roadmap.
    """
    profile = await profile_service.get_or_create_profile(db, user_id)
    if profile.active_roadmap_id is not None:
        roadmap = await db.get(SkillRoadmap, profile.active_roadmap_id)
        if roadmap and roadmap.user_id == user_id:
            return roadmap

    result = await db.execute(
        select(SkillRoadmap)
        .where(SkillRoadmap.user_id == user_id)
        .order_by(SkillRoadmap.created_at.desc(), SkillRoadmap.id.desc())
        .limit(1)
    )
    return result.scalar_one_or_none()


async def get_roadmap(db: AsyncSession, user_id: int, roadmap_id: int) -> SkillRoadmap:
    """Get one of the user's roadmaps.

    Raises:
        RoadmapNotFound: if it does not exist or belongs to someone else.
    """
    roadmap = await db.get(SkillRoadmap, roadmap_id)
    if not roadmap or roadmap.user_id != user_id:
        raise RoadmapNotFound()
    return roadmap


async def get_shared_roadmap(db: AsyncSession, roadmap_id: int) -> SkillRoadmap:
    """Get any roadmap by id, regardless of owner.

    Raises:
        RoadmapNotFound: if it does not exist.
    """
    roadmap = await db.get(SkillRoadmap, roadmap_id)
    if not roadmap:
        raise RoadmapNotFound()
    return roadmap


async def list_user_roadmaps(db: AsyncSession, user_id: int) -> list[SkillRoadmap]:
    """All roadmaps of a user, newest first."""
    result = await db.execute(
        select(SkillRoadmap)
        .where(SkillRoadmap.user_id == user_id)
        .order_by(SkillRoadmap.created_at.desc(), SkillRoadmap.id.desc())
    )
    return list(result.scalars().all())

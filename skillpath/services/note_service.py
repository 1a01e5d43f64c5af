"""Skill notes: one free-text note per user, roadmap, phase and skill."""

from sqlalchemy import select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from skillpath.core.database import commit, upsert_insert, utcnow
from skillpath.core.errors import PersistenceFailure
from skillpath.core.logging import get_logger
from skillpath.models.progress import SkillNote

logger = get_logger(__name__)


async def get_note(
    db: AsyncSession, *, user_id: int, roadmap_id: int, phase: str, skill_name: str
) -> SkillNote | None:
    result = await db.execute(
        select(SkillNote)
        .where(
            SkillNote.user_id == user_id,
            SkillNote.roadmap_id == roadmap_id,
            SkillNote.phase == phase,
            SkillNote.skill_name == skill_name,
        )
        .execution_options(populate_existing=True)
    )
    return result.scalar_one_or_none()


async def upsert_note(
    db: AsyncSession,
    *,
    user_id: int,
    roadmap_id: int,
    phase: str,
    skill_name: str,
    content: str,
) -> SkillNote:
    """Create or replace the note for a skill.

    Note: This function commits the transaction.
    """
    now = utcnow()
    stmt = upsert_insert(db, SkillNote).values(
        user_id=user_id,
        roadmap_id=roadmap_id,
        phase=phase,
        skill_name=skill_name,
        content=content,
        created_at=now,
        updated_at=now,
    )
    stmt = stmt.on_conflict_do_update(
        index_elements=["user_id", "roadmap_id", "skill_name", "phase"],
        set_={"content": stmt.excluded.content, "updated_at": now},
    )
    try:
        await db.execute(stmt)
    except SQLAlchemyError as e:
        await db.rollback()
        logger.error("Saving note failed", roadmap_id=roadmap_id, error=str(e))
        raise PersistenceFailure("Failed to save notes") from e
    await commit(db)

    note = await get_note(
        db, user_id=user_id, roadmap_id=roadmap_id, phase=phase, skill_name=skill_name
    )
    logger.info("Note saved", roadmap_id=roadmap_id, phase=phase, skill=skill_name)
    return note

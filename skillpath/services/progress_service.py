"""Progress service: backfill, unlock chain and completion.

A roadmap is flattened into one ordered sequence of skills (phase order,
then skill order). The first skill is always open; every other skill opens
once the skill right before it is completed, across phase boundaries.
"""

from collections.abc import Iterable
from dataclasses import dataclass

from sqlalchemy import select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from skillpath.core.database import commit, upsert_insert, utcnow
from skillpath.core.errors import (
    PersistenceFailure,
    QuizRequired,
    SkillLocked,
    SkillNotFound,
)
from skillpath.core.logging import get_logger
from skillpath.models.progress import SkillProgress
from skillpath.models.roadmap import SkillRoadmap
from skillpath.schemas.progress import PhaseState, RoadmapState, SkillState
from skillpath.schemas.roadmap import Phase, RoadmapDocument, Skill
from skillpath.services import activity_service

logger = get_logger(__name__)

SkillKey = tuple[str, str]  # (phase name, skill name)


@dataclass(frozen=True)
class ChainEntry:
    """One skill in the flattened unlock chain."""

    position: int
    phase_index: int
    skill_index: int
    phase: Phase
    skill: Skill

    @property
    def key(self) -> SkillKey:
        return (self.phase.name, self.skill.name)


# ============================================================================
# Pure state computation
# ============================================================================


def flatten(document: RoadmapDocument) -> list[ChainEntry]:
    entries = []
    for phase_index, phase in enumerate(document.phases):
        for skill_index, skill in enumerate(phase.skills):
            entries.append(ChainEntry(len(entries), phase_index, skill_index, phase, skill))
    return entries


def required_skill_keys(document: RoadmapDocument) -> list[SkillKey]:
    """Every (phase, skill) pair that needs a progress row, in chain order."""
    return list(dict.fromkeys(entry.key for entry in flatten(document)))


def missing_skill_keys(document: RoadmapDocument, existing: Iterable[SkillKey]) -> list[SkillKey]:
    present = set(existing)
    return [key for key in required_skill_keys(document) if key not in present]


def compute_locks(document: RoadmapDocument, completed: set[SkillKey]) -> list[bool]:
    """Locked flag per chain position."""
    chain = flatten(document)
    return [
        entry.position > 0 and chain[entry.position - 1].key not in completed for entry in chain
    ]


def completion_percent(rows: Iterable[SkillProgress]) -> int:
    """Completed share of ``rows`` in percent, rounded half up; 0 when empty."""
    rows = list(rows)
    if not rows:
        return 0
    done = sum(1 for row in rows if row.completed)
    return (200 * done + len(rows)) // (2 * len(rows))


def phase_completion_percent(rows: Iterable[SkillProgress], phase_name: str) -> int:
    return completion_percent(row for row in rows if row.phase == phase_name)


def completed_keys(rows: Iterable[SkillProgress]) -> set[SkillKey]:
    return {(row.phase, row.skill_name) for row in rows if row.completed}


def locate(document: RoadmapDocument, phase_name: str, skill_name: str) -> ChainEntry:
    """Find a skill in the chain.

    Raises:
        SkillNotFound: if the roadmap has no such phase/skill pair.
    """
    for entry in flatten(document):
        if entry.key == (phase_name, skill_name):
            return entry
    raise SkillNotFound()


def locked_reason(chain: list[ChainEntry], entry: ChainEntry, completed: set[SkillKey]) -> str | None:
    if entry.position == 0:
        return None
    previous = chain[entry.position - 1]
    if previous.key in completed:
        return None
    return f'Complete "{previous.skill.name}" first to unlock this skill.'


def assemble_state(
    *,
    roadmap_id: int,
    target_skill: str,
    document: RoadmapDocument,
    rows: list[SkillProgress],
    synced: bool = True,
) -> RoadmapState:
    """Build the navigable view of a roadmap from its progress rows."""
    chain = flatten(document)
    done = completed_keys(rows)
    rows_by_key = {(row.phase, row.skill_name): row for row in rows}

    phases: list[PhaseState] = [
        PhaseState(
            name=phase.name,
            description=phase.description,
            duration_days=phase.duration_days,
            completion_percent=phase_completion_percent(rows, phase.name),
            skills=[],
        )
        for phase in document.phases
    ]

    next_skill = None
    for entry in chain:
        row = rows_by_key.get(entry.key)
        reason = locked_reason(chain, entry, done)
        state = SkillState(
            phase=entry.phase.name,
            phase_index=entry.phase_index,
            skill_name=entry.skill.name,
            skill_index=entry.skill_index,
            position=entry.position,
            description=entry.skill.description,
            time_estimate=entry.skill.time_estimate,
            resources=entry.skill.resource_links(),
            has_quiz=entry.skill.has_quiz,
            completed=entry.key in done,
            completed_at=row.completed_at if row else None,
            locked=reason is not None,
            locked_reason=reason,
        )
        phases[entry.phase_index].skills.append(state)
        if next_skill is None and not state.completed and not state.locked:
            next_skill = state

    return RoadmapState(
        roadmap_id=roadmap_id,
        target_skill=target_skill,
        overall_percent=completion_percent(rows),
        completed_count=len(done),
        total_count=len(rows),
        next_skill=next_skill,
        synced=synced,
        phases=phases,
    )


# ============================================================================
# Store operations
# ============================================================================


async def get_progress_rows(db: AsyncSession, user_id: int, roadmap_id: int) -> list[SkillProgress]:
    result = await db.execute(
        select(SkillProgress)
        .where(SkillProgress.user_id == user_id, SkillProgress.roadmap_id == roadmap_id)
        .order_by(SkillProgress.id)
        .execution_options(populate_existing=True)
    )
    return list(result.scalars().all())


async def backfill(
    db: AsyncSession,
    *,
    user_id: int,
    roadmap_id: int,
    document: RoadmapDocument,
) -> list[SkillProgress]:
    """Create the progress rows the roadmap still lacks and return all rows.

    Idempotent. Rows inserted concurrently by another request are skipped by
    the unique constraint instead of failing.

    Raises:
        PersistenceFailure: if the store rejects the read or the insert.
    """
    try:
        rows = await get_progress_rows(db, user_id, roadmap_id)
        missing = missing_skill_keys(document, ((r.phase, r.skill_name) for r in rows))
        if not missing:
            return rows

        stmt = upsert_insert(db, SkillProgress).values(
            [
                {
                    "user_id": user_id,
                    "roadmap_id": roadmap_id,
                    "phase": phase,
                    "skill_name": skill_name,
                    "completed": False,
                    "created_at": utcnow(),
                }
                for phase, skill_name in missing
            ]
        )
        await db.execute(
            stmt.on_conflict_do_nothing(
                index_elements=["user_id", "roadmap_id", "phase", "skill_name"]
            )
        )
    except SQLAlchemyError as e:
        await db.rollback()
        logger.error("Progress backfill failed", roadmap_id=roadmap_id, error=str(e))
        raise PersistenceFailure() from e

    await commit(db)
    logger.info("Progress rows backfilled", roadmap_id=roadmap_id, created=len(missing))
    return await get_progress_rows(db, user_id, roadmap_id)


async def get_roadmap_state(
    db: AsyncSession, user_id: int, roadmap: SkillRoadmap, document: RoadmapDocument
) -> RoadmapState:
    """Backfill, then compute the unlock chain.

    A failed backfill does not prevent display: whatever rows exist are
    used and the state is flagged as not synced.
    """
    roadmap_id, target_skill = roadmap.id, roadmap.target_skill
    synced = True
    try:
        rows = await backfill(db, user_id=user_id, roadmap_id=roadmap_id, document=document)
    except PersistenceFailure:
        synced = False
        try:
            rows = await get_progress_rows(db, user_id, roadmap_id)
        except SQLAlchemyError:
            logger.warning("Progress rows unavailable", roadmap_id=roadmap_id)
            rows = []

    return assemble_state(
        roadmap_id=roadmap_id,
        target_skill=target_skill,
        document=document,
        rows=rows,
        synced=synced,
    )


async def toggle_complete(db: AsyncSession, row: SkillProgress, completed: bool) -> SkillProgress:
    """Set a row's completion flag. Caller commits."""
    if row.completed == completed:
        return row
    row.completed = completed
    row.completed_at = utcnow() if completed else None
    await db.flush()
    return row


async def mark_complete(
    db: AsyncSession,
    *,
    user_id: int,
    roadmap_id: int,
    document: RoadmapDocument,
    phase: str,
    skill_name: str,
) -> SkillProgress:
    """Complete a skill and count it in today's activity.

    Completing an already completed skill changes nothing. The lock check is
    the caller's job.

    Note: This function commits the transaction.
    """
    rows = await backfill(db, user_id=user_id, roadmap_id=roadmap_id, document=document)
    row = next((r for r in rows if r.phase == phase and r.skill_name == skill_name), None)
    if row is None:
        raise SkillNotFound()
    if row.completed:
        return row

    try:
        await toggle_complete(db, row, True)
        await activity_service.record_activity(db, user_id=user_id, skills_completed=1)
    except SQLAlchemyError as e:
        await db.rollback()
        logger.error("Marking skill complete failed", roadmap_id=roadmap_id, error=str(e))
        raise PersistenceFailure() from e
    await commit(db)

    logger.info("Skill completed", roadmap_id=roadmap_id, phase=phase, skill=skill_name)
    return row


async def ensure_unlocked(
    db: AsyncSession,
    *,
    user_id: int,
    roadmap_id: int,
    document: RoadmapDocument,
    phase: str,
    skill_name: str,
) -> ChainEntry:
    """Locate a skill and check it is open.

    Raises:
        SkillNotFound: unknown phase/skill.
        SkillLocked: the previous skill in the chain is not completed.
        PersistenceFailure: progress rows could not be synced.
    """
    entry = locate(document, phase, skill_name)
    rows = await backfill(db, user_id=user_id, roadmap_id=roadmap_id, document=document)
    reason = locked_reason(flatten(document), entry, completed_keys(rows))
    if reason:
        raise SkillLocked(reason)
    return entry


async def complete_without_quiz(
    db: AsyncSession,
    *,
    user_id: int,
    roadmap_id: int,
    document: RoadmapDocument,
    phase: str,
    skill_name: str,
) -> SkillProgress:
    """Explicit completion, allowed only for open skills that have no quiz.

    Raises:
        QuizRequired: the skill has a quiz; passing it is the only way through.
    """
    entry = await ensure_unlocked(
        db,
        user_id=user_id,
        roadmap_id=roadmap_id,
        document=document,
        phase=phase,
        skill_name=skill_name,
    )
    if entry.skill.has_quiz:
        raise QuizRequired()
    return await mark_complete(
        db,
        user_id=user_id,
        roadmap_id=roadmap_id,
        document=document,
        phase=phase,
        skill_name=skill_name,
    )

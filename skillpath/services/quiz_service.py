"""Quiz evaluation for skill completion."""

from collections.abc import Mapping, Sequence

from sqlalchemy.ext.asyncio import AsyncSession

from skillpath.core.errors import IncompleteSubmission, QuizUnavailable
from skillpath.core.logging import get_logger
from skillpath.schemas.progress import QuizResult
from skillpath.schemas.roadmap import QuizQuestion, RoadmapDocument
from skillpath.services import progress_service

logger = get_logger(__name__)


def pass_threshold(question_count: int) -> int:
    """Correct answers needed to pass: two thirds, rounded up."""
    return -(-question_count * 2 // 3)


def score_submission(quiz: Sequence[QuizQuestion], answers: Mapping[int, int]) -> QuizResult:
    """Score answers against a quiz without touching any state.

    Raises:
        IncompleteSubmission: if any question has no answer.
    """
    if any(index not in answers for index in range(len(quiz))):
        raise IncompleteSubmission()

    score = sum(
        1
        for index, question in enumerate(quiz)
        if question.correct_answer is not None and answers[index] == question.correct_answer
    )
    threshold = pass_threshold(len(quiz))
    return QuizResult(passed=score >= threshold, score=score, total=len(quiz), threshold=threshold)


async def submit_quiz(
    db: AsyncSession,
    *,
    user_id: int,
    roadmap_id: int,
    document: RoadmapDocument,
    phase: str,
    skill_name: str,
    answers: Mapping[int, int],
) -> QuizResult:
    """Evaluate a quiz attempt and complete the skill when it passes.

    Attempts are unlimited and independent; a failed attempt changes
    nothing.

    Raises:
        SkillNotFound: unknown phase/skill.
        SkillLocked: the skill is not open yet.
        QuizUnavailable: the skill has no quiz.
        IncompleteSubmission: not every question was answered.
    """
    entry = progress_service.locate(document, phase, skill_name)
    if not entry.skill.has_quiz:
        raise QuizUnavailable()

    await progress_service.ensure_unlocked(
        db,
        user_id=user_id,
        roadmap_id=roadmap_id,
        document=document,
        phase=phase,
        skill_name=skill_name,
    )

    result = score_submission(entry.skill.quiz, answers)
    if result.passed:
        await progress_service.mark_complete(
            db,
            user_id=user_id,
            roadmap_id=roadmap_id,
            document=document,
            phase=phase,
            skill_name=skill_name,
        )

    logger.info(
        "Quiz evaluated",
        roadmap_id=roadmap_id,
        phase=phase,
        skill=skill_name,
        score=result.score,
        total=result.total,
        passed=result.passed,
    )
    return result

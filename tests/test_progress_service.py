"""Tests for progress backfill and the unlock chain."""

import pytest
import pytest_asyncio
from sqlalchemy.ext.asyncio import AsyncSession

from skillpath.core.errors import PersistenceFailure, QuizRequired, SkillLocked, SkillNotFound
from skillpath.models import SkillRoadmap
from skillpath.schemas.roadmap import RoadmapDocument, load_document
from skillpath.services import activity_service, progress_service, roadmap_service


@pytest_asyncio.fixture
async def roadmap(test_session: AsyncSession, roadmap_data) -> SkillRoadmap:
    return await roadmap_service.create_roadmap(
        test_session, user_id=1, target_skill="Python", roadmap_data=roadmap_data
    )


@pytest.fixture
def document(roadmap_data) -> RoadmapDocument:
    return load_document(roadmap_data)


class TestPureState:
    def test_required_keys_in_chain_order(self, document):
        assert progress_service.required_skill_keys(document) == [
            ("A", "s1"),
            ("A", "s2"),
            ("B", "s3"),
        ]

    def test_duplicate_keys_collapse(self):
        document = load_document(
            {"phases": [{"name": "A", "skills": [{"name": "s"}, {"name": "s"}]}]}
        )
        assert progress_service.required_skill_keys(document) == [("A", "s")]

    def test_missing_keys(self, document):
        assert progress_service.missing_skill_keys(document, [("A", "s2")]) == [
            ("A", "s1"),
            ("B", "s3"),
        ]

    def test_locks_nothing_completed(self, document):
        assert progress_service.compute_locks(document, set()) == [False, True, True]

    def test_locks_cross_phase_boundary(self, document):
        assert progress_service.compute_locks(document, {("A", "s1")}) == [False, False, True]
        assert progress_service.compute_locks(document, {("A", "s1"), ("A", "s2")}) == [
            False,
            False,
            False,
        ]

    def test_lock_depends_only_on_predecessor(self, document):
        # s2 done but s1 not: s3 opens, s2's own lock stays
        assert progress_service.compute_locks(document, {("A", "s2")}) == [False, True, False]

    def test_empty_document(self):
        assert progress_service.compute_locks(RoadmapDocument(), set()) == []

    def test_completion_percent_rounds_half_up(self):
        class Row:
            def __init__(self, completed):
                self.completed = completed

        assert progress_service.completion_percent([]) == 0
        assert progress_service.completion_percent([Row(True), Row(False), Row(False)]) == 33
        assert progress_service.completion_percent([Row(True), Row(True), Row(False)]) == 67
        assert progress_service.completion_percent([Row(True)] + [Row(False)] * 7) == 13
        assert progress_service.completion_percent([Row(True), Row(False)]) == 50


class TestBackfill:
    @pytest.mark.asyncio
    async def test_creates_one_row_per_skill(self, test_session, roadmap, document):
        rows = await progress_service.backfill(
            test_session, user_id=1, roadmap_id=roadmap.id, document=document
        )
        assert [(r.phase, r.skill_name) for r in rows] == [("A", "s1"), ("A", "s2"), ("B", "s3")]
        assert not any(r.completed for r in rows)

    @pytest.mark.asyncio
    async def test_idempotent(self, test_session, roadmap, document):
        for _ in range(3):
            rows = await progress_service.backfill(
                test_session, user_id=1, roadmap_id=roadmap.id, document=document
            )
        assert len(rows) == 3

    @pytest.mark.asyncio
    async def test_rows_inserted_by_a_concurrent_request(
        self, test_session, roadmap, document, monkeypatch
    ):
        # Another request backfilled and completed s1 after this one read the rows
        await progress_service.mark_complete(
            test_session,
            user_id=1,
            roadmap_id=roadmap.id,
            document=document,
            phase="A",
            skill_name="s1",
        )
        real_get_rows = progress_service.get_progress_rows
        reads = []

        async def stale_first_read(db, user_id, roadmap_id):
            reads.append(roadmap_id)
            if len(reads) == 1:
                return []
            return await real_get_rows(db, user_id, roadmap_id)

        monkeypatch.setattr(progress_service, "get_progress_rows", stale_first_read)

        rows = await progress_service.backfill(
            test_session, user_id=1, roadmap_id=roadmap.id, document=document
        )
        assert len(reads) == 2
        assert [(r.phase, r.skill_name) for r in rows] == [("A", "s1"), ("A", "s2"), ("B", "s3")]
        assert [r.completed for r in rows] == [True, False, False]

    @pytest.mark.asyncio
    async def test_rows_are_per_roadmap(self, test_session, roadmap, roadmap_data, document):
        other = await roadmap_service.create_roadmap(
            test_session, user_id=1, target_skill="Python", roadmap_data=roadmap_data
        )
        await progress_service.backfill(
            test_session, user_id=1, roadmap_id=roadmap.id, document=document
        )
        rows = await progress_service.get_progress_rows(test_session, 1, other.id)
        assert rows == []


class TestRoadmapState:
    @pytest.mark.asyncio
    async def test_fresh_roadmap(self, test_session, roadmap, document):
        state = await progress_service.get_roadmap_state(test_session, 1, roadmap, document)

        assert state.synced
        assert state.overall_percent == 0
        assert state.total_count == 3
        assert [s.locked for p in state.phases for s in p.skills] == [False, True, True]
        assert state.next_skill.skill_name == "s1"
        s2 = state.phases[0].skills[1]
        assert s2.locked_reason == 'Complete "s1" first to unlock this skill.'
        assert state.phases[0].skills[0].resources[0].label == "python.org"

    @pytest.mark.asyncio
    async def test_after_completion(self, test_session, roadmap, document):
        await progress_service.mark_complete(
            test_session,
            user_id=1,
            roadmap_id=roadmap.id,
            document=document,
            phase="A",
            skill_name="s1",
        )
        state = await progress_service.get_roadmap_state(test_session, 1, roadmap, document)

        assert state.overall_percent == 33
        assert state.completed_count == 1
        assert state.phases[0].completion_percent == 50
        assert state.phases[1].completion_percent == 0
        assert [s.locked for p in state.phases for s in p.skills] == [False, False, True]
        assert state.next_skill.skill_name == "s2"

    @pytest.mark.asyncio
    async def test_backfill_failure_still_renders(
        self, test_session, roadmap, document, monkeypatch
    ):
        async def failing_backfill(*args, **kwargs):
            raise PersistenceFailure()

        monkeypatch.setattr(progress_service, "backfill", failing_backfill)
        state = await progress_service.get_roadmap_state(test_session, 1, roadmap, document)

        assert not state.synced
        assert state.total_count == 0
        assert state.overall_percent == 0
        assert [s.locked for p in state.phases for s in p.skills] == [False, True, True]


class TestCompletion:
    @pytest.mark.asyncio
    async def test_mark_complete_is_idempotent(self, test_session, roadmap, document):
        kwargs = dict(user_id=1, roadmap_id=roadmap.id, document=document, phase="A", skill_name="s1")
        first = await progress_service.mark_complete(test_session, **kwargs)
        completed_at = first.completed_at
        second = await progress_service.mark_complete(test_session, **kwargs)

        assert second.completed
        assert second.completed_at == completed_at

        records = await activity_service.list_activity(test_session, 1, activity_service.today(), 1)
        assert records[0].skills_completed == 1

    @pytest.mark.asyncio
    async def test_unknown_skill(self, test_session, roadmap, document):
        with pytest.raises(SkillNotFound):
            await progress_service.ensure_unlocked(
                test_session,
                user_id=1,
                roadmap_id=roadmap.id,
                document=document,
                phase="A",
                skill_name="nope",
            )

    @pytest.mark.asyncio
    async def test_quizless_skill_completes_when_open(self, test_session, roadmap, document):
        kwargs = dict(user_id=1, roadmap_id=roadmap.id, document=document)
        with pytest.raises(SkillLocked):
            await progress_service.complete_without_quiz(
                test_session, **kwargs, phase="A", skill_name="s2"
            )

        await progress_service.mark_complete(test_session, **kwargs, phase="A", skill_name="s1")
        row = await progress_service.complete_without_quiz(
            test_session, **kwargs, phase="A", skill_name="s2"
        )
        assert row.completed

    @pytest.mark.asyncio
    async def test_quiz_skill_needs_quiz(self, test_session, roadmap, document):
        with pytest.raises(QuizRequired):
            await progress_service.complete_without_quiz(
                test_session,
                user_id=1,
                roadmap_id=roadmap.id,
                document=document,
                phase="A",
                skill_name="s1",
            )

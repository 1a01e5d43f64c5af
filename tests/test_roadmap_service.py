"""Tests for roadmap persistence and generation."""

import asyncio

import pytest

from skillpath.core.errors import GenerationInProgress, RateLimited, RoadmapNotFound
from skillpath.models import Profile
from skillpath.schemas import GenerationRequest
from skillpath.schemas.roadmap import CURRENT_SCHEMA_VERSION
from skillpath.services import roadmap_service


def _request() -> GenerationRequest:
    return GenerationRequest(target_skill="Python", weekly_hours=5)


class StaticGenerator:
    def __init__(self, document):
        self.document = document
        self.requests = []

    async def generate(self, request):
        self.requests.append(request)
        return self.document


class BlockingGenerator:
    """Holds the first generation open until released."""

    def __init__(self):
        self.started = asyncio.Event()
        self.release = asyncio.Event()

    async def generate(self, request):
        self.started.set()
        await self.release.wait()
        return {"phases": []}


class FailingGenerator:
    async def generate(self, request):
        raise RateLimited()


@pytest.mark.asyncio
async def test_create_and_read_back(test_session, roadmap_data) -> None:
    roadmap = await roadmap_service.create_roadmap(
        test_session, user_id=1, target_skill="Python", roadmap_data=roadmap_data
    )
    assert roadmap.schema_version == CURRENT_SCHEMA_VERSION

    fetched = await roadmap_service.get_roadmap(test_session, 1, roadmap.id)
    assert fetched.roadmap_data == roadmap_data
    document = roadmap_service.document_of(fetched)
    assert [p.name for p in document.phases] == ["A", "B"]


@pytest.mark.asyncio
async def test_other_users_roadmap_not_found(test_session, roadmap_data) -> None:
    roadmap = await roadmap_service.create_roadmap(
        test_session, user_id=1, target_skill="Python", roadmap_data=roadmap_data
    )
    with pytest.raises(RoadmapNotFound):
        await roadmap_service.get_roadmap(test_session, 2, roadmap.id)
    with pytest.raises(RoadmapNotFound):
        await roadmap_service.get_roadmap(test_session, 1, roadmap.id + 100)


@pytest.mark.asyncio
async def test_append_only_and_active(test_session, roadmap_data) -> None:
    first = await roadmap_service.create_roadmap(
        test_session, user_id=1, target_skill="Python", roadmap_data=roadmap_data
    )
    second = await roadmap_service.create_roadmap(
        test_session, user_id=1, target_skill="Go", roadmap_data={"phases": []}
    )

    roadmaps = await roadmap_service.list_user_roadmaps(test_session, 1)
    assert [r.id for r in roadmaps] == [second.id, first.id]

    active = await roadmap_service.get_active_roadmap(test_session, 1)
    assert active.id == second.id

    profile = await test_session.get(Profile, 1)
    assert profile.active_roadmap_id == second.id


@pytest.mark.asyncio
async def test_active_falls_back_to_latest(test_session, roadmap_data) -> None:
    roadmap = await roadmap_service.create_roadmap(
        test_session, user_id=1, target_skill="Python", roadmap_data=roadmap_data
    )
    profile = await test_session.get(Profile, 1)
    profile.active_roadmap_id = None
    await test_session.commit()

    active = await roadmap_service.get_active_roadmap(test_session, 1)
    assert active.id == roadmap.id


@pytest.mark.asyncio
async def test_no_active_roadmap(test_session) -> None:
    assert await roadmap_service.get_active_roadmap(test_session, 1) is None


@pytest.mark.asyncio
async def test_generate_stores_result(test_session, roadmap_data) -> None:
    generator = StaticGenerator(roadmap_data)
    roadmap = await roadmap_service.generate_roadmap(
        test_session, user_id=1, request=_request(), generator=generator
    )
    assert roadmap.target_skill == "Python"
    assert roadmap.roadmap_data == roadmap_data
    assert len(generator.requests) == 1


@pytest.mark.asyncio
async def test_failed_generation_stores_nothing(test_session) -> None:
    with pytest.raises(RateLimited):
        await roadmap_service.generate_roadmap(
            test_session, user_id=1, request=_request(), generator=FailingGenerator()
        )
    assert await roadmap_service.list_user_roadmaps(test_session, 1) == []


@pytest.mark.asyncio
async def test_one_generation_per_user(test_session) -> None:
    generator = BlockingGenerator()
    first = asyncio.create_task(
        roadmap_service.generate_roadmap(
            test_session, user_id=1, request=_request(), generator=generator
        )
    )
    await generator.started.wait()

    with pytest.raises(GenerationInProgress):
        await roadmap_service.generate_roadmap(
            test_session, user_id=1, request=_request(), generator=generator
        )

    generator.release.set()
    roadmap = await first
    assert roadmap.id is not None

    # Released once finished
    again = await roadmap_service.generate_roadmap(
        test_session, user_id=1, request=_request(), generator=StaticGenerator({"phases": []})
    )
    assert again.id != roadmap.id

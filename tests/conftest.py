"""Shared fixtures: in-memory database and sample roadmaps."""

from collections.abc import AsyncGenerator
from typing import Any

import pytest
import pytest_asyncio
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine
from sqlalchemy.pool import StaticPool

import skillpath.models  # noqa: F401
from skillpath.core.database import Base


def quiz(correct: list[int]) -> list[dict[str, Any]]:
    return [
        {
            "question": f"Question {i + 1}",
            "options": ["A", "B", "C", "D"],
            "correctAnswer": answer,
        }
        for i, answer in enumerate(correct)
    ]


@pytest.fixture
def roadmap_data() -> dict[str, Any]:
    """Two phases: A = [s1 (quiz), s2], B = [s3 (quiz)]."""
    return {
        "phases": [
            {
                "name": "A",
                "duration_days": 7,
                "description": "Foundations",
                "skills": [
                    {
                        "name": "s1",
                        "description": "First skill",
                        "days": "Day 1-3",
                        "resources": ["https://www.python.org/doc/", "YouTube: Python basics"],
                        "quiz": quiz([0, 1, 2]),
                    },
                    {"name": "s2", "description": "Second skill", "days": "Day 4-7"},
                ],
            },
            {
                "name": "B",
                "duration_days": 7,
                "skills": [
                    {"name": "s3", "days": "Day 8-14", "quiz": quiz([3, 3, 3, 3])},
                ],
            },
        ]
    }


@pytest_asyncio.fixture
async def session_factory() -> AsyncGenerator[async_sessionmaker[AsyncSession], None]:
    engine = create_async_engine(
        "sqlite+aiosqlite:///:memory:",
        poolclass=StaticPool,
    )
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)

    yield async_sessionmaker(engine, class_=AsyncSession, expire_on_commit=False, autoflush=False)

    await engine.dispose()


@pytest_asyncio.fixture
async def test_session(
    session_factory: async_sessionmaker[AsyncSession],
) -> AsyncGenerator[AsyncSession, None]:
    async with session_factory() as session:
        yield session

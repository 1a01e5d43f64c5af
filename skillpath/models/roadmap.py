"""Generated roadmap documents."""

from datetime import datetime

from sqlalchemy import JSON, DateTime, ForeignKey, Integer, String
from sqlalchemy.orm import Mapped, mapped_column

from skillpath.core.database import Base, utcnow


class SkillRoadmap(Base):
    """One generated curriculum. Rows are append-only and never edited."""

    __tablename__ = "skill_roadmaps"

    id: Mapped[int] = mapped_column(primary_key=True)
    user_id: Mapped[int] = mapped_column(ForeignKey("profiles.id"), index=True)

    target_skill: Mapped[str] = mapped_column(String)
    roadmap_data: Mapped[dict] = mapped_column(JSON)
    schema_version: Mapped[int] = mapped_column(Integer, default=1)

    created_at: Mapped[datetime] = mapped_column(DateTime, default=utcnow, index=True)

"""Per-skill progress, notes and daily learning activity."""

import datetime as dt

from sqlalchemy import (
    Boolean,
    Date,
    DateTime,
    ForeignKey,
    Integer,
    String,
    Text,
    UniqueConstraint,
)
from sqlalchemy.orm import Mapped, mapped_column

from skillpath.core.database import Base, utcnow


class SkillProgress(Base):
    """Completion state of one skill of one roadmap."""

    __tablename__ = "skill_progress"
    __table_args__ = (
        UniqueConstraint(
            "user_id", "roadmap_id", "phase", "skill_name", name="unique_skill_progress"
        ),
    )

    id: Mapped[int] = mapped_column(primary_key=True)
    user_id: Mapped[int] = mapped_column(ForeignKey("profiles.id"))
    roadmap_id: Mapped[int] = mapped_column(ForeignKey("skill_roadmaps.id"), index=True)
    phase: Mapped[str] = mapped_column(String)
    skill_name: Mapped[str] = mapped_column(String)

    completed: Mapped[bool] = mapped_column(Boolean, default=False)
    completed_at: Mapped[dt.datetime | None] = mapped_column(DateTime, default=None)

    created_at: Mapped[dt.datetime] = mapped_column(DateTime, default=utcnow)


class SkillNote(Base):
    """Free-text note a learner keeps on a skill."""

    __tablename__ = "skill_notes"
    __table_args__ = (
        UniqueConstraint("user_id", "roadmap_id", "skill_name", "phase", name="unique_skill_note"),
    )

    id: Mapped[int] = mapped_column(primary_key=True)
    user_id: Mapped[int] = mapped_column(ForeignKey("profiles.id"))
    roadmap_id: Mapped[int] = mapped_column(ForeignKey("skill_roadmaps.id"))
    skill_name: Mapped[str] = mapped_column(String)
    phase: Mapped[str] = mapped_column(String)
    content: Mapped[str] = mapped_column(Text, default="")

    created_at: Mapped[dt.datetime] = mapped_column(DateTime, default=utcnow)
    updated_at: Mapped[dt.datetime] = mapped_column(DateTime, default=utcnow, onupdate=utcnow)


class LearningActivity(Base):
    """Daily learning counters (one row per user and calendar day)."""

    __tablename__ = "learning_activity"
    __table_args__ = (UniqueConstraint("user_id", "date", name="unique_daily_activity"),)

    id: Mapped[int] = mapped_column(primary_key=True)
    user_id: Mapped[int] = mapped_column(ForeignKey("profiles.id"))
    date: Mapped[dt.date] = mapped_column(Date)

    minutes_spent: Mapped[int] = mapped_column(Integer, default=0)
    skills_completed: Mapped[int] = mapped_column(Integer, default=0)

"""Learner profile model."""

from datetime import datetime

from sqlalchemy import JSON, Boolean, DateTime, Float, Integer, String
from sqlalchemy.orm import Mapped, mapped_column

from skillpath.core.database import Base, utcnow


class Profile(Base):
    """Learning context of one user (id == user id)."""

    __tablename__ = "profiles"

    id: Mapped[int] = mapped_column(primary_key=True)
    display_name: Mapped[str | None] = mapped_column(String, default=None)

    # Onboarding answers
    education_level: Mapped[str | None] = mapped_column(String, default=None)
    existing_skills: Mapped[list[str]] = mapped_column(JSON, default=list)
    target_skill: Mapped[str | None] = mapped_column(String, default=None)
    weekly_hours: Mapped[float | None] = mapped_column(Float, default=None)
    daily_hours: Mapped[float | None] = mapped_column(Float, default=None)
    onboarding_completed: Mapped[bool] = mapped_column(Boolean, default=False)

    # Preliminary assessment (legacy profiles keep these as General_Q* tags)
    assessment_answers: Mapped[list[str]] = mapped_column(JSON, default=list)

    # Explicit pointer to the roadmap being followed
    active_roadmap_id: Mapped[int | None] = mapped_column(Integer, default=None)

    created_at: Mapped[datetime] = mapped_column(DateTime, default=utcnow)
    updated_at: Mapped[datetime] = mapped_column(DateTime, default=utcnow, onupdate=utcnow)

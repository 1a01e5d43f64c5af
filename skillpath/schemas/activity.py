"""Learning activity and dashboard schemas."""

import datetime as dt

from pydantic import BaseModel, ConfigDict, Field


class ActivityLog(BaseModel):
    minutes: int = Field(ge=0)
    skills_completed: int = Field(default=0, ge=0)
    date: dt.date | None = None


class ActivityResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    date: dt.date
    minutes_spent: int
    skills_completed: int


class ChartDay(BaseModel):
    date: dt.date
    day: str
    minutes: int
    skills: int


class DashboardStats(BaseModel):
    """Aggregates shown on the progress dashboard."""

    streak: int
    total_minutes: int
    weekly_minutes: int
    weekly_goal_percent: int
    completion_percent: int
    completed_skills: int
    total_skills: int
    chart: list[ChartDay]

"""Database models."""

from skillpath.models.profile import Profile
from skillpath.models.progress import LearningActivity, SkillNote, SkillProgress
from skillpath.models.roadmap import SkillRoadmap

__all__ = [
    "Profile",
    "SkillRoadmap",
    "SkillProgress",
    "SkillNote",
    "LearningActivity",
]

"""Roadmap document schema and roadmap API models."""

import re
from datetime import datetime
from typing import Any
from urllib.parse import quote_plus, urlparse

from pydantic import BaseModel, ConfigDict, Field, field_validator

# Version 1: legacy phase documents (estimatedTime, no quiz).
# Version 2: Day ranges, resources and a 3-question quiz per skill.
LEGACY_SCHEMA_VERSION = 1
CURRENT_SCHEMA_VERSION = 2

_YOUTUBE_PREFIX = re.compile(r"^YouTube:\s*", re.IGNORECASE)


# ============================================================================
# Roadmap document
# ============================================================================
#
# Stored documents are coerced, never rejected: a malformed part is dropped or
# defaulted and the rest of the roadmap stays readable.


def _text(value: Any, default: str = "") -> str:
    if isinstance(value, str):
        return value
    if isinstance(value, int | float):
        return str(value)
    return default


def _dicts(value: Any) -> list[dict]:
    """Keep the object entries of a list; anything else is an empty list."""
    if not isinstance(value, list):
        return []
    return [item for item in value if isinstance(item, dict)]


def _resource_text(resource: Any) -> str | None:
    if isinstance(resource, dict):
        for key in ("url", "link", "href", "title", "name"):
            text = _text(resource.get(key)).strip()
            if text:
                return text
        return None
    text = _text(resource).strip()
    return text or None


class QuizQuestion(BaseModel):
    """A multiple-choice question gating a skill."""

    model_config = ConfigDict(extra="allow", populate_by_name=True)

    question: str = ""
    options: list[str] = Field(default_factory=list)
    correct_answer: int | None = Field(default=None, alias="correctAnswer")

    @field_validator("question", mode="before")
    @classmethod
    def _coerce_question(cls, value: Any) -> str:
        return _text(value)

    @field_validator("options", mode="before")
    @classmethod
    def _coerce_options(cls, value: Any) -> list[str]:
        if not isinstance(value, list):
            return []
        return [_text(option) for option in value]

    @field_validator("correct_answer", mode="before")
    @classmethod
    def _coerce_answer(cls, value: Any) -> int | None:
        if isinstance(value, bool):
            return None
        if isinstance(value, int):
            return value
        if isinstance(value, float) and value.is_integer():
            return int(value)
        if isinstance(value, str) and value.strip().isdigit():
            return int(value)
        return None


class Skill(BaseModel):
    """A leaf learning unit. Every field but the name is optional."""

    model_config = ConfigDict(extra="allow", populate_by_name=True)

    name: str = ""
    description: str = ""
    days: str | int | None = None
    estimated_time: str | None = Field(default=None, alias="estimatedTime")
    resources: list[str] = Field(default_factory=list)
    quiz: list[QuizQuestion] = Field(default_factory=list)
    weak_points: list[Any] = Field(default_factory=list, alias="weakPoints")

    @field_validator("name", "description", mode="before")
    @classmethod
    def _coerce_text(cls, value: Any) -> str:
        return _text(value)

    @field_validator("days", mode="before")
    @classmethod
    def _coerce_days(cls, value: Any) -> str | int | None:
        if isinstance(value, int) and not isinstance(value, bool):
            return value
        return _text(value) or None

    @field_validator("estimated_time", mode="before")
    @classmethod
    def _coerce_estimate(cls, value: Any) -> str | None:
        return _text(value) or None

    @field_validator("resources", mode="before")
    @classmethod
    def _coerce_resources(cls, value: Any) -> list[str]:
        if value is None:
            return []
        if not isinstance(value, list):
            value = [value]
        return [text for text in map(_resource_text, value) if text]

    @field_validator("quiz", mode="before")
    @classmethod
    def _answerable_questions(cls, value: Any) -> list[dict]:
        # A question without options can never be answered
        return [q for q in _dicts(value) if isinstance(q.get("options"), list) and q["options"]]

    @field_validator("weak_points", mode="before")
    @classmethod
    def _coerce_weak_points(cls, value: Any) -> list[Any]:
        return value if isinstance(value, list) else []

    @property
    def time_estimate(self) -> str | None:
        value = self.days or self.estimated_time
        return str(value) if value is not None else None

    @property
    def has_quiz(self) -> bool:
        return len(self.quiz) > 0

    def resource_links(self) -> list["ResourceLink"]:
        return [resolve_resource(resource, self.name) for resource in self.resources]


class Phase(BaseModel):
    """Named, ordered group of skills. The name is its identity."""

    model_config = ConfigDict(extra="allow")

    name: str = ""
    duration_days: float | str | None = None
    description: str | None = None
    skills: list[Skill] = Field(default_factory=list)

    @field_validator("name", mode="before")
    @classmethod
    def _coerce_name(cls, value: Any) -> str:
        return _text(value)

    @field_validator("duration_days", mode="before")
    @classmethod
    def _coerce_duration(cls, value: Any) -> float | str | None:
        if isinstance(value, bool) or not isinstance(value, int | float | str):
            return None
        return value

    @field_validator("description", mode="before")
    @classmethod
    def _coerce_description(cls, value: Any) -> str | None:
        return _text(value) or None

    @field_validator("skills", mode="before")
    @classmethod
    def _skill_objects(cls, value: Any) -> list[dict]:
        return _dicts(value)


class RoadmapDocument(BaseModel):
    """The generated curriculum."""

    model_config = ConfigDict(extra="allow")

    phases: list[Phase] = Field(default_factory=list)

    @field_validator("phases", mode="before")
    @classmethod
    def _phase_objects(cls, value: Any) -> list[dict]:
        return _dicts(value)


def normalize_roadmap_data(data: Any, schema_version: int | None = None) -> dict[str, Any]:
    """Bring any stored roadmap payload into the ``{"phases": [...]}`` shape.

    Some legacy rows hold the phases list directly instead of the wrapping
    object. Unknown payloads normalize to an empty roadmap.
    """
    if isinstance(data, list):
        return {"phases": data}
    if not isinstance(data, dict):
        return {"phases": []}
    if schema_version == LEGACY_SCHEMA_VERSION and "phases" not in data:
        nested = data.get("roadmap_data")
        if isinstance(nested, dict | list):
            return normalize_roadmap_data(nested, schema_version)
    return data


def load_document(data: Any, schema_version: int | None = None) -> RoadmapDocument:
    return RoadmapDocument.model_validate(normalize_roadmap_data(data, schema_version))


# ============================================================================
# Resources
# ============================================================================


class ResourceLink(BaseModel):
    """A clickable form of a resource string."""

    raw: str
    label: str
    url: str
    kind: str  # "link" | "video" | "search"


def resolve_resource(resource: str, skill_name: str = "") -> ResourceLink:
    """Turn a resource reference into a URL and display label.

    URLs pass through, ``YouTube: <title>`` labels become a YouTube search
    and anything else becomes a web search scoped by the skill name.
    """
    if resource.startswith("http"):
        host = urlparse(resource).hostname
        label = host.removeprefix("www.") if host else "Documentation"
        return ResourceLink(raw=resource, label=label, url=resource, kind="link")

    if _YOUTUBE_PREFIX.match(resource):
        title = _YOUTUBE_PREFIX.sub("", resource)
        return ResourceLink(
            raw=resource,
            label=title,
            url=f"https://www.youtube.com/results?search_query={quote_plus(title)}",
            kind="video",
        )

    query = f"{resource} {skill_name}".strip()
    return ResourceLink(
        raw=resource,
        label=resource,
        url=f"https://www.google.com/search?q={quote_plus(query)}",
        kind="search",
    )


# ============================================================================
# Generation request / API responses
# ============================================================================


class GenerationContext(BaseModel):
    """Optional free-form learner context."""

    level: str | None = None
    background: str | None = None
    goal: str | None = None
    daily_time: float | str | None = None
    target_duration: int | None = Field(default=None, gt=0)


class GenerationRequest(BaseModel):
    """Inputs of the roadmap generation contract."""

    model_config = ConfigDict(populate_by_name=True)

    target_skill: str = Field(alias="targetSkill", min_length=1)
    education_level: str = Field(default="", alias="educationLevel")
    existing_skills: list[str] = Field(default_factory=list, alias="existingSkills")
    weekly_hours: float = Field(alias="weeklyHours", gt=0)
    context: GenerationContext | None = None

    @field_validator("target_skill")
    @classmethod
    def _strip_target(cls, value: str) -> str:
        value = value.strip()
        if not value:
            raise ValueError("targetSkill must not be blank")
        return value


class RoadmapResponse(BaseModel):
    """A stored roadmap."""

    model_config = ConfigDict(from_attributes=True)

    id: int
    user_id: int
    target_skill: str
    roadmap_data: dict[str, Any]
    schema_version: int
    created_at: datetime

    @field_validator("roadmap_data", mode="before")
    @classmethod
    def _normalize(cls, value: Any) -> dict[str, Any]:
        return normalize_roadmap_data(value)


class GenerateRoadmapResponse(BaseModel):
    success: bool = True
    roadmap: RoadmapResponse


class SharedSkill(BaseModel):
    name: str
    description: str
    time_estimate: str | None
    resources: list[ResourceLink]
    has_quiz: bool


class SharedPhase(BaseModel):
    name: str
    description: str | None
    duration_days: float | str | None
    skills: list[SharedSkill]


class SharedRoadmapResponse(BaseModel):
    """Read-only view of a roadmap for anyone holding its link.

    Carries no progress and no quiz answers.
    """

    id: int
    target_skill: str
    created_at: datetime
    phases: list[SharedPhase]

    @classmethod
    def build(cls, roadmap: Any, document: RoadmapDocument) -> "SharedRoadmapResponse":
        return cls(
            id=roadmap.id,
            target_skill=roadmap.target_skill,
            created_at=roadmap.created_at,
            phases=[
                SharedPhase(
                    name=phase.name,
                    description=phase.description,
                    duration_days=phase.duration_days,
                    skills=[
                        SharedSkill(
                            name=skill.name,
                            description=skill.description,
                            time_estimate=skill.time_estimate,
                            resources=skill.resource_links(),
                            has_quiz=skill.has_quiz,
                        )
                        for skill in phase.skills
                    ],
                )
                for phase in document.phases
            ],
        )

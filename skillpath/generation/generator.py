"""Roadmap generation contract: prompt, call, validate.

The generation service is an OpenAI-compatible chat endpoint. Its HTTP
failures are translated into the domain error taxonomy here so that the API
layer can tell rate limiting and exhausted credits apart from everything
else. Nothing is retried.
"""

from typing import Any

import openai
from langchain_core.messages import BaseMessage, HumanMessage, SystemMessage
from langchain_core.runnables import Runnable

from skillpath.core.errors import (
    GenerationFailed,
    GenerationSchemaError,
    QuotaExhausted,
    RateLimited,
)
from skillpath.core.logging import get_logger
from skillpath.generation.json_extract import extract_json
from skillpath.generation.llm import get_json_llm
from skillpath.generation.prompts import build_messages
from skillpath.schemas.roadmap import GenerationRequest

logger = get_logger(__name__)


def _message_text(message: BaseMessage) -> str:
    content = message.content
    if isinstance(content, str):
        return content
    parts = []
    for part in content:
        if isinstance(part, str):
            parts.append(part)
        elif isinstance(part, dict) and part.get("type") == "text":
            parts.append(part.get("text", ""))
    return "".join(parts)


def _translate_api_error(error: openai.APIError) -> GenerationFailed | RateLimited | QuotaExhausted:
    status_code = getattr(error, "status_code", None)
    if status_code == 429:
        return RateLimited()
    if status_code == 402:
        return QuotaExhausted()
    return GenerationFailed()


def validate_roadmap(parsed: Any) -> dict[str, Any]:
    """Check the only structural guarantee: a ``phases`` array.

    Deeper structure (skill counts, quizzes, day totals) is requested by the
    prompt but deliberately not enforced.

    Raises:
        GenerationSchemaError: if ``phases`` is missing or not a list.
    """
    if not isinstance(parsed, dict) or not isinstance(parsed.get("phases"), list):
        raise GenerationSchemaError()
    return parsed


class RoadmapGenerator:
    """Turns a generation request into a validated roadmap document."""

    def __init__(self, llm: Runnable | None = None) -> None:
        self._llm = llm

    @property
    def llm(self) -> Runnable:
        if self._llm is None:
            self._llm = get_json_llm()
        return self._llm

    async def generate(self, request: GenerationRequest) -> dict[str, Any]:
        """Generate a roadmap document for ``request``.

        Returns:
            The parsed roadmap JSON, exactly as produced by the model.

        Raises:
            RateLimited: the service answered 429.
            QuotaExhausted: the service answered 402.
            GenerationFailed: any other service or transport failure.
            GenerationParseError: the reply is not JSON.
            GenerationSchemaError: the JSON has no ``phases`` array.
        """
        system_prompt, user_prompt = build_messages(request)

        logger.info(
            "Generating roadmap",
            target_skill=request.target_skill,
            weekly_hours=request.weekly_hours,
            existing_skills=len(request.existing_skills),
        )

        try:
            reply = await self.llm.ainvoke(
                [SystemMessage(content=system_prompt), HumanMessage(content=user_prompt)]
            )
        except openai.APIError as e:
            error = _translate_api_error(e)
            logger.warning(
                "Generation service error",
                status_code=getattr(e, "status_code", None),
                error_type=type(error).__name__,
                error=str(e),
            )
            raise error from e

        document = validate_roadmap(extract_json(_message_text(reply)))

        logger.info(
            "Roadmap generated",
            target_skill=request.target_skill,
            phases=len(document["phases"]),
        )
        return document

"""Chat model used for roadmap generation."""

from functools import lru_cache

from langchain_core.language_models import BaseChatModel
from langchain_core.runnables import Runnable
from langchain_openai import ChatOpenAI

from skillpath.core.config import get_settings
from skillpath.core.logging import get_logger

logger = get_logger(__name__)


@lru_cache
def get_llm() -> BaseChatModel:
    """Get the configured chat model.

    Retries are disabled: a failed generation is reported to the caller,
    which decides whether to ask again.
    """
    settings = get_settings()

    kwargs: dict = {
        "model": settings.OPENAI_MODEL,
        "temperature": settings.OPENAI_TEMPERATURE,
        "timeout": settings.GENERATION_TIMEOUT,
        "max_retries": 0,
    }

    if settings.OPENAI_API_KEY:
        kwargs["api_key"] = settings.OPENAI_API_KEY
    if settings.OPENAI_API_BASE_URL:
        kwargs["base_url"] = settings.OPENAI_API_BASE_URL

    logger.info("Initializing LLM", model=settings.OPENAI_MODEL)
    return ChatOpenAI(**kwargs)


def get_json_llm() -> Runnable:
    """Chat model constrained to answer with a single JSON object."""
    return get_llm().bind(response_format={"type": "json_object"})

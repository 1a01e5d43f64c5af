"""Structured logging setup."""

import logging
import sys

import structlog

# Chatty at INFO: one line per HTTP call made to the generation service
NOISY_LOGGERS = ("httpx", "httpcore", "openai")


def configure_logging(debug: bool = False) -> None:
    """Route structlog through stdlib logging.

    Debug mode renders colored console lines, otherwise one JSON object per
    event is written to stdout. Values bound with
    ``structlog.contextvars.bind_contextvars`` (the request path, for
    instance) are added to every event of the current request.
    """
    level = logging.DEBUG if debug else logging.INFO
    logging.basicConfig(format="%(message)s", stream=sys.stdout, level=level)
    for name in NOISY_LOGGERS:
        logging.getLogger(name).setLevel(level if debug else logging.WARNING)

    renderer = structlog.dev.ConsoleRenderer() if debug else structlog.processors.JSONRenderer()

    structlog.configure(
        processors=[
            structlog.contextvars.merge_contextvars,
            structlog.stdlib.filter_by_level,
            structlog.stdlib.add_logger_name,
            structlog.stdlib.add_log_level,
            structlog.processors.TimeStamper(fmt="iso"),
            structlog.processors.StackInfoRenderer(),
            structlog.processors.format_exc_info,
            renderer,
        ],
        context_class=dict,
        logger_factory=structlog.stdlib.LoggerFactory(),
        wrapper_class=structlog.stdlib.BoundLogger,
        cache_logger_on_first_use=True,
    )


def get_logger(name: str) -> structlog.stdlib.BoundLogger:
    return structlog.get_logger(name)  # type: ignore[no-any-return]

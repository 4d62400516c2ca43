"""Structured logging configuration using structlog.

JSON lines in production, colored console output elsewhere. Stdlib loggers
(uvicorn, httpx) are routed through the same renderer. Per-field redaction
failures are reported through this setup under the event
"Error retrieving the redacted value".
"""

import logging
import sys
from typing import Optional

import structlog
from structlog.types import EventDict, Processor, WrappedLogger

APP_NAME = "presidio-redaction-processor"

# Two requests per redacted field; their request lines drown everything at INFO
QUIET_LOGGERS = ("httpx", "httpcore", "asyncio")


class AppContext:
    """Processor stamping app name, version and environment on every event."""

    def __init__(self, environment: str, version: Optional[str] = None):
        self.context = {"app": APP_NAME, "environment": environment}
        if version:
            self.context["version"] = version

    def __call__(self, logger: WrappedLogger, method_name: str, event_dict: EventDict) -> EventDict:
        for key, value in self.context.items():
            event_dict.setdefault(key, value)
        return event_dict


def _renderer(is_production: bool) -> Processor:
    if is_production:
        return structlog.processors.JSONRenderer()
    return structlog.dev.ConsoleRenderer(colors=sys.stdout.isatty())


def configure_logging(
    log_level: str = "INFO",
    environment: str = "development",
    version: Optional[str] = None,
) -> None:
    """Configure structlog and the stdlib root logger.

    Args:
        log_level: Logging level name (DEBUG, INFO, WARNING, ERROR, CRITICAL)
        environment: Deployment environment; "production" selects JSON output
        version: Service version added to every event when given
    """
    level = getattr(logging, log_level.upper(), logging.INFO)
    is_production = environment.lower() == "production"

    shared_processors: list[Processor] = [
        structlog.contextvars.merge_contextvars,
        structlog.stdlib.add_log_level,
        structlog.stdlib.add_logger_name,
        structlog.processors.TimeStamper(fmt="iso", utc=True),
        structlog.processors.StackInfoRenderer(),
        AppContext(environment, version),
    ]
    if is_production:
        shared_processors.append(structlog.processors.format_exc_info)

    structlog.configure(
        processors=[*shared_processors, structlog.stdlib.ProcessorFormatter.wrap_for_formatter],
        logger_factory=structlog.stdlib.LoggerFactory(),
        wrapper_class=structlog.stdlib.BoundLogger,
        cache_logger_on_first_use=True,
    )

    handler = logging.StreamHandler(sys.stdout)
    handler.setFormatter(structlog.stdlib.ProcessorFormatter(
        processor=_renderer(is_production),
        foreign_pre_chain=shared_processors,
    ))
    handler.setLevel(level)

    root_logger = logging.getLogger()
    root_logger.handlers.clear()
    root_logger.addHandler(handler)
    root_logger.setLevel(level)

    for name in QUIET_LOGGERS:
        logging.getLogger(name).setLevel(logging.WARNING)

    structlog.get_logger(__name__).info(
        "Logging configured",
        log_level=log_level,
        renderer="json" if is_production else "console",
    )

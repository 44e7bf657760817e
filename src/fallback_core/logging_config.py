"""Structured logging configuration using structlog.

Provides JSON output for production (parseable by ELK, Loki, CloudWatch)
and console output for development. fallback-core never calls this
itself; host applications call it once at startup:

    from fallback_core.config import settings
    from fallback_core.logging_config import configure_logging

    configure_logging(settings)

FallbackEngine binds `operation` and `strategy` for the duration of a call
and `provider` for each attempt loop through structlog contextvars, so
every event emitted while a provider runs (including the provider's own
structlog events and hook failures) carries that context.
"""

import logging
import sys
from typing import TYPE_CHECKING, Optional

import structlog
from structlog.types import EventDict, Processor, WrappedLogger

if TYPE_CHECKING:
    from fallback_core.config import Settings


def app_context(app_name: str, app_version: str) -> Processor:
    """Build a processor that stamps every event with the application name and version."""

    def add_app_context(
        logger: WrappedLogger, method_name: str, event_dict: EventDict
    ) -> EventDict:
        event_dict.setdefault("app", app_name)
        event_dict.setdefault("app_version", app_version)
        return event_dict

    return add_app_context


def configure_logging(settings: Optional["Settings"] = None) -> None:
    """Configure structlog for structured logging.

    Args:
        settings: Source of LOG_LEVEL, ENVIRONMENT, APP_NAME and APP_VERSION
            (defaults to the module-level settings instance)

    In production mode:
        - JSON output for machine parsing
        - ISO timestamps
        - Exception info included

    In development mode:
        - Console output, coloured when stdout is a terminal
    """
    if settings is None:
        from fallback_core.config import settings as default_settings

        settings = default_settings

    log_level_int = getattr(logging, settings.LOG_LEVEL.upper(), logging.INFO)
    is_production = settings.ENVIRONMENT.lower() == "production"

    shared_processors: list[Processor] = [
        structlog.contextvars.merge_contextvars,
        structlog.stdlib.add_log_level,
        structlog.stdlib.add_logger_name,
        structlog.processors.TimeStamper(fmt="iso"),
        app_context(settings.APP_NAME, settings.APP_VERSION),
    ]

    if is_production:
        shared_processors.append(structlog.processors.format_exc_info)
        renderer: Processor = structlog.processors.JSONRenderer()
    else:
        renderer = structlog.dev.ConsoleRenderer(colors=sys.stdout.isatty())

    structlog.configure(
        processors=shared_processors + [structlog.stdlib.ProcessorFormatter.wrap_for_formatter],
        logger_factory=structlog.stdlib.LoggerFactory(),
        wrapper_class=structlog.stdlib.BoundLogger,
        cache_logger_on_first_use=True,
    )

    formatter = structlog.stdlib.ProcessorFormatter(
        processor=renderer,
        foreign_pre_chain=shared_processors,
    )

    handler = logging.StreamHandler(sys.stdout)
    handler.setFormatter(formatter)
    handler.setLevel(log_level_int)

    root_logger = logging.getLogger()
    root_logger.handlers.clear()
    root_logger.addHandler(handler)
    root_logger.setLevel(log_level_int)

    # Per-attempt debug lines come from fallback_core; keep asyncio's own quiet
    logging.getLogger("asyncio").setLevel(logging.WARNING)

    structlog.get_logger(__name__).info(
        "Logging configured",
        log_level=settings.LOG_LEVEL,
        environment=settings.ENVIRONMENT,
        renderer="json" if is_production else "console",
    )

"""structlog setup.

Called once from create_app(). Request-scoped keys (request_id, method,
path) are merged in from contextvars by RequestIdMiddleware.
"""

import logging

import structlog

from productiveflow.config import settings


def configure_logging(level: str | None = None) -> None:
    level_name = (level or settings.log_level).upper()
    numeric = getattr(logging, level_name, logging.INFO)

    processors = [
        structlog.contextvars.merge_contextvars,
        structlog.processors.add_log_level,
        structlog.processors.TimeStamper(fmt="iso", utc=True),
    ]
    if settings.is_production:
        processors.append(structlog.processors.JSONRenderer())
    else:
        processors.append(structlog.dev.ConsoleRenderer())

    structlog.configure(
        processors=processors,
        wrapper_class=structlog.make_filtering_bound_logger(numeric),
        cache_logger_on_first_use=True,
    )

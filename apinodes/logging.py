"""
Centralized structured logging configuration.

Every apinodes module logs through ``structlog.get_logger(__name__)`` with
snake_case event names (``api_request``, ``api_request_failed``,
``api_pagination_page``, ``node_operation``) and keyword context such as
``integration``, ``status`` and ``latency_ms``. Credentials and auth headers
are never passed as context.

The host configures output once at startup with ``setup_logging()`` or, from
``APINODES_LOG_LEVEL`` / ``APINODES_JSON_LOGS``, with
``setup_logging_from_settings()``.
"""

import structlog


def setup_logging(level: int = 20, json_output: bool = False) -> None:
    """
    Configure structlog for every node and the shared API client.

    Args:
        level: Minimum log level (10=DEBUG, 20=INFO, 30=WARNING). Per-request
               and per-page events are DEBUG; node operations and drain
               summaries are INFO; failed API calls are WARNING or above.
        json_output: If True, emit one JSON object per line, with tracebacks
                     rendered into the ``exception`` key so a failed request
                     stays a single log record. If False, emit colored
                     console logs for local development.
    """
    shared_processors = [
        structlog.contextvars.merge_contextvars,
        structlog.processors.add_log_level,
        structlog.processors.StackInfoRenderer(),
        structlog.dev.set_exc_info,
        structlog.processors.TimeStamper(fmt="iso"),
    ]

    if json_output:
        shared_processors.append(structlog.processors.format_exc_info)
        shared_processors.append(structlog.processors.JSONRenderer())
    else:
        shared_processors.append(structlog.dev.ConsoleRenderer(colors=True))

    structlog.configure(
        processors=shared_processors,
        wrapper_class=structlog.make_filtering_bound_logger(level),
        context_class=dict,
        logger_factory=structlog.PrintLoggerFactory(),
    )


def setup_logging_from_settings() -> None:
    """Configure logging from `NodeSettings`; unknown level names fall back to INFO."""
    import logging

    from apinodes.config import get_settings

    settings = get_settings()
    level = logging.getLevelName(settings.log_level.upper())
    if not isinstance(level, int):
        level = logging.INFO
    setup_logging(level=level, json_output=settings.json_logs)

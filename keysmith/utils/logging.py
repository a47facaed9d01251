"""
Structured logging for Keysmith.

Sets up structlog on top of the standard library logger:
- Pretty console output in development, JSON in production
- Redaction of secret-bearing fields
"""

import logging
import sys
from typing import List, Optional

import structlog
from structlog.stdlib import BoundLogger
from structlog.types import EventDict, Processor

from ..config import LoggingConfig

# Event fields that must never reach a log sink
REDACTED_FIELDS = {
    "key",
    "api_key",
    "secret",
    "token",
    "access_token",
    "refresh_token",
    "authorization",
    "password",
}


def redact_sensitive_fields(
    logger: logging.Logger, method_name: str, event_dict: EventDict
) -> EventDict:
    """Redact sensitive fields from logs."""
    for field in list(event_dict.keys()):
        if field.lower() in REDACTED_FIELDS:
            event_dict[field] = "***REDACTED***"
    return event_dict


def configure_logging(config: Optional[LoggingConfig] = None) -> None:
    """
    Configure structlog and stdlib logging.

    Args:
        config: Logging settings (a KeysmithConfig works too); log level
            and renderer are read from ``log_level``/``log_format`` (``debug`` forces DEBUG).
    """
    level_name = "INFO"
    log_format = "console"
    if config is not None:
        level_name = "DEBUG" if config.debug else config.log_level
        log_format = config.log_format

    # stdout is reserved for command output
    logging.basicConfig(format="%(message)s", stream=sys.stderr)
    logging.getLogger().setLevel(getattr(logging, level_name))

    # Reduce noise from the HTTP stack underneath supabase
    logging.getLogger("httpx").setLevel(logging.WARNING)
    logging.getLogger("httpcore").setLevel(logging.WARNING)

    shared_processors: List[Processor] = [
        structlog.contextvars.merge_contextvars,
        structlog.stdlib.add_log_level,
        structlog.stdlib.add_logger_name,
        structlog.processors.TimeStamper(fmt="iso", utc=True),
        structlog.processors.StackInfoRenderer(),
        redact_sensitive_fields,
        structlog.processors.format_exc_info,
    ]

    if log_format == "json":
        renderer: Processor = structlog.processors.JSONRenderer()
    else:
        renderer = structlog.dev.ConsoleRenderer(colors=True, pad_event_to=15, sort_keys=False)

    structlog.configure(
        processors=shared_processors + [renderer],
        wrapper_class=structlog.stdlib.BoundLogger,
        context_class=dict,
        logger_factory=structlog.stdlib.LoggerFactory(),
        cache_logger_on_first_use=True,
    )


def get_logger(name: str) -> BoundLogger:
    """
    Get a structlog logger.

    Example:
        >>> log = get_logger(__name__)
        >>> log.info("api_key_created", key_id="...", user_id="...")
    """
    return structlog.get_logger(name)


def key_preview(secret: str) -> str:
    """First characters of an API key, safe to log."""
    return secret[:8]

"""Structured logging configuration for the search service.

Log lines are rendered by ``structlog`` as JSON (production) or colored
console output (local runs). Every line carries the bound ``service`` name.

Typical usage
- Call ``configure_logging(service_name, log_level, log_format)`` at startup
- Acquire loggers via ``structlog.get_logger(name)``
"""

import logging
import sys
from typing import Iterable

import structlog
from structlog.stdlib import LoggerFactory, add_logger_name

# Transport loggers that report every Manticore request at INFO.
NOISY_LOGGERS = ("httpx", "httpcore")


def configure_logging(
    service_name: str,
    log_level: str = "INFO",
    log_format: str = "json",
    quiet_loggers: Iterable[str] = NOISY_LOGGERS,
) -> None:
    """Configure structured logging for a service.

    Parameters
    - service_name: Logical service identifier bound to each log line
    - log_level: ``DEBUG``, ``INFO``, ``WARNING``, ``ERROR`` (case-insensitive);
      unknown names fall back to ``INFO``
    - log_format: ``json`` for production; anything else renders for the console
    - quiet_loggers: stdlib loggers raised to ``WARNING`` unless running at ``DEBUG``
    """
    level = getattr(logging, log_level.upper(), logging.INFO)

    logging.basicConfig(format="%(message)s", stream=sys.stdout, level=level)
    if level > logging.DEBUG:
        for name in quiet_loggers:
            logging.getLogger(name).setLevel(logging.WARNING)

    processors = [
        structlog.contextvars.merge_contextvars,
        structlog.processors.add_log_level,
        structlog.processors.TimeStamper(fmt="iso"),
        add_logger_name,
        structlog.processors.StackInfoRenderer(),
    ]

    if log_format == "json":
        processors += [structlog.processors.format_exc_info, structlog.processors.JSONRenderer()]
    else:
        processors.append(structlog.dev.ConsoleRenderer(colors=sys.stdout.isatty()))

    structlog.configure(
        processors=processors,
        wrapper_class=structlog.stdlib.BoundLogger,
        logger_factory=LoggerFactory(),
        cache_logger_on_first_use=True,
    )

    structlog.contextvars.clear_contextvars()
    structlog.contextvars.bind_contextvars(service=service_name)

"""structlog setup for applications embedding the producer.

Package modules log through ``get_logger``, which wraps a stdlib ``logging`` logger.
Until the host application configures logging (here or on its own), stdlib drops the
package's debug events, so nothing reaches stdout. Nothing is configured on import.
"""

from __future__ import annotations

import logging
import sys

import structlog


def get_logger(name: str):
    return structlog.wrap_logger(logging.getLogger(name))


def _level_number(level: str) -> int:
    number = logging.getLevelName(level.upper())
    if not isinstance(number, int):
        raise ValueError(f"Unknown log level: {level!r}")
    return number


def configure_logging(level: str = "INFO", json: bool = True) -> None:
    number = _level_number(level)
    logging.basicConfig(format="%(message)s", stream=sys.stdout, level=number)
    logging.getLogger("enqueuer").setLevel(number)

    renderer = structlog.processors.JSONRenderer() if json else structlog.dev.ConsoleRenderer()
    structlog.configure(
        processors=[
            structlog.stdlib.filter_by_level,
            structlog.stdlib.add_logger_name,
            structlog.stdlib.add_log_level,
            structlog.processors.TimeStamper(fmt="iso"),
            renderer,
        ],
        wrapper_class=structlog.stdlib.BoundLogger,
        logger_factory=structlog.stdlib.LoggerFactory(),
    )

"""Structured logging for rentability.

Engine modules log through structlog on top of the standard ``logging``
tree under the ``rentability`` logger. Nothing is configured on import: the
package logger only carries a NullHandler, so the host application's
handlers and levels decide what is emitted. ``configure_logging`` attaches a
JSON or console handler to the package logger for scripts and tests.
"""

from __future__ import annotations

import logging
import os
import sys
from typing import Any

import structlog

from rentability.core.settings import get_settings

ROOT_LOGGER_NAME = "rentability"

_PROCESSORS: list[Any] = [
    structlog.stdlib.filter_by_level,
    structlog.contextvars.merge_contextvars,
    structlog.stdlib.add_log_level,
    structlog.processors.TimeStamper(fmt="iso"),
    structlog.processors.StackInfoRenderer(),
    structlog.processors.format_exc_info,
    # Rendering is left to the handler's ProcessorFormatter
    structlog.stdlib.ProcessorFormatter.wrap_for_formatter,
]

logging.getLogger(ROOT_LOGGER_NAME).addHandler(logging.NullHandler())

# Handler installed by configure_logging, replaced on reconfiguration
_handler: logging.Handler | None = None


def configure_logging(level: str | None = None, json_output: bool | None = None) -> logging.Logger:
    """Send engine logs to stdout.

    Only the ``rentability`` logger is touched; the root logger and other
    libraries keep their configuration. Calling it again replaces the
    previous handler.

    Args:
        level: DEBUG, INFO, WARNING or ERROR. Defaults to env LOGLEVEL,
            then settings.
        json_output: Render JSON lines instead of console text. Defaults to
            settings.
    """
    global _handler

    settings = get_settings()
    log_level = (level or os.environ.get("LOGLEVEL") or settings.log_level).upper()
    if json_output is None:
        json_output = settings.json_logs

    renderer = structlog.processors.JSONRenderer() if json_output else structlog.dev.ConsoleRenderer(colors=False)
    handler = logging.StreamHandler(sys.stdout)
    handler.setFormatter(structlog.stdlib.ProcessorFormatter(processor=renderer))

    package_logger = logging.getLogger(ROOT_LOGGER_NAME)
    if _handler is not None:
        package_logger.removeHandler(_handler)
    package_logger.addHandler(handler)
    package_logger.setLevel(getattr(logging, log_level, logging.INFO))
    package_logger.propagate = False

    _handler = handler
    return package_logger


def get_logger(name: str | None = None) -> structlog.stdlib.BoundLogger:
    """Structlog logger over ``logging.getLogger(name)``, with ``logger_name`` bound."""
    name = name or ROOT_LOGGER_NAME
    logger = structlog.wrap_logger(
        logging.getLogger(name),
        processors=_PROCESSORS,
        wrapper_class=structlog.stdlib.BoundLogger,
    )
    return logger.bind(logger_name=name)

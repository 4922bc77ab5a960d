"""
Logging setup for the client and CLI.

Library modules never configure logging; they only ask for a logger:

    from clawprint.logging import get_logger

    logger = get_logger(__name__)
    logger.debug("request sent", method="GET", url=url)

CLI entry points call ``setup_logging`` once, before the first request.
Records go to stderr so stdout stays reserved for command output.
"""

from __future__ import annotations

import logging
import sys
from typing import Any, TextIO

import structlog
from structlog.typing import Processor


def setup_logging(*, verbose: bool = False, stream: TextIO | None = None) -> None:
    """
    Configure structlog on top of the stdlib root logger.

    Args:
        verbose: Emit DEBUG records (request/response traces). WARNING otherwise.
        stream: Destination for log records (default: sys.stderr).
    """
    log_level = logging.DEBUG if verbose else logging.WARNING

    shared_processors: list[Processor] = [
        structlog.contextvars.merge_contextvars,
        structlog.stdlib.add_log_level,
        structlog.stdlib.add_logger_name,
        structlog.stdlib.PositionalArgumentsFormatter(),
        structlog.processors.TimeStamper(fmt="iso"),
        structlog.processors.StackInfoRenderer(),
        structlog.processors.UnicodeDecoder(),
    ]

    structlog.configure(
        processors=shared_processors + [
            structlog.stdlib.ProcessorFormatter.wrap_for_formatter,
        ],
        wrapper_class=structlog.stdlib.BoundLogger,
        context_class=dict,
        logger_factory=structlog.stdlib.LoggerFactory(),
        cache_logger_on_first_use=False,
    )

    console_formatter = structlog.stdlib.ProcessorFormatter(
        processor=structlog.dev.ConsoleRenderer(colors=False),
        foreign_pre_chain=shared_processors,
    )

    root_logger = logging.getLogger()
    root_logger.setLevel(log_level)
    for handler in root_logger.handlers[:]:
        root_logger.removeHandler(handler)

    handler = logging.StreamHandler(stream or sys.stderr)
    handler.setFormatter(console_formatter)
    root_logger.addHandler(handler)

    logging.getLogger("urllib3").setLevel(logging.WARNING)


def get_logger(name: str) -> Any:
    """
    Get a logger instance for the given name.

    Args:
        name: Logger name, typically __name__

    Returns:
        structlog logger
    """
    return structlog.get_logger(name)

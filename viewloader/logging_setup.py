# viewloader/logging_setup.py
"""
structlog setup for the viewloader stdlib logger tree.

Library code only ever calls ``structlog.get_logger(__name__)``; handlers are
attached here, by the CLI or by an application embedding the loader.
"""
import logging
import sys
from typing import Optional, TextIO

import structlog

LOGGER_NAME = "viewloader"

VERBOSITY_LEVELS = {0: "warning", 1: "info"}

def level_for_verbosity(verbose: int) -> str:
    # -v -> info, -vv and beyond -> debug.
    return VERBOSITY_LEVELS.get(verbose, "debug")

def configure_logging(log_level_str: str = "warning", json_output: bool = False, stream: Optional[TextIO] = None):
    """
    Routes viewloader log events through a structlog ProcessorFormatter.

    Console rendering (coloured on a tty) by default; one JSON object per
    line with ``json_output`` for log shippers. Events go to ``stream``,
    stderr when not given.
    """
    log_level = getattr(logging, log_level_str.upper(), logging.WARNING)
    stream = stream if stream is not None else sys.stderr

    shared_processors = [
        structlog.contextvars.merge_contextvars,
        structlog.stdlib.add_logger_name,
        structlog.stdlib.add_log_level,
        structlog.processors.TimeStamper(fmt="iso", utc=True),
        structlog.processors.StackInfoRenderer(),
        structlog.dev.set_exc_info,
        structlog.processors.format_exc_info,
        structlog.stdlib.ProcessorFormatter.wrap_for_formatter,
    ]

    structlog.configure(
        processors=shared_processors,
        logger_factory=structlog.stdlib.LoggerFactory(),
        wrapper_class=structlog.stdlib.BoundLogger,
        cache_logger_on_first_use=True,
    )

    if json_output:
        renderer = structlog.processors.JSONRenderer()
    else:
        renderer = structlog.dev.ConsoleRenderer(colors=hasattr(stream, "isatty") and stream.isatty())

    formatter = structlog.stdlib.ProcessorFormatter(
        processor=renderer,
        foreign_pre_chain=[structlog.stdlib.add_log_level],
    )

    handler = logging.StreamHandler(stream)
    handler.setFormatter(formatter)

    package_logger = logging.getLogger(LOGGER_NAME)
    package_logger.handlers.clear()
    package_logger.addHandler(handler)
    package_logger.setLevel(log_level)

    structlog.get_logger(__name__).debug("logging_configured", level=log_level_str, json=json_output)

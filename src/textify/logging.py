from __future__ import annotations

import logging
import sys
from typing import TYPE_CHECKING

import structlog

if TYPE_CHECKING:
    from pathlib import Path

_STRUCTLOG_CONFIGURED = False


def setup_logging(
    filename: str | Path | None = None,
    *,
    debug: bool = False,
    force: bool = False,
) -> structlog.stdlib.BoundLogger:
    """Set up structured logging for the textify package.

    structlog is configured once. The stdlib root handler is only installed when
    the root logger has none, unless `force` is set; the CLI passes it to
    switch to a log file or to debug output after import.

    Args:
        filename: Optional path to a log file. If None, logs are written to stderr.
        debug: Log at DEBUG level instead of INFO.
        force: Replace the root logger's existing handlers and level.

    Returns:
        A structlog logger instance configured for the textify package.
    """
    global _STRUCTLOG_CONFIGURED  # noqa: PLW0603
    level = logging.DEBUG if debug else logging.INFO

    handler: logging.Handler
    if filename:
        handler = logging.FileHandler(str(filename), encoding="utf-8")
    else:
        handler = logging.StreamHandler(sys.stderr)

    logging.basicConfig(
        level=level,
        handlers=[handler],
        format="%(message)s",
        force=force,
    )

    if not _STRUCTLOG_CONFIGURED:
        structlog.configure(
            processors=[
                structlog.stdlib.filter_by_level,
                structlog.processors.TimeStamper(fmt="iso"),
                structlog.processors.add_log_level,
                structlog.stdlib.PositionalArgumentsFormatter(),
                structlog.processors.StackInfoRenderer(),
                structlog.processors.format_exc_info,
                structlog.processors.JSONRenderer(),
            ],
            wrapper_class=structlog.stdlib.BoundLogger,
            context_class=dict,
            logger_factory=structlog.stdlib.LoggerFactory(),
            cache_logger_on_first_use=False,
        )
        _STRUCTLOG_CONFIGURED = True

    return structlog.get_logger("textify")


logger = setup_logging()

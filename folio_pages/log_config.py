"""Structured logging configuration using structlog.

Build steps log snake_case events (``content_load_failed``,
``search_index_built``) with key/value context. The CLI calls
:func:`configure_logging` once at start-up; library modules only ever call
``structlog.get_logger(__name__)``.

Examples
--------
>>> import structlog
>>> from folio_pages.log_config import configure_logging
>>> configure_logging("DEBUG")  # doctest: +SKIP
>>> structlog.get_logger(__name__).info("build_started", content_dir="content")  # doctest: +SKIP
"""

from __future__ import annotations

import logging
import sys
import typing as typ

import structlog

if typ.TYPE_CHECKING:
    from structlog.types import Processor


def configure_logging(log_level: str = "INFO", *, json_output: bool = False) -> None:
    """Configure stdlib logging and the structlog processor chain.

    Parameters
    ----------
    log_level : str, optional
        Logging level name (``DEBUG``, ``INFO``, ``WARNING``, ...). Unknown
        names fall back to ``INFO``.
    json_output : bool, optional
        Render events as JSON lines instead of the human-readable console
        format.
    """
    numeric_level = getattr(logging, log_level.upper(), logging.INFO)
    logging.basicConfig(
        format="%(message)s",
        stream=sys.stderr,
        level=numeric_level,
        force=True,
    )
    logging.getLogger().setLevel(numeric_level)

    renderer: Processor = (
        structlog.processors.JSONRenderer()
        if json_output
        else structlog.dev.ConsoleRenderer(colors=False)
    )
    processors: list[Processor] = [
        structlog.contextvars.merge_contextvars,
        structlog.stdlib.add_logger_name,
        structlog.stdlib.add_log_level,
        structlog.stdlib.PositionalArgumentsFormatter(),
        structlog.processors.TimeStamper(fmt="iso"),
        structlog.processors.StackInfoRenderer(),
        structlog.processors.format_exc_info,
        structlog.processors.UnicodeDecoder(),
        renderer,
    ]
    structlog.configure(
        processors=processors,
        wrapper_class=structlog.stdlib.BoundLogger,
        context_class=dict,
        logger_factory=structlog.stdlib.LoggerFactory(),
        cache_logger_on_first_use=True,
    )


__all__ = ["configure_logging"]

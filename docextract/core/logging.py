from __future__ import annotations

import logging
import sys
from typing import Any

# structlog must be imported before its typing helpers
import structlog
from structlog.types import Processor

__all__: list[str] = [
    "configure_logging",
]


def _ensure_extraction_context(
    logger: Any,
    method_name: str,
    event_dict: structlog.types.EventDict,
) -> structlog.types.EventDict:
    """Guarantee the *path* key exists in *event_dict*."""

    event_dict.setdefault("path", None)
    return event_dict


def _build_processors(json_logs: bool) -> list[Processor]:
    """Assemble the processor chain; only the final renderer differs."""

    renderer: Processor = (
        structlog.processors.JSONRenderer()
        if json_logs
        else structlog.dev.ConsoleRenderer(colors=False)
    )
    return [
        structlog.contextvars.merge_contextvars,
        _ensure_extraction_context,
        structlog.processors.add_log_level,
        structlog.processors.TimeStamper(fmt="iso"),
        renderer,
    ]


def _configure_stdlib_logging(level: int) -> None:
    """Configure the built-in *logging* module to write to *stderr*.

    Standard output is reserved for extracted content, so every log record –
    structlog or stdlib (pdfminer logs through stdlib) – goes to *stderr*.
    """

    root_logger = logging.getLogger()
    root_logger.setLevel(level)

    handler = logging.StreamHandler(sys.stderr)
    handler.setLevel(level)
    handler.setFormatter(logging.Formatter("%(message)s"))  # structlog formats

    # Remove default handlers to avoid duplicate logs in some runtimes.
    root_logger.handlers.clear()
    root_logger.addHandler(handler)

    # pdfminer is extremely chatty at DEBUG.
    logging.getLogger("pdfminer").setLevel(max(level, logging.WARNING))


_LOGGING_CONFIGURED: bool = False


def configure_logging(debug: bool = False, json_logs: bool = False) -> None:
    """Initialise `structlog` for the entire process.

    Call once, before extraction starts. The function is idempotent –
    multiple calls are safe but no-op after the first.

    Parameters
    ----------
    debug:
        When *True* lowers the log level to ``DEBUG``; otherwise ``INFO``.
    json_logs:
        Render one JSON object per line instead of the console format.
    """

    global _LOGGING_CONFIGURED

    if _LOGGING_CONFIGURED:
        return

    level: int = logging.DEBUG if debug else logging.INFO

    _configure_stdlib_logging(level)

    structlog.configure(
        wrapper_class=structlog.make_filtering_bound_logger(level),
        processors=_build_processors(json_logs),
        context_class=dict,
        logger_factory=structlog.PrintLoggerFactory(file=sys.stderr),
        cache_logger_on_first_use=True,
    )

    _LOGGING_CONFIGURED = True

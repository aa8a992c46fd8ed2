from __future__ import annotations

import os

import structlog

from docextract.core.exceptions import SourceNotFoundError

__all__: list[str] = ["validate_path"]

logger = structlog.get_logger(__name__)


def validate_path(path: str) -> None:
    """
    Ensure *path* exists before any classification or extraction happens.

    Args:
        path: Path supplied by the caller.

    Raises:
        SourceNotFoundError: If nothing exists at *path*.
    """
    if not path or not os.path.exists(path):
        logger.warning("source_not_found", path=path)
        raise SourceNotFoundError(path)

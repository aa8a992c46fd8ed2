"""
Extraction Pipeline Orchestrator

Entry points for both execution modes:

- :func:`extract_text` – whole-file mode.  Classification, dispatch and
  extraction all run synchronously on the caller's thread; the result is one
  aggregated string.
- :func:`stream_chunks` – streaming mode.  Classification is offloaded with
  ``asyncio.to_thread()`` and the selected extractor runs in a worker thread
  behind a bounded :class:`~docextract.ingestion.streamers.ChunkStream`.

Both paths share the same sequence: existence check → classification →
route selection (:mod:`docextract.parsing.registry`) → extractor.
"""

from __future__ import annotations

import asyncio
from typing import Optional

import structlog

from docextract.classification import ClassificationResult, classify, file_extension
from docextract.core.config import Settings, get_settings
from docextract.ingestion.streamers import ChunkStream
from docextract.ingestion.validators import validate_path
from docextract.parsing.base import BaseExtractor
from docextract.parsing.document import DocumentConverter
from docextract.parsing.registry import create_extractor, select_extractor

__all__: list[str] = ["extract_text", "stream_chunks", "build_extractor"]

logger = structlog.get_logger(__name__)


def build_extractor(
    path: str,
    classification: ClassificationResult,
    *,
    settings: Settings,
    converter: Optional[DocumentConverter] = None,
) -> BaseExtractor:
    """Select and construct the extractor for an already classified file."""

    extension = file_extension(path)
    route = select_extractor(classification, extension)
    extractor = create_extractor(
        route,
        path,
        classification=classification,
        extension=extension,
        settings=settings,
        converter=converter,
    )
    logger.info(
        "extractor_selected",
        path=path,
        extractor=extractor.name,
        kind=classification.kind.value,
        format=classification.format.value,
        extension=extension,
    )
    return extractor


def extract_text(
    path: str,
    *,
    settings: Optional[Settings] = None,
    converter: Optional[DocumentConverter] = None,
) -> str:
    """
    Extract the whole file at *path* as one string.

    Args:
        path: File to extract.
        settings: Optional Settings instance (uses global if not provided).
        converter: Document converter override (defaults to pandoc).

    Returns:
        The aggregated content.

    Raises:
        ExtractionError: Any fatal failure (see ``docextract.core.exceptions``).
    """
    settings = settings or get_settings()
    with structlog.contextvars.bound_contextvars(path=path):
        classification = classify(path, settings=settings)
        extractor = build_extractor(
            path, classification, settings=settings, converter=converter
        )
        text = extractor.extract_text()
        logger.info("extraction_complete", extractor=extractor.name, chars=len(text))
        return text


async def stream_chunks(
    path: str,
    *,
    settings: Optional[Settings] = None,
    converter: Optional[DocumentConverter] = None,
) -> ChunkStream:
    """
    Start a streaming extraction of *path*.

    The existence check and classification happen before this coroutine
    returns, so `SourceNotFoundError` and `ClassificationError` are raised
    here.  Failures of the extractor itself (e.g. `WorkbookOpenError`) are
    raised while iterating the returned stream, after any chunks produced
    before the failure.

    Returns:
        A started `ChunkStream`; close it (or use ``async with``) when done.
    """
    settings = settings or get_settings()
    with structlog.contextvars.bound_contextvars(path=path):
        validate_path(path)
        classification = await asyncio.to_thread(classify, path, settings=settings)
        extractor = build_extractor(
            path, classification, settings=settings, converter=converter
        )
        stream = ChunkStream(
            extractor.iter_chunks,
            maxsize=settings.stream_buffer_size,
            poll_interval=settings.producer_poll_interval_s,
            name=extractor.name,
        )
        return stream.start()

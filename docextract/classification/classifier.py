"""
Format Classifier

Maps a file path to the ``(kind, format, extension_hint)`` triple the
dispatcher routes on.

Key Responsibilities:
- Fail fast with `SourceNotFoundError` before any probing.
- Trust the extension for formats whose suffix is reliable (word-processor,
  OpenDocument text and every spreadsheet suffix); content sniffing for these
  containers is slower and can be ambiguous.
- Delegate everything else to :func:`docextract.classification.sniffer.sniff`.

Dependencies:
- `docextract.ingestion.validators`: existence check.
- `docextract.classification.sniffer`: content-based detection.
- `structlog`: one ``classification_complete`` event per call.
"""

from __future__ import annotations

import os
from typing import Dict, Final, Optional, Tuple

import structlog

from docextract.core.config import Settings, get_settings
from docextract.core.exceptions import ClassificationError
from docextract.ingestion.validators import validate_path

from .sniffer import sniff
from .types import ClassificationResult, FileFormat, FileKind

__all__: list[str] = ["classify", "file_extension", "EXTENSION_OVERRIDES"]

logger = structlog.get_logger(__name__)

# Extensions that win over content sniffing.
EXTENSION_OVERRIDES: Final[Dict[str, Tuple[FileKind, FileFormat]]] = {
    "docx": (FileKind.DOCUMENT, FileFormat.OOXML_DOCUMENT),
    "odt": (FileKind.DOCUMENT, FileFormat.ODF_TEXT),
    "xlsx": (FileKind.SPREADSHEET, FileFormat.OOXML_SPREADSHEET),
    "xlsm": (FileKind.SPREADSHEET, FileFormat.OOXML_SPREADSHEET),
    "xlsb": (FileKind.SPREADSHEET, FileFormat.OOXML_SPREADSHEET),
    "xlam": (FileKind.SPREADSHEET, FileFormat.OOXML_SPREADSHEET),
    "xls": (FileKind.SPREADSHEET, FileFormat.MS_EXCEL),
    "xla": (FileKind.SPREADSHEET, FileFormat.MS_EXCEL),
    "ods": (FileKind.SPREADSHEET, FileFormat.ODF_SPREADSHEET),
}


def file_extension(path: str) -> str:
    """Return the lower-cased extension of *path* without the leading dot."""
    return os.path.splitext(path)[1].lower().lstrip(".")


def classify(path: str, *, settings: Optional[Settings] = None) -> ClassificationResult:
    """
    Classify the file at *path*.

    Args:
        path: File to classify.
        settings: Optional Settings instance (uses global if not provided).

    Returns:
        An immutable `ClassificationResult`.

    Raises:
        SourceNotFoundError: If *path* does not exist (checked first).
        ClassificationError: If the file cannot be read for sniffing.
    """
    validate_path(path)
    settings = settings or get_settings()

    extension = file_extension(path)
    if extension in EXTENSION_OVERRIDES:
        kind, fmt = EXTENSION_OVERRIDES[extension]
        result = ClassificationResult(kind=kind, format=fmt, extension_hint=extension)
        source = "extension"
    else:
        try:
            result = sniff(path, head_size=settings.sniff_bytes)
        except OSError as e:
            logger.error("classification_failed", path=path, error=str(e))
            raise ClassificationError(f"Could not classify '{path}': {e}") from e
        source = "content"

    logger.debug(
        "classification_complete",
        path=path,
        kind=result.kind.value,
        format=result.format.value,
        extension_hint=result.extension_hint,
        source=source,
    )
    return result

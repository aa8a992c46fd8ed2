"""docextract/parsing/__init__.py
###############################################################################
Parsing Package Root
###############################################################################
Format-specific extractors.  Each variant turns one source shape into a
sequence of :class:`~docextract.parsing.chunks.Chunk` objects (streaming mode)
or one aggregated string (whole-file mode):

- :class:`TextLineExtractor` – one chunk per line.
- :class:`SpreadsheetExtractor` – one chunk per row, sheet by sheet.
- :class:`PdfExtractor` – one chunk per page.
- :class:`DocumentConversionExtractor` – one chunk holding converter output.
- :class:`ImageExtractor` – one chunk holding the base64 payload.
- :class:`UnsupportedExtractor` – one informational chunk.

The dispatch tables live in :py:mod:`docextract.parsing.registry`.
"""

from __future__ import annotations

from .base import BaseExtractor
from .chunks import (
    Chunk,
    ChunkMetadata,
    DocumentMetadata,
    ImageMetadata,
    PdfMetadata,
    SpreadsheetMetadata,
    TextMetadata,
)
from .document import DocumentConversionExtractor, DocumentConverter, PandocConverter
from .image import ImageExtractor
from .pdf import PdfExtractor
from .spreadsheet import SpreadsheetExtractor
from .txt import TextLineExtractor
from .unsupported import UnsupportedExtractor

__all__: list[str] = [
    "BaseExtractor",
    "Chunk",
    "ChunkMetadata",
    "DocumentMetadata",
    "ImageMetadata",
    "PdfMetadata",
    "SpreadsheetMetadata",
    "TextMetadata",
    "DocumentConversionExtractor",
    "DocumentConverter",
    "PandocConverter",
    "ImageExtractor",
    "PdfExtractor",
    "SpreadsheetExtractor",
    "TextLineExtractor",
    "UnsupportedExtractor",
]

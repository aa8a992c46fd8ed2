from __future__ import annotations

from dataclasses import dataclass
from typing import Optional, Union

__all__: list[str] = [
    "Chunk",
    "ChunkMetadata",
    "TextMetadata",
    "PdfMetadata",
    "SpreadsheetMetadata",
    "DocumentMetadata",
    "ImageMetadata",
]


@dataclass(frozen=True)
class TextMetadata:
    """1-based line index within a plain-text source."""

    line_number: int

    def label(self) -> str:
        return f"Line {self.line_number}"


@dataclass(frozen=True)
class PdfMetadata:
    """1-based page index within a PDF."""

    page_number: int

    def label(self) -> str:
        return f"Page {self.page_number}"


@dataclass(frozen=True)
class SpreadsheetMetadata:
    """
    Sheet name plus 1-based row index within that sheet.

    ``row_number`` is ``None`` only for a sheet-level error chunk, i.e. when
    the sheet could not be read and no row was ever produced.
    """

    sheet_name: str
    row_number: Optional[int] = None

    def label(self) -> str:
        if self.row_number is None:
            return f"Sheet '{self.sheet_name}'"
        return f"Sheet '{self.sheet_name}' Row {self.row_number}"


@dataclass(frozen=True)
class DocumentMetadata:
    """Whole-document result; no sub-position."""

    def label(self) -> str:
        return "Full document"


@dataclass(frozen=True)
class ImageMetadata:
    """Whole-image result (base64 payload)."""

    def label(self) -> str:
        return "Image data"


ChunkMetadata = Union[
    TextMetadata, PdfMetadata, SpreadsheetMetadata, DocumentMetadata, ImageMetadata
]


@dataclass(frozen=True)
class Chunk:
    """
    One unit of extracted content.

    Attributes:
        content: Extracted text (base64 text for images). For error chunks a
            human-readable description of the failure.
        metadata: Provenance of the chunk; the variant matches the extractor
            that produced it.
        error: Set when the chunk reports a per-unit failure (a sheet or page
            that could not be read) instead of content.
    """

    content: str
    metadata: ChunkMetadata
    error: Optional[str] = None

    @property
    def is_error(self) -> bool:
        return self.error is not None

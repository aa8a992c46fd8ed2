"""
Extractor Registry

This module centralizes the mapping between a classified file and the
extractor variant that handles it.  All format-routing policy lives in the
three declarative tables below; :func:`select_extractor` consults them and
:func:`create_extractor` turns the selection into an extractor instance.

Decision order:
1. ``EXTENSION_ROUTES`` – suffix shortcuts (word-processor, OpenDocument text,
   every spreadsheet suffix).  These win regardless of the sniffed kind.
2. ``FORMAT_ROUTES`` – exact ``(kind, format)`` matches.
3. ``KIND_DEFAULTS`` – fallback per kind (plain-text read, or an explicit
   "unsupported" result).
4. ``FALLBACK_ROUTE`` – unrecognised kinds are read as plain text.

Selection is a pure function and never fails.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Dict, Final, Optional, Tuple

from docextract.classification.types import ClassificationResult, FileFormat, FileKind
from docextract.core.config import Settings

from .base import BaseExtractor
from .document import DocumentConversionExtractor, DocumentConverter, PandocConverter
from .image import ImageExtractor
from .pdf import PdfExtractor
from .spreadsheet import SpreadsheetExtractor
from .txt import TextLineExtractor
from .unsupported import UnsupportedExtractor

__all__: list[str] = [
    "ExtractorVariant",
    "ExtractorRoute",
    "EXTENSION_ROUTES",
    "FORMAT_ROUTES",
    "KIND_DEFAULTS",
    "FALLBACK_ROUTE",
    "select_extractor",
    "create_extractor",
]


class ExtractorVariant(str, Enum):
    TEXT = "text"
    SPREADSHEET = "spreadsheet"
    PDF = "pdf"
    IMAGE = "image"
    DOCUMENT_CONVERSION = "document_conversion"
    UNSUPPORTED = "unsupported"


@dataclass(frozen=True)
class ExtractorRoute:
    """
    A routing decision.

    Attributes:
        variant: Extractor variant to construct.
        source_format: Converter source format (conversion only).  ``None``
            means "use the file's extension".
        message: Message template for ``UNSUPPORTED``; ``{format}`` and
            ``{kind}`` are substituted with the classification.
    """

    variant: ExtractorVariant
    source_format: Optional[str] = None
    message: Optional[str] = None


_TEXT: Final = ExtractorRoute(ExtractorVariant.TEXT)
_SPREADSHEET: Final = ExtractorRoute(ExtractorVariant.SPREADSHEET)
_PDF: Final = ExtractorRoute(ExtractorVariant.PDF)
_IMAGE: Final = ExtractorRoute(ExtractorVariant.IMAGE)


def _convert(source_format: Optional[str] = None) -> ExtractorRoute:
    return ExtractorRoute(ExtractorVariant.DOCUMENT_CONVERSION, source_format=source_format)


def _unsupported(message: str) -> ExtractorRoute:
    return ExtractorRoute(ExtractorVariant.UNSUPPORTED, message=message)


EXTENSION_ROUTES: Final[Dict[str, ExtractorRoute]] = {
    "docx": _convert(),
    "odt": _convert(),
    "xlsx": _SPREADSHEET,
    "xls": _SPREADSHEET,
    "xlsm": _SPREADSHEET,
    "xlsb": _SPREADSHEET,
    "xla": _SPREADSHEET,
    "xlam": _SPREADSHEET,
    "ods": _SPREADSHEET,
}

FORMAT_ROUTES: Final[Dict[Tuple[FileKind, FileFormat], ExtractorRoute]] = {
    (FileKind.DOCUMENT, FileFormat.PDF): _PDF,
    # Legacy .doc is handed to the converter's docx reader.
    (FileKind.DOCUMENT, FileFormat.MS_WORD): _convert("docx"),
    (FileKind.DOCUMENT, FileFormat.OOXML_DOCUMENT): _convert("docx"),
    (FileKind.IMAGE, FileFormat.JPEG): _IMAGE,
    (FileKind.IMAGE, FileFormat.PNG): _IMAGE,
    (FileKind.IMAGE, FileFormat.WEBP): _IMAGE,
    (FileKind.IMAGE, FileFormat.TIFF): _IMAGE,
    (FileKind.IMAGE, FileFormat.SVG): _IMAGE,
    (FileKind.IMAGE, FileFormat.HDR): _IMAGE,
    (FileKind.IMAGE, FileFormat.BMP): _IMAGE,
    (FileKind.OTHER, FileFormat.HTML): _convert("html"),
    (FileKind.PRESENTATION, FileFormat.OOXML_PRESENTATION): _convert("pptx"),
    (FileKind.SPREADSHEET, FileFormat.OOXML_SPREADSHEET): _SPREADSHEET,
}

KIND_DEFAULTS: Final[Dict[FileKind, ExtractorRoute]] = {
    FileKind.DOCUMENT: _TEXT,
    FileKind.EBOOK: _unsupported("Ebooks are not yet supported (format '{format}')"),
    FileKind.IMAGE: _unsupported("Images of type '{format}' are not supported"),
    FileKind.OTHER: _TEXT,
    FileKind.PRESENTATION: _TEXT,
    FileKind.SPREADSHEET: _unsupported(
        "Spreadsheet format '{format}' of kind '{kind}' is not implemented yet"
    ),
}

FALLBACK_ROUTE: Final[ExtractorRoute] = _TEXT


def select_extractor(
    classification: ClassificationResult, extension: str
) -> ExtractorRoute:
    """
    Pick the extractor route for a classified file.

    Args:
        classification: Result of classifying the file.
        extension: File extension (case-insensitive, leading dot optional).

    Returns:
        The matching `ExtractorRoute`; never raises.
    """
    ext = extension.lower().lstrip(".")
    if ext in EXTENSION_ROUTES:
        return EXTENSION_ROUTES[ext]

    key = (classification.kind, classification.format)
    if key in FORMAT_ROUTES:
        return FORMAT_ROUTES[key]

    return KIND_DEFAULTS.get(classification.kind, FALLBACK_ROUTE)


def create_extractor(
    route: ExtractorRoute,
    path: str,
    *,
    classification: ClassificationResult,
    extension: str,
    settings: Settings,
    converter: Optional[DocumentConverter] = None,
) -> BaseExtractor:
    """Instantiate the extractor described by *route* for *path*."""

    variant = route.variant
    if variant is ExtractorVariant.SPREADSHEET:
        return SpreadsheetExtractor(path)
    if variant is ExtractorVariant.PDF:
        return PdfExtractor(path)
    if variant is ExtractorVariant.IMAGE:
        return ImageExtractor(path)
    if variant is ExtractorVariant.DOCUMENT_CONVERSION:
        return DocumentConversionExtractor(
            path,
            source_format=route.source_format or extension.lower().lstrip("."),
            converter=converter
            or PandocConverter(
                settings.converter_binary, timeout_s=settings.converter_timeout_s
            ),
            target_format=settings.target_format,
        )
    if variant is ExtractorVariant.UNSUPPORTED:
        message = (route.message or "Unsupported format '{format}'").format(
            format=classification.format.value, kind=classification.kind.value
        )
        return UnsupportedExtractor(path, message=message)
    return TextLineExtractor(path, encoding=settings.text_encoding)

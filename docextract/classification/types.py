from __future__ import annotations

from dataclasses import dataclass
from enum import Enum

__all__: list[str] = ["FileKind", "FileFormat", "ClassificationResult"]


class FileKind(str, Enum):
    """Coarse format category used for dispatch."""

    DOCUMENT = "document"
    SPREADSHEET = "spreadsheet"
    PRESENTATION = "presentation"
    IMAGE = "image"
    EBOOK = "ebook"
    OTHER = "other"
    ARCHIVE = "archive"
    AUDIO = "audio"
    VIDEO = "video"


class FileFormat(str, Enum):
    """Canonical format tags.

    The value doubles as the converter's *source format* argument where a
    format is routed through document conversion (``docx``, ``odt``,
    ``html``, ``pptx``).
    """

    # Documents
    PDF = "pdf"
    MS_WORD = "doc"
    OOXML_DOCUMENT = "docx"
    ODF_TEXT = "odt"
    RTF = "rtf"
    PLAIN_TEXT = "txt"
    # Spreadsheets
    OOXML_SPREADSHEET = "xlsx"
    MS_EXCEL = "xls"
    ODF_SPREADSHEET = "ods"
    # Presentations
    OOXML_PRESENTATION = "pptx"
    MS_POWERPOINT = "ppt"
    ODF_PRESENTATION = "odp"
    # Images
    JPEG = "jpg"
    PNG = "png"
    WEBP = "webp"
    TIFF = "tiff"
    SVG = "svg"
    HDR = "hdr"
    BMP = "bmp"
    GIF = "gif"
    ICO = "ico"
    PSD = "psd"
    OTHER_IMAGE = "img"
    # Ebooks
    EPUB = "epub"
    MOBI = "mobi"
    # Other
    HTML = "html"
    XML = "xml"
    JSON = "json"
    ZIP = "zip"
    GZIP = "gz"
    OLE_COMPOUND = "cfb"
    MP3 = "mp3"
    WAV = "wav"
    MP4 = "mp4"
    ARBITRARY_BINARY = "bin"


@dataclass(frozen=True)
class ClassificationResult:
    """
    Result of classifying one file. Derived once per extraction call and
    never mutated afterwards.

    Attributes:
        kind: Coarse category of the file
        format: Canonical format tag
        extension_hint: Conventional extension for *format* (no leading dot)
    """

    kind: FileKind
    format: FileFormat
    extension_hint: str

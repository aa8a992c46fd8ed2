"""docextract/classification/sniffer.py
###############################################################################
Content sniffer – magic bytes, container inspection and image probing
###############################################################################
Turns the leading bytes of a file (plus its extension as a tie-breaker) into a
:class:`~docextract.classification.types.ClassificationResult`.

Detection order
===============
1. **Signature table** – fixed byte prefixes at fixed offsets (PDF, RTF, OLE2
   compound files, GZIP, MOBI, PNG, JPEG, GIF, TIFF, WebP, BMP, Radiance
   HDR, ...).  Common raster formats never reach Pillow, so their pixel
   count cannot trip its decompression-bomb guard.
2. **ZIP containers** – OOXML, OpenDocument and EPUB are all ZIP files; the
   member list (``[Content_Types].xml``, ``mimetype``) tells them apart.
3. **Other raster images** – Pillow identifies the format from the header without
   decoding pixel data.  The candidate formats are restricted so that loose
   plugins (PPM, TGA, ...) never claim plain-text files.
4. **Text probes** – SVG, HTML, XML and JSON are recognised from their first
   non-blank characters once the head decodes as UTF-8.
5. **Extension guess** – unknown binary content falls back to
   :pymod:`mimetypes` so audio/video/image files still get the right *kind*.

The sniffer never raises for "unknown" content; it only raises ``OSError``
when the file cannot be read.  Wrapping that into the domain error is the
classifier's job.
"""

from __future__ import annotations

import codecs
import mimetypes
import os
import zipfile
from typing import Dict, Final, Optional, Tuple

import structlog
from PIL import Image, UnidentifiedImageError

from .types import ClassificationResult, FileFormat, FileKind

__all__: list[str] = ["sniff", "KIND_BY_FORMAT"]

logger = structlog.get_logger(__name__)

KIND_BY_FORMAT: Final[Dict[FileFormat, FileKind]] = {
    FileFormat.PDF: FileKind.DOCUMENT,
    FileFormat.MS_WORD: FileKind.DOCUMENT,
    FileFormat.OOXML_DOCUMENT: FileKind.DOCUMENT,
    FileFormat.ODF_TEXT: FileKind.DOCUMENT,
    FileFormat.RTF: FileKind.DOCUMENT,
    FileFormat.PLAIN_TEXT: FileKind.OTHER,
    FileFormat.OOXML_SPREADSHEET: FileKind.SPREADSHEET,
    FileFormat.MS_EXCEL: FileKind.SPREADSHEET,
    FileFormat.ODF_SPREADSHEET: FileKind.SPREADSHEET,
    FileFormat.OOXML_PRESENTATION: FileKind.PRESENTATION,
    FileFormat.MS_POWERPOINT: FileKind.PRESENTATION,
    FileFormat.ODF_PRESENTATION: FileKind.PRESENTATION,
    FileFormat.JPEG: FileKind.IMAGE,
    FileFormat.PNG: FileKind.IMAGE,
    FileFormat.WEBP: FileKind.IMAGE,
    FileFormat.TIFF: FileKind.IMAGE,
    FileFormat.SVG: FileKind.IMAGE,
    FileFormat.HDR: FileKind.IMAGE,
    FileFormat.BMP: FileKind.IMAGE,
    FileFormat.GIF: FileKind.IMAGE,
    FileFormat.ICO: FileKind.IMAGE,
    FileFormat.PSD: FileKind.IMAGE,
    FileFormat.OTHER_IMAGE: FileKind.IMAGE,
    FileFormat.EPUB: FileKind.EBOOK,
    FileFormat.MOBI: FileKind.EBOOK,
    FileFormat.HTML: FileKind.OTHER,
    FileFormat.XML: FileKind.OTHER,
    FileFormat.JSON: FileKind.OTHER,
    FileFormat.ZIP: FileKind.ARCHIVE,
    FileFormat.GZIP: FileKind.ARCHIVE,
    FileFormat.OLE_COMPOUND: FileKind.OTHER,
    FileFormat.MP3: FileKind.AUDIO,
    FileFormat.WAV: FileKind.AUDIO,
    FileFormat.MP4: FileKind.VIDEO,
    FileFormat.ARBITRARY_BINARY: FileKind.OTHER,
}

# ((offset, magic bytes), ...) -> format; every part must match, first entry wins.
_SIGNATURES: Final[Tuple[Tuple[Tuple[Tuple[int, bytes], ...], FileFormat], ...]] = (
    (((0, b"%PDF-"),), FileFormat.PDF),
    (((0, b"{\\rtf"),), FileFormat.RTF),
    (((0, b"\xd0\xcf\x11\xe0\xa1\xb1\x1a\xe1"),), FileFormat.OLE_COMPOUND),
    (((0, b"PK\x03\x04"),), FileFormat.ZIP),
    (((0, b"PK\x05\x06"),), FileFormat.ZIP),  # empty archive
    (((0, b"\x1f\x8b"),), FileFormat.GZIP),
    (((60, b"BOOKMOBI"),), FileFormat.MOBI),
    (((0, b"\x89PNG\r\n\x1a\n"),), FileFormat.PNG),
    (((0, b"\xff\xd8\xff"),), FileFormat.JPEG),
    (((0, b"GIF87a"),), FileFormat.GIF),
    (((0, b"GIF89a"),), FileFormat.GIF),
    (((0, b"II*\x00"),), FileFormat.TIFF),
    (((0, b"MM\x00*"),), FileFormat.TIFF),
    (((0, b"RIFF"), (8, b"WEBP")), FileFormat.WEBP),
    # "BM" alone is too weak; the two reserved header words are zero.
    (((0, b"BM"), (6, b"\x00\x00\x00\x00")), FileFormat.BMP),
    (((0, b"#?RADIANCE"),), FileFormat.HDR),
    (((0, b"#?RGBE"),), FileFormat.HDR),
    (((0, b"ID3"),), FileFormat.MP3),
    (((0, b"RIFF"), (8, b"WAVE")), FileFormat.WAV),
    (((4, b"ftyp"),), FileFormat.MP4),
)

# OpenDocument / EPUB ``mimetype`` member -> format
_ZIP_MIMETYPES: Final[Dict[str, FileFormat]] = {
    "application/epub+zip": FileFormat.EPUB,
    "application/vnd.oasis.opendocument.text": FileFormat.ODF_TEXT,
    "application/vnd.oasis.opendocument.spreadsheet": FileFormat.ODF_SPREADSHEET,
    "application/vnd.oasis.opendocument.presentation": FileFormat.ODF_PRESENTATION,
}

# OOXML part prefix -> format
_OOXML_PARTS: Final[Tuple[Tuple[str, FileFormat], ...]] = (
    ("word/", FileFormat.OOXML_DOCUMENT),
    ("xl/", FileFormat.OOXML_SPREADSHEET),
    ("ppt/", FileFormat.OOXML_PRESENTATION),
)

# OLE2 directory stream names (UTF-16LE) -> legacy Office format
_OLE_STREAMS: Final[Tuple[Tuple[bytes, FileFormat], ...]] = (
    ("WordDocument".encode("utf-16-le"), FileFormat.MS_WORD),
    ("Workbook".encode("utf-16-le"), FileFormat.MS_EXCEL),
    ("Book".encode("utf-16-le"), FileFormat.MS_EXCEL),
    ("PowerPoint Document".encode("utf-16-le"), FileFormat.MS_POWERPOINT),
)

_OLE_EXTENSIONS: Final[Dict[str, FileFormat]] = {
    "doc": FileFormat.MS_WORD,
    "dot": FileFormat.MS_WORD,
    "xls": FileFormat.MS_EXCEL,
    "xla": FileFormat.MS_EXCEL,
    "ppt": FileFormat.MS_POWERPOINT,
}

# Pillow format name -> canonical format.  Only these plugins are consulted.
_PIL_FORMATS: Final[Dict[str, FileFormat]] = {
    "JPEG": FileFormat.JPEG,
    "PNG": FileFormat.PNG,
    "WEBP": FileFormat.WEBP,
    "TIFF": FileFormat.TIFF,
    "BMP": FileFormat.BMP,
    "GIF": FileFormat.GIF,
    "ICO": FileFormat.ICO,
    "PSD": FileFormat.PSD,
    "JPEG2000": FileFormat.OTHER_IMAGE,
    "ICNS": FileFormat.OTHER_IMAGE,
    "DDS": FileFormat.OTHER_IMAGE,
}

_MIME_KINDS: Final[Dict[str, Tuple[FileFormat, FileKind]]] = {
    "image": (FileFormat.OTHER_IMAGE, FileKind.IMAGE),
    "audio": (FileFormat.ARBITRARY_BINARY, FileKind.AUDIO),
    "video": (FileFormat.ARBITRARY_BINARY, FileKind.VIDEO),
}


def _result(fmt: FileFormat) -> ClassificationResult:
    return ClassificationResult(
        kind=KIND_BY_FORMAT[fmt], format=fmt, extension_hint=fmt.value
    )


def _match_signature(head: bytes) -> Optional[FileFormat]:
    for parts, fmt in _SIGNATURES:
        if all(head[offset : offset + len(magic)] == magic for offset, magic in parts):
            return fmt
    return None


def _inspect_zip(path: str) -> FileFormat:
    """Tell OOXML, OpenDocument and EPUB apart from a plain ZIP archive."""

    try:
        with zipfile.ZipFile(path) as archive:
            names = archive.namelist()
            if "mimetype" in names:
                declared = archive.read("mimetype").decode("ascii", "ignore").strip()
                if declared in _ZIP_MIMETYPES:
                    return _ZIP_MIMETYPES[declared]
            if "[Content_Types].xml" in names:
                for prefix, fmt in _OOXML_PARTS:
                    if any(name.startswith(prefix) for name in names):
                        return fmt
    except zipfile.BadZipFile:
        logger.debug("zip_inspection_failed", path=path)
    return FileFormat.ZIP


def _inspect_ole(head: bytes, extension: str) -> FileFormat:
    """Identify legacy Office files from OLE2 stream names or the extension."""

    for stream_name, fmt in _OLE_STREAMS:
        if stream_name in head:
            return fmt
    return _OLE_EXTENSIONS.get(extension, FileFormat.OLE_COMPOUND)


def _probe_image(path: str) -> Optional[FileFormat]:
    try:
        with Image.open(path, formats=list(_PIL_FORMATS)) as img:
            return _PIL_FORMATS.get(img.format or "", FileFormat.OTHER_IMAGE)
    except (UnidentifiedImageError, ValueError):
        return None
    except Image.DecompressionBombError as e:
        # Recognised as an image, but Pillow refuses to report its format.
        logger.warning("image_probe_too_large", path=path, error=str(e))
        return FileFormat.OTHER_IMAGE


def _decode_head(head: bytes) -> Optional[str]:
    """Return *head* as text, or ``None`` if it looks binary."""

    if b"\x00" in head:
        return None
    decoder = codecs.getincrementaldecoder("utf-8")()
    try:
        # final=False tolerates a multi-byte sequence cut at the head boundary
        return decoder.decode(head, final=False)
    except UnicodeDecodeError:
        return None


def _probe_text(text: str) -> FileFormat:
    lowered = text.lstrip("\ufeff \t\r\n").lower()
    if lowered.startswith("<svg") or (
        lowered.startswith("<?xml") and "<svg" in lowered
    ):
        return FileFormat.SVG
    if lowered.startswith("<!doctype html") or lowered.startswith("<html"):
        return FileFormat.HTML
    if lowered.startswith("<?xml"):
        return FileFormat.XML
    if lowered.startswith("{") or lowered.startswith("["):
        return FileFormat.JSON
    return FileFormat.PLAIN_TEXT


def _guess_from_extension(path: str) -> ClassificationResult:
    mime, _ = mimetypes.guess_type(path)
    if mime:
        major = mime.split("/", 1)[0]
        if major in _MIME_KINDS:
            fmt, kind = _MIME_KINDS[major]
            return ClassificationResult(kind=kind, format=fmt, extension_hint=fmt.value)
    return _result(FileFormat.ARBITRARY_BINARY)


def sniff(path: str, *, head_size: int = 8192) -> ClassificationResult:
    """Classify the file at *path* from its content.

    Args:
        path: File to inspect; must exist.
        head_size: Number of leading bytes to read.

    Returns:
        The detected :class:`ClassificationResult`.

    Raises:
        OSError: If the file cannot be opened or read.
    """

    with open(path, "rb") as fh:
        head = fh.read(head_size)

    extension = os.path.splitext(path)[1].lower().lstrip(".")

    fmt = _match_signature(head)
    if fmt is FileFormat.ZIP:
        fmt = _inspect_zip(path)
    elif fmt is FileFormat.OLE_COMPOUND:
        fmt = _inspect_ole(head, extension)
    if fmt is not None:
        return _result(fmt)

    image_format = _probe_image(path) if head else None
    if image_format is not None:
        return _result(image_format)

    text = _decode_head(head)
    if text is not None:
        return _result(_probe_text(text))

    return _guess_from_extension(path)

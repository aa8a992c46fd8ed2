from __future__ import annotations

import itertools

import pytest

from docextract.classification.types import ClassificationResult, FileFormat, FileKind
from docextract.parsing import (
    DocumentConversionExtractor,
    ImageExtractor,
    PdfExtractor,
    SpreadsheetExtractor,
    TextLineExtractor,
    UnsupportedExtractor,
)
from docextract.parsing.registry import (
    EXTENSION_ROUTES,
    ExtractorRoute,
    ExtractorVariant,
    create_extractor,
    select_extractor,
)
from tests.conftest import FakeConverter


def _cls(kind: FileKind, fmt: FileFormat) -> ClassificationResult:
    return ClassificationResult(kind=kind, format=fmt, extension_hint=fmt.value)


@pytest.mark.parametrize(
    "kind, fmt, extension, variant, source_format",
    [
        (FileKind.DOCUMENT, FileFormat.PDF, "pdf", ExtractorVariant.PDF, None),
        (FileKind.DOCUMENT, FileFormat.MS_WORD, "doc", ExtractorVariant.DOCUMENT_CONVERSION, "docx"),
        (FileKind.DOCUMENT, FileFormat.OOXML_DOCUMENT, "bin", ExtractorVariant.DOCUMENT_CONVERSION, "docx"),
        (FileKind.DOCUMENT, FileFormat.RTF, "rtf", ExtractorVariant.TEXT, None),
        (FileKind.IMAGE, FileFormat.JPEG, "jpg", ExtractorVariant.IMAGE, None),
        (FileKind.IMAGE, FileFormat.SVG, "svg", ExtractorVariant.IMAGE, None),
        (FileKind.IMAGE, FileFormat.HDR, "hdr", ExtractorVariant.IMAGE, None),
        (FileKind.IMAGE, FileFormat.GIF, "gif", ExtractorVariant.UNSUPPORTED, None),
        (FileKind.OTHER, FileFormat.HTML, "html", ExtractorVariant.DOCUMENT_CONVERSION, "html"),
        (FileKind.OTHER, FileFormat.PLAIN_TEXT, "txt", ExtractorVariant.TEXT, None),
        (FileKind.OTHER, FileFormat.JSON, "json", ExtractorVariant.TEXT, None),
        (FileKind.PRESENTATION, FileFormat.OOXML_PRESENTATION, "pptx", ExtractorVariant.DOCUMENT_CONVERSION, "pptx"),
        (FileKind.PRESENTATION, FileFormat.ODF_PRESENTATION, "odp", ExtractorVariant.TEXT, None),
        (FileKind.SPREADSHEET, FileFormat.OOXML_SPREADSHEET, "bin", ExtractorVariant.SPREADSHEET, None),
        (FileKind.SPREADSHEET, FileFormat.MS_EXCEL, "bin", ExtractorVariant.UNSUPPORTED, None),
        (FileKind.EBOOK, FileFormat.EPUB, "epub", ExtractorVariant.UNSUPPORTED, None),
        (FileKind.ARCHIVE, FileFormat.ZIP, "zip", ExtractorVariant.TEXT, None),
        (FileKind.AUDIO, FileFormat.MP3, "mp3", ExtractorVariant.TEXT, None),
    ],
)
def test_route_table(kind, fmt, extension, variant, source_format) -> None:
    route = select_extractor(_cls(kind, fmt), extension)

    assert route.variant is variant
    assert route.source_format == source_format


@pytest.mark.parametrize("extension", ["xlsx", "XLS", ".xlsm", "xlsb", "xla", "xlam", "ods"])
def test_spreadsheet_suffixes_win_over_content(extension: str) -> None:
    route = select_extractor(_cls(FileKind.OTHER, FileFormat.ZIP), extension)

    assert route.variant is ExtractorVariant.SPREADSHEET


@pytest.mark.parametrize("extension", ["docx", "ODT"])
def test_document_suffixes_use_the_extension_as_source_format(extension: str) -> None:
    route = select_extractor(_cls(FileKind.ARCHIVE, FileFormat.ZIP), extension)

    assert route == ExtractorRoute(ExtractorVariant.DOCUMENT_CONVERSION)
    assert route.source_format is None


def test_selection_is_total() -> None:
    extensions = ["", "txt", *EXTENSION_ROUTES]
    for kind, fmt, ext in itertools.product(FileKind, FileFormat, extensions):
        assert isinstance(select_extractor(_cls(kind, fmt), ext), ExtractorRoute)


@pytest.mark.parametrize(
    "kind, fmt, extension, expected_cls",
    [
        (FileKind.DOCUMENT, FileFormat.PDF, "pdf", PdfExtractor),
        (FileKind.SPREADSHEET, FileFormat.OOXML_SPREADSHEET, "xlsx", SpreadsheetExtractor),
        (FileKind.IMAGE, FileFormat.PNG, "png", ImageExtractor),
        (FileKind.OTHER, FileFormat.PLAIN_TEXT, "txt", TextLineExtractor),
        (FileKind.EBOOK, FileFormat.MOBI, "mobi", UnsupportedExtractor),
        (FileKind.DOCUMENT, FileFormat.ODF_TEXT, "odt", DocumentConversionExtractor),
    ],
)
def test_create_extractor_classes(settings, kind, fmt, extension, expected_cls) -> None:
    classification = _cls(kind, fmt)
    route = select_extractor(classification, extension)

    extractor = create_extractor(
        route,
        f"input.{extension}",
        classification=classification,
        extension=extension,
        settings=settings,
    )

    assert type(extractor) is expected_cls
    assert extractor.path == f"input.{extension}"


def test_conversion_source_format_defaults_to_extension(settings) -> None:
    classification = _cls(FileKind.DOCUMENT, FileFormat.ODF_TEXT)
    converter = FakeConverter()

    extractor = create_extractor(
        select_extractor(classification, "odt"),
        "essay.odt",
        classification=classification,
        extension="odt",
        settings=settings,
        converter=converter,
    )

    assert isinstance(extractor, DocumentConversionExtractor)
    assert extractor.source_format == "odt"
    assert extractor.target_format == "markdown"
    assert extractor.converter is converter


def test_default_converter_uses_settings(settings) -> None:
    settings.converter_binary = "/opt/pandoc"
    settings.converter_timeout_s = 9
    classification = _cls(FileKind.OTHER, FileFormat.HTML)

    extractor = create_extractor(
        select_extractor(classification, "html"),
        "page.html",
        classification=classification,
        extension="html",
        settings=settings,
    )

    assert extractor.converter.binary == "/opt/pandoc"
    assert extractor.converter.timeout_s == 9
    assert extractor.source_format == "html"


@pytest.mark.parametrize(
    "kind, fmt, message",
    [
        (FileKind.EBOOK, FileFormat.EPUB, "Ebooks are not yet supported (format 'epub')"),
        (FileKind.IMAGE, FileFormat.GIF, "Images of type 'gif' are not supported"),
        (
            FileKind.SPREADSHEET,
            FileFormat.MS_EXCEL,
            "Spreadsheet format 'xls' of kind 'spreadsheet' is not implemented yet",
        ),
    ],
)
def test_unsupported_messages(settings, kind, fmt, message) -> None:
    classification = _cls(kind, fmt)

    extractor = create_extractor(
        select_extractor(classification, "bin"),
        "file.bin",
        classification=classification,
        extension="bin",
        settings=settings,
    )

    assert isinstance(extractor, UnsupportedExtractor)
    assert extractor.message == message

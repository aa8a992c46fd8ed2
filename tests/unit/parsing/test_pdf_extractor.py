from __future__ import annotations

from pathlib import Path
from unittest.mock import patch

import pytest

from docextract.core.exceptions import PdfOpenError
from docextract.parsing import PdfExtractor, PdfMetadata


def test_one_chunk_per_page(make_pdf) -> None:
    path = make_pdf(["First page", "Second page", "Third page"])

    chunks = list(PdfExtractor(str(path)).iter_chunks())

    assert [c.metadata for c in chunks] == [PdfMetadata(1), PdfMetadata(2), PdfMetadata(3)]
    assert [c.content.strip() for c in chunks] == ["First page", "Second page", "Third page"]
    assert not any(c.is_error for c in chunks)


def test_whole_file_joins_pages_with_form_feed(make_pdf) -> None:
    path = make_pdf(["Alpha", "Beta"])

    text = PdfExtractor(str(path)).extract_text()

    pages = text.split("\f")
    assert len(pages) == 3 and pages[-1] == ""
    assert [p.strip() for p in pages[:2]] == ["Alpha", "Beta"]


def test_page_failure_is_isolated(make_pdf) -> None:
    path = make_pdf(["a", "b", "c"])

    with patch.object(
        PdfExtractor, "_page_text", side_effect=["a", RuntimeError("bad font"), "c"]
    ):
        chunks = list(PdfExtractor(str(path)).iter_chunks())

    assert [c.content for c in chunks] == [
        "a",
        "Page 2 could not be extracted: bad font",
        "c",
    ]
    assert chunks[1].is_error
    assert chunks[1].metadata == PdfMetadata(2)


def test_corrupt_pdf_raises_open_error(tmp_path: Path) -> None:
    path = tmp_path / "broken.pdf"
    path.write_bytes(b"%PDF-1.4\nthis is not really a pdf\n")

    with pytest.raises(PdfOpenError) as exc_info:
        list(PdfExtractor(str(path)).iter_chunks())

    assert exc_info.value.exit_code == 4

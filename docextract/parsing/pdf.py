from __future__ import annotations

from io import StringIO
from typing import BinaryIO, Iterator, List, Optional

import structlog
from pdfminer.converter import TextConverter
from pdfminer.layout import LAParams
from pdfminer.pdfdocument import PDFDocument
from pdfminer.pdfinterp import PDFPageInterpreter, PDFResourceManager
from pdfminer.pdfpage import PDFPage
from pdfminer.pdfparser import PDFParser

from docextract.core.exceptions import PdfOpenError

from .base import BaseExtractor
from .chunks import Chunk, PdfMetadata

__all__: list[str] = ["PdfExtractor"]

logger = structlog.get_logger(__name__)

# pdfminer terminates every page's text with a form feed.
PAGE_SEPARATOR = "\f"


class PdfExtractor(BaseExtractor):
    """
    Extract text from a PDF page by page using pdfminer.six.

    A page whose text cannot be extracted yields an error chunk carrying that
    page's number; the remaining pages are still processed.  A document that
    cannot be parsed at all raises `PdfOpenError`.
    """

    name = "pdf"

    def __init__(self, path: str, *, laparams: Optional[LAParams] = None) -> None:
        super().__init__(path)
        self.laparams = laparams or LAParams()

    def _open(self) -> BinaryIO:
        try:
            return open(self.path, "rb")
        except OSError as e:
            raise PdfOpenError(f"Could not open PDF '{self.path}': {e}") from e

    def _load_pages(self, fh: BinaryIO) -> Iterator[PDFPage]:
        try:
            document = PDFDocument(PDFParser(fh))
            pages = PDFPage.create_pages(document)
            # Force the first page so structural errors surface as open errors.
            first = next(pages, None)
        except Exception as e:  # noqa: BLE001 – pdfminer raises a zoo of exception types
            logger.error("pdf_open_failed", path=self.path, error=str(e))
            raise PdfOpenError(f"Could not read PDF '{self.path}': {e}") from e
        if first is None:
            return
        yield first
        try:
            yield from pages
        except Exception as e:  # noqa: BLE001
            logger.error("pdf_page_tree_failed", path=self.path, error=str(e))
            raise PdfOpenError(f"Could not read page tree of '{self.path}': {e}") from e

    def _page_text(self, manager: PDFResourceManager, page: PDFPage) -> str:
        buffer = StringIO()
        device = TextConverter(manager, buffer, laparams=self.laparams)
        try:
            PDFPageInterpreter(manager, device).process_page(page)
        finally:
            device.close()
        text = buffer.getvalue()
        return text[: -len(PAGE_SEPARATOR)] if text.endswith(PAGE_SEPARATOR) else text

    def iter_chunks(self) -> Iterator[Chunk]:
        manager = PDFResourceManager()
        with self._open() as fh:
            page_number = 0
            for page_number, page in enumerate(self._load_pages(fh), start=1):
                try:
                    text = self._page_text(manager, page)
                except Exception as e:  # noqa: BLE001 – isolate page failures
                    logger.warning(
                        "page_extract_failed",
                        path=self.path,
                        page=page_number,
                        error=str(e),
                    )
                    yield Chunk(
                        content=f"Page {page_number} could not be extracted: {e}",
                        metadata=PdfMetadata(page_number),
                        error=str(e),
                    )
                    continue
                yield Chunk(content=text, metadata=PdfMetadata(page_number))
        logger.debug("pdf_pages_read", path=self.path, pages=page_number)

    def extract_text(self) -> str:
        pages: List[str] = [chunk.content for chunk in self.iter_chunks()]
        return "".join(page + PAGE_SEPARATOR for page in pages)

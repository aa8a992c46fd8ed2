from __future__ import annotations

from typing import Iterator

import structlog

from .base import BaseExtractor
from .chunks import Chunk, DocumentMetadata

__all__: list[str] = ["UnsupportedExtractor"]

logger = structlog.get_logger(__name__)


class UnsupportedExtractor(BaseExtractor):
    """
    Stand-in for recognised formats that are not (yet) extracted.

    Produces a single informational ``Document`` chunk holding *message*; the
    file itself is never opened.
    """

    name = "unsupported"

    def __init__(self, path: str, *, message: str) -> None:
        super().__init__(path)
        self.message = message

    def extract_text(self) -> str:
        logger.info("format_unsupported", path=self.path, message=self.message)
        return self.message

    def iter_chunks(self) -> Iterator[Chunk]:
        yield Chunk(content=self.extract_text(), metadata=DocumentMetadata())

from __future__ import annotations

import base64
from typing import Iterator

import structlog

from docextract.core.exceptions import SourceReadError

from .base import BaseExtractor
from .chunks import Chunk, ImageMetadata

__all__: list[str] = ["ImageExtractor"]

logger = structlog.get_logger(__name__)


class ImageExtractor(BaseExtractor):
    """
    Deliver an image as a base64 payload.

    Images are atomic: the whole file is read and encoded in one go and
    emitted as a single ``Image`` chunk.  No decoding or OCR happens here.
    """

    name = "image"

    def extract_text(self) -> str:
        try:
            with open(self.path, "rb") as fh:
                data = fh.read()
        except OSError as e:
            raise SourceReadError(f"Could not read image '{self.path}': {e}") from e
        logger.debug("image_encoded", path=self.path, size_bytes=len(data))
        return base64.b64encode(data).decode("ascii")

    def iter_chunks(self) -> Iterator[Chunk]:
        yield Chunk(content=self.extract_text(), metadata=ImageMetadata())

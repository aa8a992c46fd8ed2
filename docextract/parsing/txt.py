from __future__ import annotations

from typing import IO, Iterator, Optional

import structlog

from docextract.core.exceptions import SourceReadError

from .base import BaseExtractor
from .chunks import Chunk, TextMetadata

__all__: list[str] = ["TextLineExtractor"]

logger = structlog.get_logger(__name__)


class TextLineExtractor(BaseExtractor):
    """
    Read a plain-text file line by line.

    Lines are split on ``\\n`` only; a trailing ``\\r`` is dropped so CRLF
    files yield the same content as LF files.  Blank lines count towards the
    line number.  Decoding is strict: invalid input raises `SourceReadError`
    (lines from blocks decoded before the failing block are delivered
    first; the file is decoded in buffer-sized blocks).
    """

    name = "text"

    def __init__(self, path: str, *, encoding: str = "utf-8") -> None:
        super().__init__(path)
        self.encoding = encoding

    def _open(self, newline: str) -> IO[str]:
        try:
            return open(self.path, "r", encoding=self.encoding, newline=newline)
        except OSError as e:
            raise SourceReadError(f"Could not open '{self.path}': {e}") from e

    def _decode_error(
        self, exc: UnicodeDecodeError, after_line: Optional[int] = None
    ) -> SourceReadError:
        logger.warning(
            "text_decode_failed", path=self.path, encoding=self.encoding, line=after_line
        )
        where = "" if after_line is None else f" (after line {after_line})"
        return SourceReadError(
            f"'{self.path}' is not valid {self.encoding} text{where}: {exc.reason}"
        )

    def iter_chunks(self) -> Iterator[Chunk]:
        line_number = 0
        with self._open(newline="\n") as fh:
            try:
                for raw in fh:
                    line_number += 1
                    line = raw[:-1] if raw.endswith("\n") else raw
                    if line.endswith("\r"):
                        line = line[:-1]
                    yield Chunk(content=line, metadata=TextMetadata(line_number))
            except UnicodeDecodeError as e:
                raise self._decode_error(e, line_number) from e
        logger.debug("text_lines_read", path=self.path, lines=line_number)

    def extract_text(self) -> str:
        with self._open(newline="") as fh:
            try:
                return fh.read()
            except UnicodeDecodeError as e:
                raise self._decode_error(e) from e

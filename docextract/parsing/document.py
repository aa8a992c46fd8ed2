"""docextract/parsing/document.py
###############################################################################
Document conversion via an external converter (pandoc)
###############################################################################
Word-processor, presentation and HTML sources are converted to Markdown by an
external process.  The process is wrapped in a small capability interface,
:class:`DocumentConverter`, so the extractor can be exercised with a fake in
tests and the command line is configurable.

The converter is not incremental, so the whole output is delivered as a single
``Document`` chunk.
"""

from __future__ import annotations

import subprocess
from typing import Iterator, List, Protocol

import structlog

from docextract.core.exceptions import ConversionError

from .base import BaseExtractor
from .chunks import Chunk, DocumentMetadata

__all__: list[str] = [
    "DocumentConverter",
    "PandocConverter",
    "DocumentConversionExtractor",
    "TO_MARKDOWN",
]

logger = structlog.get_logger(__name__)

TO_MARKDOWN = "markdown"


class DocumentConverter(Protocol):
    """Anything that can turn a file into text of another format."""

    def convert(self, path: str, source_format: str, target_format: str) -> str:
        """Return the converted text or raise `ConversionError`."""
        ...


class PandocConverter:
    """Run ``<binary> <path> -f <source> -t <target>`` and return its stdout."""

    def __init__(self, binary: str = "pandoc", *, timeout_s: float = 120.0) -> None:
        self.binary = binary
        self.timeout_s = timeout_s

    def command(self, path: str, source_format: str, target_format: str) -> List[str]:
        return [self.binary, path, "-f", source_format.lower(), "-t", target_format]

    def convert(self, path: str, source_format: str, target_format: str) -> str:
        cmd = self.command(path, source_format, target_format)
        logger.debug("conversion_started", command=cmd)
        try:
            completed = subprocess.run(
                cmd, capture_output=True, timeout=self.timeout_s, check=False
            )
        except FileNotFoundError as e:
            raise ConversionError(
                f"Document converter '{self.binary}' was not found"
            ) from e
        except OSError as e:
            raise ConversionError(
                f"Document converter '{self.binary}' could not be started: {e}"
            ) from e
        except subprocess.TimeoutExpired as e:
            stderr = (e.stderr or b"").decode("utf-8", errors="replace")
            raise ConversionError(
                f"Conversion of '{path}' timed out after {self.timeout_s:g}s",
                stderr=stderr,
            ) from e

        if completed.returncode != 0:
            stderr = completed.stderr.decode("utf-8", errors="replace")
            logger.warning(
                "conversion_failed",
                path=path,
                source_format=source_format,
                returncode=completed.returncode,
                stderr=stderr,
            )
            raise ConversionError(
                f"Conversion of '{path}' from '{source_format}' to "
                f"'{target_format}' failed: {stderr.strip()}",
                stderr=stderr,
            )

        try:
            return completed.stdout.decode("utf-8")
        except UnicodeDecodeError as e:
            raise ConversionError(
                f"Converter returned non UTF-8 output for '{path}'"
            ) from e


class DocumentConversionExtractor(BaseExtractor):
    """Convert the whole document and deliver it as one chunk."""

    name = "document"

    def __init__(
        self,
        path: str,
        *,
        source_format: str,
        converter: DocumentConverter,
        target_format: str = TO_MARKDOWN,
    ) -> None:
        super().__init__(path)
        self.source_format = source_format
        self.target_format = target_format
        self.converter = converter

    def extract_text(self) -> str:
        text = self.converter.convert(self.path, self.source_format, self.target_format)
        logger.debug(
            "conversion_complete",
            path=self.path,
            source_format=self.source_format,
            chars=len(text),
        )
        return text

    def iter_chunks(self) -> Iterator[Chunk]:
        yield Chunk(content=self.extract_text(), metadata=DocumentMetadata())

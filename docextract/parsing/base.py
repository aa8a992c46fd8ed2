"""
Base Extractor Interface

Every extractor variant inherits from `BaseExtractor` and implements two
renderings of the same source:

- ``iter_chunks()`` – a blocking, lazy, single-pass generator of `Chunk`
  objects.  Streaming mode runs it inside a worker thread.
- ``extract_text()`` – whole-file mode; runs to completion on the caller's
  thread and returns one aggregated string.

Extractors are constructed per extraction call and own their file, workbook
or subprocess handle exclusively.  Fatal failures raise a subclass of
:class:`docextract.core.exceptions.ExtractionError`; failures scoped to a
single sheet or page are yielded as error chunks instead.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import ClassVar, Iterator

from .chunks import Chunk

__all__: list[str] = ["BaseExtractor"]


class BaseExtractor(ABC):
    """Abstract base class for all extractor variants."""

    #: Short identifier used in log events.
    name: ClassVar[str] = "base"

    def __init__(self, path: str) -> None:
        self.path = path

    @abstractmethod
    def iter_chunks(self) -> Iterator[Chunk]:
        """Yield chunks in source order; raise on fatal errors."""

    @abstractmethod
    def extract_text(self) -> str:
        """Return the whole source rendered as a single string."""

    def __repr__(self) -> str:
        return f"{type(self).__name__}(path={self.path!r})"

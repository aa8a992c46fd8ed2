"""
Core Custom Exceptions

Domain-specific exceptions raised by the extraction pipeline. Every fatal
failure of an extraction call surfaces as a subclass of `ExtractionError`, so
callers (and the CLI) can catch one type and still tell the failure kinds
apart.

Each class carries an ``exit_code`` which the command-line entry points use as
the process status.

Defined Exceptions:
- `SourceNotFoundError`: the input path does not exist. Checked before any
  format probing. Also a `FileNotFoundError`.
- `ClassificationError`: the format sniffer could not inspect the file.
- `ContainerOpenError`: a workbook or PDF container cannot be parsed. Concrete
  subclasses are `WorkbookOpenError` and `PdfOpenError`.
- `ConversionError`: the external document converter failed; carries the
  converter's diagnostic output in ``stderr``.
- `SourceReadError`: generic read or decode failure on a plain/binary file.
  Also an `OSError`.

Failures scoped to a single sheet or page are *not* exceptions at this level;
extractors turn them into error chunks and carry on.
"""

from __future__ import annotations

__all__: list[str] = [
    "ExtractionError",
    "SourceNotFoundError",
    "ClassificationError",
    "ContainerOpenError",
    "WorkbookOpenError",
    "PdfOpenError",
    "ConversionError",
    "SourceReadError",
]


class ExtractionError(Exception):
    """Base class for errors that abort a whole extraction call."""

    exit_code: int = 1


class SourceNotFoundError(ExtractionError, FileNotFoundError):
    """Raised when the input path does not exist."""

    exit_code = 2

    def __init__(self, path: str) -> None:
        super().__init__(f"File does not exist: {path}")
        self.path = path


class ClassificationError(ExtractionError):
    """Raised when the format sniffer fails (unreadable header, IO failure)."""

    exit_code = 3


class ContainerOpenError(ExtractionError):
    """A format-specific container could not be opened or parsed."""

    exit_code = 4


class WorkbookOpenError(ContainerOpenError):
    """Raised when a spreadsheet workbook cannot be opened."""

    pass


class PdfOpenError(ContainerOpenError):
    """Raised when a PDF document is corrupt or unreadable."""

    pass


class ConversionError(ExtractionError):
    """Raised when the external document converter fails.

    ``stderr`` holds the converter's diagnostic output verbatim so it can be
    shown to the user as-is.
    """

    exit_code = 5

    def __init__(self, message: str, *, stderr: str = "") -> None:
        super().__init__(message)
        self.stderr = stderr


class SourceReadError(ExtractionError, OSError):
    """Raised on read or decode failures for plain-text and binary files."""

    exit_code = 6

from __future__ import annotations

from .classifier import classify, file_extension
from .types import ClassificationResult, FileFormat, FileKind

__all__: list[str] = [
    "ClassificationResult",
    "FileFormat",
    "FileKind",
    "classify",
    "file_extension",
]

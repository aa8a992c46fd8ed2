"""docextract – stream text out of heterogeneous files.

Plain text, spreadsheets, PDFs, word-processor documents, presentations and
images are classified, routed to a format-specific extractor and returned
either as one string (:func:`extract_text`) or as an async stream of labelled
chunks (:func:`stream_chunks`).
"""

from __future__ import annotations

from .core.exceptions import ExtractionError
from .ingestion.streamers import ChunkStream
from .parsing.chunks import Chunk
from .pipeline import extract_text, stream_chunks

__all__: list[str] = [
    "Chunk",
    "ChunkStream",
    "ExtractionError",
    "extract_text",
    "stream_chunks",
]

__version__ = "0.1.0"

from __future__ import annotations

from .streamers import ChunkStream
from .validators import validate_path

__all__: list[str] = ["ChunkStream", "validate_path"]

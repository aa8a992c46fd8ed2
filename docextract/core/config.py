from __future__ import annotations

import os
from typing import Optional

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

__all__: list[str] = ["Settings", "get_settings"]


class Settings(BaseSettings):
    """
    Extraction settings, loaded from environment variables.
    """

    debug: bool = False
    log_json: bool = False

    # External document converter (pandoc-compatible command line)
    converter_binary: str = "pandoc"
    converter_timeout_s: float = Field(default=120.0, gt=0)
    target_format: str = "markdown"

    # Streaming mode
    stream_buffer_size: int = Field(default=10, ge=1)
    producer_poll_interval_s: float = Field(default=0.05, gt=0)

    # Classification / text decoding
    sniff_bytes: int = Field(default=8192, ge=64)
    text_encoding: str = "utf-8"

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    @field_validator("converter_binary", "target_format", "text_encoding")
    @classmethod
    def _not_blank(cls, v: str) -> str:
        """Reject empty strings for command/format/encoding names."""
        if not v or not v.strip():
            raise ValueError("value must not be empty")
        return v.strip()

    @field_validator("text_encoding")
    @classmethod
    def _known_encoding(cls, v: str) -> str:
        import codecs

        try:
            codecs.lookup(v)
        except LookupError as exc:
            raise ValueError(f"unknown text encoding: {v}") from exc
        return v


# Public accessor – manual caching to support special behaviour in tests
_CACHED_SETTINGS: Optional[Settings] = None


def get_settings() -> Settings:  # noqa: D401 – accessor helper
    """Return a **singleton** Settings instance unless running under pytest.

    While ``PYTEST_CURRENT_TEST`` is present in the environment a **fresh**
    instance is built on every call so tests can tweak environment variables
    with ``monkeypatch`` without clearing caches by hand.
    """

    global _CACHED_SETTINGS  # noqa: PLW0603 – module-level singleton

    if "PYTEST_CURRENT_TEST" in os.environ:
        return Settings()

    if _CACHED_SETTINGS is None:
        _CACHED_SETTINGS = Settings()

    return _CACHED_SETTINGS


def _clear_settings_cache() -> None:  # noqa: D401 – helper for tests
    """Clear the internal Settings singleton (used by unit-tests)."""

    global _CACHED_SETTINGS
    _CACHED_SETTINGS = None


get_settings.cache_clear = _clear_settings_cache  # type: ignore[attr-defined]

# ruff: noqa: E402
from __future__ import annotations

import sys
from pathlib import Path

# Ensure repository root is first on sys.path
_repo_root: Path = Path(__file__).resolve().parent.parent  # tests/ -> repo root
if str(_repo_root) not in sys.path:
    sys.path.insert(0, str(_repo_root))

import logging
import zipfile
from typing import Any, Callable, Dict, List, Optional, Sequence, Tuple

import pytest
import structlog

from docextract.core.config import Settings
from docextract.core.exceptions import ConversionError

_SETTINGS_ENV_VARS: Tuple[str, ...] = (
    "DEBUG",
    "LOG_JSON",
    "CONVERTER_BINARY",
    "CONVERTER_TIMEOUT_S",
    "TARGET_FORMAT",
    "STREAM_BUFFER_SIZE",
    "PRODUCER_POLL_INTERVAL_S",
    "SNIFF_BYTES",
    "TEXT_ENCODING",
)


@pytest.fixture(autouse=True)
def _disable_dotenv(monkeypatch):
    """Prevent Settings from reading the developer *.env* file.

    Unit-tests must operate against a *clean* environment; individual tests
    remain free to set variables via ``monkeypatch``.
    """

    monkeypatch.setitem(Settings.model_config, "env_file", None)
    for name in _SETTINGS_ENV_VARS:
        monkeypatch.delenv(name, raising=False)


@pytest.fixture(autouse=True)
def _quiet_structlog():
    """Keep log events out of captured stdout unless a test configures logging."""

    structlog.configure(
        wrapper_class=structlog.make_filtering_bound_logger(logging.CRITICAL),
        cache_logger_on_first_use=False,
    )
    yield
    structlog.reset_defaults()


@pytest.fixture
def settings() -> Settings:
    """Default settings with a short producer poll interval for fast tests."""
    return Settings(producer_poll_interval_s=0.01)


# ---------------------------------------------------------------------------
# File builders
# ---------------------------------------------------------------------------


def build_pdf(pages: Sequence[str]) -> bytes:
    """Assemble a minimal, valid PDF with one line of Helvetica text per page."""

    page_ids = [4 + 2 * i for i in range(len(pages))]
    kids = " ".join(f"{pid} 0 R" for pid in page_ids)
    objects: List[bytes] = [
        b"<< /Type /Catalog /Pages 2 0 R >>",
        f"<< /Type /Pages /Kids [{kids}] /Count {len(pages)} >>".encode(),
        b"<< /Type /Font /Subtype /Type1 /BaseFont /Helvetica >>",
    ]
    for page_id, text in zip(page_ids, pages):
        objects.append(
            (
                "<< /Type /Page /Parent 2 0 R /MediaBox [0 0 612 792] "
                "/Resources << /Font << /F1 3 0 R >> >> "
                f"/Contents {page_id + 1} 0 R >>"
            ).encode()
        )
        stream = f"BT /F1 24 Tf 72 700 Td ({text}) Tj ET".encode()
        objects.append(
            b"<< /Length %d >>\nstream\n" % len(stream) + stream + b"\nendstream"
        )

    out = bytearray(b"%PDF-1.4\n")
    offsets: List[int] = []
    for number, body in enumerate(objects, start=1):
        offsets.append(len(out))
        out += f"{number} 0 obj\n".encode() + body + b"\nendobj\n"
    xref_at = len(out)
    out += f"xref\n0 {len(objects) + 1}\n".encode()
    out += b"0000000000 65535 f \n"
    for offset in offsets:
        out += f"{offset:010d} 00000 n \n".encode()
    out += (
        f"trailer\n<< /Size {len(objects) + 1} /Root 1 0 R >>\n"
        f"startxref\n{xref_at}\n%%EOF\n"
    ).encode()
    return bytes(out)


@pytest.fixture
def make_pdf(tmp_path: Path) -> Callable[..., Path]:
    def _factory(pages: Sequence[str], name: str = "doc.pdf") -> Path:
        path = tmp_path / name
        path.write_bytes(build_pdf(pages))
        return path

    return _factory


@pytest.fixture
def make_workbook(tmp_path: Path) -> Callable[..., Path]:
    """Write an .xlsx with openpyxl: ``{sheet_name: [row, ...]}``."""

    def _factory(sheets: Dict[str, List[List[Any]]], name: str = "book.xlsx") -> Path:
        from openpyxl import Workbook

        workbook = Workbook()
        workbook.remove(workbook.active)
        for sheet_name, rows in sheets.items():
            sheet = workbook.create_sheet(sheet_name)
            for row in rows:
                sheet.append(row)
        path = tmp_path / name
        workbook.save(path)
        return path

    return _factory


@pytest.fixture
def make_image(tmp_path: Path) -> Callable[..., Path]:
    def _factory(name: str = "photo.jpg", fmt: str = "JPEG") -> Path:
        from PIL import Image

        path = tmp_path / name
        Image.new("RGB", (8, 8), color=(200, 30, 30)).save(path, format=fmt)
        return path

    return _factory


@pytest.fixture
def make_zip(tmp_path: Path) -> Callable[..., Path]:
    """Write a ZIP container with the given ``{member: content}``."""

    def _factory(name: str, members: Dict[str, str]) -> Path:
        path = tmp_path / name
        with zipfile.ZipFile(path, "w") as archive:
            for member, content in members.items():
                archive.writestr(member, content)
        return path

    return _factory


# ---------------------------------------------------------------------------
# Fakes
# ---------------------------------------------------------------------------


class FakeConverter:
    """In-memory stand-in for the pandoc subprocess."""

    def __init__(self, output: str = "# Converted\n", error: Optional[str] = None):
        self.output = output
        self.error = error
        self.calls: List[Tuple[str, str, str]] = []

    def convert(self, path: str, source_format: str, target_format: str) -> str:
        self.calls.append((path, source_format, target_format))
        if self.error is not None:
            raise ConversionError(f"conversion failed: {self.error}", stderr=self.error)
        return self.output


@pytest.fixture
def fake_converter() -> FakeConverter:
    return FakeConverter()

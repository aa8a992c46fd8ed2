"""docextract/parsing/spreadsheet.py
###############################################################################
Spreadsheet extraction adapter
###############################################################################
Turns every sheet of a workbook into comma-joined rows.  Workbooks are read
through **pandas** using the *calamine* engine, which covers every suffix the
dispatcher routes here (xlsx, xlsm, xlsb, xlam, xls, xla, ods) with one
reader.

Design considerations
=====================
1. **Typed cells** – sheets are parsed with ``header=None`` and
   ``dtype=object`` so pandas hands back the reader's Python values
   unchanged; NA coercion is disabled so a literal ``"NA"`` stays text.
2. **Errors are data** – a sheet that fails to parse yields one error chunk
   naming the sheet and the extractor moves on.  Only a workbook that cannot
   be opened at all is fatal (`WorkbookOpenError`).
3. **Stable cell rendering** – see :func:`cell_to_text`.  The format is
   locale-independent and identical between whole-file and streaming mode.
"""

from __future__ import annotations

import math
from datetime import date, datetime, time
from typing import Any, Final, Iterable, Iterator, List, Optional, Sequence, Tuple

import numpy as np
import pandas as pd
import structlog

from docextract.core.exceptions import WorkbookOpenError

from .base import BaseExtractor
from .chunks import Chunk, SpreadsheetMetadata

__all__: list[str] = [
    "SpreadsheetExtractor",
    "WorkbookReader",
    "cell_to_text",
    "DATETIME_FORMAT",
]

logger = structlog.get_logger(__name__)

DATETIME_FORMAT: Final[str] = "%d.%m.%Y %H:%M:%S"
CELL_SEPARATOR: Final[str] = ","


def cell_to_text(value: Any) -> str:
    """Render one spreadsheet cell as text.

    - empty / NA → ``""``
    - string → stripped string
    - boolean → ``true`` / ``false``
    - integer, or float without a fractional part → plain integer (``3``)
    - other float → shortest round-trip form (``2.5``)
    - datetime / date → ``DD.MM.YYYY HH:MM:SS``
    - anything else (time-only, durations, error cells) → ``""``
    """

    if value is None:
        return ""
    if isinstance(value, str):
        return value.strip()
    if isinstance(value, (bool, np.bool_)):
        return "true" if value else "false"
    if isinstance(value, (int, np.integer)):
        return str(int(value))
    if isinstance(value, (float, np.floating)):
        number = float(value)
        if math.isnan(number):
            return ""
        if number.is_integer():
            return str(int(number))
        return repr(number)
    if isinstance(value, datetime):
        if pd.isna(value):  # NaT
            return ""
        return value.strftime(DATETIME_FORMAT)
    if isinstance(value, date):
        return datetime.combine(value, time()).strftime(DATETIME_FORMAT)
    return ""


def _row_to_text(row: Iterable[Any]) -> str:
    return CELL_SEPARATOR.join(cell_to_text(cell) for cell in row)


class WorkbookReader:
    """Open a workbook and read its sheets as rows of typed cells."""

    def __init__(self, path: str) -> None:
        self.path = path
        try:
            self._book = pd.ExcelFile(path, engine="calamine")
        except Exception as e:  # noqa: BLE001 – any reader failure means "cannot open"
            logger.error("workbook_open_failed", path=path, error=str(e))
            raise WorkbookOpenError(f"Could not open workbook '{path}': {e}") from e

    @property
    def sheet_names(self) -> List[str]:
        return [str(name) for name in self._book.sheet_names]

    def read_rows(self, sheet_name: str) -> List[Tuple[Any, ...]]:
        frame = self._book.parse(
            sheet_name,
            header=None,
            dtype=object,
            keep_default_na=False,
            na_values=[],
        )
        return list(frame.itertuples(index=False, name=None))

    def close(self) -> None:
        self._book.close()


class SpreadsheetExtractor(BaseExtractor):
    """Emit one chunk per row, sheet by sheet, in workbook order."""

    name = "spreadsheet"

    def _sheets(
        self, reader: WorkbookReader
    ) -> Iterator[Tuple[str, Optional[Sequence[Tuple[Any, ...]]], Optional[str]]]:
        """Yield ``(sheet_name, rows, error)`` – exactly one of rows/error is set."""

        for sheet_name in reader.sheet_names:
            try:
                rows = reader.read_rows(sheet_name)
            except Exception as e:  # noqa: BLE001 – one bad sheet must not abort the workbook
                logger.warning(
                    "sheet_read_failed", path=self.path, sheet=sheet_name, error=str(e)
                )
                yield sheet_name, None, str(e)
                continue
            yield sheet_name, rows, None

    def iter_chunks(self) -> Iterator[Chunk]:
        reader = WorkbookReader(self.path)
        emitted = 0
        try:
            for sheet_name, rows, error in self._sheets(reader):
                if rows is None:
                    yield Chunk(
                        content=f"Sheet '{sheet_name}' could not be read: {error}",
                        metadata=SpreadsheetMetadata(sheet_name, None),
                        error=error,
                    )
                    continue
                for row_number, row in enumerate(rows, start=1):
                    yield Chunk(
                        content=_row_to_text(row),
                        metadata=SpreadsheetMetadata(sheet_name, row_number),
                    )
                    emitted += 1
        finally:
            reader.close()
            logger.debug("workbook_closed", path=self.path, rows_emitted=emitted)

    def extract_text(self) -> str:
        reader = WorkbookReader(self.path)
        parts: List[str] = []
        try:
            for sheet_name, rows, error in self._sheets(reader):
                if rows is None:
                    parts.append(f"Sheet '{sheet_name}' could not be read: {error}\n")
                    continue
                parts.append(f"{sheet_name}:\n")
                parts.extend(_row_to_text(row) + "\n" for row in rows)
        finally:
            reader.close()
        return "".join(parts)

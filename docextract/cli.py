"""Command-line entry points.

``docextract extract -p FILE``         whole-file mode, prints the aggregated content.
``docextract-stream extract -p FILE``  streaming mode, prints one labelled block per chunk.

Fatal errors are printed in place of the content (stdout in whole-file mode,
*stderr* in streaming mode) and the process exits with the error's
``exit_code``; per-sheet/per-page errors are printed in-band like any other
chunk.
"""

from __future__ import annotations

import argparse
import asyncio
import sys
from typing import List, Optional, TextIO

import structlog

from docextract.core.config import Settings, get_settings
from docextract.core.exceptions import ExtractionError
from docextract.core.logging import configure_logging
from docextract.parsing.chunks import Chunk
from docextract.pipeline import extract_text, stream_chunks

__all__: list[str] = ["main", "main_stream", "format_chunk", "run", "run_stream"]

logger = structlog.get_logger(__name__)


def _parse_args(argv: Optional[List[str]], description: str) -> argparse.Namespace:  # noqa: D401
    parser = argparse.ArgumentParser(
        description=description,
        formatter_class=argparse.ArgumentDefaultsHelpFormatter,
    )
    parser.add_argument(
        "--debug",
        action="store_true",
        help="Enable DEBUG logging (also enabled by DEBUG=true).",
    )
    parser.add_argument(
        "--json-logs",
        dest="json_logs",
        action="store_true",
        help="Emit logs as JSON lines on stderr (also enabled by LOG_JSON=true).",
    )
    commands = parser.add_subparsers(dest="command", required=True)
    extract = commands.add_parser("extract", help="Extract content from one file.")
    extract.add_argument(
        "--path", "-p", required=True, help="Path of the file to extract."
    )
    return parser.parse_args(argv)


def _setup(args: argparse.Namespace) -> Settings:
    settings = get_settings()
    configure_logging(
        debug=args.debug or settings.debug,
        json_logs=args.json_logs or settings.log_json,
    )
    return settings


def _fail(error: ExtractionError, out: TextIO) -> int:
    logger.debug(
        "extraction_failed", error_type=type(error).__name__, exit_code=error.exit_code
    )
    print(str(error), file=out)
    return error.exit_code


def format_chunk(chunk: Chunk) -> str:
    """Render *chunk* as ``<label>\\n<content>``."""
    return f"{chunk.metadata.label()}\n{chunk.content}"


def main(argv: Optional[List[str]] = None) -> int:
    """Whole-file mode."""
    args = _parse_args(argv, "Extract the content of a file as one text.")
    settings = _setup(args)
    try:
        text = extract_text(args.path, settings=settings)
    except ExtractionError as e:
        return _fail(e, sys.stdout)
    sys.stdout.write(text)
    if text and not text.endswith("\n"):
        sys.stdout.write("\n")
    return 0


async def _stream(path: str, settings: Settings) -> int:
    try:
        stream = await stream_chunks(path, settings=settings)
        async with stream:
            async for chunk in stream:
                print(format_chunk(chunk))
                print()
    except ExtractionError as e:
        return _fail(e, sys.stderr)
    return 0


def main_stream(argv: Optional[List[str]] = None) -> int:
    """Streaming mode."""
    args = _parse_args(argv, "Extract the content of a file chunk by chunk.")
    settings = _setup(args)
    return asyncio.run(_stream(args.path, settings))


def run() -> None:  # pragma: no cover - console script shim
    sys.exit(main())


def run_stream() -> None:  # pragma: no cover - console script shim
    sys.exit(main_stream())


if __name__ == "__main__":  # pragma: no cover
    run()

from __future__ import annotations

import logging
from unittest.mock import patch

import pytest
import structlog

import docextract.core.logging as logging_module
from docextract.core.logging import (
    _build_processors,
    _configure_stdlib_logging,
    _ensure_extraction_context,
    configure_logging,
)


@pytest.fixture(autouse=True)
def reset_logging_state(monkeypatch: pytest.MonkeyPatch):
    """Ensure logging configuration state is reset before and after each test."""
    monkeypatch.setattr(logging_module, "_LOGGING_CONFIGURED", False)
    structlog.reset_defaults()
    root_logger = logging.getLogger()
    original_handlers = root_logger.handlers[:]
    original_level = root_logger.level
    pdfminer_level = logging.getLogger("pdfminer").level
    root_logger.handlers.clear()

    yield

    structlog.reset_defaults()
    root_logger.handlers.clear()
    for handler in original_handlers:
        root_logger.addHandler(handler)
    root_logger.setLevel(original_level)
    logging.getLogger("pdfminer").setLevel(pdfminer_level)


def test_configure_logging_idempotency():
    """configure_logging only configures once."""
    with (
        patch("docextract.core.logging._configure_stdlib_logging") as mock_stdlib_config,
        patch("structlog.configure") as mock_structlog_config,
    ):
        configure_logging(debug=True)
        assert logging_module._LOGGING_CONFIGURED is True
        mock_stdlib_config.assert_called_once_with(logging.DEBUG)
        mock_structlog_config.assert_called_once()

        mock_stdlib_config.reset_mock()
        mock_structlog_config.reset_mock()

        configure_logging(debug=False)
        assert logging_module._LOGGING_CONFIGURED is True
        mock_stdlib_config.assert_not_called()
        mock_structlog_config.assert_not_called()


@pytest.mark.parametrize("debug, level", [(True, logging.DEBUG), (False, logging.INFO)])
def test_configure_logging_sets_level(debug: bool, level: int):
    with (
        patch("docextract.core.logging._configure_stdlib_logging") as mock_stdlib_config,
        patch("structlog.make_filtering_bound_logger") as mock_make_filtering_logger,
        patch("structlog.configure") as mock_structlog_config,
    ):
        configure_logging(debug=debug)

        mock_stdlib_config.assert_called_once_with(level)
        mock_make_filtering_logger.assert_called_once_with(level)
        assert (
            mock_structlog_config.call_args[1]["wrapper_class"]
            == mock_make_filtering_logger.return_value
        )


def test_configure_logging_json_renderer():
    with (
        patch("docextract.core.logging._configure_stdlib_logging"),
        patch("structlog.configure") as mock_structlog_config,
    ):
        configure_logging(json_logs=True)

    processors = mock_structlog_config.call_args[1]["processors"]
    assert isinstance(processors[-1], structlog.processors.JSONRenderer)


def test_console_renderer_is_default():
    processors = _build_processors(json_logs=False)
    assert isinstance(processors[-1], structlog.dev.ConsoleRenderer)
    assert structlog.contextvars.merge_contextvars in processors


def test_extraction_context_defaults_path():
    assert _ensure_extraction_context(None, "info", {"event": "x"})["path"] is None
    bound = _ensure_extraction_context(None, "info", {"event": "x", "path": "a.txt"})
    assert bound["path"] == "a.txt"


def test_stdlib_logging_writes_to_stderr_and_quiets_pdfminer():
    import sys

    _configure_stdlib_logging(logging.DEBUG)

    handlers = logging.getLogger().handlers
    assert len(handlers) == 1
    assert handlers[0].stream is sys.stderr
    assert logging.getLogger("pdfminer").level == logging.WARNING

"""Tests for beadforge.logging module."""

from __future__ import annotations

import json
import logging
import sys
from pathlib import Path
from typing import Iterator

import pytest

from beadforge.logging import (
    DEFAULT_FORMAT,
    LOGGER_NAME,
    VERBOSE_FORMAT,
    JsonFormatter,
    get_logger,
    setup_logging,
)


def _record(
    msg: str = "painted %d cells", args: tuple = (4,), **extra: object
) -> logging.LogRecord:
    record = logging.LogRecord(
        name="beadforge.editor",
        level=logging.INFO,
        pathname=__file__,
        lineno=1,
        msg=msg,
        args=args,
        exc_info=None,
    )
    for key, value in extra.items():
        setattr(record, key, value)
    return record


@pytest.fixture(autouse=True)
def clean_logger() -> Iterator[None]:
    """Detach (and close) every handler on the package logger around each test."""

    def _reset() -> None:
        logger = logging.getLogger(LOGGER_NAME)
        for handler in list(logger.handlers):
            handler.close()
            logger.removeHandler(handler)
        logger.setLevel(logging.WARNING)

    _reset()
    yield
    _reset()


def _handlers(kind: type) -> list[logging.Handler]:
    return [h for h in logging.getLogger(LOGGER_NAME).handlers if type(h) is kind]


class TestGetLogger:
    """Tests for the get_logger factory function."""

    def test_namespace(self) -> None:
        assert get_logger("editor").name == "beadforge.editor"

    def test_child_of_package_logger(self) -> None:
        logging.getLogger(LOGGER_NAME)
        lg = get_logger("converter")
        assert lg.parent is not None
        assert lg.parent.name == LOGGER_NAME


class TestSetupLogging:
    """Tests for the setup_logging configuration function."""

    def test_returns_package_logger_at_level(self) -> None:
        logger = setup_logging(level=logging.DEBUG)
        assert logger.name == LOGGER_NAME
        assert logger.level == logging.DEBUG

    def test_default_format_has_no_timestamp(self) -> None:
        setup_logging()
        fmt = _handlers(logging.StreamHandler)[0].formatter
        assert fmt is not None
        assert fmt._fmt == DEFAULT_FORMAT

    def test_verbose_format(self) -> None:
        setup_logging(verbose=True)
        fmt = _handlers(logging.StreamHandler)[0].formatter
        assert fmt is not None
        assert fmt._fmt == VERBOSE_FORMAT

    def test_stream_goes_to_stderr(self) -> None:
        setup_logging()
        handler = _handlers(logging.StreamHandler)[0]
        assert isinstance(handler, logging.StreamHandler)
        assert handler.stream is sys.stderr

    def test_repeated_calls_do_not_stack_handlers(self, tmp_path: Path) -> None:
        log_file = tmp_path / "beadforge.log"
        setup_logging(log_file=log_file)
        setup_logging(level=logging.WARNING, log_file=log_file)
        assert len(_handlers(logging.StreamHandler)) == 1
        assert len(_handlers(logging.FileHandler)) == 1
        assert logging.getLogger(LOGGER_NAME).level == logging.WARNING

    def test_log_file_creates_parents_and_uses_timestamps(self, tmp_path: Path) -> None:
        log_file = tmp_path / "logs" / "nested" / "run.log"
        setup_logging(log_file=log_file)
        handler = _handlers(logging.FileHandler)[0]
        assert isinstance(handler, logging.FileHandler)
        assert Path(handler.baseFilename) == log_file.resolve()
        assert handler.formatter is not None
        assert handler.formatter._fmt == VERBOSE_FORMAT

        get_logger("editor").info("hello beads")
        handler.flush()
        assert "hello beads" in log_file.read_text(encoding="utf-8")

    def test_json_logs_apply_to_every_handler(self, tmp_path: Path) -> None:
        log_file = tmp_path / "run.jsonl"
        setup_logging(log_file=log_file, json_logs=True)
        for handler in logging.getLogger(LOGGER_NAME).handlers:
            assert isinstance(handler.formatter, JsonFormatter)

        get_logger("editor").warning(
            "set_cell: %d cell(s) changed", 1, extra={"edit": "set_cell", "cells": 1}
        )
        _handlers(logging.FileHandler)[0].flush()
        payload = json.loads(log_file.read_text(encoding="utf-8").splitlines()[-1])
        assert payload["edit"] == "set_cell"
        assert payload["cells"] == 1


class TestJsonFormatter:
    """Tests for the machine-readable formatter."""

    def test_basic_fields(self) -> None:
        payload = json.loads(JsonFormatter().format(_record()))
        assert payload["level"] == "INFO"
        assert payload["logger"] == "beadforge.editor"
        assert payload["message"] == "painted 4 cells"
        assert "timestamp" in payload
        assert "exception" not in payload
        assert "stage" not in payload

    def test_context_fields_included(self) -> None:
        record = _record("Failed to load image", (), stage="decode", tool="fill", cells=0)
        payload = json.loads(JsonFormatter().format(record))
        assert payload["stage"] == "decode"
        assert payload["tool"] == "fill"
        assert payload["cells"] == 0

    def test_exception_included(self) -> None:
        try:
            raise ValueError("bad pixel")
        except ValueError:
            record = _record()
            record.exc_info = sys.exc_info()
        payload = json.loads(JsonFormatter().format(record))
        assert "ValueError: bad pixel" in payload["exception"]


class TestFormatStrings:
    """Tests for the format string constants."""

    def test_default_format_fields(self) -> None:
        for field in ("%(levelname)", "%(name)", "%(message)"):
            assert field in DEFAULT_FORMAT
        assert "%(asctime)" not in DEFAULT_FORMAT

    def test_verbose_format_has_timestamp(self) -> None:
        assert "%(asctime)" in VERBOSE_FORMAT

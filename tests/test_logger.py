"""Tests for the JSON formatter and CourierLogger handler setup."""

import json
import logging
import sys
import os
from logging.handlers import RotatingFileHandler

import pytest
from dotenv import load_dotenv

sys.path.insert(0, os.path.join(os.path.dirname(__file__), ".."))

from core.logger import CourierLogger, _JsonFormatter

LOG_DIR_ENV = "TGCOURIER_LOG_DIR"


def _close(handlers) -> None:
    for handler in handlers:
        handler.close()


def _record(msg: str = "hello", **extra) -> logging.LogRecord:
    record = logging.LogRecord("tgcourier", logging.INFO, __file__, 1, msg, (), None)
    record.__dict__.update(extra)
    return record


class TestJsonFormatter:
    """Validate the single-line JSON rendering."""

    def test_base_keys_and_extra(self) -> None:
        entry = json.loads(_JsonFormatter().format(_record("Message sent", chat_id=42)))
        assert entry["message"] == "Message sent"
        assert entry["level"] == "INFO"
        assert entry["chat_id"] == 42

    def test_exception_traceback(self) -> None:
        try:
            raise RuntimeError("boom")
        except RuntimeError:
            record = logging.LogRecord("tgcourier", logging.ERROR, __file__, 1, "failed", (), sys.exc_info())
        entry = json.loads(_JsonFormatter().format(record))
        assert "RuntimeError: boom" in entry["exc_info"]


class TestHandlers:
    """Validate that the log directory is read when handlers are built."""

    def test_directory_from_environment(self, monkeypatch: pytest.MonkeyPatch, tmp_path) -> None:
        monkeypatch.setenv(LOG_DIR_ENV, str(tmp_path / "custom"))
        handlers = CourierLogger._build_handlers(logging.INFO)
        try:
            files = [h for h in handlers if isinstance(h, RotatingFileHandler)]
            assert len(files) == 1
            assert files[0].baseFilename == str(tmp_path / "custom" / "tgcourier.log")
        finally:
            _close(handlers)

    def test_empty_value_disables_file(self, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setenv(LOG_DIR_ENV, "")
        handlers = CourierLogger._build_handlers(logging.INFO)
        try:
            assert len(handlers) == 1
            assert not isinstance(handlers[0], RotatingFileHandler)
        finally:
            _close(handlers)

    def test_value_from_dotenv_file(self, monkeypatch: pytest.MonkeyPatch, tmp_path) -> None:
        # Registered first so the variable load_dotenv sets is removed afterwards.
        monkeypatch.setenv(LOG_DIR_ENV, "")
        monkeypatch.delenv(LOG_DIR_ENV)
        env_file = tmp_path / ".env"
        env_file.write_text(f"{LOG_DIR_ENV}={tmp_path / 'from-dotenv'}\n")

        load_dotenv(env_file)
        handlers = CourierLogger._build_handlers(logging.DEBUG)
        try:
            files = [h for h in handlers if isinstance(h, RotatingFileHandler)]
            assert files[0].baseFilename == str(tmp_path / "from-dotenv" / "tgcourier.log")
            assert all(h.level == logging.DEBUG for h in handlers)
        finally:
            _close(handlers)


class TestSetLevel:
    def test_applies_to_handlers(self) -> None:
        logger = CourierLogger.get_logger()
        previous = logger.level
        try:
            CourierLogger.set_level("WARNING")
            assert logger.level == logging.WARNING
            assert all(h.level == logging.WARNING for h in logger.handlers)
        finally:
            CourierLogger.set_level(previous)

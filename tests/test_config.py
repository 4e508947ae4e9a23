"""Tests for configuration parsing and the host entry point."""

import sys
import os
from unittest.mock import patch

import pytest

sys.path.insert(0, os.path.join(os.path.dirname(__file__), ".."))

import config
import main


class TestParsers:
    """Validate the private parsing helpers in config."""

    @pytest.mark.parametrize(
        "raw, expected",
        [(None, 30.0), ("", 30.0), ("12.5", 12.5), ("abc", 30.0), ("0", 30.0), ("-3", 30.0)],
    )
    def test_positive_float(self, raw, expected) -> None:
        assert config._parse_positive_float("REQUEST_TIMEOUT", raw, 30.0) == expected

    @pytest.mark.parametrize(
        "raw, expected",
        [(None, "INFO"), ("debug", "DEBUG"), (" warning ", "WARNING"), ("LOUD", "INFO")],
    )
    def test_log_level(self, raw, expected) -> None:
        assert config._parse_log_level(raw) == expected


class TestMain:
    """Validate host wiring."""

    def test_missing_token_raises(self) -> None:
        with patch.object(main, "BOT_TOKEN", None):
            with pytest.raises(EnvironmentError):
                main.main()

    def test_build_bot_registers_defaults(self) -> None:
        with patch.object(main, "REQUEST_TIMEOUT", 12.0), patch.object(main, "API_ROOT", "http://localhost:8081"):
            with main.build_bot("123:ABC") as bot:
                assert "/ping" in bot.commands
                assert bot.client._timeout == 12.0
                assert bot.client._base_url == "http://localhost:8081/bot123:ABC"

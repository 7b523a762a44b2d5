"""Tests for environment-driven settings and logging setup."""

from __future__ import annotations

import logging
import os
import sys
from unittest.mock import patch

from depscanner.core.config import DEFAULT_BACKEND_URL, Settings, load_settings
from depscanner.core.logging import setup_logging


class TestLoadSettings:
    def test_defaults(self):
        with patch.dict(os.environ, {}, clear=True):
            assert load_settings() == Settings()
        assert Settings().backend_url == DEFAULT_BACKEND_URL

    def test_from_env(self):
        env = {
            "DEPSCANNER_BACKEND_URL": "https://scanner.example.com/api/",
            "DEPSCANNER_API_TOKEN": "secret",
            "DEPSCANNER_REQUEST_TIMEOUT": "2.5",
            "DEPSCANNER_STATS_INTERVAL": "60",
            "DEPSCANNER_EXPORT_DIR": "/tmp/exports",
        }
        with patch.dict(os.environ, env, clear=True):
            settings = load_settings()

        assert settings.backend_url == "https://scanner.example.com/api"
        assert settings.api_token == "secret"
        assert settings.request_timeout == 2.5
        assert settings.stats_interval == 60.0
        assert settings.export_dir == "/tmp/exports"

    def test_empty_token_is_none(self):
        with patch.dict(os.environ, {"DEPSCANNER_API_TOKEN": ""}, clear=True):
            assert load_settings().api_token is None


class TestSetupLogging:
    def test_json_format(self):
        with patch.dict(os.environ, {"DEPSCANNER_LOG_FORMAT": "json"}):
            setup_logging("DEBUG")

    def test_console_format(self):
        with patch.dict(os.environ, {"DEPSCANNER_LOG_LEVEL": "warning"}):
            setup_logging()

    def test_levels_and_stderr_handler(self):
        with patch.dict(os.environ, {"DEPSCANNER_LOG_LEVEL": "error"}):
            setup_logging("debug")

        assert logging.getLogger("depscanner").level == logging.DEBUG
        assert logging.getLogger("httpx").level == logging.WARNING
        assert logging.getLogger("httpcore").level == logging.WARNING
        streams = [getattr(h, "stream", None) for h in logging.getLogger().handlers]
        assert sys.stderr in streams

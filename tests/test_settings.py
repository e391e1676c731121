"""Tests for wpcontent.settings environment overrides."""

from __future__ import annotations

import importlib

from wpcontent import settings
from wpcontent.__main__ import _build_parser


class TestLogLevel:
    def test_lowercase_env_is_accepted(self, monkeypatch):
        monkeypatch.setenv("WPCONTENT_LOG_LEVEL", "debug")
        try:
            importlib.reload(settings)
            assert settings.LOG_LEVEL == "DEBUG"
            args = _build_parser().parse_args(["image", "-"])
            assert args.log_level == "DEBUG"
        finally:
            monkeypatch.delenv("WPCONTENT_LOG_LEVEL")
            importlib.reload(settings)

"""Shared pytest fixtures."""

from __future__ import annotations

import json
from pathlib import Path

import pytest

from wpcontent.plugins import clear_plugins

FIXTURES_DIR = Path(__file__).parent / "fixtures"


def _read_fixture(name: str) -> str:
    return (FIXTURES_DIR / name).read_text(encoding="utf-8")


@pytest.fixture
def post_blocks() -> list[dict]:
    return json.loads(_read_fixture("post_blocks.json"))


@pytest.fixture
def media_description_html() -> str:
    return _read_fixture("media_description.html")


@pytest.fixture(autouse=True)
def _clean_plugins():
    yield
    clear_plugins()

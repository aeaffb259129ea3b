"""Shared pytest fixtures for annotext tests."""

from __future__ import annotations

import os
from collections.abc import Generator

import pytest

from annotext.config import get_settings


@pytest.fixture(autouse=True)
def _isolated_settings(monkeypatch: pytest.MonkeyPatch) -> Generator[None, None, None]:
    """Drop ANNOTEXT_* env vars and the cached settings around each test."""
    for key in list(os.environ):
        if key.startswith("ANNOTEXT_"):
            monkeypatch.delenv(key, raising=False)
    get_settings.cache_clear()
    yield
    get_settings.cache_clear()

"""Shared pytest fixtures for phrasemark tests."""

from __future__ import annotations

from collections.abc import Iterator

import pytest

from phrasemark.config import get_settings


@pytest.fixture(autouse=True)
def _fresh_settings(monkeypatch: pytest.MonkeyPatch) -> Iterator[None]:
    """Isolate each test from cached settings and HIGHLIGHT__/LOG__ env vars."""
    monkeypatch.delenv("HIGHLIGHT__MARKER_TAG", raising=False)
    monkeypatch.delenv("HIGHLIGHT__OPAQUE_TAGS", raising=False)
    monkeypatch.delenv("LOG__LEVEL", raising=False)
    monkeypatch.delenv("LOG__LOG_DIR", raising=False)
    monkeypatch.delenv("LOG__FILE_LOGGING", raising=False)
    get_settings.cache_clear()
    yield
    get_settings.cache_clear()

"""Tests for phrasemark.config -- Settings and sub-models.

Every test constructs Settings(_env_file=None, ...) to avoid reading real .env files.
"""

from __future__ import annotations

from pathlib import Path

import pytest
from pydantic import ValidationError

from phrasemark.config import HighlightConfig, LogConfig, Settings, get_settings


class TestDefaults:
    """Defaults match the documented behaviour."""

    def test_highlight_defaults(self) -> None:
        s = Settings(_env_file=None)  # type: ignore[call-arg]
        assert s.highlight.marker_tag == "mark"
        assert s.highlight.opaque_tags == ("script",)

    def test_log_defaults(self) -> None:
        s = Settings(_env_file=None)  # type: ignore[call-arg]
        assert s.log.level == "INFO"
        assert s.log.log_dir == Path("logs")
        assert s.log.file_logging is False


class TestValidation:
    """Field validators normalise or reject values."""

    def test_marker_tag_lowercased(self) -> None:
        assert HighlightConfig(marker_tag=" SPAN ").marker_tag == "span"

    @pytest.mark.parametrize("bad", ["", "1mark", "mark class", "<mark>"])
    def test_marker_tag_rejects_non_tag(self, bad: str) -> None:
        with pytest.raises(ValidationError, match="MARKER_TAG"):
            HighlightConfig(marker_tag=bad)

    def test_opaque_tags_normalised(self) -> None:
        cfg = HighlightConfig(opaque_tags=("SCRIPT", " style ", ""))
        assert cfg.opaque_tags == ("script", "style")

    def test_log_level_uppercased(self) -> None:
        assert LogConfig(level="debug").level == "DEBUG"

    def test_log_level_rejects_unknown(self) -> None:
        with pytest.raises(ValidationError, match="LOG__LEVEL"):
            LogConfig(level="chatty")


class TestEnvironment:
    """Nested env vars use the double-underscore delimiter."""

    def test_nested_env_vars(self, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setenv("HIGHLIGHT__MARKER_TAG", "strong")
        monkeypatch.setenv("HIGHLIGHT__OPAQUE_TAGS", '["script", "style"]')
        monkeypatch.setenv("LOG__LEVEL", "warning")
        s = Settings(_env_file=None)  # type: ignore[call-arg]
        assert s.highlight.marker_tag == "strong"
        assert s.highlight.opaque_tags == ("script", "style")
        assert s.log.level == "WARNING"

    def test_get_settings_is_cached(self) -> None:
        assert get_settings() is get_settings()
        get_settings.cache_clear()
        assert isinstance(get_settings(), Settings)

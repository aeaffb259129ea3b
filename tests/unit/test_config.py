"""Tests for process-level settings."""

from __future__ import annotations

import pydantic
import pytest

from annotext.config import FiltersConfig, LoggingConfig, Settings, get_settings


class TestSettingsDefaults:
    """Defaults when no environment is set."""

    def test_max_text_length_default(self) -> None:
        """Text nodes up to 100k characters are processed by default."""
        s = Settings(_env_file=None)  # type: ignore[call-arg]
        assert s.filters.max_text_length == 100_000

    def test_logging_defaults(self) -> None:
        s = Settings(_env_file=None)  # type: ignore[call-arg]
        assert s.logging.level == "INFO"
        assert "%(message)s" in s.logging.format


class TestSettingsEnvironment:
    """ANNOTEXT_* variables override the defaults."""

    def test_nested_filters_override(self, monkeypatch: pytest.MonkeyPatch) -> None:
        """ANNOTEXT_FILTERS__MAX_TEXT_LENGTH sets the node size limit."""
        monkeypatch.setenv("ANNOTEXT_FILTERS__MAX_TEXT_LENGTH", "42")
        s = Settings(_env_file=None)  # type: ignore[call-arg]
        assert s.filters.max_text_length == 42

    def test_log_level_is_normalised(self, monkeypatch: pytest.MonkeyPatch) -> None:
        """Lower-case level names are accepted and upper-cased."""
        monkeypatch.setenv("ANNOTEXT_LOGGING__LEVEL", "debug")
        s = Settings(_env_file=None)  # type: ignore[call-arg]
        assert s.logging.level == "DEBUG"

    def test_unprefixed_variables_are_ignored(
        self, monkeypatch: pytest.MonkeyPatch
    ) -> None:
        monkeypatch.setenv("FILTERS__MAX_TEXT_LENGTH", "7")
        s = Settings(_env_file=None)  # type: ignore[call-arg]
        assert s.filters.max_text_length == 100_000


class TestSubModels:
    def test_unknown_log_level_rejected(self) -> None:
        with pytest.raises(pydantic.ValidationError, match="unknown log level"):
            LoggingConfig(level="LOUD")

    def test_filters_config_accepts_override(self) -> None:
        assert FiltersConfig(max_text_length=10).max_text_length == 10


class TestGetSettings:
    def test_is_cached(self) -> None:
        assert get_settings() is get_settings()

    def test_cache_clear_rereads_environment(
        self, monkeypatch: pytest.MonkeyPatch
    ) -> None:
        first = get_settings()
        monkeypatch.setenv("ANNOTEXT_FILTERS__MAX_TEXT_LENGTH", "5")
        get_settings.cache_clear()

        second = get_settings()

        assert second is not first
        assert second.filters.max_text_length == 5

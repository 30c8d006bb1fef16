"""Tests for centralized configuration."""

import pytest
from pydantic import ValidationError

from kmaps.analysis.cache import get_default_cache
from kmaps.config import Settings, get_settings


class TestSettings:
    def test_defaults(self, monkeypatch):
        for name in ("PAWN_CACHE_SIZE", "PAWN_CACHE_ENABLED", "STRICT_VALIDATION", "LOG_LEVEL"):
            monkeypatch.delenv(f"KMAPS_{name}", raising=False)
        s = Settings(_env_file=None)
        assert s.pawn_cache_size == 4096
        assert s.pawn_cache_max_entries == 4096
        assert s.pawn_cache_enabled is True
        assert s.strict_validation is False
        assert s.log_level == "WARNING"

    def test_zero_means_unbounded(self, monkeypatch):
        monkeypatch.setenv("KMAPS_PAWN_CACHE_SIZE", "0")
        s = Settings(_env_file=None)
        assert s.pawn_cache_max_entries is None

    def test_negative_size_rejected(self, monkeypatch):
        monkeypatch.setenv("KMAPS_PAWN_CACHE_SIZE", "-1")
        with pytest.raises(ValidationError):
            Settings(_env_file=None)

    def test_all_fields(self, monkeypatch):
        monkeypatch.setenv("KMAPS_PAWN_CACHE_SIZE", "10")
        monkeypatch.setenv("KMAPS_PAWN_CACHE_ENABLED", "false")
        monkeypatch.setenv("KMAPS_STRICT_VALIDATION", "true")
        monkeypatch.setenv("KMAPS_LOG_LEVEL", "DEBUG")
        s = Settings(_env_file=None)
        assert s.pawn_cache_size == 10
        assert s.pawn_cache_enabled is False
        assert s.strict_validation is True
        assert s.log_level == "DEBUG"

    def test_get_settings_cached(self):
        """Settings are built once per process until cache_clear()."""
        get_settings.cache_clear()
        try:
            first = get_settings()
            assert get_settings() is first
            get_settings.cache_clear()
            assert get_settings() is not first
        finally:
            get_settings.cache_clear()


class TestDefaultCache:
    def test_singleton(self):
        assert get_default_cache() is get_default_cache()

    def test_sized_from_settings(self, monkeypatch):
        monkeypatch.setenv("KMAPS_PAWN_CACHE_SIZE", "7")
        get_settings.cache_clear()
        get_default_cache.cache_clear()
        try:
            assert get_default_cache().max_entries == 7
        finally:
            get_settings.cache_clear()
            get_default_cache.cache_clear()

# tests/unit/config/test_unit_settings.py - v2
"""Tests for config/settings.py - typed Settings and validation rules."""

from __future__ import annotations

from pathlib import Path

import pytest
from pydantic import ValidationError

from lpcsheet.config.settings import ConfigurationError, Settings, load_settings


class TestSettingsDefaults:
    def test_paths(self):
        s = Settings(_env_file=None)
        assert s.cache_root == Path("./cache")
        assert s.spritesheet_root == Path("./spritesheets")

    def test_memory_tier(self):
        s = Settings(_env_file=None)
        assert s.memory_cache_ttl_s == 3600
        assert s.memory_cache_check_period_s == 600
        assert s.memory_key_mode == "fingerprint"

    def test_batches(self):
        s = Settings(_env_file=None)
        assert s.max_batch_size == 200
        assert s.pregenerate_concurrency == 4

    def test_logging(self):
        s = Settings(_env_file=None)
        assert s.log_format == "json"
        assert s.log_file is None


class TestSettingsEnv:
    def test_prefixed_env(self, monkeypatch, tmp_path):
        monkeypatch.setenv("LPCSHEET_CACHE_ROOT", str(tmp_path / "c"))
        monkeypatch.setenv("LPCSHEET_MAX_BATCH_SIZE", "50")
        s = Settings(_env_file=None)
        assert s.cache_root == tmp_path / "c"
        assert s.max_batch_size == 50

    def test_env_file(self, tmp_path):
        env = tmp_path / ".env"
        env.write_text("LPCSHEET_MEMORY_KEY_MODE=request\n", encoding="utf-8")
        s = Settings(_env_file=env)
        assert s.memory_key_mode == "request"


class TestSettingsValidation:
    def test_ttl_must_be_positive(self):
        with pytest.raises(ConfigurationError, match="MEMORY_CACHE_TTL_S"):
            Settings(_env_file=None, memory_cache_ttl_s=0)

    def test_negative_check_period(self):
        with pytest.raises(ConfigurationError, match="CHECK_PERIOD"):
            Settings(_env_file=None, memory_cache_check_period_s=-1)

    def test_concurrency_above_batch_size(self):
        with pytest.raises(ConfigurationError, match="PREGENERATE_CONCURRENCY"):
            Settings(_env_file=None, max_batch_size=2, pregenerate_concurrency=3)

    def test_zero_batch_size(self):
        with pytest.raises(ValidationError, match="max_batch_size"):
            Settings(_env_file=None, max_batch_size=0)

    def test_unknown_key_mode(self):
        with pytest.raises(ValidationError):
            Settings(_env_file=None, memory_key_mode="layers")

    def test_zero_check_period_allowed(self):
        assert Settings(_env_file=None, memory_cache_check_period_s=0).memory_cache_check_period_s == 0


class TestLoadSettings:
    def test_with_overrides(self, tmp_path):
        s = load_settings(log_level="DEBUG", cache_root=tmp_path)
        assert s.log_level == "DEBUG"
        assert s.cache_root == tmp_path

"""Tests for marketlock.config and marketlock.context."""

import json
from pathlib import Path

import pytest
from pydantic import ValidationError

from marketlock.config import (
    ConfigError,
    RestrictionConfig,
    Settings,
    load_restriction_config,
)
from marketlock.context import RestrictionContext, now_ms


class TestLoadRestrictionConfig:
    """Tests for reading the JSON config file."""

    def test_reads_camel_case_keys(self, tmp_path: Path) -> None:
        path = tmp_path / "config.json"
        path.write_text(
            json.dumps({"enabled": False, "durationInDays": 7, "restrictedLevel": 20})
        )

        config = load_restriction_config(path)

        assert config == RestrictionConfig(
            enabled=False, duration_in_days=7, restricted_level=20
        )

    def test_missing_file_uses_defaults(self, tmp_path: Path) -> None:
        config = load_restriction_config(tmp_path / "absent.json")
        assert config.enabled is True
        assert config.duration_in_days == 3
        assert config.restricted_level == 15

    def test_invalid_json_raises(self, tmp_path: Path) -> None:
        path = tmp_path / "config.json"
        path.write_text("{")
        with pytest.raises(ConfigError):
            load_restriction_config(path)

    def test_invalid_values_raise(self, tmp_path: Path) -> None:
        path = tmp_path / "config.json"
        path.write_text(json.dumps({"durationInDays": -1}))
        with pytest.raises(ConfigError):
            load_restriction_config(path)

    def test_config_is_frozen(self) -> None:
        config = RestrictionConfig()
        with pytest.raises(ValidationError):
            config.enabled = False  # type: ignore[misc]


class TestSettings:
    """Tests for environment-driven settings."""

    def test_env_overrides(
        self, monkeypatch: pytest.MonkeyPatch, tmp_path: Path
    ) -> None:
        monkeypatch.setenv("MARKETLOCK_STORE_PATH", str(tmp_path / "t.json"))
        monkeypatch.setenv("MARKETLOCK_PROFILES_DIR", str(tmp_path / "profiles"))

        settings = Settings()

        assert settings.store_path == tmp_path / "t.json"
        assert settings.profiles_dir == tmp_path / "profiles"

    def test_context_from_settings(
        self, monkeypatch: pytest.MonkeyPatch, tmp_path: Path
    ) -> None:
        config_path = tmp_path / "config.json"
        config_path.write_text(json.dumps({"durationInDays": 1}))
        monkeypatch.setenv("MARKETLOCK_CONFIG_PATH", str(config_path))
        monkeypatch.setenv("MARKETLOCK_STORE_PATH", str(tmp_path / "t.json"))

        ctx = RestrictionContext.from_settings(Settings())

        assert ctx.config.duration_in_days == 1
        assert ctx.store.path == tmp_path / "t.json"
        assert ctx.level_cap.min_user_level == 0

    def test_default_clock_is_wall_time(self) -> None:
        before = now_ms()
        ctx = RestrictionContext(config=RestrictionConfig(), store=None)  # type: ignore[arg-type]
        assert ctx.now() >= before

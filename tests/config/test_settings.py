"""Tests for PrimedSettings — unified settings with TOML source."""

from pathlib import Path

import pytest

from primed import CyclePolicy
from primed.config.discovery import CONFIG_ENV_VAR, CONFIG_FILENAME
from primed.config.settings import PrimedSettings, get_settings, reset_settings, set_settings
from primed.errors import ConfigError


@pytest.fixture(autouse=True)
def _no_env_override(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.delenv(CONFIG_ENV_VAR, raising=False)


class TestDefaults:
    def test_all_defaults(self, tmp_path: Path) -> None:
        settings = PrimedSettings.load(start=tmp_path)
        assert settings.config_path is None
        assert settings.cycle_policy is CyclePolicy.ACTIVE_TRACE
        assert settings.warn_on_cycle is False
        assert settings.seal_registry is False
        assert settings.load_plugins is True
        assert settings.verbose is False
        assert settings.log_json is False
        assert settings.configure_logging is True

    def test_frozen(self, tmp_path: Path) -> None:
        settings = PrimedSettings.load(start=tmp_path)
        with pytest.raises(Exception):
            settings.verbose = True  # type: ignore[misc]


class TestTomlSource:
    def test_loads_from_toml(self, tmp_path: Path) -> None:
        toml = tmp_path / CONFIG_FILENAME
        toml.write_text('cycle_policy = "ancestors"\nwarn_on_cycle = true\n')
        settings = PrimedSettings.load(start=tmp_path)
        assert settings.config_path == toml
        assert settings.cycle_policy is CyclePolicy.ANCESTORS
        assert settings.warn_on_cycle is True
        assert settings.load_plugins is True  # default preserved

    def test_unknown_keys_ignored(self, tmp_path: Path) -> None:
        (tmp_path / CONFIG_FILENAME).write_text('flavour = "vanilla"\n')
        settings = PrimedSettings.load(start=tmp_path)
        assert not hasattr(settings, "flavour")

    def test_explicit_config_path(self, tmp_path: Path) -> None:
        custom = tmp_path / "custom" / "my.toml"
        custom.parent.mkdir(parents=True)
        custom.write_text("seal_registry = true\n")
        settings = PrimedSettings.load(config_path=custom)
        assert settings.seal_registry is True
        assert settings.config_path == custom

    def test_invalid_toml(self, tmp_path: Path) -> None:
        (tmp_path / CONFIG_FILENAME).write_text("seal_registry = = true\n")
        with pytest.raises(ConfigError):
            PrimedSettings.load(start=tmp_path)


class TestPriority:
    def test_env_overrides_toml(self, tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
        (tmp_path / CONFIG_FILENAME).write_text('cycle_policy = "ancestors"\n')
        monkeypatch.setenv("PRIMED_CYCLE_POLICY", "active_trace")
        settings = PrimedSettings.load(start=tmp_path)
        assert settings.cycle_policy is CyclePolicy.ACTIVE_TRACE

    def test_kwargs_override_env(self, tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setenv("PRIMED_WARN_ON_CYCLE", "true")
        settings = PrimedSettings.load(start=tmp_path, warn_on_cycle=False)
        assert settings.warn_on_cycle is False

    def test_env_only(self, tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setenv("PRIMED_SEAL_REGISTRY", "1")
        assert PrimedSettings.load(start=tmp_path).seal_registry is True


class TestProcessSettings:
    def test_cached(self) -> None:
        assert get_settings() is get_settings()

    def test_set_and_reset(self) -> None:
        custom = PrimedSettings(verbose=True)
        set_settings(custom)
        assert get_settings() is custom
        reset_settings()
        assert get_settings() is not custom

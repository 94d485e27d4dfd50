"""Unit tests for TOML configuration loader."""

import tomllib
from pathlib import Path

import pytest

from parley.config.loader import (
    deep_merge,
    get_config_dir,
    get_environment,
    load_config,
    load_toml,
)


class TestDeepMerge:
    """Tests for deep_merge function."""

    def test_merge_nested_dicts(self) -> None:
        """Nested dictionaries are merged recursively."""
        base = {"a": {"x": 1, "y": 2}, "b": 3}
        override = {"a": {"y": 20, "z": 30}}
        result = deep_merge(base, override)
        assert result == {"a": {"x": 1, "y": 20, "z": 30}, "b": 3}

    def test_override_replaces_non_dict(self) -> None:
        """Non-dict values in override replace base values."""
        result = deep_merge({"a": {"x": 1}}, {"a": "replaced"})
        assert result == {"a": "replaced"}

    def test_base_unmodified(self) -> None:
        """Original base dictionary is not modified."""
        base = {"a": 1}
        deep_merge(base, {"b": 2})
        assert base == {"a": 1}


class TestLoadToml:
    """Tests for load_toml function."""

    def test_load_valid_file(self, test_config_dir: Path) -> None:
        """Valid TOML files are parsed."""
        path = test_config_dir / "test.toml"
        path.write_text('[session]\nprovider_timeout = 5.0\n')
        assert load_toml(path) == {"session": {"provider_timeout": 5.0}}

    def test_missing_file_raises(self, test_config_dir: Path) -> None:
        """Missing files raise FileNotFoundError."""
        with pytest.raises(FileNotFoundError):
            load_toml(test_config_dir / "missing.toml")

    def test_invalid_syntax_raises(self, test_config_dir: Path) -> None:
        """Invalid TOML raises a decode error."""
        path = test_config_dir / "bad.toml"
        path.write_text("this is = = not toml")
        with pytest.raises(tomllib.TOMLDecodeError):
            load_toml(path)


class TestEnvironment:
    """Tests for config directory and environment resolution."""

    def test_environment_defaults_to_development(self, monkeypatch) -> None:
        monkeypatch.delenv("PARLEY_ENV", raising=False)
        assert get_environment() == "development"

    def test_environment_from_env(self, env_override) -> None:
        with env_override({"PARLEY_ENV": "production"}):
            assert get_environment() == "production"

    def test_config_dir_from_env(self, env_override, test_config_dir: Path) -> None:
        with env_override({"PARLEY_CONFIG_DIR": str(test_config_dir)}):
            assert get_config_dir() == test_config_dir

    def test_missing_config_dir_raises(self, env_override, tmp_path: Path) -> None:
        with env_override({"PARLEY_CONFIG_DIR": str(tmp_path / "nope")}):
            with pytest.raises(FileNotFoundError):
                get_config_dir()


class TestLoadConfig:
    """Tests for load_config function."""

    def test_environment_file_overrides_default(
        self, env_override, mock_toml_files, test_config_dir: Path
    ) -> None:
        """The environment file is deep-merged over default.toml."""
        mock_toml_files({
            "default.toml": "[session]\nprovider_timeout = 30.0\nserialize_turns = true\n",
            "staging.toml": "[session]\nprovider_timeout = 5.0\n",
        })
        with env_override({
            "PARLEY_CONFIG_DIR": str(test_config_dir),
            "PARLEY_ENV": "staging",
        }):
            config = load_config()

        assert config["session"] == {"provider_timeout": 5.0, "serialize_turns": True}

    def test_missing_files_give_empty_config(
        self, env_override, test_config_dir: Path
    ) -> None:
        """An empty config directory yields an empty dict."""
        with env_override({
            "PARLEY_CONFIG_DIR": str(test_config_dir),
            "PARLEY_ENV": "nothing",
        }):
            assert load_config() == {}

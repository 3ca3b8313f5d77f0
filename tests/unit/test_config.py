"""Unit tests for Settings and the YAML config loader."""

from __future__ import annotations

from pathlib import Path

import pytest

from catapi.config.loader import _deep_merge, load_config
from catapi.config.settings import Settings
from catapi.utils.errors import ConfigurationError


def _settings(**overrides) -> Settings:
    defaults = {
        "cat_api_key": "",
        "redis_url": "",
        "sync_interval_seconds": 0,
        "app_env": "test",
    }
    defaults.update(overrides)
    return Settings(**defaults)


class TestSettings:
    def test_defaults(self) -> None:
        settings = _settings()
        assert settings.cat_api_batch_limit == 25
        assert settings.tag_cache_ttl_seconds == 600
        assert settings.get_cache_backend() == "memory"

    def test_env_override(self, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setenv("CAT_API_BATCH_LIMIT", "10")
        monkeypatch.setenv("REDIS_URL", "redis://localhost:6379/0")
        settings = Settings()
        assert settings.cat_api_batch_limit == 10
        assert settings.get_cache_backend() == "redis"

    def test_cache_prefix_scoped_by_database(self, tmp_path: Path) -> None:
        settings = _settings(database_path=str(tmp_path / "main.db"))

        default = settings.scoped_cache_prefix()
        same = settings.scoped_cache_prefix(str(tmp_path / "main.db"))
        other = settings.scoped_cache_prefix(str(tmp_path / "other.db"))

        assert default == same
        assert default != other
        assert default.startswith("catapi:")
        assert default.endswith(":")


class TestLoadConfig:
    def test_missing_file_uses_defaults(self, tmp_path: Path) -> None:
        config = load_config(str(tmp_path / "absent.yaml"), settings=_settings())
        assert config["api"] == {"default_page_size": 10, "max_page_size": 100}
        assert config["cache"]["backend"] == "memory"

    def test_yaml_values_merged_with_env(self, tmp_path: Path) -> None:
        path = tmp_path / "config.yaml"
        path.write_text(
            "api:\n  default_page_size: 5\napp:\n  name: catapi\n  env: yaml-env\n"
        )
        config = load_config(str(path), settings=_settings(app_env="staging"))

        assert config["api"]["default_page_size"] == 5
        assert config["api"]["max_page_size"] == 100
        assert config["app"]["name"] == "catapi"
        assert config["app"]["env"] == "staging"

    def test_repo_config_file_loads(self, project_root: Path) -> None:
        config = load_config(str(project_root / "config" / "config.yaml"), settings=_settings())
        assert config["api"]["default_page_size"] == 10

    def test_malformed_yaml_raises(self, tmp_path: Path) -> None:
        path = tmp_path / "config.yaml"
        path.write_text("api: [unclosed\n")
        with pytest.raises(ConfigurationError):
            load_config(str(path), settings=_settings())

    def test_inconsistent_paging_raises(self, tmp_path: Path) -> None:
        path = tmp_path / "config.yaml"
        path.write_text("api:\n  default_page_size: 50\n  max_page_size: 20\n")
        with pytest.raises(ConfigurationError, match="default_page_size"):
            load_config(str(path), settings=_settings())


class TestDeepMerge:
    def test_nested_merge(self) -> None:
        base = {"a": {"x": 1, "y": 2}, "b": 1}
        _deep_merge(base, {"a": {"y": 3, "z": 4}, "c": 5})
        assert base == {"a": {"x": 1, "y": 3, "z": 4}, "b": 1, "c": 5}

    def test_scalar_replaces_dict(self) -> None:
        base = {"a": {"x": 1}}
        _deep_merge(base, {"a": 2})
        assert base == {"a": 2}

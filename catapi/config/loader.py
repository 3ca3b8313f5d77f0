"""YAML configuration loader with environment variable overrides.

Layers, later ones win:

    1. config/config.yaml  -- static defaults checked into the repo
    2. .env / environment  -- via :class:`Settings`

``_deep_merge`` merges nested dicts key by key, so a YAML section only
loses the keys the environment actually provides.
"""

from pathlib import Path

import yaml

from catapi.config.settings import Settings
from catapi.utils.errors import ConfigurationError

_API_DEFAULTS = {"default_page_size": 10, "max_page_size": 100}


def load_config(path: str = "config/config.yaml", settings: Settings | None = None) -> dict:
    """Load YAML config and merge with environment-based Settings.

    Args:
        path: Path to the YAML configuration file.  A missing file is fine.
        settings: Pre-built settings; read from the environment when omitted.

    Returns:
        Fully resolved configuration dictionary.

    Raises:
        ConfigurationError: If the YAML is malformed or the paging limits
            are inconsistent.
    """
    config_path = Path(path)
    if config_path.exists():
        try:
            with open(config_path) as f:
                yaml_config = yaml.safe_load(f) or {}
        except yaml.YAMLError as exc:
            raise ConfigurationError(f"Cannot parse {config_path}: {exc}") from exc
    else:
        yaml_config = {}

    if not isinstance(yaml_config, dict):
        raise ConfigurationError(f"{config_path} must contain a mapping at the top level")

    settings = settings or Settings()
    env_overrides = {
        "app": {
            "host": settings.app_host,
            "port": settings.app_port,
            "env": settings.app_env,
        },
        "source": {
            "base_url": settings.cat_api_base_url,
            "batch_limit": settings.cat_api_batch_limit,
        },
        "cache": {
            "backend": settings.get_cache_backend(),
            "tag_ttl_seconds": settings.tag_cache_ttl_seconds,
        },
        "sync": {
            "interval_seconds": settings.sync_interval_seconds,
        },
        "logging": {
            "level": settings.log_level,
        },
    }

    config: dict = {"api": dict(_API_DEFAULTS)}
    _deep_merge(config, yaml_config)
    _deep_merge(config, env_overrides)
    _check_paging(config["api"])
    return config


def _check_paging(api: dict) -> None:
    default_size = api.get("default_page_size")
    max_size = api.get("max_page_size")
    if not isinstance(default_size, int) or not isinstance(max_size, int):
        raise ConfigurationError("api.default_page_size and api.max_page_size must be integers")
    if not 1 <= default_size <= max_size:
        raise ConfigurationError(
            f"api.default_page_size ({default_size}) must be between 1 and "
            f"api.max_page_size ({max_size})"
        )


def _deep_merge(base: dict, overrides: dict) -> None:
    """Recursively merge overrides into base dict, mutating base in place."""
    for key, value in overrides.items():
        if key in base and isinstance(base[key], dict) and isinstance(value, dict):
            _deep_merge(base[key], value)
        else:
            base[key] = value

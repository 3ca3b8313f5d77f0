"""Configuration module: Settings and the YAML config loader."""

from catapi.config.loader import load_config
from catapi.config.settings import Settings

__all__ = ["Settings", "load_config"]

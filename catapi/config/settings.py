"""Application settings loaded from environment variables via pydantic-settings.

Sources, highest priority first:

    1. Environment variables  (``CAT_API_KEY=...``)
    2. ``.env`` in the working directory
    3. The defaults below

Field ``cat_api_key`` maps to env var ``CAT_API_KEY``; matching is
case-insensitive.
"""

import hashlib
from pathlib import Path

from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """catapi application settings."""

    model_config = SettingsConfigDict(env_file=".env", env_file_encoding="utf-8")

    # === TheCatAPI ===
    cat_api_base_url: str = "https://api.thecatapi.com"
    cat_api_key: str = ""  # Empty = anonymous tier
    cat_api_batch_limit: int = 25
    cat_api_timeout_seconds: float = 30.0

    # === Catalog store ===
    database_path: str = "data/catapi.db"

    # === Cache ===
    # Empty redis_url -> in-process MemoryCacheProvider.
    redis_url: str = ""
    cache_key_prefix: str = "catapi:"
    cache_max_entries: int = 10_000
    tag_cache_ttl_seconds: int = 600

    # === Scheduled sync ===
    sync_interval_seconds: int = 0  # 0 disables the scheduler

    # === App Config ===
    app_host: str = "0.0.0.0"
    app_port: int = 8000
    app_env: str = "development"
    log_level: str = "INFO"

    def get_cache_backend(self) -> str:
        """Return ``"redis"`` when a Redis URL is configured, else ``"memory"``."""
        return "redis" if self.redis_url else "memory"

    def scoped_cache_prefix(self, db_path: str | None = None) -> str:
        """Return ``cache_key_prefix`` plus a short digest of the catalog database path.

        Processes pointing at the same database file share cache entries;
        a different ``--db`` gets its own key space.
        """
        resolved = Path(db_path or self.database_path).expanduser().resolve()
        digest = hashlib.sha1(str(resolved).encode("utf-8")).hexdigest()[:12]
        return f"{self.cache_key_prefix}{digest}:"

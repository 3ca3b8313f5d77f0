"""CLI for running a sync pass and inspecting tags without the web server.

Usage::

    # Pull one batch from TheCatAPI into the configured database
    python -m catapi.cli sync

    # Same, against a different database file, JSON output
    python -m catapi.cli sync --db /tmp/cats.db --json

    # Print every stored tag
    python -m catapi.cli tags

Settings come from the environment / ``.env`` exactly as for the API.
"""

from __future__ import annotations

import argparse
import asyncio
import json
import sys
from typing import Any

import httpx

from catapi.config.settings import Settings
from catapi.providers.cache.memory_cache import MemoryCacheProvider
from catapi.providers.cache.redis_cache import RedisCacheProvider
from catapi.providers.source.cat_api_provider import CatApiImageSource
from catapi.providers.store.sqlite_store import SQLiteCatalogStore
from catapi.services.sync_engine import SyncEngine
from catapi.services.tag_listing import TagListingService
from catapi.services.tag_resolver import TagResolver
from catapi.utils.errors import CatApiError
from catapi.utils.logging import configure_logging


def _build_services(
    app_settings: Settings,
    http_client: httpx.AsyncClient,
    db_path: str | None = None,
) -> dict[str, Any]:
    """Construct the store, cache and services for one CLI invocation."""
    if app_settings.redis_url:
        cache = RedisCacheProvider(
            redis_url=app_settings.redis_url,
            key_prefix=app_settings.scoped_cache_prefix(db_path),
        )
    else:
        cache = MemoryCacheProvider(max_size=app_settings.cache_max_entries)

    store = SQLiteCatalogStore(db_path=db_path or app_settings.database_path)
    source = CatApiImageSource(
        http_client=http_client,
        base_url=app_settings.cat_api_base_url,
        api_key=app_settings.cat_api_key,
        batch_limit=app_settings.cat_api_batch_limit,
    )
    resolver = TagResolver(store=store, cache=cache, ttl_seconds=app_settings.tag_cache_ttl_seconds)
    return {
        "cache": cache,
        "store": store,
        "engine": SyncEngine(source=source, store=store, tag_resolver=resolver),
        "listing": TagListingService(
            store=store, cache=cache, ttl_seconds=app_settings.tag_cache_ttl_seconds
        ),
    }


# ---------------------------------------------------------------------------
# Subcommand handlers
# ---------------------------------------------------------------------------


async def _handle_sync(args: argparse.Namespace) -> int:
    """Run one synchronization pass and print the counts."""
    app_settings = Settings()
    async with httpx.AsyncClient(timeout=app_settings.cat_api_timeout_seconds) as client:
        services = _build_services(app_settings, client, db_path=args.db)
        await services["store"].initialize()
        await services["cache"].initialize()
        try:
            report = await services["engine"].synchronize()
        except CatApiError as exc:
            print(f"Error: {exc}", file=sys.stderr)
            return 1
        finally:
            await services["cache"].close()

    if args.json:
        print(report.model_dump_json())
    else:
        print(f"Fetched: {report.fetched}")
        print(f"Created: {report.created}")
        print(f"Skipped: {report.skipped}")
    return 0


async def _handle_tags(args: argparse.Namespace) -> int:
    """Print every stored tag, ordered by id."""
    app_settings = Settings()
    async with httpx.AsyncClient(timeout=app_settings.cat_api_timeout_seconds) as client:
        services = _build_services(app_settings, client, db_path=args.db)
        await services["store"].initialize()
        await services["cache"].initialize()
        try:
            tags = await services["listing"].list_all_tags()
        except CatApiError as exc:
            print(f"Error: {exc}", file=sys.stderr)
            return 1
        finally:
            await services["cache"].close()

    if args.json:
        print(json.dumps([{"id": t.id, "name": t.name} for t in tags]))
    else:
        for tag in tags:
            print(f"{tag.id:>5}  {tag.name}")
        print(f"\n{len(tags)} tag(s)")
    return 0


# ---------------------------------------------------------------------------
# Parser
# ---------------------------------------------------------------------------


def _build_parser() -> argparse.ArgumentParser:
    """Build the argparse parser for the catapi CLI."""
    parser = argparse.ArgumentParser(
        prog="python -m catapi.cli",
        description="Sync cat images from TheCatAPI and inspect stored tags.",
    )
    subparsers = parser.add_subparsers(dest="command", help="catapi commands")

    for name, help_text in (
        ("sync", "Fetch one batch and store the new images"),
        ("tags", "List every stored tag"),
    ):
        sub = subparsers.add_parser(name, help=help_text)
        sub.add_argument("--db", default=None, help="SQLite database path (default: DATABASE_PATH)")
        sub.add_argument("--json", action="store_true", help="Print machine-readable JSON")

    return parser


def main(argv: list[str] | None = None) -> None:
    """CLI entry point."""
    parser = _build_parser()
    args = parser.parse_args(argv)

    if not args.command:
        parser.print_help()
        sys.exit(1)

    app_settings = Settings()
    configure_logging(log_level=app_settings.log_level)

    if args.command == "sync":
        exit_code = asyncio.run(_handle_sync(args))
    elif args.command == "tags":
        exit_code = asyncio.run(_handle_tags(args))
    else:
        parser.print_help()
        exit_code = 1

    sys.exit(exit_code)


if __name__ == "__main__":
    main()

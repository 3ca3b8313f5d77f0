"""Port definitions for catapi.

Services depend only on these abstract base classes; concrete adapters
live in ``catapi/providers/`` and are wired together in ``catapi/main.py``.

    Interface        ->  Concrete implementations
    ------------------------------------------------------------
    ICatalogStore    ->  MemoryCatalogStore, SQLiteCatalogStore
    ICacheProvider   ->  MemoryCacheProvider, RedisCacheProvider
    IImageSource     ->  CatApiImageSource
"""

from catapi.interfaces.cache_provider import ICacheProvider
from catapi.interfaces.catalog_store import ICatalogStore
from catapi.interfaces.image_source import IImageSource

__all__ = [
    "ICacheProvider",
    "ICatalogStore",
    "IImageSource",
]

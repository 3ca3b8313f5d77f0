"""External image source providers."""

from catapi.providers.source.cat_api_provider import CatApiImageSource

__all__ = ["CatApiImageSource"]

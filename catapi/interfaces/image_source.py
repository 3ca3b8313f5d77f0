"""Abstract base class for the external image source."""

from __future__ import annotations

from abc import ABC, abstractmethod

from catapi.models.source import FetchedImage


# Concrete implementation: CatApiImageSource (catapi/providers/source/).
class IImageSource(ABC):
    """Contract for a finite, one-shot batch of fetched images."""

    @abstractmethod
    async def fetch_batch(self) -> list[FetchedImage]:
        """Fetch one batch of images.

        Raises
        ------
        SourceError
            On transport failure, a non-2xx response or an unparseable body.
        """

    @abstractmethod
    def get_provider_name(self) -> str:
        """Return a human-readable identifier for this provider."""

"""Abstract base class for cache service providers.

The cache is a key -> bytes store with per-entry TTL.  It is never
authoritative: callers treat a miss, an undecodable value, or a
:class:`~catapi.utils.errors.CacheError` as "go to the store".
"""

from __future__ import annotations

from abc import ABC, abstractmethod


# Concrete implementations: MemoryCacheProvider, RedisCacheProvider
# (catapi/providers/cache/).
class ICacheProvider(ABC):
    """Contract for byte-valued cache services.

    All operations are async so network-backed stores (Redis) do not block
    the event loop.  Backend failures are raised as ``CacheError``.
    """

    async def initialize(self) -> None:
        """Open connections / verify the backend.  Called at startup."""

    async def close(self) -> None:
        """Release backend resources.  Called at shutdown."""

    @abstractmethod
    def get_provider_name(self) -> str:
        """Return a human-readable identifier for this provider."""

    @abstractmethod
    async def get(self, key: str) -> bytes | None:
        """Retrieve the value stored under *key*.

        Parameters
        ----------
        key:
            The cache key to look up.

        Returns
        -------
        bytes or None
            The cached bytes if present and not expired; ``None`` otherwise.
        """

    @abstractmethod
    async def set(self, key: str, value: bytes, ttl: int | None = None) -> None:
        """Store *value* under *key* with an optional time-to-live.

        Parameters
        ----------
        key:
            The cache key.
        value:
            Serialized payload.
        ttl:
            Time-to-live in seconds.  ``None`` means the entry does not
            expire automatically.
        """

    @abstractmethod
    async def delete(self, key: str) -> None:
        """Remove the entry stored under *key* (no-op if absent)."""

    @abstractmethod
    async def exists(self, key: str) -> bool:
        """Return ``True`` if *key* is present in the cache and not expired."""

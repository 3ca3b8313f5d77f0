"""Custom exception hierarchy for catapi.

All application exceptions inherit from :class:`CatApiError`, which carries
an optional ``provider_name`` so error handlers can tell which backend
(e.g. "sqlite", "redis", "thecatapi") caused the failure.

    CatApiError  (base -- catch-all for any catapi error)
    +-- RecordValidationError   (fetched record or tag name fails validation)
    +-- StorageError            (store read/write failure)
    |   +-- TagConflictError    (unique tag name already taken)
    |   +-- CacheError          (cache backend failure, recovered locally)
    +-- SourceError             (external image source failure)
    +-- ConfigurationError      (startup / invalid config)

The API middleware maps these to HTTP status codes; the sync engine rolls
back staged records on any of them.
"""


class CatApiError(Exception):
    """Base exception for all catapi errors.

    Every subclass carries a human-readable ``message`` and an optional
    ``provider_name``.  ``__str__`` prefixes the provider name in brackets,
    e.g. ``[sqlite] Commit failed``.
    """

    def __init__(
        self,
        message: str = "An unexpected error occurred",
        provider_name: str | None = None,
    ) -> None:
        self._message = message
        self._provider_name = provider_name
        super().__init__(self._message)

    @property
    def message(self) -> str:
        return self._message

    @property
    def provider_name(self) -> str | None:
        return self._provider_name

    def __str__(self) -> str:
        if self._provider_name:
            return f"[{self._provider_name}] {self._message}"
        return self._message


# ---------------------------------------------------------------------------
# Record errors
# ---------------------------------------------------------------------------

class RecordValidationError(CatApiError):
    """Raised when a fetched image or a tag name violates field constraints."""

    def __init__(
        self,
        message: str = "Record validation failed",
        provider_name: str | None = None,
    ) -> None:
        super().__init__(message=message, provider_name=provider_name)


# ---------------------------------------------------------------------------
# Persistence errors
# ---------------------------------------------------------------------------

class StorageError(CatApiError):
    """Raised when the catalog store cannot complete a read or write."""

    def __init__(
        self,
        message: str = "Storage operation failed",
        provider_name: str | None = None,
    ) -> None:
        super().__init__(message=message, provider_name=provider_name)


class TagConflictError(StorageError):
    """Raised by ``add_tag`` when another writer already created the name.

    The tag resolver catches this and re-reads the winning row.
    """

    def __init__(
        self,
        message: str = "Tag name already exists",
        provider_name: str | None = None,
    ) -> None:
        super().__init__(message=message, provider_name=provider_name)


class CacheError(StorageError):
    """Raised when the cache backend is unreachable or rejects an operation."""

    def __init__(
        self,
        message: str = "Cache operation failed",
        provider_name: str | None = None,
    ) -> None:
        super().__init__(message=message, provider_name=provider_name)


# ---------------------------------------------------------------------------
# External source / configuration errors
# ---------------------------------------------------------------------------

class SourceError(CatApiError):
    """Raised when the external image source fails or returns garbage."""

    def __init__(
        self,
        message: str = "Image source request failed",
        provider_name: str | None = None,
    ) -> None:
        super().__init__(message=message, provider_name=provider_name)


class ConfigurationError(CatApiError):
    """Raised when configuration is invalid or missing at startup."""

    def __init__(
        self,
        message: str = "Invalid or missing configuration",
        provider_name: str | None = None,
    ) -> None:
        super().__init__(message=message, provider_name=provider_name)

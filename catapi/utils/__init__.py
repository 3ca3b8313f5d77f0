"""Utility modules for catapi.

- **errors** -- Exception hierarchy rooted at CatApiError.
- **logging** -- structlog setup with console/JSON dual rendering.
- **text_normalizer** -- Temperament string tokenization for tag resolution.
"""

from catapi.utils.errors import (
    CacheError,
    CatApiError,
    ConfigurationError,
    RecordValidationError,
    SourceError,
    StorageError,
    TagConflictError,
)
from catapi.utils.logging import configure_logging, get_logger
from catapi.utils.text_normalizer import iter_temperament_tokens

__all__ = [
    "CacheError",
    "CatApiError",
    "ConfigurationError",
    "RecordValidationError",
    "SourceError",
    "StorageError",
    "TagConflictError",
    "configure_logging",
    "get_logger",
    "iter_temperament_tokens",
]

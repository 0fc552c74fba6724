"""
Error types for fetch_dataloader.
"""
from typing import Any, Optional


class DataLoaderError(Exception):
    """Base error for all dataloader failures."""

    code = "DATALOADER_ERROR"

    def __init__(self, message: str) -> None:
        super().__init__(message)
        self.name = type(self).__name__


class InvalidArgumentError(DataLoaderError, ValueError):
    """Error raised for a missing request key or an invalid loader."""

    code = "INVALID_ARGUMENT"


class LoaderError(DataLoaderError):
    """
    Error delivered when the loader produced no outcome for a key.

    Exceptions raised by the loader itself are forwarded as-is; this type
    only covers loads that ended without a value or an exception
    (e.g. a cancelled loader task).
    """

    code = "LOADER_ERROR"

    def __init__(self, message: str, key: Optional[Any] = None) -> None:
        super().__init__(message)
        self.key = key


class CacheEntryExistsError(DataLoaderError):
    """Error raised when a cache entry would be overwritten."""

    code = "CACHE_ENTRY_EXISTS"

    def __init__(self, key: Any) -> None:
        super().__init__(f"Cache entry already exists for key: {key!r}")
        self.key = key

"""Exception types for watchfilter."""

from __future__ import annotations


class WatchFilterError(Exception):
    """Base class for all watchfilter errors."""


class ConfigError(WatchFilterError):
    """Raised when a settings file cannot be read or validated."""


class StorageError(WatchFilterError):
    """Raised when a key-value store cannot read or write a value."""


class ListingUnavailableError(WatchFilterError):
    """Raised by a directory lister that cannot list at all.

    Repository detection treats this differently from an ordinary listing
    failure: it falls back to guessing from the directory name.
    """

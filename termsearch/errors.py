"""
Error types raised by the termsearch core.

Every failure caused by caller-supplied data surfaces as a SearchError
subclass. Where a builtin exception describes the same situation the
error also derives from it, so callers can catch either.
"""


class SearchError(Exception):
    """Base class for all termsearch errors."""


class PatternError(SearchError, ValueError):
    """An engine's regex, replacement or placeholder could not be applied."""


class NotFound(SearchError, LookupError):
    """No engine matched the requested name or id."""


class EmptyCatalog(SearchError):
    """A removal was attempted on a catalog with no engines."""


class IndexOutOfBounds(SearchError, IndexError):
    """A positional removal referenced an index outside the catalog."""


class MalformedConfig(SearchError, ValueError):
    """The catalog file could not be deserialized."""


class StorageError(SearchError, OSError):
    """The catalog file could not be created, read, written or flushed."""

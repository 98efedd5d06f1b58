"""Error taxonomy for aggregation runs and reconciliation checks."""

from __future__ import annotations


class AggregatorError(RuntimeError):
    """Base class for failures raised by aggregator collaborators."""


class ConfigFetchError(AggregatorError):
    """Raised when the declared set of source URLs cannot be retrieved."""


class SourceFetchError(AggregatorError):
    """Raised when a metadata document cannot be fetched from its source URL."""

    def __init__(self, message: str, *, url: str) -> None:
        super().__init__(message)
        self.url = url


class StoreError(AggregatorError):
    """Base class for metadata store failures."""

    def __init__(self, message: str, *, key: str | None = None) -> None:
        super().__init__(message)
        self.key = key


class StoreWriteError(StoreError):
    """Raised when a document cannot be written to the store."""


class StoreDeleteError(StoreError):
    """Raised when a store entry cannot be removed."""


class StoreListError(StoreError):
    """Raised when the store's key set cannot be listed."""


class StoreReadError(StoreError):
    """Raised when a store entry cannot be read."""


class MetadataNotFoundError(StoreReadError):
    """Raised when no store entry exists for the requested key."""

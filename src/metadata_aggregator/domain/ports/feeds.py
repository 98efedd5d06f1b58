"""Ports for the collaborators that supply source URLs and documents."""

from __future__ import annotations

from typing import Protocol, runtime_checkable


@runtime_checkable
class ConfigFeed(Protocol):
    """Supplies the set of source URLs declared for the current run.

    Implementations raise :class:`~metadata_aggregator.domain.errors.ConfigFetchError`
    when the declaration cannot be retrieved or is invalid.
    """

    def fetch_source_urls(self) -> frozenset[str]: ...


@runtime_checkable
class SourceFeed(Protocol):
    """Fetches the current metadata document published at a source URL.

    Implementations raise :class:`~metadata_aggregator.domain.errors.SourceFetchError`.
    """

    def fetch_document(self, url: str) -> bytes: ...


__all__ = ["ConfigFeed", "SourceFeed"]

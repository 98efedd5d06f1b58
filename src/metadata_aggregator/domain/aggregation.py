"""Reconciliation pass that keeps the metadata store in line with the declared sources.

A run fetches the declared source URLs, prunes store entries for URLs that are
no longer declared, then refreshes every declared URL independently. A failure
for one URL never blocks the others; when a refresh fails the URL's entry is
removed so the store never serves a stale or half-written document.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import TYPE_CHECKING

from .errors import (
    ConfigFetchError,
    SourceFetchError,
    StoreDeleteError,
    StoreListError,
    StoreWriteError,
)
from .keys import decode_keys, encode_url
from .ports.metrics import MetricsSink, NullMetricsSink

if TYPE_CHECKING:
    from .ports.feeds import ConfigFeed, SourceFeed
    from .ports.store import MetadataStore

log = logging.getLogger(__name__)


@dataclass(frozen=True, slots=True)
class AggregationResult:
    """Outcome of a single aggregation run."""

    succeeded: frozenset[str] = frozenset()
    failed: frozenset[str] = frozenset()
    deleted: frozenset[str] = frozenset()
    undecodable_keys: frozenset[str] = frozenset()
    config_error: str | None = None

    @property
    def total(self) -> int:
        return len(self.succeeded) + len(self.failed)

    @property
    def aborted(self) -> bool:
        return self.config_error is not None


@dataclass(frozen=True, slots=True)
class _PruneOutcome:
    deleted: frozenset[str] = frozenset()
    undecodable_keys: frozenset[str] = frozenset()


@dataclass(slots=True)
class MetadataAggregator:
    config_feed: ConfigFeed
    source_feed: SourceFeed
    store: MetadataStore
    metrics: MetricsSink = field(default_factory=NullMetricsSink)
    logger: logging.Logger = field(default=log)

    def run(self) -> AggregationResult:
        """Run one reconciliation pass and return its summary."""

        try:
            config_urls = frozenset(self.config_feed.fetch_source_urls())
        except ConfigFetchError as exc:
            self.logger.error("Unable to download aggregator config: %s", exc)
            self.metrics.increment("aggregation.config_fetch_failed")
            return AggregationResult(config_error=str(exc))

        self.logger.info("Processing %d configured metadata sources", len(config_urls))
        pruned = self._prune(config_urls)

        succeeded: set[str] = set()
        failed: set[str] = set()
        for url in sorted(config_urls):
            if self._refresh(url):
                succeeded.add(url)
            else:
                failed.add(url)

        self.metrics.increment("aggregation.uploaded", len(succeeded))
        self.metrics.increment("aggregation.failed", len(failed))
        self.logger.info(
            "Finished processing metadata with %d successful uploads out of %d",
            len(succeeded),
            len(config_urls),
        )
        return AggregationResult(
            succeeded=frozenset(succeeded),
            failed=frozenset(failed),
            deleted=pruned.deleted,
            undecodable_keys=pruned.undecodable_keys,
        )

    def _prune(self, config_urls: frozenset[str]) -> _PruneOutcome:
        try:
            bucket_keys = tuple(self.store.list_keys())
        except StoreListError as exc:
            self.logger.error("Unable to list keys in metadata store, skipping pruning: %s", exc)
            self.metrics.increment("aggregation.prune_failed")
            return _PruneOutcome()

        decoded = decode_keys(bucket_keys)
        for key in sorted(decoded.invalid_keys):
            self.logger.warning("Leaving store key that is not a valid encoded URL: %s", key)
        self.metrics.increment("aggregation.invalid_keys", len(decoded.invalid_keys))

        deleted: set[str] = set()
        for key, url in sorted(decoded.urls_by_key.items()):
            if url in config_urls:
                continue
            self.logger.info("Removing metadata for %s, no longer configured", url)
            if self._delete(key, url):
                deleted.add(key)
        self.metrics.increment("aggregation.pruned", len(deleted))
        return _PruneOutcome(deleted=frozenset(deleted), undecodable_keys=decoded.invalid_keys)

    def _refresh(self, url: str) -> bool:
        key = encode_url(url)
        try:
            document = self.source_feed.fetch_document(url)
        except SourceFetchError as exc:
            self.logger.error("Error downloading metadata from %s: %s", url, exc)
            self._delete(key, url)
            return False

        try:
            self.store.put(key, document)
        except StoreWriteError as exc:
            self.logger.error("Error uploading metadata from %s: %s", url, exc)
            self._delete(key, url)
            return False

        self.logger.debug("Uploaded metadata from %s under key %s", url, key)
        return True

    def _delete(self, key: str, url: str) -> bool:
        try:
            self.store.delete(key)
        except StoreDeleteError as exc:
            self.logger.error("Error deleting metadata for %s (key %s): %s", url, key, exc)
            return False
        return True

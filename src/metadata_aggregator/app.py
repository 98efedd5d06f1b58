"""Application orchestration entry points."""

from __future__ import annotations

from logging import getLogger
from typing import TYPE_CHECKING, Any

from metadata_aggregator.adapters import (
    HttpConfigFeed,
    HttpMetadataSource,
    InMemoryMetadataStore,
    S3ConfigFeed,
    S3MetadataStore,
    create_s3_client,
)
from metadata_aggregator.config import get_aggregator_settings
from metadata_aggregator.domain import (
    AggregationResult,
    HealthCheckResult,
    MetadataAggregator,
    ReconciliationHealthCheck,
)
from metadata_aggregator.domain.ports import NullMetricsSink

if TYPE_CHECKING:
    from metadata_aggregator.config import AggregatorSettings
    from metadata_aggregator.domain.ports import ConfigFeed, MetadataStore, MetricsSink, SourceFeed


log = getLogger(__name__)


def build_config_feed(settings: AggregatorSettings, *, s3_client: Any | None = None) -> ConfigFeed:
    location = settings.config_location
    if location.is_s3:
        bucket, key = location.s3_bucket_and_key()
        return S3ConfigFeed(
            bucket_name=bucket,
            key=key,
            client=s3_client or create_s3_client(settings.store.region),
        )
    return HttpConfigFeed(url=location.url, settings=settings.source)


def build_metadata_store(
    settings: AggregatorSettings, *, s3_client: Any | None = None
) -> MetadataStore:
    return S3MetadataStore.from_settings(settings.store, client=s3_client)


def run_aggregation(
    *,
    settings: AggregatorSettings | None = None,
    config_feed: ConfigFeed | None = None,
    source_feed: SourceFeed | None = None,
    store: MetadataStore | None = None,
    metrics: MetricsSink | None = None,
    dry_run: bool = False,
) -> AggregationResult:
    """Run one aggregation pass using the configured adapters.

    Explicitly passed collaborators take precedence over the ones built from
    ``settings``. With ``dry_run`` the documents are fetched and validated but
    written to a throwaway in-memory store.
    """

    if dry_run:
        store = InMemoryMetadataStore()
    if config_feed is None or source_feed is None or store is None:
        effective_settings = settings or get_aggregator_settings()
        config_feed = config_feed or build_config_feed(effective_settings)
        source_feed = source_feed or HttpMetadataSource(settings=effective_settings.source)
        store = store or build_metadata_store(effective_settings)

    aggregator = MetadataAggregator(
        config_feed=config_feed,
        source_feed=source_feed,
        store=store,
        metrics=metrics or NullMetricsSink(),
    )

    log.info("Starting metadata aggregation%s", " (dry run)" if dry_run else "")
    result = aggregator.run()
    log.info(
        "Aggregation finished: succeeded=%s, failed=%s, pruned=%s, invalid_keys=%s, aborted=%s",
        len(result.succeeded),
        len(result.failed),
        len(result.deleted),
        len(result.undecodable_keys),
        result.aborted,
    )
    return result


def check_reconciliation(
    *,
    settings: AggregatorSettings | None = None,
    config_feed: ConfigFeed | None = None,
    store: MetadataStore | None = None,
) -> HealthCheckResult:
    """Compare the configured sources with the store without touching either."""

    if config_feed is None or store is None:
        effective_settings = settings or get_aggregator_settings()
        config_feed = config_feed or build_config_feed(effective_settings)
        store = store or build_metadata_store(effective_settings)

    return ReconciliationHealthCheck(config_feed=config_feed, store=store).check()

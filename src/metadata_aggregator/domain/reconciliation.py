"""Read-only comparison of the configured sources with the store's contents."""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Final

from .errors import ConfigFetchError, StoreListError
from .keys import decode_keys

if TYPE_CHECKING:
    from collections.abc import Iterable, Mapping

    from .ports.feeds import ConfigFeed
    from .ports.store import MetadataStore

log = logging.getLogger(__name__)

IN_CONFIG_NOT_IN_BUCKET: Final[str] = "inConfigNotInBucket"
IN_BUCKET_NOT_IN_CONFIG: Final[str] = "inBucketNotInConfig"
INVALID_HEX_ENCODED_URL: Final[str] = "invalidHexEncodedUrl"
CONFIG_UNAVAILABLE: Final[str] = "configUnavailable"
STORE_UNAVAILABLE: Final[str] = "storeUnavailable"


@dataclass(frozen=True, slots=True)
class ReconciliationReport:
    """Agreement between configured URLs and stored keys.

    ``in_bucket_not_in_config`` holds decoded URLs. ``invalid_keys`` holds the
    raw keys that failed to decode; they appear in no other set.
    """

    matched: frozenset[str] = frozenset()
    in_config_not_in_bucket: frozenset[str] = frozenset()
    in_bucket_not_in_config: frozenset[str] = frozenset()
    invalid_keys: frozenset[str] = frozenset()

    @property
    def healthy(self) -> bool:
        return not (
            self.in_config_not_in_bucket or self.in_bucket_not_in_config or self.invalid_keys
        )

    def diagnostics(self) -> dict[str, list[str]]:
        labelled = {
            IN_CONFIG_NOT_IN_BUCKET: self.in_config_not_in_bucket,
            IN_BUCKET_NOT_IN_CONFIG: self.in_bucket_not_in_config,
            INVALID_HEX_ENCODED_URL: self.invalid_keys,
        }
        return {name: sorted(values) for name, values in labelled.items() if values}


def reconcile(config_urls: Iterable[str], bucket_keys: Iterable[str]) -> ReconciliationReport:
    configured = frozenset(config_urls)
    decoded = decode_keys(bucket_keys)
    stored = decoded.urls
    return ReconciliationReport(
        matched=configured & stored,
        in_config_not_in_bucket=configured - stored,
        in_bucket_not_in_config=stored - configured,
        invalid_keys=decoded.invalid_keys,
    )


@dataclass(frozen=True, slots=True)
class HealthCheckResult:
    healthy: bool
    message: str
    details: Mapping[str, list[str]] = field(default_factory=dict)

    def to_dict(self) -> dict[str, object]:
        return {
            "healthy": self.healthy,
            "message": self.message,
            "details": {name: list(values) for name, values in self.details.items()},
        }


@dataclass(slots=True)
class ReconciliationHealthCheck:
    """Reports whether every configured URL has a stored document and nothing else is stored.

    The check never mutates the store and never raises for an unreachable feed;
    such failures are reported as unhealthy results with their own diagnostic.
    """

    config_feed: ConfigFeed
    store: MetadataStore
    logger: logging.Logger = field(default=log)

    def check(self) -> HealthCheckResult:
        try:
            config_urls = self.config_feed.fetch_source_urls()
        except ConfigFetchError as exc:
            self.logger.warning("Reconciliation check could not read config: %s", exc)
            return HealthCheckResult(
                healthy=False,
                message="Unable to retrieve aggregator config",
                details={CONFIG_UNAVAILABLE: [str(exc)]},
            )

        try:
            bucket_keys = self.store.list_keys()
        except StoreListError as exc:
            self.logger.warning("Reconciliation check could not list store keys: %s", exc)
            return HealthCheckResult(
                healthy=False,
                message="Unable to list metadata store keys",
                details={STORE_UNAVAILABLE: [str(exc)]},
            )

        report = reconcile(config_urls, bucket_keys)
        if report.healthy:
            return HealthCheckResult(
                healthy=True,
                message=f"{len(report.matched)} configured sources present in store",
            )

        details = report.diagnostics()
        self.logger.warning("Config and metadata store are out of sync: %s", details)
        return HealthCheckResult(
            healthy=False,
            message="Config and metadata store are out of sync",
            details=details,
        )

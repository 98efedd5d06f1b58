"""Core aggregation and reconciliation logic."""

from __future__ import annotations

from .aggregation import AggregationResult, MetadataAggregator
from .errors import (
    AggregatorError,
    ConfigFetchError,
    MetadataNotFoundError,
    SourceFetchError,
    StoreDeleteError,
    StoreError,
    StoreListError,
    StoreReadError,
    StoreWriteError,
)
from .keys import DecodedKeys, DecodeError, decode_key, decode_keys, encode_url
from .reconciliation import (
    HealthCheckResult,
    ReconciliationHealthCheck,
    ReconciliationReport,
    reconcile,
)

__all__ = [
    "AggregationResult",
    "AggregatorError",
    "ConfigFetchError",
    "DecodeError",
    "DecodedKeys",
    "HealthCheckResult",
    "MetadataAggregator",
    "MetadataNotFoundError",
    "ReconciliationHealthCheck",
    "ReconciliationReport",
    "SourceFetchError",
    "StoreDeleteError",
    "StoreError",
    "StoreListError",
    "StoreReadError",
    "StoreWriteError",
    "decode_key",
    "decode_keys",
    "encode_url",
    "reconcile",
]

"""Domain port definitions for adapters."""

from __future__ import annotations

from .feeds import ConfigFeed, SourceFeed
from .metrics import MetricsSink, NullMetricsSink
from .store import MetadataStore

__all__ = [
    "ConfigFeed",
    "MetadataStore",
    "MetricsSink",
    "NullMetricsSink",
    "SourceFeed",
]

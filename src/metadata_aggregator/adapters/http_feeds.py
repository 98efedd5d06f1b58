"""httpx-backed feeds for source documents and the aggregator config."""

from __future__ import annotations

from dataclasses import dataclass, field
from logging import getLogger
from typing import TYPE_CHECKING

import httpx
from lxml import etree

from metadata_aggregator.config import SourceSettings
from metadata_aggregator.domain.errors import ConfigFetchError, SourceFetchError

from .schema import parse_config_document

if TYPE_CHECKING:
    from collections.abc import Callable

    from metadata_aggregator.domain.ports import ConfigFeed, SourceFeed

log = getLogger(__name__)

# Malformed URLs fail while httpx builds the request, outside its HTTPError tree.
_INVALID_URL_ERRORS = (httpx.InvalidURL, UnicodeError)


def _default_client_factory(settings: SourceSettings) -> httpx.Client:
    return httpx.Client(
        timeout=settings.timeout_seconds,
        headers={"User-Agent": settings.user_agent},
        follow_redirects=True,
    )


def _ensure_well_formed_xml(url: str, document: bytes) -> None:
    # Remote documents are untrusted: no entity expansion, no network lookups.
    parser = etree.XMLParser(resolve_entities=False, no_network=True)
    try:
        etree.fromstring(document, parser=parser)
    except etree.XMLSyntaxError as exc:
        msg = f"Metadata from {url} is not well-formed XML: {exc}"
        raise SourceFetchError(msg, url=url) from exc


@dataclass(slots=True)
class HttpMetadataSource:
    """Downloads country metadata documents over HTTP(S).

    Signature and expiry checks belong to consumers of the aggregated
    documents; this source only rejects responses that cannot be metadata.
    """

    settings: SourceSettings = field(default_factory=SourceSettings)
    client_factory: Callable[[SourceSettings], httpx.Client] = field(
        default=_default_client_factory
    )

    def fetch_document(self, url: str) -> bytes:
        log.debug("Downloading metadata from %s", url)
        try:
            with self.client_factory(self.settings) as client:
                response = client.get(url)
                response.raise_for_status()
        except httpx.HTTPStatusError as exc:
            raise SourceFetchError(
                f"Metadata source {url} returned HTTP {exc.response.status_code}", url=url
            ) from exc
        except httpx.HTTPError as exc:
            msg = f"Unable to reach metadata source {url}: {exc}"
            raise SourceFetchError(msg, url=url) from exc
        except _INVALID_URL_ERRORS as exc:
            msg = f"Invalid metadata source URL {url!r}: {exc}"
            raise SourceFetchError(msg, url=url) from exc

        document = response.content
        if not document.strip():
            raise SourceFetchError(f"Metadata source {url} returned an empty document", url=url)
        _ensure_well_formed_xml(url, document)
        return document


@dataclass(slots=True)
class HttpConfigFeed:
    """Reads the aggregator config document from an HTTP(S) URL."""

    url: str
    settings: SourceSettings = field(default_factory=SourceSettings)
    client_factory: Callable[[SourceSettings], httpx.Client] = field(
        default=_default_client_factory
    )

    def fetch_source_urls(self) -> frozenset[str]:
        try:
            with self.client_factory(self.settings) as client:
                response = client.get(self.url)
                response.raise_for_status()
        except httpx.HTTPError as exc:
            msg = f"Unable to download aggregator config from {self.url}: {exc}"
            raise ConfigFetchError(msg) from exc
        except _INVALID_URL_ERRORS as exc:
            msg = f"Invalid aggregator config URL {self.url!r}: {exc}"
            raise ConfigFetchError(msg) from exc

        document = parse_config_document(response.content, location=self.url)
        return document.source_urls()


if TYPE_CHECKING:
    _source_check: SourceFeed = HttpMetadataSource()
    _config_check: ConfigFeed = HttpConfigFeed(url="https://example.invalid/config.json")

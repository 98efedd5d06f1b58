"""Aggregator settings loaded from the environment."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Final
from urllib.parse import urlsplit

from metadata_aggregator import __version__

from .env import float_env_var, optional_env_var, require_env_vars
from .errors import ConfigurationError

DEFAULT_AWS_REGION: Final[str] = "eu-west-1"
DEFAULT_SERVER_SIDE_ENCRYPTION: Final[str] = "AES256"
DEFAULT_SOURCE_TIMEOUT_SECONDS: Final[float] = 15.0
METADATA_CONTENT_TYPE: Final[str] = "application/samlmetadata+xml"


def _default_user_agent() -> str:
    return f"metadata-aggregator/{__version__}"


@dataclass(frozen=True, slots=True)
class StoreSettings:
    bucket_name: str
    region: str = DEFAULT_AWS_REGION
    acl: str | None = None
    server_side_encryption: str | None = DEFAULT_SERVER_SIDE_ENCRYPTION
    content_type: str = METADATA_CONTENT_TYPE


@dataclass(frozen=True, slots=True)
class SourceSettings:
    timeout_seconds: float = DEFAULT_SOURCE_TIMEOUT_SECONDS
    user_agent: str = field(default_factory=_default_user_agent)


@dataclass(frozen=True, slots=True)
class ConfigLocation:
    """Where the aggregator config document lives: an HTTP(S) URL or an S3 object."""

    url: str

    @property
    def is_s3(self) -> bool:
        return urlsplit(self.url).scheme == "s3"

    def s3_bucket_and_key(self) -> tuple[str, str]:
        parts = urlsplit(self.url)
        key = parts.path.lstrip("/")
        if parts.scheme != "s3" or not parts.netloc or not key:
            raise ConfigurationError(f"Not an s3://bucket/key location: {self.url}")
        return parts.netloc, key

    @classmethod
    def parse(cls, url: str) -> ConfigLocation:
        scheme = urlsplit(url).scheme
        if scheme not in {"http", "https", "s3"}:
            raise ConfigurationError(
                f"AGGREGATOR_CONFIG_URL must be an http(s):// or s3:// URL, got {url!r}"
            )
        location = cls(url=url)
        if location.is_s3:
            location.s3_bucket_and_key()
        return location


@dataclass(frozen=True, slots=True)
class AggregatorSettings:
    config_location: ConfigLocation
    store: StoreSettings
    source: SourceSettings = field(default_factory=SourceSettings)


def get_aggregator_settings() -> AggregatorSettings:
    values = require_env_vars(("METADATA_BUCKET_NAME", "AGGREGATOR_CONFIG_URL"))
    store = StoreSettings(
        bucket_name=values["METADATA_BUCKET_NAME"],
        region=optional_env_var("AWS_REGION", DEFAULT_AWS_REGION) or DEFAULT_AWS_REGION,
        acl=optional_env_var("METADATA_ACL"),
        server_side_encryption=optional_env_var(
            "METADATA_SERVER_SIDE_ENCRYPTION", DEFAULT_SERVER_SIDE_ENCRYPTION
        ),
    )
    source = SourceSettings(
        timeout_seconds=float_env_var("SOURCE_TIMEOUT_SECONDS", DEFAULT_SOURCE_TIMEOUT_SECONDS),
        user_agent=optional_env_var("SOURCE_USER_AGENT") or _default_user_agent(),
    )
    return AggregatorSettings(
        config_location=ConfigLocation.parse(values["AGGREGATOR_CONFIG_URL"]),
        store=store,
        source=source,
    )

"""boto3-backed metadata store and config feed."""

from __future__ import annotations

from dataclasses import dataclass
from logging import getLogger
from typing import TYPE_CHECKING, Any

import boto3
from botocore.exceptions import BotoCoreError, ClientError

from metadata_aggregator.config import METADATA_CONTENT_TYPE
from metadata_aggregator.domain.errors import (
    ConfigFetchError,
    MetadataNotFoundError,
    StoreDeleteError,
    StoreListError,
    StoreReadError,
    StoreWriteError,
)

from .schema import parse_config_document

if TYPE_CHECKING:
    from metadata_aggregator.config import StoreSettings
    from metadata_aggregator.domain.ports import ConfigFeed, MetadataStore

log = getLogger(__name__)

_AWS_ERRORS = (BotoCoreError, ClientError)
_MISSING_KEY_CODES = frozenset({"NoSuchKey", "404", "NotFound"})


def create_s3_client(region: str | None = None) -> Any:
    return boto3.Session(region_name=region).client("s3")


def _error_code(exc: ClientError) -> str:
    return str(exc.response.get("Error", {}).get("Code", ""))


@dataclass(slots=True)
class S3MetadataStore:
    """Stores each metadata document as one object in a single bucket."""

    bucket_name: str
    client: Any
    content_type: str = METADATA_CONTENT_TYPE
    server_side_encryption: str | None = None
    acl: str | None = None

    @classmethod
    def from_settings(
        cls, settings: StoreSettings, *, client: Any | None = None
    ) -> S3MetadataStore:
        return cls(
            bucket_name=settings.bucket_name,
            client=client or create_s3_client(settings.region),
            content_type=settings.content_type,
            server_side_encryption=settings.server_side_encryption,
            acl=settings.acl,
        )

    def put(self, key: str, document: bytes) -> None:
        params: dict[str, Any] = {
            "Bucket": self.bucket_name,
            "Key": key,
            "Body": document,
            "ContentType": self.content_type,
        }
        if self.server_side_encryption:
            params["ServerSideEncryption"] = self.server_side_encryption
        if self.acl:
            params["ACL"] = self.acl
        try:
            self.client.put_object(**params)
        except _AWS_ERRORS as exc:
            raise StoreWriteError(
                f"Error uploading metadata to S3 bucket {self.bucket_name}: {exc}", key=key
            ) from exc

    def delete(self, key: str) -> None:
        log.info("Deleting metadata with key %s from S3 bucket %s", key, self.bucket_name)
        try:
            self.client.delete_object(Bucket=self.bucket_name, Key=key)
        except _AWS_ERRORS as exc:
            raise StoreDeleteError(
                f"Error removing metadata from S3 bucket {self.bucket_name}: {exc}", key=key
            ) from exc

    def list_keys(self) -> list[str]:
        keys: list[str] = []
        try:
            paginator = self.client.get_paginator("list_objects_v2")
            for page in paginator.paginate(Bucket=self.bucket_name):
                keys.extend(obj["Key"] for obj in page.get("Contents", ()))
        except _AWS_ERRORS as exc:
            raise StoreListError(
                f"Error retrieving objects from S3 bucket {self.bucket_name}: {exc}"
            ) from exc
        return keys

    def get(self, key: str) -> bytes:
        try:
            response = self.client.get_object(Bucket=self.bucket_name, Key=key)
            return response["Body"].read()
        except ClientError as exc:
            if _error_code(exc) in _MISSING_KEY_CODES:
                raise MetadataNotFoundError(
                    f"No metadata with key {key} in S3 bucket {self.bucket_name}", key=key
                ) from exc
            raise StoreReadError(
                f"Error downloading metadata from S3 bucket {self.bucket_name}: {exc}", key=key
            ) from exc
        except BotoCoreError as exc:
            raise StoreReadError(
                f"Error downloading metadata from S3 bucket {self.bucket_name}: {exc}", key=key
            ) from exc


@dataclass(slots=True)
class S3ConfigFeed:
    """Reads the aggregator config document from an S3 object."""

    bucket_name: str
    key: str
    client: Any

    def fetch_source_urls(self) -> frozenset[str]:
        location = f"s3://{self.bucket_name}/{self.key}"
        try:
            response = self.client.get_object(Bucket=self.bucket_name, Key=self.key)
            raw = response["Body"].read()
        except _AWS_ERRORS as exc:
            msg = f"Unable to download aggregator config from {location}: {exc}"
            raise ConfigFetchError(msg) from exc
        return parse_config_document(raw, location=location).source_urls()


if TYPE_CHECKING:
    _store_check: MetadataStore = S3MetadataStore(bucket_name="bucket", client=None)
    _config_check: ConfigFeed = S3ConfigFeed(bucket_name="bucket", key="config.json", client=None)

"""Pydantic model of the aggregator config document."""

from __future__ import annotations

from pydantic import BaseModel, ConfigDict, Field, ValidationError, field_validator

from metadata_aggregator.domain.errors import ConfigFetchError


class AggregatorConfigDocument(BaseModel):
    """Country code to metadata URL mapping, e.g. ``{"metadataUrls": {"NL": "https://..."}}``."""

    model_config = ConfigDict(extra="ignore", populate_by_name=True, frozen=True)

    metadata_urls: dict[str, str] = Field(alias="metadataUrls")

    @field_validator("metadata_urls")
    @classmethod
    def _reject_blank_urls(cls, value: dict[str, str]) -> dict[str, str]:
        blank = sorted(country for country, url in value.items() if not url.strip())
        if blank:
            raise ValueError(f"Blank metadata URL for: {', '.join(blank)}")
        return {country: url.strip() for country, url in value.items()}

    def source_urls(self) -> frozenset[str]:
        return frozenset(self.metadata_urls.values())


def parse_config_document(raw: bytes | str, *, location: str) -> AggregatorConfigDocument:
    """Validate a JSON config document, raising :class:`ConfigFetchError` when it is invalid."""

    try:
        return AggregatorConfigDocument.model_validate_json(raw)
    except ValidationError as exc:
        raise ConfigFetchError(f"Invalid aggregator config at {location}: {exc}") from exc

"""Dict-backed metadata store."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import TYPE_CHECKING

from metadata_aggregator.domain.errors import MetadataNotFoundError

if TYPE_CHECKING:
    from metadata_aggregator.domain.ports import MetadataStore


@dataclass(slots=True)
class InMemoryMetadataStore:
    """Keeps documents in a dict; used for dry runs and tests."""

    documents: dict[str, bytes] = field(default_factory=dict)

    def put(self, key: str, document: bytes) -> None:
        self.documents[key] = bytes(document)

    def delete(self, key: str) -> None:
        self.documents.pop(key, None)

    def list_keys(self) -> tuple[str, ...]:
        return tuple(self.documents)

    def get(self, key: str) -> bytes:
        try:
            return self.documents[key]
        except KeyError:
            raise MetadataNotFoundError(f"No metadata stored under key {key}", key=key) from None


if TYPE_CHECKING:
    _store_check: MetadataStore = InMemoryMetadataStore()

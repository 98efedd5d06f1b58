"""Port for the object store holding aggregated metadata documents."""

from __future__ import annotations

from typing import TYPE_CHECKING, Protocol, runtime_checkable

if TYPE_CHECKING:
    from collections.abc import Sequence


@runtime_checkable
class MetadataStore(Protocol):
    """Key/value store of documents keyed by encoded source URL.

    Every operation is independently fallible and never retried implicitly.
    """

    def put(self, key: str, document: bytes) -> None:
        """Write ``document`` under ``key``, replacing any prior content (``StoreWriteError``)."""
        ...

    def delete(self, key: str) -> None:
        """Remove ``key``; a missing key is not an error (``StoreDeleteError``)."""
        ...

    def list_keys(self) -> Sequence[str]:
        """Return every key currently present, in no meaningful order (``StoreListError``)."""
        ...

    def get(self, key: str) -> bytes:
        """Return the document under ``key`` (``StoreReadError``, ``MetadataNotFoundError``)."""
        ...


__all__ = ["MetadataStore"]

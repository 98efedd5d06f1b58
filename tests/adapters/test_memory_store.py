from __future__ import annotations

import pytest

from metadata_aggregator.adapters.memory import InMemoryMetadataStore
from metadata_aggregator.domain.errors import MetadataNotFoundError
from metadata_aggregator.domain.ports import MetadataStore


def test_memory_store_satisfies_port() -> None:
    assert isinstance(InMemoryMetadataStore(), MetadataStore)


def test_put_get_delete_cycle() -> None:
    store = InMemoryMetadataStore()

    store.put("6b6579", b"<doc/>")
    store.put("6b6579", b"<doc2/>")

    assert store.get("6b6579") == b"<doc2/>"
    assert store.list_keys() == ("6b6579",)

    store.delete("6b6579")
    store.delete("6b6579")

    assert store.list_keys() == ()


def test_get_missing_key_raises() -> None:
    with pytest.raises(MetadataNotFoundError) as exc:
        InMemoryMetadataStore().get("6b6579")

    assert exc.value.key == "6b6579"

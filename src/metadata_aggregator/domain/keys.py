"""Reversible mapping between source URLs and storage keys.

Keys are the lowercase hex form of the URL's UTF-8 bytes. Only that canonical
form decodes, so every URL has exactly one key and a key never decodes to a
URL whose own key differs from it.
"""

from __future__ import annotations

import string
from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Final

if TYPE_CHECKING:
    from collections.abc import Iterable, Mapping

_KEY_ALPHABET: Final[frozenset[str]] = frozenset(string.digits + "abcdef")


class DecodeError(ValueError):
    """Raised when a storage key is not a valid encoded URL."""

    def __init__(self, message: str, *, key: str) -> None:
        super().__init__(message)
        self.key = key


def encode_url(url: str) -> str:
    """Return the storage key for ``url``.

    The empty string has no key, mirroring :func:`decode_key` rejecting ``""``.
    """

    if not url:
        raise ValueError("Cannot encode an empty URL")
    return url.encode("utf-8").hex()


def decode_key(key: str) -> str:
    """Return the source URL encoded in ``key`` or raise :class:`DecodeError`."""

    if not key:
        raise DecodeError("Empty storage key", key=key)
    if len(key) % 2:
        raise DecodeError(f"Storage key has odd length: {key!r}", key=key)
    if not _KEY_ALPHABET.issuperset(key):
        raise DecodeError(f"Storage key is not lowercase hex: {key!r}", key=key)
    try:
        return bytes.fromhex(key).decode("utf-8")
    except UnicodeDecodeError as exc:
        raise DecodeError(f"Storage key does not decode to UTF-8 text: {key!r}", key=key) from exc


@dataclass(frozen=True, slots=True)
class DecodedKeys:
    """Partition of a key snapshot into decodable keys and invalid ones."""

    urls_by_key: Mapping[str, str] = field(default_factory=dict)
    invalid_keys: frozenset[str] = frozenset()

    @property
    def urls(self) -> frozenset[str]:
        return frozenset(self.urls_by_key.values())


def decode_keys(keys: Iterable[str]) -> DecodedKeys:
    urls_by_key: dict[str, str] = {}
    invalid: set[str] = set()
    for key in keys:
        try:
            urls_by_key[key] = decode_key(key)
        except DecodeError:
            invalid.add(key)
    return DecodedKeys(urls_by_key=urls_by_key, invalid_keys=frozenset(invalid))

"""A string-keyed map split into shards by an FNV-1 hash of the key."""

from __future__ import annotations

from collections.abc import Callable, Iterator, Mapping
from typing import Any

from xconcur.concurrent_map import Map

_FNV_OFFSET_BASIS = 2166136261
_FNV_PRIME = 16777619
_MASK32 = 0xFFFFFFFF

DEFAULT_BLOCK_SIZE = 32


def fnv32(key: str) -> int:
    """Return the 32-bit FNV-1 hash of the UTF-8 bytes of ``key``."""
    value = _FNV_OFFSET_BASIS
    for byte in key.encode("utf-8"):
        value = (value * _FNV_PRIME) & _MASK32
        value ^= byte
    return value


def shard_block_size(requested: int) -> int:
    """Round ``requested`` up to the nearest power of two.

    Raises ValueError when ``requested`` is smaller than one.
    """
    if requested < 1:
        raise ValueError(f"shard block size must be positive, got {requested}")
    return 1 << (requested - 1).bit_length()


class SharedMap:
    """A concurrent map whose string keys are spread over several shards."""

    def __init__(self, block_size: int = DEFAULT_BLOCK_SIZE) -> None:
        size = shard_block_size(block_size)
        self._shards: tuple[Map, ...] = tuple(Map() for _ in range(size))
        self._mask = size - 1

    @property
    def block_size(self) -> int:
        """Number of shards, always a power of two."""
        return len(self._shards)

    def get_shard(self, key: str) -> Map:
        """Return the shard that holds ``key``."""
        return self._shards[fnv32(key) & self._mask]

    def store(self, key: str, value: Any) -> None:
        """Set the value for a key."""
        self.get_shard(key).store(key, value)

    def mstore(self, data: Mapping[str, Any]) -> None:
        """Set several keys and values at once."""
        for key, value in data.items():
            self.store(key, value)

    def load_or_store(self, key: str, value: Any) -> bool:
        """Store ``value`` if the key is absent; return True if it was stored."""
        _, loaded = self.get_shard(key).load_or_store(key, value)
        return not loaded

    def load(self, key: str) -> tuple[Any, bool]:
        """Return ``(value, True)`` for a present key, else ``(None, False)``."""
        return self.get_shard(key).load(key)

    def items(self) -> Iterator[tuple[str, Any]]:
        """Yield every key and value, shard by shard."""
        for shard in self._shards:
            yield from shard.items()

    def range(self, fn: Callable[[str, Any], bool]) -> None:
        """Call ``fn(key, value)`` for each entry until it returns a false value."""
        for key, value in self.items():
            if not fn(key, value):
                return

    def has(self, key: str) -> bool:
        """Return True if the key is present."""
        _, found = self.get_shard(key).load(key)
        return found

    def delete(self, key: str) -> None:
        """Remove a key if it is present."""
        self.get_shard(key).delete(key)

    def clear(self) -> None:
        """Remove every entry from every shard."""
        for shard in self._shards:
            shard.clear()

    def compute_if_absent(
        self, key: str, compute: Callable[[str], Any]
    ) -> tuple[Any, bool]:
        """Return the value for ``key``, computing and storing it if absent.

        The second result is True if an existing value was returned.
        """
        return self.get_shard(key).compute_if_absent(key, compute)

    def compute_if_present(
        self, key: str, compute: Callable[[str, Any], Any]
    ) -> tuple[Any, bool]:
        """Replace a present key's value with ``compute(key, value)``.

        Returns ``(new_value, True)`` if the key existed, else ``(None, False)``.
        """
        return self.get_shard(key).compute_if_present(key, compute)

    def __len__(self) -> int:
        return sum(len(shard) for shard in self._shards)

    def __contains__(self, key: object) -> bool:
        return isinstance(key, str) and self.has(key)
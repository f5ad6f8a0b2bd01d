"""A thread-safe map with load/store/compute operations."""

from __future__ import annotations

import threading
from collections.abc import Callable, Hashable, Iterator
from typing import Any


class Map:
    """A dictionary that is safe to use from several threads at once.

    Lookups report whether a key was present as a second result, so that
    ``None`` can be stored as an ordinary value.
    """

    def __init__(self) -> None:
        self._lock = threading.RLock()
        self._data: dict[Hashable, Any] = {}

    def load(self, key: Hashable) -> tuple[Any, bool]:
        """Return ``(value, True)`` for a present key, else ``(None, False)``."""
        with self._lock:
            if key in self._data:
                return self._data[key], True
            return None, False

    def store(self, key: Hashable, value: Any) -> None:
        """Set the value for a key."""
        with self._lock:
            self._data[key] = value

    def load_or_store(self, key: Hashable, value: Any) -> tuple[Any, bool]:
        """Return the existing value if present, otherwise store ``value``.

        The second result is True if the value was loaded, False if stored.
        """
        with self._lock:
            if key in self._data:
                return self._data[key], True
            self._data[key] = value
            return value, False

    def load_and_delete(self, key: Hashable) -> tuple[Any, bool]:
        """Remove a key, returning its previous value and whether it existed."""
        with self._lock:
            if key in self._data:
                return self._data.pop(key), True
            return None, False

    def delete(self, key: Hashable) -> None:
        """Remove a key if it is present."""
        self.load_and_delete(key)

    def clear(self) -> None:
        """Remove every entry."""
        with self._lock:
            self._data.clear()

    def items(self) -> Iterator[tuple[Any, Any]]:
        """Yield each present key and its current value.

        Keys are taken from a snapshot when iteration starts; a key removed
        before it is reached is skipped, and the value yielded is the one
        held at the moment the key is visited. No key is visited twice.
        """
        with self._lock:
            keys = list(self._data)
        for key in keys:
            value, found = self.load(key)
            if found:
                yield key, value

    def range(self, fn: Callable[[Any, Any], bool]) -> None:
        """Call ``fn(key, value)`` for each entry until it returns a false value."""
        for key, value in self.items():
            if not fn(key, value):
                break

    def compute_if_absent(
        self, key: Hashable, compute: Callable[[Any], Any]
    ) -> tuple[Any, bool]:
        """Return the value for ``key``, computing and storing it if absent.

        The second result is True if an existing value was returned.
        """
        with self._lock:
            if key in self._data:
                return self._data[key], True
            value = compute(key)
            self._data[key] = value
            return value, False

    def compute_if_present(
        self, key: Hashable, compute: Callable[[Any, Any], Any]
    ) -> tuple[Any, bool]:
        """Replace the value of a present key with ``compute(key, value)``.

        Returns ``(new_value, True)`` if the key existed, else ``(None, False)``.
        """
        with self._lock:
            if key not in self._data:
                return None, False
            value = compute(key, self._data[key])
            self._data[key] = value
            return value, True

    def __len__(self) -> int:
        with self._lock:
            return len(self._data)

    def __contains__(self, key: object) -> bool:
        with self._lock:
            return key in self._data
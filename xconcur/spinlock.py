"""A spin lock that yields the thread while it waits."""

from __future__ import annotations

import threading
import time


class SpinLock:
    """A lock taken by repeated attempts; any thread may release it."""

    def __init__(self) -> None:
        self._guard = threading.Lock()
        self._held = False

    def try_lock(self) -> bool:
        """Take the lock if it is free; return whether it was taken."""
        with self._guard:
            if self._held:
                return False
            self._held = True
            return True

    def lock(self) -> None:
        """Take the lock, yielding the thread until it is free."""
        while not self.try_lock():
            time.sleep(0)

    def unlock(self) -> None:
        """Release the lock."""
        with self._guard:
            self._held = False

    @property
    def locked(self) -> bool:
        """Whether the lock is currently held."""
        return self._held

    def __enter__(self) -> SpinLock:
        self.lock()
        return self

    def __exit__(self, *exc_info: object) -> None:
        self.unlock()
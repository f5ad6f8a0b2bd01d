"""A manager that creates shared closable resources once per key."""

from __future__ import annotations

import threading
from collections.abc import Callable
from dataclasses import dataclass, field
from typing import Any, Protocol


class Closable(Protocol):
    def close(self) -> Any: ...


@dataclass
class _Call:
    done: threading.Event = field(default_factory=threading.Event)
    value: Any = None
    error: BaseException | None = None


class ResourceManager:
    """Hands out one resource per key, creating it on first request.

    Concurrent requests for a key that is still being created wait for that
    single creation and share its result or its error.
    """

    def __init__(self) -> None:
        self._lock = threading.Lock()
        self._resources: dict[str, Closable] | None = {}
        self._inflight: dict[str, _Call] = {}

    def get(self, key: str, create: Callable[[], Closable]) -> Closable:
        """Return the resource for ``key``, creating it with ``create`` if needed.

        Errors raised by ``create`` propagate and nothing is stored.
        Raises RuntimeError once the manager has been closed.
        """
        with self._lock:
            if self._resources is None:
                raise RuntimeError("resource manager is closed")
            if key in self._resources:
                return self._resources[key]
            call = self._inflight.get(key)
            leader = call is None
            if leader:
                call = _Call()
                self._inflight[key] = call

        if not leader:
            call.done.wait()
            if call.error is not None:
                raise call.error
            return call.value

        try:
            resource = create()
            with self._lock:
                if self._resources is None:
                    raise RuntimeError("resource manager is closed")
                self._resources[key] = resource
            call.value = resource
            return resource
        except BaseException as exc:
            call.error = exc
            raise
        finally:
            with self._lock:
                self._inflight.pop(key, None)
            call.done.set()

    def remove(self, key: str) -> bool:
        """Forget the resource for ``key`` without closing it; report if it existed."""
        with self._lock:
            if self._resources is None or key not in self._resources:
                return False
            del self._resources[key]
            return True

    def close(self) -> None:
        """Close every resource; the manager must not be used afterwards.

        Every resource is closed even if some fail; the failures are then
        raised together as an ExceptionGroup.
        """
        with self._lock:
            resources = self._resources or {}
            self._resources = None
            errors: list[Exception] = []
            for resource in resources.values():
                try:
                    resource.close()
                except Exception as exc:
                    errors.append(exc)
        if errors:
            raise ExceptionGroup("failed to close resources", errors)

    def __len__(self) -> int:
        with self._lock:
            return len(self._resources or {})

    def __enter__(self) -> ResourceManager:
        return self

    def __exit__(self, *exc_info: object) -> None:
        self.close()
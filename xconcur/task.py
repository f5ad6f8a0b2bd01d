"""Running a function under the control of a cancellable context."""

from __future__ import annotations

import itertools
import threading
from collections.abc import Callable
from dataclasses import dataclass
from typing import Any


class ContextError(Exception):
    """Raised when work stops because its context has finished."""


class ContextCancelled(ContextError):
    """The context was cancelled."""

    def __init__(self, message: str = "context canceled") -> None:
        super().__init__(message)


class DeadlineExceeded(ContextError):
    """The context's deadline passed."""

    def __init__(self, message: str = "context deadline exceeded") -> None:
        super().__init__(message)


class Context:
    """A cancellation signal with an optional deadline and parent.

    A context finishes when it is cancelled, when its timeout (in seconds)
    elapses, or when its parent finishes. Once finished it stays finished,
    and ``err()`` reports why.
    """

    def __init__(
        self, timeout: float | None = None, parent: Context | None = None
    ) -> None:
        self._lock = threading.Lock()
        self._done = threading.Event()
        self._error_type: type[ContextError] | None = None
        self._listeners: dict[int, Callable[[], None]] = {}
        self._ids = itertools.count()
        self._timer: threading.Timer | None = None
        self._detach_parent: Callable[[], None] | None = None

        if parent is not None:
            detach = parent._subscribe(lambda: self._finish(parent._error_type))
            with self._lock:
                if self._done.is_set():
                    detach()
                else:
                    self._detach_parent = detach

        if timeout is not None and not self._done.is_set():
            if timeout <= 0:
                self._finish(DeadlineExceeded)
            else:
                timer = threading.Timer(timeout, self._finish, args=(DeadlineExceeded,))
                timer.daemon = True
                with self._lock:
                    if not self._done.is_set():
                        self._timer = timer
                        timer.start()

    @property
    def done(self) -> bool:
        """Whether the context has finished."""
        return self._done.is_set()

    def cancel(self) -> None:
        """Finish the context as cancelled; does nothing if already finished."""
        self._finish(ContextCancelled)

    def err(self) -> ContextError | None:
        """Return why the context finished, or None while it is still active."""
        error_type = self._error_type
        return error_type() if error_type is not None else None

    def wait(self, timeout: float | None = None) -> bool:
        """Block until the context finishes or ``timeout`` elapses.

        Returns whether the context has finished.
        """
        return self._done.wait(timeout)

    def _finish(self, error_type: type[ContextError] | None) -> None:
        if error_type is None:
            error_type = ContextCancelled
        with self._lock:
            if self._done.is_set():
                return
            self._error_type = error_type
            self._done.set()
            listeners = list(self._listeners.values())
            self._listeners.clear()
            timer, self._timer = self._timer, None
            detach, self._detach_parent = self._detach_parent, None
        if timer is not None:
            timer.cancel()
        if detach is not None:
            detach()
        for listener in listeners:
            listener()

    def _subscribe(self, callback: Callable[[], None]) -> Callable[[], None]:
        """Call ``callback`` once the context finishes; return an unsubscriber."""
        with self._lock:
            if not self._done.is_set():
                token = next(self._ids)
                self._listeners[token] = callback

                def remove() -> None:
                    with self._lock:
                        self._listeners.pop(token, None)

                return remove
        callback()
        return lambda: None

    def __enter__(self) -> Context:
        return self

    def __exit__(self, *exc_info: object) -> None:
        self.cancel()


@dataclass
class _Outcome:
    finished: bool = False
    value: Any = None
    error: BaseException | None = None


def do(
    ctx: Context | None,
    fn: Callable[[], Any],
    defer_func: Callable[[], Any] | None = None,
) -> Any:
    """Run ``fn`` in a separate thread and wait for it or for ``ctx`` to finish.

    Returns what ``fn`` returns and re-raises what it raises. If the context
    finishes first, its error is raised and ``fn`` is left running. If the
    context has already finished, ``fn`` is not started. ``defer_func`` is
    called on the way out in every case. A ``ctx`` of None never finishes.
    """
    try:
        if ctx is not None:
            error = ctx.err()
            if error is not None:
                raise error

        finished = threading.Event()
        outcome = _Outcome()

        def runner() -> None:
            try:
                outcome.value = fn()
            except BaseException as exc:  # handed back to the caller
                outcome.error = exc
            finally:
                outcome.finished = True
                finished.set()

        unsubscribe = ctx._subscribe(finished.set) if ctx is not None else None
        try:
            threading.Thread(target=runner, daemon=True).start()
            finished.wait()
        finally:
            if unsubscribe is not None:
                unsubscribe()

        if outcome.finished:
            if outcome.error is not None:
                raise outcome.error
            return outcome.value
        assert ctx is not None
        raise ctx.err() or ContextCancelled()
    finally:
        if defer_func is not None:
            defer_func()


def do_with_timeout(
    timeout: float,
    fn: Callable[[], Any],
    defer_func: Callable[[], Any] | None = None,
) -> Any:
    """Run ``fn`` as ``do`` does, giving up after ``timeout`` seconds."""
    with Context(timeout=timeout) as ctx:
        return do(ctx, fn, defer_func)


def do_without_defer(ctx: Context | None, fn: Callable[[], Any]) -> Any:
    """Run ``fn`` as ``do`` does, with no function called on the way out."""
    return do(ctx, fn, None)
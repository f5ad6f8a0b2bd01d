"""Bounding how many functions run at the same time."""

from __future__ import annotations

import threading
from collections.abc import Callable
from typing import Any

from xconcur.task import Context, ContextError, do


class Worker:
    """Lets at most ``size`` calls of ``run`` proceed at once."""

    def __init__(self, size: int) -> None:
        if size < 1:
            raise ValueError(f"worker size must be positive, got {size}")
        self._slots = threading.BoundedSemaphore(size)

    def run(
        self,
        ctx: Context | None,
        fn: Callable[[], Any],
        defer_func: Callable[[], Any] | None = None,
    ) -> Any:
        """Run ``fn`` under ``ctx`` once a slot is free.

        Returns what ``fn`` returns, or None if the context finished first;
        errors raised by ``fn`` propagate. ``defer_func`` is always called.
        """
        with self._slots:
            try:
                return do(ctx, fn, defer_func)
            except ContextError:
                return None
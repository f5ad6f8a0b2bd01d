"""Running a function again when it fails."""

from __future__ import annotations

from collections.abc import Callable
from typing import Any

DEFAULT_RETRY_TIMES = 3


def do_with_retry(fn: Callable[[], Any], times: int = DEFAULT_RETRY_TIMES) -> Any:
    """Call ``fn`` until it succeeds, retrying up to ``times`` times.

    Returns the value of the first successful call. If every attempt fails,
    the errors are raised together as an ExceptionGroup. A negative
    ``times`` makes no attempt and returns None.
    """
    errors: list[Exception] = []
    for _ in range(times + 1):
        try:
            return fn()
        except Exception as exc:
            errors.append(exc)
    if errors:
        raise ExceptionGroup(f"failed after {len(errors)} attempts", errors)
    return None
# xconcur

Small thread-based concurrency helpers for Python 3.11 and later. The package
has no dependencies outside the standard library.

## Install

```
pip install xconcur
pip install "xconcur[test]"   # with pytest and hypothesis for the tests
```

## What is inside

- `xconcur.concurrent_map.Map`: a dictionary guarded by a lock, safe to share
  between threads. Lookups return a `(value, found)` pair, so `None` can be
  stored as an ordinary value. Methods: `load`, `store`, `load_or_store`,
  `load_and_delete`, `delete`, `clear`, `items`, `range`, `compute_if_absent`
  and `compute_if_present`; it also supports `len()` and `in`.
  `items()` walks a snapshot of the keys taken when iteration starts and skips
  keys removed before they are reached. `range(fn)` calls `fn(key, value)`
  until it returns a false value.
- `xconcur.sharded_map.SharedMap`: string keys spread over a power-of-two
  number of `Map` shards (32 by default), chosen by the 32-bit FNV-1 hash of
  the key's UTF-8 bytes (`fnv32`). `shard_block_size` rounds the requested
  shard count up to a power of two and raises `ValueError` below one. Besides
  the `Map`-like methods it has `get_shard`, `mstore` (store a whole mapping),
  `has` and the `block_size` property. Its `load_or_store` returns `True` when
  the value was stored and `False` when the key was already present.
- `xconcur.resources.ResourceManager`: `get(key, create)` creates each keyed
  resource once; threads asking for a key that is still being created wait
  for that one call and share its result or its error. `remove(key)` forgets
  a resource without closing it. `close()` closes every resource, raising the
  failures together as an `ExceptionGroup`; after it, `get` raises
  `RuntimeError`. It can be used as a context manager.
- `xconcur.spinlock.SpinLock`: `lock`, `try_lock`, `unlock`, a `locked`
  property, and use as a context manager. Any thread may release it.
- `xconcur.system.in_container(cgroup_path="/proc/self/cgroup")`: `True` if the
  cgroup file mentions `docker`, `kubepods` or `containerd`; `False` if it does
  not or cannot be read.
- `xconcur.task`: `Context` is a cancellation signal with an optional timeout
  in seconds and an optional parent; it has `cancel()`, `err()`, `wait()` and
  a `done` property, and cancels itself when leaving a `with` block.
  `do(ctx, fn, defer_func)` runs `fn` in a separate thread and returns its
  result or re-raises its exception; if the context finishes first, it raises
  `ContextCancelled` or `DeadlineExceeded` (both subclasses of `ContextError`)
  and leaves `fn` running. `defer_func` is always called on the way out.
  `do_with_timeout` and `do_without_defer` are shorthands.
- `xconcur.retry.do_with_retry(fn, times=3)`: calls `fn` until it succeeds,
  up to `times` retries after the first attempt, and returns its result; if
  all attempts fail the errors are raised together as an `ExceptionGroup`.
- `xconcur.worker.Worker(size)`: `run(ctx, fn, defer_func)` lets at most
  `size` calls proceed at once; it returns `None` instead of raising when the
  context finishes first.

## Examples

```python
from xconcur.concurrent_map import Map

m = Map()
m.store("a", 1)
value, found = m.load("a")                # (1, True)
actual, loaded = m.load_or_store("b", 2)  # (2, False)
m.compute_if_present("a", lambda k, v: v + 1)
print(dict(m.items()))                    # {'a': 2, 'b': 2}
```

```python
import time
from xconcur.task import DeadlineExceeded, do_with_timeout

try:
    do_with_timeout(0.01, lambda: time.sleep(1))
except DeadlineExceeded:
    print("too slow")
```

```python
from xconcur.retry import do_with_retry

attempts = 0

def flaky():
    global attempts
    attempts += 1
    if attempts < 3:
        raise ConnectionError("not yet")
    return "ok"

print(do_with_retry(flaky, times=5))  # "ok"
```

## What it does not do

This is a library only: it has no command-line tool. Concurrency is built on
threads; there are no asyncio or process-based variants, and a function whose
context finishes first is not stopped, only abandoned.
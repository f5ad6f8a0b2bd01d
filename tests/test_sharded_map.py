import threading
from dataclasses import dataclass

import pytest

from xconcur.sharded_map import SharedMap, fnv32, shard_block_size


@dataclass(frozen=True)
class Animal:
    name: str


def _count(m):
    count = 0

    def visit(key, value):
        nonlocal count
        count += 1
        return True

    m.range(visit)
    return count


def test_map_creation_default_block_size():
    m = SharedMap()
    assert m.block_size == 32
    assert len(m) == 0


def test_insert():
    m = SharedMap()
    m.store("elephant", Animal("elephant"))
    m.store("monkey", Animal("monkey"))
    assert _count(m) == 2


def test_insert_absent():
    m = SharedMap()
    assert m.load_or_store("elephant", Animal("elephant")) is True
    assert m.load_or_store("elephant", Animal("monkey")) is False
    assert m.load("elephant") == (Animal("elephant"), True)


def test_get():
    m = SharedMap()
    assert m.load("Money") == (None, False)
    m.store("elephant", Animal("elephant"))
    value, ok = m.load("elephant")
    assert ok is True
    assert value.name == "elephant"


def test_has():
    m = SharedMap()
    assert m.has("Money") is False
    m.store("elephant", Animal("elephant"))
    assert m.has("elephant") is True
    assert "elephant" in m


def test_remove():
    m = SharedMap()
    m.store("monkey", Animal("monkey"))
    m.delete("monkey")
    assert _count(m) == 0
    assert m.load("monkey") == (None, False)
    m.delete("noone")
    assert len(m) == 0


def test_clear():
    m = SharedMap()
    for i in range(100):
        m.store(str(i), Animal(str(i)))
    assert len(m) == 100
    m.clear()
    assert _count(m) == 0


def test_concurrent():
    m = SharedMap()
    iterations = 1000
    results = []
    results_lock = threading.Lock()

    def worker(start, stop):
        for i in range(start, stop):
            m.store(str(i), i)
            value, _ = m.load(str(i))
            with results_lock:
                results.append(value)

    threads = [
        threading.Thread(target=worker, args=(0, iterations // 2)),
        threading.Thread(target=worker, args=(iterations // 2, iterations)),
    ]
    for t in threads:
        t.start()
    for t in threads:
        t.join()

    assert _count(m) == iterations
    assert sorted(results) == list(range(iterations))


def test_mstore():
    m = SharedMap()
    m.mstore({"elephant": Animal("elephant"), "monkey": Animal("monkey")})
    assert _count(m) == 2
    assert m.load("monkey") == (Animal("monkey"), True)


def test_fnv32_known_vectors():
    assert fnv32("") == 0x811C9DC5
    assert fnv32("a") == 0x050C5D7E


def test_fnv32_fits_in_32_bits():
    assert 0 <= fnv32("ABC") <= 0xFFFFFFFF
    assert fnv32("ABC") == fnv32("ABC")


@pytest.mark.parametrize(
    "requested, expected",
    [(1, 1), (2, 2), (3, 4), (16, 16), (17, 32), (32, 32), (33, 64), (256, 256)],
)
def test_shard_block_size(requested, expected):
    assert shard_block_size(requested) == expected


@pytest.mark.parametrize("requested", [0, -1])
def test_shard_block_size_rejects_non_positive(requested):
    with pytest.raises(ValueError):
        shard_block_size(requested)


def test_invalid_block_size_for_map():
    with pytest.raises(ValueError):
        SharedMap(block_size=0)


def test_block_size_rounded_up():
    assert SharedMap(block_size=33).block_size == 64


def test_get_shard_is_stable():
    m = SharedMap(block_size=16)
    assert m.get_shard("key") is m.get_shard("key")
    m.store("key", 1)
    assert m.get_shard("key").load("key") == (1, True)


def test_single_shard_holds_everything():
    m = SharedMap(block_size=1)
    m.mstore({"a": 1, "b": 2, "c": 3})
    assert len(m.get_shard("a")) == 3


def test_range_stops_early():
    m = SharedMap()
    for i in range(10):
        m.store(str(i), i)
    seen = []

    def visit(key, value):
        seen.append(key)
        return len(seen) < 3

    m.range(visit)
    assert len(seen) == 3
    assert len(m) == 10
    stored_keys = {k for k, _ in m.items()}
    assert set(seen) <= stored_keys


def test_items_matches_contents():
    m = SharedMap()
    data = {str(i): i * 2 for i in range(20)}
    m.mstore(data)
    assert dict(m.items()) == data


def test_compute_if_absent():
    m = SharedMap()
    assert m.compute_if_absent("k", lambda key: key + "!") == ("k!", False)
    assert m.compute_if_absent("k", lambda key: "other") == ("k!", True)


def test_compute_if_present():
    m = SharedMap()
    assert m.compute_if_present("k", lambda key, value: 1) == (None, False)
    assert m.has("k") is False
    m.store("k", 5)
    assert m.compute_if_present("k", lambda key, value: value + 1) == (6, True)
    assert m.load("k") == (6, True)
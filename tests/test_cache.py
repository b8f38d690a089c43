from __future__ import annotations

import pytest

from transfer_reconciliation.cache import DEFAULT_TTL_SECONDS, TransferCategoryIdCache, ttl_from_env


class _Clock:
    def __init__(self) -> None:
        self.now = 0.0

    def __call__(self) -> float:
        return self.now


class _Loader:
    def __init__(self, *results) -> None:
        self.results = list(results)
        self.calls = 0

    def __call__(self):
        self.calls += 1
        value = self.results.pop(0)
        if isinstance(value, Exception):
            raise value
        return value


def test_get_loads_once_within_ttl():
    clock, loader = _Clock(), _Loader(["xfer"])
    cache = TransferCategoryIdCache(loader, ttl_seconds=10, clock=clock)

    assert cache.get() == ("xfer",)
    clock.now = 9.9
    assert cache.get() == ("xfer",)
    assert loader.calls == 1


def test_get_reloads_after_expiry():
    clock, loader = _Clock(), _Loader(["a"], ["a", "b"])
    cache = TransferCategoryIdCache(loader, ttl_seconds=10, clock=clock)

    cache.get()
    clock.now = 10.0
    assert cache.get() == ("a", "b")
    assert loader.calls == 2


def test_refresh_and_invalidate():
    clock, loader = _Clock(), _Loader(["a"], ["b"], ["c"])
    cache = TransferCategoryIdCache(loader, ttl_seconds=None, clock=clock)

    assert cache.get() == ("a",)
    assert cache.refresh() == ("b",)
    cache.invalidate()
    assert cache.get() == ("c",)
    assert loader.calls == 3


def test_no_ttl_never_expires():
    clock, loader = _Clock(), _Loader(["a"])
    cache = TransferCategoryIdCache(loader, ttl_seconds=0, clock=clock)

    cache.get()
    clock.now = 1e9
    assert cache.get() == ("a",)
    assert cache.ttl_seconds is None


def test_failed_refresh_keeps_previous_ids():
    clock, loader = _Clock(), _Loader([1, 2], RuntimeError("db down"))
    cache = TransferCategoryIdCache(loader, ttl_seconds=60, clock=clock)

    assert cache.get() == ("1", "2")
    with pytest.raises(RuntimeError, match="db down"):
        cache.refresh()
    assert cache.get() == ("1", "2")


def test_ttl_from_env(monkeypatch: pytest.MonkeyPatch):
    assert ttl_from_env() == DEFAULT_TTL_SECONDS
    monkeypatch.setenv("TRANSFER_RECON_CACHE_TTL_SECONDS", "42")
    assert ttl_from_env() == 42.0
    monkeypatch.setenv("TRANSFER_RECON_CACHE_TTL_SECONDS", "0")
    assert ttl_from_env() is None
    monkeypatch.setenv("TRANSFER_RECON_CACHE_TTL_SECONDS", "soon")
    assert ttl_from_env() == DEFAULT_TTL_SECONDS

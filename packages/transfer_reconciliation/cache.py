"""Caller-owned cache of transfer category ids.

``TransferCategoryIdCache`` wraps a loader (typically
``categories.load_transfer_category_ids`` bound to a session factory) and
memoizes its result with an explicit expiry policy:

- ``get()`` returns the cached ids, loading on first use or after expiry;
- ``refresh()`` forces a reload;
- ``invalidate()`` drops the cached value so the next ``get()`` reloads.

A ``ttl_seconds`` of ``None`` or ``<= 0`` disables expiry. Loader errors
propagate to the caller and leave any previously cached value untouched.

The cache is passed explicitly to the code that filters by id (see
``filters.exclude_transfers``); nothing is held in module-level state.
"""

from __future__ import annotations

import os
import threading
import time
from collections.abc import Callable, Iterable

from .logging_setup import get_logger

DEFAULT_TTL_SECONDS: float = 300.0
_TTL_ENV = "TRANSFER_RECON_CACHE_TTL_SECONDS"

_logger = get_logger(__name__)


def ttl_from_env(default: float = DEFAULT_TTL_SECONDS) -> float | None:
    """Resolve the cache TTL from ``TRANSFER_RECON_CACHE_TTL_SECONDS``.

    Unset or unparsable values fall back to ``default``; ``0`` or negative
    values mean "never expire" and are returned as ``None``.
    """

    raw = os.getenv(_TTL_ENV)
    if raw is None or not raw.strip():
        return default
    try:
        ttl = float(raw)
    except ValueError:
        _logger.warning("cache:ttl_env_invalid value=%r; using default=%s", raw, default)
        return default
    return ttl if ttl > 0 else None


class TransferCategoryIdCache:
    """Memoized transfer category ids with TTL-based expiry."""

    def __init__(
        self,
        loader: Callable[[], Iterable[str]],
        *,
        ttl_seconds: float | None = DEFAULT_TTL_SECONDS,
        clock: Callable[[], float] = time.monotonic,
    ) -> None:
        self._loader = loader
        self._ttl = ttl_seconds if ttl_seconds is not None and ttl_seconds > 0 else None
        self._clock = clock
        self._lock = threading.Lock()
        self._ids: tuple[str, ...] | None = None
        self._loaded_at: float | None = None

    @property
    def ttl_seconds(self) -> float | None:
        return self._ttl

    def _expired(self) -> bool:
        if self._ids is None or self._loaded_at is None:
            return True
        if self._ttl is None:
            return False
        return (self._clock() - self._loaded_at) >= self._ttl

    def _load_locked(self) -> tuple[str, ...]:
        ids = tuple(str(i) for i in self._loader())
        self._ids = ids
        self._loaded_at = self._clock()
        _logger.debug("cache:refreshed transfer_category_ids=%d", len(ids))
        return ids

    def get(self) -> tuple[str, ...]:
        """Return cached ids, loading them when missing or expired."""

        with self._lock:
            if self._expired():
                return self._load_locked()
            assert self._ids is not None  # guarded by _expired()
            return self._ids

    def refresh(self) -> tuple[str, ...]:
        """Reload ids unconditionally and return them."""

        with self._lock:
            return self._load_locked()

    def invalidate(self) -> None:
        with self._lock:
            self._ids = None
            self._loaded_at = None


__all__ = ["DEFAULT_TTL_SECONDS", "TransferCategoryIdCache", "ttl_from_env"]

"""Memoizing cache in front of an async dispatch callable.

Concurrent identical calls share one pending task, failed dispatches evict
themselves, and entries with a timeout expire lazily on the next dispatch.
"""

from __future__ import annotations

import asyncio
import inspect
import logging
from collections.abc import Callable, Mapping
from dataclasses import asdict, dataclass
from functools import partial
from typing import Any

from ..utils import monotonic_ms
from .call_signature import parse_call
from .keys import derive_key
from .options import CacheOptions, coerce_options, resolve_timeout

logger = logging.getLogger(__name__)

DispatchFn = Callable[..., Any]


@dataclass
class CacheEntry:
    """A cached dispatch result and its expiry deadline (ms, cache clock)."""

    value: asyncio.Future
    expires_at: float | None = None

    def is_expired(self, now: float) -> bool:
        return self.expires_at is not None and now > self.expires_at


@dataclass
class CacheStats:
    """Counters describing cache activity since creation or the last clear."""

    hits: int = 0
    misses: int = 0
    expired: int = 0
    failures: int = 0
    size: int = 0

    def to_dict(self) -> dict:
        return asdict(self)


class DispatchCache:
    """Cache results of ``dispatch(action, payload=None, options=None)``.

    Calls are accepted in the same shapes as the wrapped dispatcher: either
    positionally, ``cache.dispatch("fetchUser", {"id": 1}, {"timeout": 500})``,
    or as a single descriptor, ``cache.dispatch({"type": "fetchUser"})``.

    Example:
        >>> cache = DispatchCache(store.dispatch, {"timeout": 60_000})
        >>> user = await cache.dispatch("fetchUser", {"id": 1})
    """

    def __init__(
        self,
        dispatch: DispatchFn,
        options: CacheOptions | Mapping[str, Any] | None = None,
        clock: Callable[[], float] = monotonic_ms,
    ):
        self._dispatch = dispatch
        self.options = coerce_options(options)
        self._clock = clock
        self._store: dict[str, CacheEntry] = {}
        self._stats = CacheStats()

    def dispatch(self, *args: Any) -> asyncio.Future:
        """Return the cached result for this call, dispatching on a miss.

        Must be called while an event loop is running. The returned future is
        shared by every caller that asks for the same key before it settles.
        """
        loop = asyncio.get_running_loop()
        call = parse_call(args)
        key = derive_key(call)
        timeout = resolve_timeout(call, self.options)

        entry = self._store.get(key)
        if entry is not None and entry.is_expired(self._clock()):
            logger.debug("Cache entry expired: %s", key)
            del self._store[key]
            self._stats.expired += 1
            entry = None

        if entry is not None:
            logger.debug("Cache hit: %s", key)
            self._stats.hits += 1
            return entry.value

        logger.debug("Cache miss: %s", key)
        self._stats.misses += 1
        value = self._wrap(loop, self._dispatch(*args))
        entry = CacheEntry(
            value=value,
            expires_at=self._clock() + timeout if timeout else None,
        )
        self._store[key] = entry
        if value.done():
            self._on_settled(key, value)
        else:
            value.add_done_callback(partial(self._on_settled, key))
        return value

    def has(self, *args: Any) -> bool:
        """Return whether an entry exists for this call, expired or not."""
        return derive_key(parse_call(args)) in self._store

    def delete(self, *args: Any) -> bool:
        """Drop the entry for this call. An in-flight dispatch keeps running."""
        key = derive_key(parse_call(args))
        if self._store.pop(key, None) is None:
            return False
        logger.debug("Cache entry deleted: %s", key)
        return True

    def clear(self) -> None:
        logger.debug("Clearing %d cache entries", len(self._store))
        self._store.clear()
        self._stats = CacheStats()

    def stats(self) -> CacheStats:
        return CacheStats(
            hits=self._stats.hits,
            misses=self._stats.misses,
            expired=self._stats.expired,
            failures=self._stats.failures,
            size=len(self._store),
        )

    def __len__(self) -> int:
        return len(self._store)

    def __contains__(self, key: object) -> bool:
        return key in self._store

    @staticmethod
    def _wrap(loop: asyncio.AbstractEventLoop, result: Any) -> asyncio.Future:
        if inspect.isawaitable(result):
            return asyncio.ensure_future(result, loop=loop)
        # Synchronous dispatchers still yield an awaitable.
        future = loop.create_future()
        future.set_result(result)
        return future

    def _on_settled(self, key: str, future: asyncio.Future) -> None:
        # Runs before any awaiter resumes, so joined callers never see a
        # failed entry still in the store.
        if not future.cancelled() and future.exception() is None:
            return
        entry = self._store.get(key)
        if entry is None or entry.value is not future:
            logger.debug(
                "Superseded dispatch for %s failed: %r",
                key,
                "cancelled" if future.cancelled() else future.exception(),
            )
            return
        del self._store[key]
        self._stats.failures += 1
        if future.cancelled():
            logger.warning("Dispatch for %s was cancelled; evicted cache entry", key)
        else:
            logger.warning(
                "Dispatch for %s failed; evicted cache entry: %s", key, future.exception()
            )

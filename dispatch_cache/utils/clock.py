"""Millisecond clock used for cache expiry."""

from __future__ import annotations

import time


def monotonic_ms() -> float:
    """Return a monotonic timestamp in milliseconds.

    Wall-clock adjustments never shorten or extend a cache entry's lifetime.
    """
    return time.monotonic() * 1000.0

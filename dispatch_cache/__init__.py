"""Memoizing cache for asynchronous action dispatch."""

from .core import (
    CacheEntry,
    CacheOptions,
    CacheStats,
    DispatchCache,
    InvalidTargetError,
    cache_action,
    install_cache,
    setup_cache,
)

__version__ = "0.1.0"

__all__ = [
    "DispatchCache",
    "CacheEntry",
    "CacheOptions",
    "CacheStats",
    "InvalidTargetError",
    "setup_cache",
    "install_cache",
    "cache_action",
]

"""Attach dispatch caches to host objects."""

from __future__ import annotations

import functools
import logging
from collections.abc import Callable, Mapping
from typing import Any

from .cache import DispatchCache
from .options import CacheOptions, coerce_options

logger = logging.getLogger(__name__)

CACHE_ATTRIBUTE = "cache"


class InvalidTargetError(TypeError):
    """Raised when a cache is installed on an object without a callable ``dispatch``."""


def is_dispatch_target(value: Any) -> bool:
    """Return whether value exposes a callable ``dispatch``."""
    return value is not None and callable(getattr(value, "dispatch", None))


def setup_cache(
    target: Any,
    options: CacheOptions | Mapping[str, Any] | None = None,
) -> DispatchCache:
    """Attach a new, independent cache to ``target.cache`` and return it.

    Args:
        target: Host object exposing ``dispatch``
        options: Default options for the cache (``timeout`` in ms)

    Raises:
        InvalidTargetError: If target has no callable ``dispatch``
    """
    if not is_dispatch_target(target):
        raise InvalidTargetError(
            f"Cannot install a dispatch cache on {type(target).__name__}: no callable 'dispatch'."
        )
    cache = DispatchCache(target.dispatch, options)
    setattr(target, CACHE_ATTRIBUTE, cache)
    logger.info(
        "Installed dispatch cache on %s (timeout=%s)",
        type(target).__name__,
        cache.options.timeout,
    )
    return cache


def install_cache(
    target_or_options: Any = None,
) -> DispatchCache | Callable[[Any], DispatchCache]:
    """Install a cache now, or return an installer for later.

    Given a dispatch target, installs a cache with default options on it.
    Given options (a mapping, ``CacheOptions`` or nothing), returns a
    function that installs a cache with those options on the target it is
    later called with, for plugin-style registration::

        plugins = [install_cache({"timeout": 10_000})]
        for plugin in plugins:
            plugin(store)
    """
    if is_dispatch_target(target_or_options):
        return setup_cache(target_or_options)

    options = coerce_options(target_or_options)

    def installer(target: Any) -> DispatchCache:
        return setup_cache(target, options)

    return installer


def cache_action(
    action: Callable[[Any, Any], Any],
    options: CacheOptions | Mapping[str, Any] | None = None,
) -> Callable[[Any, Any], Any]:
    """Wrap an action so its context gets a cache before the action runs.

    The cache is attached the first time the action runs against a context
    that has none; later invocations reuse it. The action's return value is
    passed through untouched.
    """

    @functools.wraps(action)
    def wrapper(context: Any, payload: Any = None) -> Any:
        if not isinstance(getattr(context, CACHE_ATTRIBUTE, None), DispatchCache):
            setup_cache(context, options)
        return action(context, payload)

    return wrapper

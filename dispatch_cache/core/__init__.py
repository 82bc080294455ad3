"""Core cache logic for dispatch-cache."""

from .cache import CacheEntry, CacheStats, DispatchCache
from .call_signature import CallSignature, DescriptorCall, PositionalCall, parse_call
from .install import InvalidTargetError, cache_action, install_cache, setup_cache
from .keys import derive_key, is_empty_payload, to_key_string
from .options import CacheOptions, defines_timeout, resolve_timeout

__all__ = [
    "DispatchCache",
    "CacheEntry",
    "CacheStats",
    "CacheOptions",
    "CallSignature",
    "DescriptorCall",
    "PositionalCall",
    "parse_call",
    "derive_key",
    "to_key_string",
    "is_empty_payload",
    "defines_timeout",
    "resolve_timeout",
    "InvalidTargetError",
    "setup_cache",
    "install_cache",
    "cache_action",
]

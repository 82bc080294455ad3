"""Cache options and per-call timeout resolution."""

from __future__ import annotations

import os
from collections.abc import Mapping
from typing import Any

from pydantic import BaseModel, ConfigDict, Field

from .call_signature import CallSignature, DescriptorCall

TIMEOUT_ENV_VAR = "DISPATCH_CACHE_TIMEOUT"


class CacheOptions(BaseModel):
    """Installation-level defaults for a dispatch cache.

    ``timeout`` is in milliseconds; ``0`` or unset means entries never expire.
    Whether ``timeout`` was given at all is tracked separately from its value,
    see ``defines_timeout``.
    """

    model_config = ConfigDict(extra="ignore", frozen=True)

    timeout: int | None = Field(default=None, ge=0)

    @classmethod
    def from_dict(cls, data: Mapping[str, Any] | None) -> CacheOptions:
        return cls.model_validate(dict(data or {}))

    @classmethod
    def from_env(cls) -> CacheOptions:
        """Build options from ``DISPATCH_CACHE_TIMEOUT``, leaving timeout unset when empty."""
        raw = os.environ.get(TIMEOUT_ENV_VAR, "").strip()
        if not raw:
            return cls()
        return cls(timeout=raw)

    def to_dict(self) -> dict:
        return self.model_dump(include=self.model_fields_set)


def coerce_options(options: CacheOptions | Mapping[str, Any] | None) -> CacheOptions:
    """Accept options as a model, a plain mapping, or nothing."""
    if isinstance(options, CacheOptions):
        return options
    return CacheOptions.from_dict(options)


def defines_timeout(value: Any) -> bool:
    """Return whether value carries a ``timeout`` of its own, whatever its value."""
    if value is None:
        return False
    if isinstance(value, BaseModel):
        return "timeout" in value.model_fields_set
    if isinstance(value, Mapping):
        return "timeout" in value
    return hasattr(value, "timeout")


def _read_timeout(value: Any) -> int:
    timeout = value["timeout"] if isinstance(value, Mapping) else value.timeout
    return timeout or 0


def resolve_timeout(call: CallSignature, options: CacheOptions) -> int:
    """Resolve the effective timeout (ms) for a call.

    The first of these that defines ``timeout`` wins, even when the value is
    ``0`` or ``None``:

    1. the descriptor of a descriptor call
    2. the third argument of a positional call
    3. the installation-level ``options``

    Falls back to ``0`` (never expires).
    """
    if isinstance(call, DescriptorCall):
        if defines_timeout(call.descriptor):
            return _read_timeout(call.descriptor)
    elif call.has_options and defines_timeout(call.options):
        return _read_timeout(call.options)
    if defines_timeout(options):
        return _read_timeout(options)
    return 0

"""Cache key derivation for dispatch calls."""

from __future__ import annotations

import json
from typing import Any

from .call_signature import CallSignature, PositionalCall


def to_key_string(value: Any) -> str:
    """Render a value for use inside a cache key.

    Strings pass through unchanged. Everything else is encoded as compact
    JSON with insertion-ordered object keys, so ``{"a": 1, "b": 2}`` and
    ``{"b": 2, "a": 1}`` render differently.
    """
    if isinstance(value, str):
        return value
    try:
        return json.dumps(value, separators=(",", ":"), ensure_ascii=False, default=str)
    except (TypeError, ValueError):
        # Circular references and non-string dict keys JSON cannot express.
        return repr(value)


def is_empty_payload(value: Any) -> bool:
    """Return whether a payload counts as absent for keying.

    Only ``None``, ``False``, ``""`` and numeric zero or NaN are empty. Empty
    containers still key separately, and arbitrary objects are never asked
    for their truth value.
    """
    if value is None or value is False:
        return True
    if isinstance(value, str):
        return value == ""
    if isinstance(value, (int, float)):
        return value == 0 or value != value
    return False


def derive_key(call: CallSignature) -> str:
    """Derive the cache key for a parsed call.

    Returns ``action`` alone, or ``action:payload`` when a positional call
    carries a non-empty payload (see ``is_empty_payload``).

    Example:
        >>> derive_key(PositionalCall("fetchUser", {"id": 42}))
        'fetchUser:{"id":42}'
    """
    key = to_key_string(call.action)
    if isinstance(call, PositionalCall) and not is_empty_payload(call.payload):
        return f"{key}:{to_key_string(call.payload)}"
    return key

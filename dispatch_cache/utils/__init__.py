"""Shared utilities for dispatch-cache."""

from .clock import monotonic_ms

__all__ = [
    "monotonic_ms",
]
